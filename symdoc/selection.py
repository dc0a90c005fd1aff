"""Resolve requested products and targets against a package."""

from __future__ import annotations

from typing import List, Sequence

from .logging import get_logger
from .models import Package, SelectionRequest, Target, TargetKind

logger = get_logger("selection")


class SelectionError(RuntimeError):
    """Raised when a requested product or target cannot be documented."""

    def __str__(self) -> str:
        return self.describe()

    def describe(self) -> str:  # pragma: no cover - overridden by every subclass
        raise NotImplementedError


class UnknownProduct(SelectionError):
    def __init__(self, name: str, compatible_products: Sequence[str]) -> None:
        super().__init__(name)
        self.name = name
        self.compatible_products = list(compatible_products)

    def describe(self) -> str:
        return (
            f"no product named '{self.name}'\n\n"
            f"compatible products: {_format_names(self.compatible_products)}"
        )


class UnknownTarget(SelectionError):
    def __init__(self, name: str, compatible_targets: Sequence[str]) -> None:
        super().__init__(name)
        self.name = name
        self.compatible_targets = list(compatible_targets)

    def describe(self) -> str:
        return (
            f"no target named '{self.name}'\n\n"
            f"compatible targets: {_format_names(self.compatible_targets)}"
        )


class ProductHasNoDocumentableTargets(SelectionError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def describe(self) -> str:
        return f"product '{self.name}' does not contain any Swift source modules"


class TargetIsNotSourceModule(SelectionError):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def describe(self) -> str:
        return f"target '{self.name}' is not a Swift source module"


class TestTargetNotSupported(SelectionError):
    __test__ = False  # keep pytest from collecting this as a test class

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def describe(self) -> str:
        return (
            f"target '{self.name}' is a test target; "
            "only library and executable targets are supported by Swift-DocC"
        )


class PackageHasNoDocumentableTargets(SelectionError):
    def describe(self) -> str:
        return "the current package does not contain any compatible Swift source modules"


def resolve_selection(request: SelectionRequest, package: Package) -> List[Target]:
    """Expand requested products and targets into documentable source-module targets.

    Product-derived targets come first, in product request order, followed by
    directly requested targets in request order. Targets reachable more than
    once are kept once per request.
    """
    product_targets: List[Target] = []
    for product_name in request.products:
        product = package.product_named(product_name)
        if product is None:
            raise UnknownProduct(
                product_name,
                compatible_products=[item.name for item in package.products],
            )

        supported = [target for target in product.targets if _is_documentable(target)]
        if not supported:
            raise ProductHasNoDocumentableTargets(product_name)
        product_targets.extend(supported)

    direct_targets: List[Target] = []
    for target_name in request.targets:
        target = package.target_named(target_name)
        if target is None:
            raise UnknownTarget(
                target_name,
                compatible_targets=[item.name for item in package.documentable_targets],
            )
        if target.kind is not TargetKind.SOURCE_MODULE:
            raise TargetIsNotSourceModule(target_name)
        if target.is_test:
            raise TestTargetNotSupported(target_name)
        direct_targets.append(target)

    return product_targets + direct_targets


def resolve_or_default(request: SelectionRequest, package: Package) -> List[Target]:
    """Resolve ``request``, falling back to every documentable target when it is empty."""
    if not request.is_empty:
        return resolve_selection(request, package)

    targets = package.documentable_targets
    if not targets:
        raise PackageHasNoDocumentableTargets()
    logger.debug(
        "No explicit selection; documenting all %d source module targets", len(targets)
    )
    return targets


def _is_documentable(target: Target) -> bool:
    if target.kind is TargetKind.SOURCE_MODULE:
        return not target.is_test
    if target.kind in (TargetKind.SYSTEM_LIBRARY, TargetKind.BINARY, TargetKind.OTHER):
        return False
    raise ValueError(f"Unhandled target kind: {target.kind!r}")  # pragma: no cover


def _format_names(names: Sequence[str]) -> str:
    if not names:
        return "(none)"
    return ", ".join(f"'{name}'" for name in names)


__all__ = [
    "PackageHasNoDocumentableTargets",
    "ProductHasNoDocumentableTargets",
    "SelectionError",
    "TargetIsNotSourceModule",
    "TestTargetNotSupported",
    "UnknownProduct",
    "UnknownTarget",
    "resolve_or_default",
    "resolve_selection",
]
