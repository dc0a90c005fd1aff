"""Build a Package model from `swift package describe --type json`."""

from __future__ import annotations

import hashlib
import json
import subprocess
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..logging import get_logger
from ..models import ModuleKind, Package, Product, Target, TargetKind

logger = get_logger("package")

_SOURCE_MODULE_TYPES = {"SwiftTarget", "ClangTarget"}
_EXECUTABLE_TYPES = {"executable", "snippet"}

DescribeRunner = Callable[..., str]


class PackageDescriptionError(RuntimeError):
    """Raised when the package description cannot be read or is inconsistent."""


def load_package(
    root: Path,
    *,
    description: Path | None = None,
    swift: str = "swift",
    runner: DescribeRunner | None = None,
) -> Package:
    """Return the package rooted at ``root``.

    The description is read from ``description`` when given, otherwise it is
    obtained by running ``swift package describe --type json`` in ``root``.
    """
    root = Path(root).expanduser().resolve()
    if description is not None:
        logger.debug("Reading package description from %s", description)
        try:
            raw = Path(description).read_text(encoding="utf-8")
        except OSError as exc:
            raise PackageDescriptionError(
                f"Unable to read package description {description}: {exc}"
            ) from exc
    else:
        run = runner or _default_runner
        try:
            raw = run([swift, "package", "describe", "--type", "json"], cwd=root)
        except FileNotFoundError as exc:
            raise PackageDescriptionError(
                f"Unable to locate '{swift}'. Install a Swift toolchain or pass --package-description."
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise PackageDescriptionError(
                f"'swift package describe' failed with exit code {exc.returncode}: {stderr}"
            ) from exc

    try:
        payload = json.loads(_strip_preamble(raw))
    except json.JSONDecodeError as exc:
        raise PackageDescriptionError(f"Package description is not valid JSON: {exc}") from exc
    return parse_package(payload, root=root)


def parse_package(payload: Mapping[str, Any], *, root: Path) -> Package:
    """Convert a decoded `describe` document into a Package."""
    if not isinstance(payload, Mapping):
        raise PackageDescriptionError("Package description must be a JSON object")

    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise PackageDescriptionError("Package description is missing a name")

    targets: List[Target] = []
    by_name: Dict[str, Target] = {}
    for entry in _as_list(payload.get("targets")):
        target = _parse_target(entry, root=root)
        if target is None:
            continue
        targets.append(target)
        by_name[target.name] = target

    products: List[Product] = []
    for entry in _as_list(payload.get("products")):
        if not isinstance(entry, Mapping):
            continue
        product_name = entry.get("name")
        if not isinstance(product_name, str):
            continue
        members: List[Target] = []
        for target_name in _as_list(entry.get("targets")):
            target = by_name.get(str(target_name))
            if target is None:
                raise PackageDescriptionError(
                    f"product '{product_name}' references unknown target '{target_name}'"
                )
            members.append(target)
        products.append(Product(name=product_name, targets=tuple(members)))

    logger.debug(
        "Loaded package %s with %d targets and %d products", name, len(targets), len(products)
    )
    return Package(name=name, root=root, targets=targets, products=products)


def target_id(root: Path, name: str) -> str:
    """Stable, filesystem-safe identifier for a target within a package checkout."""
    digest = hashlib.sha256(f"{Path(root).as_posix()}::{name}".encode("utf-8"))
    return digest.hexdigest()[:12]


def _parse_target(entry: object, *, root: Path) -> Optional[Target]:
    if not isinstance(entry, Mapping):
        return None
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        return None

    kind = _target_kind(entry.get("module_type"))
    module_kind = None
    if kind is TargetKind.SOURCE_MODULE:
        module_kind = _module_kind(entry.get("type"))

    path_value = entry.get("path")
    path = root / path_value if isinstance(path_value, str) else None
    return Target(
        name=name,
        kind=kind,
        id=target_id(root, name),
        module_kind=module_kind,
        path=path,
    )


def _target_kind(module_type: object) -> TargetKind:
    if module_type in _SOURCE_MODULE_TYPES:
        return TargetKind.SOURCE_MODULE
    if module_type == "SystemLibraryTarget":
        return TargetKind.SYSTEM_LIBRARY
    if module_type == "BinaryTarget":
        return TargetKind.BINARY
    return TargetKind.OTHER


def _module_kind(target_type: object) -> ModuleKind:
    if target_type == "test":
        return ModuleKind.TEST
    if target_type in _EXECUTABLE_TYPES:
        return ModuleKind.EXECUTABLE
    return ModuleKind.LIBRARY


def _as_list(value: object) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _strip_preamble(raw: str) -> str:
    # SwiftPM may print build progress before the JSON document.
    start = raw.find("{")
    return raw[start:] if start > 0 else raw


def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
    completed = subprocess.run(
        list(args),
        cwd=str(cwd),
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout


__all__ = ["PackageDescriptionError", "load_package", "parse_package", "target_id"]
