"""Core data models shared across symdoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple


class TargetKind(Enum):
    """How a target's artifact is produced."""

    SOURCE_MODULE = "source-module"
    SYSTEM_LIBRARY = "system-library"
    BINARY = "binary"
    OTHER = "other"


class ModuleKind(Enum):
    """Role of a source-module target within its package."""

    LIBRARY = "library"
    EXECUTABLE = "executable"
    TEST = "test"


class AccessLevel(Enum):
    """Swift access levels accepted as a symbol graph minimum."""

    PRIVATE = "private"
    FILEPRIVATE = "fileprivate"
    INTERNAL = "internal"
    PACKAGE = "package"
    PUBLIC = "public"
    OPEN = "open"

    @classmethod
    def parse(cls, raw: str | None) -> Optional["AccessLevel"]:
        """Return the access level for ``raw`` or None when it is not recognised."""
        if raw is None:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Target:
    """A named compilable unit of a package."""

    name: str
    kind: TargetKind
    id: str
    module_kind: Optional[ModuleKind] = None
    path: Optional[Path] = None

    @property
    def is_source_module(self) -> bool:
        return self.kind is TargetKind.SOURCE_MODULE

    @property
    def is_test(self) -> bool:
        return self.module_kind is ModuleKind.TEST

    @property
    def is_documentable(self) -> bool:
        """Only library and executable source modules can be documented."""
        return self.is_source_module and not self.is_test


@dataclass(frozen=True)
class Product:
    """A publishable build artifact composed of an ordered list of targets."""

    name: str
    targets: Tuple[Target, ...] = ()


@dataclass
class Package:
    """Read-only view of a package's targets and products."""

    name: str
    root: Path
    targets: List[Target] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)

    def target_named(self, name: str) -> Optional[Target]:
        for target in self.targets:
            if target.name == name:
                return target
        return None

    def product_named(self, name: str) -> Optional[Product]:
        for product in self.products:
            if product.name == name:
                return product
        return None

    @property
    def documentable_targets(self) -> List[Target]:
        return [target for target in self.targets if target.is_documentable]


@dataclass(frozen=True)
class SelectionRequest:
    """Products and targets requested on the command line, in request order."""

    products: Tuple[str, ...] = ()
    targets: Tuple[str, ...] = ()

    @classmethod
    def from_names(
        cls,
        products: Sequence[str] | None = None,
        targets: Sequence[str] | None = None,
    ) -> "SelectionRequest":
        return cls(products=tuple(products or ()), targets=tuple(targets or ()))

    @property
    def is_empty(self) -> bool:
        return not self.products and not self.targets


@dataclass(frozen=True)
class SymbolGraphOptions:
    """Configuration passed to the symbol graph generator for a single target."""

    minimum_access_level: AccessLevel = AccessLevel.PUBLIC
    include_synthesized: bool = True
    include_spi: bool = False
    emit_extension_blocks: bool = False

    def describe(self) -> str:
        return (
            f"minimum_access_level={self.minimum_access_level.value}, "
            f"include_synthesized={self.include_synthesized}, "
            f"include_spi={self.include_spi}, "
            f"emit_extension_blocks={self.emit_extension_blocks}"
        )


@dataclass(frozen=True)
class SymbolGraphResult:
    """Symbol graph locations for one target, ready to hand to docc.

    Without snippets all three views point at the generator's output directory
    and ``snippet_file`` is None.
    """

    unified_directory: Path
    target_directory: Path
    snippet_file: Optional[Path] = None

    @classmethod
    def single(cls, target_directory: Path) -> "SymbolGraphResult":
        return cls(
            unified_directory=target_directory,
            target_directory=target_directory,
            snippet_file=None,
        )

    @property
    def is_unified(self) -> bool:
        return self.snippet_file is not None
