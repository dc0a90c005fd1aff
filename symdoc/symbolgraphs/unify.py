"""Merge a target's symbol graphs with its package's snippet symbol graph."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional, Protocol

from ..logging import get_logger
from ..models import Package, SymbolGraphResult, Target

logger = get_logger("symbolgraphs.unify")

UNIFIED_DIRECTORY = "unified-symbol-graphs"
TARGET_SUBDIRECTORY = "target-symbol-graphs"


class SnippetSource(Protocol):
    def generate_snippets(self, target: Target, package: Package) -> Optional[Path]:
        ...


class SnippetUnifier:
    """Builds the single symbol graph directory docc reads for a target.

    docc accepts one directory of symbol graphs, so when snippets exist the
    target's graphs and the snippet graph are copied side by side into a
    per-target unified directory. The generator's directory is left intact.
    """

    def __init__(self, scratch_dir: Path, extractor: SnippetSource | None = None) -> None:
        self.unified_root = Path(scratch_dir) / "symbol-graphs" / UNIFIED_DIRECTORY
        self.extractor = extractor

    def unified_directory(self, target: Target) -> Path:
        return self.unified_root / f"{target.name}-{target.id}"

    def unify(self, target: Target, package: Package, target_directory: Path) -> SymbolGraphResult:
        target_directory = Path(target_directory)
        if self.extractor is None:
            return SymbolGraphResult.single(target_directory)

        logger.debug("Snippet extractor provided, attempting to generate snippet symbol graph")
        snippet_file = self.extractor.generate_snippets(target, package)
        if snippet_file is None:
            logger.debug("No snippet symbol graphs generated for %s", target.name)
            return SymbolGraphResult.single(target_directory)
        snippet_file = Path(snippet_file)
        logger.debug("snippet symbol graph file: '%s'", snippet_file)

        unified = self.unified_directory(target)
        logger.debug("unified symbol graphs directory path: '%s'", unified)

        try:
            shutil.rmtree(unified)
        except FileNotFoundError:
            pass
        unified.mkdir(parents=True)

        copied_targets = unified / TARGET_SUBDIRECTORY
        shutil.copytree(target_directory, copied_targets)

        copied_snippet = unified / snippet_file.name
        shutil.copy2(snippet_file, copied_snippet)

        return SymbolGraphResult(
            unified_directory=unified,
            target_directory=copied_targets,
            snippet_file=copied_snippet,
        )


__all__ = ["SnippetUnifier", "TARGET_SUBDIRECTORY", "UNIFIED_DIRECTORY"]
