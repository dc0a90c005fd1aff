"""Snippet symbol graph extraction via the `snippet-extract` tool."""

from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..logging import get_logger
from ..models import Package, Target

logger = get_logger("symbolgraphs.snippets")

SNIPPETS_DIRECTORY = "Snippets"

ExtractRunner = Callable[..., str]


class SnippetExtractionError(RuntimeError):
    """Raised when the snippet extractor exits unsuccessfully."""


class SnippetExtractor:
    """Generates one snippet symbol graph per package and caches the outcome.

    Every target of a package shares the package's snippets, so concurrent
    workers for targets of the same package wait for a single extraction.
    """

    def __init__(
        self,
        scratch_dir: Path,
        *,
        executable: str = "snippet-extract",
        runner: ExtractRunner | None = None,
    ) -> None:
        self.output_root = Path(scratch_dir) / "symbol-graphs" / "snippet-symbol-graphs"
        self.executable = executable
        self._runner = runner or self._default_runner
        self._results: Dict[Path, Optional[Path]] = {}
        self._package_locks: Dict[Path, threading.Lock] = {}
        self._guard = threading.Lock()

    def generate_snippets(self, target: Target, package: Package) -> Optional[Path]:
        """Return the snippet symbol graph file for ``target``'s package, if it has snippets."""
        key = Path(package.root)
        with self._guard:
            package_lock = self._package_locks.setdefault(key, threading.Lock())

        with package_lock:
            if key in self._results:
                return self._results[key]
            result = self._extract(package)
            self._results[key] = result
            return result

    def snippet_files(self, package: Package) -> List[Path]:
        snippets_dir = Path(package.root) / SNIPPETS_DIRECTORY
        if not snippets_dir.is_dir():
            return []
        return sorted(path for path in snippets_dir.rglob("*.swift") if path.is_file())

    def output_file(self, package: Package) -> Path:
        return self.output_root / f"{package.name}-snippets.symbols.json"

    def _extract(self, package: Package) -> Optional[Path]:
        sources = self.snippet_files(package)
        if not sources:
            logger.debug("No snippets found for package %s", package.name)
            return None

        output_file = self.output_file(package)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.unlink(missing_ok=True)

        args = [
            self.executable,
            "--output",
            str(output_file),
            "--module-name",
            package.name,
            *(str(path) for path in sources),
        ]
        logger.debug("Running %s", " ".join(args))
        try:
            self._runner(args, cwd=Path(package.root))
        except FileNotFoundError as exc:
            raise SnippetExtractionError(
                f"Unable to locate '{self.executable}'. Install it or disable snippet extraction."
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise SnippetExtractionError(
                f"snippet extraction failed with exit code {exc.returncode}: {stderr}"
            ) from exc

        if not output_file.exists():
            logger.debug("Snippet extractor produced no symbol graph for %s", package.name)
            return None
        return output_file

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["SNIPPETS_DIRECTORY", "SnippetExtractionError", "SnippetExtractor"]
