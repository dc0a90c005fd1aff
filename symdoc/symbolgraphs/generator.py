"""Symbol graph generation through the Swift toolchain, serialized process-wide."""

from __future__ import annotations

import shutil
import subprocess
import threading
from pathlib import Path
from typing import Callable, ContextManager, Iterable, List, Protocol

from ..logging import get_logger
from ..models import SymbolGraphOptions, Target
from ..toolchain import Toolchain

logger = get_logger("symbolgraphs.generator")

# Generating symbol graphs is the only step that can't run in parallel; every
# other step of the pipeline may run concurrently across targets.
SYMBOL_GRAPH_GENERATION_LOCK = threading.Lock()

BuildRunner = Callable[..., str]


class SymbolGraphGenerationError(RuntimeError):
    """Raised when the toolchain fails to emit symbol graphs for a target."""

    def __init__(self, target: str, message: str) -> None:
        super().__init__(f"symbol graph generation failed for target '{target}': {message}")
        self.target = target


class SymbolGraphGenerator(Protocol):
    """Produces a directory of symbol graph files for one target."""

    def generate(self, target: Target, options: SymbolGraphOptions) -> Path:
        ...


class SwiftBuildGenerator:
    """Emits symbol graphs by building the target with `swift build`."""

    def __init__(
        self,
        package_root: Path,
        scratch_dir: Path,
        *,
        toolchain: Toolchain | None = None,
        runner: BuildRunner | None = None,
    ) -> None:
        self.package_root = Path(package_root)
        self.output_root = Path(scratch_dir) / "symbol-graphs" / "targets"
        self.toolchain = toolchain or Toolchain()
        self._runner = runner or self._default_runner

    def output_directory(self, target: Target) -> Path:
        return self.output_root / f"{target.name}-{target.id}"

    def generate(self, target: Target, options: SymbolGraphOptions) -> Path:
        output_dir = self.output_directory(target)
        shutil.rmtree(output_dir, ignore_errors=True)
        output_dir.mkdir(parents=True, exist_ok=True)

        args = self.build_arguments(target, options, output_dir)
        logger.debug("Running %s", " ".join(args))
        try:
            self._runner(args, cwd=self.package_root)
        except FileNotFoundError as exc:
            raise SymbolGraphGenerationError(
                target.name, f"unable to locate '{self.toolchain.swift}'"
            ) from exc
        except subprocess.CalledProcessError as exc:
            stderr = (exc.stderr or "").strip()
            raise SymbolGraphGenerationError(
                target.name, f"exit code {exc.returncode}: {stderr}"
            ) from exc
        return output_dir

    def build_arguments(
        self, target: Target, options: SymbolGraphOptions, output_dir: Path
    ) -> List[str]:
        frontend_flags = [
            "-emit-symbol-graph",
            "-emit-symbol-graph-dir",
            str(output_dir),
            "-symbol-graph-minimum-access-level",
            options.minimum_access_level.value,
        ]
        if not options.include_synthesized:
            frontend_flags.append("-skip-synthesized-members")
        if options.include_spi:
            frontend_flags.append("-include-spi-symbols")
        if options.emit_extension_blocks:
            frontend_flags.append("-emit-extension-block-symbols")
        elif self.toolchain.supports_extension_blocks:
            frontend_flags.append("-omit-extension-block-symbols")

        args = [self.toolchain.swift, "build", "--target", target.name]
        for flag in frontend_flags:
            args.extend(["-Xswiftc", flag])
        return args

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


class GenerationCoordinator:
    """Runs the generator for one target at a time across all worker threads."""

    def __init__(
        self,
        generator: SymbolGraphGenerator,
        *,
        lock: ContextManager[object] | None = None,
    ) -> None:
        self.generator = generator
        self._lock = lock if lock is not None else SYMBOL_GRAPH_GENERATION_LOCK

    def generate(self, target: Target, options: SymbolGraphOptions) -> Path:
        logger.debug("Waiting for symbol graph generation lock for %s", target.name)
        with self._lock:
            logger.info("Generating symbol graphs for %s", target.name)
            directory = Path(self.generator.generate(target, options))
        logger.debug("target symbol graph directory path: '%s'", directory)
        return directory


__all__ = [
    "GenerationCoordinator",
    "SYMBOL_GRAPH_GENERATION_LOCK",
    "SwiftBuildGenerator",
    "SymbolGraphGenerationError",
    "SymbolGraphGenerator",
]
