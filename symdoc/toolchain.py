"""Swift toolchain detection and feature gating."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from .logging import get_logger

_VERSION_PATTERN = re.compile(r"Swift version (\d+)\.(\d+)(?:\.(\d+))?")
_EXTENSION_BLOCKS_MINIMUM = (5, 8)

logger = get_logger("toolchain")

CommandRunner = Callable[[Iterable[str]], str]


@dataclass(frozen=True)
class Toolchain:
    """The Swift toolchain symdoc drives, identified by its version."""

    swift: str = "swift"
    version: Optional[Tuple[int, int, int]] = None

    @classmethod
    def detect(
        cls,
        swift: str = "swift",
        *,
        configured_version: str | None = None,
        runner: CommandRunner | None = None,
    ) -> "Toolchain":
        """Return the toolchain, asking ``swift --version`` unless a version is configured."""
        if configured_version:
            parsed = parse_version(configured_version)
            if parsed is None:
                logger.warning("Ignoring unparseable toolchain version '%s'", configured_version)
            else:
                return cls(swift=swift, version=parsed)

        run = runner or _default_runner
        try:
            output = run([swift, "--version"])
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.debug("Unable to query '%s --version': %s", swift, exc)
            return cls(swift=swift, version=None)

        version = parse_version(output)
        if version is None:
            logger.debug("No Swift version found in output: %r", output.strip())
        return cls(swift=swift, version=version)

    @property
    def supports_extension_blocks(self) -> bool:
        # Unknown toolchains are assumed current.
        if self.version is None:
            return True
        return self.version[:2] >= _EXTENSION_BLOCKS_MINIMUM

    @property
    def version_string(self) -> str:
        if self.version is None:
            return "unknown"
        return ".".join(str(part) for part in self.version)


def parse_version(text: str) -> Optional[Tuple[int, int, int]]:
    """Extract ``(major, minor, patch)`` from ``swift --version`` output or a bare version."""
    match = _VERSION_PATTERN.search(text)
    if match is None:
        match = re.fullmatch(r"\s*(\d+)\.(\d+)(?:\.(\d+))?\s*", text)
    if match is None:
        return None
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)


def _default_runner(args: Iterable[str]) -> str:
    completed = subprocess.run(
        list(args),
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout


__all__ = ["Toolchain", "parse_version"]
