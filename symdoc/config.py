"""Configuration loading for symdoc (.symdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".symdoc.yml"
DEFAULT_SCRATCH_DIR = Path(".build") / "symdoc"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SymbolGraphConfig:
    """Package-level symbol graph defaults from .symdoc.yml."""

    minimum_access_level: Optional[str] = None
    include_synthesized: Optional[bool] = None
    include_extended_types: Optional[bool] = None


@dataclass
class SnippetConfig:
    """Snippet extraction settings."""

    enabled: bool = True
    executable: str = "snippet-extract"


@dataclass
class ToolchainConfig:
    """Swift toolchain settings."""

    swift: str = "swift"
    swift_version: Optional[str] = None


@dataclass
class SymDocConfig:
    """Represents the high-level settings defined in .symdoc.yml."""

    root: Path
    scratch_dir: Path = field(default=DEFAULT_SCRATCH_DIR)
    jobs: Optional[int] = None
    symbol_graph: SymbolGraphConfig = field(default_factory=SymbolGraphConfig)
    snippets: SnippetConfig = field(default_factory=SnippetConfig)
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)

    @property
    def scratch_path(self) -> Path:
        """Absolute scratch directory for generated artifacts."""
        if self.scratch_dir.is_absolute():
            return self.scratch_dir
        return self.root / self.scratch_dir


def load_config(config_path: Path) -> SymDocConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SymDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = SymDocConfig(root=root)

    scratch_dir = _as_str(data.get("scratch_dir"))
    if scratch_dir:
        config.scratch_dir = Path(scratch_dir).expanduser()

    jobs = _as_int(data.get("jobs"))
    if jobs is not None:
        if jobs < 1:
            raise ConfigError("jobs must be a positive integer")
        config.jobs = jobs

    graph_data = _as_dict(data.get("symbol_graph"))
    if graph_data:
        config.symbol_graph = SymbolGraphConfig(
            minimum_access_level=_as_str(graph_data.get("minimum_access_level")),
            include_synthesized=_as_bool(graph_data.get("include_synthesized")),
            include_extended_types=_as_bool(graph_data.get("include_extended_types")),
        )

    snippet_data = _as_dict(data.get("snippets"))
    if snippet_data:
        enabled = _as_bool(snippet_data.get("enabled"))
        config.snippets = SnippetConfig(
            enabled=True if enabled is None else enabled,
            executable=_as_str(snippet_data.get("executable")) or "snippet-extract",
        )

    toolchain_data = _as_dict(data.get("toolchain"))
    if toolchain_data:
        swift_version = toolchain_data.get("swift_version")
        # YAML reads an unquoted 5.10 as the float 5.1.
        if swift_version is not None and not isinstance(swift_version, str):
            raise ConfigError(
                f"toolchain.swift_version must be a quoted string, got {swift_version!r}"
            )
        config.toolchain = ToolchainConfig(
            swift=_as_str(toolchain_data.get("swift")) or "swift",
            swift_version=swift_version,
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "SnippetConfig",
    "SymDocConfig",
    "SymbolGraphConfig",
    "ToolchainConfig",
    "load_config",
]
