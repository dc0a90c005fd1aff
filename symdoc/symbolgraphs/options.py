"""Derive per-target symbol graph options from package defaults and CLI flags."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..config import SymbolGraphConfig
from ..logging import get_logger
from ..models import AccessLevel, ModuleKind, SymbolGraphOptions, Target

logger = get_logger("symbolgraphs.options")


@dataclass(frozen=True)
class SymbolGraphOverrides:
    """User supplied flags that adjust the package defaults."""

    minimum_access_level: Optional[str] = None
    skip_synthesized_symbols: bool = False
    include_extended_types: Optional[bool] = None


def default_symbol_graph_options(
    target: Target,
    *,
    supports_extension_blocks: bool,
    config: SymbolGraphConfig | None = None,
) -> SymbolGraphOptions:
    """Return the options a package documents ``target`` with when no flags are given."""
    if target.module_kind is ModuleKind.EXECUTABLE:
        access_level = AccessLevel.INTERNAL
    else:
        access_level = AccessLevel.PUBLIC
    options = SymbolGraphOptions(
        minimum_access_level=access_level,
        include_synthesized=True,
        include_spi=False,
        emit_extension_blocks=supports_extension_blocks,
    )
    if config is None:
        return options

    configured_level = AccessLevel.parse(config.minimum_access_level)
    if configured_level is not None:
        options = replace(options, minimum_access_level=configured_level)
    elif config.minimum_access_level is not None:
        logger.warning(
            "Ignoring unknown minimum_access_level '%s' in configuration",
            config.minimum_access_level,
        )
    if config.include_synthesized is not None:
        options = replace(options, include_synthesized=config.include_synthesized)
    if config.include_extended_types is not None and supports_extension_blocks:
        options = replace(options, emit_extension_blocks=config.include_extended_types)
    return options


def build_options(
    target: Target,
    defaults: SymbolGraphOptions,
    overrides: SymbolGraphOverrides,
    *,
    supports_extension_blocks: bool,
) -> SymbolGraphOptions:
    """Apply ``overrides`` on top of ``defaults``.

    An extended-types flag on a toolchain without extension block support is
    reported as a warning and otherwise ignored.
    """
    options = defaults

    if overrides.minimum_access_level is not None:
        level = AccessLevel.parse(overrides.minimum_access_level)
        if level is None:
            logger.warning(
                "Ignoring unknown minimum access level '%s' for target %s",
                overrides.minimum_access_level,
                target.name,
            )
        else:
            options = replace(options, minimum_access_level=level)

    if overrides.skip_synthesized_symbols:
        options = replace(options, include_synthesized=False)

    if overrides.include_extended_types is not None:
        if supports_extension_blocks:
            options = replace(options, emit_extension_blocks=overrides.include_extended_types)
        else:
            flag = "include" if overrides.include_extended_types else "exclude"
            logger.warning(
                "detected '--%s-extended-types' option, which is incompatible with your "
                "swift version (required: 5.8)",
                flag,
            )

    logger.debug("symbol graph options for %s: %s", target.name, options.describe())
    return options


__all__ = ["SymbolGraphOverrides", "build_options", "default_symbol_graph_options"]
