"""Symbol graph generation, snippet extraction and unification."""

from .generator import (
    SYMBOL_GRAPH_GENERATION_LOCK,
    GenerationCoordinator,
    SwiftBuildGenerator,
    SymbolGraphGenerationError,
    SymbolGraphGenerator,
)
from .options import SymbolGraphOverrides, build_options, default_symbol_graph_options
from .snippets import SnippetExtractionError, SnippetExtractor
from .unify import SnippetUnifier

__all__ = [
    "GenerationCoordinator",
    "SYMBOL_GRAPH_GENERATION_LOCK",
    "SnippetExtractionError",
    "SnippetExtractor",
    "SnippetUnifier",
    "SwiftBuildGenerator",
    "SymbolGraphGenerationError",
    "SymbolGraphGenerator",
    "SymbolGraphOverrides",
    "build_options",
    "default_symbol_graph_options",
]
