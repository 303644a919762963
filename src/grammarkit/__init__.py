"""
grammarkit - context-free grammars as data, with a plugin pipeline.

Grammars are immutable values that flow through parsers, transformers and
generators registered in a PluginRegistry.
"""

from __future__ import annotations

from ._version import get_version

# Re-export commonly used types for convenience
from .core import ir
from .core.errors import (
    GrammarFormatError,
    GrammarKitError,
    GrammarValidationError,
    PluginError,
)
from .core.graphql_grammar import GRAPHQL_GRAMMAR
from .core.ir import Grammar, ProductionRule
from .core.validator import ValidationResult, validate_grammar
from .plugins import PluginRegistry, get_registry

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "Grammar",
    "ProductionRule",
    "GRAPHQL_GRAMMAR",
    "ValidationResult",
    "validate_grammar",
    "PluginRegistry",
    "get_registry",
    "GrammarKitError",
    "GrammarFormatError",
    "GrammarValidationError",
    "PluginError",
]
