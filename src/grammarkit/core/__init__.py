"""Core grammarkit functionality: grammar IR, validation, errors and the built-in GraphQL grammar."""

from . import ir
from .errors import (
    GrammarFormatError,
    GrammarKitError,
    GrammarValidationError,
    PluginError,
    RenderError,
    TransformerError,
    TypeReferenceError,
)
from .graphql_grammar import GRAPHQL_GRAMMAR
from .validator import ValidationResult, validate_grammar

__all__ = [
    "ir",
    "GRAPHQL_GRAMMAR",
    "GrammarKitError",
    "GrammarFormatError",
    "GrammarValidationError",
    "TypeReferenceError",
    "TransformerError",
    "RenderError",
    "PluginError",
    "ValidationResult",
    "validate_grammar",
]
