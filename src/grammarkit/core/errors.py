"""
Error types for grammarkit grammar handling and the plugin pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validator import ValidationResult


class GrammarKitError(Exception):
    """Base exception for all grammarkit errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class GrammarFormatError(GrammarKitError):
    """
    Raised when structured data cannot be decoded into a Grammar.

    Examples:
    - Unknown element kind
    - Missing root or rules
    - Rule stored under a key that differs from its name
    - Malformed regex pattern encoding
    """

    pass


class GrammarValidationError(GrammarKitError):
    """
    Raised when a grammar fails structural validation and the caller asked
    for failures to be fatal.

    Examples:
    - Root rule missing from the rule map
    - NonTerminal referring to an undefined rule
    - Unreferenced rules, when warnings are treated as errors
    """

    def __init__(self, message: str, result: ValidationResult | None = None):
        self.result = result
        super().__init__(message)


class TypeReferenceError(GrammarKitError):
    """Raised when a GraphQL type string such as ``[String!]!`` is malformed."""

    pass


class TransformerError(GrammarKitError):
    """
    Raised by a transformer that cannot apply itself to the given grammar.

    Examples:
    - Missing required options
    - Target rule not found
    - Target rule has an unexpected shape
    """

    pass


class RenderError(GrammarKitError):
    """Raised when a generator cannot produce output for a grammar."""

    pass


class PluginError(GrammarKitError):
    """
    Uniform error raised by the plugin registry.

    Every exception escaping a parser, transformer or generator is rewrapped
    into a subclass of this error so callers only need to know one shape.

    Attributes:
        plugin_id: Registry id of the offending plugin
        plugin_kind: "parser", "transformer" or "generator"
        cause: The original exception, if any
    """

    def __init__(
        self,
        plugin_id: str,
        plugin_kind: str,
        message: str,
        cause: BaseException | None = None,
    ):
        self.plugin_id = plugin_id
        self.plugin_kind = str(plugin_kind)
        self.cause = cause
        super().__init__(f"[{self.plugin_kind}:{plugin_id}] {message}")


class DuplicateRegistrationError(PluginError):
    """Raised when a plugin id is already registered for its kind."""

    pass


class PluginNotFoundError(PluginError):
    """Raised when a plugin id is unknown or the plugin is disabled."""

    pass


class InvalidPluginOptionsError(PluginError):
    """Raised when options are rejected by the plugin's option validator."""

    pass


class TransformationError(PluginError):
    """Raised when a transformer fails inside a pipeline."""

    pass


class GenerationError(PluginError):
    """Raised when a generator fails."""

    pass


class ParsingError(PluginError):
    """Raised when a parser fails."""

    pass
