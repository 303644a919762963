"""
Plugin contracts for grammarkit.

Three plugin shapes share one metadata and options surface:

- Parser: text -> Grammar
- Transformer: Grammar -> Grammar
- Generator: Grammar -> output (text or structured data)

Plugins declare an ``options_model`` (a PluginOptions subclass). Options are
passed around as plain mappings (camelCase or snake_case keys) or as model
instances and resolved against the model, which carries the defaults.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..core.ir import Grammar

OptionsInput = Mapping[str, Any] | BaseModel


class PluginKind(StrEnum):
    """Registry namespaces. Ids are unique per kind, not globally."""

    PARSER = "parser"
    TRANSFORMER = "transformer"
    GENERATOR = "generator"


@dataclass(frozen=True)
class PluginMetadata:
    """Descriptive information shown when listing plugins."""

    name: str
    version: str
    description: str | None = None
    author: str | None = None


class PluginOptions(BaseModel):
    """
    Base class for plugin option models.

    Unknown keys are rejected. Keys may be given in snake_case or camelCase
    (``sortRules`` and ``sort_rules`` are equivalent).
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Plugin(ABC):
    """
    Abstract base class for all grammarkit plugins.

    Subclasses set ``metadata`` and, when they accept options, ``options_model``.
    """

    kind: ClassVar[PluginKind]
    metadata: ClassVar[PluginMetadata]
    options_model: ClassVar[type[PluginOptions] | None] = None

    def validate_options(self, options: OptionsInput | None) -> bool:
        """
        Check options against this plugin's options model.

        Returns:
            True if the options are acceptable (always True for plugins
            without an options model)
        """
        if self.options_model is None:
            return True
        try:
            self.resolve_options(options)
        except (TypeError, ValueError):
            return False
        return True

    def resolve_options(self, options: OptionsInput | None) -> Any:
        """
        Resolve options into an instance of ``options_model`` with defaults applied.

        Raises:
            pydantic.ValidationError: If the options are rejected by the model
        """
        model = self.options_model
        if model is None:
            return None
        if options is None:
            return model()
        if isinstance(options, model):
            return options
        if isinstance(options, BaseModel):
            options = options.model_dump(exclude_unset=True)
        return model.model_validate(dict(options))


class Transformer(Plugin):
    """Grammar -> Grammar rewrite. Must never mutate or alias its input."""

    kind = PluginKind.TRANSFORMER

    @abstractmethod
    def transform(self, grammar: Grammar, options: OptionsInput | None = None) -> Grammar:
        """
        Produce a new grammar from ``grammar``.

        Raises:
            Any exception; the registry wraps it into TransformationError
        """
        pass


class Generator(Plugin):
    """Grammar -> output."""

    kind = PluginKind.GENERATOR

    @abstractmethod
    def generate(self, grammar: Grammar, options: OptionsInput | None = None) -> Any:
        pass

    def output_format(self) -> str | None:
        """Format label attached to GenerateResult (e.g. "graphql")."""
        return None


class Parser(Plugin):
    """Text -> Grammar."""

    kind = PluginKind.PARSER

    @abstractmethod
    def parse(self, text: str, options: OptionsInput | None = None) -> Grammar:
        pass

    def input_format(self) -> str | None:
        """Format label attached to ParseResult (e.g. "graphql")."""
        return None


# =============================================================================
# Registry records and pipeline results
# =============================================================================


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class PluginRegistration:
    """
    A plugin held by the registry.

    Attributes:
        id: Registry id, unique within the plugin's kind
        plugin: The plugin instance
        enabled: Disabled plugins are invisible to lookup and execution
        options: Default options used when a call supplies none
    """

    id: str
    plugin: Plugin
    enabled: bool = True
    options: OptionsInput | None = None


@dataclass(frozen=True)
class PluginInfo:
    """Listing entry for an enabled plugin."""

    id: str
    metadata: PluginMetadata


@dataclass
class TransformResult:
    """
    Outcome of a transform pipeline.

    Attributes:
        grammar: Output of the last stage
        transformers: Ids applied, in order
        timestamp: UTC completion time
        options: Options passed per transformer id
    """

    grammar: Grammar
    transformers: list[str]
    timestamp: datetime = field(default_factory=_utcnow)
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def transformer(self) -> str:
        return " -> ".join(self.transformers)


@dataclass
class GenerateResult:
    output: Any
    generator: str
    format: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)
    options: Any = None


@dataclass
class ParseResult:
    grammar: Grammar
    parser: str
    format: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)
    options: Any = None
