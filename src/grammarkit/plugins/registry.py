"""
Plugin registry for grammarkit.

Keeps three independent id-keyed maps (parsers, transformers, generators)
and runs them:

- transform(): sequential pipeline, each stage feeding the next
- generate() / parse(): single-shot

The registry is the one place plugin exceptions are caught. Anything raised
inside a plugin surfaces as a PluginError subclass carrying the plugin id,
kind and original cause.

Registration is expected to finish before pipelines run; there is no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from ..core.errors import (
    DuplicateRegistrationError,
    GenerationError,
    InvalidPluginOptionsError,
    ParsingError,
    PluginNotFoundError,
    TransformationError,
)
from ..core.ir import Grammar
from .base import (
    GenerateResult,
    Generator,
    OptionsInput,
    Parser,
    ParseResult,
    Plugin,
    PluginInfo,
    PluginKind,
    PluginRegistration,
    TransformResult,
    Transformer,
)

logger = logging.getLogger(__name__)


def _options_as_dict(options: OptionsInput | None) -> dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, BaseModel):
        return options.model_dump(exclude_unset=True)
    return dict(options)


class PluginRegistry:
    """
    Registry for parser, transformer and generator plugins.

    Ids are unique per kind: a parser and a generator may both be called
    "graphql-sdl".
    """

    def __init__(self) -> None:
        self._registrations: dict[PluginKind, dict[str, PluginRegistration]] = {
            PluginKind.PARSER: {},
            PluginKind.TRANSFORMER: {},
            PluginKind.GENERATOR: {},
        }

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def _register(
        self,
        kind: PluginKind,
        plugin_id: str,
        plugin: Plugin,
        options: OptionsInput | None,
    ) -> None:
        entries = self._registrations[kind]
        if plugin_id in entries:
            raise DuplicateRegistrationError(
                plugin_id, kind, f"A {kind} with id '{plugin_id}' is already registered"
            )
        entries[plugin_id] = PluginRegistration(id=plugin_id, plugin=plugin, options=options)
        logger.debug("Registered %s '%s' (%s)", kind, plugin_id, plugin.metadata.name)

    def register_parser(
        self, plugin_id: str, parser: Parser, options: OptionsInput | None = None
    ) -> None:
        """
        Register a parser.

        Args:
            plugin_id: Id unique among parsers
            parser: Parser instance
            options: Default options used when parse() is called without any

        Raises:
            DuplicateRegistrationError: If the id is already registered
        """
        self._register(PluginKind.PARSER, plugin_id, parser, options)

    def register_transformer(
        self, plugin_id: str, transformer: Transformer, options: OptionsInput | None = None
    ) -> None:
        """Register a transformer. Raises DuplicateRegistrationError on a reused id."""
        self._register(PluginKind.TRANSFORMER, plugin_id, transformer, options)

    def register_generator(
        self, plugin_id: str, generator: Generator, options: OptionsInput | None = None
    ) -> None:
        """Register a generator. Raises DuplicateRegistrationError on a reused id."""
        self._register(PluginKind.GENERATOR, plugin_id, generator, options)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _active(self, kind: PluginKind, plugin_id: str) -> PluginRegistration | None:
        registration = self._registrations[kind].get(plugin_id)
        if registration is None or not registration.enabled:
            return None
        return registration

    def _require(self, kind: PluginKind, plugin_id: str) -> PluginRegistration:
        registration = self._active(kind, plugin_id)
        if registration is None:
            raise PluginNotFoundError(
                plugin_id, kind, f"{kind.capitalize()} '{plugin_id}' not found or disabled"
            )
        return registration

    def get_parser(self, plugin_id: str) -> Parser | None:
        """Return the parser if registered and enabled, else None."""
        registration = self._active(PluginKind.PARSER, plugin_id)
        return registration.plugin if registration else None  # type: ignore[return-value]

    def get_transformer(self, plugin_id: str) -> Transformer | None:
        """Return the transformer if registered and enabled, else None."""
        registration = self._active(PluginKind.TRANSFORMER, plugin_id)
        return registration.plugin if registration else None  # type: ignore[return-value]

    def get_generator(self, plugin_id: str) -> Generator | None:
        """Return the generator if registered and enabled, else None."""
        registration = self._active(PluginKind.GENERATOR, plugin_id)
        return registration.plugin if registration else None  # type: ignore[return-value]

    def _list(self, kind: PluginKind) -> list[PluginInfo]:
        return [
            PluginInfo(id=reg.id, metadata=reg.plugin.metadata)
            for reg in self._registrations[kind].values()
            if reg.enabled
        ]

    def list_parsers(self) -> list[PluginInfo]:
        return self._list(PluginKind.PARSER)

    def list_transformers(self) -> list[PluginInfo]:
        return self._list(PluginKind.TRANSFORMER)

    def list_generators(self) -> list[PluginInfo]:
        return self._list(PluginKind.GENERATOR)

    # -------------------------------------------------------------------------
    # Management
    # -------------------------------------------------------------------------

    def _registration(self, plugin_id: str, kind: PluginKind | str) -> PluginRegistration:
        try:
            kind = PluginKind(kind)
        except ValueError as e:
            raise PluginNotFoundError(plugin_id, kind, f"Unknown plugin kind '{kind}'") from e
        registration = self._registrations[kind].get(plugin_id)
        if registration is None:
            raise PluginNotFoundError(plugin_id, kind, f"{kind.capitalize()} '{plugin_id}' not found")
        return registration

    def set_plugin_enabled(self, plugin_id: str, kind: PluginKind | str, enabled: bool) -> None:
        """
        Enable or disable a registered plugin.

        Raises:
            PluginNotFoundError: If the kind is unknown or no plugin of that kind has the id
        """
        registration = self._registration(plugin_id, kind)
        registration.enabled = enabled
        logger.debug(
            "%s %s '%s'", "Enabled" if enabled else "Disabled", registration.plugin.kind, plugin_id
        )

    def update_plugin_options(
        self, plugin_id: str, kind: PluginKind | str, options: OptionsInput
    ) -> None:
        """
        Merge ``options`` into a plugin's registration-time default options.

        Raises:
            PluginNotFoundError: If the kind is unknown or no plugin of that kind has the id
        """
        registration = self._registration(plugin_id, kind)
        registration.options = {
            **_options_as_dict(registration.options),
            **_options_as_dict(options),
        }
        logger.debug("Updated options for %s '%s'", registration.plugin.kind, plugin_id)

    def clear(self) -> None:
        """Remove every registered plugin."""
        for entries in self._registrations.values():
            entries.clear()

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_options(
        registration: PluginRegistration, options: OptionsInput | None
    ) -> None:
        plugin = registration.plugin
        if options is not None and not plugin.validate_options(options):
            raise InvalidPluginOptionsError(
                registration.id,
                plugin.kind,
                f"Invalid options for {plugin.kind} '{registration.id}'",
            )

    def transform(
        self,
        grammar: Grammar,
        transformer_ids: list[str],
        options: Mapping[str, OptionsInput] | None = None,
    ) -> TransformResult:
        """
        Run transformers in order, feeding each stage's output to the next.

        Args:
            grammar: Input grammar (never modified)
            transformer_ids: Transformer ids, applied left to right
            options: Per-id options; these replace the registration defaults

        Returns:
            TransformResult with the final grammar and the ids applied

        Raises:
            PluginNotFoundError: An id is unknown or disabled
            InvalidPluginOptionsError: Options were rejected
            TransformationError: A transformer raised; the first failure aborts
        """
        per_id = dict(options or {})
        current = grammar
        applied: list[str] = []

        for transformer_id in transformer_ids:
            registration = self._require(PluginKind.TRANSFORMER, transformer_id)
            stage_options = per_id.get(transformer_id, registration.options)
            self._check_options(registration, stage_options)

            logger.debug("Applying transformer '%s'", transformer_id)
            transformer: Transformer = registration.plugin  # type: ignore[assignment]
            try:
                current = transformer.transform(current, stage_options)
            except Exception as e:
                raise TransformationError(
                    transformer_id,
                    PluginKind.TRANSFORMER,
                    f"Transformation failed: {e}",
                    cause=e,
                ) from e
            applied.append(transformer_id)

        return TransformResult(grammar=current, transformers=applied, options=per_id)

    def generate(
        self,
        grammar: Grammar,
        generator_id: str,
        options: OptionsInput | None = None,
    ) -> GenerateResult:
        """
        Render a grammar with one generator.

        Raises:
            PluginNotFoundError: The id is unknown or disabled
            InvalidPluginOptionsError: Options were rejected
            GenerationError: The generator raised
        """
        registration = self._require(PluginKind.GENERATOR, generator_id)
        effective = options if options is not None else registration.options
        self._check_options(registration, effective)

        logger.debug("Running generator '%s'", generator_id)
        generator: Generator = registration.plugin  # type: ignore[assignment]
        try:
            output = generator.generate(grammar, effective)
        except Exception as e:
            raise GenerationError(
                generator_id, PluginKind.GENERATOR, f"Generation failed: {e}", cause=e
            ) from e

        return GenerateResult(
            output=output,
            generator=generator_id,
            format=generator.output_format(),
            options=effective,
        )

    def parse(
        self,
        text: str,
        parser_id: str,
        options: OptionsInput | None = None,
    ) -> ParseResult:
        """
        Parse text into a grammar with one parser.

        Raises:
            PluginNotFoundError: The id is unknown or disabled
            InvalidPluginOptionsError: Options were rejected
            ParsingError: The parser raised
        """
        registration = self._require(PluginKind.PARSER, parser_id)
        effective = options if options is not None else registration.options
        self._check_options(registration, effective)

        logger.debug("Running parser '%s'", parser_id)
        parser: Parser = registration.plugin  # type: ignore[assignment]
        try:
            grammar = parser.parse(text, effective)
        except Exception as e:
            raise ParsingError(parser_id, PluginKind.PARSER, f"Parsing failed: {e}", cause=e) from e

        return ParseResult(
            grammar=grammar,
            parser=parser_id,
            format=parser.input_format(),
            options=effective,
        )


def register_builtin_plugins(registry: PluginRegistry) -> PluginRegistry:
    """
    Register the bundled parsers, transformers and generators.

    Returns:
        The same registry, for chaining
    """
    from .generators import GraphQLSDLGenerator, JSONGenerator, TypeScriptGenerator
    from .parsers import GraphQLSDLParser
    from .transformers import (
        AddDescriptionTransformer,
        AddFieldTransformer,
        NormalizeTransformer,
        SimplifyTransformer,
        ValidateTransformer,
    )

    registry.register_transformer("normalize", NormalizeTransformer())
    registry.register_transformer("simplify", SimplifyTransformer())
    registry.register_transformer("add-field", AddFieldTransformer())
    registry.register_transformer("add-description", AddDescriptionTransformer())
    registry.register_transformer("validate", ValidateTransformer())

    registry.register_generator("graphql-sdl", GraphQLSDLGenerator())
    registry.register_generator("json", JSONGenerator())
    registry.register_generator("typescript", TypeScriptGenerator())

    registry.register_parser("graphql-sdl", GraphQLSDLParser())
    return registry


# Global registry instance
_registry: PluginRegistry | None = None


def get_registry() -> PluginRegistry:
    """
    Get the default plugin registry.

    Registers the built-in plugins on first call. Tests and embedded
    pipelines should build their own PluginRegistry instead.

    Returns:
        PluginRegistry singleton
    """
    global _registry
    if _registry is None:
        _registry = register_builtin_plugins(PluginRegistry())
    return _registry
