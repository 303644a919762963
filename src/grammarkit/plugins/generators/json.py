"""
JSON generator.

Emits the structured-data form of a grammar (see
``grammarkit.core.ir.serialization``). Regex patterns use the
``{"source", "flags"}`` encoding, so the output decodes back to an equal
grammar with ``grammar_from_json``.
"""

from __future__ import annotations

from ...core.ir import Grammar, grammar_to_json
from ..base import Generator, OptionsInput, PluginMetadata, PluginOptions


class JSONOptions(PluginOptions):
    pretty: bool = True
    include_metadata: bool = False


class JSONGenerator(Generator):
    metadata = PluginMetadata(
        name="JSON",
        version="1.0.0",
        description="Generates JSON representation of grammar",
    )
    options_model = JSONOptions

    def output_format(self) -> str:
        return "json"

    def generate(self, grammar: Grammar, options: OptionsInput | None = None) -> str:
        opts: JSONOptions = self.resolve_options(options)
        return grammar_to_json(
            grammar,
            indent=2 if opts.pretty else None,
            include_metadata=opts.include_metadata,
        )
