"""
TypeScript generator.

Emits one placeholder type alias per rule. The aliases carry no structure;
they give downstream TypeScript code a name for each rule.
"""

from __future__ import annotations

from ...core.ir import Grammar, ProductionRule
from ..base import Generator, OptionsInput, PluginMetadata, PluginOptions

HEADER = "/**\n * Generated TypeScript types from GraphQL Grammar\n */"


class TypeScriptOptions(PluginOptions):
    export_types: bool = True
    include_comments: bool = True
    format: bool = True


def type_declaration(rule: ProductionRule, options: TypeScriptOptions) -> str:
    export = "export " if options.export_types else ""
    comment = f"/**\n * {rule.name} grammar rule\n */\n" if options.include_comments else ""
    return f"{comment}{export}type {rule.name} = GrammarElement;"


class TypeScriptGenerator(Generator):
    metadata = PluginMetadata(
        name="TypeScript",
        version="1.0.0",
        description="Generates TypeScript type definitions from grammar",
    )
    options_model = TypeScriptOptions

    def output_format(self) -> str:
        return "typescript"

    def generate(self, grammar: Grammar, options: OptionsInput | None = None) -> str:
        opts: TypeScriptOptions = self.resolve_options(options)

        lines: list[str] = []
        if opts.include_comments:
            lines.extend([HEADER, ""])

        separator = [""] if opts.format else []
        for rule in grammar.rules.values():
            lines.append(type_declaration(rule, opts))
            lines.extend(separator)

        return "\n".join(lines)
