"""
Add-description transformer.

Wraps rule definitions so they may be preceded by a description:

    Rule := Optional(Description) <original definition>
"""

from __future__ import annotations

from ...core.ir import (
    Grammar,
    GrammarElement,
    ProductionRule,
    clone_element,
    nonterminal,
    optional,
    sequence,
)
from ..base import OptionsInput, PluginMetadata, PluginOptions, Transformer


class AddDescriptionOptions(PluginOptions):
    description: str = "Transformed by add-description transformer"
    # None selects every rule
    rule_names: list[str] | None = None


def with_description(definition: GrammarElement) -> GrammarElement:
    return sequence(optional(nonterminal("Description")), clone_element(definition))


class AddDescriptionTransformer(Transformer):
    """Prefix selected rules with an optional Description."""

    metadata = PluginMetadata(
        name="Add Description",
        version="1.0.0",
        description="Adds optional descriptions to grammar rules",
    )
    options_model = AddDescriptionOptions

    def transform(self, grammar: Grammar, options: OptionsInput | None = None) -> Grammar:
        opts: AddDescriptionOptions = self.resolve_options(options)
        selected = None if opts.rule_names is None else set(opts.rule_names)

        rules = []
        for rule in grammar.rules.values():
            if selected is None or rule.name in selected:
                definition = with_description(rule.definition)
            else:
                definition = clone_element(rule.definition)
            rules.append(ProductionRule(name=rule.name, definition=definition))

        return grammar.with_rules(rules)
