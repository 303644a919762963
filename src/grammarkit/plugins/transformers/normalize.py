"""
Normalize transformer.

Bottom-up rewrite that removes duplicate OneOf alternatives and optionally
sorts rules by name. Only exact structural duplicates are removed and the
surviving alternatives keep their original order, so a first-match consumer
picks the same winner before and after.
"""

from __future__ import annotations

from typing import assert_never

from ...core.ir import (
    Grammar,
    GrammarElement,
    List,
    NonTerminal,
    OneOf,
    Optional,
    ProductionRule,
    Sequence,
    Terminal,
    clone_element,
)
from ..base import OptionsInput, PluginMetadata, PluginOptions, Transformer


class NormalizeOptions(PluginOptions):
    sort_rules: bool = True
    remove_duplicate_options: bool = True
    # Accepted for compatibility. An empty Sequence is the epsilon production,
    # so it is always kept.
    remove_empty_sequences: bool = True


def dedupe_options(options: tuple[GrammarElement, ...]) -> tuple[GrammarElement, ...]:
    """Drop alternatives equal to an earlier one, keeping first occurrences."""
    kept: list[GrammarElement] = []
    for option in options:
        if option not in kept:
            kept.append(option)
    return tuple(kept)


def normalize_element(element: GrammarElement, options: NormalizeOptions) -> GrammarElement:
    """Return a normalized copy of ``element``; children are normalized first."""
    if isinstance(element, (Terminal, NonTerminal)):
        return clone_element(element)
    if isinstance(element, Sequence):
        return Sequence(elements=tuple(normalize_element(e, options) for e in element.elements))
    if isinstance(element, OneOf):
        branches = tuple(normalize_element(o, options) for o in element.options)
        if options.remove_duplicate_options:
            branches = dedupe_options(branches)
        return OneOf(options=branches)
    if isinstance(element, Optional):
        return Optional(element=normalize_element(element.element, options))
    if isinstance(element, List):
        return List(element=normalize_element(element.element, options))
    assert_never(element)


class NormalizeTransformer(Transformer):
    """Deduplicate OneOf alternatives and sort rules."""

    metadata = PluginMetadata(
        name="Normalize",
        version="1.0.0",
        description="Removes duplicate alternatives and sorts rules by name",
    )
    options_model = NormalizeOptions

    def transform(self, grammar: Grammar, options: OptionsInput | None = None) -> Grammar:
        opts: NormalizeOptions = self.resolve_options(options)

        rules = [
            ProductionRule(name=rule.name, definition=normalize_element(rule.definition, opts))
            for rule in grammar.rules.values()
        ]
        if opts.sort_rules:
            rules.sort(key=lambda rule: rule.name)

        return grammar.with_rules(rules)
