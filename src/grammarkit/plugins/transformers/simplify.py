"""
Simplify transformer.

Bottom-up structural flattening:

- A Sequence child of a Sequence is spliced into its parent
- A Sequence with exactly one element becomes that element
- A OneOf with exactly one option becomes that option

Children are simplified before their parent, so one pass reaches a fixed
point and the transformer is idempotent.
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


class SimplifyOptions(PluginOptions):
    flatten_sequences: bool = True
    remove_single_element_sequences: bool = True
    remove_single_option_one_of: bool = True


def simplify_element(element: GrammarElement, options: SimplifyOptions) -> GrammarElement:
    if isinstance(element, (Terminal, NonTerminal)):
        return clone_element(element)

    if isinstance(element, Sequence):
        elements: list[GrammarElement] = []
        for child in element.elements:
            simplified = simplify_element(child, options)
            if options.flatten_sequences and isinstance(simplified, Sequence):
                elements.extend(simplified.elements)
            else:
                elements.append(simplified)
        if options.remove_single_element_sequences and len(elements) == 1:
            return elements[0]
        return Sequence(elements=tuple(elements))

    if isinstance(element, OneOf):
        branches = tuple(simplify_element(o, options) for o in element.options)
        if options.remove_single_option_one_of and len(branches) == 1:
            return branches[0]
        return OneOf(options=branches)

    if isinstance(element, Optional):
        return Optional(element=simplify_element(element.element, options))

    if isinstance(element, List):
        return List(element=simplify_element(element.element, options))

    assert_never(element)


class SimplifyTransformer(Transformer):
    """Flatten nested sequences and collapse singleton combinators."""

    metadata = PluginMetadata(
        name="Simplify",
        version="1.0.0",
        description="Flattens nested sequences and removes redundant wrappers",
    )
    options_model = SimplifyOptions

    def transform(self, grammar: Grammar, options: OptionsInput | None = None) -> Grammar:
        opts: SimplifyOptions = self.resolve_options(options)
        return grammar.with_rules(
            ProductionRule(name=rule.name, definition=simplify_element(rule.definition, opts))
            for rule in grammar.rules.values()
        )
