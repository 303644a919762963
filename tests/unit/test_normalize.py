"""Tests for the normalize transformer."""

from __future__ import annotations

from grammarkit.core.ir import (
    Grammar,
    ProductionRule,
    iter_elements,
    nonterminal,
    one_of,
    optional,
    repeat,
    sequence,
    terminal,
)
from grammarkit.plugins import PluginRegistry
from grammarkit.plugins.transformers import NormalizeOptions, NormalizeTransformer
from grammarkit.plugins.transformers.normalize import dedupe_options, normalize_element


def make(root: str, **definitions) -> Grammar:
    return Grammar.from_rules(
        root, [ProductionRule(name=name, definition=d) for name, d in definitions.items()]
    )


class TestDedupeOptions:
    def test_keeps_first_occurrence_order(self) -> None:
        a, b = nonterminal("A"), nonterminal("B")
        assert dedupe_options((b, a, nonterminal("B"), a)) == (b, a)

    def test_structural_equality_not_identity(self) -> None:
        first = sequence(terminal("x"), nonterminal("Y"))
        second = sequence(terminal("x"), nonterminal("Y"))
        assert dedupe_options((first, second)) == (first,)


class TestNormalizeElement:
    def test_nested_duplicates_removed_bottom_up(self) -> None:
        element = optional(
            one_of(
                one_of(nonterminal("A"), nonterminal("A")),
                one_of(nonterminal("A")),
                terminal("z"),
            )
        )
        # After the inner OneOfs lose their duplicates they are equal to each other
        assert normalize_element(element, NormalizeOptions()) == optional(
            one_of(one_of(nonterminal("A")), terminal("z"))
        )

    def test_duplicates_kept_when_disabled(self) -> None:
        element = one_of(terminal("a"), terminal("a"))
        opts = NormalizeOptions(remove_duplicate_options=False)
        assert normalize_element(element, opts) == element

    def test_empty_sequence_kept(self) -> None:
        element = one_of(sequence(), terminal("a"))
        assert normalize_element(element, NormalizeOptions()) == element


class TestNormalizeTransformer:
    def test_sorts_rules_by_name(self) -> None:
        grammar = make("Root", Root=nonterminal("B"), B=nonterminal("A"), A=terminal("a"))
        result = NormalizeTransformer().transform(grammar)

        assert result.rule_names == ["A", "B", "Root"]
        assert result.root == "Root"

    def test_sorting_can_be_disabled(self) -> None:
        grammar = make("Root", Root=nonterminal("B"), B=terminal("b"))
        result = NormalizeTransformer().transform(grammar, {"sortRules": False})
        assert result.rule_names == ["Root", "B"]

    def test_does_not_mutate_or_alias_input(self) -> None:
        grammar = make("A", A=one_of(terminal("x"), terminal("x"), repeat(nonterminal("A"))))
        before = grammar.model_copy(deep=True)

        result = NormalizeTransformer().transform(grammar)

        assert grammar == before
        original_ids = {id(n) for n in iter_elements(grammar.rules["A"].definition)}
        result_ids = {id(n) for n in iter_elements(result.rules["A"].definition)}
        assert original_ids.isdisjoint(result_ids)

    def test_idempotent(self) -> None:
        grammar = make(
            "Z",
            Z=one_of(nonterminal("Y"), nonterminal("Y"), sequence(terminal("a"), terminal("a"))),
            Y=terminal("y"),
        )
        transformer = NormalizeTransformer()
        once = transformer.transform(grammar)
        assert transformer.transform(once) == once

    def test_through_registry(self, registry: PluginRegistry, document_grammar: Grammar) -> None:
        result = registry.transform(document_grammar, ["normalize"])
        assert result.grammar.rule_names == ["Definition", "Document"]
