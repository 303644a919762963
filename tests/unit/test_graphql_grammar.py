"""Tests for the built-in GraphQL grammar value."""

from __future__ import annotations

from grammarkit.core.graphql_grammar import GRAPHQL_GRAMMAR, PUNCTUATORS, TYPE_DEFINITION_RULES
from grammarkit.core.ir import Terminal
from grammarkit.core.validator import validate_grammar


class TestGraphQLGrammar:
    def test_root(self) -> None:
        assert GRAPHQL_GRAMMAR.root == "Document"

    def test_validates_cleanly(self) -> None:
        result = validate_grammar(GRAPHQL_GRAMMAR)

        assert result.valid, result.errors
        assert result.warnings == ()

    def test_punctuators_are_lexical_rules(self) -> None:
        for name, token in PUNCTUATORS.items():
            assert GRAPHQL_GRAMMAR.rules[name].definition == Terminal(name=token)

    def test_type_definitions_present(self) -> None:
        for name in TYPE_DEFINITION_RULES:
            assert GRAPHQL_GRAMMAR.has_rule(name)

    def test_name_is_regex_terminal(self) -> None:
        name = GRAPHQL_GRAMMAR.rules["Name"].definition
        assert isinstance(name, Terminal)
        assert name.is_regex
        assert name.pattern.fullmatch("_id2")
        assert not name.pattern.fullmatch("2id")
