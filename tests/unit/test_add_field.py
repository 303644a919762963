"""Tests for the add-field transformer and GraphQL type reference parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from grammarkit.core.errors import (
    InvalidPluginOptionsError,
    TransformationError,
    TransformerError,
    TypeReferenceError,
)
from grammarkit.core.ir import (
    Grammar,
    ProductionRule,
    iter_elements,
    nonterminal,
    optional,
    repeat,
    sequence,
    terminal,
)
from grammarkit.plugins import PluginRegistry
from grammarkit.plugins.transformers import (
    AddFieldOptions,
    AddFieldTransformer,
    parse_type_reference,
)
from grammarkit.plugins.transformers.add_field import (
    build_arguments_definition,
    is_fields_container,
    splice_field,
)

NT = nonterminal


def field_options(**overrides) -> dict:
    options = {"targetTypeName": "User", "fieldName": "email", "fieldType": "String"}
    options.update(overrides)
    return options


def fields_of(grammar: Grammar, rule_name: str = "ObjectTypeDefinition"):
    """The field element inside the target's field list container."""
    container = grammar.rules[rule_name].definition.elements[-1]
    return container.element.elements[1].element


# =============================================================================
# Type references
# =============================================================================


class TestParseTypeReference:
    def test_named(self) -> None:
        assert parse_type_reference("String") == NT("NamedType")

    def test_non_null(self) -> None:
        assert parse_type_reference("String!") == sequence(NT("NamedType"), NT("Bang"))

    def test_list(self) -> None:
        assert parse_type_reference("[Int]") == sequence(
            NT("BracketL"), NT("NamedType"), NT("BracketR")
        )

    def test_non_null_list_of_non_null(self) -> None:
        assert parse_type_reference("[String!]!") == sequence(
            NT("BracketL"),
            sequence(NT("NamedType"), NT("Bang")),
            NT("BracketR"),
            NT("Bang"),
        )

    def test_nested_lists_with_whitespace(self) -> None:
        assert parse_type_reference(" [ [ID] ] ") == sequence(
            NT("BracketL"),
            sequence(NT("BracketL"), NT("NamedType"), NT("BracketR")),
            NT("BracketR"),
        )

    @pytest.mark.parametrize("text", ["", "[String", "String]", "!", "[]", "String!!", "1Int"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(TypeReferenceError):
            parse_type_reference(text)

    def test_error_mentions_position(self) -> None:
        with pytest.raises(TypeReferenceError, match="at position 7"):
            parse_type_reference("[String")


# =============================================================================
# Building blocks
# =============================================================================


class TestBuildingBlocks:
    def test_no_arguments_uses_arguments_definition(self) -> None:
        assert build_arguments_definition([]) == optional(NT("ArgumentsDefinition"))

    def test_inline_arguments(self) -> None:
        opts = AddFieldOptions.model_validate(
            field_options(arguments=[{"name": "first", "type": "Int!", "defaultValue": "10"}])
        )
        element = build_arguments_definition(opts.arguments)

        assert element == optional(
            sequence(
                NT("ParenL"),
                repeat(
                    sequence(
                        optional(NT("Description")),
                        NT("Name"),
                        NT("Colon"),
                        sequence(NT("NamedType"), NT("Bang")),
                        sequence(NT("Equals"), NT("ValueConst")),
                        optional(NT("DirectivesConst")),
                    )
                ),
                NT("ParenR"),
            )
        )

    def test_fields_container_shapes(self) -> None:
        assert is_fields_container(optional(NT("FieldsDefinition")))
        assert is_fields_container(
            optional(sequence(NT("BraceL"), repeat(NT("FieldDefinition")), NT("BraceR")))
        )
        assert not is_fields_container(NT("FieldsDefinition"))
        assert not is_fields_container(optional(NT("Directives")))

    def test_splice_requires_sequence(self) -> None:
        rule = ProductionRule(name="ObjectTypeDefinition", definition=NT("Other"))
        with pytest.raises(TransformerError, match="Sequence definition"):
            splice_field(rule, NT("FieldDefinition"))

    def test_splice_appends_when_no_container(self) -> None:
        rule = ProductionRule(
            name="ObjectTypeDefinition", definition=sequence(terminal("type"), NT("Name"))
        )
        spliced = splice_field(rule, NT("F"))

        assert spliced.definition == sequence(
            terminal("type"),
            NT("Name"),
            optional(sequence(NT("BraceL"), repeat(NT("F")), NT("BraceR"))),
        )


# =============================================================================
# Transformer
# =============================================================================


class TestAddFieldTransformer:
    def test_replaces_field_list_container(self, object_type_grammar: Grammar) -> None:
        result = AddFieldTransformer().transform(
            object_type_grammar, field_options(fieldType="[String!]!")
        )

        original = object_type_grammar.rules["ObjectTypeDefinition"].definition
        definition = result.rules["ObjectTypeDefinition"].definition
        assert definition.elements[:3] == original.elements[:3]
        assert fields_of(result) == sequence(
            optional(NT("Description")),
            NT("Name"),
            optional(NT("ArgumentsDefinition")),
            NT("Colon"),
            sequence(
                NT("BracketL"),
                sequence(NT("NamedType"), NT("Bang")),
                NT("BracketR"),
                NT("Bang"),
            ),
            optional(NT("DirectivesConst")),
        )

    def test_named_target_rule(self) -> None:
        grammar = Grammar.from_rules(
            "User",
            [
                ProductionRule(name="User", definition=sequence(terminal("type"), NT("Name"))),
                ProductionRule(name="Name", definition=terminal("Name")),
            ],
        )
        result = AddFieldTransformer().transform(grammar, field_options())

        assert len(result.rules["User"].definition.elements) == 3
        assert fields_of(result, "User").elements[4] == NT("NamedType")

    def test_fields_do_not_accumulate(self, object_type_grammar: Grammar) -> None:
        transformer = AddFieldTransformer()
        once = transformer.transform(object_type_grammar, field_options(fieldType="Int"))
        twice = transformer.transform(once, field_options(fieldName="other", fieldType="ID!"))

        assert len(twice.rules["ObjectTypeDefinition"].definition.elements) == 4
        assert fields_of(twice).elements[4] == sequence(NT("NamedType"), NT("Bang"))

    def test_other_rules_cloned(self, object_type_grammar: Grammar) -> None:
        before = object_type_grammar.model_copy(deep=True)
        result = AddFieldTransformer().transform(object_type_grammar, field_options())

        assert object_type_grammar == before
        for name, rule in object_type_grammar.rules.items():
            if name == "ObjectTypeDefinition":
                continue
            assert result.rules[name] == rule
            original_ids = {id(n) for n in iter_elements(rule.definition)}
            assert original_ids.isdisjoint(id(n) for n in iter_elements(result.rules[name].definition))

    def test_missing_options(self, object_type_grammar: Grammar) -> None:
        with pytest.raises(TransformerError, match="requires"):
            AddFieldTransformer().transform(object_type_grammar)

    def test_incomplete_options(self, object_type_grammar: Grammar) -> None:
        with pytest.raises(ValidationError):
            AddFieldTransformer().transform(object_type_grammar, {"targetTypeName": "User"})

    def test_no_target_rule(self, document_grammar: Grammar) -> None:
        with pytest.raises(TransformerError, match="ObjectTypeDefinition rule not found"):
            AddFieldTransformer().transform(document_grammar, field_options())

    def test_bad_type_through_registry(
        self, registry: PluginRegistry, object_type_grammar: Grammar
    ) -> None:
        with pytest.raises(TransformationError) as exc_info:
            registry.transform(
                object_type_grammar,
                ["add-field"],
                options={"add-field": field_options(fieldType="[String")},
            )
        assert isinstance(exc_info.value.cause, TypeReferenceError)

    def test_rejected_options_through_registry(
        self, registry: PluginRegistry, object_type_grammar: Grammar
    ) -> None:
        with pytest.raises(InvalidPluginOptionsError):
            registry.transform(
                object_type_grammar,
                ["add-field"],
                options={"add-field": field_options(fieldName="")},
            )
