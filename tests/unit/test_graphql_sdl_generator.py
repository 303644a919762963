"""
Tests for the GraphQL SDL generator.

Expected outputs are exact strings: the renderer is deterministic, so any
change to placeholder choice or spacing shows up here.
"""

from __future__ import annotations

import re

import pytest

from grammarkit.core.errors import GenerationError, InvalidPluginOptionsError, RenderError
from grammarkit.core.graphql_grammar import GRAPHQL_GRAMMAR
from grammarkit.core.ir import (
    Grammar,
    ProductionRule,
    nonterminal,
    one_of,
    optional,
    repeat,
    sequence,
    terminal,
)
from grammarkit.plugins import PluginRegistry
from grammarkit.plugins.generators import GenerationContext, GraphQLSDLGenerator

QUERY_STUB = "type Query {\n  _: Boolean\n}"


def render(grammar: Grammar, **options) -> str:
    return GraphQLSDLGenerator().generate(grammar, options or None)


def single(definition, name: str = "Root") -> Grammar:
    return Grammar.from_rules(name, [ProductionRule(name=name, definition=definition)])


# =============================================================================
# Generation context
# =============================================================================


class TestGenerationContext:
    def test_defaults(self) -> None:
        ctx = GenerationContext()
        assert ctx.rule_path == ()
        assert ctx.current_rule is None
        assert not ctx.in_fields

    def test_enter_rule_extends_path(self) -> None:
        ctx = GenerationContext().enter_rule("A").enter_rule("B")
        assert ctx.rule_path == ("A", "B")
        assert ctx.current_rule == "B"
        assert ctx.inside("A")
        assert not ctx.inside("C")

    def test_enter_rule_sets_flags(self) -> None:
        base = GenerationContext()
        assert base.enter_rule("ArgumentsDefinition").in_arguments
        assert base.enter_rule("DirectivesConst").in_directive
        assert base.enter_rule("EnumValue").in_enum_value
        assert base.enter_rule("Description").in_description

    def test_contexts_are_immutable(self) -> None:
        base = GenerationContext()
        child = base.enter_fields().enter_field()

        assert base.field_count == 0
        assert not base.in_field
        assert child.in_field
        assert not child.in_fields
        assert child.field_count == 1


# =============================================================================
# Basic rendering
# =============================================================================


class TestTerminalsAndCombinators:
    def test_literal_patterns_and_names(self) -> None:
        grammar = single(sequence(terminal("Hello", "hello"), terminal("World")))
        assert render(grammar) == "hello World"

    def test_value_placeholders(self) -> None:
        grammar = single(
            sequence(
                terminal("IntValue"),
                terminal("FloatValue"),
                terminal("BooleanValue"),
                terminal("NullValue"),
                terminal("StringValue"),
                terminal("EnumValue"),
            )
        )
        assert render(grammar) == '42 3.14 true null "example" EXAMPLE'

    def test_undefined_rules_fall_back_to_punctuators(self) -> None:
        grammar = single(sequence(terminal("Word"), nonterminal("Bang"), nonterminal("Undefined")))
        assert render(grammar) == "Word!"

    def test_one_of_renders_first_option(self) -> None:
        assert render(single(one_of(terminal("a"), terminal("b")))) == "a"

    def test_recursive_optional_is_skipped(self) -> None:
        grammar = single(sequence(terminal("x"), optional(nonterminal("Root"))))
        assert render(grammar) == "x"

    def test_unbounded_recursion_raises(self) -> None:
        grammar = single(sequence(terminal("x"), nonterminal("Root")))
        with pytest.raises(RenderError, match="Recursion deeper than"):
            render(grammar)

    def test_unbounded_recursion_through_registry(self, registry: PluginRegistry) -> None:
        grammar = single(sequence(terminal("x"), nonterminal("Root")))
        with pytest.raises(GenerationError) as exc_info:
            registry.generate(grammar, "graphql-sdl")
        assert isinstance(exc_info.value.cause, RenderError)


# =============================================================================
# Schema and type definitions
# =============================================================================


class TestSchemaDefinition:
    def test_root_operations_and_stubs(self, schema_grammar: Grammar) -> None:
        assert render(schema_grammar) == (
            "schema {\n"
            "  query: Query\n"
            "  mutation: Mutation\n"
            "  subscription: Subscription\n"
            "}\n\n"
            "type Query {\n  _: Boolean\n}\n\n"
            "type Mutation {\n  _: Boolean\n}\n\n"
            "type Subscription {\n  _: Boolean\n}"
        )

    def test_unformatted(self, schema_grammar: Grammar) -> None:
        output = render(schema_grammar, format=False)

        assert output.startswith("schema{query:Query mutation:Mutation subscription:Subscription}")
        assert "type Query{_:Boolean}" in output
        assert "\n" not in output


class TestObjectTypeDefinition:
    def test_with_descriptions(self, object_type_grammar: Grammar) -> None:
        assert render(object_type_grammar) == (
            '"Example description" type ExampleType {\n'
            '  "Example description" field1: ExampleType\n'
            "}\n\n" + QUERY_STUB
        )

    def test_without_descriptions(self, object_type_grammar: Grammar) -> None:
        assert render(object_type_grammar, includeDescriptions=False) == (
            "type ExampleType {\n  field1: ExampleType\n}\n\n" + QUERY_STUB
        )

    def test_indent_size(self, object_type_grammar: Grammar) -> None:
        output = render(object_type_grammar, include_descriptions=False, indent_size=4)
        assert "{\n    field1: ExampleType\n}" in output

    def test_unformatted(self, object_type_grammar: Grammar) -> None:
        output = render(object_type_grammar, include_descriptions=False, format=False)
        assert output == "type ExampleType{field1:ExampleType} type Query{_:Boolean}"

    def test_added_field_type(
        self, registry: PluginRegistry, object_type_grammar: Grammar
    ) -> None:
        transformed = registry.transform(
            object_type_grammar,
            ["add-field"],
            options={
                "add-field": {
                    "targetTypeName": "User",
                    "fieldName": "tags",
                    "fieldType": "[String!]!",
                }
            },
        ).grammar
        result = registry.generate(transformed, "graphql-sdl")

        assert result.format == "graphql"
        assert "field1: [ExampleType!]!" in result.output

    def test_negative_indent_rejected(
        self, registry: PluginRegistry, object_type_grammar: Grammar
    ) -> None:
        with pytest.raises(InvalidPluginOptionsError):
            registry.generate(object_type_grammar, "graphql-sdl", {"indentSize": -1})


class TestDirectives:
    @pytest.fixture
    def directive_grammar(self) -> Grammar:
        NT = nonterminal
        return Grammar.from_rules(
            "ObjectTypeDefinition",
            [
                ProductionRule(
                    name="ObjectTypeDefinition",
                    definition=sequence(terminal("type"), NT("Name"), optional(NT("DirectivesConst"))),
                ),
                ProductionRule(name="DirectivesConst", definition=repeat(NT("DirectiveConst"))),
                ProductionRule(
                    name="DirectiveConst",
                    definition=sequence(NT("At"), NT("Name"), optional(NT("ArgumentsConst"))),
                ),
                ProductionRule(
                    name="ArgumentsConst",
                    definition=sequence(NT("ParenL"), repeat(NT("ArgumentConst")), NT("ParenR")),
                ),
                ProductionRule(
                    name="ArgumentConst",
                    definition=sequence(NT("Name"), NT("Colon"), NT("ValueConst")),
                ),
                ProductionRule(
                    name="ValueConst", definition=one_of(NT("IntValue"), NT("StringValue"))
                ),
                ProductionRule(name="IntValue", definition=terminal("IntValue")),
                ProductionRule(name="StringValue", definition=terminal("StringValue")),
                ProductionRule(name="Name", definition=terminal("Name")),
            ],
        )

    def test_directive_use_and_stub(self, directive_grammar: Grammar) -> None:
        output = render(directive_grammar)
        blocks = output.split("\n\n")

        assert blocks[0] == "type ExampleType @example(arg: 42)"
        assert blocks[1].startswith(
            "directive @example(arg: Int) repeatable on QUERY | MUTATION | SUBSCRIPTION | FIELD"
        )
        assert blocks[1].endswith("INPUT_OBJECT | INPUT_FIELD_DEFINITION")
        assert blocks[2] == QUERY_STUB


def extension(rule: str, keyword: str) -> Grammar:
    return single(sequence(terminal("extend"), terminal(keyword), terminal("Name")), name=rule)


class TestTypeExtensions:
    @pytest.mark.parametrize(
        ("rule", "keyword", "stub"),
        [
            ("EnumTypeExtension", "enum", "enum ExampleEnum {\n  EXAMPLE\n}"),
            ("ScalarTypeExtension", "scalar", "scalar ExampleScalar"),
            ("UnionTypeExtension", "union", "union ExampleUnion = Query"),
            ("InputObjectTypeExtension", "input", "input ExampleInput {\n  _: Boolean\n}"),
        ],
    )
    def test_extended_type_is_stubbed(self, rule: str, keyword: str, stub: str) -> None:
        name = stub.split()[1]

        assert render(extension(rule, keyword)) == (
            f"extend {keyword} {name}\n\n{stub}\n\n{QUERY_STUB}"
        )

    def test_unformatted_stubs(self) -> None:
        enum = extension("EnumTypeExtension", "enum")
        union = extension("UnionTypeExtension", "union")

        assert render(enum, format=False) == (
            "extend enum ExampleEnum enum ExampleEnum{EXAMPLE} type Query{_:Boolean}"
        )
        assert render(union, format=False) == (
            "extend union ExampleUnion union ExampleUnion=Query type Query{_:Boolean}"
        )


class TestImplementsInterfaces:
    def test_interface_does_not_implement_itself(self) -> None:
        NT = nonterminal
        grammar = Grammar.from_rules(
            "ObjectTypeDefinition",
            [
                ProductionRule(
                    name="ObjectTypeDefinition",
                    definition=sequence(terminal("type"), NT("Name"), NT("ImplementsInterfaces")),
                ),
                ProductionRule(
                    name="InterfaceTypeDefinition",
                    definition=sequence(terminal("interface"), NT("Name"), NT("ImplementsInterfaces")),
                ),
                ProductionRule(
                    name="ImplementsInterfaces",
                    definition=sequence(terminal("implements"), NT("NamedType")),
                ),
                ProductionRule(name="NamedType", definition=NT("Name")),
                ProductionRule(name="Name", definition=terminal("Name")),
            ],
        )

        assert render(grammar) == (
            "type ExampleType implements ExampleInterface\n\n"
            "interface ExampleInterface implements ExampleBaseInterface\n\n"
            "interface ExampleBaseInterface {\n  _: Boolean\n}\n\n" + QUERY_STUB
        )


# =============================================================================
# Full GraphQL grammar
# =============================================================================


class TestFullGrammar:
    @pytest.fixture(scope="class")
    def output(self) -> str:
        return render(GRAPHQL_GRAMMAR)

    def test_single_schema_block(self, output: str) -> None:
        assert len(re.findall(r"\bschema\b[^{]*\{", output)) == 1
        assert "query: Query" in output

    def test_every_referenced_type_is_defined_once(self, output: str) -> None:
        assert "type ExampleType" in output
        for name in ("Query", "Mutation", "Subscription"):
            assert output.count(f"type {name} {{") == 1
        assert output.count("interface ExampleInterface") == 1
        assert output.count("input ExampleInput") == 1
        assert output.count("interface ExampleBaseInterface") == 1

    def test_interfaces_never_implement_themselves(self, output: str) -> None:
        assert re.search(r"interface ExampleInterface implements[^{]*\bExampleInterface\b", output) is None

    def test_directive_stub_emitted_once(self, output: str) -> None:
        assert output.count("directive @example(") == 1

    def test_deterministic(self, output: str) -> None:
        assert render(GRAPHQL_GRAMMAR) == output
