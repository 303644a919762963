"""
Add-field transformer.

Grafts a field definition into an object type rule. The field is built at
the grammar level: the field's own name and description are instance data
and do not appear in the grammar, but its type string shapes the type
subtree (``[String!]!`` nests bracket/bang/bracket/bang around NamedType).

The field list container of the target is replaced by a list holding only
the new field. Adding several fields means applying the transformer once per
field; fields do not accumulate.
"""

from __future__ import annotations

import re

from pydantic import Field

from ...core.errors import TransformerError, TypeReferenceError
from ...core.ir import (
    Grammar,
    GrammarElement,
    List,
    NonTerminal,
    Optional,
    ProductionRule,
    Sequence,
    clone_element,
    nonterminal,
    optional,
    repeat,
    sequence,
)
from ..base import OptionsInput, PluginMetadata, PluginOptions, Transformer

_NAME_RE = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")

OBJECT_TYPE_RULE = "ObjectTypeDefinition"


class FieldArgument(PluginOptions):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    default_value: str | None = None


class FieldDirective(PluginOptions):
    name: str = Field(min_length=1)
    arguments: dict[str, str] = Field(default_factory=dict)


class AddFieldOptions(PluginOptions):
    target_type_name: str = Field(min_length=1)
    field_name: str = Field(min_length=1)
    field_type: str = Field(min_length=1)
    description: str | None = None
    arguments: list[FieldArgument] = Field(default_factory=list)
    directives: list[FieldDirective] = Field(default_factory=list)


# =============================================================================
# Type references
# =============================================================================


class TypeReferenceReader:
    """
    Recursive-descent reader for GraphQL type references.

        Type := (Name | "[" Type "]") "!"?
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _error(self, message: str) -> TypeReferenceError:
        return TypeReferenceError(f"{message} in type '{self.text}' at position {self.pos}")

    def read(self) -> GrammarElement:
        element = self.read_type()
        self._skip_whitespace()
        if self.pos != len(self.text):
            raise self._error(f"Unexpected '{self._peek()}'")
        return element

    def read_type(self) -> GrammarElement:
        self._skip_whitespace()
        parts: list[GrammarElement]

        if self._peek() == "[":
            self.pos += 1
            inner = self.read_type()
            self._skip_whitespace()
            if self._peek() != "]":
                raise self._error("Expected ']'")
            self.pos += 1
            parts = [nonterminal("BracketL"), inner, nonterminal("BracketR")]
        else:
            match = _NAME_RE.match(self.text, self.pos)
            if match is None:
                raise self._error("Expected a type name")
            self.pos = match.end()
            parts = [nonterminal("NamedType")]

        self._skip_whitespace()
        if self._peek() == "!":
            self.pos += 1
            parts.append(nonterminal("Bang"))

        if len(parts) == 1:
            return parts[0]
        return sequence(*parts)


def parse_type_reference(type_string: str) -> GrammarElement:
    """
    Build the grammar subtree for a GraphQL type string.

    Examples:
        - "String"     -> NamedType
        - "String!"    -> (NamedType Bang)
        - "[String]"   -> (BracketL NamedType BracketR)
        - "[String!]!" -> (BracketL (NamedType Bang) BracketR Bang)

    Raises:
        TypeReferenceError: If the string is not a valid type reference
    """
    return TypeReferenceReader(type_string).read()


# =============================================================================
# Field construction and splicing
# =============================================================================


def build_arguments_definition(arguments: list[FieldArgument]) -> GrammarElement:
    if not arguments:
        return optional(nonterminal("ArgumentsDefinition"))

    # The list repeats one input value shape, taken from the first argument.
    first = arguments[0]
    parts: list[GrammarElement] = [
        optional(nonterminal("Description")),
        nonterminal("Name"),
        nonterminal("Colon"),
        parse_type_reference(first.type),
    ]
    if first.default_value:
        parts.append(sequence(nonterminal("Equals"), nonterminal("ValueConst")))
    parts.append(optional(nonterminal("DirectivesConst")))

    return optional(
        sequence(nonterminal("ParenL"), repeat(sequence(*parts)), nonterminal("ParenR"))
    )


def build_field_definition(options: AddFieldOptions) -> GrammarElement:
    """FieldDefinition-shaped subtree for the configured field."""
    return sequence(
        optional(nonterminal("Description")),
        nonterminal("Name"),
        build_arguments_definition(options.arguments),
        nonterminal("Colon"),
        parse_type_reference(options.field_type),
        optional(nonterminal("DirectivesConst")),
    )


def is_fields_container(element: GrammarElement) -> bool:
    """True for Optional(FieldsDefinition) or an inlined Optional(BraceL List BraceR)."""
    if not isinstance(element, Optional):
        return False
    inner = element.element
    if isinstance(inner, NonTerminal):
        return inner.name == "FieldsDefinition"
    if isinstance(inner, Sequence) and len(inner.elements) == 3:
        first, middle, last = inner.elements
        return (
            first == NonTerminal(name="BraceL")
            and isinstance(middle, List)
            and last == NonTerminal(name="BraceR")
        )
    return False


def splice_field(rule: ProductionRule, field: GrammarElement) -> ProductionRule:
    """
    Replace (or append) the field list container of ``rule``.

    Raises:
        TransformerError: If the rule's definition is not a Sequence
    """
    if not isinstance(rule.definition, Sequence):
        raise TransformerError(f"Rule '{rule.name}' must have a Sequence definition to add fields")

    elements = [clone_element(e) for e in rule.definition.elements]
    container = optional(sequence(nonterminal("BraceL"), repeat(field), nonterminal("BraceR")))

    for index in range(len(elements) - 1, -1, -1):
        if is_fields_container(elements[index]):
            elements[index] = container
            break
    else:
        elements.append(container)

    return ProductionRule(name=rule.name, definition=Sequence(elements=tuple(elements)))


class AddFieldTransformer(Transformer):
    """Add a field definition to an object type rule."""

    metadata = PluginMetadata(
        name="Add Field",
        version="1.0.0",
        description="Adds a new field to an ObjectTypeDefinition",
    )
    options_model = AddFieldOptions

    def transform(self, grammar: Grammar, options: OptionsInput | None = None) -> Grammar:
        if options is None:
            raise TransformerError(
                "add-field requires targetTypeName, fieldName and fieldType options"
            )
        opts: AddFieldOptions = self.resolve_options(options)

        target = grammar.get_rule(opts.target_type_name) or grammar.get_rule(OBJECT_TYPE_RULE)
        if target is None:
            raise TransformerError(
                f"Type '{opts.target_type_name}' not found in grammar rules, "
                f"and {OBJECT_TYPE_RULE} rule not found"
            )

        updated = splice_field(target, build_field_definition(opts))

        rules = [
            updated
            if rule.name == target.name
            else ProductionRule(name=rule.name, definition=clone_element(rule.definition))
            for rule in grammar.rules.values()
        ]
        return grammar.with_rules(rules)
