"""
The GraphQL grammar (September 2025 edition) as a grammarkit Grammar value.

Sections follow the GraphQL specification appendix: lexical tokens and
punctuators, the executable document syntax, type references, directives and
the type system. Ignored tokens (whitespace, commas, comments) are left to a
lexer and not modelled here.
"""

from __future__ import annotations

import re

from .ir import Grammar, GrammarElement, ProductionRule
from .ir import nonterminal as NT
from .ir import one_of as Or
from .ir import optional as Opt
from .ir import repeat as Lst
from .ir import sequence as Seq
from .ir import terminal as T

# Punctuator rule name -> token
PUNCTUATORS: dict[str, str] = {
    "Bang": "!",
    "Dollar": "$",
    "Ampersand": "&",
    "ParenL": "(",
    "ParenR": ")",
    "Spread": "...",
    "Colon": ":",
    "Equals": "=",
    "At": "@",
    "BracketL": "[",
    "BracketR": "]",
    "BraceL": "{",
    "Pipe": "|",
    "BraceR": "}",
}

TYPE_DEFINITION_RULES: tuple[str, ...] = (
    "ScalarTypeDefinition",
    "ObjectTypeDefinition",
    "InterfaceTypeDefinition",
    "UnionTypeDefinition",
    "EnumTypeDefinition",
    "InputObjectTypeDefinition",
)

EXECUTABLE_DIRECTIVE_LOCATIONS: tuple[str, ...] = (
    "QUERY",
    "MUTATION",
    "SUBSCRIPTION",
    "FIELD",
    "FRAGMENT_DEFINITION",
    "FRAGMENT_SPREAD",
    "INLINE_FRAGMENT",
    "VARIABLE_DEFINITION",
)

TYPE_SYSTEM_DIRECTIVE_LOCATIONS: tuple[str, ...] = (
    "SCHEMA",
    "SCALAR",
    "OBJECT",
    "FIELD_DEFINITION",
    "ARGUMENT_DEFINITION",
    "INTERFACE",
    "UNION",
    "ENUM",
    "ENUM_VALUE",
    "INPUT_OBJECT",
    "INPUT_FIELD_DEFINITION",
)


def _extension(keyword: str, body: str, *, implements: bool = False) -> GrammarElement:
    """``extend <keyword> Name ...`` alternatives shared by the type extensions."""
    head = (T("extend"), T(keyword), NT("Name"))
    if implements:
        return Or(
            Seq(*head, Opt(NT("ImplementsInterfaces")), Opt(NT("DirectivesConst")), NT(body)),
            Seq(*head, Opt(NT("ImplementsInterfaces")), NT("DirectivesConst")),
            Seq(*head, NT("ImplementsInterfaces")),
        )
    return Or(
        Seq(*head, Opt(NT("DirectivesConst")), NT(body)),
        Seq(*head, NT("DirectivesConst")),
    )


_DEFINITIONS: dict[str, GrammarElement] = {
    # ------------------------------------------------------------------
    # Lexical tokens
    # ------------------------------------------------------------------
    "Name": T("Name", re.compile(r"[_A-Za-z][_0-9A-Za-z]*")),
    "IntValue": T("IntValue"),
    "FloatValue": T("FloatValue"),
    "StringValue": T("StringValue"),
    "BooleanValue": T("BooleanValue", re.compile(r"true|false")),
    "NullValue": T("NullValue", "null"),
    # Punctuators
    **{name: T(token) for name, token in PUNCTUATORS.items()},
    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------
    "Document": Lst(NT("Definition")),
    "Definition": Or(NT("ExecutableDefinition"), NT("TypeSystemDefinitionOrExtension")),
    "ExecutableDefinition": Or(NT("OperationDefinition"), NT("FragmentDefinition")),
    # Operations
    "OperationDefinition": Or(
        Seq(
            Opt(NT("Description")),
            NT("OperationType"),
            Opt(NT("Name")),
            Opt(NT("VariablesDefinition")),
            Opt(NT("Directives")),
            NT("SelectionSet"),
        ),
        # Shorthand query
        NT("SelectionSet"),
    ),
    "OperationType": Or(T("query"), T("mutation"), T("subscription")),
    # Selection sets
    "SelectionSet": Seq(NT("BraceL"), Lst(NT("Selection")), NT("BraceR")),
    "Selection": Or(NT("Field"), NT("FragmentSpread"), NT("InlineFragment")),
    # Fields
    "Field": Seq(
        Opt(NT("Alias")),
        NT("Name"),
        Opt(NT("Arguments")),
        Opt(NT("Directives")),
        Opt(NT("SelectionSet")),
    ),
    "Alias": Seq(NT("Name"), NT("Colon")),
    # Arguments
    "Arguments": Seq(NT("ParenL"), Lst(NT("Argument")), NT("ParenR")),
    "Argument": Seq(NT("Name"), NT("Colon"), NT("Value")),
    "ArgumentsConst": Seq(NT("ParenL"), Lst(NT("ArgumentConst")), NT("ParenR")),
    "ArgumentConst": Seq(NT("Name"), NT("Colon"), NT("ValueConst")),
    # Fragments
    "FragmentSpread": Seq(NT("Spread"), NT("FragmentName"), Opt(NT("Directives"))),
    "InlineFragment": Seq(
        NT("Spread"),
        Opt(NT("TypeCondition")),
        Opt(NT("Directives")),
        NT("SelectionSet"),
    ),
    "FragmentDefinition": Seq(
        Opt(NT("Description")),
        T("fragment"),
        NT("FragmentName"),
        NT("TypeCondition"),
        Opt(NT("Directives")),
        NT("SelectionSet"),
    ),
    # Any Name except "on"
    "FragmentName": Seq(NT("Name")),
    "TypeCondition": Seq(T("on"), NT("NamedType")),
    # Input values
    "Value": Or(
        NT("Variable"),
        NT("IntValue"),
        NT("FloatValue"),
        NT("StringValue"),
        NT("BooleanValue"),
        NT("NullValue"),
        NT("EnumValue"),
        NT("ListValue"),
        NT("ObjectValue"),
    ),
    "ValueConst": Or(
        NT("IntValue"),
        NT("FloatValue"),
        NT("StringValue"),
        NT("BooleanValue"),
        NT("NullValue"),
        NT("EnumValue"),
        NT("ListValueConst"),
        NT("ObjectValueConst"),
    ),
    # Any Name except true, false or null
    "EnumValue": NT("Name"),
    "ListValue": Or(
        Seq(NT("BracketL"), NT("BracketR")),
        Seq(NT("BracketL"), Lst(NT("Value")), NT("BracketR")),
    ),
    "ListValueConst": Or(
        Seq(NT("BracketL"), NT("BracketR")),
        Seq(NT("BracketL"), Lst(NT("ValueConst")), NT("BracketR")),
    ),
    "ObjectValue": Or(
        Seq(NT("BraceL"), NT("BraceR")),
        Seq(NT("BraceL"), Lst(NT("ObjectField")), NT("BraceR")),
    ),
    "ObjectValueConst": Or(
        Seq(NT("BraceL"), NT("BraceR")),
        Seq(NT("BraceL"), Lst(NT("ObjectFieldConst")), NT("BraceR")),
    ),
    "ObjectField": Seq(NT("Name"), NT("Colon"), NT("Value")),
    "ObjectFieldConst": Seq(NT("Name"), NT("Colon"), NT("ValueConst")),
    # Variables
    "VariablesDefinition": Seq(NT("ParenL"), Lst(NT("VariableDefinition")), NT("ParenR")),
    "VariableDefinition": Seq(
        Opt(NT("Description")),
        NT("Variable"),
        NT("Colon"),
        NT("Type"),
        Opt(NT("DefaultValue")),
        Opt(NT("DirectivesConst")),
    ),
    "Variable": Seq(NT("Dollar"), NT("Name")),
    "DefaultValue": Seq(NT("Equals"), NT("ValueConst")),
    # Type references
    "Type": Or(NT("NamedType"), NT("ListType"), NT("NonNullType")),
    "NamedType": NT("Name"),
    "ListType": Seq(NT("BracketL"), NT("Type"), NT("BracketR")),
    "NonNullType": Or(
        Seq(NT("NamedType"), NT("Bang")),
        Seq(NT("ListType"), NT("Bang")),
    ),
    # Directives
    "Directives": Lst(NT("Directive")),
    "Directive": Seq(NT("At"), NT("Name"), Opt(NT("Arguments"))),
    "DirectivesConst": Lst(NT("DirectiveConst")),
    "DirectiveConst": Seq(NT("At"), NT("Name"), Opt(NT("ArgumentsConst"))),
    # ------------------------------------------------------------------
    # Type system
    # ------------------------------------------------------------------
    "TypeSystemDefinitionOrExtension": Or(
        NT("TypeSystemDefinition"), NT("TypeSystemExtension")
    ),
    "TypeSystemDefinition": Or(
        NT("SchemaDefinition"), NT("TypeDefinition"), NT("DirectiveDefinition")
    ),
    "TypeSystemExtension": Or(NT("SchemaExtension"), NT("TypeExtension")),
    "Description": NT("StringValue"),
    # Schema
    "SchemaDefinition": Seq(
        Opt(NT("Description")),
        T("schema"),
        Opt(NT("DirectivesConst")),
        NT("BraceL"),
        Lst(NT("RootOperationTypeDefinition")),
        NT("BraceR"),
    ),
    "RootOperationTypeDefinition": Seq(NT("OperationType"), NT("Colon"), NT("NamedType")),
    "SchemaExtension": Seq(
        T("extend"),
        T("schema"),
        Opt(NT("DirectivesConst")),
        Opt(Seq(NT("BraceL"), Lst(NT("RootOperationTypeDefinition")), NT("BraceR"))),
    ),
    # Types
    "TypeDefinition": Or(*(NT(name) for name in TYPE_DEFINITION_RULES)),
    "TypeExtension": Or(
        NT("ScalarTypeExtension"),
        NT("ObjectTypeExtension"),
        NT("InterfaceTypeExtension"),
        NT("UnionTypeExtension"),
        NT("EnumTypeExtension"),
        NT("InputObjectTypeExtension"),
    ),
    # Scalars
    "ScalarTypeDefinition": Seq(
        Opt(NT("Description")),
        T("scalar"),
        NT("Name"),
        Opt(NT("DirectivesConst")),
    ),
    "ScalarTypeExtension": Seq(T("extend"), T("scalar"), NT("Name"), NT("DirectivesConst")),
    # Objects
    "ObjectTypeDefinition": Seq(
        Opt(NT("Description")),
        T("type"),
        NT("Name"),
        Opt(NT("ImplementsInterfaces")),
        Opt(NT("DirectivesConst")),
        Opt(NT("FieldsDefinition")),
    ),
    "ImplementsInterfaces": Seq(
        T("implements"),
        Opt(NT("Ampersand")),
        NT("NamedType"),
        Opt(Lst(Seq(NT("Ampersand"), NT("NamedType")))),
    ),
    "FieldsDefinition": Seq(NT("BraceL"), Lst(NT("FieldDefinition")), NT("BraceR")),
    "FieldDefinition": Seq(
        Opt(NT("Description")),
        NT("Name"),
        Opt(NT("ArgumentsDefinition")),
        NT("Colon"),
        NT("Type"),
        Opt(NT("DirectivesConst")),
    ),
    "ArgumentsDefinition": Seq(NT("ParenL"), Lst(NT("InputValueDefinition")), NT("ParenR")),
    "InputValueDefinition": Seq(
        Opt(NT("Description")),
        NT("Name"),
        NT("Colon"),
        NT("Type"),
        Opt(NT("DefaultValue")),
        Opt(NT("DirectivesConst")),
    ),
    "ObjectTypeExtension": _extension("type", "FieldsDefinition", implements=True),
    # Interfaces
    "InterfaceTypeDefinition": Seq(
        Opt(NT("Description")),
        T("interface"),
        NT("Name"),
        Opt(NT("ImplementsInterfaces")),
        Opt(NT("DirectivesConst")),
        Opt(NT("FieldsDefinition")),
    ),
    "InterfaceTypeExtension": _extension("interface", "FieldsDefinition", implements=True),
    # Unions
    "UnionTypeDefinition": Seq(
        Opt(NT("Description")),
        T("union"),
        NT("Name"),
        Opt(NT("DirectivesConst")),
        Opt(NT("UnionMemberTypes")),
    ),
    "UnionMemberTypes": Seq(
        NT("Equals"),
        Opt(NT("Pipe")),
        NT("NamedType"),
        Opt(Lst(Seq(NT("Pipe"), NT("NamedType")))),
    ),
    "UnionTypeExtension": _extension("union", "UnionMemberTypes"),
    # Enums
    "EnumTypeDefinition": Seq(
        Opt(NT("Description")),
        T("enum"),
        NT("Name"),
        Opt(NT("DirectivesConst")),
        Opt(NT("EnumValuesDefinition")),
    ),
    "EnumValuesDefinition": Seq(NT("BraceL"), Lst(NT("EnumValueDefinition")), NT("BraceR")),
    "EnumValueDefinition": Seq(
        Opt(NT("Description")),
        NT("EnumValue"),
        Opt(NT("DirectivesConst")),
    ),
    "EnumTypeExtension": _extension("enum", "EnumValuesDefinition"),
    # Input objects
    "InputObjectTypeDefinition": Seq(
        Opt(NT("Description")),
        T("input"),
        NT("Name"),
        Opt(NT("DirectivesConst")),
        Opt(NT("InputFieldsDefinition")),
    ),
    "InputFieldsDefinition": Seq(NT("BraceL"), Lst(NT("InputValueDefinition")), NT("BraceR")),
    "InputObjectTypeExtension": _extension("input", "InputFieldsDefinition"),
    # Directive definitions
    "DirectiveDefinition": Seq(
        Opt(NT("Description")),
        T("directive"),
        T("@"),
        NT("Name"),
        Opt(NT("ArgumentsDefinition")),
        Opt(T("repeatable")),
        T("on"),
        NT("DirectiveLocations"),
    ),
    "DirectiveLocations": Seq(
        Opt(NT("Pipe")),
        NT("DirectiveLocation"),
        Opt(Lst(Seq(NT("Pipe"), NT("DirectiveLocation")))),
    ),
    "DirectiveLocation": Or(
        NT("ExecutableDirectiveLocation"), NT("TypeSystemDirectiveLocation")
    ),
    "ExecutableDirectiveLocation": Or(*(T(loc) for loc in EXECUTABLE_DIRECTIVE_LOCATIONS)),
    "TypeSystemDirectiveLocation": Or(*(T(loc) for loc in TYPE_SYSTEM_DIRECTIVE_LOCATIONS)),
}

GRAPHQL_GRAMMAR: Grammar = Grammar.from_rules(
    "Document",
    (ProductionRule(name=name, definition=definition) for name, definition in _DEFINITIONS.items()),
)
