"""
GraphQL SDL parser.

This parser does not build a syntax tree. It scans the top-level definition
keywords of a GraphQL document and returns the part of the GraphQL grammar
those definitions need:

    Document   := Definition+
    Definition := <one alternative per kind of definition found>

plus every GraphQL rule reachable from those definitions.
"""

from __future__ import annotations

import re
from typing import assert_never

from pydantic import Field

from ...core.errors import GrammarValidationError
from ...core.graphql_grammar import GRAPHQL_GRAMMAR
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
    nonterminal,
    one_of,
    referenced_rule_names,
    repeat,
)
from ...core.validator import validate_grammar
from ..base import OptionsInput, Parser, PluginMetadata, PluginOptions


class GraphQLSDLParserOptions(PluginOptions):
    strict: bool = True
    # Keep description slots in the returned grammar
    preserve_comments: bool = True
    validate_grammar: bool = Field(default=True, alias="validate")


DEFINITION_RULES = {
    "schema": "SchemaDefinition",
    "type": "ObjectTypeDefinition",
    "interface": "InterfaceTypeDefinition",
    "union": "UnionTypeDefinition",
    "enum": "EnumTypeDefinition",
    "input": "InputObjectTypeDefinition",
    "scalar": "ScalarTypeDefinition",
    "directive": "DirectiveDefinition",
    "query": "OperationDefinition",
    "mutation": "OperationDefinition",
    "subscription": "OperationDefinition",
    "fragment": "FragmentDefinition",
}

EXTENSION_RULES = {
    "schema": "SchemaExtension",
    "type": "ObjectTypeExtension",
    "interface": "InterfaceTypeExtension",
    "union": "UnionTypeExtension",
    "enum": "EnumTypeExtension",
    "input": "InputObjectTypeExtension",
    "scalar": "ScalarTypeExtension",
}

# Strings (block strings first) and comments, removed before scanning
_IGNORED = re.compile(r'"""(?:\\"""|.)*?"""|"(?:\\.|[^"\\\n])*"|#[^\n]*', re.DOTALL)
_TOKEN = re.compile(r"[_A-Za-z][_0-9A-Za-z]*|[{}()\[\]]")

_OPENERS = "{(["
_CLOSERS = "})]"


def scan_definitions(text: str) -> list[str]:
    """
    Grammar rule names for the top-level definitions in ``text``, in
    first-seen order without duplicates.
    """
    source = _IGNORED.sub(" ", text)
    found: list[str] = []
    depth = 0
    in_definition = False
    extending = False

    for match in _TOKEN.finditer(source):
        token = match.group()
        if token in _OPENERS:
            if depth == 0 and token == "{" and not in_definition:
                # Shorthand query: { field }
                found.append("OperationDefinition")
            depth += 1
            continue
        if token in _CLOSERS:
            depth = max(depth - 1, 0)
            if depth == 0 and token == "}":
                in_definition = False
            continue
        if depth:
            continue

        if token == "extend":
            extending = True
            continue
        rules = EXTENSION_RULES if extending else DEFINITION_RULES
        if token in rules:
            found.append(rules[token])
            in_definition = True
        extending = False

    return list(dict.fromkeys(found))


def strip_descriptions(element: GrammarElement) -> GrammarElement:
    """Copy of ``element`` without Optional(Description) slots in sequences."""
    description = Optional(element=NonTerminal(name="Description"))
    if isinstance(element, (Terminal, NonTerminal)):
        return clone_element(element)
    if isinstance(element, Sequence):
        return Sequence(
            elements=tuple(strip_descriptions(e) for e in element.elements if e != description)
        )
    if isinstance(element, OneOf):
        return OneOf(options=tuple(strip_descriptions(o) for o in element.options))
    if isinstance(element, Optional):
        return Optional(element=strip_descriptions(element.element))
    if isinstance(element, List):
        return List(element=strip_descriptions(element.element))
    assert_never(element)


def build_grammar(definition_rules: list[str], preserve_comments: bool = True) -> Grammar:
    """Document/Definition rules for ``definition_rules`` plus their rule closure."""
    source: dict[str, GrammarElement] = {}
    for name, rule in GRAPHQL_GRAMMAR.rules.items():
        if name in ("Document", "Definition"):
            continue
        definition = rule.definition
        source[name] = (
            clone_element(definition) if preserve_comments else strip_descriptions(definition)
        )

    needed: set[str] = set()
    pending = list(definition_rules)
    while pending:
        name = pending.pop()
        if name in needed or name not in source:
            continue
        needed.add(name)
        pending.extend(referenced_rule_names(source[name]))

    rules = [
        ProductionRule(name="Document", definition=repeat(nonterminal("Definition"))),
        ProductionRule(
            name="Definition",
            definition=one_of(*(nonterminal(name) for name in definition_rules)),
        ),
    ]
    rules.extend(
        ProductionRule(name=name, definition=definition)
        for name, definition in source.items()
        if name in needed
    )
    return Grammar.from_rules("Document", rules)


class GraphQLSDLParser(Parser):
    """Map GraphQL SDL text to the grammar subset it uses."""

    metadata = PluginMetadata(
        name="GraphQL SDL",
        version="1.0.0",
        description="Parses GraphQL Schema Definition Language into a grammar",
    )
    options_model = GraphQLSDLParserOptions

    def input_format(self) -> str:
        return "graphql"

    def parse(self, text: str, options: OptionsInput | None = None) -> Grammar:
        """
        Raises:
            ValueError: In strict mode, for empty input or input without any
                recognisable definition
            GrammarValidationError: If validation is enabled and fails
        """
        opts: GraphQLSDLParserOptions = self.resolve_options(options)

        if opts.strict and not text.strip():
            raise ValueError("Empty GraphQL SDL input")

        definitions = scan_definitions(text)
        if not definitions:
            if opts.strict:
                raise ValueError("No GraphQL definitions found in input")
            grammar = Grammar.from_rules(
                GRAPHQL_GRAMMAR.root,
                (
                    ProductionRule(name=rule.name, definition=clone_element(rule.definition))
                    for rule in GRAPHQL_GRAMMAR.rules.values()
                ),
            )
        else:
            grammar = build_grammar(definitions, preserve_comments=opts.preserve_comments)

        if opts.validate_grammar:
            result = validate_grammar(grammar, check_unreferenced=False)
            if not result.valid:
                raise GrammarValidationError(
                    "Parsed grammar is invalid:\n" + "\n".join(result.errors), result=result
                )

        return grammar
