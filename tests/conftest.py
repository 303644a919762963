"""Shared pytest fixtures for grammarkit tests."""

import re

import pytest

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
from grammarkit.plugins import PluginRegistry, register_builtin_plugins

NAME_PATTERN = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")


def make_grammar(root: str, **definitions) -> Grammar:
    """Build a grammar from keyword arguments mapping rule names to definitions."""
    return Grammar.from_rules(
        root,
        [ProductionRule(name=name, definition=definition) for name, definition in definitions.items()],
    )


@pytest.fixture
def registry() -> PluginRegistry:
    """Return a fresh registry with the built-in plugins."""
    return register_builtin_plugins(PluginRegistry())


@pytest.fixture
def document_grammar() -> Grammar:
    """Return a small document grammar: Document := Definition+."""
    return make_grammar(
        "Document",
        Document=repeat(nonterminal("Definition")),
        Definition=one_of(terminal("query"), terminal("mutation")),
    )


@pytest.fixture
def object_type_grammar() -> Grammar:
    """Return a grammar describing object types with a field list."""
    return make_grammar(
        "ObjectTypeDefinition",
        ObjectTypeDefinition=sequence(
            optional(nonterminal("Description")),
            terminal("type"),
            nonterminal("Name"),
            optional(nonterminal("FieldsDefinition")),
        ),
        FieldsDefinition=sequence(
            nonterminal("BraceL"),
            repeat(nonterminal("FieldDefinition")),
            nonterminal("BraceR"),
        ),
        FieldDefinition=sequence(
            optional(nonterminal("Description")),
            nonterminal("Name"),
            nonterminal("Colon"),
            nonterminal("Type"),
        ),
        Type=one_of(nonterminal("NamedType"), nonterminal("ListType")),
        NamedType=nonterminal("Name"),
        ListType=sequence(nonterminal("BracketL"), nonterminal("Type"), nonterminal("BracketR")),
        Description=nonterminal("StringValue"),
        StringValue=terminal("StringValue"),
        Name=terminal("Name", NAME_PATTERN),
    )


@pytest.fixture
def schema_grammar() -> Grammar:
    """Return a grammar with only a schema definition rule."""
    return make_grammar(
        "SchemaDefinition",
        SchemaDefinition=sequence(
            terminal("schema"),
            nonterminal("BraceL"),
            repeat(nonterminal("RootOperationTypeDefinition")),
            nonterminal("BraceR"),
        ),
    )
