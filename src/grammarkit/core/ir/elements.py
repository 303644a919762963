"""
Grammar element types for grammarkit IR.

A grammar element is a node of a closed tagged union with six variants:

- Terminal: a lexical symbol, optionally carrying a literal or regex pattern
- NonTerminal: a reference to another production rule by name
- Sequence: ordered conjunction
- OneOf: ordered alternation (first match wins for consumers)
- Optional: zero-or-one
- List: one-or-more

All nodes are frozen pydantic models and child collections are tuples, so a
constructed tree cannot be changed in place. The ``kind`` field is the
discriminant used in structured data.
"""

from __future__ import annotations

import re
import typing
from collections.abc import Iterator, Mapping
from typing import Annotated, Any, Union, assert_never

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

# ---------------------------------------------------------------------------
# Regex pattern encoding
# ---------------------------------------------------------------------------

# Flag letters follow the usual regex literal conventions.
_FLAG_LETTERS: tuple[tuple[str, re.RegexFlag], ...] = (
    ("i", re.IGNORECASE),
    ("m", re.MULTILINE),
    ("s", re.DOTALL),
    ("x", re.VERBOSE),
    ("a", re.ASCII),
)


def encode_pattern(pattern: re.Pattern[str]) -> dict[str, str]:
    """Encode a compiled regex as ``{"source": ..., "flags": ...}``."""
    flags = "".join(letter for letter, flag in _FLAG_LETTERS if pattern.flags & flag)
    return {"source": pattern.pattern, "flags": flags}


def decode_pattern(data: Mapping[str, Any]) -> re.Pattern[str]:
    """
    Decode a ``{"source": ..., "flags": ...}`` mapping back into a compiled regex.

    Raises:
        ValueError: If the mapping is malformed or the flags are unknown
    """
    source = data.get("source")
    if not isinstance(source, str):
        raise ValueError("Regex pattern encoding requires a string 'source'")
    letters = data.get("flags", "") or ""
    if not isinstance(letters, str):
        raise ValueError("Regex pattern 'flags' must be a string")

    known = dict(_FLAG_LETTERS)
    flags = 0
    for letter in letters:
        if letter not in known:
            raise ValueError(f"Unknown regex flag '{letter}'")
        flags |= known[letter]
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise ValueError(f"Invalid regex pattern {source!r}: {e}") from e


# ---------------------------------------------------------------------------
# Node types
# ---------------------------------------------------------------------------


class Terminal(BaseModel):
    """
    A lexical symbol.

    Examples:
        - Terminal(name="{"): punctuator, rendered verbatim
        - Terminal(name="type"): keyword
        - Terminal(name="Name", pattern=re.compile("[_A-Za-z][_0-9A-Za-z]*"))
        - Terminal(name="NullValue", pattern="null"): exact literal
    """

    kind: typing.Literal["Terminal"] = "Terminal"
    name: str
    pattern: str | re.Pattern[str] | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("pattern", mode="before")
    @classmethod
    def decode_regex_pattern(cls, v: Any) -> Any:
        """Accept the structured ``{"source", "flags"}`` regex encoding."""
        if isinstance(v, Mapping):
            return decode_pattern(v)
        return v

    @field_serializer("pattern", when_used="json")
    def encode_regex_pattern(self, v: str | re.Pattern[str] | None) -> Any:
        if isinstance(v, re.Pattern):
            return encode_pattern(v)
        return v

    @property
    def is_regex(self) -> bool:
        return isinstance(self.pattern, re.Pattern)

    def __str__(self) -> str:
        return f'"{self.name}"'


class NonTerminal(BaseModel):
    """Reference to another production rule by name."""

    kind: typing.Literal["NonTerminal"] = "NonTerminal"
    name: str

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.name


class Sequence(BaseModel):
    """Ordered conjunction of elements."""

    kind: typing.Literal["Sequence"] = "Sequence"
    elements: tuple[GrammarElement, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "(" + " ".join(str(e) for e in self.elements) + ")"


class OneOf(BaseModel):
    """Ordered alternation. Consumers assume first-match semantics."""

    kind: typing.Literal["OneOf"] = "OneOf"
    options: tuple[GrammarElement, ...] = ()

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "(" + " | ".join(str(o) for o in self.options) + ")"


class Optional(BaseModel):
    """Zero-or-one occurrence of an element."""

    kind: typing.Literal["Optional"] = "Optional"
    element: GrammarElement

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.element}?"


class List(BaseModel):
    """One-or-more repetitions of an element."""

    kind: typing.Literal["List"] = "List"
    element: GrammarElement

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.element}+"


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

GrammarElement = Annotated[
    Union[Terminal, NonTerminal, Sequence, OneOf, Optional, List],
    Field(discriminator="kind"),
]

ELEMENT_TYPES: tuple[type[BaseModel], ...] = (
    Terminal,
    NonTerminal,
    Sequence,
    OneOf,
    Optional,
    List,
)

# Rebuild models for recursive forward references
Sequence.model_rebuild()
OneOf.model_rebuild()
Optional.model_rebuild()
List.model_rebuild()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def terminal(name: str, pattern: str | re.Pattern[str] | None = None) -> Terminal:
    return Terminal(name=name, pattern=pattern)


def nonterminal(name: str) -> NonTerminal:
    return NonTerminal(name=name)


def sequence(*elements: GrammarElement) -> Sequence:
    return Sequence(elements=elements)


def one_of(*options: GrammarElement) -> OneOf:
    return OneOf(options=options)


def optional(element: GrammarElement) -> Optional:
    return Optional(element=element)


def repeat(element: GrammarElement) -> List:
    return List(element=element)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def children(element: GrammarElement) -> tuple[GrammarElement, ...]:
    """Return the direct child elements of a node (rule references are leaves)."""
    if isinstance(element, (Terminal, NonTerminal)):
        return ()
    if isinstance(element, Sequence):
        return element.elements
    if isinstance(element, OneOf):
        return element.options
    if isinstance(element, (Optional, List)):
        return (element.element,)
    assert_never(element)


def iter_elements(element: GrammarElement) -> Iterator[GrammarElement]:
    """
    Walk an element tree in pre-order.

    Does not follow NonTerminal references into other rules, so the walk
    always terminates even for mutually recursive grammars.
    """
    stack = [element]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(children(current)))


def referenced_rule_names(element: GrammarElement) -> list[str]:
    """Names of all NonTerminals in an element tree, in first-seen order."""
    names: list[str] = []
    for node in iter_elements(element):
        if isinstance(node, NonTerminal) and node.name not in names:
            names.append(node.name)
    return names


def clone_element(element: GrammarElement) -> GrammarElement:
    """
    Structurally deep-clone an element tree.

    The result is equal to the input but shares no node object with it.
    """
    if isinstance(element, Terminal):
        return Terminal(name=element.name, pattern=element.pattern)
    if isinstance(element, NonTerminal):
        return NonTerminal(name=element.name)
    if isinstance(element, Sequence):
        return Sequence(elements=tuple(clone_element(e) for e in element.elements))
    if isinstance(element, OneOf):
        return OneOf(options=tuple(clone_element(o) for o in element.options))
    if isinstance(element, Optional):
        return Optional(element=clone_element(element.element))
    if isinstance(element, List):
        return List(element=clone_element(element.element))
    assert_never(element)
