"""
Structured-data form of a grammar.

Shape::

    {
        "root": "Document",
        "rules": {
            "Document": {"name": "Document", "definition": {"kind": "List", ...}},
            ...
        },
        "metadata": {"generatedAt": "...", "ruleCount": 3}   # optional
    }

Regex-valued terminal patterns have no native JSON form and are encoded as
``{"source": "<regex>", "flags": "<letters>"}``. Decoding recompiles them, so
a round trip reproduces an equal grammar. Literal string patterns stay plain
strings.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from ..errors import GrammarFormatError
from .grammar import Grammar


def build_metadata(grammar: Grammar) -> dict[str, Any]:
    """Metadata block attached to serialized grammars on request."""
    return {
        "generatedAt": datetime.now(UTC).isoformat(),
        "ruleCount": len(grammar.rules),
    }


def grammar_to_dict(grammar: Grammar, *, include_metadata: bool = False) -> dict[str, Any]:
    """
    Encode a grammar as JSON-compatible structured data.

    Args:
        grammar: Grammar to encode
        include_metadata: Attach a ``metadata`` block (timestamp, rule count)

    Returns:
        Dict containing only JSON-compatible values
    """
    data: dict[str, Any] = grammar.model_dump(mode="json")
    if include_metadata:
        data["metadata"] = build_metadata(grammar)
    return data


def grammar_from_dict(data: Mapping[str, Any]) -> Grammar:
    """
    Decode structured data into a Grammar.

    A ``metadata`` key is accepted and ignored.

    Raises:
        GrammarFormatError: If the data does not describe a valid grammar value
    """
    if not isinstance(data, Mapping):
        raise GrammarFormatError(f"Grammar data must be a mapping, got {type(data).__name__}")

    payload = {key: value for key, value in data.items() if key != "metadata"}
    try:
        return Grammar.model_validate(payload)
    except ValidationError as e:
        raise GrammarFormatError(f"Invalid grammar data: {e}") from e


def grammar_to_json(
    grammar: Grammar,
    *,
    indent: int | None = 2,
    include_metadata: bool = False,
) -> str:
    """Encode a grammar as a JSON document (compact when ``indent`` is None)."""
    data = grammar_to_dict(grammar, include_metadata=include_metadata)
    if indent is None:
        return json.dumps(data, separators=(",", ":"))
    return json.dumps(data, indent=indent)


def grammar_from_json(text: str) -> Grammar:
    """
    Decode a JSON document into a Grammar.

    Raises:
        GrammarFormatError: If the text is not JSON or not a valid grammar
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GrammarFormatError(f"Invalid grammar JSON: {e}") from e
    return grammar_from_dict(data)
