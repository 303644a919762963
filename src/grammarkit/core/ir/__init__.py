"""
grammarkit Intermediate Representation (IR) types.

The grammar model: six element node types forming a closed tagged union,
production rules, the Grammar container, and its structured-data form.
"""

from .elements import (
    ELEMENT_TYPES,
    GrammarElement,
    List,
    NonTerminal,
    OneOf,
    Optional,
    Sequence,
    Terminal,
    children,
    clone_element,
    decode_pattern,
    encode_pattern,
    iter_elements,
    nonterminal,
    one_of,
    optional,
    referenced_rule_names,
    repeat,
    sequence,
    terminal,
)
from .grammar import Grammar, ProductionRule
from .serialization import (
    build_metadata,
    grammar_from_dict,
    grammar_from_json,
    grammar_to_dict,
    grammar_to_json,
)

__all__ = [
    # Elements
    "ELEMENT_TYPES",
    "GrammarElement",
    "List",
    "NonTerminal",
    "OneOf",
    "Optional",
    "Sequence",
    "Terminal",
    # Builders
    "nonterminal",
    "one_of",
    "optional",
    "repeat",
    "sequence",
    "terminal",
    # Traversal
    "children",
    "clone_element",
    "iter_elements",
    "referenced_rule_names",
    # Patterns
    "decode_pattern",
    "encode_pattern",
    # Grammar
    "Grammar",
    "ProductionRule",
    # Serialization
    "build_metadata",
    "grammar_from_dict",
    "grammar_from_json",
    "grammar_to_dict",
    "grammar_to_json",
]
