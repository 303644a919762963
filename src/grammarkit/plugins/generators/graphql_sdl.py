"""
GraphQL SDL generator.

Renders one concrete sentence of the grammar as GraphQL SDL text. The
grammar describes a language; this generator manufactures a schema written
in it, with placeholder names and values.

A bare ``Name`` terminal carries no hint of what it names, so an immutable
GenerationContext is threaded through the recursion. It records the rules
being rendered and whether we are inside a field list, a field, an argument
list, a directive, a description or an enum value. Name placeholders are
chosen from it.

Choices made while rendering:

- OneOf renders its first alternative
- Optional renders its element, except an Optional(Description) when
  descriptions are disabled, and an optional part that refers back to a rule
  already being rendered (``Field -> SelectionSet -> Field``)
- List renders one repetition; a list of RootOperationTypeDefinition renders
  the query, mutation and subscription entries

Every type name of any kind and every directive name used by the output is
recorded. A closure pass then emits stub definitions for the ones the output
does not define, so the text stands on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import assert_never

from pydantic import Field

from ...core.errors import RenderError
from ...core.graphql_grammar import (
    EXECUTABLE_DIRECTIVE_LOCATIONS,
    PUNCTUATORS,
    TYPE_DEFINITION_RULES,
    TYPE_SYSTEM_DIRECTIVE_LOCATIONS,
)
from ...core.ir import (
    Grammar,
    GrammarElement,
    List,
    NonTerminal,
    OneOf,
    Optional,
    Sequence,
    Terminal,
    referenced_rule_names,
)
from ..base import Generator, OptionsInput, PluginMetadata, PluginOptions


class GraphQLSDLOptions(PluginOptions):
    include_descriptions: bool = True
    format: bool = True
    indent_size: int = Field(default=2, ge=0)


# =============================================================================
# Vocabulary
# =============================================================================

KEYWORDS = frozenset(
    {
        "schema",
        "type",
        "interface",
        "union",
        "enum",
        "input",
        "scalar",
        "query",
        "mutation",
        "subscription",
        "implements",
        "extend",
        "directive",
        "on",
        "repeatable",
        "fragment",
    }
)

VALUE_PLACEHOLDERS = {
    "StringValue": '"example"',
    "IntValue": "42",
    "FloatValue": "3.14",
    "BooleanValue": "true",
    "NullValue": "null",
    "EnumValue": "EXAMPLE",
}

DESCRIPTION_PLACEHOLDER = '"Example description"'

# Literal kind -> argument type recorded for directive stubs
VALUE_SCALARS = {
    "StringValue": "String",
    "IntValue": "Int",
    "FloatValue": "Float",
    "BooleanValue": "Boolean",
}

BUILTIN_SCALARS = frozenset({"String", "Int", "Float", "Boolean", "ID"})

ROOT_OPERATIONS = (
    ("query", "Query"),
    ("mutation", "Mutation"),
    ("subscription", "Subscription"),
)

DIRECTIVE_PLACEHOLDER = "example"
ARGUMENT_PLACEHOLDER = "arg"
DEFAULT_ARGUMENT_SCALAR = "Int"

# Type definition rule -> (placeholder name, kind). Extensions reuse the name.
TYPE_NAMES: dict[str, tuple[str, str]] = {
    "ScalarTypeDefinition": ("ExampleScalar", "scalar"),
    "ObjectTypeDefinition": ("ExampleType", "object"),
    "InterfaceTypeDefinition": ("ExampleInterface", "interface"),
    "UnionTypeDefinition": ("ExampleUnion", "union"),
    "EnumTypeDefinition": ("ExampleEnum", "enum"),
    "InputObjectTypeDefinition": ("ExampleInput", "input"),
}

TYPE_EXTENSION_NAMES: dict[str, tuple[str, str]] = {
    "ScalarTypeExtension": ("ExampleScalar", "scalar"),
    "ObjectTypeExtension": ("ExampleType", "object"),
    "InterfaceTypeExtension": ("ExampleInterface", "interface"),
    "UnionTypeExtension": ("ExampleUnion", "union"),
    "EnumTypeExtension": ("ExampleEnum", "enum"),
    "InputObjectTypeExtension": ("ExampleInput", "input"),
}

# Names for a Name appearing directly in these rules
RULE_NAMES = {
    "Alias": "alias",
    "Field": "field",
    "Variable": "var",
    "FragmentName": "ExampleFragment",
    "OperationDefinition": "ExampleOperation",
}

DIRECTIVE_DEFINITION_NAME = "exampleDirective"
BASE_INTERFACE_NAME = "ExampleBaseInterface"

FIELD_LIST_RULES = frozenset({"FieldsDefinition", "InputFieldsDefinition", "EnumValuesDefinition"})
DIRECTIVE_RULES = frozenset({"Directive", "DirectiveConst", "Directives", "DirectivesConst"})
INPUT_TYPE_RULES = frozenset({"InputFieldsDefinition", "VariableDefinition"})
VALUE_BLOCK_RULES = frozenset({"ObjectValue", "ObjectValueConst"})
# Brace blocks in these rules hold something other than field definitions
NON_FIELD_BLOCK_RULES = frozenset(
    {"SelectionSet", "SchemaDefinition", "SchemaExtension"} | VALUE_BLOCK_RULES
)

# Recursion limit for non-optional rule references
MAX_DEPTH = 100

_WORD_CHAR = re.compile(r'[A-Za-z0-9_"]')
_NO_SPACE_AFTER = frozenset("@([$")
_NO_SPACE_BEFORE = frozenset(")]:!(,")


# =============================================================================
# Context and state
# =============================================================================


@dataclass(frozen=True)
class GenerationContext:
    """
    Position of the renderer in the grammar.

    Attributes:
        rule_path: Rules being rendered, innermost last (lexical rules excluded)
        in_fields: Inside a field list; each list entry is one field
        in_field: Inside a single field (or enum value / input field) entry
        in_description: Inside a Description
        in_arguments: Inside an argument definition list
        in_directive: Inside a directive reference
        in_enum_value: Inside an EnumValue
        field_count: Number of fields started on this branch
    """

    rule_path: tuple[str, ...] = ()
    in_fields: bool = False
    in_field: bool = False
    in_description: bool = False
    in_arguments: bool = False
    in_directive: bool = False
    in_enum_value: bool = False
    field_count: int = 0

    @property
    def current_rule(self) -> str | None:
        return self.rule_path[-1] if self.rule_path else None

    def inside(self, *rule_names: str) -> bool:
        return any(name in self.rule_path for name in rule_names)

    def enter_rule(self, name: str) -> GenerationContext:
        ctx = replace(self, rule_path=(*self.rule_path, name))
        if name == "ArgumentsDefinition":
            return replace(ctx, in_arguments=True)
        if name in DIRECTIVE_RULES:
            return replace(ctx, in_directive=True)
        if name == "EnumValue":
            return replace(ctx, in_enum_value=True)
        if name == "Description":
            return replace(ctx, in_description=True)
        return ctx

    def enter_fields(self) -> GenerationContext:
        return replace(self, in_fields=True)

    def enter_field(self) -> GenerationContext:
        return replace(self, in_fields=False, in_field=True, field_count=self.field_count + 1)

    def enter_arguments(self) -> GenerationContext:
        return replace(self, in_arguments=True)


# Stub order in the closure pass
TYPE_KINDS = ("object", "interface", "input", "scalar", "union", "enum")


@dataclass
class RenderState:
    """Names referenced and defined during one render, in first-seen order."""

    # kind -> referenced type names
    types: dict[str, dict[str, None]] = field(
        default_factory=lambda: {kind: {} for kind in TYPE_KINDS}
    )
    # directive name -> argument name -> scalar type
    directives: dict[str, dict[str, str]] = field(default_factory=dict)
    defined_types: dict[str, str] = field(default_factory=dict)
    defined_directives: set[str] = field(default_factory=set)

    def reference(self, kind: str, name: str) -> str:
        self.types[kind][name] = None
        return name

    def define(self, kind: str, name: str) -> str:
        self.defined_types.setdefault(name, kind)
        return name


# =============================================================================
# Renderer
# =============================================================================


class SDLRenderer:
    """Single-use renderer for one grammar and one set of options."""

    def __init__(self, grammar: Grammar, options: GraphQLSDLOptions):
        self.grammar = grammar
        self.options = options
        self.state = RenderState()

    # -- output helpers --------------------------------------------------------

    def join(self, parts: list[str]) -> str:
        """
        Join rendered fragments.

        Formatted output separates tokens with single spaces, tight around
        ``( ) [ ] @ $ : !``. Unformatted output only keeps the spaces needed
        to separate two word-like tokens.
        """
        out = ""
        for part in parts:
            if not part:
                continue
            if out and self._needs_space(out[-1], part[0]):
                out += " "
            out += part
        return out

    def _needs_space(self, prev: str, nxt: str) -> bool:
        if not self.options.format:
            return bool(_WORD_CHAR.match(prev) and _WORD_CHAR.match(nxt))
        return prev not in _NO_SPACE_AFTER and nxt not in _NO_SPACE_BEFORE

    def block(self, entries: list[str]) -> str:
        if not self.options.format:
            return "{" + " ".join(entries) + "}"
        if not entries:
            return "{}"
        pad = " " * self.options.indent_size
        lines = [pad + line for entry in entries for line in entry.split("\n")]
        return "{\n" + "\n".join(lines) + "\n}"

    # -- dispatch --------------------------------------------------------------

    def render(self, element: GrammarElement, ctx: GenerationContext) -> str:
        if isinstance(element, Terminal):
            return self.render_terminal(element, ctx)
        if isinstance(element, NonTerminal):
            return self.render_nonterminal(element.name, ctx)
        if isinstance(element, Sequence):
            return self.render_sequence(element, ctx)
        if isinstance(element, OneOf):
            return self.render(element.options[0], ctx) if element.options else ""
        if isinstance(element, Optional):
            return "" if self.omit_optional(element, ctx) else self.render(element.element, ctx)
        if isinstance(element, List):
            return self.join(self.list_entries(element, ctx))
        assert_never(element)

    def render_rule(self, name: str) -> str:
        return self.render_nonterminal(name, GenerationContext())

    # -- terminals -------------------------------------------------------------

    def render_terminal(self, terminal: Terminal, ctx: GenerationContext) -> str:
        name = terminal.name
        if name in KEYWORDS:
            return name
        if len(name) == 1 or name in ("...", "@"):
            return name
        if name == "Name":
            return self.resolve_name(ctx)
        if name in VALUE_PLACEHOLDERS:
            if ctx.in_directive and ctx.inside("Argument", "ArgumentConst"):
                scalar = VALUE_SCALARS.get(name)
                if scalar:
                    args = self.state.directives.setdefault(DIRECTIVE_PLACEHOLDER, {})
                    args[ARGUMENT_PLACEHOLDER] = scalar
            if name == "StringValue" and ctx.in_description:
                return DESCRIPTION_PLACEHOLDER
            return VALUE_PLACEHOLDERS[name]
        if isinstance(terminal.pattern, str):
            return terminal.pattern
        return name

    def resolve_name(self, ctx: GenerationContext) -> str:
        """Choose a placeholder for a bare Name from the surrounding context."""
        rule = ctx.current_rule
        state = self.state

        if ctx.in_enum_value:
            return "EXAMPLE"
        if rule in ("Directive", "DirectiveConst"):
            state.directives.setdefault(DIRECTIVE_PLACEHOLDER, {})
            return DIRECTIVE_PLACEHOLDER
        if rule in ("Argument", "ArgumentConst"):
            if ctx.in_directive:
                args = state.directives.setdefault(DIRECTIVE_PLACEHOLDER, {})
                args.setdefault(ARGUMENT_PLACEHOLDER, DEFAULT_ARGUMENT_SCALAR)
            return ARGUMENT_PLACEHOLDER
        if rule in ("ObjectField", "ObjectFieldConst"):
            return "key"
        if rule == "NamedType":
            return self.resolve_type_reference(ctx)
        if ctx.in_arguments:
            return ARGUMENT_PLACEHOLDER
        if ctx.in_field:
            return f"field{ctx.field_count}"
        if rule in RULE_NAMES:
            return RULE_NAMES[rule]
        if rule == "DirectiveDefinition":
            state.defined_directives.add(DIRECTIVE_DEFINITION_NAME)
            return DIRECTIVE_DEFINITION_NAME
        if rule in TYPE_NAMES:
            name, kind = TYPE_NAMES[rule]
            return state.define(kind, name)
        if rule in TYPE_EXTENSION_NAMES:
            name, kind = TYPE_EXTENSION_NAMES[rule]
            return state.reference(kind, name)
        if rule is not None and len(ctx.rule_path) == 1:
            # A custom block rule rendered at top level names itself
            return state.define("object", rule)
        return "example"

    def resolve_type_reference(self, ctx: GenerationContext) -> str:
        if ctx.inside("ImplementsInterfaces"):
            # An interface may not implement itself
            if ctx.inside("InterfaceTypeDefinition", "InterfaceTypeExtension"):
                return self.state.reference("interface", BASE_INTERFACE_NAME)
            return self.state.reference("interface", "ExampleInterface")
        if ctx.inside("UnionMemberTypes"):
            return self.state.reference("object", "ExampleType")
        if ctx.in_arguments or ctx.inside(*INPUT_TYPE_RULES):
            return self.state.reference("input", "ExampleInput")
        return self.state.reference("object", "ExampleType")

    # -- rule references -------------------------------------------------------

    def render_nonterminal(self, name: str, ctx: GenerationContext) -> str:
        rule = self.grammar.get_rule(name)
        if rule is None:
            return PUNCTUATORS.get(name, "")
        if isinstance(rule.definition, Terminal):
            # Lexical rules do not change the context
            return self.render_terminal(rule.definition, ctx)
        if len(ctx.rule_path) >= MAX_DEPTH:
            raise RenderError(
                f"Recursion deeper than {MAX_DEPTH} rules while rendering '{name}': "
                f"{' -> '.join(ctx.rule_path[-5:])} -> ..."
            )
        return self.render(rule.definition, ctx.enter_rule(name))

    # -- combinators -----------------------------------------------------------

    def omit_optional(self, element: Optional, ctx: GenerationContext) -> bool:
        inner = element.element
        if not self.options.include_descriptions and inner == NonTerminal(name="Description"):
            return True
        return any(name in ctx.rule_path for name in referenced_rule_names(inner))

    def list_entries(self, element: List, ctx: GenerationContext) -> list[str]:
        if element.element == NonTerminal(name="RootOperationTypeDefinition"):
            return [
                self.join([operation, ":", self.state.reference("object", type_name)])
                for operation, type_name in ROOT_OPERATIONS
            ]
        if ctx.in_fields:
            item = self.render(element.element, ctx.enter_field())
        else:
            item = self.render(element.element, ctx)
        return [item] if item else []

    def body_entries(self, element: GrammarElement, ctx: GenerationContext) -> list[str]:
        """Entries contributed by one child between a block's braces."""
        if isinstance(element, List):
            return self.list_entries(element, ctx)
        if isinstance(element, Optional):
            if self.omit_optional(element, ctx):
                return []
            return self.body_entries(element.element, ctx)
        text = self.render(element, ctx)
        return [text] if text else []

    def render_sequence(self, element: Sequence, ctx: GenerationContext) -> str:
        children = element.elements
        if self.is_argument_list(element, ctx):
            ctx = ctx.enter_arguments()

        span = self.block_span(children, ctx)
        if span is None:
            return self.join([self.render(child, ctx) for child in children])

        start, end = span
        body_ctx = ctx.enter_fields() if self.is_field_list(element, ctx) else ctx
        entries: list[str] = []
        for child in children[start + 1 : end]:
            entries.extend(self.body_entries(child, body_ctx))

        head = [self.render(child, ctx) for child in children[:start]]
        tail = [self.render(child, ctx) for child in children[end + 1 :]]
        return self.join([*head, self.block(entries), *tail])

    # -- shape detection -------------------------------------------------------

    @staticmethod
    def _is_token(element: GrammarElement, rule_name: str, token: str) -> bool:
        if isinstance(element, NonTerminal):
            return element.name == rule_name
        if isinstance(element, Terminal):
            return element.name == token
        return False

    def _is_delimited_list(self, element: Sequence, open_rule: str, close_rule: str) -> bool:
        children = element.elements
        return (
            len(children) == 3
            and self._is_token(children[0], open_rule, PUNCTUATORS[open_rule])
            and isinstance(children[1], List)
            and self._is_token(children[2], close_rule, PUNCTUATORS[close_rule])
        )

    def block_span(
        self, children: tuple[GrammarElement, ...], ctx: GenerationContext
    ) -> tuple[int, int] | None:
        """Indices of the braces of a block laid out one entry per line."""
        if ctx.inside(*VALUE_BLOCK_RULES):
            return None
        start = next(
            (i for i, child in enumerate(children) if self._is_token(child, "BraceL", "{")),
            None,
        )
        if start is None:
            return None
        for end in range(len(children) - 1, start, -1):
            if self._is_token(children[end], "BraceR", "}"):
                return start, end
        return None

    def is_field_list(self, element: Sequence, ctx: GenerationContext) -> bool:
        if ctx.in_field or ctx.in_directive or ctx.inside(*NON_FIELD_BLOCK_RULES):
            return False
        if ctx.current_rule in FIELD_LIST_RULES:
            return True
        return self._is_delimited_list(element, "BraceL", "BraceR")

    def is_argument_list(self, element: Sequence, ctx: GenerationContext) -> bool:
        if not ctx.in_field or ctx.in_directive or ctx.in_arguments:
            return False
        return self._is_delimited_list(element, "ParenL", "ParenR")

    # -- document --------------------------------------------------------------

    def type_stub(self, keyword: str, name: str) -> str:
        entry = self.join(["_", ":", "Boolean"])
        return self.join([keyword, name, self.block([entry])])

    def kind_stub(self, kind: str, name: str) -> str:
        """Smallest valid definition of a type of the given kind."""
        if kind == "scalar":
            return self.join(["scalar", name])
        if kind == "union":
            return self.join(["union", name, "=", "Query"])
        if kind == "enum":
            return self.join(["enum", name, self.block([VALUE_PLACEHOLDERS["EnumValue"]])])
        keyword = "type" if kind == "object" else kind
        return self.type_stub(keyword, name)

    def directive_stub(self, name: str, arguments: dict[str, str]) -> str:
        parts = ["directive", "@", name]
        if arguments:
            parts.append("(")
            for index, (arg_name, arg_type) in enumerate(arguments.items()):
                if index:
                    parts.append(",")
                parts.extend([arg_name, ":", arg_type])
            parts.append(")")
        parts.extend(["repeatable", "on"])
        locations = EXECUTABLE_DIRECTIVE_LOCATIONS + TYPE_SYSTEM_DIRECTIVE_LOCATIONS
        for index, location in enumerate(locations):
            if index:
                parts.append("|")
            parts.append(location)
        return self.join(parts)

    def closure(self) -> list[str]:
        """Stub definitions for every referenced name left undefined."""
        state = self.state
        stubs: list[str] = []

        for kind in TYPE_KINDS:
            for name in state.types[kind]:
                if name in state.defined_types or name in BUILTIN_SCALARS:
                    continue
                stubs.append(self.kind_stub(kind, name))
                state.define(kind, name)

        for name, arguments in state.directives.items():
            if name not in state.defined_directives:
                stubs.append(self.directive_stub(name, arguments))
                state.defined_directives.add(name)

        if state.defined_types and "Query" not in state.defined_types:
            stubs.append(self.type_stub("type", "Query"))
            state.define("object", "Query")

        return stubs

    def render_document(self) -> str:
        blocks: list[str] = []
        if self.grammar.has_rule("SchemaDefinition"):
            blocks.append(self.render_rule("SchemaDefinition"))
        for rule_name in TYPE_DEFINITION_RULES:
            if self.grammar.has_rule(rule_name):
                blocks.append(self.render_rule(rule_name))
        if not blocks and self.grammar.has_rule(self.grammar.root):
            blocks.append(self.render_rule(self.grammar.root))

        blocks = [b for b in blocks if b]
        blocks.extend(self.closure())
        return ("\n\n" if self.options.format else " ").join(blocks)


class GraphQLSDLGenerator(Generator):
    """Render a grammar as an example GraphQL SDL document."""

    metadata = PluginMetadata(
        name="GraphQL SDL",
        version="1.0.0",
        description="Generates GraphQL Schema Definition Language from grammar",
    )
    options_model = GraphQLSDLOptions

    def output_format(self) -> str:
        return "graphql"

    def generate(self, grammar: Grammar, options: OptionsInput | None = None) -> str:
        opts: GraphQLSDLOptions = self.resolve_options(options)
        return SDLRenderer(grammar, opts).render_document()
