"""
Production rules and the Grammar container.

A Grammar is a named root symbol plus a map of production rules. The rule
graph may be mutually recursive through NonTerminal references; each rule's
own definition is a finite tree.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from frozendict import frozendict
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from .elements import GrammarElement


class ProductionRule(BaseModel):
    """
    A named rule mapping to one grammar element tree.

    Attributes:
        name: Rule name; must equal the key the rule is stored under
        definition: Element tree describing the rule
    """

    name: str
    definition: GrammarElement

    model_config = ConfigDict(frozen=True)


class Grammar(BaseModel):
    """
    A context-free grammar value.

    Grammars are immutable. Operations that "modify" a grammar return a new
    value. Root existence and referential integrity are reported by
    ``grammarkit.core.validator.validate_grammar`` rather than enforced here,
    so that broken grammars can still be inspected.

    Attributes:
        root: Name of the start rule
        rules: Read-only map of rules keyed by name, in presentation order
    """

    root: str
    rules: Mapping[str, ProductionRule] = Field(default_factory=frozendict)

    model_config = ConfigDict(frozen=True)

    @field_validator("rules", mode="after")
    @classmethod
    def freeze_rules(cls, rules: Mapping[str, ProductionRule]) -> frozendict[str, ProductionRule]:
        return frozendict(rules)

    @field_serializer("rules")
    def dump_rules(self, rules: Mapping[str, ProductionRule]) -> dict[str, ProductionRule]:
        return dict(rules)

    @model_validator(mode="after")
    def check_rule_keys(self) -> Grammar:
        for key, rule in self.rules.items():
            if key != rule.name:
                raise ValueError(f"Rule '{rule.name}' is stored under mismatched key '{key}'")
        return self

    @classmethod
    def from_rules(cls, root: str, rules: Iterable[ProductionRule]) -> Grammar:
        """Build a grammar from rules, keyed by their own names."""
        return cls(root=root, rules={rule.name: rule for rule in rules})

    @property
    def rule_names(self) -> list[str]:
        return list(self.rules.keys())

    def get_rule(self, name: str) -> ProductionRule | None:
        return self.rules.get(name)

    def has_rule(self, name: str) -> bool:
        return name in self.rules

    def with_rule(self, rule: ProductionRule) -> Grammar:
        """Return a new grammar with ``rule`` added or replaced in place."""
        rules = dict(self.rules)
        rules[rule.name] = rule
        return Grammar(root=self.root, rules=rules)

    def with_rules(self, rules: Iterable[ProductionRule], root: str | None = None) -> Grammar:
        """Return a new grammar with exactly ``rules`` (and optionally a new root)."""
        return Grammar.from_rules(root if root is not None else self.root, rules)
