"""
Structural validation for grammarkit grammars.

Checks:
- The root rule exists (error)
- Every NonTerminal anywhere in the grammar names a defined rule (error)
- Every rule is reachable from the root (warning only)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .ir import Grammar, referenced_rule_names


class ValidationResult(BaseModel):
    """
    Outcome of validating a grammar.

    Attributes:
        valid: True when there are no errors (warnings never affect this)
        errors: Hard failures (missing root, dangling references)
        warnings: Advisory findings (unreferenced rules)
    """

    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)


def collect_references(grammar: Grammar) -> set[str]:
    """Names referenced by NonTerminals in any rule's definition."""
    referenced: set[str] = set()
    for rule in grammar.rules.values():
        referenced.update(referenced_rule_names(rule.definition))
    return referenced


def reachable_rules(grammar: Grammar) -> set[str]:
    """
    Names of rules reachable from the root through NonTerminal references.

    Cycles are expected and handled. References to undefined rules are not
    followed. The root is included only if it is defined.
    """
    if grammar.root not in grammar.rules:
        return set()

    seen = {grammar.root}
    pending = [grammar.root]
    while pending:
        rule = grammar.rules[pending.pop()]
        for name in referenced_rule_names(rule.definition):
            if name in grammar.rules and name not in seen:
                seen.add(name)
                pending.append(name)
    return seen


def validate_root(grammar: Grammar) -> list[str]:
    if grammar.root not in grammar.rules:
        return [f'Root rule "{grammar.root}" not found']
    return []


def validate_references(grammar: Grammar) -> list[str]:
    """Errors for every referenced rule name missing from the grammar."""
    missing = collect_references(grammar) - set(grammar.rules)
    return [f'Missing reference to rule "{name}"' for name in sorted(missing)]


def find_unreferenced(grammar: Grammar) -> list[str]:
    """Warnings for rules that cannot be reached from the root."""
    reachable = reachable_rules(grammar)
    return [f'Unreferenced rule "{name}"' for name in grammar.rules if name not in reachable]


def validate_grammar(
    grammar: Grammar,
    *,
    check_missing_references: bool = True,
    check_unreferenced: bool = True,
) -> ValidationResult:
    """
    Validate a grammar's structural invariants.

    Args:
        grammar: Grammar to check
        check_missing_references: Report dangling NonTerminal references
        check_unreferenced: Report rules unreachable from the root

    Returns:
        ValidationResult; ``valid`` is False only when errors were found
    """
    errors = validate_root(grammar)
    warnings: list[str] = []

    if check_missing_references:
        errors.extend(validate_references(grammar))

    if check_unreferenced:
        warnings.extend(find_unreferenced(grammar))

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
