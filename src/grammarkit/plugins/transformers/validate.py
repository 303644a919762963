"""
Validate transformer.

Runs the grammar validator as a pipeline stage. The grammar is returned
unchanged (the same object) or the stage fails.
"""

from __future__ import annotations

from ...core.errors import GrammarValidationError
from ...core.ir import Grammar
from ...core.validator import ValidationResult, validate_grammar
from ..base import OptionsInput, PluginMetadata, PluginOptions, Transformer


class ValidateOptions(PluginOptions):
    throw_on_error: bool = False
    check_unreferenced: bool = True
    check_missing_references: bool = True
    # Only consulted when throw_on_error is set
    fail_on_warnings: bool = False


def format_failure(result: ValidationResult, include_warnings: bool) -> str:
    problems = list(result.errors)
    if include_warnings:
        problems.extend(result.warnings)
    return "Grammar validation failed:\n" + "\n".join(f"  - {p}" for p in problems)


class ValidateTransformer(Transformer):
    """Identity stage that enforces structural validity."""

    metadata = PluginMetadata(
        name="Validate",
        version="1.0.0",
        description="Validates grammar structure without changing it",
    )
    options_model = ValidateOptions

    def transform(self, grammar: Grammar, options: OptionsInput | None = None) -> Grammar:
        opts: ValidateOptions = self.resolve_options(options)
        result = validate_grammar(
            grammar,
            check_missing_references=opts.check_missing_references,
            check_unreferenced=opts.check_unreferenced,
        )

        if opts.throw_on_error:
            if not result.valid:
                raise GrammarValidationError(
                    format_failure(result, opts.fail_on_warnings), result=result
                )
            if opts.fail_on_warnings and result.warnings:
                raise GrammarValidationError(format_failure(result, True), result=result)

        return grammar
