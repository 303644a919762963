"""Built-in grammar transformers."""

from .add_description import AddDescriptionOptions, AddDescriptionTransformer
from .add_field import (
    AddFieldOptions,
    AddFieldTransformer,
    FieldArgument,
    FieldDirective,
    parse_type_reference,
)
from .normalize import NormalizeOptions, NormalizeTransformer
from .simplify import SimplifyOptions, SimplifyTransformer
from .validate import ValidateOptions, ValidateTransformer

__all__ = [
    "AddDescriptionOptions",
    "AddDescriptionTransformer",
    "AddFieldOptions",
    "AddFieldTransformer",
    "FieldArgument",
    "FieldDirective",
    "parse_type_reference",
    "NormalizeOptions",
    "NormalizeTransformer",
    "SimplifyOptions",
    "SimplifyTransformer",
    "ValidateOptions",
    "ValidateTransformer",
]
