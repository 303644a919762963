"""Built-in grammar generators."""

from .graphql_sdl import GenerationContext, GraphQLSDLGenerator, GraphQLSDLOptions
from .json import JSONGenerator, JSONOptions
from .typescript import TypeScriptGenerator, TypeScriptOptions

__all__ = [
    "GenerationContext",
    "GraphQLSDLGenerator",
    "GraphQLSDLOptions",
    "JSONGenerator",
    "JSONOptions",
    "TypeScriptGenerator",
    "TypeScriptOptions",
]
