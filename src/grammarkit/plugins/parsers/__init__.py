"""Built-in grammar parsers."""

from .graphql_sdl import GraphQLSDLParser, GraphQLSDLParserOptions, scan_definitions

__all__ = ["GraphQLSDLParser", "GraphQLSDLParserOptions", "scan_definitions"]
