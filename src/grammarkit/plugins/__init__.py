"""
Plugin system for grammarkit.

Parsers turn text into grammars, transformers rewrite grammars and
generators render them. All three are run through a PluginRegistry.
"""

from .base import (
    GenerateResult,
    Generator,
    Parser,
    ParseResult,
    Plugin,
    PluginInfo,
    PluginKind,
    PluginMetadata,
    PluginOptions,
    PluginRegistration,
    TransformResult,
    Transformer,
)
from .registry import PluginRegistry, get_registry, register_builtin_plugins

__all__ = [
    "Plugin",
    "PluginKind",
    "PluginMetadata",
    "PluginOptions",
    "PluginRegistration",
    "PluginInfo",
    "Parser",
    "Transformer",
    "Generator",
    "TransformResult",
    "GenerateResult",
    "ParseResult",
    "PluginRegistry",
    "get_registry",
    "register_builtin_plugins",
]
