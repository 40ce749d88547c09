"""Language extractors for repograph."""

from .base import LanguageParser, LineRuleParser, normalize_signature
from .go import GoParser
from .java import JavaParser
from .javascript import JavaScriptParser, TypeScriptParser
from .python import PythonParser
from .registry import (
    ParserRegistry,
    get_language_from_file,
    get_parser,
    get_parser_registry,
    is_supported_language,
)
from .rust import RustParser

__all__ = [
    "GoParser",
    "JavaParser",
    "JavaScriptParser",
    "LanguageParser",
    "LineRuleParser",
    "ParserRegistry",
    "PythonParser",
    "RustParser",
    "TypeScriptParser",
    "get_language_from_file",
    "get_parser",
    "get_parser_registry",
    "is_supported_language",
    "normalize_signature",
]
