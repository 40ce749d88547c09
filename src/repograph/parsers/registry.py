"""Extractor registry for repograph."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeGuard

from loguru import logger

from ..config.defaults import DEFAULT_LANGUAGE, LANGUAGE_MAPPINGS
from ..core.exceptions import ParsingError, UnsupportedLanguageError
from ..core.models import SUPPORTED_LANGUAGES, ParserResult
from .base import LanguageParser
from .go import GoParser
from .java import JavaParser
from .javascript import JavaScriptParser, TypeScriptParser
from .python import PythonParser
from .rust import RustParser

# Parser classes for lazy instantiation, keyed by language
PARSER_CLASSES: dict[str, type] = {
    "typescript": TypeScriptParser,
    "javascript": JavaScriptParser,
    "python": PythonParser,
    "java": JavaParser,
    "go": GoParser,
    "rust": RustParser,
}


def is_supported_language(language: object) -> TypeGuard[str]:
    """True if *language* is one of the six supported language tags."""
    return isinstance(language, str) and language in SUPPORTED_LANGUAGES


def get_language_from_file(file_path: str | Path) -> str:
    """Map a file path to a language by extension (unknown -> typescript)."""
    suffix = Path(str(file_path)).suffix.lower()
    return LANGUAGE_MAPPINGS.get(suffix, DEFAULT_LANGUAGE)


class ParserRegistry:
    """Owns one lazily-created extractor instance per language."""

    def __init__(self, use_tree_sitter: bool = False) -> None:
        """Initialize parser registry with lazy loading.

        Args:
            use_tree_sitter: Serve the tree-sitter extractor for JavaScript and
                TypeScript when its grammar can be loaded
        """
        self.use_tree_sitter = use_tree_sitter
        self._parsers: dict[str, LanguageParser] = {}

    def get_parser(self, language: str, strict: bool = False) -> LanguageParser:
        """Get the extractor for a language (same instance on every call).

        Args:
            language: One of the supported language tags
            strict: Raise instead of falling back for unsupported tags

        Returns:
            Extractor instance (typescript extractor for unsupported tags)
        """
        if not is_supported_language(language):
            if strict:
                raise UnsupportedLanguageError(
                    f"Unsupported language: {language!r}",
                    context={"supported": list(SUPPORTED_LANGUAGES)},
                )
            logger.debug(f"Unsupported language {language!r}, using {DEFAULT_LANGUAGE}")
            language = DEFAULT_LANGUAGE

        parser = self._parsers.get(language)
        if parser is None:
            parser = self._create_parser(language)
            self._parsers[language] = parser
            logger.debug(f"Lazily instantiated parser for {language}")
        return parser

    def _create_parser(self, language: str) -> LanguageParser:
        if self.use_tree_sitter and language in ("javascript", "typescript"):
            try:
                from .treesitter import TreeSitterParser

                return TreeSitterParser(language)
            except ParsingError as e:
                logger.warning(f"{e}; using heuristic {language} extractor")
        return PARSER_CLASSES[language]()

    def get_parser_for_file(self, file_path: str | Path) -> LanguageParser:
        """Get the extractor for a file path, by extension."""
        return self.get_parser(get_language_from_file(file_path))

    def parse(
        self, code: str, file_path: str | Path, language: str | None = None
    ) -> ParserResult:
        """Parse *code* with the extractor for *language* (or the file's extension)."""
        if language is None:
            language = get_language_from_file(file_path)
        return self.get_parser(language).parse(code, file_path)

    def get_supported_languages(self) -> list[str]:
        return list(SUPPORTED_LANGUAGES)

    def get_supported_extensions(self) -> list[str]:
        return list(LANGUAGE_MAPPINGS)

    def get_parser_info(self) -> dict[str, dict[str, Any]]:
        """Describe the extractor that serves (or would serve) each language."""
        info: dict[str, dict[str, Any]] = {}
        for language in SUPPORTED_LANGUAGES:
            parser = self._parsers.get(language)
            info[language] = {
                "class": (
                    parser.__class__.__name__
                    if parser is not None
                    else PARSER_CLASSES[language].__name__
                ),
                "extensions": [
                    ext for ext, lang in LANGUAGE_MAPPINGS.items() if lang == language
                ],
                "instantiated": parser is not None,
            }
        return info

    def reset(self) -> None:
        """Drop all cached extractor instances."""
        self._parsers.clear()


# Process-wide default registry; pass an explicit ParserRegistry where possible
_registry: ParserRegistry | None = None


def get_parser_registry() -> ParserRegistry:
    """Get the default parser registry, creating it on first use."""
    global _registry
    if _registry is None:
        _registry = ParserRegistry()
    return _registry


def get_parser(language: str) -> LanguageParser:
    """Get an extractor from the default registry."""
    return get_parser_registry().get_parser(language)
