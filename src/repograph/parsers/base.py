"""Extractor contract and the shared line-rule driver.

Every heuristic extractor is a table of *line rules*: plain functions that
look at one trimmed source line and append whatever symbols or dependencies
they recognise.  ``LineRuleParser`` runs the table over each line in order,
then runs the language's call detector on the same line.  Symbols never span
more than the line they were found on.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from ..core.models import (
    CURRENT_FILE,
    Dependency,
    DependencyKind,
    Location,
    ParseMetadata,
    ParserResult,
    Symbol,
    SymbolKind,
    Visibility,
)

# First ``identifier(`` on a line; deliberately crude
CALL_PATTERN = re.compile(r"(\w+)\s*\(")


@runtime_checkable
class LanguageParser(Protocol):
    """Capability contract shared by every extractor."""

    language: str

    def parse(self, code: str, file_path: str | Path = "") -> ParserResult:
        """Extract symbols and dependencies from *code*; never raises on bad input."""
        ...

    def get_supported_languages(self) -> list[str]:
        ...

    def get_supported_extensions(self) -> list[str]:
        ...


@dataclass
class LineContext:
    """One source line plus the result lists the rules append to."""

    lines: list[str]
    index: int  # 0-based position in ``lines``
    symbols: list[Symbol]
    dependencies: list[Dependency]
    state: dict[str, Any] = field(default_factory=dict)  # Per-parse scratch space

    @property
    def line(self) -> str:
        return self.lines[self.index]

    @property
    def trimmed(self) -> str:
        return self.line.strip()

    @property
    def line_no(self) -> int:
        return self.index + 1

    def column_of(self, token: str) -> int:
        """1-based column of the first occurrence of *token* (0 when absent)."""
        return self.line.find(token) + 1

    def add_symbol(
        self,
        name: str,
        kind: SymbolKind,
        column: int,
        **attrs: Any,
    ) -> Symbol:
        symbol = Symbol(
            name=name,
            kind=kind,
            start_line=self.line_no,
            end_line=self.line_no,
            start_column=column,
            end_column=len(self.line),
            **attrs,
        )
        self.symbols.append(symbol)
        return symbol

    def add_dependency(
        self,
        target: str,
        kind: DependencyKind,
        column: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Dependency | None:
        target = target.strip()
        if not target:
            return None
        location = Location(self.line_no, column) if column is not None else None
        dependency = Dependency(
            source_name=CURRENT_FILE,
            target_name=target,
            kind=kind,
            metadata=metadata,
            source_location=location,
        )
        self.dependencies.append(dependency)
        return dependency


LineRule = Callable[[LineContext], None]
CallGuard = Callable[[LineContext], bool]


def normalize_signature(params: str | None) -> str:
    """Normalize raw parameter text to ``(a, b, ...)``; ``()`` when empty."""
    if not params:
        return "()"
    parts = [p.strip() for p in params.strip().strip("(){}").split(",")]
    return "(" + ", ".join(p for p in parts if p) + ")"


def leading_comment(
    lines: Sequence[str], index: int, markers: Iterable[str] = ("//",)
) -> str | None:
    """Collect the comment block immediately above ``lines[index]``."""
    markers = tuple(sorted(markers, key=len, reverse=True))
    collected: list[str] = []
    i = index - 1
    while i >= 0:
        text = lines[i].strip()
        if not text or not text.startswith(markers):
            break
        collected.append(text)
        i -= 1

    cleaned = []
    for text in reversed(collected):
        for marker in markers:
            if text.startswith(marker):
                text = text[len(marker) :]
                break
        text = text.removesuffix("*/").strip()
        if text:
            cleaned.append(text)
    return "\n".join(cleaned) or None


class LineRuleParser:
    """Runs a language's rule table over source text, one line at a time."""

    def __init__(
        self,
        language: str,
        rules: Sequence[LineRule],
        call_guard: CallGuard | None = None,
        extensions: Sequence[str] = (),
    ) -> None:
        self.language = language
        self._rules = tuple(rules)
        self._call_guard = call_guard
        self._extensions = list(extensions)

    def parse(self, code: str, file_path: str | Path = "") -> ParserResult:
        start = time.perf_counter()
        symbols: list[Symbol] = []
        dependencies: list[Dependency] = []
        lines = code.split("\n")
        state: dict[str, Any] = {}

        for index in range(len(lines)):
            ctx = LineContext(lines, index, symbols, dependencies, state)
            for rule in self._rules:
                rule(ctx)
            self._detect_call(ctx)

        parse_time = (time.perf_counter() - start) * 1000
        logger.debug(
            f"Parsed {file_path or '<memory>'} as {self.language}: "
            f"{len(symbols)} symbols, {len(dependencies)} dependencies in {parse_time:.2f}ms"
        )
        return ParserResult(
            symbols=symbols,
            dependencies=dependencies,
            metadata=ParseMetadata(
                language=self.language,
                file_size=len(code),
                parse_time=parse_time,
                symbol_count=len(symbols),
                dependency_count=len(dependencies),
                line_count=code.count("\n") + 1 if code else 0,
            ),
        )

    def _detect_call(self, ctx: LineContext) -> None:
        if self._call_guard is not None and self._call_guard(ctx):
            return
        match = CALL_PATTERN.search(ctx.trimmed)
        if match:
            name = match.group(1)
            ctx.add_dependency(name, DependencyKind.CALLS, ctx.column_of(name))

    def get_supported_languages(self) -> list[str]:
        return [self.language]

    def get_supported_extensions(self) -> list[str]:
        return list(self._extensions)


def starts_with_any(text: str, keywords: Iterable[str]) -> bool:
    """True if *text* starts with any of *keywords* as a whole word."""
    return any(re.match(rf"{re.escape(k)}\b", text) for k in keywords)


def visibility_from_modifiers(modifiers: Sequence[str]) -> Visibility:
    """public > private > protected > internal (package-private)."""
    if "public" in modifiers:
        return Visibility.PUBLIC
    if "private" in modifiers:
        return Visibility.PRIVATE
    if "protected" in modifiers:
        return Visibility.PROTECTED
    return Visibility.INTERNAL
