"""Rust extractor for repograph.

``impl`` blocks are reported as module-kind symbols named after the first
identifier following ``impl``; this is an approximation, not a model of the
impl block itself.
"""

import re

from ..core.models import DependencyKind, SymbolKind, Visibility
from .base import (
    LineContext,
    LineRuleParser,
    leading_comment,
    normalize_signature,
    starts_with_any,
)

VISIBILITY_PREFIX_RE = re.compile(r"^pub(?:\s*\([^)]*\))?\s+")
PUB_TOKEN_RE = re.compile(r"\bpub\b")
FN_RE = re.compile(r'^(?:(?:async|const|unsafe|default)\s+|extern\s+(?:"[^"]*"\s+)?)*fn\s+(\w+)')
SIGNATURE_RE = re.compile(r"fn\s+\w+\s*(?:<[^(]*>)?\s*\(([^)]*)\)")
STRUCT_RE = re.compile(r"^struct\s+(\w+)")
ENUM_RE = re.compile(r"^enum\s+(\w+)")
TRAIT_RE = re.compile(r"^(?:unsafe\s+)?trait\s+(\w+)")
IMPL_RE = re.compile(r"^(?:unsafe\s+)?impl(?:\s*<[^>]*>)?\s+(\w+)")
MOD_RE = re.compile(r"^mod\s+(\w+)")
LET_RE = re.compile(r"^let\s+(?:mut\s+)?(\w+)")
CONST_RE = re.compile(r"^(?:const|static(?:\s+mut)?)\s+(?!fn\b|unsafe\b|async\b)(\w+)")
USE_RE = re.compile(r"^use\s+([^;]+)")

CALL_GUARD_KEYWORDS = (
    "fn",
    "async",
    "unsafe",
    "extern",
    "struct",
    "enum",
    "trait",
    "impl",
    "mod",
    "let",
    "const",
    "static",
    "use",
)

DOC_MARKERS = ("///", "//!", "//")


def _declaration(trimmed: str) -> str:
    """The trimmed line with any ``pub`` / ``pub(crate)`` prefix removed."""
    return VISIBILITY_PREFIX_RE.sub("", trimmed, count=1)


def _visibility(line: str) -> Visibility:
    return Visibility.PUBLIC if PUB_TOKEN_RE.search(line) else Visibility.PRIVATE


def _doc(ctx: LineContext) -> str | None:
    return leading_comment(ctx.lines, ctx.index, DOC_MARKERS)


def _simple_rule(pattern: re.Pattern[str], kind: SymbolKind, keyword: str):
    def rule(ctx: LineContext) -> None:
        match = pattern.match(_declaration(ctx.trimmed))
        if match:
            ctx.add_symbol(
                match.group(1),
                kind,
                ctx.column_of(keyword),
                documentation=_doc(ctx),
                visibility=_visibility(ctx.line),
            )

    rule.__name__ = f"match_{keyword}"
    return rule


def match_fn(ctx: LineContext) -> None:
    match = FN_RE.match(_declaration(ctx.trimmed))
    if match:
        signature = SIGNATURE_RE.search(ctx.line)
        ctx.add_symbol(
            match.group(1),
            SymbolKind.FUNCTION,
            ctx.column_of("fn"),
            signature=normalize_signature(signature.group(1) if signature else None),
            documentation=_doc(ctx),
            visibility=_visibility(ctx.line),
        )


def match_impl(ctx: LineContext) -> None:
    match = IMPL_RE.match(ctx.trimmed)
    if match:
        ctx.add_symbol(
            match.group(1),
            SymbolKind.MODULE,
            ctx.column_of("impl"),
            visibility=Visibility.PUBLIC,
        )


def match_let(ctx: LineContext) -> None:
    match = LET_RE.match(ctx.trimmed)
    if match:
        ctx.add_symbol(
            match.group(1),
            SymbolKind.VARIABLE,
            ctx.column_of("let"),
            visibility=_visibility(ctx.line),
        )


def match_const(ctx: LineContext) -> None:
    declaration = _declaration(ctx.trimmed)
    match = CONST_RE.match(declaration)
    if match:
        keyword = "static" if declaration.startswith("static") else "const"
        ctx.add_symbol(
            match.group(1),
            SymbolKind.VARIABLE,
            ctx.column_of(keyword),
            documentation=_doc(ctx),
            visibility=_visibility(ctx.line),
        )


def match_use(ctx: LineContext) -> None:
    match = USE_RE.match(_declaration(ctx.trimmed))
    if not match:
        return
    path = match.group(1).strip()
    column = ctx.column_of("use")
    ctx.add_symbol(
        path.split("::")[-1], SymbolKind.IMPORT, column, visibility=_visibility(ctx.line)
    )
    ctx.add_dependency(
        path,
        DependencyKind.IMPORTS,
        column,
        metadata={"importType": "module", "fullPath": path},
    )


RULES = (
    match_fn,
    _simple_rule(STRUCT_RE, SymbolKind.STRUCT, "struct"),
    _simple_rule(ENUM_RE, SymbolKind.ENUM, "enum"),
    _simple_rule(TRAIT_RE, SymbolKind.TRAIT, "trait"),
    match_impl,
    _simple_rule(MOD_RE, SymbolKind.MODULE, "mod"),
    match_let,
    match_const,
    match_use,
)


def skip_call_detection(ctx: LineContext) -> bool:
    return starts_with_any(_declaration(ctx.trimmed), CALL_GUARD_KEYWORDS)


class RustParser(LineRuleParser):
    """Line-oriented Rust extractor."""

    def __init__(self) -> None:
        super().__init__("rust", RULES, skip_call_detection, extensions=(".rs",))
