"""Go extractor for repograph."""

import re

from ..core.models import DependencyKind, SymbolKind, Visibility
from .base import (
    LineContext,
    LineRuleParser,
    leading_comment,
    normalize_signature,
    starts_with_any,
)

FUNCTION_RE = re.compile(r"^func\s+(\w+)\s*(?:\[[^\]]*\])?\s*\(")
METHOD_RE = re.compile(r"^func\s*\([^)]+\)\s*(\w+)\s*\(")
SIGNATURE_RE = re.compile(r"func\s*(?:\([^)]+\)\s*)?\w+\s*(?:\[[^\]]*\])?\s*\(([^)]*)\)")
TYPE_RE = re.compile(r"^type\s+(\w+)\s*(?:\[[^\]]*\]\s*)?(\S+)?")
VAR_RE = re.compile(r"^var\s+(\w+)")
CONST_RE = re.compile(r"^const\s+(\w+)")
IMPORT_RE = re.compile(r"^import\s+(.*)$")
QUOTED_PATH_RE = re.compile(r"\"([^\"]+)\"|`([^`]+)`")

CALL_GUARD_KEYWORDS = ("func", "type", "var", "const", "import", "package")


def _visibility(name: str) -> Visibility:
    # Exported identifiers start with an upper-case letter
    return Visibility.PUBLIC if name[:1].isupper() else Visibility.PRIVATE


def _signature(line: str) -> str:
    match = SIGNATURE_RE.search(line)
    return normalize_signature(match.group(1) if match else None)


def _doc(ctx: LineContext) -> str | None:
    return leading_comment(ctx.lines, ctx.index, ("//",))


def match_function(ctx: LineContext) -> None:
    match = FUNCTION_RE.match(ctx.trimmed)
    if match:
        name = match.group(1)
        ctx.add_symbol(
            name,
            SymbolKind.FUNCTION,
            ctx.column_of("func"),
            signature=_signature(ctx.line),
            documentation=_doc(ctx),
            visibility=_visibility(name),
        )


def match_method(ctx: LineContext) -> None:
    match = METHOD_RE.match(ctx.trimmed)
    if match:
        name = match.group(1)
        ctx.add_symbol(
            name,
            SymbolKind.METHOD,
            ctx.column_of(name),
            signature=_signature(ctx.line),
            documentation=_doc(ctx),
            visibility=_visibility(name),
        )


def match_type(ctx: LineContext) -> None:
    match = TYPE_RE.match(ctx.trimmed)
    if not match:
        return
    name, underlying = match.group(1), match.group(2) or ""
    if underlying.startswith("struct"):
        kind = SymbolKind.STRUCT
    elif underlying.startswith("interface"):
        kind = SymbolKind.INTERFACE
    else:
        kind = SymbolKind.TYPE
    ctx.add_symbol(
        name,
        kind,
        ctx.column_of("type"),
        documentation=_doc(ctx),
        visibility=_visibility(name),
    )


def match_var(ctx: LineContext) -> None:
    match = VAR_RE.match(ctx.trimmed)
    if match:
        name = match.group(1)
        ctx.add_symbol(
            name, SymbolKind.VARIABLE, ctx.column_of("var"), visibility=_visibility(name)
        )


def match_const(ctx: LineContext) -> None:
    match = CONST_RE.match(ctx.trimmed)
    if match:
        name = match.group(1)
        ctx.add_symbol(
            name, SymbolKind.VARIABLE, ctx.column_of("const"), visibility=_visibility(name)
        )


def _add_import_paths(ctx: LineContext, text: str) -> None:
    for match in QUOTED_PATH_RE.finditer(text):
        path = match.group(1) or match.group(2)
        column = ctx.column_of(path)
        ctx.add_symbol(
            path.rstrip("/").split("/")[-1],
            SymbolKind.IMPORT,
            column,
            visibility=Visibility.PUBLIC,
        )
        ctx.add_dependency(
            path,
            DependencyKind.IMPORTS,
            column,
            metadata={"importType": "package", "fullPath": path},
        )


def match_import(ctx: LineContext) -> None:
    """Single imports, one-line groups and multi-line ``import ( ... )`` blocks."""
    trimmed = ctx.trimmed
    if ctx.state.get("in_import_group"):
        if trimmed.startswith(")"):
            ctx.state["in_import_group"] = False
            return
        _add_import_paths(ctx, trimmed.split("//", 1)[0])
        return

    match = IMPORT_RE.match(trimmed)
    if not match:
        return
    body = match.group(1).split("//", 1)[0].strip()
    if body.startswith("(") and ")" not in body:
        ctx.state["in_import_group"] = True
    _add_import_paths(ctx, body)


RULES = (
    match_function,
    match_method,
    match_type,
    match_var,
    match_const,
    match_import,
)


def skip_call_detection(ctx: LineContext) -> bool:
    return bool(ctx.state.get("in_import_group")) or starts_with_any(
        ctx.trimmed, CALL_GUARD_KEYWORDS
    )


class GoParser(LineRuleParser):
    """Line-oriented Go extractor."""

    def __init__(self) -> None:
        super().__init__("go", RULES, skip_call_detection, extensions=(".go",))
