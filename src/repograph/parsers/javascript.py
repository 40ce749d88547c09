"""Heuristic JavaScript/TypeScript extractor for repograph.

This is the default extractor for both languages.  A grammar-backed
alternative lives in ``treesitter.py`` and produces the same result shape.
"""

import re

from ..core.models import DependencyKind, SymbolKind
from .base import (
    LineContext,
    LineRuleParser,
    leading_comment,
    normalize_signature,
    starts_with_any,
)

EXPORT_PREFIX_RE = re.compile(r"^export\s+(?:default\s+)?")
FUNCTION_RE = re.compile(r"^(?:async\s+)?function\s*\*?\s*(\w+)\s*(?:<[^>]*>)?\s*\(")
SIGNATURE_RE = re.compile(r"function\s*\*?\s*\w+\s*(?:<[^>]*>)?\s*\(([^)]*)\)")
CLASS_RE = re.compile(r"^(?:abstract\s+)?class\s+(\w+)")
INTERFACE_RE = re.compile(r"^interface\s+(\w+)")
TYPE_ALIAS_RE = re.compile(r"^type\s+(\w+)\s*(?:<[^>]*>)?\s*=")
VARIABLE_RE = re.compile(r"^(?:const|let|var)\s+(\w+)")
IMPORT_RE = re.compile(r"^import\s+(?:type\s+)?\W*(\w+).*?\bfrom\s*['\"]([^'\"]+)['\"]")
SIDE_EFFECT_IMPORT_RE = re.compile(r"^import\s+['\"]([^'\"]+)['\"]")
EXPORT_LIST_RE = re.compile(r"^export\s+(?:type\s+)?\{([^}]*)\}")
EXPORT_DEFAULT_RE = re.compile(r"^export\s+default\s+(\w+)\s*;?$")
EXTENDS_RE = re.compile(r"\bextends\s+([\w.]+)")
IMPLEMENTS_RE = re.compile(r"\bimplements\s+([\w.,\s]+)")

DECLARATION_KEYWORDS = (
    "function",
    "async",
    "class",
    "abstract",
    "interface",
    "type",
    "const",
    "let",
    "var",
    "enum",
)
CALL_GUARD_KEYWORDS = ("function", "async function", "if", "for", "while", "switch", "catch")

DOC_MARKERS = ("/**", "/*", "*/", "*", "//")


def _declaration(trimmed: str) -> str:
    """The trimmed line without a leading ``export`` / ``export default``."""
    return EXPORT_PREFIX_RE.sub("", trimmed, count=1)


def _doc(ctx: LineContext) -> str | None:
    return leading_comment(ctx.lines, ctx.index, DOC_MARKERS)


def match_function(ctx: LineContext) -> None:
    match = FUNCTION_RE.match(_declaration(ctx.trimmed))
    if match:
        signature = SIGNATURE_RE.search(ctx.line)
        ctx.add_symbol(
            match.group(1),
            SymbolKind.FUNCTION,
            ctx.column_of("function"),
            signature=normalize_signature(signature.group(1) if signature else None),
            documentation=_doc(ctx),
        )


def match_class(ctx: LineContext) -> None:
    declaration = _declaration(ctx.trimmed)
    match = CLASS_RE.match(declaration)
    if not match:
        return
    ctx.add_symbol(
        match.group(1),
        SymbolKind.CLASS,
        ctx.column_of("class"),
        documentation=_doc(ctx),
        is_abstract=declaration.startswith("abstract") or None,
    )
    extends = EXTENDS_RE.search(declaration)
    if extends:
        ctx.add_dependency(extends.group(1), DependencyKind.EXTENDS, ctx.column_of("extends"))
    implements = IMPLEMENTS_RE.search(declaration)
    if implements:
        column = ctx.column_of("implements")
        for name in implements.group(1).split(","):
            ctx.add_dependency(name, DependencyKind.IMPLEMENTS, column)


def match_interface(ctx: LineContext) -> None:
    declaration = _declaration(ctx.trimmed)
    match = INTERFACE_RE.match(declaration)
    if not match:
        return
    ctx.add_symbol(
        match.group(1),
        SymbolKind.INTERFACE,
        ctx.column_of("interface"),
        documentation=_doc(ctx),
    )
    extends = EXTENDS_RE.search(declaration)
    if extends:
        ctx.add_dependency(extends.group(1), DependencyKind.EXTENDS, ctx.column_of("extends"))


def match_type_alias(ctx: LineContext) -> None:
    match = TYPE_ALIAS_RE.match(_declaration(ctx.trimmed))
    if match:
        ctx.add_symbol(
            match.group(1), SymbolKind.TYPE, ctx.column_of("type"), documentation=_doc(ctx)
        )


def match_variable(ctx: LineContext) -> None:
    match = VARIABLE_RE.match(_declaration(ctx.trimmed))
    if match:
        name = match.group(1)
        ctx.add_symbol(name, SymbolKind.VARIABLE, ctx.column_of(name))


def match_import(ctx: LineContext) -> None:
    trimmed = ctx.trimmed
    match = IMPORT_RE.match(trimmed)
    if match:
        name, module = match.group(1), match.group(2)
        ctx.add_symbol(name, SymbolKind.IMPORT, ctx.column_of(name))
        ctx.add_dependency(
            module,
            DependencyKind.IMPORTS,
            ctx.column_of("import"),
            metadata={"importType": "module", "fullPath": module},
        )
        return
    side_effect = SIDE_EFFECT_IMPORT_RE.match(trimmed)
    if side_effect:
        module = side_effect.group(1)
        ctx.add_dependency(
            module,
            DependencyKind.IMPORTS,
            ctx.column_of("import"),
            metadata={"importType": "side-effect", "fullPath": module},
        )


def match_export(ctx: LineContext) -> None:
    """``export { a, b as c }`` and ``export default name``.

    Exported declarations (``export function f``) are reported by their
    declaration rule instead, so each name yields a single symbol.
    """
    trimmed = ctx.trimmed
    if not trimmed.startswith("export"):
        return
    listed = EXPORT_LIST_RE.match(trimmed)
    if listed:
        for item in listed.group(1).split(","):
            name = item.split(" as ")[-1].strip()
            if name:
                ctx.add_symbol(name, SymbolKind.EXPORT, ctx.column_of(name))
        return
    default = EXPORT_DEFAULT_RE.match(trimmed)
    if default and not starts_with_any(default.group(1), DECLARATION_KEYWORDS):
        name = default.group(1)
        ctx.add_symbol(name, SymbolKind.EXPORT, ctx.column_of(name))


RULES = (
    match_function,
    match_class,
    match_interface,
    match_type_alias,
    match_variable,
    match_import,
    match_export,
)


def skip_call_detection(ctx: LineContext) -> bool:
    return starts_with_any(_declaration(ctx.trimmed), CALL_GUARD_KEYWORDS)


class JavaScriptParser(LineRuleParser):
    """Line-oriented JavaScript extractor."""

    def __init__(self, language: str = "javascript") -> None:
        extensions = (
            (".ts", ".tsx") if language == "typescript" else (".js", ".jsx", ".mjs", ".cjs")
        )
        super().__init__(language, RULES, skip_call_detection, extensions=extensions)


class TypeScriptParser(JavaScriptParser):
    """Line-oriented TypeScript extractor (same rules, TypeScript metadata)."""

    def __init__(self) -> None:
        super().__init__("typescript")
