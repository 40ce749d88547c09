"""Java extractor for repograph."""

import re

from ..core.models import DependencyKind, SymbolKind, Visibility
from .base import (
    LineContext,
    LineRuleParser,
    leading_comment,
    normalize_signature,
    visibility_from_modifiers,
)

MODIFIERS = (
    "public",
    "private",
    "protected",
    "static",
    "final",
    "abstract",
    "synchronized",
    "native",
    "strictfp",
    "volatile",
    "transient",
    "default",
    "sealed",
)
_MODIFIER_PREFIX = r"(?:(?:" + "|".join(MODIFIERS) + r")\s+)*"
_TYPE = r"(?:<[^>]*>\s+)?[\w.$]+(?:<[^()]*>)?(?:\[\])*"

CLASS_RE = re.compile(rf"^{_MODIFIER_PREFIX}(?:non-sealed\s+)?class\s+(\w+)")
INTERFACE_RE = re.compile(rf"^{_MODIFIER_PREFIX}@?interface\s+(\w+)")
ENUM_RE = re.compile(rf"^{_MODIFIER_PREFIX}enum\s+(\w+)")
METHOD_RE = re.compile(rf"^{_MODIFIER_PREFIX}{_TYPE}\s+(\w+)\s*\(")
FIELD_RE = re.compile(rf"^{_MODIFIER_PREFIX}{_TYPE}\s+(\w+)\s*[=;]")
IMPORT_RE = re.compile(r"^import\s+(static\s+)?([\w.]+(?:\.\*)?)")
EXTENDS_RE = re.compile(r"\bextends\s+([\w.]+)")
IMPLEMENTS_RE = re.compile(r"\bimplements\s+([\w.,\s]+)")
SIGNATURE_RE = re.compile(r"\(\s*([^)]*)\s*\)")
WORD_RE = re.compile(r"\w+")

# Statements that look like "Type name(" or "Type name;" but declare nothing
NON_DECLARATION_STARTS = {
    "return",
    "new",
    "throw",
    "if",
    "else",
    "for",
    "while",
    "do",
    "switch",
    "case",
    "catch",
    "try",
    "package",
    "import",
    "assert",
    "yield",
}

JAVADOC_MARKERS = ("/**", "/*", "*/", "*", "//")


def extract_modifiers(line: str) -> tuple[str, ...]:
    words = set(WORD_RE.findall(line))
    return tuple(m for m in MODIFIERS if m in words)


def _first_word(text: str) -> str:
    match = WORD_RE.match(text)
    return match.group(0) if match else ""


def _is_declaration_line(trimmed: str) -> bool:
    return _first_word(trimmed) not in NON_DECLARATION_STARTS


def _doc(ctx: LineContext) -> str | None:
    return leading_comment(ctx.lines, ctx.index, JAVADOC_MARKERS)


def match_class(ctx: LineContext) -> None:
    match = CLASS_RE.match(ctx.trimmed)
    if match:
        modifiers = extract_modifiers(ctx.line)
        ctx.add_symbol(
            match.group(1),
            SymbolKind.CLASS,
            ctx.column_of("class"),
            documentation=_doc(ctx),
            modifiers=modifiers,
            visibility=visibility_from_modifiers(modifiers),
            is_static="static" in modifiers,
            is_abstract="abstract" in modifiers,
            is_final="final" in modifiers,
        )


def match_interface(ctx: LineContext) -> None:
    match = INTERFACE_RE.match(ctx.trimmed)
    if match:
        modifiers = extract_modifiers(ctx.line)
        ctx.add_symbol(
            match.group(1),
            SymbolKind.INTERFACE,
            ctx.column_of("interface"),
            documentation=_doc(ctx),
            modifiers=modifiers,
            visibility=visibility_from_modifiers(modifiers),
        )


def match_enum(ctx: LineContext) -> None:
    match = ENUM_RE.match(ctx.trimmed)
    if match:
        modifiers = extract_modifiers(ctx.line)
        ctx.add_symbol(
            match.group(1),
            SymbolKind.ENUM,
            ctx.column_of("enum"),
            documentation=_doc(ctx),
            modifiers=modifiers,
            visibility=visibility_from_modifiers(modifiers),
        )


def match_method(ctx: LineContext) -> None:
    trimmed = ctx.trimmed
    if "class" in trimmed or "interface" in trimmed or not _is_declaration_line(trimmed):
        return
    match = METHOD_RE.match(trimmed)
    if match:
        name = match.group(1)
        modifiers = extract_modifiers(ctx.line)
        signature = SIGNATURE_RE.search(ctx.line)
        ctx.add_symbol(
            name,
            SymbolKind.METHOD,
            ctx.column_of(name),
            signature=normalize_signature(signature.group(1) if signature else None),
            documentation=_doc(ctx),
            modifiers=modifiers,
            visibility=visibility_from_modifiers(modifiers),
            is_static="static" in modifiers,
            is_abstract="abstract" in modifiers,
            is_final="final" in modifiers,
        )


def match_field(ctx: LineContext) -> None:
    trimmed = ctx.trimmed
    if (
        "class" in trimmed
        or "interface" in trimmed
        or "(" in trimmed
        or not _is_declaration_line(trimmed)
    ):
        return
    match = FIELD_RE.match(trimmed)
    if match:
        name = match.group(1)
        modifiers = extract_modifiers(ctx.line)
        ctx.add_symbol(
            name,
            SymbolKind.FIELD,
            ctx.column_of(name),
            modifiers=modifiers,
            visibility=visibility_from_modifiers(modifiers),
            is_static="static" in modifiers,
            is_final="final" in modifiers,
        )


def match_import(ctx: LineContext) -> None:
    match = IMPORT_RE.match(ctx.trimmed)
    if not match:
        return
    is_static, path = bool(match.group(1)), match.group(2)
    ctx.add_symbol(
        path.split(".")[-1],
        SymbolKind.IMPORT,
        ctx.column_of(path),
        visibility=Visibility.PUBLIC,
    )
    ctx.add_dependency(
        path,
        DependencyKind.IMPORTS,
        ctx.column_of("import"),
        metadata={"importType": "static" if is_static else "class", "fullPath": path},
    )


def match_extends(ctx: LineContext) -> None:
    match = EXTENDS_RE.search(ctx.trimmed)
    if match:
        ctx.add_dependency(match.group(1), DependencyKind.EXTENDS, ctx.column_of("extends"))


def match_implements(ctx: LineContext) -> None:
    match = IMPLEMENTS_RE.search(ctx.trimmed)
    if not match:
        return
    column = ctx.column_of("implements")
    for name in match.group(1).split(","):
        ctx.add_dependency(name, DependencyKind.IMPLEMENTS, column)


RULES = (
    match_class,
    match_interface,
    match_enum,
    match_method,
    match_field,
    match_import,
    match_extends,
    match_implements,
)


def skip_call_detection(ctx: LineContext) -> bool:
    trimmed = ctx.trimmed
    return "class" in trimmed or "interface" in trimmed or "=" in trimmed


class JavaParser(LineRuleParser):
    """Line-oriented Java extractor."""

    def __init__(self) -> None:
        super().__init__("java", RULES, skip_call_detection, extensions=(".java",))
