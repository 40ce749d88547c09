"""Python extractor for repograph.

Indentation decides between functions and methods: a ``def`` at column 0 is
a function, an indented ``def`` is a method.  Nothing tracks the enclosing
class, so nested functions are reported as methods too.
"""

import re

from ..core.models import DependencyKind, SymbolKind, Visibility
from .base import LineContext, LineRuleParser, normalize_signature, starts_with_any

DEF_RE = re.compile(r"^(\s*)(?:async\s+)?def\s+(\w+)\s*\(")
SIGNATURE_RE = re.compile(r"def\s+\w+\s*\(([^)]*)\)")
CLASS_RE = re.compile(r"^class\s+(\w+)")
VARIABLE_RE = re.compile(r"^(\w+)\s*(?::[^=]+)?=(?!=)")
IMPORT_RE = re.compile(r"^import\s+([\w.]+(?:\s+as\s+\w+)?(?:\s*,\s*[\w.]+(?:\s+as\s+\w+)?)*)")
FROM_IMPORT_RE = re.compile(r"^from\s+([\w.]+)\s+import\b")
DOCSTRING_RE = re.compile(r"^[rRuU]?(\"\"\"|''')(.*?)(?:\1|$)")

CALL_GUARD_KEYWORDS = ("def", "async def", "class", "import", "from")


def _visibility(name: str) -> Visibility:
    return Visibility.PRIVATE if name.startswith("_") else Visibility.PUBLIC


def _docstring(ctx: LineContext) -> str | None:
    """First line of a docstring opening on the line after the declaration."""
    next_index = ctx.index + 1
    if next_index >= len(ctx.lines):
        return None
    match = DOCSTRING_RE.match(ctx.lines[next_index].strip())
    if not match:
        return None
    return match.group(2).strip() or None


def match_def(ctx: LineContext) -> None:
    match = DEF_RE.match(ctx.line)
    if not match:
        return
    indent, name = match.group(1), match.group(2)
    signature = SIGNATURE_RE.search(ctx.line)
    ctx.add_symbol(
        name,
        SymbolKind.METHOD if indent else SymbolKind.FUNCTION,
        ctx.column_of("def"),
        signature=normalize_signature(signature.group(1) if signature else None),
        documentation=_docstring(ctx),
        visibility=_visibility(name),
    )


def match_class(ctx: LineContext) -> None:
    match = CLASS_RE.match(ctx.trimmed)
    if match:
        name = match.group(1)
        ctx.add_symbol(
            name,
            SymbolKind.CLASS,
            ctx.column_of("class"),
            documentation=_docstring(ctx),
            visibility=_visibility(name),
        )


def match_variable(ctx: LineContext) -> None:
    trimmed = ctx.trimmed
    if starts_with_any(trimmed, ("def", "class")):
        return
    match = VARIABLE_RE.match(trimmed)
    if match:
        name = match.group(1)
        ctx.add_symbol(
            name, SymbolKind.VARIABLE, ctx.column_of(name), visibility=_visibility(name)
        )


def match_import(ctx: LineContext) -> None:
    match = IMPORT_RE.match(ctx.trimmed)
    if not match:
        return
    for part in match.group(1).split(","):
        module = part.split(" as ")[0].strip()
        if not module:
            continue
        ctx.add_symbol(
            module, SymbolKind.IMPORT, ctx.column_of(module), visibility=Visibility.PUBLIC
        )
        ctx.add_dependency(
            module,
            DependencyKind.IMPORTS,
            ctx.column_of("import"),
            metadata={"importType": "module"},
        )


def match_from_import(ctx: LineContext) -> None:
    match = FROM_IMPORT_RE.match(ctx.trimmed)
    if match:
        ctx.add_dependency(
            match.group(1),
            DependencyKind.IMPORTS_FROM,
            ctx.column_of("from"),
            metadata={"importType": "from"},
        )


RULES = (match_def, match_class, match_variable, match_import, match_from_import)


def skip_call_detection(ctx: LineContext) -> bool:
    trimmed = ctx.trimmed
    return starts_with_any(trimmed, CALL_GUARD_KEYWORDS) or "=" in trimmed


class PythonParser(LineRuleParser):
    """Line-oriented Python extractor."""

    def __init__(self) -> None:
        super().__init__(
            "python", RULES, skip_call_detection, extensions=(".py",)
        )
