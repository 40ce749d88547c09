"""Code contexts for embedding.

Turns extractor output into one ``CodeContext`` per embeddable symbol
(functions, classes, variables and type aliases).  The snippet and
complexity lookups are supplied by the caller, so nothing here touches the
filesystem.

A context renders to embedding text as a compact pipe-separated header::

    File: src/foo.py | Lang: python | Kind: function | Fn: load | Params: path | Uses: open | Desc: Read it

followed by a ``---`` divider and the code snippet.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..config.defaults import EMBEDDABLE_SYMBOL_KINDS
from .graph import calculate_symbol_complexity
from .models import Dependency, Symbol

SnippetAccessor = Callable[[Symbol], str]
ComplexityAccessor = Callable[[Symbol], int]


@dataclass
class CodeContext:
    """Everything sent to the embedding model about one symbol."""

    symbol: str
    type: str
    code_snippet: str
    complexity: int
    documentation: str | None = None
    parameters: list[str] | None = None
    return_type: str | None = None  # Not inferred by any extractor
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "symbol": self.symbol,
            "type": self.type,
            "dependencies": list(self.dependencies),
            "codeSnippet": self.code_snippet,
            "complexity": self.complexity,
        }
        if self.documentation is not None:
            data["documentation"] = self.documentation
        if self.parameters is not None:
            data["parameters"] = list(self.parameters)
        if self.return_type is not None:
            data["returnType"] = self.return_type
        return data


def parameters_from_signature(signature: str | None) -> list[str] | None:
    """``"(a, b)"`` -> ``["a", "b"]``; ``None`` when there is no signature."""
    if signature is None:
        return None
    inner = signature.replace("(", "").replace(")", "")
    return [p.strip() for p in inner.split(",") if p.strip()]


def extract_code_contexts(
    symbols: list[Symbol],
    dependencies: list[Dependency],
    get_code_snippet: SnippetAccessor,
    get_complexity: ComplexityAccessor,
) -> list[CodeContext]:
    """Build contexts for embeddable symbols, in input order.

    Args:
        symbols: Symbols from one extractor result
        dependencies: Dependencies from the same result
        get_code_snippet: Returns the source text for a symbol
        get_complexity: Returns the complexity score for a symbol

    Returns:
        One context per function, class, variable or type symbol
    """
    contexts = []
    for symbol in symbols:
        if symbol.kind.value not in EMBEDDABLE_SYMBOL_KINDS:
            continue
        contexts.append(
            CodeContext(
                symbol=symbol.name,
                type=symbol.kind.value,
                documentation=symbol.documentation,
                parameters=parameters_from_signature(symbol.signature),
                dependencies=[
                    dep.target_name for dep in dependencies if dep.source_name == symbol.name
                ],
                code_snippet=get_code_snippet(symbol),
                complexity=get_complexity(symbol),
            )
        )
    return contexts


def line_snippet_accessor(code: str) -> SnippetAccessor:
    """Snippet accessor that slices a symbol's line span out of *code*."""
    lines = code.split("\n")

    def get_code_snippet(symbol: Symbol) -> str:
        return "\n".join(lines[symbol.start_line - 1 : symbol.end_line])

    return get_code_snippet


def symbol_complexity(symbol: Symbol) -> int:
    """Complexity accessor matching the score stored on graph symbol nodes."""
    return calculate_symbol_complexity(symbol)


def build_contextual_text(
    context: CodeContext, file_path: str | None = None, language: str | None = None
) -> str:
    """Return the text sent to the embedding model for *context*.

    Falsy fields are skipped.  The file path is shortened to its last two
    segments and the description to 200 characters.
    """
    parts: list[str] = []

    if file_path and file_path not in (".", "/"):
        segments = file_path.replace("\\", "/").split("/")
        parts.append(f"File: {'/'.join(segments[-2:]) if len(segments) > 2 else file_path}")

    if language:
        parts.append(f"Lang: {language}")

    parts.append(f"Kind: {context.type}")
    parts.append(f"Fn: {context.symbol}")

    if context.parameters:
        parts.append(f"Params: {', '.join(context.parameters)}")

    if context.dependencies:
        # Cap to keep the header compact
        parts.append(f"Uses: {', '.join(context.dependencies[:10])}")

    if context.documentation:
        desc = context.documentation.strip()
        if len(desc) > 200:
            desc = desc[:200].rstrip() + "..."
        if desc:
            parts.append(f"Desc: {desc}")

    return f"{' | '.join(parts)}\n---\n{context.code_snippet}"
