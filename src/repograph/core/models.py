"""Shared data shapes produced by every language extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

SUPPORTED_LANGUAGES: tuple[str, ...] = (
    "typescript",
    "javascript",
    "python",
    "java",
    "go",
    "rust",
)

# Placeholder source for every extracted dependency (enclosing symbol is not resolved)
CURRENT_FILE = "current_file"


class SymbolKind(str, Enum):
    """Kind of an extracted code construct."""

    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    VARIABLE = "variable"
    IMPORT = "import"
    EXPORT = "export"
    TYPE = "type"
    NAMESPACE = "namespace"
    MODULE = "module"
    METHOD = "method"
    FIELD = "field"
    ENUM = "enum"
    STRUCT = "struct"
    TRAIT = "trait"


class DependencyKind(str, Enum):
    """Kind of a directed relation between two named entities."""

    IMPORTS = "imports"
    IMPORTS_FROM = "imports_from"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    CALLS = "calls"
    REFERENCES = "references"
    DEPENDS_ON = "depends_on"
    USES = "uses"
    EXPORTS_TO = "exports_to"


class Visibility(str, Enum):
    """Declared or inferred visibility of a symbol."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Location:
    """A 1-based line/column position in a source file."""

    line: int
    column: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "column": self.column}


@dataclass(frozen=True)
class Symbol:
    """A named code construct found in one file."""

    name: str
    kind: SymbolKind
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    signature: str | None = None  # Normalized "(a, b)" parameter list
    documentation: str | None = None
    modifiers: tuple[str, ...] = ()
    visibility: Visibility | None = None
    is_static: bool | None = None
    is_abstract: bool | None = None
    is_final: bool | None = None

    def __post_init__(self) -> None:
        if self.start_line > self.end_line:
            raise ValueError(
                f"Symbol {self.name!r} ends before it starts "
                f"({self.start_line} > {self.end_line})"
            )

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire shape, omitting unset optionals."""
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.kind.value,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "startColumn": self.start_column,
            "endColumn": self.end_column,
        }
        if self.signature is not None:
            data["signature"] = self.signature
        if self.documentation is not None:
            data["documentation"] = self.documentation
        if self.modifiers:
            data["modifiers"] = list(self.modifiers)
        if self.visibility is not None:
            data["visibility"] = self.visibility.value
        if self.is_static is not None:
            data["isStatic"] = self.is_static
        if self.is_abstract is not None:
            data["isAbstract"] = self.is_abstract
        if self.is_final is not None:
            data["isFinal"] = self.is_final
        return data


@dataclass(frozen=True)
class Dependency:
    """A directed edge asserting one named entity relates to another."""

    source_name: str
    target_name: str
    kind: DependencyKind
    metadata: dict[str, Any] | None = None
    source_location: Location | None = None
    target_location: Location | None = None

    def __post_init__(self) -> None:
        if not self.target_name:
            raise ValueError("Dependency target_name must not be empty")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "sourceName": self.source_name,
            "targetName": self.target_name,
            "type": self.kind.value,
        }
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        if self.source_location is not None:
            data["sourceLocation"] = self.source_location.to_dict()
        if self.target_location is not None:
            data["targetLocation"] = self.target_location.to_dict()
        return data


@dataclass
class ParseMetadata:
    """Timing and size information attached to every extractor result."""

    language: str
    file_size: int  # Character count of the parsed source
    parse_time: float  # Milliseconds
    symbol_count: int = 0
    dependency_count: int = 0
    line_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "language": self.language,
            "fileSize": self.file_size,
            "parseTime": self.parse_time,
            "symbolCount": self.symbol_count,
            "dependencyCount": self.dependency_count,
        }
        if self.line_count is not None:
            data["lineCount"] = self.line_count
        return data


@dataclass
class ParserResult:
    """Output of a single ``parse(code, file_path)`` call."""

    symbols: list[Symbol] = field(default_factory=list)
    dependencies: list[Dependency] = field(default_factory=list)
    metadata: ParseMetadata = field(
        default_factory=lambda: ParseMetadata(language="typescript", file_size=0, parse_time=0.0)
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbols": [s.to_dict() for s in self.symbols],
            "dependencies": [d.to_dict() for d in self.dependencies],
            "metadata": self.metadata.to_dict(),
        }
