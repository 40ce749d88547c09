"""Grammar-backed JavaScript/TypeScript extractor using tree-sitter.

Walks the concrete syntax tree recursively and reports the same
``ParserResult`` shape as the heuristic extractors, so everything downstream
is extractor-agnostic.  Unlike the line-oriented extractors, symbols here
span their full declaration.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any

from loguru import logger

from ..core.exceptions import ParsingError
from ..core.models import (
    CURRENT_FILE,
    Dependency,
    DependencyKind,
    Location,
    ParseMetadata,
    ParserResult,
    Symbol,
    SymbolKind,
)
from .base import normalize_signature
from .javascript import JavaScriptParser

# Declaration node type -> symbol kind for nodes named through a "name" field
NAMED_DECLARATIONS = {
    "function_declaration": SymbolKind.FUNCTION,
    "generator_function_declaration": SymbolKind.FUNCTION,
    "class_declaration": SymbolKind.CLASS,
    "abstract_class_declaration": SymbolKind.CLASS,
    "interface_declaration": SymbolKind.INTERFACE,
    "type_alias_declaration": SymbolKind.TYPE,
    "enum_declaration": SymbolKind.ENUM,
    "method_definition": SymbolKind.METHOD,
}
VARIABLE_DECLARATIONS = {"lexical_declaration", "variable_declaration"}
NAME_TYPES = {"identifier", "type_identifier", "property_identifier"}


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


class TreeSitterParser:
    """tree-sitter extractor for ``javascript`` and ``typescript``."""

    def __init__(self, language: str = "typescript") -> None:
        if language not in ("javascript", "typescript"):
            raise ParsingError(
                f"tree-sitter extractor does not handle {language!r}",
                context={"language": language},
            )
        self.language = language
        self._parsers: dict[str, Any] = {}
        self._fallback = JavaScriptParser(language)
        # Fail fast so the registry can fall back when the grammar is missing
        self._get_ts_parser(language)

    def _get_ts_parser(self, grammar: str) -> Any:
        if grammar not in self._parsers:
            try:
                from tree_sitter_language_pack import get_parser

                self._parsers[grammar] = get_parser(grammar)
            except Exception as e:
                raise ParsingError(
                    f"Failed to load tree-sitter grammar {grammar!r}: {e}",
                    context={"grammar": grammar},
                ) from e
            logger.debug(f"{grammar} tree-sitter parser initialized via tree-sitter-language-pack")
        return self._parsers[grammar]

    def _grammar_for(self, file_path: str | Path) -> str:
        if self.language == "typescript" and str(file_path).endswith(".tsx"):
            return "tsx"
        return self.language

    def parse(self, code: str, file_path: str | Path = "") -> ParserResult:
        start = time.perf_counter()
        try:
            tree = self._get_ts_parser(self._grammar_for(file_path)).parse(
                code.encode("utf-8")
            )
            symbols: list[Symbol] = []
            dependencies: list[Dependency] = []
            self._visit(tree.root_node, symbols, dependencies)
        except Exception as e:
            logger.warning(
                f"Tree-sitter parsing failed for {file_path or '<memory>'}: {e}, "
                "using heuristic extraction"
            )
            return self._fallback.parse(code, file_path)

        parse_time = (time.perf_counter() - start) * 1000
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

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def _visit(
        self, node: Any, symbols: list[Symbol], dependencies: list[Dependency]
    ) -> None:
        node_type = node.type

        if node_type in NAMED_DECLARATIONS:
            self._add_named(node, NAMED_DECLARATIONS[node_type], symbols)
            if node_type in ("class_declaration", "abstract_class_declaration"):
                self._add_heritage(node, dependencies)
            elif node_type == "interface_declaration":
                self._add_interface_extends(node, dependencies)
        elif node_type in VARIABLE_DECLARATIONS:
            for declarator in node.named_children:
                if declarator.type == "variable_declarator":
                    self._add_named(declarator, SymbolKind.VARIABLE, symbols, span=node)
        elif node_type == "import_statement":
            self._add_import(node, symbols, dependencies)
        elif node_type == "export_statement":
            self._add_export(node, symbols)
        elif node_type == "call_expression":
            callee = node.child_by_field_name("function")
            if callee is not None and callee.type == "identifier":
                dependencies.append(
                    self._dependency(_text(callee), DependencyKind.CALLS, callee)
                )

        for child in node.named_children:
            self._visit(child, symbols, dependencies)

    def _symbol(self, name_node: Any, span: Any, kind: SymbolKind, **attrs: Any) -> Symbol:
        return Symbol(
            name=_text(name_node),
            kind=kind,
            start_line=span.start_point[0] + 1,
            end_line=span.end_point[0] + 1,
            start_column=name_node.start_point[1] + 1,
            end_column=span.end_point[1] + 1,
            **attrs,
        )

    def _dependency(
        self,
        target: str,
        kind: DependencyKind,
        at: Any,
        metadata: dict[str, Any] | None = None,
    ) -> Dependency:
        return Dependency(
            source_name=CURRENT_FILE,
            target_name=target,
            kind=kind,
            metadata=metadata,
            source_location=Location(at.start_point[0] + 1, at.start_point[1] + 1),
        )

    def _add_named(
        self, node: Any, kind: SymbolKind, symbols: list[Symbol], span: Any = None
    ) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.type not in NAME_TYPES:
            return
        attrs: dict[str, Any] = {}
        if kind in (SymbolKind.FUNCTION, SymbolKind.METHOD):
            attrs["signature"] = self._signature(node)
        symbols.append(self._symbol(name_node, span or node, kind, **attrs))

    def _signature(self, node: Any) -> str:
        params = node.child_by_field_name("parameters")
        if params is None:
            return "()"
        names = []
        for param in params.named_children:
            if param.type == "identifier":
                names.append(_text(param))
                continue
            pattern = param.child_by_field_name("pattern") or param.child_by_field_name(
                "left"
            )
            names.append(_text(pattern if pattern is not None else param))
        return normalize_signature(", ".join(names))

    def _add_heritage(self, node: Any, dependencies: list[Dependency]) -> None:
        for child in node.named_children:
            if child.type != "class_heritage":
                continue
            for clause in child.named_children:
                if clause.type == "extends_clause":
                    value = clause.child_by_field_name("value") or clause.named_child(0)
                    if value is not None and value.type in NAME_TYPES:
                        dependencies.append(
                            self._dependency(_text(value), DependencyKind.EXTENDS, value)
                        )
                elif clause.type == "implements_clause":
                    for implemented in clause.named_children:
                        if implemented.type in NAME_TYPES:
                            dependencies.append(
                                self._dependency(
                                    _text(implemented), DependencyKind.IMPLEMENTS, implemented
                                )
                            )
                elif clause.type == "identifier":
                    # JavaScript grammar: class_heritage holds the expression directly
                    dependencies.append(
                        self._dependency(_text(clause), DependencyKind.EXTENDS, clause)
                    )

    def _add_interface_extends(self, node: Any, dependencies: list[Dependency]) -> None:
        for child in node.named_children:
            if child.type in ("extends_type_clause", "extends_clause"):
                for base in child.named_children:
                    if base.type in NAME_TYPES:
                        dependencies.append(
                            self._dependency(_text(base), DependencyKind.EXTENDS, base)
                        )

    def _add_import(
        self, node: Any, symbols: list[Symbol], dependencies: list[Dependency]
    ) -> None:
        source = node.child_by_field_name("source")
        module = _text(source).strip("'\"`") if source is not None else ""
        named = 0
        for clause in node.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    symbols.append(self._symbol(part, part, SymbolKind.IMPORT))
                elif part.type == "named_imports":
                    for spec in part.named_children:
                        if spec.type != "import_specifier":
                            continue
                        name_node = spec.child_by_field_name("name")
                        if name_node is None:
                            continue
                        symbols.append(self._symbol(name_node, spec, SymbolKind.IMPORT))
                        dependencies.append(
                            self._dependency(
                                _text(name_node),
                                DependencyKind.IMPORTS,
                                name_node,
                                metadata={"importType": "named", "fullPath": module},
                            )
                        )
                        named += 1
        if not named and module:
            dependencies.append(
                self._dependency(
                    module,
                    DependencyKind.IMPORTS,
                    node,
                    metadata={"importType": "module", "fullPath": module},
                )
            )

    def _add_export(self, node: Any, symbols: list[Symbol]) -> None:
        for clause in node.named_children:
            if clause.type != "export_clause":
                continue
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                name_node = spec.child_by_field_name("alias") or spec.child_by_field_name(
                    "name"
                )
                if name_node is not None:
                    symbols.append(self._symbol(name_node, spec, SymbolKind.EXPORT))

    def get_supported_languages(self) -> list[str]:
        return [self.language]

    def get_supported_extensions(self) -> list[str]:
        return self._fallback.get_supported_extensions()
