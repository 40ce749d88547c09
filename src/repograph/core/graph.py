"""Graph assembly for repository -> package -> file -> symbol hierarchies.

Nodes form a strict tree through ``parent``/``children``; dependency edges
are layered on top and may point at ids that have no node (unresolved
external names).  Everything here is single-threaded; callers that share a
``GraphGenerator`` across threads must synchronise externally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import orjson
from loguru import logger

from ..config.defaults import (
    BASE_COMPLEXITY,
    DEFAULT_BASE_COMPLEXITY,
    SIZE_COMPLEXITY_BONUSES,
)
from .exceptions import GraphDeserializationError, GraphError, NodeNotFoundError
from .models import Dependency, ParserResult, Symbol

if TYPE_CHECKING:
    from .graph_metrics import GraphMetrics

CONTAINER_TYPES = ("repository", "package", "file")

# Node metadata attribute -> wire key
_NODE_METADATA_KEYS = {
    "language": "language",
    "line_count": "lineCount",
    "complexity": "complexity",
    "last_modified": "lastModified",
    "size": "size",
    "symbol_count": "symbolCount",
    "dependency_count": "dependencyCount",
    "parse_time": "parseTime",
}


def calculate_symbol_complexity(symbol: Symbol) -> int:
    """Base score by kind plus cumulative bonuses for long line spans."""
    complexity = BASE_COMPLEXITY.get(symbol.kind.value, DEFAULT_BASE_COMPLEXITY)
    size = symbol.end_line - symbol.start_line + 1
    for threshold, bonus in SIZE_COMPLEXITY_BONUSES:
        if size > threshold:
            complexity += bonus
    return complexity


@dataclass
class NodeMetadata:
    """Optional per-node facts, populated according to node type."""

    language: str | None = None
    line_count: int | None = None
    complexity: int | None = None
    last_modified: datetime | None = None
    size: int | None = None
    symbol_count: int | None = None
    dependency_count: int | None = None
    parse_time: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {}
        for attr, key in _NODE_METADATA_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            data[key] = value.isoformat() if isinstance(value, datetime) else value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodeMetadata:
        kwargs = {attr: data.get(key) for attr, key in _NODE_METADATA_KEYS.items()}
        if kwargs["last_modified"] is not None:
            kwargs["last_modified"] = datetime.fromisoformat(kwargs["last_modified"])
        return cls(**kwargs)


@dataclass
class GraphNode:
    """A node in the assembled hierarchy."""

    id: str  # repo-id, pkg-id, file-id or "fileId:symbolName"
    type: str  # repository, package, file, or a symbol kind
    name: str
    path: str | None = None
    metadata: NodeMetadata = field(default_factory=NodeMetadata)
    parent: str | None = None
    children: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "metadata": self.metadata.to_dict(),
            "children": list(self.children),
        }
        if self.path is not None:
            data["path"] = self.path
        if self.parent is not None:
            data["parent"] = self.parent
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphNode:
        return cls(
            id=data["id"],
            type=data["type"],
            name=data["name"],
            path=data.get("path"),
            metadata=NodeMetadata.from_dict(data.get("metadata") or {}),
            parent=data.get("parent"),
            children=list(data.get("children") or []),
        )


@dataclass
class GraphEdge:
    """A directed, non-hierarchical relation between two node ids."""

    id: str  # "fileId:sourceName:targetName"
    source: str
    target: str  # May reference an id with no node
    type: str
    weight: int = 1
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "type": self.type,
            "weight": self.weight,
        }
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphEdge:
        return cls(
            id=data["id"],
            source=data["source"],
            target=data["target"],
            type=data["type"],
            weight=int(data.get("weight", 1)),
            metadata=data.get("metadata"),
        )


@dataclass
class GraphMetadata:
    """Running totals over the whole graph."""

    node_count: int = 0
    edge_count: int = 0
    languages: set[str] = field(default_factory=set)
    total_size: int = 0
    total_parse_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeCount": self.node_count,
            "edgeCount": self.edge_count,
            "languages": sorted(self.languages),
            "totalSize": self.total_size,
            "totalParseTime": self.total_parse_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphMetadata:
        return cls(
            node_count=int(data["nodeCount"]),
            edge_count=int(data["edgeCount"]),
            languages=set(data.get("languages") or []),
            total_size=int(data.get("totalSize", 0)),
            total_parse_time=float(data.get("totalParseTime", 0.0)),
        )


@dataclass
class Graph:
    """Nodes and edges keyed by id, plus summary metadata."""

    nodes: dict[str, GraphNode] = field(default_factory=dict)
    edges: dict[str, GraphEdge] = field(default_factory=dict)
    metadata: GraphMetadata = field(default_factory=GraphMetadata)

    def to_dict(self) -> dict[str, Any]:
        """Ordered-pair encoding: maps become [key, value] lists, the set a list."""
        return {
            "nodes": [[node_id, node.to_dict()] for node_id, node in self.nodes.items()],
            "edges": [[edge_id, edge.to_dict()] for edge_id, edge in self.edges.items()],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Graph:
        """Rebuild a graph from ``to_dict`` output.

        Raises:
            GraphDeserializationError: If the data does not have the expected shape
        """
        try:
            nodes = {}
            for node_id, node_data in data["nodes"]:
                node = GraphNode.from_dict(node_data)
                if node.id != node_id:
                    raise ValueError(f"node key {node_id!r} does not match id {node.id!r}")
                nodes[node_id] = node

            edges = {}
            for edge_id, edge_data in data["edges"]:
                edge = GraphEdge.from_dict(edge_data)
                if edge.id != edge_id:
                    raise ValueError(f"edge key {edge_id!r} does not match id {edge.id!r}")
                edges[edge_id] = edge

            metadata = GraphMetadata.from_dict(data["metadata"])
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise GraphDeserializationError(
                f"Malformed graph data: {e}", context={"error": type(e).__name__}
            ) from e

        if metadata.node_count != len(nodes) or metadata.edge_count != len(edges):
            raise GraphDeserializationError(
                "Graph counts do not match its contents",
                context={
                    "nodeCount": metadata.node_count,
                    "nodes": len(nodes),
                    "edgeCount": metadata.edge_count,
                    "edges": len(edges),
                },
            )
        return cls(nodes=nodes, edges=edges, metadata=metadata)


class GraphGenerator:
    """Builds a ``Graph`` incrementally from repositories, packages and files.

    The generator never reads files or runs extractors itself; callers pass
    in an already-computed ``ParserResult`` for every file.
    """

    def __init__(self) -> None:
        self.graph = Graph()

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def add_repository(self, repository_id: str, name: str, path: str) -> GraphNode:
        node = GraphNode(id=repository_id, type="repository", name=name, path=path)
        self._insert_container(node)
        return node

    def add_package(
        self, package_id: str, name: str, path: str, repository_id: str
    ) -> GraphNode:
        repository = self._require(repository_id, "repository")
        node = GraphNode(
            id=package_id, type="package", name=name, path=path, parent=repository_id
        )
        self._insert_container(node)
        repository.children.append(package_id)
        return node

    def add_file(
        self,
        file_id: str,
        name: str,
        path: str,
        package_id: str,
        parse_result: ParserResult,
        last_modified: datetime | None = None,
    ) -> GraphNode:
        """Add a file node and fan out its symbols and dependencies."""
        package = self._require(package_id, "package")
        meta = parse_result.metadata
        node = GraphNode(
            id=file_id,
            type="file",
            name=name,
            path=path,
            metadata=NodeMetadata(
                language=meta.language,
                line_count=meta.line_count,
                last_modified=last_modified,
                size=meta.file_size,
                symbol_count=meta.symbol_count,
                dependency_count=meta.dependency_count,
                parse_time=meta.parse_time,
            ),
            parent=package_id,
        )
        self._insert_container(node)
        package.children.append(file_id)

        totals = self.graph.metadata
        totals.languages.add(meta.language)
        totals.total_size += meta.file_size
        totals.total_parse_time += meta.parse_time

        self._add_symbols(node, parse_result.symbols)
        self._add_dependencies(file_id, parse_result.dependencies)
        return node

    def _insert_container(self, node: GraphNode) -> None:
        if node.id in self.graph.nodes:
            raise GraphError(
                f"Duplicate {node.type} id: {node.id!r}",
                context={"id": node.id, "type": node.type},
            )
        self.graph.nodes[node.id] = node
        self.graph.metadata.node_count += 1

    def _require(self, node_id: str, node_type: str) -> GraphNode:
        node = self.graph.nodes.get(node_id)
        if node is None or node.type != node_type:
            raise NodeNotFoundError(
                f"No {node_type} node with id {node_id!r}",
                context={"id": node_id, "type": node_type},
            )
        return node

    def _add_symbols(self, file_node: GraphNode, symbols: list[Symbol]) -> None:
        for symbol in symbols:
            symbol_id = f"{file_node.id}:{symbol.name}"
            node = GraphNode(
                id=symbol_id,
                type=symbol.kind.value,
                name=symbol.name,
                metadata=NodeMetadata(
                    line_count=symbol.line_count,
                    complexity=calculate_symbol_complexity(symbol),
                ),
                parent=file_node.id,
            )
            if symbol_id in self.graph.nodes:
                # Same-named symbols in one file share an id; the later one wins
                logger.debug(f"Symbol id collision on {symbol_id!r}, replacing")
                self.graph.nodes[symbol_id] = node
                continue
            self.graph.nodes[symbol_id] = node
            self.graph.metadata.node_count += 1
            file_node.children.append(symbol_id)

    def _add_dependencies(self, file_id: str, dependencies: list[Dependency]) -> None:
        for dep in dependencies:
            edge_id = f"{file_id}:{dep.source_name}:{dep.target_name}"
            existing = self.graph.edges.get(edge_id)
            if existing is not None:
                existing.weight += 1
                continue
            self.graph.edges[edge_id] = GraphEdge(
                id=edge_id,
                source=file_id,
                target=dep.target_name,
                type=dep.kind.value,
                metadata=dict(dep.metadata) if dep.metadata is not None else None,
            )
            self.graph.metadata.edge_count += 1

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_graph(self) -> Graph:
        return self.graph

    def get_node(self, node_id: str) -> GraphNode | None:
        return self.graph.nodes.get(node_id)

    def get_edge(self, edge_id: str) -> GraphEdge | None:
        return self.graph.edges.get(edge_id)

    def get_children(self, node_id: str) -> list[GraphNode]:
        return get_children(self.graph, node_id)

    def get_parents(self, node_id: str) -> list[GraphNode]:
        """The parent node as a 0-or-1 element list."""
        node = self.graph.nodes.get(node_id)
        if node is None or node.parent is None:
            return []
        parent = self.graph.nodes.get(node.parent)
        return [parent] if parent is not None else []

    def get_dependencies(self, node_id: str) -> list[GraphEdge]:
        """Outgoing edges (linear scan over all edges)."""
        return get_dependencies(self.graph, node_id)

    def get_dependents(self, node_id: str) -> list[GraphEdge]:
        """Incoming edges (linear scan over all edges)."""
        return get_dependents(self.graph, node_id)

    def calculate_metrics(self) -> GraphMetrics:
        from .graph_metrics import calculate_metrics

        return calculate_metrics(self.graph)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return self.graph.to_dict()

    def serialize(self) -> str:
        """Serialize the graph as JSON text."""
        return orjson.dumps(self.graph.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8")

    def deserialize(self, data: str | bytes | dict[str, Any]) -> None:
        """Replace the graph with serialized data.

        The new graph is fully built before it replaces the current one, so
        on failure the current graph is left exactly as it was.

        Raises:
            GraphDeserializationError: If the data is not valid serialized graph data
        """
        if isinstance(data, (str, bytes)):
            try:
                data = orjson.loads(data)
            except orjson.JSONDecodeError as e:
                raise GraphDeserializationError(f"Invalid graph JSON: {e}") from e
        self.graph = Graph.from_dict(data)

    def save(self, path: Path) -> None:
        path.write_text(self.serialize(), encoding="utf-8")
        logger.debug(f"Saved graph with {self.graph.metadata.node_count} nodes to {path}")

    @classmethod
    def load(cls, path: Path) -> GraphGenerator:
        generator = cls()
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise GraphDeserializationError(
                f"Cannot read graph file {path}: {e}", context={"path": str(path)}
            ) from e
        generator.deserialize(raw)
        return generator


def get_children(graph: Graph, node_id: str) -> list[GraphNode]:
    node = graph.nodes.get(node_id)
    if node is None:
        return []
    return [graph.nodes[c] for c in node.children if c in graph.nodes]


def get_dependencies(graph: Graph, node_id: str) -> list[GraphEdge]:
    return [edge for edge in graph.edges.values() if edge.source == node_id]


def get_dependents(graph: Graph, node_id: str) -> list[GraphEdge]:
    return [edge for edge in graph.edges.values() if edge.target == node_id]
