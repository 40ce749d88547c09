"""Structural metrics over an assembled graph.

All functions are pure: they read a ``Graph`` and return fresh dicts keyed by
node id.  Degree and neighbour lookups scan every edge, so the whole report
is O(V * E); fine for single repositories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .graph import Graph, get_children

METRIC_NAMES = ("centrality", "clustering", "complexity")


@dataclass
class GraphMetrics:
    """Per-node centrality, clustering coefficient and aggregate complexity."""

    centrality: dict[str, int] = field(default_factory=dict)
    clustering: dict[str, float] = field(default_factory=dict)
    complexity: dict[str, int] = field(default_factory=dict)

    def top(self, metric: str, n: int = 10) -> list[tuple[str, float]]:
        """Highest-scoring nodes for *metric*; ties keep graph order."""
        if metric not in METRIC_NAMES:
            raise ValueError(f"Unknown metric {metric!r}, expected one of {METRIC_NAMES}")
        values: dict[str, float] = getattr(self, metric)
        return sorted(values.items(), key=lambda item: item[1], reverse=True)[:n]

    def to_dict(self) -> dict[str, Any]:
        return {
            "centrality": dict(self.centrality),
            "clustering": dict(self.clustering),
            "complexity": dict(self.complexity),
        }


def get_neighbors(graph: Graph, node_id: str) -> set[str]:
    """Undirected neighbour set: outgoing targets plus incoming sources."""
    neighbors = set()
    for edge in graph.edges.values():
        if edge.source == node_id:
            neighbors.add(edge.target)
        if edge.target == node_id:
            neighbors.add(edge.source)
    return neighbors


def are_connected(graph: Graph, a: str, b: str) -> bool:
    """True if an edge joins *a* and *b* in either direction."""
    return any(
        (edge.source == a and edge.target == b) or (edge.source == b and edge.target == a)
        for edge in graph.edges.values()
    )


def calculate_centrality(graph: Graph) -> dict[str, int]:
    """Degree centrality: incoming plus outgoing edge count per node."""
    centrality = {}
    for node_id in graph.nodes:
        incoming = sum(1 for e in graph.edges.values() if e.target == node_id)
        outgoing = sum(1 for e in graph.edges.values() if e.source == node_id)
        centrality[node_id] = incoming + outgoing
    return centrality


def calculate_clustering(graph: Graph) -> dict[str, float]:
    """Local clustering coefficient per node.

    Connected neighbour pairs divided by ``n * (n - 1) / 2``; nodes with
    fewer than two neighbours score 0.
    """
    clustering = {}
    for node_id in graph.nodes:
        neighbors = sorted(get_neighbors(graph, node_id))
        n = len(neighbors)
        if n < 2:
            clustering[node_id] = 0.0
            continue

        connected = 0
        for i in range(n):
            for j in range(i + 1, n):
                if are_connected(graph, neighbors[i], neighbors[j]):
                    connected += 1
        clustering[node_id] = connected / (n * (n - 1) / 2)
    return clustering


def calculate_aggregate_complexity(graph: Graph) -> dict[str, int]:
    """Own complexity plus the complexity of direct children only.

    Missing complexity counts as 0 and dangling child ids are ignored.
    Grandchildren are not included.
    """
    complexity = {}
    for node_id, node in graph.nodes.items():
        total = node.metadata.complexity or 0
        for child in get_children(graph, node_id):
            total += child.metadata.complexity or 0
        complexity[node_id] = total
    return complexity


def calculate_metrics(graph: Graph) -> GraphMetrics:
    return GraphMetrics(
        centrality=calculate_centrality(graph),
        clustering=calculate_clustering(graph),
        complexity=calculate_aggregate_complexity(graph),
    )
