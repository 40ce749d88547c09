"""Cytoscape.js element and style mapping for assembled graphs.

Produces plain dicts ready to be dumped as JSON and handed to Cytoscape.js
(``elements``, ``style``, ``layout``).  Rendering and interaction are left to
the browser.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from ..core.graph import Graph

DEFAULT_COLOR = "#6b7280"  # Gray

NODE_COLORS = {
    "repository": "#1e40af",
    "package": "#3b82f6",
    "file": "#60a5fa",
    "class": "#10b981",
    "interface": "#059669",
    "function": "#f59e0b",
    "method": "#d97706",
    "variable": "#8b5cf6",
    "field": "#7c3aed",
    "enum": "#ec4899",
    "struct": "#06b6d4",
    "trait": "#0891b2",
    "module": "#84cc16",
    "namespace": "#65a30d",
    "import": "#ef4444",
    "export": "#dc2626",
    "type": "#f97316",
}

NODE_SHAPES = {
    "repository": "ellipse",
    "package": "round-rectangle",
    "file": "rectangle",
    "class": "hexagon",
    "interface": "diamond",
    "function": "triangle",
    "method": "triangle",
    "variable": "circle",
    "field": "circle",
    "enum": "octagon",
    "struct": "hexagon",
    "trait": "diamond",
    "module": "round-rectangle",
    "namespace": "round-rectangle",
    "import": "vee",
    "export": "vee",
    "type": "polygon",
}

NODE_BASE_SIZES = {
    "repository": 60,
    "package": 50,
    "file": 40,
    "class": 35,
    "interface": 30,
    "function": 25,
    "method": 25,
    "variable": 20,
    "field": 20,
    "enum": 30,
    "struct": 35,
    "trait": 30,
    "module": 45,
    "namespace": 45,
    "import": 20,
    "export": 20,
    "type": 25,
}
DEFAULT_NODE_SIZE = 25
MIN_NODE_SIZE = 15

EDGE_COLORS = {
    "imports": "#ef4444",
    "calls": "#f59e0b",
    "extends": "#10b981",
    "implements": "#8b5cf6",
    "uses": "#3b82f6",
    "imports_from": "#f97316",
    "exports_to": "#ec4899",
    "references": "#06b6d4",
    "depends_on": "#84cc16",
}

EDGE_STYLES = {
    "imports": "solid",
    "calls": "dashed",
    "extends": "solid",
    "implements": "dotted",
    "uses": "solid",
    "imports_from": "dashed",
    "exports_to": "dashed",
    "references": "dotted",
    "depends_on": "solid",
}

EDGE_WIDTHS = {
    "imports": 2,
    "calls": 1.5,
    "extends": 3,
    "implements": 2,
    "uses": 1.5,
    "imports_from": 1.5,
    "exports_to": 1.5,
    "references": 1,
    "depends_on": 2,
}

LAYOUT_KINDS = ("hierarchical", "force", "circular", "grid")


def get_node_color(node_type: str) -> str:
    return NODE_COLORS.get(node_type, DEFAULT_COLOR)


def get_node_shape(node_type: str) -> str:
    return NODE_SHAPES.get(node_type, "ellipse")


def get_node_size(node_type: str, complexity: int | None = None) -> float:
    """Base size for the type, scaled by ``complexity / 10`` (capped at 2x)."""
    base = NODE_BASE_SIZES.get(node_type, DEFAULT_NODE_SIZE)
    multiplier = min(complexity / 10, 2) if complexity else 1
    return max(base * multiplier, MIN_NODE_SIZE)


def get_edge_color(edge_type: str) -> str:
    return EDGE_COLORS.get(edge_type, DEFAULT_COLOR)


def get_edge_style(edge_type: str) -> str:
    return EDGE_STYLES.get(edge_type, "solid")


def get_edge_width(edge_type: str) -> float:
    return EDGE_WIDTHS.get(edge_type, 1)


def create_cytoscape_style() -> list[dict[str, Any]]:
    """Stylesheet driven by the per-element ``data`` fields set on conversion."""
    return [
        {
            "selector": "node",
            "style": {
                "background-color": "data(color)",
                "shape": "data(shape)",
                "width": "data(size)",
                "height": "data(size)",
                "border-color": "#374151",
                "border-width": "1px",
                "color": "#ffffff",
                "font-size": "10px",
                "font-weight": "600",
                "text-wrap": "wrap",
                "text-max-width": "80px",
                "text-valign": "center",
                "text-halign": "center",
                "text-outline-color": "#000000",
                "text-outline-width": "1px",
                "text-outline-opacity": "0.8",
                "label": "data(name)",
                "text-events": "yes",
                "events": "yes",
            },
        },
        {
            "selector": "edge",
            "style": {
                "width": "data(width)",
                "line-color": "data(color)",
                "line-style": "data(style)",
                "curve-style": "bezier",
                "target-arrow-color": "data(color)",
                "target-arrow-shape": "triangle",
                "arrow-scale": "0.8",
                "label": "data(label)",
                "font-size": "8px",
                "color": DEFAULT_COLOR,
                "text-rotation": "autorotate",
                "text-margin-y": "-10px",
            },
        },
        # Compound (container) nodes
        {
            "selector": "node:parent",
            "style": {
                "background-color": "rgba(59, 130, 246, 0.1)",
                "border-color": "#3b82f6",
                "border-width": "2px",
                "border-style": "dashed",
                "shape": "round-rectangle",
                "padding": "20px",
                "text-valign": "top",
                "text-halign": "center",
                "font-size": "12px",
                "font-weight": "700",
                "color": "#1e40af",
            },
        },
        _highlight("node:selected", "#fbbf24", "3px", "10px", 0.5),
        _edge_highlight("edge:selected", "#fbbf24"),
        _highlight("node:hover", "#f59e0b", "2px", "5px", 0.3),
        _edge_highlight("edge:hover", "#f59e0b"),
    ]


def _highlight(
    selector: str, color: str, border: str, blur: str, opacity: float
) -> dict[str, Any]:
    return {
        "selector": selector,
        "style": {
            "border-color": color,
            "border-width": border,
            "border-style": "solid",
            "shadow-blur": blur,
            "shadow-color": color,
            "shadow-offset-x": "0px",
            "shadow-offset-y": "0px",
            "shadow-opacity": str(opacity),
        },
    }


def _edge_highlight(selector: str, color: str) -> dict[str, Any]:
    return {
        "selector": selector,
        "style": {
            "line-color": color,
            "width": "data(width)",
            "line-style": "solid",
            "target-arrow-color": color,
        },
    }


def create_layout_config(kind: str = "hierarchical") -> dict[str, Any]:
    """Layout options for ``hierarchical`` (dagre), ``force`` (fcose), ``circular`` or ``grid``.

    Unknown kinds get the hierarchical layout.
    """
    animation = {
        "animate": True,
        "animationDuration": 1000,
        "animationEasing": "ease-in-out",
        "fit": True,
        "padding": 50,
    }
    if kind == "force":
        return {
            "name": "fcose",
            **animation,
            "nodeDimensionsIncludeLabels": True,
            "idealEdgeLength": 100,
            "nodeOverlap": 20,
            "gravity": 0.1,
            "numIter": 1000,
            "tile": False,
            "randomize": True,
        }
    if kind == "circular":
        return {
            "name": "circle",
            **animation,
            "startAngle": 0,
            "clockwise": True,
            "nodeDimensionsIncludeLabels": False,
        }
    if kind == "grid":
        return {"name": "grid", **animation, "nodeDimensionsIncludeLabels": False}

    if kind != "hierarchical":
        logger.debug(f"Unknown layout {kind!r}, using hierarchical")
    return {
        "name": "dagre",
        "rankDir": "TB",
        "rankSep": 100,
        "nodeSep": 50,
        "edgeSep": 20,
        **animation,
    }


def default_cytoscape_config(layout: str = "hierarchical") -> dict[str, Any]:
    return {
        "layout": create_layout_config(layout),
        "style": create_cytoscape_style(),
        "minZoom": 0.1,
        "maxZoom": 3,
        "wheelSensitivity": 0.1,
        "autoungrabify": False,
        "autolock": False,
        "autounselectify": False,
    }


def convert_graph_to_cytoscape(graph: Graph) -> list[dict[str, Any]]:
    """Convert nodes then edges to Cytoscape elements.

    Unset optional fields are left out of ``data``.  Edge targets are copied
    as-is, so an edge may reference a node that is not in the element list.
    """
    elements: list[dict[str, Any]] = []

    for node_id, node in graph.nodes.items():
        meta = node.metadata
        data = {
            "id": node_id,
            "name": node.name,
            "type": node.type,
            "color": get_node_color(node.type),
            "shape": get_node_shape(node.type),
            "size": get_node_size(node.type, meta.complexity),
            "parent": node.parent,
            "language": meta.language,
            "complexity": meta.complexity,
            "lineCount": meta.line_count,
            "symbolCount": meta.symbol_count,
            "dependencyCount": meta.dependency_count,
            "parseTime": meta.parse_time,
            "path": node.path,
        }
        elements.append(
            {"data": {k: v for k, v in data.items() if v is not None}, "classes": [node.type]}
        )

    for edge_id, edge in graph.edges.items():
        data = {
            "id": edge_id,
            "source": edge.source,
            "target": edge.target,
            "type": edge.type,
            "color": get_edge_color(edge.type),
            "style": get_edge_style(edge.type),
            "width": get_edge_width(edge.type),
            "label": edge.type,
            "weight": edge.weight or 1,
            "metadata": edge.metadata,
        }
        elements.append(
            {"data": {k: v for k, v in data.items() if v is not None}, "classes": [edge.type]}
        )

    return elements
