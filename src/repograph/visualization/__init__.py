"""Visualization helpers for assembled graphs."""

from .cytoscape import convert_graph_to_cytoscape, default_cytoscape_config

__all__ = ["convert_graph_to_cytoscape", "default_cytoscape_config"]
