"""Cytoscape command: export a saved graph as Cytoscape.js elements."""

from __future__ import annotations

from pathlib import Path

import orjson
import typer

from ...core.exceptions import RepoGraphError
from ...core.graph import GraphGenerator
from ...visualization.cytoscape import (
    LAYOUT_KINDS,
    convert_graph_to_cytoscape,
    default_cytoscape_config,
)
from ..output import exit_with_error, print_error, print_json, print_success


def cytoscape(
    graph_file: Path = typer.Argument(
        ...,
        help="Serialized graph produced by 'repograph graph'",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to this file instead of stdout",
        rich_help_panel="📊 Output Options",
    ),
    layout: str = typer.Option(
        "hierarchical",
        "--layout",
        help=f"Layout: {', '.join(LAYOUT_KINDS)}",
        rich_help_panel="📊 Output Options",
    ),
    with_style: bool = typer.Option(
        True,
        "--style/--no-style",
        help="Include stylesheet, layout and zoom settings",
        rich_help_panel="📊 Output Options",
    ),
) -> None:
    """🎨 Convert a saved graph to Cytoscape.js elements."""
    if layout not in LAYOUT_KINDS:
        print_error(f"Invalid layout '{layout}'. Must be one of: {', '.join(LAYOUT_KINDS)}")
        raise typer.Exit(1)

    try:
        generator = GraphGenerator.load(graph_file)
    except RepoGraphError as e:
        raise exit_with_error(e) from e

    document = {"elements": convert_graph_to_cytoscape(generator.graph)}
    if with_style:
        document.update(default_cytoscape_config(layout))

    if output is None:
        print_json(document)
        return

    try:
        output.write_bytes(orjson.dumps(document, option=orjson.OPT_INDENT_2))
    except OSError as e:
        print_error(f"Cannot write {output}: {e}")
        raise typer.Exit(1) from e
    print_success(f"Wrote {len(document['elements'])} elements to {output}")
