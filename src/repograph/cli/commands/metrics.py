"""Metrics command: centrality, clustering and complexity for a saved graph."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from ...core.exceptions import RepoGraphError
from ...core.graph import GraphGenerator
from ...core.graph_metrics import METRIC_NAMES
from ..output import console, exit_with_error, print_json


def metrics(
    graph_file: Path = typer.Argument(
        ...,
        help="Serialized graph produced by 'repograph graph'",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    top: int = typer.Option(
        10,
        "--top",
        "-n",
        help="Rows to show per metric",
        min=1,
        rich_help_panel="📊 Output Options",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print every node's metrics as JSON",
        rich_help_panel="📊 Output Options",
    ),
) -> None:
    """📈 Report degree centrality, clustering and aggregate complexity."""
    try:
        generator = GraphGenerator.load(graph_file)
        report = generator.calculate_metrics()
    except RepoGraphError as e:
        raise exit_with_error(e) from e

    if json_output:
        print_json(report.to_dict())
        return

    nodes = generator.graph.nodes
    for metric in METRIC_NAMES:
        table = Table(title=f"Top {top} by {metric}")
        table.add_column("Node", style="cyan")
        table.add_column("Type", style="magenta")
        table.add_column(metric.capitalize(), style="green", justify="right")
        for node_id, value in report.top(metric, top):
            node = nodes[node_id]
            shown = f"{value:.3f}" if isinstance(value, float) else str(value)
            table.add_row(node.name, node.type, shown)
        console.print(table)
