"""Graph command: scan a repository and write the serialized graph."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ...config.defaults import CONFIG_FILENAME
from ...config.settings import RepoGraphSettings
from ...core.exceptions import RepoGraphError
from ...core.scanner import scan_repository
from ..output import console, exit_with_error, print_success


def graph(
    root: Path = typer.Argument(
        Path("."),
        help="Repository root to scan",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    output: Path = typer.Option(
        Path("graph.json"),
        "--output",
        "-o",
        help="Where to write the serialized graph",
        rich_help_panel="📊 Output Options",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Configuration file (defaults to <root>/{CONFIG_FILENAME})",
        exists=True,
        dir_okay=False,
        rich_help_panel="🔧 Global Options",
    ),
    tree_sitter: bool = typer.Option(
        False,
        "--tree-sitter",
        help="Use the tree-sitter extractor for JavaScript/TypeScript",
        rich_help_panel="🔍 Parsing Options",
    ),
) -> None:
    """🕸️  Scan a repository and assemble its code graph.

    [bold cyan]Examples:[/bold cyan]

    [green]Scan the current directory:[/green]
        $ repograph graph

    [green]Custom output path:[/green]
        $ repograph graph ./my-repo --output my-repo.json
    """
    try:
        settings = RepoGraphSettings.load(config or root / CONFIG_FILENAME)
        if tree_sitter:
            settings.parse.use_tree_sitter = True

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task(f"[cyan]Scanning {root}...", total=None)
            generator = scan_repository(root, settings)

        generator.save(output)
    except RepoGraphError as e:
        raise exit_with_error(e) from e
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot write {output}: {e}")
        raise typer.Exit(1) from e

    meta = generator.graph.metadata
    table = Table(title="Graph Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Nodes", str(meta.node_count))
    table.add_row("Edges", str(meta.edge_count))
    table.add_row("Languages", ", ".join(sorted(meta.languages)) or "-")
    table.add_row("Total size", f"{meta.total_size:,} chars")
    table.add_row("Parse time", f"{meta.total_parse_time:.1f}ms")
    console.print(table)
    print_success(f"Graph written to {output}")
