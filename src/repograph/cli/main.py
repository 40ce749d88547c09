"""repograph command-line entry point."""

from __future__ import annotations

import typer

from .commands.cytoscape import cytoscape
from .commands.graph import graph
from .commands.info import languages, version
from .commands.metrics import metrics
from .commands.parse import parse
from .output import setup_logging

app = typer.Typer(
    name="repograph",
    help="🕸️  Extract symbols and dependencies from source code and build code graphs",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Verbose output",
        rich_help_panel="🔧 Global Options",
    ),
) -> None:
    setup_logging(verbose)


app.command("parse")(parse)
app.command("graph")(graph)
app.command("metrics")(metrics)
app.command("cytoscape")(cytoscape)
app.command("languages")(languages)
app.command("version")(version)


if __name__ == "__main__":
    app()
