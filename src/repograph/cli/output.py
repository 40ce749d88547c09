"""Console output helpers shared by CLI commands."""

from __future__ import annotations

import sys
from typing import Any

import orjson
import typer
from loguru import logger
from rich.console import Console

from ..core.exceptions import is_input_error

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route loguru to stderr; DEBUG when verbose, otherwise WARNING."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")
    if verbose:
        logger.debug("Verbose logging enabled")


def print_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_info(message: str) -> None:
    console.print(f"[dim]{message}[/dim]")


def print_json(data: Any) -> None:
    """Write *data* as indented JSON, unstyled so it can be piped."""
    typer.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8"))


def exit_with_error(error: Exception) -> typer.Exit:
    """Report *error* and build the matching exit (1 = bad input, 2 = internal fault)."""
    if is_input_error(error):
        print_error(str(error))
        return typer.Exit(1)
    logger.opt(exception=error).error(f"Unexpected failure: {error}")
    print_error(f"Internal error: {error}")
    return typer.Exit(2)
