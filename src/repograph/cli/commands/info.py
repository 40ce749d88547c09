"""Informational commands: supported languages and version."""

from __future__ import annotations

from rich.table import Table

from ... import __version__
from ...parsers.registry import get_parser_registry
from ..output import console


def languages() -> None:
    """🌐 List supported languages, their extensions and extractors."""
    table = Table(title="Supported Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Extensions", style="green")
    table.add_column("Extractor", style="dim")
    for language, info in get_parser_registry().get_parser_info().items():
        table.add_row(language, ", ".join(info["extensions"]), info["class"])
    console.print(table)


def version() -> None:
    """Show the repograph version."""
    console.print(f"repograph {__version__}")
