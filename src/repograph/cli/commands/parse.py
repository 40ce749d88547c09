"""Parse command: run one extractor over one file."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from ...core.exceptions import RepoGraphError
from ...parsers.registry import get_language_from_file, get_parser_registry
from ..output import console, exit_with_error, print_error, print_json


def parse(
    file: Path = typer.Argument(
        ...,
        help="Source file to parse",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    language: str | None = typer.Option(
        None,
        "--language",
        "-l",
        help="Language tag (detected from the file extension if omitted)",
        rich_help_panel="🔍 Parsing Options",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the full extractor result as JSON",
        rich_help_panel="📊 Output Options",
    ),
) -> None:
    """🔍 Extract symbols and dependencies from a single source file.

    [bold cyan]Examples:[/bold cyan]

    [green]Symbol table:[/green]
        $ repograph parse src/server.go

    [green]Force a language, JSON output:[/green]
        $ repograph parse script.txt --language python --json
    """
    try:
        code = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print_error(f"Cannot read {file}: {e}")
        raise typer.Exit(1) from e

    registry = get_parser_registry()
    try:
        lang = language or get_language_from_file(file)
        result = registry.get_parser(lang, strict=True).parse(code, str(file))
    except RepoGraphError as e:
        raise exit_with_error(e) from e

    if json_output:
        print_json(result.to_dict())
        return

    meta = result.metadata
    console.print(
        f"\n[bold blue]{file.name}[/bold blue] [dim]({meta.language}, "
        f"{meta.file_size} chars, {meta.parse_time:.2f}ms)[/dim]\n"
    )

    symbols = Table(title=f"Symbols ({meta.symbol_count})")
    symbols.add_column("Name", style="cyan")
    symbols.add_column("Kind", style="magenta")
    symbols.add_column("Line", justify="right")
    symbols.add_column("Signature")
    symbols.add_column("Visibility", style="dim")
    for symbol in result.symbols:
        symbols.add_row(
            symbol.name,
            symbol.kind.value,
            str(symbol.start_line),
            symbol.signature or "",
            symbol.visibility.value if symbol.visibility else "",
        )
    console.print(symbols)

    if result.dependencies:
        deps = Table(title=f"Dependencies ({meta.dependency_count})")
        deps.add_column("Target", style="green")
        deps.add_column("Kind", style="magenta")
        deps.add_column("Line", justify="right")
        for dep in result.dependencies:
            deps.add_row(
                dep.target_name,
                dep.kind.value,
                str(dep.source_location.line) if dep.source_location else "",
            )
        console.print(deps)
