"""
CLI: ``finderkit finder`` - list and install finders.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer

from finderkit.cli.utils import console, err_console, exit_on_error, make_operations, require_installation_possible
from finderkit.core.settings import get_settings
from finderkit.core.types import TypeName

app = typer.Typer(no_args_is_help=True)


def filter_entries(entries: list[str], filter_text: str | None) -> list[str]:
    """Keep entries containing every comma-separated token (case-insensitive)."""
    if not filter_text or not filter_text.strip():
        return entries
    required = {token.strip().lower() for token in filter_text.split(",") if token.strip()}
    return [entry for entry in entries if all(token in entry.lower() for token in required)]


def _type_name(value: str) -> TypeName:
    try:
        return TypeName(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command("list")
def list_finders(
    type_name: str = typer.Option(..., "--type", "-t", help="Entity type, fully qualified"),
    depth: int | None = typer.Option(None, "--depth", help="Fields combined per finder"),
    filter_text: str | None = typer.Option(
        None, "--filter", help="Comma separated strings every listed finder must contain"
    ),
    catalog: Path | None = typer.Option(None, "--catalog", "-c", help="Entity catalog YAML"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the finders derivable for an entity."""
    settings = get_settings()
    depth = settings.default_depth if depth is None else depth
    if depth < 1:
        err_console.print("[bold red]Error[/bold red]: Depth must be at least 1")
        raise typer.Exit(code=1)
    if depth > settings.max_depth:
        err_console.print(
            f"[bold red]Error[/bold red]: Depth must not be greater than {settings.max_depth}"
        )
        raise typer.Exit(code=1)

    target = _type_name(type_name)
    with exit_on_error():
        operations, _ = make_operations(catalog)
        require_installation_possible(operations)
        entries = filter_entries(operations.list_finders_for(target, depth), filter_text)

    if json_out:
        console.print_json(json.dumps(entries))
        return
    if not entries:
        console.print("[dim]No finders.[/dim]")
        return
    for entry in entries:
        console.print(entry, markup=False, highlight=False, soft_wrap=True)


@app.command("add")
def add_finder(
    type_name: str = typer.Option(..., "--type", "-t", help="Entity type, fully qualified"),
    finder_name: str = typer.Option(..., "--finder-name", "-f", help="Finder to declare"),
    catalog: Path | None = typer.Option(None, "--catalog", "-c", help="Entity catalog YAML"),
) -> None:
    """Declare a finder on an entity."""
    target = _type_name(type_name)
    with exit_on_error():
        operations, _ = make_operations(catalog)
        require_installation_possible(operations)
        installed = operations.install_finder(target, finder_name)

    if not installed:
        err_console.print(f"[yellow]Finder '{finder_name}' was not added to {target}[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {finder_name} declared on {target}")
