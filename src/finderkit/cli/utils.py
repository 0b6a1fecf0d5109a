"""
CLI utility helpers: output consoles and operations wiring.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from rich.console import Console

from finderkit.catalog import EntityCatalog
from finderkit.core.errors import FinderKitError
from finderkit.core.settings import get_settings
from finderkit.finders import ConventionFinderServices, FinderOperations

console = Console()
err_console = Console(stderr=True)


# ── Operations wiring ────────────────────────────────────────────────────


def make_operations(catalog_path: Path | None = None) -> tuple[FinderOperations, EntityCatalog]:
    """Load the entity catalog and build ``FinderOperations`` over it."""
    settings = get_settings()
    catalog = EntityCatalog.load(catalog_path or settings.catalog_path)
    operations = FinderOperations(
        type_location=catalog,
        metadata=catalog,
        member_details_scanner=catalog,
        persistence_member_locator=catalog,
        finder_services=ConventionFinderServices(),
        type_management=catalog,
        project_operations=catalog,
        required_feature=settings.required_feature,
    )
    return operations, catalog


# ── Error handling ───────────────────────────────────────────────────────


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print finderkit errors to stderr and exit with code 1."""
    try:
        yield
    except FinderKitError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e


def require_installation_possible(operations: FinderOperations) -> None:
    if not operations.is_finder_installation_possible():
        err_console.print(
            "[bold red]Error[/bold red]: finder commands need a project with the "
            f"'{get_settings().required_feature}' feature installed"
        )
        raise typer.Exit(code=1)
