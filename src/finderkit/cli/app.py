"""
Root Typer application for the finderkit CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from finderkit.core.logging import configure_logging
from finderkit.core.settings import get_settings

app = Typer(
    name="finderkit",
    help="finderkit: declare and list entity finders.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from finderkit import __version__

        typer.echo(f"finderkit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Override FINDERKIT_LOG_LEVEL."),
) -> None:
    """finderkit CLI: manage finder declarations on entities."""
    settings = get_settings()
    configure_logging(level=log_level or settings.log_level, json_format=settings.json_logs)


# ── Sub-command registration ─────────────────────────────────────────────

from finderkit.cli.finder import app as finder_app  # noqa: E402

app.add_typer(finder_app, name="finder", help="Finder listing and installation.")


def run() -> None:
    """Console-script entry point."""
    app()
