"""
CLI layer for finderkit.

Provides a Typer application whose commands delegate to
``finderkit.finders.FinderOperations``. This package handles only terminal
transport: argument parsing, coloured output and exit codes.

Entry point::

    finderkit --help
"""

from finderkit.cli.app import app

__all__ = ["app"]
