"""
Finder declarations and enumeration.

Module map::

    operations.py     FinderOperations: install_finder / list_finders_for
    declarations.py   DeclaredFinders ordered set (parse / merge / serialize)
    enumerator.py     Per-candidate resolution and listing
    signatures.py     "name(Type param, ...)" and "name - failure" rendering
    dynamic.py        ConventionFinderServices naming-convention grammar
"""

from finderkit.finders.declarations import DeclaredFinders, finders_shape_message
from finderkit.finders.dynamic import ConventionFinderServices
from finderkit.finders.enumerator import build_exclusions, render_listing, resolve_candidates
from finderkit.finders.operations import FinderOperations
from finderkit.finders.signatures import render_entry, render_failure, render_signature

__all__ = [
    "FinderOperations",
    "DeclaredFinders",
    "finders_shape_message",
    "ConventionFinderServices",
    "build_exclusions",
    "resolve_candidates",
    "render_listing",
    "render_signature",
    "render_failure",
    "render_entry",
]
