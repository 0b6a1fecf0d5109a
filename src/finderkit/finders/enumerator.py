"""
Finder enumeration: resolve every candidate finder name independently.

Candidate names come from the name-derivation side of a
``DynamicFinderServices``. Each one is resolved into its own ``Result``
so that a name which derives cleanly but fails to resolve (ambiguous or
ill-typed field combinations) only degrades its own entry.

Architecture:
    ::

        candidates ──► resolve_candidates ──► {name: Ok(QueryHolder) | Err(exc)}
                                                     │
                                                     ▼
                                              render_listing
                                                     │
                                                     ▼
                              sorted ["a(String x)", "b()", "c - failure"]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from finderkit.core.errors import FinderResolutionError
from finderkit.core.logging import get_logger
from finderkit.core.protocols import DynamicFinderServices
from finderkit.core.result import Ok, Result, from_optional, try_result
from finderkit.core.types import EntityMetadata, FieldMetadata, MemberDetails, QueryHolder
from finderkit.finders.signatures import render_entry

logger = get_logger(__name__)


def build_exclusions(
    entity_metadata: EntityMetadata,
    identifier_fields: Iterable[FieldMetadata],
    version_field: FieldMetadata | None,
) -> frozenset[str]:
    """Field names that never take part in finder derivation."""
    exclusions = {entity_metadata.entity_manager_field.name}
    exclusions.update(f.name for f in identifier_fields)
    if version_field is not None:
        exclusions.add(version_field.name)
    return frozenset(exclusions)


def resolve_candidates(
    finder_services: DynamicFinderServices,
    member_details: MemberDetails,
    entity_metadata: EntityMetadata,
    candidates: Iterable[str],
) -> dict[str, Result[QueryHolder]]:
    """Resolve each distinct candidate exactly once, in candidate order."""
    outcomes: dict[str, Result[QueryHolder]] = {}
    for finder_name in candidates:
        if finder_name in outcomes:
            logger.warning("duplicate_finder_candidate", finder=finder_name)
            continue
        outcome = try_result(
            lambda: finder_services.get_query_holder(
                member_details,
                finder_name,
                entity_metadata.plural,
                entity_metadata.entity_name,
            )
        )
        if isinstance(outcome, Ok):
            outcome = from_optional(
                outcome.value,
                FinderResolutionError(
                    f"Finder '{finder_name}' could not be resolved", finder=finder_name
                ),
            )
        outcome.inspect_err(
            lambda exc: logger.debug(
                "finder_resolution_failed", finder=finder_name, error=str(exc)
            )
        )
        outcomes[finder_name] = outcome
    return outcomes


def render_listing(outcomes: Mapping[str, Result[QueryHolder]]) -> list[str]:
    """Sorted, duplicate-free rendered entries, keyed on the full string."""
    return sorted({render_entry(name, outcome) for name, outcome in outcomes.items()})
