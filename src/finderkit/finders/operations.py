"""
Finder operations.

Two stateless services over an entity's metadata:

- ``install_finder`` merges a finder name into the entity's declared finders
  and writes the updated ``EntityConfig`` annotation back.
- ``list_finders_for`` renders the signature of every finder derivable from
  the entity's fields up to a combination depth.

Failure tiers:
    ::

        ┌──────────────────────┬────────────────────────────────────────────┐
        │ Soft no-op           │ install only: source missing, not an       │
        │ (warning, no write)  │ entity, no EntityConfig, bad finder name   │
        ├──────────────────────┼────────────────────────────────────────────┤
        │ Hard validation      │ AnnotationValidationError, no write        │
        ├──────────────────────┼────────────────────────────────────────────┤
        │ Hard consistency     │ ConsistencyError: entity metadata exists   │
        │                      │ but type details are missing               │
        ├──────────────────────┼────────────────────────────────────────────┤
        │ Per-item             │ list only: "name - failure" entry          │
        └──────────────────────┴────────────────────────────────────────────┘

Usage:
    from finderkit.finders import ConventionFinderServices, FinderOperations

    operations = FinderOperations(
        type_location=catalog,
        metadata=catalog,
        member_details_scanner=catalog,
        persistence_member_locator=catalog,
        finder_services=ConventionFinderServices(),
        type_management=catalog,
        project_operations=catalog,
    )
    operations.install_finder(TypeName("com.example.Person"), "findPeopleByLastName")
    operations.list_finders_for(TypeName("com.example.Person"), depth=2)
"""

from __future__ import annotations

from finderkit.core.errors import (
    ConsistencyError,
    EntitySourceNotFoundError,
    FinderResolutionError,
    NotAnEntityError,
)
from finderkit.core.logging import LogContext, get_logger
from finderkit.core.protocols import (
    DynamicFinderServices,
    MemberDetailsScanner,
    MetadataService,
    PersistenceMemberLocator,
    ProjectOperations,
    TypeLocationService,
    TypeManagementService,
)
from finderkit.core.result import Result, partition_results
from finderkit.core.types import (
    ENTITY_CONFIG,
    FINDERS_ATTRIBUTE,
    EntityMetadata,
    MemberDetails,
    QueryHolder,
    TypeName,
)
from finderkit.finders.declarations import DeclaredFinders
from finderkit.finders.enumerator import build_exclusions, render_listing, resolve_candidates

logger = get_logger(__name__)

DEFAULT_REQUIRED_FEATURE = "persistence"


class FinderOperations:
    """Installs and lists finders on entity types."""

    def __init__(
        self,
        *,
        type_location: TypeLocationService,
        metadata: MetadataService,
        member_details_scanner: MemberDetailsScanner,
        persistence_member_locator: PersistenceMemberLocator,
        finder_services: DynamicFinderServices,
        type_management: TypeManagementService,
        project_operations: ProjectOperations | None = None,
        required_feature: str = DEFAULT_REQUIRED_FEATURE,
    ):
        self._type_location = type_location
        self._metadata = metadata
        self._member_details_scanner = member_details_scanner
        self._persistence_member_locator = persistence_member_locator
        self._finder_services = finder_services
        self._type_management = type_management
        self._project_operations = project_operations
        self._required_feature = required_feature

    @property
    def _requested_by(self) -> str:
        return f"{type(self).__module__}.{type(self).__qualname__}"

    # ------------------------------------------------------------------ #
    # Installation
    # ------------------------------------------------------------------ #

    def is_finder_installation_possible(self) -> bool:
        if self._project_operations is None:
            return False
        return (
            self._project_operations.is_focused_project_available()
            and self._project_operations.is_feature_installed_in_focused_module(
                self._required_feature
            )
        )

    def install_finder(self, type_name: TypeName, finder_name: str) -> bool:
        """Declare ``finder_name`` on the entity ``type_name``.

        Returns True when the updated annotation was written, False when the
        request was skipped (the reason is logged as a warning). Installing a
        finder that is already declared rewrites the unchanged list.

        Raises:
            ValueError: If either argument is None
            ConsistencyError: If entity metadata exists but the source does not
            AnnotationValidationError: If the stored finders are not a list of strings
        """
        if type_name is None:
            raise ValueError("Type name required")
        if finder_name is None:
            raise ValueError("Finder name required")

        fqn = type_name.fully_qualified_name
        with LogContext(type_name=fqn, finder=finder_name):
            physical_type_id = self._type_location.get_physical_type_identifier(type_name)
            if physical_type_id is None:
                logger.warning("finder_source_not_found", reason=f"Cannot locate source for '{fqn}'")
                return False

            # Any type with finders has to be an entity
            entity_metadata = self._metadata.get_entity_metadata(physical_type_id)
            if entity_metadata is None:
                logger.warning(
                    "finder_target_not_entity",
                    reason=f"Cannot provide finders because '{fqn}' is not an entity",
                    physical_type_id=physical_type_id,
                )
                return False

            # Entity metadata exists, so the source must exist too
            type_details = self._type_location.get_type_details(physical_type_id)
            if type_details is None:
                raise ConsistencyError(f"Cannot locate source for '{fqn}'").with_context(
                    type_name=fqn, physical_type_id=physical_type_id
                )

            entity_config = type_details.get_annotation(ENTITY_CONFIG)
            if entity_config is None:
                logger.warning(
                    "finder_entity_annotation_missing",
                    reason=f"Unable to find the entity annotation on '{fqn}'",
                )
                return False

            member_details = self._member_details_scanner.get_member_details(
                self._requested_by, type_details
            )
            if not self._is_resolvable(member_details, finder_name, entity_metadata):
                logger.warning(
                    "finder_not_resolvable",
                    reason=f"Finder name '{finder_name}' either does not exist or contains an error",
                )
                return False

            declared = DeclaredFinders.from_attribute(entity_config.get_attribute(FINDERS_ATTRIBUTE))
            updated = declared.with_finder(finder_name)

            annotation = entity_config.with_attribute(FINDERS_ATTRIBUTE, updated.to_attribute())
            self._type_management.create_or_update_type_on_disk(
                type_details.with_annotation(annotation)
            )
            logger.info(
                "finder_installed",
                already_declared=updated is declared,
                declared_count=len(updated),
            )
            return True

    def _is_resolvable(
        self,
        member_details: MemberDetails,
        finder_name: str,
        entity_metadata: EntityMetadata,
    ) -> bool:
        try:
            query_holder = self._finder_services.get_query_holder(
                member_details,
                finder_name,
                entity_metadata.plural,
                entity_metadata.entity_name,
            )
        except FinderResolutionError as exc:
            logger.debug("finder_resolution_failed", error=str(exc))
            return False
        return query_holder is not None

    # ------------------------------------------------------------------ #
    # Enumeration
    # ------------------------------------------------------------------ #

    def resolve_finders(self, type_name: TypeName, depth: int) -> dict[str, Result[QueryHolder]]:
        """Resolve every finder derivable up to ``depth`` into a per-name Result.

        Raises:
            ValueError: If type_name is None
            EntitySourceNotFoundError: If the type cannot be located
            NotAnEntityError: If the type is not an entity
            ConsistencyError: If physical type metadata or details are missing
        """
        if type_name is None:
            raise ValueError("Type name required")

        fqn = type_name.fully_qualified_name
        physical_type_id = self._type_location.get_physical_type_identifier(type_name)
        if physical_type_id is None:
            raise EntitySourceNotFoundError(f"Cannot locate source for '{fqn}'").with_context(
                type_name=fqn
            )

        entity_metadata = self._metadata.get_entity_metadata(physical_type_id)
        if entity_metadata is None:
            raise NotAnEntityError(
                f"Cannot provide finders because '{fqn}' is not an entity"
            ).with_context(type_name=fqn, physical_type_id=physical_type_id)

        physical_type_metadata = self._metadata.get_physical_type_metadata(physical_type_id)
        if physical_type_metadata is None:
            raise ConsistencyError(
                f"Could not determine physical type metadata for type {fqn}"
            ).with_context(type_name=fqn, physical_type_id=physical_type_id)
        type_details = physical_type_metadata.member_holding_type_details
        if type_details is None:
            raise ConsistencyError(
                f"Could not determine class or interface type details for type {fqn}"
            ).with_context(type_name=fqn, physical_type_id=physical_type_id)

        member_details = self._member_details_scanner.get_member_details(
            self._requested_by, type_details
        )
        exclusions = build_exclusions(
            entity_metadata,
            self._persistence_member_locator.get_identifier_fields(type_name),
            self._persistence_member_locator.get_version_field(type_name),
        )

        candidates = self._finder_services.get_finders(
            member_details, entity_metadata.plural, depth, exclusions
        )
        return resolve_candidates(
            self._finder_services, member_details, entity_metadata, candidates
        )

    def list_finders_for(self, type_name: TypeName, depth: int) -> list[str]:
        """Sorted signatures of the finders derivable up to ``depth``.

        Finders that fail to resolve are listed as ``"<name> - failure"``.
        Raises the same errors as :meth:`resolve_finders`.
        """
        with LogContext(type_name=getattr(type_name, "fully_qualified_name", None)):
            outcomes = self.resolve_finders(type_name, depth)
            listing = render_listing(outcomes)
            _, failures = partition_results(outcomes.values())
            logger.debug(
                "finders_listed", depth=depth, count=len(listing), failures=len(failures)
            )
            return listing
