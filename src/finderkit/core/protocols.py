"""
Canonical collaborator protocols for finderkit.

Finder operations never touch source files, metadata stores or the finder
grammar directly. Every such concern is reached through one of the
structural protocols below, so the same operations run against the YAML
catalog, an in-memory test double, or any other backend with the right
shape.

Manifesto:
    Protocols define contracts without inheritance. They enable:
    - **Decoupling:** Operations depend on shape, not implementation
    - **Testability:** Any object matching the protocol works
    - **Portability:** Same operations on any metadata backend

Architecture:
    ::

        protocols.py
        ├── TypeLocationService       type name → physical id → TypeDetails
        ├── MetadataService           physical id → entity / physical metadata
        ├── MemberDetailsScanner      TypeDetails → MemberDetails
        ├── PersistenceMemberLocator  identifier and version fields
        ├── DynamicFinderServices     finder name derivation and resolution
        ├── TypeManagementService     persist updated TypeDetails
        └── ProjectOperations         project / feature gating

    Implementations:
        finderkit.catalog.EntityCatalog          every protocol but finders
        finderkit.finders.ConventionFinderServices  DynamicFinderServices

Guardrails:
    ❌ DON'T: Add implementation logic to protocol classes
    ✅ DO: Keep protocols pure contracts, implementations live elsewhere

Tags:
    protocol, contracts, metadata, finderkit
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from finderkit.core.types import (
    EntityMetadata,
    FieldMetadata,
    MemberDetails,
    PhysicalTypeMetadata,
    QueryHolder,
    TypeDetails,
    TypeName,
)


@runtime_checkable
class TypeLocationService(Protocol):
    """Locates types by name and returns their source-level details."""

    def get_physical_type_identifier(self, type_name: TypeName) -> str | None:
        """Physical type id for the type, or None when no source exists."""
        ...

    def get_type_details(self, physical_type_id: str) -> TypeDetails | None:
        """Current details of the type, or None when no source exists."""
        ...


@runtime_checkable
class MetadataService(Protocol):
    """
    Metadata lookups keyed by physical type id.

    Entity metadata and physical type metadata are produced by separate
    subsystems; a type can have one without the other while they are out
    of sync.
    """

    def get_entity_metadata(self, physical_type_id: str) -> EntityMetadata | None:
        """Entity metadata, or None when the type is not a managed entity."""
        ...

    def get_physical_type_metadata(self, physical_type_id: str) -> PhysicalTypeMetadata | None:
        """Physical type metadata, or None when it cannot be determined."""
        ...


@runtime_checkable
class MemberDetailsScanner(Protocol):
    def get_member_details(self, requested_by: str, type_details: TypeDetails) -> MemberDetails:
        """Aggregate the members visible on a type."""
        ...


@runtime_checkable
class PersistenceMemberLocator(Protocol):
    def get_identifier_fields(self, type_name: TypeName) -> list[FieldMetadata]:
        """Identity fields of the entity (possibly empty)."""
        ...

    def get_version_field(self, type_name: TypeName) -> FieldMetadata | None:
        """Optimistic-locking version field, if the entity has one."""
        ...


@runtime_checkable
class DynamicFinderServices(Protocol):
    """
    Finder grammar: derives finder names and resolves them to signatures.

    ``get_query_holder`` returns None for names it cannot parse and MAY raise
    for names that parse but cannot be resolved.
    """

    def get_finders(
        self,
        member_details: MemberDetails,
        plural: str,
        depth: int,
        exclusions: frozenset[str],
    ) -> list[str]:
        ...

    def get_query_holder(
        self,
        member_details: MemberDetails,
        finder_name: str,
        plural: str,
        entity_name: str,
    ) -> QueryHolder | None:
        ...


@runtime_checkable
class TypeManagementService(Protocol):
    def create_or_update_type_on_disk(self, type_details: TypeDetails) -> None:
        """Persist the given type details, replacing the stored ones."""
        ...


@runtime_checkable
class ProjectOperations(Protocol):
    def is_focused_project_available(self) -> bool:
        ...

    def is_feature_installed_in_focused_module(self, feature: str) -> bool:
        ...


__all__ = [
    "TypeLocationService",
    "MetadataService",
    "MemberDetailsScanner",
    "PersistenceMemberLocator",
    "DynamicFinderServices",
    "TypeManagementService",
    "ProjectOperations",
]
