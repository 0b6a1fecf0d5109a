"""
YAML-backed entity catalog.

``EntityCatalog`` implements every collaborator protocol finder operations
need except the finder grammar itself:

    ::

        TypeLocationService        type name ⇄ physical id, TypeDetails
        MetadataService            EntityMetadata, PhysicalTypeMetadata
        MemberDetailsScanner       declared fields + entity manager field
        PersistenceMemberLocator   identifier / version fields
        TypeManagementService      annotation updates, written back to YAML
        ProjectOperations          project presence and installed features

Writes replace the type's annotations in the in-memory document and, when
the catalog was loaded from a file, save the whole document back to it.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from finderkit.core.errors import CatalogError
from finderkit.core.logging import get_logger
from finderkit.core.types import (
    AnnotationMetadata,
    EntityMetadata,
    FieldMetadata,
    MemberDetails,
    PhysicalTypeIdentifier,
    PhysicalTypeMetadata,
    TypeDetails,
    TypeName,
)
from finderkit.catalog.spec import CatalogSpec, FieldSpec, TypeSpec

logger = get_logger(__name__)


def default_plural(name: str) -> str:
    """Naive English plural used when a type declares none."""
    if name.endswith("y") and len(name) > 1 and name[-2].lower() not in "aeiou":
        return name[:-1] + "ies"
    if name.endswith(("s", "x", "z", "ch", "sh")):
        return name + "es"
    return name + "s"


class EntityCatalog:
    """Serves type, entity and project metadata from a ``CatalogSpec``."""

    def __init__(self, spec: CatalogSpec, path: Path | None = None):
        self._spec = spec
        self._path = path

    # ------------------------------------------------------------------ #
    # Loading / saving
    # ------------------------------------------------------------------ #

    @classmethod
    def from_yaml(cls, content: str, path: Path | None = None) -> EntityCatalog:
        """Parse and validate a catalog document.

        Raises:
            CatalogError: If the YAML is invalid or does not match the schema
        """
        source = str(path) if path is not None else None
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML: {e}", path=source, cause=e) from e
        if data is None:
            data = {}
        try:
            spec = CatalogSpec.model_validate(data)
        except PydanticValidationError as e:
            raise CatalogError(f"Invalid entity catalog: {e}", path=source, cause=e) from e
        return cls(spec, path)

    @classmethod
    def load(cls, path: str | Path) -> EntityCatalog:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CatalogError(f"Entity catalog not found: {path}", path=str(path), cause=e) from e
        return cls.from_yaml(content, path)

    def to_yaml(self) -> str:
        data = self._spec.model_dump(mode="json", exclude_none=True)
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)

    def save(self) -> None:
        if self._path is None:
            return
        self._path.write_text(self.to_yaml(), encoding="utf-8")
        logger.debug("catalog_saved", path=str(self._path))

    @property
    def spec(self) -> CatalogSpec:
        return self._spec

    @property
    def path(self) -> Path | None:
        return self._path

    # ------------------------------------------------------------------ #
    # Internal lookups
    # ------------------------------------------------------------------ #

    def _type_spec(self, physical_type_id: str) -> tuple[TypeName, TypeSpec] | None:
        if not PhysicalTypeIdentifier.is_valid(physical_type_id):
            return None
        type_name = PhysicalTypeIdentifier.get_type_name(physical_type_id)
        type_spec = self._spec.types.get(type_name.fully_qualified_name)
        if type_spec is None or type_spec.path != PhysicalTypeIdentifier.get_path(physical_type_id):
            return None
        return type_name, type_spec

    @staticmethod
    def _field(field_spec: FieldSpec) -> FieldMetadata:
        return FieldMetadata(
            name=field_spec.name,
            field_type=TypeName(field_spec.type),
            static=field_spec.static,
        )

    @staticmethod
    def _entity_manager_field(type_spec: TypeSpec) -> FieldMetadata:
        return FieldMetadata(
            name=type_spec.entity_manager_field,
            field_type=TypeName(type_spec.entity_manager_type),
        )

    def _details(self, type_name: TypeName, type_spec: TypeSpec) -> TypeDetails:
        return TypeDetails(
            name=type_name,
            physical_type_id=PhysicalTypeIdentifier.create(type_name, type_spec.path),
            annotations=tuple(
                AnnotationMetadata(TypeName(annotation_type), dict(attributes))
                for annotation_type, attributes in type_spec.annotations.items()
            ),
            fields=tuple(self._field(f) for f in type_spec.fields),
        )

    # ------------------------------------------------------------------ #
    # TypeLocationService
    # ------------------------------------------------------------------ #

    def get_physical_type_identifier(self, type_name: TypeName) -> str | None:
        type_spec = self._spec.types.get(type_name.fully_qualified_name)
        if type_spec is None:
            return None
        return PhysicalTypeIdentifier.create(type_name, type_spec.path)

    def get_type_details(self, physical_type_id: str) -> TypeDetails | None:
        found = self._type_spec(physical_type_id)
        if found is None:
            return None
        return self._details(*found)

    # ------------------------------------------------------------------ #
    # MetadataService
    # ------------------------------------------------------------------ #

    def get_entity_metadata(self, physical_type_id: str) -> EntityMetadata | None:
        found = self._type_spec(physical_type_id)
        if found is None:
            return None
        type_name, type_spec = found
        if not type_spec.is_entity:
            return None
        return EntityMetadata(
            plural=type_spec.plural or default_plural(type_name.simple_name),
            entity_name=type_spec.entity_name or type_name.simple_name,
            entity_manager_field=self._entity_manager_field(type_spec),
        )

    def get_physical_type_metadata(self, physical_type_id: str) -> PhysicalTypeMetadata | None:
        found = self._type_spec(physical_type_id)
        if found is None:
            return None
        return PhysicalTypeMetadata(
            physical_type_id=physical_type_id,
            member_holding_type_details=self._details(*found),
        )

    # ------------------------------------------------------------------ #
    # MemberDetailsScanner
    # ------------------------------------------------------------------ #

    def get_member_details(self, requested_by: str, type_details: TypeDetails) -> MemberDetails:
        """Declared fields, plus the entity manager field entities receive."""
        fields = list(type_details.fields)
        found = self._type_spec(type_details.physical_type_id)
        if found is not None and found[1].is_entity:
            em_field = self._entity_manager_field(found[1])
            if all(f.name != em_field.name for f in fields):
                fields.append(em_field)
        return MemberDetails(tuple(fields))

    # ------------------------------------------------------------------ #
    # PersistenceMemberLocator
    # ------------------------------------------------------------------ #

    def get_identifier_fields(self, type_name: TypeName) -> list[FieldMetadata]:
        type_spec = self._spec.types.get(type_name.fully_qualified_name)
        if type_spec is None:
            return []
        return [self._field(f) for f in type_spec.fields if f.identifier]

    def get_version_field(self, type_name: TypeName) -> FieldMetadata | None:
        type_spec = self._spec.types.get(type_name.fully_qualified_name)
        if type_spec is None:
            return None
        for f in type_spec.fields:
            if f.version:
                return self._field(f)
        return None

    # ------------------------------------------------------------------ #
    # TypeManagementService
    # ------------------------------------------------------------------ #

    def create_or_update_type_on_disk(self, type_details: TypeDetails) -> None:
        """Store the annotations of ``type_details`` and save the catalog."""
        found = self._type_spec(type_details.physical_type_id)
        if found is None:
            raise CatalogError(
                f"Cannot update unknown type '{type_details.name}'",
                path=str(self._path) if self._path else None,
            )
        _, type_spec = found
        type_spec.annotations = {
            annotation.annotation_type.fully_qualified_name: dict(annotation.attributes)
            for annotation in type_details.annotations
        }
        self.save()
        logger.info("type_updated", type_name=type_details.name.fully_qualified_name)

    # ------------------------------------------------------------------ #
    # ProjectOperations
    # ------------------------------------------------------------------ #

    def is_focused_project_available(self) -> bool:
        return self._spec.project is not None

    def is_feature_installed_in_focused_module(self, feature: str) -> bool:
        if self._spec.project is None:
            return False
        return feature in self._spec.project.features
