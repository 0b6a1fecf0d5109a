"""Pydantic models for entity catalog YAML validation.

An entity catalog describes a project and the types in it: their fields,
their persistence roles and their annotations. ``EntityCatalog`` serves the
finder collaborator protocols from a validated ``CatalogSpec``.

Example YAML::

    apiVersion: finderkit.io/v1
    kind: EntityCatalog
    project:
      name: petclinic
      features: [persistence]
    types:
      com.example.Person:
        plural: People
        fields:
          - {name: id, type: java.lang.Long, identifier: true}
          - {name: version, type: java.lang.Integer, version: true}
          - {name: firstName, type: java.lang.String}
          - {name: age, type: int}
        annotations:
          finderkit.annotations.EntityConfig:
            finders: [findPeopleByFirstName]

Annotation attribute values are kept exactly as written; their shape is
checked by whoever reads them.

Tags:
    finderkit, catalog, yaml, declarative, config-driven
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finderkit.core.types import ENTITY_CONFIG, PhysicalTypeIdentifier, TypeName


class FieldSpec(BaseModel):
    """A field declared on a catalog type."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Field name")
    type: str = Field(..., min_length=1, description="Fully qualified field type")
    identifier: bool = Field(default=False, description="Part of the entity identity")
    version: bool = Field(default=False, description="Optimistic-locking version field")
    static: bool = Field(default=False, description="Class-level field")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        TypeName(v)
        return v


class TypeSpec(BaseModel):
    """A type in the catalog."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(default=PhysicalTypeIdentifier.DEFAULT_PATH, description="Source path")
    entity: bool | None = Field(
        default=None,
        description="Managed entity; defaults to whether EntityConfig is present",
    )
    plural: str | None = Field(default=None, description="Plural display name")
    entity_name: str | None = Field(default=None, description="Entity name used in queries")
    entity_manager_field: str = Field(default="entityManager", description="Entity manager field name")
    entity_manager_type: str = Field(default="jakarta.persistence.EntityManager")
    fields: list[FieldSpec] = Field(default_factory=list)
    annotations: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Annotation type name to untyped attribute values",
    )

    @field_validator("fields")
    @classmethod
    def validate_unique_fields(cls, v: list[FieldSpec]) -> list[FieldSpec]:
        """Ensure field names are unique."""
        names = [f.name for f in v]
        if len(names) != len(set(names)):
            duplicates = {n for n in names if names.count(n) > 1}
            raise ValueError(f"Duplicate field names: {sorted(duplicates)}")
        return v

    @field_validator("entity_manager_type")
    @classmethod
    def validate_entity_manager_type(cls, v: str) -> str:
        TypeName(v)
        return v

    @field_validator("annotations")
    @classmethod
    def validate_annotation_types(cls, v: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        for annotation_type in v:
            TypeName(annotation_type)
        return v

    @property
    def is_entity(self) -> bool:
        if self.entity is not None:
            return self.entity
        return ENTITY_CONFIG.fully_qualified_name in self.annotations


class ProjectSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    features: list[str] = Field(default_factory=list)


class CatalogSpec(BaseModel):
    """Root model of an entity catalog document."""

    model_config = ConfigDict(extra="forbid")

    apiVersion: Literal["finderkit.io/v1"] = Field(default="finderkit.io/v1")
    kind: Literal["EntityCatalog"] = Field(default="EntityCatalog")
    project: ProjectSpec | None = None
    types: dict[str, TypeSpec] = Field(default_factory=dict)

    @field_validator("types")
    @classmethod
    def validate_type_names(cls, v: dict[str, TypeSpec]) -> dict[str, TypeSpec]:
        for name in v:
            TypeName(name)
        return v
