"""
Value types describing entity types, their members and their annotations.

These are the shapes exchanged with the collaborator protocols in
``finderkit.core.protocols``. All of them are immutable; "updating" a type
means building a new instance with ``with_annotation`` / ``with_attribute``
and handing it to a ``TypeManagementService``.

Architecture:
    ::

        TypeDetails ─────────────┬── annotations: AnnotationMetadata*
          name: TypeName         │     annotation_type: TypeName
          physical_type_id: str  │     attributes: {name: untyped value}
                                 └── fields: FieldMetadata*
                                       name: str
                                       field_type: TypeName

        PhysicalTypeMetadata ── member_holding_type_details: TypeDetails | None
        EntityMetadata ──────── plural, entity_name, entity_manager_field
        QueryHolder ─────────── parameter_types[i], parameter_names[i]

Tags:
    type-metadata, value-objects, finderkit
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Mapping


_QUALIFIED = re.compile(r"(?:[A-Za-z_]\w*\.)+([A-Za-z_]\w*)")
_NAME = re.compile(r"^[A-Za-z_][\w.$<>, \[\]?]*$")


@dataclass(frozen=True)
class TypeName:
    """Fully qualified name of a type, e.g. ``com.example.Person``."""

    fully_qualified_name: str

    def __post_init__(self) -> None:
        if not self.fully_qualified_name or not _NAME.match(self.fully_qualified_name):
            raise ValueError(f"Invalid type name: {self.fully_qualified_name!r}")

    @property
    def simple_name(self) -> str:
        """Unqualified name; qualifiers inside generic arguments are dropped too.

        >>> TypeName("java.util.List<com.example.Pet>").simple_name
        'List<Pet>'
        """
        return _QUALIFIED.sub(r"\1", self.fully_qualified_name)

    @property
    def package(self) -> str:
        base = self.fully_qualified_name.split("<", 1)[0]
        return base.rpartition(".")[0]

    def __str__(self) -> str:
        return self.fully_qualified_name


# Entity configuration annotation and the attribute holding declared finders
ENTITY_CONFIG = TypeName("finderkit.annotations.EntityConfig")
FINDERS_ATTRIBUTE = "finders"


class PhysicalTypeIdentifier:
    """Builds and parses physical type identifiers of the form ``<path>?<fqn>``."""

    DEFAULT_PATH = "src/main"

    @staticmethod
    def create(type_name: TypeName, path: str = DEFAULT_PATH) -> str:
        return f"{path}?{type_name.fully_qualified_name}"

    @staticmethod
    def is_valid(identifier: str) -> bool:
        path, sep, name = identifier.partition("?")
        return bool(sep and path and name)

    @staticmethod
    def get_type_name(identifier: str) -> TypeName:
        if not PhysicalTypeIdentifier.is_valid(identifier):
            raise ValueError(f"Invalid physical type identifier: {identifier!r}")
        return TypeName(identifier.partition("?")[2])

    @staticmethod
    def get_path(identifier: str) -> str:
        if not PhysicalTypeIdentifier.is_valid(identifier):
            raise ValueError(f"Invalid physical type identifier: {identifier!r}")
        return identifier.partition("?")[0]


@dataclass(frozen=True)
class FieldMetadata:
    """A field declared on a type."""

    name: str
    field_type: TypeName
    static: bool = False


@dataclass(frozen=True)
class AnnotationMetadata:
    """An annotation on a type; attribute values are stored untyped."""

    annotation_type: TypeName
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def get_attribute(self, name: str) -> Any | None:
        return self.attributes.get(name)

    def with_attribute(self, name: str, value: Any) -> AnnotationMetadata:
        """Copy of this annotation with one attribute set, others kept."""
        attributes = dict(self.attributes)
        attributes[name] = value
        return replace(self, attributes=attributes)


@dataclass(frozen=True)
class TypeDetails:
    """Source-level structure of a class: its annotations and fields."""

    name: TypeName
    physical_type_id: str
    annotations: tuple[AnnotationMetadata, ...] = ()
    fields: tuple[FieldMetadata, ...] = ()

    def get_annotation(self, annotation_type: TypeName) -> AnnotationMetadata | None:
        for annotation in self.annotations:
            if annotation.annotation_type == annotation_type:
                return annotation
        return None

    def with_annotation(self, annotation: AnnotationMetadata) -> TypeDetails:
        """Replace the annotation of the same type, or append it."""
        annotations = []
        replaced = False
        for existing in self.annotations:
            if existing.annotation_type == annotation.annotation_type:
                annotations.append(annotation)
                replaced = True
            else:
                annotations.append(existing)
        if not replaced:
            annotations.append(annotation)
        return replace(self, annotations=tuple(annotations))


@dataclass(frozen=True)
class MemberDetails:
    """Aggregated members of a type as seen by finder services."""

    fields: tuple[FieldMetadata, ...] = ()

    def get_field(self, name: str) -> FieldMetadata | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __iter__(self) -> Iterator[FieldMetadata]:
        return iter(self.fields)


@dataclass(frozen=True)
class EntityMetadata:
    """Persistence metadata for a managed entity."""

    plural: str
    entity_name: str
    entity_manager_field: FieldMetadata


@dataclass(frozen=True)
class PhysicalTypeMetadata:
    physical_type_id: str
    member_holding_type_details: TypeDetails | None = None


@dataclass(frozen=True)
class QueryHolder:
    """Parameter signature of a resolved finder."""

    parameter_types: tuple[TypeName, ...] = ()
    parameter_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.parameter_types) != len(self.parameter_names):
            raise ValueError(
                f"{len(self.parameter_types)} parameter types but "
                f"{len(self.parameter_names)} parameter names"
            )

    @property
    def parameters(self) -> list[tuple[TypeName, str]]:
        return list(zip(self.parameter_types, self.parameter_names))


__all__ = [
    "TypeName",
    "ENTITY_CONFIG",
    "FINDERS_ATTRIBUTE",
    "PhysicalTypeIdentifier",
    "FieldMetadata",
    "AnnotationMetadata",
    "TypeDetails",
    "MemberDetails",
    "EntityMetadata",
    "PhysicalTypeMetadata",
    "QueryHolder",
]
