"""
Naming-convention finder services.

Finder names follow the convention::

    find<Plural>By<Clause>(<Joiner><Clause>)*

    Clause = <FieldName, first letter upper-cased><Operator?>
    Joiner = And | Or

``ConventionFinderServices`` derives every such name from an entity's fields
and resolves a name back into the parameters its finder method takes. It
produces parameter lists only; turning a finder into an actual query belongs
to whatever generates the finder code.

Operators:
    ::

        ┌─────────────────────┬──────────────────────┬──────────────────────┐
        │ Operator            │ Field types          │ Parameters           │
        ├─────────────────────┼──────────────────────┼──────────────────────┤
        │ (none), Equals,     │ any non-collection   │ (T field)            │
        │ NotEquals           │                      │                      │
        │ IsNull, IsNotNull   │ non-primitive        │ ()                   │
        │ Like                │ string               │ (String field)       │
        │ GreaterThan[Equals],│ numeric, temporal    │ (T field)            │
        │ LessThan[Equals]    │                      │                      │
        │ Between             │ numeric, temporal    │ (T minField,         │
        │                     │                      │  T maxField)         │
        └─────────────────────┴──────────────────────┴──────────────────────┘

Examples:
    >>> from finderkit.core.types import FieldMetadata, MemberDetails, TypeName
    >>> members = MemberDetails((FieldMetadata("age", TypeName("int")),))
    >>> services = ConventionFinderServices()
    >>> holder = services.get_query_holder(members, "findPeopleByAgeBetween", "People", "Person")
    >>> holder.parameter_names
    ('minAge', 'maxAge')
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from finderkit.core.errors import FinderResolutionError
from finderkit.core.types import FieldMetadata, MemberDetails, QueryHolder, TypeName

JOINERS = ("And", "Or")

PRIMITIVE_TYPES = frozenset({"boolean", "byte", "char", "short", "int", "long", "float", "double"})
STRING_TYPES = frozenset({"String", "str"})
COMPARABLE_TYPES = frozenset({
    "byte", "short", "int", "long", "float", "double",
    "Byte", "Short", "Integer", "Long", "Float", "Double",
    "BigDecimal", "BigInteger", "Decimal", "Number",
    "Date", "Calendar", "Timestamp", "LocalDate", "LocalDateTime", "LocalTime",
    "Instant", "date", "datetime", "time",
})
COLLECTION_TYPES = frozenset({
    "Collection", "List", "Set", "SortedSet", "Map",
    "list", "set", "frozenset", "dict", "tuple",
})


class TypeKind(str, Enum):
    """Which field types an operator applies to."""

    ANY = "any"
    NULLABLE = "nullable"
    STRING = "string"
    COMPARABLE = "comparable"


def _base_name(field_type: TypeName) -> str:
    return field_type.simple_name.split("<", 1)[0].split("[", 1)[0]


def _is_collection(field_type: TypeName) -> bool:
    return _base_name(field_type) in COLLECTION_TYPES or field_type.simple_name.endswith("[]")


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


@dataclass(frozen=True)
class Operator:
    token: str
    kind: TypeKind
    arity: int

    def applies_to(self, field_type: TypeName) -> bool:
        if _is_collection(field_type):
            return False
        base = _base_name(field_type)
        if self.kind is TypeKind.NULLABLE:
            return base not in PRIMITIVE_TYPES
        if self.kind is TypeKind.STRING:
            return base in STRING_TYPES
        if self.kind is TypeKind.COMPARABLE:
            return base in COMPARABLE_TYPES
        return True

    def parameters(self, field: FieldMetadata) -> list[tuple[TypeName, str]]:
        if self.arity == 0:
            return []
        if self.arity == 2:
            suffix = capitalize(field.name)
            return [(field.field_type, "min" + suffix), (field.field_type, "max" + suffix)]
        return [(field.field_type, field.name)]


OPERATORS: tuple[Operator, ...] = (
    Operator("", TypeKind.ANY, 1),
    Operator("Equals", TypeKind.ANY, 1),
    Operator("NotEquals", TypeKind.ANY, 1),
    Operator("IsNull", TypeKind.NULLABLE, 0),
    Operator("IsNotNull", TypeKind.NULLABLE, 0),
    Operator("Like", TypeKind.STRING, 1),
    Operator("GreaterThan", TypeKind.COMPARABLE, 1),
    Operator("GreaterThanEquals", TypeKind.COMPARABLE, 1),
    Operator("LessThan", TypeKind.COMPARABLE, 1),
    Operator("LessThanEquals", TypeKind.COMPARABLE, 1),
    Operator("Between", TypeKind.COMPARABLE, 2),
)

Clause = tuple[FieldMetadata, Operator]


class ConventionFinderServices:
    """Derives and resolves finder names by naming convention."""

    def __init__(self, operators: tuple[Operator, ...] = OPERATORS):
        self._operators = operators

    @staticmethod
    def prefix(plural: str) -> str:
        return f"find{plural}By"

    # ------------------------------------------------------------------ #
    # Derivation
    # ------------------------------------------------------------------ #

    def get_finders(
        self,
        member_details: MemberDetails,
        plural: str,
        depth: int,
        exclusions: frozenset[str],
    ) -> list[str]:
        """All finder names over 1..depth distinct fields, in generation order."""
        if depth is None or depth < 1:
            return []

        eligible = [
            f
            for f in member_details
            if f.name not in exclusions and not f.static and not _is_collection(f.field_type)
        ]
        clauses = {
            f.name: [capitalize(f.name) + op.token for op in self._operators if op.applies_to(f.field_type)]
            for f in eligible
        }

        prefix = self.prefix(plural)
        names: dict[str, None] = {}
        for size in range(1, min(depth, len(eligible)) + 1):
            for combo in itertools.combinations(eligible, size):
                for parts in itertools.product(*(clauses[f.name] for f in combo)):
                    for joiners in itertools.product(JOINERS, repeat=size - 1):
                        body = parts[0] + "".join(j + p for j, p in zip(joiners, parts[1:]))
                        names.setdefault(prefix + body, None)
        return list(names)

    # ------------------------------------------------------------------ #
    # Resolution
    # ------------------------------------------------------------------ #

    def get_query_holder(
        self,
        member_details: MemberDetails,
        finder_name: str,
        plural: str,
        entity_name: str,
    ) -> QueryHolder | None:
        """Parameters of ``finder_name``, or None when the name does not parse.

        Raises:
            FinderResolutionError: If the name parses more than one way, applies
                an operator to a field type it does not support, or yields two
                parameters with the same name
        """
        prefix = self.prefix(plural)
        if not finder_name.startswith(prefix) or len(finder_name) == len(prefix):
            return None

        fields = {capitalize(f.name): f for f in member_details if not f.static}
        parses = list(self._parse(finder_name[len(prefix):], fields))
        if not parses:
            return None
        if len(parses) > 1:
            raise FinderResolutionError(
                f"Finder '{finder_name}' on {entity_name} is ambiguous ({len(parses)} readings)",
                finder=finder_name,
            )

        parameter_types: list[TypeName] = []
        parameter_names: list[str] = []
        for field, operator in parses[0]:
            if not operator.applies_to(field.field_type):
                raise FinderResolutionError(
                    f"Operator '{operator.token or 'Equals'}' cannot be applied to "
                    f"{entity_name}.{field.name} of type {field.field_type.simple_name}",
                    finder=finder_name,
                )
            for param_type, param_name in operator.parameters(field):
                if param_name in parameter_names:
                    raise FinderResolutionError(
                        f"Finder '{finder_name}' declares parameter '{param_name}' twice",
                        finder=finder_name,
                    )
                parameter_types.append(param_type)
                parameter_names.append(param_name)
        return QueryHolder(tuple(parameter_types), tuple(parameter_names))

    def _parse(self, body: str, fields: dict[str, FieldMetadata]) -> Iterator[list[Clause]]:
        """Yield every way ``body`` splits into joined clauses."""
        for token, field in fields.items():
            if not body.startswith(token):
                continue
            rest = body[len(token):]
            for operator in self._operators:
                if not rest.startswith(operator.token):
                    continue
                after = rest[len(operator.token):]
                if not after:
                    yield [(field, operator)]
                    continue
                for joiner in JOINERS:
                    if after.startswith(joiner) and len(after) > len(joiner):
                        for tail in self._parse(after[len(joiner):], fields):
                            yield [(field, operator), *tail]
