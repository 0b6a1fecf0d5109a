"""
Declared finders: the ordered set of finder names recorded on an entity.

The names live in the ``finders`` attribute of the entity's
``EntityConfig`` annotation, where they are stored untyped. ``DeclaredFinders``
is the typed view: it is parsed from the stored value in a single validation
step and serialized back to a plain list when written.

Examples:
    >>> declared = DeclaredFinders.from_attribute(["findPeopleByName"])
    >>> declared.with_finder("findPeopleByAge").to_attribute()
    ['findPeopleByName', 'findPeopleByAge']
    >>> declared.with_finder("findPeopleByName") == declared
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from finderkit.core.errors import AnnotationValidationError
from finderkit.core.types import ENTITY_CONFIG, FINDERS_ATTRIBUTE


def finders_shape_message() -> str:
    return (
        f"Annotation {ENTITY_CONFIG.simple_name} attribute "
        f"'{FINDERS_ATTRIBUTE}' must be an array of strings"
    )


class DeclaredFinders(Sequence[str]):
    """Immutable, insertion-ordered, duplicate-free list of finder names.

    Names compare by exact, case-sensitive string equality.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = ()):
        unique: dict[str, None] = {}
        for name in names:
            unique.setdefault(name, None)
        self._names: tuple[str, ...] = tuple(unique)

    @classmethod
    def from_attribute(cls, value: Any) -> DeclaredFinders:
        """Parse the stored attribute value.

        ``None`` (attribute absent) is an empty declaration. Anything other
        than a list or tuple of strings raises AnnotationValidationError.
        """
        if value is None:
            return cls()
        if not isinstance(value, (list, tuple)):
            raise AnnotationValidationError(finders_shape_message(), attribute=FINDERS_ATTRIBUTE)
        for element in value:
            if not isinstance(element, str):
                raise AnnotationValidationError(
                    finders_shape_message(), attribute=FINDERS_ATTRIBUTE
                ).with_context(offending_element=repr(element))
        return cls(value)

    def with_finder(self, name: str) -> DeclaredFinders:
        """Append ``name`` unless it is already declared."""
        if name in self._names:
            return self
        return DeclaredFinders(self._names + (name,))

    def to_attribute(self) -> list[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __getitem__(self, index):
        return self._names[index]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DeclaredFinders):
            return self._names == other._names
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"DeclaredFinders({list(self._names)!r})"
