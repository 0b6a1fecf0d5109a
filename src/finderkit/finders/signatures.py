"""Rendering of finder signatures for listings."""

from __future__ import annotations

from finderkit.core.result import Err, Ok, Result
from finderkit.core.types import QueryHolder

FAILURE_SUFFIX = " - failure"


def render_signature(finder_name: str, query_holder: QueryHolder) -> str:
    """Render ``name(Type1 param1, Type2 param2)`` using simple type names.

    >>> from finderkit.core.types import TypeName
    >>> holder = QueryHolder(
    ...     (TypeName("java.lang.String"), TypeName("int")), ("name", "age")
    ... )
    >>> render_signature("findByNameAndAge", holder)
    'findByNameAndAge(String name, int age)'
    """
    params = ", ".join(
        f"{param_type.simple_name} {param_name}"
        for param_type, param_name in query_holder.parameters
    )
    return f"{finder_name}({params})"


def render_failure(finder_name: str) -> str:
    return finder_name + FAILURE_SUFFIX


def render_entry(finder_name: str, outcome: Result[QueryHolder]) -> str:
    match outcome:
        case Ok(holder):
            return render_signature(finder_name, holder)
        case Err(_):
            return render_failure(finder_name)
    raise TypeError(f"Expected Ok or Err, got {type(outcome).__name__}")
