"""
Per-candidate outcomes for finder enumeration.

Enumeration resolves many finder names in one batch, and one bad name must
never abort the rest. Each name is resolved into its own ``Result``: ``Ok``
carrying the resolved value, or ``Err`` carrying the exception resolution
raised. The batch is rendered from the collected outcomes afterwards.

Architecture:
    ::

        resolver call ──try_result──► Ok(holder) | Err(exc)
                                        │
                         from_optional  │  Ok(None) ──► Err(FinderResolutionError)
                                        ▼
                              {name: Result}  ──partition_results──► (values, errors)

Examples:
    >>> try_result(lambda: 10 // 2)
    Ok(5)
    >>> from_optional(None, LookupError("missing")).is_err()
    True
    >>> match try_result(lambda: 1 // 0):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(type(error).__name__)
    ZeroDivisionError

Tags:
    result-pattern, error-handling, batch-processing, finderkit
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A resolved value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        return self

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """The exception that prevented a value."""

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the captured error."""
        raise self.error

    def inspect_err(self, f: Callable[[Exception], None]) -> Result[T]:
        """Call f with the error for side effects, return self."""
        f(self.error)
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """Run a zero-argument callable, capturing any exception as Err."""
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


def from_optional(value: T | None, error: Exception) -> Result[T]:
    """Ok(value), or Err(error) when value is None."""
    if value is None:
        return Err(error)
    return Ok(value)


def partition_results(results: Iterable[Result[T]]) -> tuple[list[T], list[Exception]]:
    """Split outcomes into successful values and errors, keeping order."""
    values: list[T] = []
    errors: list[Exception] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                errors.append(error)
    return values, errors


__all__ = [
    "Result",
    "Ok",
    "Err",
    "try_result",
    "from_optional",
    "partition_results",
]
