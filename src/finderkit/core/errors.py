"""
Structured error types for finderkit.

Provides a small hierarchy of typed errors with category metadata and
structured context, so that callers can tell a missing entity apart from a
malformed declaration or a broken invariant between metadata subsystems.

Manifesto:
    - **Typed Error Hierarchy:** One error type per failure tier
    - **Rich Context:** Errors carry the entity and finder they concern
    - **Error Chaining:** Preserve original exceptions while adding context
    - **Never retried:** Every finderkit failure is deterministic

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                      FinderKitError                              │
        │              (category, context, cause)                          │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  EntitySourceNotFoundError   ValidationError    ConsistencyError │
        │  NotAnEntityError            (VALIDATION)       (INTERNAL)       │
        │  (SOURCE)                         │                              │
        │                          AnnotationValidationError               │
        │                                                                  │
        │  FinderResolutionError       ConfigError                         │
        │  (RESOLUTION)                (CONFIG)                            │
        │                                   │                              │
        │                              CatalogError                        │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    Adding context to an error:

    >>> error = NotAnEntityError("Cannot provide finders")
    >>> error.with_context(type_name="com.example.Person")
    NotAnEntityError('Cannot provide finders', category=SOURCE)
    >>> error.context.type_name
    'com.example.Person'

Guardrails:
    ❌ DON'T: Raise generic Exception from finder operations
    ✅ DO: Use the FinderKitError subclass matching the failure tier

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, finderkit
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Categories map onto the failure tiers of finder operations:
    - **SOURCE:** the entity cannot be located or is not an entity
    - **VALIDATION:** stored declarations have an unexpected shape
    - **RESOLUTION:** a finder name cannot be turned into a query
    - **CONFIG:** settings or catalog documents are invalid
    - **INTERNAL:** two metadata subsystems disagree
    """

    SOURCE = "SOURCE"
    VALIDATION = "VALIDATION"
    RESOLUTION = "RESOLUTION"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured context attached to errors.

    Attributes:
        type_name: Fully qualified name of the entity type involved
        finder: Finder name involved, if any
        physical_type_id: Physical type identifier, if resolved
        metadata: Additional key-value pairs
    """

    type_name: str | None = None
    finder: str | None = None
    physical_type_id: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["type_name", "finder", "physical_type_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class FinderKitError(Exception):
    """
    Base exception for all finderkit errors.

    Every instance carries:
    - **category:** ErrorCategory for classification
    - **context:** ErrorContext with the entity/finder involved
    - **cause:** Optional underlying exception for chaining

    Subclasses set ``default_category`` to describe their tier.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FinderKitError:
        """
        Add context to this error (fluent API).

        Usage:
            raise NotAnEntityError("Cannot provide finders").with_context(
                type_name="com.example.Person",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class EntitySourceNotFoundError(FinderKitError):
    """The entity type cannot be resolved to a physical type."""

    default_category = ErrorCategory.SOURCE


class NotAnEntityError(FinderKitError):
    """The type resolves, but carries no entity metadata."""

    default_category = ErrorCategory.SOURCE


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(FinderKitError):
    """Stored metadata does not have the expected shape."""

    default_category = ErrorCategory.VALIDATION


class AnnotationValidationError(ValidationError):
    """
    An annotation attribute holds a value of the wrong shape.

    Raised when the declared-finder attribute is not a list, or when any of
    its elements is not a string. The whole attribute is rejected.
    """

    def __init__(self, message: str, *, attribute: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.attribute = attribute


# =============================================================================
# CONSISTENCY / RESOLUTION ERRORS
# =============================================================================


class ConsistencyError(FinderKitError):
    """Two metadata lookups that must agree returned different answers."""

    default_category = ErrorCategory.INTERNAL


class FinderResolutionError(FinderKitError):
    """A finder name is syntactically valid but cannot be resolved to a query."""

    default_category = ErrorCategory.RESOLUTION

    def __init__(self, message: str, *, finder: str, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.finder = finder
        self.context.finder = finder


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(FinderKitError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class CatalogError(ConfigError):
    """An entity catalog document is missing or malformed."""

    def __init__(self, message: str, *, path: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.path = path
        if path is not None:
            self.context.metadata["path"] = path


def categorize_error(error: Exception) -> ErrorCategory:
    """Get error category for any exception."""
    if isinstance(error, FinderKitError):
        return error.category
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FinderKitError",
    "EntitySourceNotFoundError",
    "NotAnEntityError",
    "ValidationError",
    "AnnotationValidationError",
    "ConsistencyError",
    "FinderResolutionError",
    "ConfigError",
    "CatalogError",
    "categorize_error",
]
