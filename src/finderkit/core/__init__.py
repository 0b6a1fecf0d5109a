"""
finderkit core primitives.

Module map::

    errors.py      Structured error hierarchy (FinderKitError and tiers)
    result.py      Ok/Err result envelope for per-item outcomes
    logging.py     Structured logging (structlog)
    settings.py    FINDERKIT_* settings (pydantic-settings)
    types.py       Type, field, annotation and query value objects
    protocols.py   Collaborator contracts consumed by finder operations
"""

from finderkit.core.errors import (
    AnnotationValidationError,
    CatalogError,
    ConfigError,
    ConsistencyError,
    EntitySourceNotFoundError,
    ErrorCategory,
    ErrorContext,
    FinderKitError,
    FinderResolutionError,
    NotAnEntityError,
    ValidationError,
)
from finderkit.core.logging import LogContext, configure_logging, get_logger
from finderkit.core.result import Err, Ok, Result, from_optional, partition_results, try_result
from finderkit.core.types import (
    ENTITY_CONFIG,
    FINDERS_ATTRIBUTE,
    AnnotationMetadata,
    EntityMetadata,
    FieldMetadata,
    MemberDetails,
    PhysicalTypeIdentifier,
    PhysicalTypeMetadata,
    QueryHolder,
    TypeDetails,
    TypeName,
)

__all__ = [
    # errors
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
    # logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # result
    "Result",
    "Ok",
    "Err",
    "try_result",
    "from_optional",
    "partition_results",
    # types
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
