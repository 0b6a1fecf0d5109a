"""
Shared pytest fixtures and configuration for finderkit tests.

This module provides:
- Logging and settings reset fixtures for test isolation
- In-memory collaborator fixtures for finder operations
- A sample entity catalog document

Usage:
    Fixtures are auto-discovered by pytest; request them by argument name.
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure finderkit package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finderkit.core.settings import clear_settings_cache
from finderkit.finders import FinderOperations

from tests._support.fakes import FakeTypeSystem, StubFinderServices


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if test_path.parts[0] in ("cli", "catalog"):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging_and_settings() -> Generator[None, None, None]:
    """Undo structlog configuration and cached settings after each test."""
    clear_settings_cache()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    clear_settings_cache()


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def type_system() -> FakeTypeSystem:
    return FakeTypeSystem()


@pytest.fixture
def finder_services() -> StubFinderServices:
    return StubFinderServices()


@pytest.fixture
def operations(type_system: FakeTypeSystem, finder_services: StubFinderServices) -> FinderOperations:
    return FinderOperations(
        type_location=type_system,
        metadata=type_system,
        member_details_scanner=type_system,
        persistence_member_locator=type_system,
        finder_services=finder_services,
        type_management=type_system,
        project_operations=type_system,
    )


# =============================================================================
# Catalog Fixtures
# =============================================================================


SAMPLE_CATALOG = """\
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
        table: person
        finders: [findPeopleByFirstName]
  com.example.Address:
    fields:
      - {name: street, type: java.lang.String}
"""


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    path = tmp_path / "finders.yaml"
    path.write_text(SAMPLE_CATALOG, encoding="utf-8")
    return path
