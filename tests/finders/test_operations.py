"""Tests for finderkit.finders.operations module.

Covers finder installation (merge, soft no-ops, validation, consistency)
and finder listing (exclusions, per-item failures, ordering).
"""

import pytest
import structlog
from structlog.testing import capture_logs

from finderkit.core.errors import (
    AnnotationValidationError,
    ConsistencyError,
    EntitySourceNotFoundError,
    FinderResolutionError,
    NotAnEntityError,
)
from finderkit.core.types import ENTITY_CONFIG, PhysicalTypeMetadata, TypeName
from finderkit.finders import ConventionFinderServices, FinderOperations

from tests._support.fakes import holder

PERSON = "com.example.Person"


def events(logs):
    return [log["event"] for log in logs]


# =============================================================================
# Installation
# =============================================================================


class TestIsFinderInstallationPossible:
    def test_project_with_feature(self, operations):
        assert operations.is_finder_installation_possible() is True

    def test_no_project(self, operations, type_system):
        type_system.project_available = False
        assert operations.is_finder_installation_possible() is False

    def test_feature_missing(self, operations, type_system):
        type_system.features = set()
        assert operations.is_finder_installation_possible() is False

    def test_without_project_operations(self, type_system, finder_services):
        operations = FinderOperations(
            type_location=type_system,
            metadata=type_system,
            member_details_scanner=type_system,
            persistence_member_locator=type_system,
            finder_services=finder_services,
            type_management=type_system,
        )
        assert operations.is_finder_installation_possible() is False


class TestInstallFinder:
    """Merging a finder name into the declared finders."""

    @pytest.fixture(autouse=True)
    def resolvable(self, finder_services):
        finder_services.holders.update(
            {
                "findPeopleByName": holder(("java.lang.String", "name")),
                "findPeopleByAge": holder(("int", "age")),
            }
        )

    def test_appends_to_existing_declarations(self, operations, type_system):
        person = type_system.add_entity(PERSON, finders=["findPeopleByName"])

        assert operations.install_finder(person, "findPeopleByAge") is True

        assert len(type_system.writes) == 1
        assert type_system.declared_finders(person) == ["findPeopleByName", "findPeopleByAge"]

    def test_absent_attribute_starts_new_list(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        operations.install_finder(person, "findPeopleByName")
        assert type_system.declared_finders(person) == ["findPeopleByName"]

    def test_already_declared_rewrites_unchanged_list(self, operations, type_system):
        person = type_system.add_entity(PERSON, finders=["findPeopleByName", "findPeopleByAge"])

        assert operations.install_finder(person, "findPeopleByName") is True

        assert len(type_system.writes) == 1
        assert type_system.declared_finders(person) == ["findPeopleByName", "findPeopleByAge"]

    def test_idempotent(self, operations, type_system):
        person = type_system.add_entity(PERSON, finders=[])
        operations.install_finder(person, "findPeopleByAge")
        operations.install_finder(person, "findPeopleByAge")
        assert type_system.declared_finders(person) == ["findPeopleByAge"]

    def test_order_follows_installation(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        operations.install_finder(person, "findPeopleByName")
        operations.install_finder(person, "findPeopleByAge")
        assert type_system.declared_finders(person) == ["findPeopleByName", "findPeopleByAge"]

    def test_other_attributes_and_annotations_preserved(self, operations, type_system):
        person = type_system.add_entity(
            PERSON, finders=["findPeopleByName"], other_attributes={"table": "person"}
        )
        operations.install_finder(person, "findPeopleByAge")

        written = type_system.writes[0]
        config = written.get_annotation(ENTITY_CONFIG)
        assert config.get_attribute("table") == "person"
        assert len(written.annotations) == 1
        assert written.name == person

    def test_logs_installation(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        with capture_logs() as logs:
            operations.install_finder(person, "findPeopleByAge")
        assert "finder_installed" in events(logs)

    def test_none_arguments_rejected(self, operations):
        with pytest.raises(ValueError, match="Type name required"):
            operations.install_finder(None, "findPeopleByName")
        with pytest.raises(ValueError, match="Finder name required"):
            operations.install_finder(TypeName(PERSON), None)


class TestInstallFinderSoftFailures:
    """Requests that are skipped with a warning and no write."""

    def test_unknown_type(self, operations, type_system):
        with capture_logs() as logs:
            assert operations.install_finder(TypeName("com.example.Ghost"), "findGhostsByName") is False
        assert type_system.writes == []
        assert "finder_source_not_found" in events(logs)

    def test_not_an_entity(self, operations, type_system):
        address = type_system.add_entity("com.example.Address", entity=False)
        with capture_logs() as logs:
            assert operations.install_finder(address, "findAddressesByStreet") is False
        assert type_system.writes == []
        assert "finder_target_not_entity" in events(logs)

    def test_missing_entity_annotation(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON, annotated=False)
        finder_services.holders["findPeopleByName"] = holder(("java.lang.String", "name"))
        with capture_logs() as logs:
            assert operations.install_finder(person, "findPeopleByName") is False
        assert type_system.writes == []
        assert "finder_entity_annotation_missing" in events(logs)

    def test_unresolvable_finder(self, operations, type_system):
        person = type_system.add_entity(PERSON, finders=["findPeopleByName"])
        with capture_logs() as logs:
            assert operations.install_finder(person, "findPeopleByShoeSize") is False

        assert type_system.writes == []
        warning = next(log for log in logs if log["event"] == "finder_not_resolvable")
        assert warning["log_level"] == "warning"
        assert warning["reason"] == (
            "Finder name 'findPeopleByShoeSize' either does not exist or contains an error"
        )

    def test_resolution_error_is_soft(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON)
        finder_services.holders["findPeopleByX"] = FinderResolutionError(
            "ambiguous", finder="findPeopleByX"
        )
        assert operations.install_finder(person, "findPeopleByX") is False
        assert type_system.writes == []

    def test_unexpected_resolver_error_propagates(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON)
        finder_services.holders["findPeopleByX"] = RuntimeError("resolver bug")
        with pytest.raises(RuntimeError, match="resolver bug"):
            operations.install_finder(person, "findPeopleByX")
        assert type_system.writes == []


class TestInstallFinderHardFailures:
    def test_malformed_finders_attribute(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON, finders="findPeopleByName")
        finder_services.holders["findPeopleByAge"] = holder(("int", "age"))

        with pytest.raises(AnnotationValidationError) as exc_info:
            operations.install_finder(person, "findPeopleByAge")

        assert str(exc_info.value) == (
            "Annotation EntityConfig attribute 'finders' must be an array of strings"
        )
        assert type_system.writes == []

    def test_non_string_element(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON, finders=["findPeopleByName", 3])
        finder_services.holders["findPeopleByAge"] = holder(("int", "age"))
        with pytest.raises(AnnotationValidationError):
            operations.install_finder(person, "findPeopleByAge")
        assert type_system.writes == []

    def test_entity_without_source_is_inconsistent(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        del type_system.type_details[type_system.physical_ids[PERSON]]

        with pytest.raises(ConsistencyError, match="Cannot locate source for 'com.example.Person'"):
            operations.install_finder(person, "findPeopleByName")
        assert type_system.writes == []

    def test_log_context_cleared_after_failure(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON, finders=7)
        finder_services.holders["findPeopleByAge"] = holder(("int", "age"))
        with pytest.raises(AnnotationValidationError):
            operations.install_finder(person, "findPeopleByAge")
        assert structlog.contextvars.get_contextvars() == {}


# =============================================================================
# Listing
# =============================================================================


class TestListFindersFor:
    def test_sorted_signatures_with_failures(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON, fields=[("name", "java.lang.String"), ("age", "int")])
        finder_services.candidates = [
            "findPeopleByName",
            "findPeopleByAge",
            "findPeopleByAgeBetween",
            "findPeopleByNameOrAge",
        ]
        finder_services.holders.update(
            {
                "findPeopleByName": holder(("java.lang.String", "name")),
                "findPeopleByAge": holder(("int", "age")),
                "findPeopleByAgeBetween": holder(("int", "minAge"), ("int", "maxAge")),
                "findPeopleByNameOrAge": FinderResolutionError("ambiguous", finder="findPeopleByNameOrAge"),
            }
        )

        assert operations.list_finders_for(person, 1) == [
            "findPeopleByAge(int age)",
            "findPeopleByAgeBetween(int minAge, int maxAge)",
            "findPeopleByName(String name)",
            "findPeopleByNameOrAge - failure",
        ]

    def test_any_resolver_error_becomes_failure_entry(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON)
        finder_services.candidates = ["findPeopleByA", "findPeopleByB"]
        finder_services.holders = {
            "findPeopleByA": RuntimeError("boom"),
            "findPeopleByB": holder(),
        }
        assert operations.list_finders_for(person, 1) == ["findPeopleByA - failure", "findPeopleByB()"]

    def test_listing_event_counts_failures(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON)
        finder_services.candidates = ["findPeopleByA", "findPeopleByB", "findPeopleByC"]
        finder_services.holders = {"findPeopleByA": holder(), "findPeopleByB": RuntimeError("boom")}
        with capture_logs() as logs:
            operations.list_finders_for(person, 1)
        listed = next(log for log in logs if log["event"] == "finders_listed")
        assert listed["count"] == 3
        assert listed["failures"] == 2

    def test_no_candidates(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        assert operations.list_finders_for(person, 1) == []

    def test_exclusions_and_depth_forwarded(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON, plural="Persons")
        operations.list_finders_for(person, 2)
        assert finder_services.get_finders_calls == [
            ("Persons", 2, frozenset({"entityManager", "id", "version"}))
        ]

    def test_deterministic(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON)
        finder_services.candidates = ["findPeopleByB", "findPeopleByA"]
        finder_services.holders = {"findPeopleByA": holder(), "findPeopleByB": None}
        assert operations.list_finders_for(person, 1) == operations.list_finders_for(person, 1)

    def test_never_writes(self, operations, type_system, finder_services):
        person = type_system.add_entity(PERSON)
        finder_services.candidates = ["findPeopleByA"]
        operations.list_finders_for(person, 1)
        assert type_system.writes == []


class TestListFindersForErrors:
    def test_unknown_type(self, operations):
        with pytest.raises(EntitySourceNotFoundError, match="Cannot locate source for 'com.example.Ghost'"):
            operations.list_finders_for(TypeName("com.example.Ghost"), 1)

    def test_not_an_entity(self, operations, type_system):
        address = type_system.add_entity("com.example.Address", entity=False)
        with pytest.raises(NotAnEntityError) as exc_info:
            operations.list_finders_for(address, 1)
        assert str(exc_info.value) == (
            "Cannot provide finders because 'com.example.Address' is not an entity"
        )

    def test_missing_physical_type_metadata(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        del type_system.physical_metadata[type_system.physical_ids[PERSON]]
        with pytest.raises(ConsistencyError, match="Could not determine physical type metadata"):
            operations.list_finders_for(person, 1)

    def test_missing_member_holding_details(self, operations, type_system):
        person = type_system.add_entity(PERSON)
        pid = type_system.physical_ids[PERSON]
        type_system.physical_metadata[pid] = PhysicalTypeMetadata(pid)
        with pytest.raises(ConsistencyError, match="Could not determine class or interface type details"):
            operations.list_finders_for(person, 1)

    def test_none_type_rejected(self, operations):
        with pytest.raises(ValueError):
            operations.list_finders_for(None, 1)


class TestWithConventionServices:
    """End-to-end over the naming-convention grammar."""

    @pytest.fixture
    def operations(self, type_system):
        return FinderOperations(
            type_location=type_system,
            metadata=type_system,
            member_details_scanner=type_system,
            persistence_member_locator=type_system,
            finder_services=ConventionFinderServices(),
            type_management=type_system,
            project_operations=type_system,
        )

    def test_identifier_version_and_entity_manager_never_appear(self, operations, type_system):
        person = type_system.add_entity(PERSON, fields=[("name", "java.lang.String")])
        listing = operations.list_finders_for(person, 1)
        assert listing
        assert all("ById" not in entry and "Version" not in entry for entry in listing)
        assert all("EntityManager" not in entry for entry in listing)
        assert "findPeopleByName(String name)" in listing
        assert "findPeopleByNameLike(String name)" in listing

    def test_install_then_reinstall(self, operations, type_system):
        person = type_system.add_entity(PERSON, fields=[("age", "int")], finders=[])
        assert operations.install_finder(person, "findPeopleByAgeBetween") is True
        assert operations.install_finder(person, "findPeopleByAgeBetween") is True
        assert type_system.declared_finders(person) == ["findPeopleByAgeBetween"]

    def test_install_unknown_field_is_soft(self, operations, type_system):
        person = type_system.add_entity(PERSON, fields=[("age", "int")], finders=[])
        assert operations.install_finder(person, "findPeopleByHeight") is False
        assert type_system.writes == []
