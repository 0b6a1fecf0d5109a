"""Tests for finderkit.finders.declarations module."""

import pytest

from finderkit.core.errors import AnnotationValidationError
from finderkit.finders.declarations import DeclaredFinders, finders_shape_message


class TestFromAttribute:
    def test_absent_attribute_is_empty(self):
        assert DeclaredFinders.from_attribute(None) == DeclaredFinders()
        assert len(DeclaredFinders.from_attribute(None)) == 0

    def test_list_of_strings(self):
        declared = DeclaredFinders.from_attribute(["findPeopleByName", "findPeopleByAge"])
        assert list(declared) == ["findPeopleByName", "findPeopleByAge"]

    def test_tuple_accepted(self):
        assert list(DeclaredFinders.from_attribute(("a",))) == ["a"]

    def test_duplicates_collapse_to_first_position(self):
        declared = DeclaredFinders.from_attribute(["a", "b", "a"])
        assert list(declared) == ["a", "b"]

    @pytest.mark.parametrize("value", ["findPeopleByName", 42, {"a": 1}])
    def test_non_list_rejected(self, value):
        with pytest.raises(AnnotationValidationError) as exc_info:
            DeclaredFinders.from_attribute(value)
        assert exc_info.value.message == finders_shape_message()
        assert exc_info.value.attribute == "finders"

    def test_non_string_element_rejects_whole_list(self):
        with pytest.raises(AnnotationValidationError) as exc_info:
            DeclaredFinders.from_attribute(["findPeopleByName", 7])
        assert exc_info.value.context.metadata["offending_element"] == "7"

    def test_shape_message(self):
        assert finders_shape_message() == (
            "Annotation EntityConfig attribute 'finders' must be an array of strings"
        )


class TestWithFinder:
    def test_appends_new_name_last(self):
        declared = DeclaredFinders(["a", "b"]).with_finder("c")
        assert declared.to_attribute() == ["a", "b", "c"]

    def test_existing_name_is_noop(self):
        declared = DeclaredFinders(["a", "b"])
        assert declared.with_finder("a") is declared

    def test_idempotent(self):
        once = DeclaredFinders(["a"]).with_finder("b")
        assert once.with_finder("b") == once

    def test_comparison_is_case_sensitive(self):
        declared = DeclaredFinders(["findPeopleByName"]).with_finder("findpeoplebyname")
        assert len(declared) == 2

    def test_original_is_unchanged(self):
        declared = DeclaredFinders(["a"])
        declared.with_finder("b")
        assert declared.to_attribute() == ["a"]


class TestSequenceBehaviour:
    def test_contains_index_and_hash(self):
        declared = DeclaredFinders(["a", "b"])
        assert "a" in declared and "z" not in declared
        assert declared[1] == "b"
        assert hash(declared) == hash(DeclaredFinders(["a", "b"]))

    def test_order_matters_for_equality(self):
        assert DeclaredFinders(["a", "b"]) != DeclaredFinders(["b", "a"])

    def test_to_attribute_returns_fresh_list(self):
        declared = DeclaredFinders(["a"])
        declared.to_attribute().append("b")
        assert declared.to_attribute() == ["a"]
