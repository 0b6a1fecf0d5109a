"""Tests for finderkit.finders.signatures module."""

from finderkit.core.errors import FinderResolutionError
from finderkit.core.result import Err, Ok
from finderkit.core.types import QueryHolder
from finderkit.finders.signatures import render_entry, render_failure, render_signature

from tests._support.fakes import holder


class TestRenderSignature:
    def test_simple_type_names(self):
        rendered = render_signature(
            "findPeopleByNameAndAge", holder(("java.lang.String", "name"), ("int", "age"))
        )
        assert rendered == "findPeopleByNameAndAge(String name, int age)"

    def test_no_parameters(self):
        assert render_signature("findPeopleByNameIsNull", QueryHolder()) == "findPeopleByNameIsNull()"

    def test_generic_arguments_lose_qualifiers(self):
        rendered = render_signature("findX", holder(("java.util.Set<com.example.Pet>", "pets")))
        assert rendered == "findX(Set<Pet> pets)"


class TestRenderEntry:
    def test_ok(self):
        outcome = Ok(holder(("int", "age")))
        assert render_entry("findPeopleByAge", outcome) == "findPeopleByAge(int age)"

    def test_err(self):
        outcome = Err(FinderResolutionError("ambiguous", finder="findPeopleByAge"))
        assert render_entry("findPeopleByAge", outcome) == "findPeopleByAge - failure"

    def test_render_failure(self):
        assert render_failure("findX") == "findX - failure"
