"""Tests for the built-in condition and validation predicates."""

import pytest

from datamapper.core.utils import MISSING
from datamapper.functions import conditions


@pytest.mark.parametrize("value,expected", [
    ("x", True),
    (0, True),
    (False, True),
    ("", False),
    (None, False),
    (MISSING, False),
])
def test_not_empty(value, expected):
    assert conditions.not_empty(value) is expected
    assert conditions.is_empty(value) is not expected


@pytest.mark.parametrize("value,expected", [
    ("a@b.com", True),
    ("first.last@sub.example.org", True),
    ("a@b", False),
    ("a b@c.com", False),
    (None, False),
])
def test_is_email(value, expected):
    assert conditions.is_email(value) is expected


def test_is_phone():
    assert conditions.is_phone("+1 (555) 123-4567")
    assert not conditions.is_phone("555-1234")


def test_is_numeric_and_date():
    assert conditions.is_numeric("12")
    assert conditions.is_numeric(3.5)
    assert not conditions.is_numeric("twelve")
    assert conditions.is_date("2024-01-31")
    assert not conditions.is_date("someday")


def test_contains_is_case_insensitive():
    assert conditions.contains("Riverside Park", None, None, "park")
    assert not conditions.contains(None, None, None, "park")


def test_equals_matches_text_form():
    assert conditions.equals(5, None, None, 5)
    assert conditions.equals(5, None, None, "5")
    assert not conditions.equals(None, None, None, "None")


def test_in_accepts_comma_list_and_sequence():
    assert conditions.is_in("b", None, None, "a, b, c")
    assert conditions.is_in(2, None, None, "1,2,3")
    assert conditions.is_in("x", None, None, ["x", "y"])
    assert not conditions.is_in("z", None, None, "a,b")
    assert not conditions.is_in(None, None, None, None)


def test_matches():
    assert conditions.matches("AB-123", None, None, r"^[A-Z]{2}-\d+$")
    assert not conditions.matches(None, None, None, ".*")


def test_length_checks():
    assert conditions.min_length("abc", None, None, "3")
    assert not conditions.min_length("ab", None, None, "3")
    assert conditions.max_length("ab", None, None, "3")
    assert not conditions.max_length(5, None, None, "3")


def test_between_inclusive():
    assert conditions.between("10", None, None, "10", "20")
    assert conditions.between(20, None, None, "10", "20")
    assert not conditions.between(21, None, None, "10", "20")
    assert conditions.between(5, None, None, None, "10")
    assert not conditions.between("n/a", None, None, "0", "1")
