"""Tests for field-level value checks."""

from typing import Annotated

import pytest
from pydantic import Field, TypeAdapter, ValidationError

from datamapper.schema import build_value_check


class TestDeclarativeChecks:
    def test_email(self):
        check = build_value_check({'type': 'email'})
        assert check("a@b.com") == "a@b.com"
        with pytest.raises(ValidationError):
            check("not-an-email")

    def test_string_length(self):
        check = build_value_check({'type': 'str', 'min_length': 1, 'max_length': 3})
        assert check("abc") == "abc"
        with pytest.raises(ValidationError):
            check("")
        with pytest.raises(ValidationError):
            check("abcd")

    def test_number_bounds_coerce(self):
        check = build_value_check({'type': 'float', 'ge': 0})
        assert check("2.5") == 2.5
        with pytest.raises(ValidationError):
            check(-1)

    def test_none_fails_typed_check(self):
        with pytest.raises(ValidationError):
            build_value_check({'type': 'str'})(None)

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            build_value_check({'type': 'uuid4'})

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            build_value_check({'type': 'str', 'minimum': 1})


class TestOtherForms:
    def test_none(self):
        assert build_value_check(None) is None

    def test_type_adapter(self):
        check = build_value_check(TypeAdapter(int))
        assert check("5") == 5

    def test_annotated_type(self):
        check = build_value_check(Annotated[int, Field(gt=0)])
        with pytest.raises(ValidationError):
            check(0)

    def test_plain_callable(self):
        def positive(value):
            if value <= 0:
                raise ValueError("must be positive")
            return value

        assert build_value_check(positive) is positive

    def test_unsupported(self):
        with pytest.raises(TypeError):
            build_value_check(42)
