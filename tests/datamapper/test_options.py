"""Tests for run options."""

import pytest
from pydantic import ValidationError

from datamapper.options import (
    DEFAULT_MAX_ERRORS,
    ENV_MAX_ERRORS,
    ENV_SKIP_ERRORS,
    ENV_VALIDATE_ONLY,
    TransformOptions,
)


def test_defaults():
    options = TransformOptions.coerce()
    assert options.skip_errors is False
    assert options.max_errors == DEFAULT_MAX_ERRORS
    assert options.validate_only is False


@pytest.mark.parametrize("document", [
    {'skipErrors': True, 'maxErrors': 5},
    {'skip_errors': True, 'max_errors': 5},
    {'skipErrors': True, 'max_errors': 5},
])
def test_coerce_accepts_both_key_styles(document):
    options = TransformOptions.coerce(document)
    assert options.skip_errors is True
    assert options.max_errors == 5


def test_instance_returned_unchanged():
    options = TransformOptions(validate_only=True)
    assert TransformOptions.coerce(options) is options


def test_overrides_win():
    options = TransformOptions.coerce({'maxErrors': 5}, max_errors=7, skip_errors=True)
    assert (options.max_errors, options.skip_errors) == (7, True)

    base = TransformOptions(max_errors=3)
    assert TransformOptions.coerce(base, validate_only=True).max_errors == 3


@pytest.mark.parametrize("document", [{'maxErrors': 0}, {'stopEarly': True}])
def test_invalid_options_rejected(document):
    with pytest.raises(ValidationError):
        TransformOptions.coerce(document)


def test_options_are_frozen():
    with pytest.raises(ValidationError):
        TransformOptions().skip_errors = True


class TestFromEnv:
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_SKIP_ERRORS, "yes")
        monkeypatch.setenv(ENV_MAX_ERRORS, "25")
        monkeypatch.setenv(ENV_VALIDATE_ONLY, "0")

        options = TransformOptions.from_env()
        assert options == TransformOptions(skip_errors=True, max_errors=25, validate_only=False)

    def test_unset_variables_keep_defaults(self, monkeypatch):
        for name in (ENV_SKIP_ERRORS, ENV_MAX_ERRORS, ENV_VALIDATE_ONLY):
            monkeypatch.delenv(name, raising=False)
        defaults = TransformOptions(max_errors=9)
        assert TransformOptions.from_env(defaults) == defaults

    def test_bad_integer_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv(ENV_MAX_ERRORS, "lots")
        assert TransformOptions.from_env().max_errors == DEFAULT_MAX_ERRORS
        assert "is not an integer" in caplog.text
