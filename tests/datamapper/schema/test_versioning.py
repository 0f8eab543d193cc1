"""Tests for schema document versions."""

import pytest
from semantic_version import Version

from datamapper.schema import (
    CURRENT_SCHEMA_VERSION,
    is_compatible_version,
    is_newer_version,
    parse_schema_version,
)


def test_parse():
    assert parse_schema_version("1.2.3") == Version("1.2.3")


@pytest.mark.parametrize("bad", ["one", "1.0", ""])
def test_parse_rejects_non_semver(bad):
    with pytest.raises(ValueError, match="must look like"):
        parse_schema_version(bad)


@pytest.mark.parametrize("version, compatible", [
    (CURRENT_SCHEMA_VERSION, True),
    ("1.9.0", True),
    ("2.0.0", False),
    ("0.9.0", False),
])
def test_compatibility_is_by_major(version, compatible):
    assert is_compatible_version(version) is compatible


def test_newer():
    assert is_newer_version("1.1.0")
    assert not is_newer_version(CURRENT_SCHEMA_VERSION)
