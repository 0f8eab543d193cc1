"""
Mapping schema document versions.

A schema records the document layout it was written for. Minor and patch
releases only add optional keys, so any schema sharing the current major
version loads as-is; other majors still load but are flagged.
"""

from typing import Final

from semantic_version import Version

CURRENT_SCHEMA_VERSION: Final[str] = "1.0.0"
_CURRENT: Final[Version] = Version(CURRENT_SCHEMA_VERSION)


def parse_schema_version(version: str) -> Version:
    """Parse ``MAJOR.MINOR.PATCH``; raises ValueError for anything else."""
    if isinstance(version, Version):
        return version
    try:
        return Version(str(version))
    except ValueError as exc:
        raise ValueError(f"Mapping schema version must look like '1.0.0', got {version!r}") from exc


def is_compatible_version(version: str) -> bool:
    return parse_schema_version(version).major == _CURRENT.major


def is_newer_version(version: str) -> bool:
    """True when ``version`` was written by a newer release than this one."""
    return parse_schema_version(version) > _CURRENT
