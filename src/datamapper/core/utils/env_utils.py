"""
Typed readers for ``DATAMAPPER_*`` environment settings.

Unset variables fall back to the caller's default. Malformed values also fall
back, with a warning, so a bad deployment setting never stops an import run.
"""

import os
from typing import Optional

from loguru import logger

from .value_utils import COMMON_VALUES


def get_env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Stripped value of ``name``; blank counts as unset."""
    value = os.environ.get(name, "").strip()
    return value or default


def get_env_bool(name: str, default: bool = False) -> bool:
    value = get_env_str(name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in COMMON_VALUES['boolean_true']:
        return True
    if lowered in COMMON_VALUES['boolean_false']:
        return False
    logger.warning(f"Environment variable {name}={value!r} is not a boolean, using {default}")
    return default


def get_env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    value = get_env_str(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Environment variable {name}={value!r} is not an integer, using {default}")
        return default
