"""
Value utilities for normalizing and coercing loosely typed source values.

Source records arrive from flat files and third-party payloads, so numbers may
be strings, booleans may be words, and dates may be in any common format.
These helpers return ``None`` when a value cannot be coerced instead of
raising, which lets transform pipelines treat unparseable input as empty.
"""

import math
import re
from datetime import date, datetime
from typing import Any, List, Optional, Union

import pandas as pd
from loguru import logger

# Common value patterns for reuse
COMMON_VALUES = {
    'boolean_true': ['true', '1', 'yes', 'y', 'on', 'enabled'],
    'boolean_false': ['false', '0', 'no', 'n', 'off', 'disabled', ''],
    'null_values': ['na', 'n/a', 'null', 'none', 'unknown'],
}

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def coerce_to_int(value: Any) -> Optional[int]:
    """
    Parse the leading integer of a value.

    Example:
        >>> coerce_to_int("42 players")
        42
        >>> coerce_to_int("12.9")
        12
        >>> coerce_to_int("n/a") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) or math.isinf(value) else int(value)
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else None


def coerce_to_float(value: Any) -> Optional[float]:
    """
    Parse the leading decimal number of a value.

    Example:
        >>> coerce_to_float("35.50/hr")
        35.5
        >>> coerce_to_float("") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
        return None if math.isnan(result) else result
    match = _FLOAT_PREFIX.match(str(value))
    return float(match.group(1)) if match else None


def coerce_to_boolean(
    value: Any,
    true_values: Optional[List[str]] = None,
) -> bool:
    """
    Coerce a value to a boolean.

    Strings are compared case-insensitively against ``true_values``; numbers
    are true when non-zero; everything else is False.
    """
    if true_values is None:
        true_values = COMMON_VALUES['boolean_true']
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in true_values
    if isinstance(value, (int, float)):
        return value != 0
    return False


def coerce_to_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a value into a pandas Timestamp, returning None when invalid.

    Accepts strings, ``date``/``datetime`` objects and epoch milliseconds.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            parsed = pd.to_datetime(value, unit="ms", errors="coerce")
        elif isinstance(value, (date, datetime)):
            parsed = pd.Timestamp(value)
        else:
            parsed = pd.to_datetime(str(value).strip(), errors="coerce")
    except (ValueError, TypeError, OverflowError) as e:
        logger.debug(f"Could not parse '{value}' as a date: {e}")
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed


def coerce_to_number_arg(value: Any, default: Union[int, float, None] = None) -> Union[int, float, None]:
    """
    Coerce a function argument, which arrives as a string from a pipe reference.

    Integral strings become ints, other numeric strings floats.
    """
    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        try:
            return float(text)
        except ValueError:
            return default
