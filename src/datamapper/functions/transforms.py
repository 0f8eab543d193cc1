"""
Built-in transform functions.

Every transform has the signature ``(value, row, context, *args)`` and
returns the new value. Arguments supplied through a pipe reference such as
``"round:2"`` arrive as strings, so numeric arguments are coerced here.
Transforms leave values of an unexpected type untouched rather than raising.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional

from datamapper.core.utils import (
    MISSING,
    coerce_to_boolean,
    coerce_to_float,
    coerce_to_int,
    coerce_to_number_arg,
    coerce_to_timestamp,
    get_nested_value,
    is_blank,
)


# --- String transforms ---

def trim(value, row=None, context=None):
    return value.strip() if isinstance(value, str) else value


def upper(value, row=None, context=None):
    return value.upper() if isinstance(value, str) else value


def lower(value, row=None, context=None):
    return value.lower() if isinstance(value, str) else value


def title(value, row=None, context=None):
    """Capitalize each space-separated word and lower-case the rest."""
    if not isinstance(value, str):
        return value
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


def remove_spaces(value, row=None, context=None):
    return re.sub(r"\s+", "", value) if isinstance(value, str) else value


def normalize_phone(value, row=None, context=None):
    """Keep digits only and drop a leading country code ``1``."""
    if not isinstance(value, str):
        return value
    return re.sub(r"^1", "", re.sub(r"\D", "", value))


def normalize_email(value, row=None, context=None):
    return value.strip().lower() if isinstance(value, str) else value


def extract_domain(value, row=None, context=None):
    if isinstance(value, str) and "@" in value:
        return value.split("@")[1]
    return value


def slug(value, row=None, context=None):
    if not isinstance(value, str):
        return value
    return re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")


# --- Number transforms ---

def parse_int(value, row=None, context=None) -> Optional[int]:
    return coerce_to_int(value)


def parse_float(value, row=None, context=None) -> Optional[float]:
    return coerce_to_float(value)


def round_number(value, row=None, context=None, decimals=0):
    """Round half away from zero; ``decimals`` <= 0 returns an int."""
    number = coerce_to_float(value)
    if number is None:
        return None
    places = int(coerce_to_number_arg(decimals, default=0))
    try:
        rounded = Decimal(str(number)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return number
    return int(rounded) if places <= 0 else float(rounded)


def absolute(value, row=None, context=None):
    number = coerce_to_float(value)
    return None if number is None else abs(number)


def at_most(value, row=None, context=None, maximum=None):
    """Clamp from above (registered as ``max``)."""
    number = coerce_to_float(value)
    if number is None:
        return None
    limit = coerce_to_number_arg(maximum)
    return number if limit is None else min(number, limit)


def at_least(value, row=None, context=None, minimum=None):
    """Clamp from below (registered as ``min``)."""
    number = coerce_to_float(value)
    if number is None:
        return None
    limit = coerce_to_number_arg(minimum)
    return number if limit is None else max(number, limit)


def clamp(value, row=None, context=None, minimum=None, maximum=None):
    return at_most(at_least(value, row, context, minimum), row, context, maximum)


# --- Date transforms ---

def _to_utc(timestamp):
    if timestamp.tzinfo is not None:
        return timestamp.tz_convert("UTC")
    return timestamp


def parse_date(value, row=None, context=None) -> Optional[str]:
    """Parse any common date representation into ``YYYY-MM-DD``."""
    if not value:
        return None
    timestamp = coerce_to_timestamp(value)
    return None if timestamp is None else _to_utc(timestamp).strftime("%Y-%m-%d")


def parse_datetime(value, row=None, context=None) -> Optional[str]:
    """Parse a timestamp into ISO 8601 form (UTC when the input carries a zone)."""
    if not value:
        return None
    timestamp = coerce_to_timestamp(value)
    return None if timestamp is None else _to_utc(timestamp).isoformat()


def format_date(value, row=None, context=None, fmt="YYYY-MM-DD") -> Optional[str]:
    """Format a date using ``YYYY``, ``MM`` and ``DD`` tokens."""
    if not value:
        return None
    timestamp = coerce_to_timestamp(value)
    if timestamp is None:
        return None
    return (
        str(fmt)
        .replace("YYYY", f"{timestamp.year:04d}")
        .replace("MM", f"{timestamp.month:02d}")
        .replace("DD", f"{timestamp.day:02d}")
    )


_TIME = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")


def parse_time(value, row=None, context=None) -> Optional[str]:
    """Extract a 24h ``HH:MM`` time, or None when out of range."""
    if not value:
        return None
    match = _TIME.search(str(value))
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return f"{hours:02d}:{minutes:02d}"


# --- Array transforms ---

def split(value, row=None, context=None, separator=","):
    if not isinstance(value, str):
        return value
    return [item.strip() for item in value.split(separator) if item.strip()]


def join(value, row=None, context=None, separator=", "):
    if not isinstance(value, (list, tuple)):
        return value
    return separator.join(str(item) for item in value)


def unique(value, row=None, context=None):
    """Drop repeated items, keeping first occurrences in order."""
    if not isinstance(value, (list, tuple)):
        return value
    seen = []
    for item in value:
        if item not in seen:
            seen.append(item)
    return seen


# --- Boolean transforms ---

def to_bool(value, row=None, context=None) -> bool:
    return coerce_to_boolean(value)


# --- Conditional transforms ---

def default(value, row=None, context=None, fallback=None):
    return fallback if is_blank(value) else value


def null_if_empty(value, row=None, context=None):
    return None if is_blank(value) else value


def empty_if_null(value, row=None, context=None):
    return "" if value is None or value is MISSING else value


def coalesce(value, row=None, context=None, *paths):
    """Return ``value`` or, when blank, the first non-blank row field in ``paths``."""
    if not is_blank(value):
        return value
    for path in paths:
        candidate = get_nested_value(row or {}, path)
        if not is_blank(candidate):
            return candidate
    return None


# --- Lookup transforms ---

def _parse_mapping(mapping: Any) -> Dict[Any, Any]:
    """Accept a dict, or the pipe form ``"a=1,b=2"``."""
    if isinstance(mapping, dict):
        return mapping
    if isinstance(mapping, str):
        pairs = (item.split("=", 1) for item in mapping.split(",") if "=" in item)
        return {key.strip(): val.strip() for key, val in pairs}
    return {}


def lookup(value, row=None, context=None, mapping=None):
    """Translate through ``mapping``; unmapped or falsy-mapped values pass through."""
    table = _parse_mapping(mapping)
    try:
        return table.get(value) or value
    except TypeError:
        return value
