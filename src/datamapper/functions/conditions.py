"""
Built-in condition and validation predicates.

The same predicates are registered in both the condition and the validation
namespaces. Each takes ``(value, row, context, *args)`` and returns a bool.
"""

import re
from typing import Any, List

from datamapper.core.utils import (
    MISSING,
    coerce_to_float,
    coerce_to_number_arg,
    coerce_to_timestamp,
    is_blank,
)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^\+?[\d\s\-\(\)]{10,}$"

_EMAIL = re.compile(EMAIL_PATTERN)
_PHONE = re.compile(PHONE_PATTERN)


def not_empty(value, row=None, context=None) -> bool:
    return not is_blank(value)


def is_empty(value, row=None, context=None) -> bool:
    return is_blank(value)


def is_email(value, row=None, context=None) -> bool:
    return isinstance(value, str) and _EMAIL.match(value) is not None


def is_phone(value, row=None, context=None) -> bool:
    return isinstance(value, str) and _PHONE.match(value) is not None


def is_numeric(value, row=None, context=None) -> bool:
    return coerce_to_float(value) is not None


def is_date(value, row=None, context=None) -> bool:
    return coerce_to_timestamp(value) is not None


def contains(value, row=None, context=None, substring="") -> bool:
    if value is None or value is MISSING:
        return False
    return str(substring).lower() in str(value).lower()


def equals(value, row=None, context=None, target=None) -> bool:
    """Compare for equality; string targets from a pipe also match the value's text."""
    if value == target:
        return True
    return isinstance(target, str) and value is not None and str(value) == target


def _as_options(options: Any) -> List[Any]:
    if isinstance(options, str):
        return [item.strip() for item in options.split(",")]
    if options is None:
        return []
    return list(options)


def is_in(value, row=None, context=None, options=None) -> bool:
    """Membership test; ``"in:a,b,c"`` supplies a comma-separated option list."""
    choices = _as_options(options)
    if value in choices:
        return True
    return value is not None and value is not MISSING and str(value) in choices


def matches(value, row=None, context=None, pattern="") -> bool:
    if value is None or value is MISSING:
        return False
    return re.search(str(pattern), str(value)) is not None


def min_length(value, row=None, context=None, length=0) -> bool:
    try:
        return len(value) >= coerce_to_number_arg(length, default=0)
    except TypeError:
        return False


def max_length(value, row=None, context=None, length=0) -> bool:
    try:
        return len(value) <= coerce_to_number_arg(length, default=0)
    except TypeError:
        return False


def between(value, row=None, context=None, low=None, high=None) -> bool:
    """Inclusive numeric range check; either bound may be omitted."""
    number = coerce_to_float(value)
    if number is None:
        return False
    lower = coerce_to_number_arg(low)
    upper = coerce_to_number_arg(high)
    if lower is not None and number < lower:
        return False
    if upper is not None and number > upper:
        return False
    return True
