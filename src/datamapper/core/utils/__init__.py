"""
Core utilities module for datamapper.

This module contains foundational utility functions with minimal dependencies
that are used throughout the rest of the codebase.

Error Handling Conventions:
---------------------------
Utilities in this package never raise on malformed data values. Path lookups
return a default (``MISSING`` unless told otherwise) and value coercions
return ``None``; deciding whether that is an error belongs to the pipeline.
"""

from .dict_utils import (
    MISSING, split_path, get_nested_value, set_nested_value, is_blank, freeze_value
)

from .env_utils import get_env_str, get_env_bool, get_env_int

from .value_utils import (
    COMMON_VALUES, coerce_to_int, coerce_to_float, coerce_to_boolean,
    coerce_to_timestamp, coerce_to_number_arg
)

__all__ = [
    'MISSING',
    'split_path',
    'get_nested_value',
    'set_nested_value',
    'is_blank',
    'freeze_value',
    'get_env_str',
    'get_env_bool',
    'get_env_int',
    'COMMON_VALUES',
    'coerce_to_int',
    'coerce_to_float',
    'coerce_to_boolean',
    'coerce_to_timestamp',
    'coerce_to_number_arg',
]
