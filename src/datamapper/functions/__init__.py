"""
Built-in function catalog.

Maps the names schemas use (``trim``, ``mapRole``, ``isEmail`` ...) to the
implementations in this package and installs them into a registry.
"""

from typing import Callable, Dict

from datamapper.registries import FunctionKind, FunctionRegistry

from . import conditions, lookups, transforms

BUILTIN_TRANSFORMS: Dict[str, Callable] = {
    # String transforms
    'trim': transforms.trim,
    'upper': transforms.upper,
    'lower': transforms.lower,
    'title': transforms.title,
    'removeSpaces': transforms.remove_spaces,
    'normalizePhone': transforms.normalize_phone,
    'normalizeEmail': transforms.normalize_email,
    'extractDomain': transforms.extract_domain,
    'slug': transforms.slug,

    # Number transforms
    'parseInt': transforms.parse_int,
    'parseFloat': transforms.parse_float,
    'round': transforms.round_number,
    'abs': transforms.absolute,
    'max': transforms.at_most,
    'min': transforms.at_least,
    'clamp': transforms.clamp,

    # Date transforms
    'parseDate': transforms.parse_date,
    'parseDateTime': transforms.parse_datetime,
    'formatDate': transforms.format_date,
    'parseTime': transforms.parse_time,

    # Array transforms
    'split': transforms.split,
    'join': transforms.join,
    'unique': transforms.unique,

    # Boolean transforms
    'toBool': transforms.to_bool,

    # Conditional transforms
    'default': transforms.default,
    'nullIfEmpty': transforms.null_if_empty,
    'emptyIfNull': transforms.empty_if_null,
    'coalesce': transforms.coalesce,

    # Lookup transforms
    'lookup': transforms.lookup,
    'mapRole': lookups.map_role,
    'mapFieldType': lookups.map_field_type,
    'mapReservationStatus': lookups.map_reservation_status,
}

BUILTIN_CONDITIONS: Dict[str, Callable] = {
    'notEmpty': conditions.not_empty,
    'isEmpty': conditions.is_empty,
    'isEmail': conditions.is_email,
    'isPhone': conditions.is_phone,
    'isNumeric': conditions.is_numeric,
    'isDate': conditions.is_date,
    'contains': conditions.contains,
    'equals': conditions.equals,
    'in': conditions.is_in,
    'matches': conditions.matches,
    'minLength': conditions.min_length,
    'maxLength': conditions.max_length,
    'between': conditions.between,
}


def register_builtins(registry: FunctionRegistry) -> FunctionRegistry:
    """Install every built-in; predicates go into both condition and validation namespaces."""
    for name, fn in BUILTIN_TRANSFORMS.items():
        registry.register(FunctionKind.TRANSFORM, name, fn, source="builtin")
    for name, fn in BUILTIN_CONDITIONS.items():
        registry.register(FunctionKind.CONDITION, name, fn, source="builtin")
        registry.register(FunctionKind.VALIDATION, name, fn, source="builtin")
    return registry


__all__ = ['BUILTIN_TRANSFORMS', 'BUILTIN_CONDITIONS', 'register_builtins']
