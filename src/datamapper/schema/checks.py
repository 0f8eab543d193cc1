"""
Field-level value checks.

A field mapping's ``validation`` is a value check: something that takes the
transformed value and either returns the validated (possibly coerced) value
or raises. Checks are built from pydantic ``TypeAdapter`` objects, plain
types and ``Annotated`` types, ordinary callables, or a declarative mapping
that file-based schemas can carry:

    validation:
      type: str
      min_length: 1
      max_length: 100
"""

import typing
from typing import Annotated, Any, Callable, Dict, Optional

from pydantic import Field, TypeAdapter

from datamapper.functions.conditions import EMAIL_PATTERN

ValueCheck = Callable[[Any], Any]

_BASE_TYPES: Dict[str, Any] = {
    'str': str,
    'string': str,
    'int': int,
    'integer': int,
    'float': float,
    'number': float,
    'bool': bool,
    'boolean': bool,
    'email': str,
}

_CONSTRAINT_KEYS = {'min_length', 'max_length', 'pattern', 'ge', 'le', 'gt', 'lt'}


def _annotated_from_mapping(spec: Dict[str, Any]) -> Any:
    type_name = str(spec.get('type', 'str')).lower()
    if type_name not in _BASE_TYPES:
        raise ValueError(
            f"Unsupported validation type '{type_name}'. "
            f"Supported types: {sorted(_BASE_TYPES)}"
        )
    unknown = set(spec) - _CONSTRAINT_KEYS - {'type'}
    if unknown:
        raise ValueError(f"Unsupported validation keys: {sorted(unknown)}")

    constraints = {key: spec[key] for key in _CONSTRAINT_KEYS if key in spec}
    if type_name == 'email':
        constraints.setdefault('pattern', EMAIL_PATTERN)
    base = _BASE_TYPES[type_name]
    if not constraints:
        return base
    return Annotated[base, Field(**constraints)]


def _is_type_like(spec: Any) -> bool:
    return isinstance(spec, type) or typing.get_origin(spec) is not None


def build_value_check(spec: Any) -> Optional[ValueCheck]:
    """
    Turn a validation spec into a callable ``check(value) -> value``.

    Args:
        spec: TypeAdapter, type/Annotated type, callable, or declarative mapping

    Returns:
        The check, or None when ``spec`` is None

    Raises:
        ValueError: If a declarative mapping is malformed
        TypeError: If ``spec`` is none of the supported forms
    """
    if spec is None:
        return None
    if isinstance(spec, TypeAdapter):
        return spec.validate_python
    if isinstance(spec, dict):
        return TypeAdapter(_annotated_from_mapping(spec)).validate_python
    if _is_type_like(spec):
        return TypeAdapter(spec).validate_python
    if callable(spec):
        return spec
    raise TypeError(f"Unsupported field validation of type {type(spec).__name__}")
