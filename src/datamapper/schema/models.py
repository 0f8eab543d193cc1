"""
Pydantic models describing one source-to-target mapping.

A :class:`DataMappingSchema` is pure data: ordered field mappings, optional
collection-level transforms, row-level validation rules and authoring
metadata. It does not know about the function registry; names inside it are
resolved only when a schema is compiled for a run.

Documents coming from JSON or YAML may use either camelCase keys
(``defaultValue``, ``globalTransforms``) or snake_case ones.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from datamapper.exceptions import SchemaError
from .checks import build_value_check
from .references import parse_predicate, parse_reference
from .versioning import (
    CURRENT_SCHEMA_VERSION,
    is_compatible_version,
    is_newer_version,
    parse_schema_version,
)


class SourceType(str, Enum):
    """Formats records can come from. ``api`` is a generic external API;
    ``sportsconnect`` is the integration-specific export."""
    CSV = "csv"
    JSON = "json"
    XML = "xml"
    API = "api"
    SPORTSCONNECT = "sportsconnect"


class TargetType(str, Enum):
    """Internal entities a schema produces."""
    USER = "user"
    TEAM = "team"
    FIELD = "field"
    RESERVATION = "reservation"
    PAYMENT = "payment"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class GlobalTransformType(str, Enum):
    FILTER = "filter"
    SORT = "sort"
    DEDUPLICATE = "deduplicate"
    GROUP = "group"  # reserved, currently a no-op


FunctionReference = Union[str, Callable[..., Any], Dict[str, Any]]
TransformReference = Union[str, Callable[..., Any], Dict[str, Any], List[Any]]


class _SchemaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )


def _check_reference(value: Any, parser: Callable[[Any], Any]) -> Any:
    if value is None:
        return value
    try:
        parser(value)
    except SchemaError as e:
        raise ValueError(str(e)) from e
    return value


class FieldMapping(_SchemaModel):
    """
    One source path to target path conversion rule.

    Attributes:
        source: Dot-path into the source row; empty for a purely computed field
        target: Dot-path written in the output record
        transform: Function name, pipe chain (``"trim|upper"``), stage list or callable
        required: A failure in this mapping aborts the whole row
        default_value: Substituted when the source value is absent, None or ""
        validation: Value check applied after the transform
        condition: Predicate that must hold for the mapping to apply
    """

    source: str = ""
    target: str
    transform: Optional[TransformReference] = None
    required: bool = False
    default_value: Any = None
    validation: Optional[Any] = None
    condition: Optional[FunctionReference] = None

    @field_validator('target')
    @classmethod
    def validate_target(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("target path must not be empty")
        if any(not part for part in v.split(".")):
            raise ValueError(f"target path '{v}' contains an empty segment")
        return v

    @field_validator('transform')
    @classmethod
    def validate_transform(cls, v: Any) -> Any:
        return _check_reference(v, parse_reference)

    @field_validator('condition')
    @classmethod
    def validate_condition(cls, v: Any) -> Any:
        return _check_reference(v, parse_predicate)

    @field_validator('validation')
    @classmethod
    def validate_validation(cls, v: Any) -> Any:
        if v is None:
            return v
        try:
            build_value_check(v)
        except TypeError as e:
            raise ValueError(str(e)) from e
        return v


class GlobalTransform(_SchemaModel):
    """
    A collection-level operation applied before any row is mapped.

    ``filter`` uses ``condition`` (and optionally ``parameters.field``);
    ``sort`` uses ``parameters.field`` and ``parameters.order``;
    ``deduplicate`` uses ``parameters.key``; ``group`` is reserved.
    """

    type: GlobalTransformType
    condition: Optional[FunctionReference] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('condition')
    @classmethod
    def validate_condition(cls, v: Any) -> Any:
        return _check_reference(v, parse_predicate)

    @field_validator('parameters')
    @classmethod
    def validate_parameters(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        order = v.get('order')
        if order is not None and str(order).lower() not in ("asc", "desc"):
            raise ValueError(f"sort order must be 'asc' or 'desc', got {order!r}")
        return v


class ValidationRule(_SchemaModel):
    """A row-level check on the transformed record."""

    field: str
    rule: FunctionReference
    message: str
    severity: Severity = Severity.ERROR

    @field_validator('rule')
    @classmethod
    def validate_rule(cls, v: Any) -> Any:
        return _check_reference(v, parse_predicate)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SchemaMetadata(_SchemaModel):
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    created_by: str = "system"


class DataMappingSchema(_SchemaModel):
    """
    The full ordered mapping for one source format to one target entity.

    Field mappings apply in declared order. Global transforms apply in
    declared order to the whole input before row processing. Engines treat a
    schema as read-only for the duration of a run.
    """

    id: str
    name: str
    description: Optional[str] = None
    source_type: SourceType
    target_type: TargetType
    version: str = CURRENT_SCHEMA_VERSION
    fields: List[FieldMapping] = Field(default_factory=list)
    global_transforms: Optional[List[GlobalTransform]] = None
    validation: Optional[List[ValidationRule]] = None
    metadata: SchemaMetadata = Field(default_factory=SchemaMetadata)

    @field_validator('version')
    @classmethod
    def validate_version(cls, v: str) -> str:
        parse_schema_version(v)
        if not is_compatible_version(v):
            logger.warning(
                f"Schema version {v} differs in major version from {CURRENT_SCHEMA_VERSION}"
            )
        elif is_newer_version(v):
            logger.debug(f"Schema version {v} is newer than {CURRENT_SCHEMA_VERSION}; unknown keys are rejected")
        return v

    @model_validator(mode='after')
    def check_field_targets(self) -> 'DataMappingSchema':
        targets = [mapping.target for mapping in self.fields]
        duplicates = sorted({t for t in targets if targets.count(t) > 1})
        if duplicates:
            logger.debug(f"Schema '{self.id}' writes these targets more than once: {duplicates}")
        return self
