"""
Ready-made mapping schemas for known source formats.

Each factory builds a brand-new object graph on every call, so callers can
tweak the result without affecting later calls.

Example:
    >>> schema = create_user_mapping_schema("csv")
    >>> [m.target for m in schema.fields]
    ['email', 'fullName', 'phone', 'role', 'teamName']
"""

from typing import Callable, Dict, Tuple, Union

from loguru import logger

from datamapper.exceptions import SchemaError
from .models import (
    DataMappingSchema,
    FieldMapping,
    SchemaMetadata,
    SourceType,
    TargetType,
    ValidationRule,
)
from .versioning import CURRENT_SCHEMA_VERSION


def _full_name(value, row, context):
    """Computed ``fullName`` from ``firstName`` and ``lastName``."""
    first = str(row.get('firstName') or '').strip()
    last = str(row.get('lastName') or '').strip()
    return f"{first} {last}".strip()


def _coerce_source(source_format: Union[str, SourceType], supported: Tuple[SourceType, ...], entity: str) -> SourceType:
    try:
        source = SourceType(source_format)
    except ValueError:
        source = None
    if source not in supported:
        raise SchemaError(
            f"No default {entity} mapping for source format '{source_format}'",
            error_code="SCHEMA_004",
            context={
                'source_format': str(source_format),
                'supported_formats': [s.value for s in supported],
            }
        )
    return source


def _base_schema(target: TargetType, source: SourceType, label: str) -> Dict:
    return {
        'id': f"{target.value}-{source.value}-mapping",
        'name': f"{label} Import from {source.value.upper()}",
        'description': f"Standard mapping for importing {label.lower()}s from {source.value}",
        'source_type': source,
        'target_type': target,
        'version': CURRENT_SCHEMA_VERSION,
        'metadata': SchemaMetadata(created_by="system"),
    }


def create_user_mapping_schema(source_format: Union[str, SourceType] = "csv") -> DataMappingSchema:
    """Standard user import for ``csv`` or ``sportsconnect`` exports."""
    source = _coerce_source(source_format, (SourceType.CSV, SourceType.SPORTSCONNECT), "user")

    if source is SourceType.CSV:
        fields = [
            FieldMapping(
                source='email',
                target='email',
                required=True,
                transform='trim|lower',
                validation={'type': 'email'},
            ),
            FieldMapping(
                source='name',
                target='fullName',
                required=True,
                transform='trim|title',
                validation={'type': 'str', 'min_length': 1, 'max_length': 100},
            ),
            FieldMapping(source='phone', target='phone', transform='normalizePhone', condition='notEmpty'),
            FieldMapping(source='role', target='role', transform='mapRole', default_value='member'),
            FieldMapping(source='team', target='teamName', transform='trim', condition='notEmpty'),
        ]
    else:
        fields = [
            FieldMapping(source='email', target='email', required=True, transform='trim|lower'),
            FieldMapping(source='firstName', target='firstName', required=True, transform='trim|title'),
            FieldMapping(source='lastName', target='lastName', required=True, transform='trim|title'),
            FieldMapping(source='phone', target='phone', transform='normalizePhone'),
            FieldMapping(source='role', target='role', transform='mapRole'),
            FieldMapping(source='', target='fullName', transform=_full_name, required=True),
        ]

    return DataMappingSchema(fields=fields, **_base_schema(TargetType.USER, source, "User"))


def create_field_mapping_schema(source_format: Union[str, SourceType] = "csv") -> DataMappingSchema:
    """Standard playing-field (venue) import."""
    source = _coerce_source(source_format, (SourceType.CSV, SourceType.SPORTSCONNECT), "field")
    fields = [
        FieldMapping(
            source='name',
            target='name',
            required=True,
            transform='trim',
            validation={'type': 'str', 'min_length': 1, 'max_length': 100},
        ),
        FieldMapping(source='type', target='type', required=True, transform='mapFieldType'),
        FieldMapping(
            source='address',
            target='address',
            required=True,
            transform='trim',
            validation={'type': 'str', 'min_length': 1, 'max_length': 200},
        ),
        FieldMapping(
            source='hourlyRate',
            target='hourlyRate',
            required=True,
            transform='parseFloat',
            validation={'type': 'float', 'ge': 0},
        ),
        FieldMapping(source='capacity', target='capacity', transform='parseInt', condition='isNumeric'),
        FieldMapping(source='amenities', target='amenities', transform='split:,', condition='notEmpty'),
    ]
    return DataMappingSchema(fields=fields, **_base_schema(TargetType.FIELD, source, "Field"))


def create_team_mapping_schema(source_format: Union[str, SourceType] = "csv") -> DataMappingSchema:
    """Standard team import."""
    source = _coerce_source(source_format, (SourceType.CSV, SourceType.JSON), "team")
    fields = [
        FieldMapping(
            source='name',
            target='name',
            required=True,
            transform='trim',
            validation={'type': 'str', 'min_length': 1, 'max_length': 100},
        ),
        FieldMapping(source='division', target='division', transform='trim', condition='notEmpty'),
        FieldMapping(source='ageGroup', target='ageGroup', transform='trim|upper', condition='notEmpty'),
        FieldMapping(source='coachEmail', target='coach.email', transform='trim|lower', condition='isEmail'),
        FieldMapping(source='coachName', target='coach.name', transform='trim|title', condition='notEmpty'),
        FieldMapping(source='maxPlayers', target='maxPlayers', transform='parseInt', condition='isNumeric'),
    ]
    validation = [
        ValidationRule(
            field='coach.email',
            rule='notEmpty',
            message='Team has no coach contact',
            severity='warning',
        ),
    ]
    return DataMappingSchema(
        fields=fields,
        validation=validation,
        **_base_schema(TargetType.TEAM, source, "Team"),
    )


def create_reservation_mapping_schema(source_format: Union[str, SourceType] = "csv") -> DataMappingSchema:
    """Standard field reservation import."""
    source = _coerce_source(source_format, (SourceType.CSV, SourceType.JSON), "reservation")
    fields = [
        FieldMapping(source='field', target='fieldName', required=True, transform='trim',
                     validation={'type': 'str', 'min_length': 1}),
        FieldMapping(source='team', target='teamName', transform='trim', condition='notEmpty'),
        FieldMapping(source='date', target='date', required=True, transform='parseDate',
                     validation={'type': 'str', 'min_length': 10}),
        FieldMapping(source='startTime', target='startTime', required=True, transform='parseTime',
                     validation={'type': 'str'}),
        FieldMapping(source='endTime', target='endTime', required=True, transform='parseTime',
                     validation={'type': 'str'}),
        FieldMapping(source='status', target='status', transform='mapReservationStatus',
                     default_value='pending'),
        FieldMapping(source='notes', target='notes', transform='trim', condition='notEmpty'),
    ]
    return DataMappingSchema(fields=fields, **_base_schema(TargetType.RESERVATION, source, "Reservation"))


_DEFAULT_FACTORIES: Dict[TargetType, Callable[[Union[str, SourceType]], DataMappingSchema]] = {
    TargetType.USER: create_user_mapping_schema,
    TargetType.FIELD: create_field_mapping_schema,
    TargetType.TEAM: create_team_mapping_schema,
    TargetType.RESERVATION: create_reservation_mapping_schema,
}


def create_default_mapping_schema(
    target_type: Union[str, TargetType],
    source_format: Union[str, SourceType] = "csv"
) -> DataMappingSchema:
    """
    Build the standard schema for an entity type.

    ``target_type`` may be singular or plural (``"users"`` and ``"user"`` both work).

    Raises:
        SchemaError: SCHEMA_004 when no default exists for the pair
    """
    key = target_type.value if isinstance(target_type, TargetType) else str(target_type).lower()
    if key.endswith("s") and key[:-1] in {t.value for t in TargetType}:
        key = key[:-1]
    try:
        factory = _DEFAULT_FACTORIES[TargetType(key)]
    except (ValueError, KeyError):
        raise SchemaError(
            f"Default mapping schema not available for type: {target_type}",
            error_code="SCHEMA_004",
            context={'target_type': str(target_type)}
        ) from None
    logger.debug(f"Building default {key} mapping schema for {source_format}")
    return factory(source_format)
