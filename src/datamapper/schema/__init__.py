"""
Mapping schema definitions, factories and loading.

Example:
    >>> from datamapper.schema import create_user_mapping_schema, load_mapping_schema
    >>> schema = create_user_mapping_schema("csv")
    >>> schema = load_mapping_schema("schemas/users.yaml")
"""

from .checks import ValueCheck, build_value_check
from .compiler import (
    CompiledFieldMapping,
    CompiledGlobalTransform,
    CompiledSchema,
    CompiledValidationRule,
    compile_schema,
    missing_functions,
)
from .factories import (
    create_default_mapping_schema,
    create_field_mapping_schema,
    create_reservation_mapping_schema,
    create_team_mapping_schema,
    create_user_mapping_schema,
)
from .loader import (
    dump_mapping_schema,
    load_mapping_schema,
    read_schema_file,
    save_mapping_schema,
    schema_from_dict,
)
from .models import (
    DataMappingSchema,
    FieldMapping,
    GlobalTransform,
    GlobalTransformType,
    SchemaMetadata,
    Severity,
    SourceType,
    TargetType,
    ValidationRule,
)
from .references import FunctionCall, Stage, describe_stages, parse_predicate, parse_reference
from .versioning import (
    CURRENT_SCHEMA_VERSION,
    is_compatible_version,
    is_newer_version,
    parse_schema_version,
)

__all__ = [
    # Models
    'DataMappingSchema',
    'FieldMapping',
    'GlobalTransform',
    'GlobalTransformType',
    'SchemaMetadata',
    'Severity',
    'SourceType',
    'TargetType',
    'ValidationRule',
    # References and checks
    'FunctionCall',
    'Stage',
    'ValueCheck',
    'build_value_check',
    'describe_stages',
    'parse_predicate',
    'parse_reference',
    # Compilation
    'CompiledFieldMapping',
    'CompiledGlobalTransform',
    'CompiledSchema',
    'CompiledValidationRule',
    'compile_schema',
    'missing_functions',
    # Factories
    'create_default_mapping_schema',
    'create_field_mapping_schema',
    'create_reservation_mapping_schema',
    'create_team_mapping_schema',
    'create_user_mapping_schema',
    # Loading
    'dump_mapping_schema',
    'load_mapping_schema',
    'read_schema_file',
    'save_mapping_schema',
    'schema_from_dict',
    # Versioning
    'CURRENT_SCHEMA_VERSION',
    'is_compatible_version',
    'is_newer_version',
    'parse_schema_version',
]
