"""
The mapping pipeline: global transforms, row transformation, row validation
and the orchestrating engine.
"""

from .context import TransformContext
from .engine import (
    DataMappingEngine,
    get_default_engine,
    register_condition,
    register_transform,
    register_validation,
    transform_data,
)
from .global_transforms import apply_global_transforms, deduplicate_rows, filter_rows, sort_rows
from .row_transformer import apply_field_mapping, transform_row
from .row_validator import validate_row

__all__ = [
    'TransformContext',
    'DataMappingEngine',
    'get_default_engine',
    'transform_data',
    'register_transform',
    'register_condition',
    'register_validation',
    'apply_global_transforms',
    'filter_rows',
    'sort_rows',
    'deduplicate_rows',
    'apply_field_mapping',
    'transform_row',
    'validate_row',
]
