"""
Global Transform Stage.

Collection-level operations (filter, sort, deduplicate) applied in declared
order to the whole input before any row is mapped. Because they change
cardinality and order, row numbers reported later refer to the collection
this stage returns, not to the caller's original input.
"""

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from datamapper.core.utils import MISSING, freeze_value, get_nested_value
from datamapper.exceptions import TransformError
from datamapper.registries import FunctionKind, FunctionRegistry
from datamapper.schema.compiler import CompiledGlobalTransform
from datamapper.schema.models import GlobalTransformType
from .context import TransformContext
from .dispatch import evaluate

Rows = List[Dict[str, Any]]


def filter_rows(
    rows: Sequence[Dict[str, Any]],
    compiled: CompiledGlobalTransform,
    registry: FunctionRegistry,
    metadata: Optional[Dict[str, Any]] = None,
) -> Rows:
    """Keep rows for which the condition holds.

    The condition sees ``row[parameters.field]`` when a field is configured,
    otherwise the whole row.
    """
    if compiled.condition is None:
        logger.warning("Filter global transform has no condition; rows left unchanged")
        return list(rows)

    field_path = compiled.transform.parameters.get('field')
    metadata = {} if metadata is None else metadata
    kept = []
    for index, row in enumerate(rows):
        value = get_nested_value(row, field_path) if field_path else row
        context = TransformContext(
            source_data=rows, current_row=row, row_index=index, metadata=metadata
        )
        if evaluate(compiled.condition, FunctionKind.CONDITION, registry, value, row, context):
            kept.append(row)
    return kept


def sort_rows(rows: Sequence[Dict[str, Any]], parameters: Dict[str, Any]) -> Rows:
    """
    Stable sort by ``parameters.field`` in ``parameters.order`` (asc or desc).

    Rows without a value for the field go last in ascending order and first in
    descending order.

    Raises:
        TransformError: TRANSFORM_007 if the key values cannot be compared
    """
    field_path = parameters.get('field')
    if not field_path:
        logger.warning("Sort global transform has no 'field' parameter; rows left unchanged")
        return list(rows)
    descending = str(parameters.get('order', 'asc')).lower() == 'desc'

    def sort_key(row):
        value = get_nested_value(row, field_path, default=None)
        if value is None:
            return (True, 0)
        return (False, value)

    try:
        # reverse=True keeps equal keys in their original order
        return sorted(rows, key=sort_key, reverse=descending)
    except TypeError as e:
        raise TransformError(
            f"Cannot sort by '{field_path}': {e}",
            error_code="TRANSFORM_007",
            context={'transformation_step': 'sort', 'field': field_path}
        ) from e


def deduplicate_rows(rows: Sequence[Dict[str, Any]], parameters: Dict[str, Any]) -> Rows:
    """Keep the first row seen for each distinct value of ``parameters.key``."""
    key_path = parameters.get('key')
    if not key_path:
        logger.warning("Deduplicate global transform has no 'key' parameter; rows left unchanged")
        return list(rows)

    seen = set()
    unique_rows = []
    for row in rows:
        key = freeze_value(get_nested_value(row, key_path, default=MISSING))
        if key in seen:
            continue
        seen.add(key)
        unique_rows.append(row)
    return unique_rows


def apply_global_transforms(
    rows: Sequence[Dict[str, Any]],
    transforms: Sequence[CompiledGlobalTransform],
    registry: FunctionRegistry,
    metadata: Optional[Dict[str, Any]] = None,
) -> Rows:
    """
    Apply every global transform in declared order.

    Args:
        rows: Input rows; the sequence itself is never mutated
        transforms: Compiled global transforms from the schema
        registry: Registry that filter conditions resolve against
        metadata: Run-wide metadata bag passed to filter conditions

    Returns:
        A new list of rows forming the working collection
    """
    working = list(rows)
    for compiled in transforms:
        transform_type = compiled.transform.type
        before = len(working)

        if transform_type is GlobalTransformType.FILTER:
            working = filter_rows(working, compiled, registry, metadata)
        elif transform_type is GlobalTransformType.SORT:
            working = sort_rows(working, compiled.transform.parameters)
        elif transform_type is GlobalTransformType.DEDUPLICATE:
            working = deduplicate_rows(working, compiled.transform.parameters)
        else:
            logger.debug(f"Global transform '{transform_type.value}' is not implemented; skipping")
            continue

        logger.debug(f"Global transform '{transform_type.value}': {before} -> {len(working)} rows")
    return working
