"""
Row Transformer.

Converts one source row into one target record by walking the compiled field
mappings in declared order. For each mapping: evaluate the condition, read
the source value, substitute the default, run the transform pipeline, apply
the value check, and write the result at the target path.

A failure inside a required mapping aborts the whole row; the partially
built record is discarded. A failure inside an optional mapping drops only
that field.
"""

from typing import Any, Dict, Sequence

from loguru import logger
from pydantic import ValidationError

from datamapper.core.utils import MISSING, get_nested_value, is_blank, set_nested_value
from datamapper.exceptions import FieldValidationError, RowTransformError, UnknownFunctionError
from datamapper.registries import FunctionKind, FunctionRegistry
from datamapper.schema.compiler import CompiledFieldMapping
from .context import TransformContext
from .dispatch import evaluate, run_pipeline

# Returned by a mapping that should write nothing
_SKIPPED = object()


def _describe_check_failure(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(item['msg'] for item in error.errors())
    return str(error)


def apply_field_mapping(
    compiled: CompiledFieldMapping,
    row: Dict[str, Any],
    registry: FunctionRegistry,
    context: TransformContext,
) -> Any:
    """
    Compute the value one mapping writes.

    Returns:
        The value to write, ``MISSING`` if the source was absent and nothing
        produced a value, or a private skip marker when the condition fails
        or an optional value check rejects the value

    Raises:
        FieldValidationError: If a required mapping's value check fails
        UnknownFunctionError: If a referenced function is not registered
    """
    mapping = compiled.mapping
    raw_value = get_nested_value(row, compiled.source_path) if compiled.source_path else MISSING

    if compiled.condition is not None:
        if not evaluate(compiled.condition, FunctionKind.CONDITION, registry, raw_value, row, context):
            return _SKIPPED

    value = raw_value
    if mapping.default_value is not None and is_blank(value):
        value = mapping.default_value

    if compiled.transform:
        value = run_pipeline(compiled.transform, registry, value, row, context)

    if compiled.check is not None:
        try:
            value = compiled.check(None if value is MISSING else value)
        except Exception as e:
            message = f"Validation failed for field {mapping.target}: {_describe_check_failure(e)}"
            if mapping.required:
                raise FieldValidationError(
                    message,
                    field=mapping.target,
                    raw_value=None if raw_value is MISSING else raw_value,
                    transformed_value=None if value is MISSING else value,
                ) from e
            logger.debug(f"Row {context.row_number}: dropping optional field. {message}")
            return _SKIPPED

    return value


def transform_row(
    row: Dict[str, Any],
    fields: Sequence[CompiledFieldMapping],
    registry: FunctionRegistry,
    context: TransformContext,
) -> Dict[str, Any]:
    """
    Build the target record for ``row``.

    Args:
        row: Source row
        fields: Compiled field mappings, in declared order
        registry: Registry that function names resolve against
        context: Fresh context for this row

    Returns:
        The target record

    Raises:
        RowTransformError: If a required mapping fails (FieldValidationError
            when its value check rejects the value)
        UnknownFunctionError: If any mapping references an unregistered function
    """
    target: Dict[str, Any] = {}

    for compiled in fields:
        mapping = compiled.mapping
        try:
            value = apply_field_mapping(compiled, row, registry, context)
        except UnknownFunctionError as e:
            raise e.with_context({'field': mapping.target})
        except RowTransformError:
            raise
        except Exception as e:
            if mapping.required:
                raw_value = get_nested_value(row, compiled.source_path, default=None)
                raise RowTransformError(
                    f"Required field {mapping.target} transformation failed: {e}",
                    field=mapping.target,
                    raw_value=raw_value,
                ) from e
            logger.debug(
                f"Row {context.row_number}: optional field {mapping.target} failed "
                f"and was omitted: {e}"
            )
            continue

        if value is _SKIPPED or value is MISSING:
            continue
        set_nested_value(target, compiled.target_path, value)

    return target
