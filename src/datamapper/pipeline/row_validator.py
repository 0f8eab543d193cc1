"""
Row Validator.

Applies the schema's row-level validation rules to a transformed record.
A rule that does not hold becomes an error or a warning according to its
severity; a rule that raises becomes an error wrapping the exception text.
Nothing here aborts a run.
"""

from typing import Any, Dict, List, Sequence, Tuple

from loguru import logger

from datamapper.core.utils import get_nested_value
from datamapper.registries import FunctionKind, FunctionRegistry
from datamapper.results import TransformationError, TransformationWarning
from datamapper.schema.compiler import CompiledValidationRule
from datamapper.schema.models import Severity
from .context import TransformContext
from .dispatch import evaluate


def validate_row(
    record: Dict[str, Any],
    rules: Sequence[CompiledValidationRule],
    registry: FunctionRegistry,
    context: TransformContext,
) -> Tuple[List[TransformationError], List[TransformationWarning]]:
    """
    Check ``record`` against every rule.

    Returns:
        ``(errors, warnings)`` for this row
    """
    errors: List[TransformationError] = []
    warnings: List[TransformationWarning] = []

    for compiled in rules:
        rule = compiled.rule
        value = get_nested_value(record, compiled.field_path, default=None)
        try:
            passed = evaluate(compiled.predicate, FunctionKind.VALIDATION, registry, value, record, context)
        except Exception as e:
            logger.debug(f"Row {context.row_number}: rule on '{rule.field}' raised {e!r}")
            errors.append(TransformationError(
                row=context.row_number,
                field=rule.field,
                message=f"Validation error: {e}",
                raw_value=value,
            ))
            continue

        if passed:
            continue
        if rule.severity is Severity.WARNING:
            warnings.append(TransformationWarning(
                row=context.row_number,
                field=rule.field,
                message=rule.message,
                raw_value=value,
            ))
        else:
            errors.append(TransformationError(
                row=context.row_number,
                field=rule.field,
                message=rule.message,
                raw_value=value,
            ))

    return errors, warnings
