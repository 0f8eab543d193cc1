"""
Stage invocation.

A compiled stage is either a :class:`FunctionCall` resolved by name against
the registry at call time, or an inline callable taken from the schema.
"""

from typing import Any, Optional, Sequence

from datamapper.core.utils import MISSING
from datamapper.registries import FunctionKind, FunctionRegistry
from datamapper.schema.references import FunctionCall, Stage
from .context import TransformContext


def call_stage(
    stage: Stage,
    kind: FunctionKind,
    registry: FunctionRegistry,
    value: Any,
    row: Any,
    context: Optional[TransformContext],
) -> Any:
    """
    Invoke one stage as ``fn(value, row, context, *args)``.

    An absent value is passed as None.

    Raises:
        UnknownFunctionError: If a named stage is not registered
    """
    if value is MISSING:
        value = None
    if isinstance(stage, FunctionCall):
        fn = registry.get(kind, stage.name)
        return fn(value, row, context, *stage.args)
    return stage(value, row, context)


def run_pipeline(
    stages: Sequence[Stage],
    registry: FunctionRegistry,
    value: Any,
    row: Any,
    context: Optional[TransformContext],
) -> Any:
    """Thread ``value`` through ``stages`` left to right."""
    for stage in stages:
        value = call_stage(stage, FunctionKind.TRANSFORM, registry, value, row, context)
    return value


def evaluate(
    predicate: Stage,
    kind: FunctionKind,
    registry: FunctionRegistry,
    value: Any,
    row: Any,
    context: Optional[TransformContext],
) -> bool:
    """Evaluate a condition or validation predicate as a bool."""
    return bool(call_stage(predicate, kind, registry, value, row, context))
