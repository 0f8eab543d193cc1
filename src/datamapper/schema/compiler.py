"""
Schema compilation.

Compiling a schema parses every function reference and dot-path once, before
any row is processed, so the per-row loop never re-splits strings. Names are
still resolved against the registry at call time; pass ``strict=True`` to
check them all up front and fail before the run instead of on each row.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from loguru import logger

from datamapper.core.utils import split_path
from datamapper.registries import FunctionKind, FunctionRegistry
from .checks import ValueCheck, build_value_check
from .models import DataMappingSchema, FieldMapping, GlobalTransform, ValidationRule
from .references import FunctionCall, Stage, parse_predicate, parse_reference


@dataclass(frozen=True)
class CompiledFieldMapping:
    mapping: FieldMapping
    source_path: Tuple[str, ...]
    target_path: Tuple[str, ...]
    transform: Tuple[Stage, ...]
    condition: Optional[Stage]
    check: Optional[ValueCheck]


@dataclass(frozen=True)
class CompiledGlobalTransform:
    transform: GlobalTransform
    condition: Optional[Stage]


@dataclass(frozen=True)
class CompiledValidationRule:
    rule: ValidationRule
    field_path: Tuple[str, ...]
    predicate: Stage


@dataclass(frozen=True)
class CompiledSchema:
    """A schema with every reference parsed, ready for repeated runs."""

    schema: DataMappingSchema
    fields: Tuple[CompiledFieldMapping, ...]
    global_transforms: Tuple[CompiledGlobalTransform, ...]
    validation: Tuple[CompiledValidationRule, ...]

    @property
    def id(self) -> str:
        return self.schema.id

    def function_references(self) -> List[Tuple[FunctionKind, str]]:
        """Every ``(kind, name)`` pair this schema resolves by name, in order."""
        references: List[Tuple[FunctionKind, str]] = []
        for compiled in self.global_transforms:
            if isinstance(compiled.condition, FunctionCall):
                references.append((FunctionKind.CONDITION, compiled.condition.name))
        for compiled in self.fields:
            if isinstance(compiled.condition, FunctionCall):
                references.append((FunctionKind.CONDITION, compiled.condition.name))
            references.extend(
                (FunctionKind.TRANSFORM, stage.name)
                for stage in compiled.transform
                if isinstance(stage, FunctionCall)
            )
        for compiled in self.validation:
            if isinstance(compiled.predicate, FunctionCall):
                references.append((FunctionKind.VALIDATION, compiled.predicate.name))
        return references


def _compile_field(mapping: FieldMapping) -> CompiledFieldMapping:
    return CompiledFieldMapping(
        mapping=mapping,
        source_path=split_path(mapping.source),
        target_path=split_path(mapping.target),
        transform=parse_reference(mapping.transform),
        condition=parse_predicate(mapping.condition) if mapping.condition is not None else None,
        check=build_value_check(mapping.validation),
    )


def missing_functions(
    schema: Any,
    registry: FunctionRegistry
) -> List[Tuple[FunctionKind, str]]:
    """List the ``(kind, name)`` references in ``schema`` that ``registry`` lacks."""
    compiled = schema if isinstance(schema, CompiledSchema) else compile_schema(schema)
    missing: List[Tuple[FunctionKind, str]] = []
    for kind, name in compiled.function_references():
        if not registry.has(kind, name) and (kind, name) not in missing:
            missing.append((kind, name))
    return missing


def compile_schema(
    schema: DataMappingSchema,
    registry: Optional[FunctionRegistry] = None,
    strict: bool = False
) -> CompiledSchema:
    """
    Parse every reference in ``schema`` once.

    Args:
        schema: The mapping schema
        registry: Registry used to check names when ``strict`` is set
        strict: Fail fast on the first name missing from ``registry``

    Returns:
        CompiledSchema

    Raises:
        UnknownFunctionError: With ``strict=True``, for the first unregistered name
    """
    if isinstance(schema, CompiledSchema):
        compiled = schema
    else:
        compiled = CompiledSchema(
            schema=schema,
            fields=tuple(_compile_field(mapping) for mapping in schema.fields),
            global_transforms=tuple(
                CompiledGlobalTransform(
                    transform=transform,
                    condition=parse_predicate(transform.condition)
                    if transform.condition is not None else None,
                )
                for transform in schema.global_transforms or ()
            ),
            validation=tuple(
                CompiledValidationRule(
                    rule=rule,
                    field_path=split_path(rule.field),
                    predicate=parse_predicate(rule.rule),
                )
                for rule in schema.validation or ()
            ),
        )
        logger.debug(
            f"Compiled schema '{schema.id}': {len(compiled.fields)} field mappings, "
            f"{len(compiled.global_transforms)} global transforms, "
            f"{len(compiled.validation)} validation rules"
        )

    if strict:
        if registry is None:
            raise ValueError("strict compilation needs a registry")
        for kind, name in compiled.function_references():
            registry.get(kind, name)

    return compiled
