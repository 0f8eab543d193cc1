"""
Loading and dumping mapping schemas.

Schemas are authored and stored outside the engine, typically as YAML or JSON
documents. This module turns such documents into validated
:class:`DataMappingSchema` objects, reporting problems as :class:`SchemaError`
with an error code per failure kind.
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from loguru import logger
from pydantic import ValidationError

from datamapper.exceptions import SchemaError, log_and_raise
from .models import DataMappingSchema

SchemaSource = Union[DataMappingSchema, Dict[str, Any], str, os.PathLike]


def _format_validation_errors(error: ValidationError) -> list:
    return [
        f"{'.'.join(str(loc) for loc in item['loc'])}: {item['msg']}"
        for item in error.errors()
    ]


def schema_from_dict(document: Dict[str, Any]) -> DataMappingSchema:
    """
    Validate a schema document.

    Raises:
        SchemaError: SCHEMA_003 if the document does not describe a valid schema
    """
    if not isinstance(document, dict):
        raise SchemaError(
            f"Schema document must be a mapping, got {type(document).__name__}",
            error_code="SCHEMA_003",
        )
    try:
        return DataMappingSchema.model_validate(document)
    except ValidationError as e:
        errors = _format_validation_errors(e)
        logger.error(f"Invalid mapping schema '{document.get('id', '<unknown>')}': {errors}")
        raise SchemaError(
            f"Invalid mapping schema: {'; '.join(errors)}",
            error_code="SCHEMA_003",
            context={'schema_id': document.get('id'), 'validation_errors': errors}
        ) from e


def read_schema_file(path: Union[str, os.PathLike]) -> Dict[str, Any]:
    """
    Read a ``.yaml``, ``.yml`` or ``.json`` schema document.

    PyYAML's safe loader parses JSON too, so one reader serves both formats.

    Raises:
        SchemaError: SCHEMA_001 if the file is missing, SCHEMA_002 if it cannot be parsed
    """
    schema_path = Path(path)
    if not schema_path.is_file():
        log_and_raise(
            SchemaError(
                f"Schema file not found: {schema_path}",
                error_code="SCHEMA_001",
                context={'schema_path': schema_path}
            ),
            logger,
        )
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SchemaError(
            f"Could not parse schema file {schema_path}: {e}",
            error_code="SCHEMA_002",
            context={'schema_path': schema_path}
        ) from e
    logger.debug(f"Read schema document from {schema_path}")
    return document


def load_mapping_schema(source: SchemaSource) -> DataMappingSchema:
    """
    Load a mapping schema from a model, a dict, or a YAML/JSON file path.

    Args:
        source: DataMappingSchema (returned unchanged), document dict, or file path

    Returns:
        The validated schema

    Raises:
        SchemaError: If the source cannot be read or validated
    """
    if isinstance(source, DataMappingSchema):
        return source
    if isinstance(source, dict):
        return schema_from_dict(source)
    if isinstance(source, (str, os.PathLike)):
        schema = schema_from_dict(read_schema_file(source))
        logger.info(f"Loaded mapping schema '{schema.id}' (version {schema.version}) from {source}")
        return schema
    raise SchemaError(
        f"Cannot load a mapping schema from {type(source).__name__}",
        error_code="SCHEMA_003",
    )


def _is_serializable_reference(reference: Any) -> bool:
    if isinstance(reference, list):
        return not any(callable(item) for item in reference)
    return reference is None or isinstance(reference, (str, dict))


def dump_mapping_schema(schema: DataMappingSchema, by_alias: bool = True) -> Dict[str, Any]:
    """
    Produce a plain, YAML/JSON-friendly dict of ``schema``.

    Inline functions and non-declarative value checks cannot be serialized;
    they are omitted and a warning is logged.
    """
    exclude: Dict[str, Dict[int, Any]] = {}
    dropped = []

    for index, mapping in enumerate(schema.fields):
        skipped = {
            attr for attr in ("transform", "condition")
            if not _is_serializable_reference(getattr(mapping, attr))
        }
        if mapping.validation is not None and not isinstance(mapping.validation, dict):
            skipped.add("validation")
        if skipped:
            exclude.setdefault("fields", {})[index] = skipped
            dropped.extend(f"{mapping.target}.{attr}" for attr in sorted(skipped))

    for index, transform in enumerate(schema.global_transforms or []):
        if not _is_serializable_reference(transform.condition):
            exclude.setdefault("global_transforms", {})[index] = {"condition"}
            dropped.append(f"{transform.type.value}.condition")

    for index, rule in enumerate(schema.validation or []):
        if not _is_serializable_reference(rule.rule):
            exclude.setdefault("validation", {})[index] = True
            dropped.append(f"rule on {rule.field}")

    if dropped:
        logger.warning(f"Schema '{schema.id}' dump omitted non-serializable entries: {dropped}")
    return schema.model_dump(mode="json", by_alias=by_alias, exclude_none=True, exclude=exclude)


def save_mapping_schema(schema: DataMappingSchema, path: Union[str, os.PathLike]) -> Path:
    """Write ``schema`` as YAML and return the path written."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        yaml.safe_dump(dump_mapping_schema(schema), f, sort_keys=False)
    logger.info(f"Saved mapping schema '{schema.id}' to {target}")
    return target
