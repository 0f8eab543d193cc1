"""
Transformation orchestrator.

:class:`DataMappingEngine` sequences one run:

    Init -> global transforms -> (transform row -> validate row) x N -> finalize

and enforces the partial-failure policy from :class:`TransformOptions`:
``skip_errors`` decides whether a failed row ends the run, ``max_errors``
caps the number of collected errors, and ``validate_only`` runs everything
without keeping accepted rows. ``transform_data`` always returns a
:class:`TransformationResult`; it never raises.

Example:
    >>> engine = DataMappingEngine()
    >>> engine.register_transform("shout", lambda value, row, ctx: f"{value}!")
    >>> result = engine.transform_data(rows, create_user_mapping_schema("csv"), skip_errors=True)
    >>> result.metadata.transformed_records
"""

import threading
import time
from typing import Any, Dict, Iterable, Optional, Union

from loguru import logger

from datamapper.exceptions import DataMapperError
from datamapper.options import TransformOptions
from datamapper.registries import FunctionRegistry, create_registry, get_default_registry
from datamapper.results import TransformationError, TransformationResult
from datamapper.schema.compiler import CompiledSchema, compile_schema
from datamapper.schema.loader import load_mapping_schema
from datamapper.schema.models import DataMappingSchema
from .context import TransformContext
from .global_transforms import apply_global_transforms
from .row_transformer import transform_row
from .row_validator import validate_row

SchemaLike = Union[DataMappingSchema, CompiledSchema, Dict[str, Any]]
OptionsLike = Union[TransformOptions, Dict[str, Any], None]


class DataMappingEngine:
    """
    Applies mapping schemas to collections of source rows.

    Each engine holds its own function registry. Register custom functions
    before starting a run; registering while a run is in flight is undefined.

    Args:
        registry: Registry to resolve function names against. When omitted a
            fresh registry with the built-in functions is created.
    """

    def __init__(self, registry: Optional[FunctionRegistry] = None):
        self.registry = registry if registry is not None else create_registry()

    def __repr__(self) -> str:
        return f"DataMappingEngine(registry={self.registry!r})"

    def register_transform(self, name: str, fn) -> None:
        self.registry.register_transform(name, fn)

    def register_condition(self, name: str, fn) -> None:
        self.registry.register_condition(name, fn)

    def register_validation(self, name: str, fn) -> None:
        self.registry.register_validation(name, fn)

    def compile_schema(self, schema: SchemaLike, strict: bool = False) -> CompiledSchema:
        """
        Load (if needed) and compile ``schema`` against this engine's registry.

        Raises:
            SchemaError: If ``schema`` is a dict that does not validate
            UnknownFunctionError: With ``strict=True``, for the first unregistered name
        """
        if not isinstance(schema, CompiledSchema):
            schema = load_mapping_schema(schema)
        return compile_schema(schema, self.registry, strict=strict)

    def transform_data(
        self,
        source_rows: Iterable[Dict[str, Any]],
        schema: SchemaLike,
        options: OptionsLike = None,
        **overrides: Any
    ) -> TransformationResult:
        """
        Convert ``source_rows`` according to ``schema``.

        Args:
            source_rows: Generic records, already parsed by a reader
            schema: Mapping schema, compiled schema, or schema document dict
            options: TransformOptions or a dict of them (camelCase or snake_case)
            **overrides: Individual options, e.g. ``skip_errors=True``

        Returns:
            TransformationResult with accepted records, errors, warnings and counters
        """
        start_time = time.perf_counter()
        result = TransformationResult()

        try:
            rows = list(source_rows) if source_rows is not None else []
            result.metadata.total_records = len(rows)
            run_options = TransformOptions.coerce(options, **overrides)
            compiled = self.compile_schema(schema)
        except Exception as e:
            logger.error(f"Cannot start transformation run: {e}")
            self._fail_run(result, f"Invalid transformation setup: {e}")
            return self._finalize(result, start_time)

        if not rows:
            logger.debug(f"Schema '{compiled.id}': no input rows")
            return self._finalize(result, start_time)

        logger.info(
            f"Transforming {len(rows)} rows with schema '{compiled.id}' "
            f"(skip_errors={run_options.skip_errors}, max_errors={run_options.max_errors}, "
            f"validate_only={run_options.validate_only})"
        )

        run_metadata: Dict[str, Any] = {}
        try:
            working = apply_global_transforms(
                rows, compiled.global_transforms, self.registry, run_metadata
            )
        except Exception as e:
            logger.error(f"Global transforms failed for schema '{compiled.id}': {e}")
            self._fail_run(result, f"Global transform failed: {e}")
            return self._finalize(result, start_time)

        try:
            self._process_rows(working, compiled, run_options, run_metadata, result)
        except Exception as e:
            logger.exception(f"Unexpected failure while transforming with schema '{compiled.id}'")
            self._fail_run(result, f"Unexpected transformation failure: {e}")

        self._finalize(result, start_time)
        logger.info(
            f"Schema '{compiled.id}' run finished: success={result.success}, "
            f"processed={result.metadata.processed_records}, "
            f"transformed={result.metadata.transformed_records}, "
            f"skipped={result.metadata.skipped_records}, "
            f"errors={len(result.errors)}, warnings={len(result.warnings)}, "
            f"duration={result.metadata.duration_ms:.1f}ms"
        )
        return result

    def _process_rows(
        self,
        working: list,
        compiled: CompiledSchema,
        run_options: TransformOptions,
        run_metadata: Dict[str, Any],
        result: TransformationResult,
    ) -> None:
        field_mappings = list(compiled.schema.fields)
        counters = result.metadata

        for row_index, row in enumerate(working):
            context = TransformContext(
                source_data=working,
                current_row=row,
                row_index=row_index,
                field_mappings=field_mappings,
                metadata=run_metadata,
            )
            counters.processed_records += 1

            try:
                record = transform_row(row, compiled.fields, self.registry, context)
            except Exception as e:
                logger.debug(f"Row {context.row_number} failed: {e}")
                result.errors.append(self._row_error(e, row, context))
                counters.skipped_records += 1
                if not run_options.skip_errors:
                    logger.info(f"Stopping at row {context.row_number}: skip_errors is off")
                    result.success = False
                    return
                if self._error_cap_reached(result, run_options):
                    return
                continue

            errors, warnings = validate_row(record, compiled.validation, self.registry, context)
            result.errors.extend(errors)
            result.warnings.extend(warnings)

            if errors:
                counters.skipped_records += 1
            else:
                counters.valid_records += 1
                if not run_options.validate_only:
                    result.data.append(record)
                    counters.transformed_records += 1

            if self._error_cap_reached(result, run_options):
                return

    @staticmethod
    def _row_error(error: Exception, row: Dict[str, Any], context: TransformContext) -> TransformationError:
        field = getattr(error, 'field', None)
        if field is None and isinstance(error, DataMapperError):
            field = error.context.get('field')
        return TransformationError(
            row=context.row_number,
            field=field,
            message=str(error) or error.__class__.__name__,
            raw_value=row,
            transformed_value=getattr(error, 'transformed_value', None),
        )

    @staticmethod
    def _error_cap_reached(result: TransformationResult, run_options: TransformOptions) -> bool:
        if len(result.errors) < run_options.max_errors:
            return False
        logger.warning(f"Stopping run: reached max_errors={run_options.max_errors}")
        result.success = False
        return True

    @staticmethod
    def _fail_run(result: TransformationResult, message: str) -> None:
        result.errors.append(TransformationError(row=0, message=message))
        result.success = False

    @staticmethod
    def _finalize(result: TransformationResult, start_time: float) -> TransformationResult:
        result.success = result.success and not result.errors
        result.metadata.duration_ms = (time.perf_counter() - start_time) * 1000
        return result


_default_engine: Optional[DataMappingEngine] = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> DataMappingEngine:
    """Engine bound to the process-wide default registry."""
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None or _default_engine.registry is not get_default_registry():
            _default_engine = DataMappingEngine(get_default_registry())
        return _default_engine


def transform_data(
    source_rows: Iterable[Dict[str, Any]],
    schema: SchemaLike,
    options: OptionsLike = None,
    **overrides: Any
) -> TransformationResult:
    """Run :meth:`DataMappingEngine.transform_data` on the default engine."""
    return get_default_engine().transform_data(source_rows, schema, options, **overrides)


def register_transform(name: str, fn) -> None:
    """Register a transform in the default registry, replacing any previous one."""
    get_default_registry().register_transform(name, fn)


def register_condition(name: str, fn) -> None:
    """Register a condition in the default registry, replacing any previous one."""
    get_default_registry().register_condition(name, fn)


def register_validation(name: str, fn) -> None:
    """Register a validation in the default registry, replacing any previous one."""
    get_default_registry().register_validation(name, fn)
