"""
datamapper - Declarative mapping of external records into validated internal records.

A mapping schema lists ordered field mappings (source path, target path,
transform pipeline, default, value check, condition), collection-level global
transforms and row-level validation rules. The engine applies a schema to a
list of generic rows and reports accepted records, errors and warnings.

The package logs through loguru and is silent by default, as a library
should be. Call :func:`initialize_logging` (or one of the ``configure_*``
helpers) to turn its log output on.
"""

__version__ = "0.1.0"

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from loguru import logger

from datamapper.core.utils import get_env_str
from datamapper.exceptions import LoggingConfigError

ENV_LOG_LEVEL = "DATAMAPPER_LOG_LEVEL"
ENV_LOG_DIR = "DATAMAPPER_LOG_DIR"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


# --- Logger Configuration ---

@dataclass
class LoggerState:
    """Sinks this package added, so :func:`reset_logging` removes only its own."""

    initialized: bool = False
    test_mode: bool = False
    sink_ids: List[int] = field(default_factory=list)

    def is_initialized(self) -> bool:
        return self.initialized

    def is_test_mode(self) -> bool:
        return self.test_mode

    def reset(self) -> None:
        self.initialized = False
        self.test_mode = False
        self.sink_ids.clear()


_logger_state = LoggerState()


def validate_log_level(level: str) -> str:
    """Upper-cased loguru level name; raises LoggingConfigError for unknown names."""
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise LoggingConfigError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(LOG_LEVELS)}",
            context={'level': level}
        )
    return name


def _add_sink(sink: Any, level: str, kind: str, **options: Any) -> int:
    validated = validate_log_level(level)
    try:
        sink_id = logger.add(sink, level=validated, **options)
    except Exception as e:
        raise LoggingConfigError(
            f"Failed to configure {kind} logging: {e}",
            context={'sink': str(sink)}
        ) from e
    logger.enable("datamapper")
    _logger_state.sink_ids.append(sink_id)
    return sink_id


def configure_console_logging(
    level: str = "INFO",
    format_template: Optional[str] = None,
    colorize: bool = True,
    destination: TextIO = sys.stderr
) -> int:
    """
    Add a console sink and enable this package's log output.

    Returns:
        The loguru sink id

    Raises:
        LoggingConfigError: If the level is unknown or the sink cannot be added
    """
    return _add_sink(
        destination, level, "console",
        format=format_template or CONSOLE_FORMAT,
        colorize=colorize,
    )


def configure_file_logging(
    log_file_path: Union[str, Path],
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "14 days",
    compression: str = "zip",
    format_template: Optional[str] = None,
) -> int:
    """
    Add a rotating file sink and enable this package's log output.

    Args:
        log_file_path: File path; may contain loguru time tokens such as
            ``{time:YYYYMMDD}``. Parent directories are created.
        level: Minimum level written to the file
        rotation: When to start a new file
        retention: How long rotated files are kept
        compression: Format rotated files are compressed to

    Returns:
        The loguru sink id

    Raises:
        LoggingConfigError: If the level is unknown or the sink cannot be added
    """
    path = Path(log_file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LoggingConfigError(
            f"Cannot create log directory {path.parent}: {e}",
            context={'log_file_path': str(path)}
        ) from e
    return _add_sink(
        str(path), level, "file",
        format=format_template or FILE_FORMAT,
        rotation=rotation,
        retention=retention,
        compression=compression,
        encoding="utf-8",
    )


def configure_test_logging(
    console_level: str = "DEBUG",
    console_destination: Optional[TextIO] = None,
) -> Dict[str, int]:
    """Replace any package sinks with one uncolored console sink for test runs."""
    reset_logging()
    sink_ids = {
        'console': configure_console_logging(
            level=console_level,
            destination=console_destination or sys.stderr,
            colorize=False,
        )
    }
    _logger_state.initialized = True
    _logger_state.test_mode = True
    return sink_ids


def reset_logging() -> None:
    """Remove the sinks this package added and silence it again."""
    for sink_id in _logger_state.sink_ids:
        try:
            logger.remove(sink_id)
        except ValueError:
            # Already removed elsewhere
            pass
    logger.disable("datamapper")
    _logger_state.reset()


def initialize_logging(
    console_level: Optional[str] = None,
    file_level: str = "DEBUG",
    log_dir: Optional[Union[str, Path]] = None,
) -> Dict[str, int]:
    """
    Turn on application logging: console, plus a daily file when a log directory is known.

    ``console_level`` defaults to ``DATAMAPPER_LOG_LEVEL`` (else INFO) and
    ``log_dir`` to ``DATAMAPPER_LOG_DIR``; without a log directory no file
    sink is added.

    Returns:
        Sink ids keyed by ``'console'`` and, if added, ``'file'``

    Raises:
        LoggingConfigError: If a sink cannot be configured
    """
    reset_logging()

    console_level = console_level or get_env_str(ENV_LOG_LEVEL, "INFO")
    log_dir = log_dir or get_env_str(ENV_LOG_DIR)

    sink_ids = {'console': configure_console_logging(level=console_level)}
    if log_dir:
        sink_ids['file'] = configure_file_logging(
            Path(log_dir) / "datamapper_{time:YYYYMMDD}.log",
            level=file_level,
        )

    _logger_state.initialized = True
    logger.info("--- datamapper logging initialized ---")
    return sink_ids


def get_logger_state() -> LoggerState:
    return _logger_state


def is_logging_initialized() -> bool:
    return _logger_state.initialized


# Library default: silent until the application opts in
logger.disable("datamapper")

# --- End Logger Configuration ---


from datamapper.exceptions import (  # noqa: E402
    DataMapperError,
    FieldValidationError,
    RegistryError,
    RowTransformError,
    SchemaError,
    TransformError,
    UnknownFunctionError,
)
from datamapper.options import TransformOptions  # noqa: E402
from datamapper.pipeline import (  # noqa: E402
    DataMappingEngine,
    TransformContext,
    register_condition,
    register_transform,
    register_validation,
    transform_data,
)
from datamapper.registries import (  # noqa: E402
    FunctionKind,
    FunctionRegistry,
    create_registry,
    get_default_registry,
)
from datamapper.results import (  # noqa: E402
    ResultMetadata,
    TransformationError,
    TransformationResult,
    TransformationWarning,
)
from datamapper.schema import (  # noqa: E402
    DataMappingSchema,
    FieldMapping,
    GlobalTransform,
    ValidationRule,
    compile_schema,
    create_default_mapping_schema,
    create_field_mapping_schema,
    create_reservation_mapping_schema,
    create_team_mapping_schema,
    create_user_mapping_schema,
    load_mapping_schema,
)

__all__ = [
    '__version__',
    # Logging
    'configure_console_logging',
    'configure_file_logging',
    'configure_test_logging',
    'initialize_logging',
    'reset_logging',
    # Engine
    'DataMappingEngine',
    'TransformContext',
    'TransformOptions',
    'transform_data',
    'register_transform',
    'register_condition',
    'register_validation',
    # Registry
    'FunctionKind',
    'FunctionRegistry',
    'create_registry',
    'get_default_registry',
    # Schema
    'DataMappingSchema',
    'FieldMapping',
    'GlobalTransform',
    'ValidationRule',
    'compile_schema',
    'load_mapping_schema',
    'create_default_mapping_schema',
    'create_field_mapping_schema',
    'create_reservation_mapping_schema',
    'create_team_mapping_schema',
    'create_user_mapping_schema',
    # Results
    'ResultMetadata',
    'TransformationError',
    'TransformationResult',
    'TransformationWarning',
    # Exceptions
    'DataMapperError',
    'FieldValidationError',
    'RegistryError',
    'RowTransformError',
    'SchemaError',
    'TransformError',
    'UnknownFunctionError',
]
