"""
DataMapper Exception Hierarchy

This module provides the domain-specific exception hierarchy for datamapper.
Every exception carries an error code for programmatic handling and a context
dictionary that is preserved as the error travels up the pipeline.

The hierarchy follows the stages of a mapping run:
- DataMapperError: Base exception for all datamapper-specific errors
- SchemaError: Schema loading, parsing and construction failures
- RegistryError: Function registration failures
- UnknownFunctionError: A schema references a function name nobody registered
- TransformError: Collection-level transformation failures
- RowTransformError: A row could not be converted (row fatal)
- FieldValidationError: A required field failed its value check (row fatal)

Usage Examples:
    Error code checking:
    >>> try:
    ...     load_mapping_schema("users.yaml")
    ... except SchemaError as e:
    ...     if e.error_code == "SCHEMA_001":
    ...         logger.warning("Schema file missing, falling back to defaults")

    Context preservation:
    >>> raise TransformError("Sort failed").with_context({"field": "name"})
"""

import sys
from typing import Any, Dict, Optional


class DataMapperError(Exception):
    """
    Base exception class for all datamapper-specific errors.

    Attributes:
        error_code (str): Unique identifier for programmatic error handling
        context (Dict[str, Any]): Additional context information for debugging

    Error Codes:
        MAPPER_001: Generic datamapper error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "MAPPER_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Initialize the DataMapperError with message, error code, and context.

        Args:
            message: Human-readable error description
            error_code: Unique identifier for programmatic error handling
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = dict(context or {})

        if hasattr(sys, '_getframe'):
            frame = sys._getframe(1)
            if frame:
                self.context.setdefault('source_function', frame.f_code.co_name)

    def with_context(self, context: Dict[str, Any]) -> 'DataMapperError':
        """
        Add additional context to the exception and return self for chaining.

        Args:
            context: Dictionary of context information to add

        Returns:
            Self for method chaining
        """
        self.context.update(context)
        return self

    def __str__(self) -> str:
        # Row-level reports surface str(exc); keep it to the message itself.
        return self.message

    def describe(self) -> str:
        """Return the message together with error code and context details."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [Error Code: {self.error_code}, Context: {context_str}]"
        return f"{self.message} [Error Code: {self.error_code}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )


class SchemaError(DataMapperError):
    """
    Mapping schema loading and construction errors.

    Error Codes:
        SCHEMA_001: Schema file not found
        SCHEMA_002: Schema file could not be parsed
        SCHEMA_003: Schema model validation failed
        SCHEMA_004: No schema factory for the requested source/target pair
        SCHEMA_005: Malformed function reference
    """

    def __init__(
        self,
        message: str,
        error_code: str = "SCHEMA_003",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)

        # schema_path is stored as text
        if 'schema_path' in self.context:
            self.context['schema_path'] = str(self.context['schema_path'])


class RegistryError(DataMapperError):
    """
    Function registration errors.

    Error Codes:
        REGISTRY_001: Function registration failed
        REGISTRY_002: Function not found
    """

    def __init__(
        self,
        message: str,
        error_code: str = "REGISTRY_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class UnknownFunctionError(RegistryError):
    """
    Raised when a schema references a function name that is not registered.

    This is a configuration error. The engine treats it as fatal to the row
    being processed, even inside an optional field mapping.
    """

    def __init__(self, name: str, kind: str) -> None:
        super().__init__(
            f"Unknown {kind} function: {name}",
            error_code="REGISTRY_002",
            context={'function_name': name, 'function_kind': kind}
        )
        self.name = name
        self.kind = kind


class TransformError(DataMapperError):
    """
    Data transformation errors.

    Error Codes:
        TRANSFORM_001: Transformation failed
        TRANSFORM_002: Required field failed its value check
        TRANSFORM_004: Required field transformation failed
        TRANSFORM_007: Incomparable values in collection sort
    """

    def __init__(
        self,
        message: str,
        error_code: str = "TRANSFORM_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


class RowTransformError(TransformError):
    """
    A row could not be converted; the partially built record is discarded.

    Attributes:
        field: Target path of the mapping that failed
        raw_value: Value extracted from the source row
        transformed_value: Value the pipeline produced before failing, if any
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        raw_value: Any = None,
        transformed_value: Any = None,
        error_code: str = "TRANSFORM_004",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)
        self.field = field
        self.raw_value = raw_value
        self.transformed_value = transformed_value
        if field is not None:
            self.context.setdefault('field', field)


class FieldValidationError(RowTransformError):
    """A required field mapping failed its value check."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        raw_value: Any = None,
        transformed_value: Any = None,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message,
            field=field,
            raw_value=raw_value,
            transformed_value=transformed_value,
            error_code="TRANSFORM_002",
            context=context,
        )


class LoggingConfigError(DataMapperError):
    """Raised when logging configuration fails validation or setup."""

    def __init__(
        self,
        message: str,
        error_code: str = "LOGGING_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)


def log_and_raise(
    exception: DataMapperError,
    logger: Optional[Any] = None,
    level: str = "error"
) -> None:
    """
    Log an exception with context and then raise it.

    Args:
        exception: The exception to log and raise
        logger: Logger instance to use (optional)
        level: Log level ("error", "warning", "critical")

    Raises:
        The provided exception after logging
    """
    if logger is not None:
        log_method = getattr(logger, level, logger.error)
        log_method(f"{exception.__class__.__name__}: {exception.describe()}")

    raise exception


__all__ = [
    'DataMapperError',
    'SchemaError',
    'RegistryError',
    'UnknownFunctionError',
    'TransformError',
    'RowTransformError',
    'FieldValidationError',
    'LoggingConfigError',
    'log_and_raise',
]
