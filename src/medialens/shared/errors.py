"""MediaLens Error Handling Module

This module defines the error handling system for MediaLens, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContextModel carries primitive-only details
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for MediaLens.

    This enum serves as the single source of truth for all error codes
    used throughout the engine.
    """

    # Catalog errors
    CATALOG_LOAD_FAILED = "CATALOG_LOAD_FAILED"
    CATALOG_PARSE_FAILED = "CATALOG_PARSE_FAILED"

    # Classification errors
    CLASSIFICATION_FAILED = "CLASSIFICATION_FAILED"
    RULE_EVALUATION_FAILED = "RULE_EVALUATION_FAILED"
    GROUP_SLOT_CLEARED = "GROUP_SLOT_CLEARED"

    # Input validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContextModel:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so the context can always be serialized into a
    structured log record.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization coercion of additional_data."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as dict, always including additional_data.

        Returns:
            Dictionary with the non-empty context fields.

        Example:
            >>> ErrorContextModel(file_path="/test").safe_dict()
            {'file_path': '/test', 'additional_data': {}}
        """
        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation
        data["additional_data"] = dict(self.additional_data or {})
        return data


ErrorContext = ErrorContextModel


class MediaLensError(Exception):
    """Base exception class for all MediaLens errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize MediaLensError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(MediaLensError):
    """Domain-specific errors.

    Raised when matching or classification invariants are violated.

    Examples:
    - Assigning a value to a Group slot that was explicitly cleared
    - A rule predicate that cannot be evaluated
    """


class ClassificationError(DomainError):
    """A single file could not be classified.

    The batch grouper catches this per file, logs it and omits the file
    from the result. It never crosses into another file's classification.
    """


class InfrastructureError(MediaLensError):
    """Infrastructure-related errors.

    Raised when interacting with external resources such as catalog
    snapshot files or collaborator services.
    """


class DataProcessingError(MediaLensError):
    """Data processing errors.

    Raised when a catalog record or other input cannot be interpreted.
    """


class ApplicationError(MediaLensError):
    """Application-level errors such as invalid configuration."""


def create_catalog_load_error(
    message: str,
    file_path: str | None = None,
    kind: str | None = None,
    original_error: Exception | None = None,
) -> InfrastructureError:
    """Create a catalog load error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"kind": kind} if kind else None
    )
    context = ErrorContext(
        file_path=file_path,
        operation="load_catalog",
        additional_data=additional_data,
    )
    return InfrastructureError(
        ErrorCode.CATALOG_LOAD_FAILED,
        message,
        context,
        original_error,
    )


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    value: PrimitiveContextValue | None = None,
    original_error: Exception | None = None,
) -> DataProcessingError:
    """Create an input validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] = {}
    if field:
        additional_data["field"] = field
    if value is not None:
        additional_data["value"] = value
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data or None,
    )
    return DataProcessingError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_classification_error(
    message: str,
    file_path: str | None = None,
    rule: str | None = None,
    original_error: Exception | None = None,
) -> ClassificationError:
    """Create a classification error with context.

    Args:
        message: Error message
        file_path: File whose classification was aborted
        rule: Name of the rule that failed, if any
        original_error: Underlying exception

    Returns:
        ClassificationError instance
    """
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"rule": rule} if rule else None
    )
    context = ErrorContext(
        file_path=file_path,
        operation="classify",
        additional_data=additional_data,
    )
    code = ErrorCode.RULE_EVALUATION_FAILED if rule else ErrorCode.CLASSIFICATION_FAILED
    return ClassificationError(code, message, context, original_error)


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )
