"""
Structured error types for openlib-spine.

Every failure the import pipeline can raise is a ``SpineError`` carrying a
category, structured context and an optional chained cause, so
that the CLI and the logs can report *where* an import broke (path, line
number, batch) without string-parsing messages.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure kind the pipeline knows
    - **Rich Context:** Errors carry metadata for logging
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                         SpineError                            │
        │              (category, context, cause)                       │
        ├──────────────────────────────────────────────────────────────┤
        │  SourceError         ValidationError       PipelineError      │
        │  (SOURCE)            (VALIDATION)          (PIPELINE)         │
        │     │                    │                     │              │
        │  SourceNotFoundError  FormatError          SubmissionError    │
        │  ParseError (PARSE)                                           │
        │                                                               │
        │  StorageError        ConfigError                              │
        │  (STORAGE)           (CONFIG)                                 │
        └──────────────────────────────────────────────────────────────┘

    The three error kinds of the import workflow map onto this tree:

    - I/O error   -> ``SourceError`` / ``SourceNotFoundError`` (fatal)
    - bad line    -> ``ParseError``
    - bad value   -> ``FormatError`` (timestamp or identifier layout)

Examples:
    >>> error = FormatError("Unrecognized timestamp", field="last_modified", value="2008")
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.with_context(line_number=12).context.line_number
    12

Tags:
    error-handling, exception-hierarchy, error-context, openlib-spine
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    SOURCE = "SOURCE"             # File missing, unreadable
    PARSE = "PARSE"               # Malformed line or payload
    VALIDATION = "VALIDATION"     # Value in an unknown format
    STORAGE = "STORAGE"           # Record store failures
    CONFIG = "CONFIG"             # Invalid settings
    PIPELINE = "PIPELINE"         # Import run failures
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured context attached to an error.

    Attributes:
        pipeline: Name of the pipeline being run
        run_id: Run identifier
        path: Input file being read
        line_number: 1-based line number in the input file
        batch_id: Submission batch identifier
        metadata: Additional key-value pairs
    """

    pipeline: str | None = None
    run_id: str | None = None
    path: str | None = None
    line_number: int | None = None
    batch_id: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["pipeline", "run_id", "path", "line_number", "batch_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SpineError(Exception):
    """
    Base exception for all openlib-spine errors.

    Subclasses set ``default_category`` to give a sensible default for their
    domain.

    Examples:
        >>> error = SpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> try:
        ...     raise OSError("disk gone")
        ... except OSError as e:
        ...     error = SpineError("Read failed", cause=e)
        >>> error.cause
        OSError('disk gone')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ParseError("Bad line").with_context(path="authors.txt", line_number=7)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceError(SpineError):
    """
    Error reading the input file.

    An unreadable dump aborts the run.
    """

    default_category = ErrorCategory.SOURCE


class SourceNotFoundError(SourceError):
    """Input file does not exist."""

    pass


class ParseError(SourceError):
    """A line could not be split into fields or its payload decoded."""

    default_category = ErrorCategory.PARSE


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(SpineError):
    """
    Data validation error.

    The data must be fixed; rerunning the same line fails the same way.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        return result


class FormatError(ValidationError):
    """A value did not match any known layout (timestamp, identifier, revision)."""

    pass


# =============================================================================
# CONFIG / STORAGE / PIPELINE ERRORS
# =============================================================================


class ConfigError(SpineError):
    """Invalid configuration."""

    default_category = ErrorCategory.CONFIG


class StorageError(SpineError):
    """Record store failure (schema, transaction, query)."""

    default_category = ErrorCategory.STORAGE


class PipelineError(SpineError):
    """Import run failure."""

    default_category = ErrorCategory.PIPELINE


class SubmissionError(PipelineError):
    """
    One or more batches were not acknowledged by the record store.

    ``report`` holds the submission report as it stood when the run stopped,
    so callers can tell how much was written before the failure.
    """

    def __init__(self, message: str, *, report: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.report = report


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SpineError",
    "SourceError",
    "SourceNotFoundError",
    "ParseError",
    "ValidationError",
    "FormatError",
    "ConfigError",
    "StorageError",
    "PipelineError",
    "SubmissionError",
]
