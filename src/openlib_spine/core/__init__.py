"""Core primitives: errors, logging, settings, protocols, timestamps."""

from openlib_spine.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    FormatError,
    ParseError,
    PipelineError,
    SourceError,
    SourceNotFoundError,
    SpineError,
    StorageError,
    SubmissionError,
    ValidationError,
)
from openlib_spine.core.logging import LogContext, configure_logging, get_logger
from openlib_spine.core.protocols import RecordStore
from openlib_spine.core.settings import ErrorPolicy, ImportSettings, load_settings

__all__ = [
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "FormatError",
    "ParseError",
    "PipelineError",
    "SourceError",
    "SourceNotFoundError",
    "SpineError",
    "StorageError",
    "SubmissionError",
    "ValidationError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "RecordStore",
    "ErrorPolicy",
    "ImportSettings",
    "load_settings",
]
