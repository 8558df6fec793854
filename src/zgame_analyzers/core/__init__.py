"""Core module exports."""

from zgame_analyzers.core.errors import (
    AnalysisError,
    ConfigError,
    ErrorCode,
    FixError,
    InternalError,
    ZGameAnalyzersError,
)
from zgame_analyzers.core.logging import configure_logging, get_logger, get_run_id, run_context
from zgame_analyzers.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "AnalysisError",
    "ConfigError",
    "ErrorCode",
    "FixError",
    "InternalError",
    "ZGameAnalyzersError",
    # Logging
    "configure_logging",
    "get_logger",
    "get_run_id",
    "run_context",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
