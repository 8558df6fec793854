"""zgame-analyzers error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Analysis
- 5xxx: Fix
- 9xxx: Internal

Only the ambient layers (config loading, file IO, CLI) raise these. The
analysis core itself never raises for malformed input: unresolvable symbols,
unbalanced directives, stale fix targets and calls outside any method all
resolve to a conservative boolean or a no-op.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Analysis (3xxx)
    ANALYSIS_PARSE_FAILED = 3001
    ANALYSIS_UNSUPPORTED_FILE = 3002
    ANALYSIS_UNKNOWN_RULE = 3003

    # Fix (5xxx)
    FIX_WRITE_FAILED = 5001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class ZGameAnalyzersError(Exception):
    """Base error with structured context for JSON output."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ZGameAnalyzersError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class AnalysisError(ZGameAnalyzersError):
    """Errors raised while preparing files for analysis."""

    @classmethod
    def parse_failed(cls, path: str, reason: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_PARSE_FAILED,
            message=f"Failed to parse {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unsupported_file(cls, path: str) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_UNSUPPORTED_FILE,
            message=f"Not a C# source file: {path}",
            details={"path": path},
        )

    @classmethod
    def unknown_rule(cls, rule_id: str, available: list[str]) -> "AnalysisError":
        return cls(
            code=ErrorCode.ANALYSIS_UNKNOWN_RULE,
            message=f"Unknown rule: {rule_id}. Available rules: {', '.join(available)}",
            details={"rule_id": rule_id, "available": available},
        )


class FixError(ZGameAnalyzersError):
    """Errors raised while writing fixed documents back to disk."""

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "FixError":
        return cls(
            code=ErrorCode.FIX_WRITE_FAILED,
            message=f"Failed to write {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(ZGameAnalyzersError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
