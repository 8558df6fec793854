"""Analysis models - rule descriptors, diagnostics and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal


class Severity(Enum):
    """Diagnostic severity level."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"


class RuleCategory(Enum):
    """Category of analysis rule."""

    USAGE = "usage"
    PERFORMANCE = "performance"


@dataclass(frozen=True)
class RuleDescriptor:
    """Stable identity of a rule."""

    rule_id: str  # "ZG0001"
    title: str
    message_format: str  # str.format() template
    category: RuleCategory
    severity: Severity = Severity.ERROR
    description: str = ""

    def format_message(self, **kwargs: Any) -> str:
        return self.message_format.format(**kwargs)


@dataclass(frozen=True)
class Diagnostic:
    """A single finding. Positions are byte offsets; line is 1-based, column 0-based."""

    rule_id: str
    message: str
    path: str
    start_byte: int
    end_byte: int
    line: int
    column: int
    end_line: int
    end_column: int
    severity: Severity = Severity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "message": self.message,
            "path": self.path,
            "start_byte": self.start_byte,
            "end_byte": self.end_byte,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
            "severity": self.severity.value,
        }


@dataclass
class FileResult:
    """Result of analyzing a single file."""

    path: str
    status: Literal["analyzed", "skipped", "error", "cancelled"]
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error_detail: str | None = None

    @property
    def cancelled(self) -> bool:
        return self.status == "cancelled"


@dataclass
class AnalysisResult:
    """Aggregated result of an analysis run."""

    files: list[FileResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for f in self.files for d in f.diagnostics]

    @property
    def total_diagnostics(self) -> int:
        return sum(len(f.diagnostics) for f in self.files)

    @property
    def files_analyzed(self) -> int:
        return sum(1 for f in self.files if f.status == "analyzed")

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def status(self) -> Literal["clean", "dirty", "error"]:
        if any(f.status == "error" for f in self.files):
            return "error"
        if self.total_diagnostics:
            return "dirty"
        return "clean"
