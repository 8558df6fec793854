"""Analysis module - rules, call-site classification and the analysis driver."""

# Import definitions to register all rules
from zgame_analyzers.analysis import definitions as _definitions  # noqa: F401
from zgame_analyzers.analysis.classifier import (
    CallSiteContext,
    classify,
    is_forbidden_library_call,
    is_in_restricted_method_context,
)
from zgame_analyzers.analysis.models import (
    AnalysisResult,
    Diagnostic,
    FileResult,
    RuleCategory,
    RuleDescriptor,
    Severity,
)
from zgame_analyzers.analysis.ops import AnalyzerOps
from zgame_analyzers.analysis.paths import PathClassification, classify_path
from zgame_analyzers.analysis.rules import AnalysisContext, Rule, RuleRegistry, analyze_tree, registry

__all__ = [
    "AnalysisContext",
    "AnalysisResult",
    "AnalyzerOps",
    "CallSiteContext",
    "Diagnostic",
    "FileResult",
    "PathClassification",
    "Rule",
    "RuleCategory",
    "RuleDescriptor",
    "RuleRegistry",
    "Severity",
    "analyze_tree",
    "classify",
    "classify_path",
    "is_forbidden_library_call",
    "is_in_restricted_method_context",
    "registry",
]
