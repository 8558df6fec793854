"""Config module exports."""

from zgame_analyzers.config.loader import load_config
from zgame_analyzers.config.models import (
    AnalysisConfig,
    CatalogConfig,
    CatalogTypeConfig,
    LinqRuleConfig,
    LoggingConfig,
    NpoiRuleConfig,
    PathsConfig,
    RuleConfig,
    RulesConfig,
    UnityEditorRuleConfig,
    ZGameAnalyzersConfig,
)

__all__ = [
    "load_config",
    "AnalysisConfig",
    "CatalogConfig",
    "CatalogTypeConfig",
    "LinqRuleConfig",
    "LoggingConfig",
    "NpoiRuleConfig",
    "PathsConfig",
    "RuleConfig",
    "RulesConfig",
    "UnityEditorRuleConfig",
    "ZGameAnalyzersConfig",
]
