"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (ZGA__SECTION__KEY)
3. Project YAML (.zga/config.yaml)
4. Global YAML (~/.config/zga/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    ZGA__<SECTION>__<KEY>=<VALUE>

Examples:
    ZGA__LOGGING__LEVEL=DEBUG
    ZGA__ANALYSIS__MAX_WORKERS=4
    ZGA__RULES__LINQ__PER_FRAME_ONLY=false
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
SeverityName = Literal["error", "warning", "info", "hint"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        ZGA__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every analyzed file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class PathsConfig(BaseModel):
    """Path classification tokens.

    All tokens are compared against lower-cased path segments.
    """

    editor_folder: str = Field(
        default="editor",
        description="Segment name marking editor-only code (Unity 'Editor' folders).",
    )
    vendor_cache_folders: list[str] = Field(
        default_factory=lambda: ["packagecache", "packages"],
        description="Segments marking package caches and embedded packages.",
    )
    package_name_prefixes: list[str] = Field(
        default_factory=lambda: ["com."],
        description="Segment prefixes of UPM package directories (com.unity.foo@1.0).",
    )
    cache_root_pairs: list[tuple[str, str]] = Field(
        default_factory=lambda: [("library", "packagecache")],
        description="Adjacent segment pairs marking the Unity package cache.",
    )
    plugins_folder: str = Field(
        default="plugins",
        description="Segment name of third-party plugin folders.",
    )

    @field_validator("editor_folder", "plugins_folder")
    @classmethod
    def lower_token(cls, v: str) -> str:
        return v.lower()

    @field_validator("vendor_cache_folders", "package_name_prefixes")
    @classmethod
    def lower_tokens(cls, v: list[str]) -> list[str]:
        return [token.lower() for token in v]

    @field_validator("cache_root_pairs")
    @classmethod
    def lower_pairs(cls, v: list[tuple[str, str]]) -> list[tuple[str, str]]:
        return [(root.lower(), sub.lower()) for root, sub in v]


class RuleConfig(BaseModel):
    """Settings shared by every rule."""

    enabled: bool = True
    severity: SeverityName | None = Field(
        default=None,
        description="Override the rule's default severity.",
    )
    allow_keyword: str = Field(
        default="",
        description="Preprocessor symbol that suppresses the rule inside "
        "#if regions mentioning it or in files that #define it.",
    )
    forbidden_prefixes: list[str] = Field(default_factory=list)


class UnityEditorRuleConfig(RuleConfig):
    """ZG0001 settings."""

    allow_keyword: str = "UNITY_EDITOR"
    forbidden_prefixes: list[str] = Field(default_factory=lambda: ["UnityEditor"])
    editor_attributes: list[str] = Field(
        default_factory=lambda: ["MenuItem", "InitializeOnLoadMethod"],
        description="Attribute name substrings marking editor-only methods.",
    )


class NpoiRuleConfig(RuleConfig):
    """ZG0002 settings."""

    allow_keyword: str = "ALLOW_NPOI"
    forbidden_prefixes: list[str] = Field(default_factory=lambda: ["NPOI"])


class LinqRuleConfig(RuleConfig):
    """ZG_LINQ001 settings."""

    allow_keyword: str = "ALLOW_LINQ"
    forbidden_prefixes: list[str] = Field(default_factory=lambda: ["System.Linq"])
    per_frame_only: bool = Field(
        default=True,
        description="Report LINQ only inside per-frame methods. When false, every "
        "LINQ use (including using directives) in runtime folders is reported.",
    )
    restricted_names: list[str] = Field(
        default_factory=lambda: [
            "Update",
            "LateUpdate",
            "FixedUpdate",
            "OnGUI",
            "Tick",
            "LateTick",
            "FixedTick",
        ],
    )
    restricted_attributes: list[str] = Field(default_factory=lambda: ["PerFrame", "HotPath"])
    restricted_interfaces: list[str] = Field(
        default_factory=lambda: ["Tickable", "Updatable", "Updateable"],
    )
    sentinel_base_type: str = "UnityEngine.MonoBehaviour"


class RulesConfig(BaseModel):
    """Per-rule configuration."""

    unity_editor: UnityEditorRuleConfig = UnityEditorRuleConfig()
    npoi: NpoiRuleConfig = NpoiRuleConfig()
    linq: LinqRuleConfig = LinqRuleConfig()


class CatalogTypeConfig(BaseModel):
    """An external type known to the symbol resolver."""

    kind: Literal["class", "struct", "interface", "enum"] = "class"
    base_type: str | None = None
    interfaces: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    static_methods: list[str] = Field(default_factory=list)
    extension_methods: list[str] = Field(default_factory=list)


class CatalogConfig(BaseModel):
    """Extra external types merged over the built-in catalog."""

    types: dict[str, CatalogTypeConfig] = Field(default_factory=dict)

    @field_validator("types")
    @classmethod
    def validate_type_names(cls, v: dict[str, CatalogTypeConfig]) -> dict[str, CatalogTypeConfig]:
        for name in v:
            if not name or name.startswith(".") or name.endswith("."):
                raise ValueError(f"Catalog type name must be fully qualified: {name!r}")
        return v


class AnalysisConfig(BaseModel):
    """Analysis run configuration.

    Env vars:
        ZGA__ANALYSIS__MAX_FILE_SIZE_MB: Skip files larger than this
        ZGA__ANALYSIS__MAX_WORKERS: Concurrent per-file analyses
    """

    max_file_size_mb: int = Field(
        default=5,
        description="Skip .cs files larger than this (MB). Generated code can be huge.",
    )
    max_workers: int = Field(
        default=8,
        description="Maximum number of files analyzed concurrently.",
    )

    @field_validator("max_workers", "max_file_size_mb")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be >= 1, got {v}")
        return v


class ZGameAnalyzersConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
