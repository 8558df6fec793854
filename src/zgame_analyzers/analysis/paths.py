"""Path classification - editor folders and vendor/package directories."""

from __future__ import annotations

from dataclasses import dataclass

from zgame_analyzers.config.models import PathsConfig


@dataclass(frozen=True)
class PathClassification:
    """Editor and excluded flags are independent; a path can be both."""

    is_editor_path: bool
    is_excluded_path: bool

    @property
    def suppressed(self) -> bool:
        return self.is_editor_path or self.is_excluded_path


def path_segments(path: str) -> list[str]:
    """Separator-unified, case-folded, non-empty segments of ``path``."""
    return [s for s in path.replace("\\", "/").lower().split("/") if s]


def classify_path(path: str, config: PathsConfig | None = None) -> PathClassification:
    """Classify a file path against the configured folder tokens.

    Examples (default tokens)::

        Assets/Scripts/Editor/Foo.cs                -> editor
        Library/PackageCache/com.unity.foo@1/X.cs   -> excluded
        Assets/Plugins/Bar.cs                       -> excluded
    """
    config = config or PathsConfig()
    segments = path_segments(path)

    is_editor = config.editor_folder in segments

    vendor = set(config.vendor_cache_folders)
    is_excluded = any(
        s in vendor
        or s == config.plugins_folder
        or any(s.startswith(prefix) for prefix in config.package_name_prefixes)
        for s in segments
    )
    if not is_excluded:
        pairs = set(config.cache_root_pairs)
        is_excluded = any(pair in pairs for pair in zip(segments, segments[1:], strict=False))

    return PathClassification(is_editor_path=is_editor, is_excluded_path=is_excluded)
