"""Tests for path classification."""

from __future__ import annotations

import pytest

from zgame_analyzers.analysis.paths import classify_path, path_segments
from zgame_analyzers.config.models import PathsConfig


class TestPathSegments:
    """Tests for path_segments."""

    def test_unifies_separators_and_case(self) -> None:
        assert path_segments("Assets\\Scripts/Editor//Foo.cs") == ["assets", "scripts", "editor", "foo.cs"]


class TestClassifyPath:
    """Tests for classify_path."""

    @pytest.mark.parametrize(
        ("path", "is_editor", "is_excluded"),
        [
            ("Assets/Scripts/Player.cs", False, False),
            ("Assets/Scripts/Editor/PlayerInspector.cs", True, False),
            ("Assets\\Tools\\EDITOR\\Menu.cs", True, False),
            ("Assets/Scripts/EditorUtils/Helpers.cs", False, False),
            ("Assets/Plugins/Analytics/Tracker.cs", False, True),
            ("Packages/com.studio.tools/Runtime/Tool.cs", False, True),
            ("Library/PackageCache/com.unity.ugui@1.0.0/Runtime/Button.cs", False, True),
            ("Assets/Plugins/Vendor/Editor/Window.cs", True, True),
            ("Assets/Scripts/com.game.net/Client.cs", False, True),
            ("Assets/Scripts/Compiler.cs", False, False),
        ],
    )
    def test_default_tokens(self, path: str, is_editor: bool, is_excluded: bool) -> None:
        # When
        result = classify_path(path)

        # Then
        assert result.is_editor_path is is_editor
        assert result.is_excluded_path is is_excluded
        assert result.suppressed is (is_editor or is_excluded)

    def test_adjacent_pair_only_when_adjacent(self) -> None:
        config = PathsConfig(vendor_cache_folders=[], package_name_prefixes=[])
        assert classify_path("Library/PackageCache/X.cs", config).is_excluded_path is True
        assert classify_path("Library/Other/PackageCache2/X.cs", config).is_excluded_path is False

    def test_custom_editor_folder(self) -> None:
        config = PathsConfig(editor_folder="EditorOnly")
        assert classify_path("Assets/EditorOnly/Tool.cs", config).is_editor_path is True
        assert classify_path("Assets/Editor/Tool.cs", config).is_editor_path is False
