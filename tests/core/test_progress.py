"""Tests for core/progress.py module."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from zgame_analyzers.core import progress
from zgame_analyzers.core.progress import is_console_suppressed, pluralize, spinner, status


class TestStatus:
    """Tests for status function."""

    def test_prints_message_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("3 diagnostics in 2 files", style="error")
        captured = capsys.readouterr()
        assert "✗ 3 diagnostics in 2 files" in captured.err
        assert captured.out == ""

    def test_success_marker(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("Applied 1 fix", style="success")
        assert "✓ Applied 1 fix" in capsys.readouterr().err

    def test_indent_without_marker(self, capsys: pytest.CaptureFixture[str]) -> None:
        status("Assets/Scripts/Player.cs", style="none", indent=2)
        assert "  Assets/Scripts/Player.cs" in capsys.readouterr().err


class TestPluralize:
    """Tests for pluralize function."""

    @pytest.mark.parametrize(
        ("count", "singular", "plural", "expected"),
        [
            (0, "file", None, "0 files"),
            (1, "file", None, "1 file"),
            (2, "diagnostic", None, "2 diagnostics"),
            (1, "fix", "fixes", "1 fix"),
            (4, "fix", "fixes", "4 fixes"),
        ],
    )
    def test_forms(self, count: int, singular: str, plural: str | None, expected: str) -> None:
        assert pluralize(count, singular, plural) == expected


class TestSpinner:
    """Tests for spinner and console suppression."""

    def test_given_non_terminal_when_spinning_then_block_runs_unsuppressed(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Given
        monkeypatch.setattr(progress, "_console", Console(file=io.StringIO(), force_terminal=False))
        ran = []

        # When
        with spinner("Analyzing"):
            ran.append(is_console_suppressed())

        # Then
        assert ran == [False]

    def test_given_terminal_when_spinning_then_logs_suppressed_until_exit(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Given
        console = Console(file=io.StringIO(), force_terminal=True)
        monkeypatch.setattr(progress, "_console", console)

        # When
        with spinner("Analyzing"):
            during = is_console_suppressed()

        # Then
        assert during is True
        assert is_console_suppressed() is False

    def test_given_error_in_block_when_spinning_then_suppression_cleared(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(progress, "_console", Console(file=io.StringIO(), force_terminal=True))
        with pytest.raises(RuntimeError), spinner("Analyzing"):
            raise RuntimeError("boom")
        assert is_console_suppressed() is False
