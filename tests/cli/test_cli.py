"""Tests for the zga command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from zgame_analyzers import __version__
from zgame_analyzers.cli.main import cli
from zgame_analyzers.config import loader

runner = CliRunner()

EDITOR_IMPORT = "using System;\nusing UnityEditor;\nclass Foo { }\n"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global config and log level out of CLI runs."""
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "global.yaml")
    monkeypatch.setenv("ZGA__LOGGING__LEVEL", "ERROR")


def _write(project: Path, relative: str, text: str) -> Path:
    path = project / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


class TestMain:
    """Tests for the command group."""

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("check", "fix", "rules"):
            assert command in result.output


class TestCheckCommand:
    """Tests for zga check."""

    def test_given_editor_import_in_runtime_when_checked_then_exit_1(
        self, unity_project: Path
    ) -> None:
        # Given
        _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)

        # When
        result = runner.invoke(cli, ["check", str(unity_project)])

        # Then
        assert result.exit_code == 1
        assert "Assets/Scripts/Foo.cs:2:1: error ZG0001:" in result.stdout

    def test_given_clean_project_when_checked_then_exit_0(self, unity_project: Path) -> None:
        _write(unity_project, "Assets/Editor/FooEditor.cs", EDITOR_IMPORT)
        result = runner.invoke(cli, ["check", str(unity_project)])
        assert result.exit_code == 0
        assert "ZG0001" not in result.stdout

    def test_given_json_flag_when_checked_then_json_payload(self, unity_project: Path) -> None:
        # Given
        _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)

        # When
        result = runner.invoke(cli, ["check", str(unity_project), "--json"])

        # Then
        payload = json.loads(result.stdout)
        assert payload["status"] == "dirty"
        assert payload["files_analyzed"] == 1
        assert [d["rule_id"] for d in payload["diagnostics"]] == ["ZG0001"]
        assert payload["diagnostics"][0]["path"] == "Assets/Scripts/Foo.cs"
        assert payload["errors"] == []

    def test_given_warning_severity_override_when_filtered_then_hidden_and_exit_0(
        self, unity_project: Path
    ) -> None:
        # Given
        _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)
        _write(unity_project, ".zga/config.yaml", "rules:\n  unity_editor:\n    severity: warning\n")

        # When
        result = runner.invoke(cli, ["check", str(unity_project), "--json", "--severity", "error"])

        # Then
        assert result.exit_code == 0
        assert json.loads(result.stdout)["diagnostics"] == []

    def test_given_unknown_rule_when_checked_then_error(self, unity_project: Path) -> None:
        _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)
        result = runner.invoke(cli, ["check", str(unity_project), "--rule", "ZG9999"])
        assert result.exit_code == 1
        assert "Unknown rule: ZG9999" in result.output

    def test_given_rule_filter_when_checked_then_other_rules_skipped(
        self, unity_project: Path
    ) -> None:
        _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)
        result = runner.invoke(cli, ["check", str(unity_project), "--rule", "ZG0002", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["diagnostics"] == []


class TestFixCommand:
    """Tests for zga fix."""

    def test_given_dry_run_when_fixed_then_diff_printed_and_file_unchanged(
        self, unity_project: Path
    ) -> None:
        # Given
        path = _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)

        # When
        result = runner.invoke(cli, ["fix", str(unity_project), "--dry-run"])

        # Then
        assert result.exit_code == 0
        assert "--- a/Assets/Scripts/Foo.cs" in result.stdout
        assert "-using UnityEditor;" in result.stdout
        assert path.read_text() == EDITOR_IMPORT

    def test_given_fix_when_applied_then_file_rewritten(self, unity_project: Path) -> None:
        # Given
        path = _write(unity_project, "Assets/Scripts/Foo.cs", EDITOR_IMPORT)

        # When
        result = runner.invoke(cli, ["fix", str(unity_project)])

        # Then
        assert result.exit_code == 0
        assert path.read_text() == "using System;\nclass Foo { }\n"
        assert runner.invoke(cli, ["check", str(unity_project)]).exit_code == 0


class TestRulesCommand:
    """Tests for zga rules."""

    def test_given_json_when_listed_then_all_rules(
        self, unity_project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # Given
        monkeypatch.chdir(unity_project)
        _write(unity_project, ".zga/config.yaml", "rules:\n  linq:\n    enabled: false\n")

        # When
        result = runner.invoke(cli, ["rules", "--json"])

        # Then
        assert result.exit_code == 0
        rows = {row["rule_id"]: row for row in json.loads(result.stdout)}
        assert list(rows) == ["ZG0001", "ZG0002", "ZG_LINQ001"]
        assert rows["ZG0001"]["severity"] == "error"
        assert rows["ZG0001"]["fixes"]
        assert rows["ZG_LINQ001"]["enabled"] is False
        assert rows["ZG_LINQ001"]["category"] == "performance"
