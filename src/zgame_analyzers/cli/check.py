"""zga check command - report diagnostics."""

import asyncio
import json
from pathlib import Path

import click

from zgame_analyzers.analysis import AnalyzerOps, Severity
from zgame_analyzers.analysis.models import Diagnostic
from zgame_analyzers.cli.utils import find_project_root, load_cli_config
from zgame_analyzers.core.errors import ZGameAnalyzersError
from zgame_analyzers.core.logging import run_context
from zgame_analyzers.core.progress import pluralize, spinner, status

_SEVERITY_RANK = {
    Severity.HINT: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
}


def _at_least(diagnostic: Diagnostic, minimum: Severity) -> bool:
    return _SEVERITY_RANK[diagnostic.severity] >= _SEVERITY_RANK[minimum]


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--rule", "rule_ids", multiple=True, help="Only run this rule (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--severity",
    type=click.Choice([s.value for s in Severity]),
    default=Severity.HINT.value,
    show_default=True,
    help="Minimum severity to report",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file to use instead of .zga/config.yaml",
)
@click.pass_context
def check_command(
    ctx: click.Context,
    path: Path,
    rule_ids: tuple[str, ...],
    as_json: bool,
    severity: str,
    config_path: Path | None,
) -> None:
    """Check C# sources for forbidden API usage.

    PATH is a file or directory inside a Unity project (default: current directory).
    Exits with status 1 when error diagnostics are reported.
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    project_root = find_project_root(path)
    config = load_cli_config(project_root, config_path, verbose=verbose)
    ops = AnalyzerOps(project_root, config)

    try:
        with run_context("check", project_root), spinner(f"Analyzing {project_root.name}"):
            result = asyncio.run(ops.check(paths=[path.resolve()], rule_ids=list(rule_ids) or None))
    except ZGameAnalyzersError as e:
        raise click.ClickException(str(e)) from e

    minimum = Severity(severity)
    diagnostics = sorted(
        (d for d in result.diagnostics if _at_least(d, minimum)),
        key=lambda d: (d.path, d.start_byte, d.rule_id),
    )
    failed = [f for f in result.files if f.status == "error"]

    if as_json:
        payload = {
            "status": result.status,
            "files_analyzed": result.files_analyzed,
            "diagnostics": [d.to_dict() for d in diagnostics],
            "errors": [{"path": f.path, "detail": f.error_detail} for f in failed],
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        for d in diagnostics:
            click.echo(f"{d.path}:{d.line}:{d.column + 1}: {d.severity.value} {d.rule_id}: {d.message}")
        for f in failed:
            status(f"{f.path}: {f.error_detail}", style="warning")
        summary = (
            f"{pluralize(len(diagnostics), 'diagnostic')} in "
            f"{pluralize(result.files_analyzed, 'file')}"
        )
        status(summary, style="error" if diagnostics else "success")

    if any(d.severity == Severity.ERROR for d in diagnostics):
        ctx.exit(1)
