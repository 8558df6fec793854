"""zga fix command - apply or preview fixes."""

import asyncio
from pathlib import Path

import click

from zgame_analyzers.cli.utils import find_project_root, load_cli_config
from zgame_analyzers.core.errors import ZGameAnalyzersError
from zgame_analyzers.core.logging import run_context
from zgame_analyzers.core.progress import pluralize, spinner, status
from zgame_analyzers.fixes import FixOps


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--rule", "rule_ids", multiple=True, help="Only fix this rule (repeatable)")
@click.option("--dry-run", is_flag=True, help="Print a unified diff instead of writing files")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file to use instead of .zga/config.yaml",
)
@click.pass_context
def fix_command(
    ctx: click.Context,
    path: Path,
    rule_ids: tuple[str, ...],
    dry_run: bool,
    config_path: Path | None,
) -> None:
    """Apply available fixes to diagnostics.

    PATH is a file or directory inside a Unity project (default: current directory).
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    project_root = find_project_root(path)
    config = load_cli_config(project_root, config_path, verbose=verbose)
    ops = FixOps(project_root, config)

    try:
        message = "Computing fixes" if dry_run else "Applying fixes"
        with run_context("fix", project_root), spinner(message):
            result = asyncio.run(
                ops.fix(paths=[path.resolve()], rule_ids=list(rule_ids) or None, dry_run=dry_run)
            )
    except ZGameAnalyzersError as e:
        raise click.ClickException(str(e)) from e

    if dry_run:
        for file_fix in result.files:
            if file_fix.diff:
                click.echo(file_fix.diff, nl=False)
        status(
            f"Would apply {pluralize(result.total_fixes, 'fix', 'fixes')} "
            f"to {pluralize(result.files_changed, 'file')}",
            style="info",
        )
        return

    for file_fix in result.files:
        status(f"{file_fix.path} ({pluralize(len(file_fix.fixes), 'fix', 'fixes')})", style="none", indent=2)
    status(
        f"Applied {pluralize(result.total_fixes, 'fix', 'fixes')} "
        f"to {pluralize(result.files_changed, 'file')}",
        style="success" if result.files else "info",
    )
