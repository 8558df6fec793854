"""zga rules command - list available rules."""

import json
from pathlib import Path

import click
from rich.table import Table

from zgame_analyzers.analysis import registry
from zgame_analyzers.cli.utils import find_project_root, load_cli_config
from zgame_analyzers.core.progress import get_console
from zgame_analyzers.fixes import fix_registry


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file to use instead of .zga/config.yaml",
)
@click.pass_context
def rules_command(ctx: click.Context, as_json: bool, config_path: Path | None) -> None:
    """List rules with their effective severity and available fixes."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = load_cli_config(find_project_root(), config_path, verbose=verbose)

    rows = [
        {
            "rule_id": rule.rule_id,
            "title": rule.descriptor.title,
            "category": rule.descriptor.category.value,
            "severity": rule.severity(config).value,
            "enabled": rule.is_enabled(config),
            "fixes": [p.title for p in fix_registry.for_rule(rule.rule_id)],
        }
        for rule in registry.all()
    ]

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(show_header=True, box=None, padding=(0, 2), pad_edge=False)
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Category", style="dim")
    table.add_column("Severity")
    table.add_column("Fixes", style="dim")
    for row in rows:
        severity = row["severity"] if row["enabled"] else "[dim]disabled[/dim]"
        table.add_row(
            str(row["rule_id"]),
            str(row["title"]),
            str(row["category"]),
            str(severity),
            ", ".join(row["fixes"]),  # type: ignore[arg-type]
        )
    get_console().print(table)
