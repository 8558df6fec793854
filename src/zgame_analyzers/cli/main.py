"""ZGame Analyzers CLI - zga command."""

import click

from zgame_analyzers import __version__
from zgame_analyzers.cli.check import check_command
from zgame_analyzers.cli.fix import fix_command
from zgame_analyzers.cli.rules import rules_command
from zgame_analyzers.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="zga")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ZGame Analyzers - Unity C# rules for editor-only and per-frame code."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(check_command, name="check")
cli.add_command(fix_command, name="fix")
cli.add_command(rules_command, name="rules")


if __name__ == "__main__":
    cli()
