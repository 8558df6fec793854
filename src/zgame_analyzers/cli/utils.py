"""CLI utilities."""

from pathlib import Path

import click

from zgame_analyzers.config.constants import PROJECT_ROOT_MARKERS
from zgame_analyzers.config.loader import load_config
from zgame_analyzers.config.models import ZGameAnalyzersConfig
from zgame_analyzers.core.errors import ZGameAnalyzersError
from zgame_analyzers.core.logging import configure_logging


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the Unity project root from the given path.

    Walks up the directory tree looking for a directory containing both
    ``Assets/`` and ``ProjectSettings/``. Falls back to the starting
    directory (the parent, for a file) when no marker is found, so loose
    folders of scripts can still be checked.

    Args:
        start_path: Starting file or directory (default: current directory)

    Returns:
        Path to the project root
    """
    if start_path is None:
        start_path = Path.cwd()

    start = start_path.resolve()
    if start.is_file():
        start = start.parent

    current = start
    while True:
        if all((current / marker).is_dir() for marker in PROJECT_ROOT_MARKERS):
            return current
        if current == current.parent:
            return start
        current = current.parent


def load_cli_config(
    project_root: Path, config_path: Path | None, *, verbose: bool
) -> ZGameAnalyzersConfig:
    """Load configuration and apply its logging section.

    Raises:
        click.ClickException: If the configuration is invalid.
    """
    try:
        config = load_config(project_root, config_path=config_path)
    except ZGameAnalyzersError as e:
        raise click.ClickException(str(e)) from e
    if not verbose:
        configure_logging(config=config.logging)
    return config
