"""Command line interface."""

from zgame_analyzers.cli.main import cli

__all__ = ["cli"]
