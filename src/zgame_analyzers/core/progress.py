"""Terminal feedback for zga commands.

Everything here writes to stderr so that ``--json`` payloads and dry-run
diffs on stdout stay machine-readable. While a spinner is live, console log
handlers hold their lines back (see :func:`is_console_suppressed`). Files are
analyzed on worker threads that log too, so the flag is process-wide rather
than thread-local.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Literal

from rich.console import Console

Style = Literal["success", "error", "warning", "info", "none"]

_MARKERS: dict[str, str] = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

_console = Console(stderr=True, highlight=False)
_spinner_live = threading.Event()


def get_console() -> Console:
    return _console


def is_console_suppressed() -> bool:
    """True while a spinner owns the terminal line."""
    return _spinner_live.is_set()


def status(message: str, *, style: Style = "info", indent: int = 0) -> None:
    """Print one status line to stderr, prefixed with the marker for ``style``."""
    _console.print(f"{' ' * indent}{_MARKERS[style]}{message}")


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """``pluralize(3, "diagnostic")`` -> ``"3 diagnostics"``."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner while the block runs. Does nothing when stderr is not a terminal."""
    if not _console.is_terminal:
        yield
        return
    _spinner_live.set()
    try:
        with _console.status(f"[cyan]{message}[/cyan]", spinner="dots"):
            yield
    finally:
        _spinner_live.clear()
