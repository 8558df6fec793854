"""Logging setup for zga runs.

structlog renders through stdlib handlers so one event can reach the
terminal and a JSON log file at different levels. Events emitted inside
:func:`run_context` carry the ``run_id`` and ``command`` of the invocation.
``asyncio.to_thread`` copies the current context, so per-file events logged
from analysis worker threads carry them too.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from zgame_analyzers.core.progress import is_console_suppressed

if TYPE_CHECKING:
    from zgame_analyzers.config.models import LoggingConfig, LogOutputConfig

_CONSOLE_DESTINATIONS = ("stderr", "stdout")


def get_run_id() -> str | None:
    run_id = structlog.contextvars.get_contextvars().get("run_id")
    return str(run_id) if run_id is not None else None


@contextmanager
def run_context(command: str, project_root: Path | None = None) -> Iterator[str]:
    """Bind a fresh ``run_id`` and ``command`` to every event logged in the block."""
    run_id = uuid4().hex[:12]
    extra = {"project": project_root.name} if project_root is not None else {}
    with structlog.contextvars.bound_contextvars(run_id=run_id, command=command, **extra):
        yield run_id


def configure_logging(*, config: LoggingConfig | None = None, level: str = "INFO") -> None:
    """Route structlog through one stdlib handler per configured output.

    ``config`` wins over ``level``; without it a single stderr console
    output at ``level`` is used.
    """
    from zgame_analyzers.config.models import LoggingConfig

    if config is None:
        config = LoggingConfig(level=level)  # type: ignore[arg-type]
    root_level = logging.getLevelNamesMapping()[config.level]

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured once the project config is loaded
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_build_handler(output, config.level, pre_chain))


def _build_handler(
    output: LogOutputConfig,
    default_level: str,
    pre_chain: list[structlog.types.Processor],
) -> logging.Handler:
    handler: logging.Handler
    colors = False
    if output.destination in _CONSOLE_DESTINATIONS:
        stream = getattr(sys, output.destination)
        handler = logging.StreamHandler(stream)
        handler.addFilter(lambda _record: not is_console_suppressed())
        colors = stream.isatty()
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    handler.setLevel(logging.getLevelNamesMapping()[output.level or default_level])
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )
    return handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore[no-any-return]
