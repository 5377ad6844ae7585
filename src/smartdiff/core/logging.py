"""Structured logging for smartdiff.

Library modules log through ``structlog.get_logger(__name__)`` with
snake_case event names. The CLI calls configure_logging once; each entry of
``LoggingConfig.outputs`` becomes one stdlib handler with its own level and
renderer, so a quiet console can sit next to a verbose JSON file.

Every analysis run binds a short ``run_id`` into structlog's context so all
log lines of one run can be correlated.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from smartdiff.config.models import LoggingConfig, LogOutputConfig

_STREAMS = ("stderr", "stdout")

# Chatty at INFO, one line per request
_NOISY_LOGGERS = ("httpx", "httpcore")


def start_run(run_id: str | None = None) -> str:
    """Bind a run id to every log line until end_run()."""
    rid = run_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(run_id=rid)
    return rid


def end_run() -> None:
    structlog.contextvars.unbind_contextvars("run_id")


class ConsoleSuppressingFilter(logging.Filter):
    """Drops console records while a spinner owns the terminal.

    Only stream handlers get this filter; file handlers keep every record.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from smartdiff.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]


def _level(name: str) -> int:
    return logging.getLevelNamesMapping()[name.upper()]


def _handler(output: LogOutputConfig, default_level: int) -> logging.Handler:
    handler: logging.Handler
    is_stream = output.destination in _STREAMS
    if is_stream:
        stream = sys.stderr if output.destination == "stderr" else sys.stdout
        handler = logging.StreamHandler(stream)
        handler.addFilter(ConsoleSuppressingFilter())
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=is_stream and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=_shared_processors(),
        )
    )
    handler.setLevel(_level(output.level) if output.level else default_level)
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
) -> None:
    """Route structlog through stdlib handlers built from ``config``.

    Without a config a single stderr output is used, rendered as JSON when
    ``json_format`` is set. Safe to call repeatedly; previous handlers are
    replaced.
    """
    from smartdiff.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level.upper(),  # type: ignore[arg-type]
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level)

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    for output in config.outputs:
        root.addHandler(_handler(output, root_level))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
