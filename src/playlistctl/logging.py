import logging
import sys
from typing import Any

import structlog


def configure_logging(level: int | str = logging.INFO, *, json_logs: bool | None = None) -> None:
    """
    Route structlog through standard logging on stderr.

    stdout carries the run report, so log lines never go there. With
    ``json_logs=None`` the format follows stderr: key/value lines on a
    terminal, one JSON object per line otherwise.
    """
    if json_logs is None:
        json_logs = not sys.stderr.isatty()

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr, force=True)


def bind_run_context(**kwargs: Any) -> None:
    """Bind fields (tenant, playlist name) to every log line of the current run."""

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**kwargs)
