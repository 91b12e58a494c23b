"""structlog setup for outbound call tracing."""

import logging
import sys
from typing import TextIO

import structlog

from http_facade.settings import AppSettings


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping()[level.upper()]


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for the facade.

    Call tracing (``http_call_start`` / ``http_call_response``) is emitted
    at debug and therefore only appears when ``level`` is DEBUG. Transport
    failures are emitted at error with their traceback rendered.

    Args:
        level: Minimum level, as a number or a name such as ``"DEBUG"``.
        output: Stream records are written to (default: stderr).
        json_format: Render JSON lines instead of console output.

    Raises:
        KeyError: If ``level`` is an unknown level name.
    """
    min_level = _resolve_level(level)

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=output.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=min_level)


def configure_logging_from_settings(
    settings: AppSettings,
    output: TextIO = sys.stderr,
) -> None:
    """Configure logging from ``HTTP_FACADE_LOG_LEVEL`` / ``HTTP_FACADE_LOG_JSON``."""
    configure_logging(
        level=settings.log_level,
        output=output,
        json_format=settings.log_json,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, optionally named."""
    log: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return log
