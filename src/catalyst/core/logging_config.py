"""
Structured Logging
structlog on top of stdlib logging; all output goes to stderr so the CLI can
print summaries on stdout.
"""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

_PROCESSORS: tuple[Any, ...] = (
    structlog.contextvars.merge_contextvars,  # generation_id and friends
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
)


def _stderr_handler(json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if json_logs:
        handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s | %(message)s"))
    return handler


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Route structlog and stdlib records through one stderr handler.

    Safe to call more than once; the last call wins.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown names mean INFO)
        json_logs: Machine-readable output instead of the console renderer
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logging.basicConfig(level=log_level, handlers=[_stderr_handler(json_logs)], force=True)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    structlog.configure(
        processors=[*_PROCESSORS, renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; call with ``__name__``."""
    return structlog.get_logger(name)


class LogContext:
    """
    Bind key/values to every log line emitted inside the block.

    Examples:
        >>> with LogContext(generation_id="gen_01H..."):
        ...     logger.info("pass_complete")  # carries generation_id
    """

    def __init__(self, **bindings: Any) -> None:
        self.bindings = bindings

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.bindings)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.bindings)
