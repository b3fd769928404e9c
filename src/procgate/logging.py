"""
Structured logging for procgate using structlog.

Loggers returned by :func:`get_logger` sit on top of stdlib ``logging``, so
until an application configures logging the library's debug events are
dropped by the root logger's WARNING level. The ``procgate`` CLI calls
:func:`configure_logging` to attach its own handlers.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

LOGGER_NAME = "procgate"

_pre_chain = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _formatted(handler: logging.Handler, renderer) -> logging.Handler:
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=_pre_chain)
    )
    return handler


def configure_logging(
    level: str = "WARNING",
    json_output: bool = False,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """
    Send procgate events to stderr and, optionally, to a file.

    Only the ``procgate`` logger hierarchy is touched; the root logger and
    other libraries keep whatever the host application set up.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Render stderr lines as JSON instead of console text
        log_file: Also append JSON lines to this file
    """
    structlog.configure(
        processors=_pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_formatted(logging.StreamHandler(sys.stderr), renderer))
    if log_file:
        logger.addHandler(
            _formatted(logging.FileHandler(log_file), structlog.processors.JSONRenderer())
        )
    logger.setLevel(level.upper())
    logger.propagate = False


def get_logger(name: str = LOGGER_NAME) -> structlog.stdlib.BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``."""
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


@contextmanager
def log_operation(
    logger: structlog.stdlib.BoundLogger, operation: str, **kwargs
) -> Iterator[structlog.stdlib.BoundLogger]:
    """
    Log ``<operation>.started`` / ``.completed`` / ``.failed`` at debug level.

    Failures are re-raised untouched; reporting them is the caller's call.

    Usage:
        with log_operation(log, "process.run", executable="git") as op_log:
            ...
    """
    log = logger.bind(operation=operation, **kwargs)
    started = time.perf_counter()
    log.debug(f"{operation}.started")

    try:
        yield log
    except Exception as e:
        log.debug(
            f"{operation}.failed",
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        raise
    log.debug(
        f"{operation}.completed",
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
