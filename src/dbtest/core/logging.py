# src/dbtest/core/logging.py
"""Structured logging configuration for dbtest.

structlog and stdlib logging share one handler: stdlib records (pytest
plugins, Dynaconf) go through structlog's ProcessorFormatter and come out
in the same format (JSON or console) as records from get_logger().

Library code only ever calls get_logger(). Whoever owns the process picks
the output. The CLI uses configure_cli_logging(), which writes to stderr so
that stdout carries nothing but command output.
"""

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

# Chatty at DEBUG, never useful below WARNING
_QUIET_LOGGERS = ("dynaconf",)


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_processors(json_output: bool) -> list[Any]:
    if json_output:
        return [
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=False),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging through one handler.

    Replaces any handler already on the root logger, so calling it twice
    (as tests and repeated CLI invocations do) leaves exactly one.

    Args:
        json_output: One JSON object per line instead of console rendering.
        level: Root log level (DEBUG, INFO, WARNING, ERROR).
        stream: Destination for every record. Defaults to stdout.
    """
    log_level = logging.getLevelNamesMapping()[level.upper()]
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created at import time
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=_render_processors(json_output), foreign_pre_chain=shared))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def configure_cli_logging(*, verbose: bool, json_output: bool) -> None:
    """Logging for a CLI invocation: stderr, WARNING unless ``verbose``."""
    configure_logging(json_output=json_output, level="DEBUG" if verbose else "WARNING", stream=sys.stderr)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
