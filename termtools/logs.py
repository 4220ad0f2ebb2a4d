"""Logging setup for terminal sessions.

The terminal owns stdout/stderr while a session runs, so records only go to a
file when one is configured; otherwise they are discarded. Modules log through
plain ``logging.getLogger(__name__)`` and structlog renders every record with
a shared ``ProcessorFormatter``. Python warnings (Pillow's decompression-bomb
warning, for one) are captured into the same handler instead of stderr.
"""

from __future__ import annotations

import logging
import os

import structlog

LOG_FILE_ENV = "TERMTOOLS_LOG_FILE"
LOG_LEVEL_ENV = "TERMTOOLS_LOG_LEVEL"
PACKAGE_LOGGER = "termtools"
WARNINGS_LOGGER = "py.warnings"


def _resolve_level(value: str | int | None, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if value is None:
        return logging.WARNING
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def _make_structlog_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=_shared_processors(),
    )


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def configure_logging(
    *,
    log_file: str | None = None,
    level: str | int | None = None,
    debug: bool = False,
) -> logging.Logger:
    """Configure the ``termtools`` logger hierarchy and structlog.

    Environment variables override nothing that is passed explicitly; they are
    only consulted for values left as ``None``.
    """
    resolved_file = log_file if log_file is not None else os.environ.get(LOG_FILE_ENV)
    resolved_level = _resolve_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV), debug)

    logger = logging.getLogger(PACKAGE_LOGGER)
    warnings_logger = logging.getLogger(WARNINGS_LOGGER)
    _reset_handlers(logger)
    _reset_handlers(warnings_logger)

    handler: logging.Handler
    if resolved_file:
        handler = logging.FileHandler(resolved_file, encoding="utf-8")
        handler.setFormatter(_make_structlog_formatter())
    else:
        handler = logging.NullHandler()

    logger.addHandler(handler)
    logger.setLevel(resolved_level)
    logger.propagate = False

    logging.captureWarnings(True)
    warnings_logger.addHandler(handler)
    warnings_logger.propagate = False

    _configure_structlog()
    return logger
