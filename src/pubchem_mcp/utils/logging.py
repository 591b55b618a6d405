"""
Logging Configuration
Structured logging with loguru
Source: https://github.com/Delgan/loguru
Verified: 2026-10-19

Everything funnels into loguru: the server's own modules bind their name
through ``get_logger``, and records from libraries that use the stdlib
``logging`` module (the mcp SDK, httpx) are forwarded by
``InterceptHandler`` under their logger names. Library records are only
kept from WARNING upwards, since httpx logs every request at INFO.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

PACKAGE_NAME = "pubchem_mcp"

# Stdlib loggers below this level are dropped even when LOG_LEVEL is lower
LIBRARY_MIN_LEVEL = "WARNING"


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.bind(name=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def is_package_record(name: str) -> bool:
    """True when ``name`` belongs to this server rather than a library."""
    return name == PACKAGE_NAME or name.startswith(f"{PACKAGE_NAME}.")


def make_record_filter(level: str):  # type: ignore[no-untyped-def]
    """Build a sink filter holding library records to ``LIBRARY_MIN_LEVEL``."""
    library_level = max(logger.level(level).no, logger.level(LIBRARY_MIN_LEVEL).no)

    def record_filter(record) -> bool:  # type: ignore[no-untyped-def]
        name = record["extra"].get("name", PACKAGE_NAME)
        if is_package_record(name):
            return True
        return record["level"].no >= library_level

    return record_filter


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_logs: bool = False,
) -> None:
    """
    Configure application logging.

    The console sink always writes to stderr: stdout belongs to the MCP
    stdio transport and must carry protocol frames only.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        json_logs: Whether to output JSON format
    """
    # Remove default logger
    logger.remove()
    record_filter = make_record_filter(level)

    if json_logs:
        logger.add(
            sys.stderr,
            format="{message}",
            level=level,
            filter=record_filter,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan> - <level>{message}</level>",
            level=level,
            filter=record_filter,
            colorize=False,
        )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            rotation="50 MB",
            retention="14 days",
            compression="zip",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]} - {message}",
            level=level,
            filter=record_filter,
            serialize=json_logs,
        )

    logger.configure(extra={"name": PACKAGE_NAME})

    root = logging.getLogger()
    if not any(isinstance(handler, InterceptHandler) for handler in root.handlers):
        root.addHandler(InterceptHandler())
    root.setLevel(logger.level(level).no)

    logger.info(f"Logging configured: level={level}, json_logs={json_logs}")


def get_logger(name: str = PACKAGE_NAME):  # type: ignore[no-untyped-def]
    """
    Get a logger bound to a module name.

    Names outside the ``pubchem_mcp`` package are treated as library
    records by the sink filter.

    Args:
        name: Logger name (typically __name__)

    Example:
        >>> from pubchem_mcp.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Server started")
    """
    return logger.bind(name=name)
