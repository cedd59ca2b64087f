"""Logging for the nuget_switch package tree."""

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "nuget_switch"
DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def _console_handler(log_format: str, rich_console: bool) -> logging.Handler:
    if not rich_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(log_format))
        return handler

    # Status lines go to stdout; keep log records on stderr so they never mix
    return RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )


def setup_logging(
    level: str = "WARNING",
    log_format: str = DEFAULT_FORMAT,
    log_file: Path | None = None,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``nuget_switch`` logger.

    The console shows records at ``level`` and above. A log file, when
    given, receives every record down to DEBUG, which is useful to capture
    the full trace of a switch without cluttering the terminal.

    Args:
        level: Console logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: Format string for plain and file output
        log_file: Optional file that receives DEBUG and above
        rich_console: Use rich for console output

    Returns:
        The configured package logger
    """
    global _configured

    console_level = logging.getLevelName(level.upper())
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = _console_handler(log_format, rich_console)
    console_handler.setLevel(console_level)
    package_logger.addHandler(console_handler)
    package_logger.setLevel(console_level)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(log_format))
        package_logger.addHandler(file_handler)
        package_logger.setLevel(logging.DEBUG)

    _configured = True
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the ``nuget_switch`` logger."""
    if not _configured:
        setup_logging()

    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
