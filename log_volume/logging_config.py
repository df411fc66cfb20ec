"""
Logging configuration for log volume estimation.

Two logger trees are configured:

* ``log_volume`` carries diagnostics (collection failures, corrupt history,
  skipped logs). It writes to stderr by default.
* ``log_volume.report`` carries the console report. It writes to stdout
  in simple mode so the report reads like plain print() output, and it
  does not propagate into the diagnostics handler.

Usage:
    from log_volume.logging_config import get_logger, get_report_logger

    logger = get_logger(__name__)
    logger.warning("Skipping log %s", log_id)

    report = get_report_logger()
    report.info("%-30s%12.2f", log_id, per_hour)

To enable timestamps on diagnostics:
    from log_volume.logging_config import configure_logging
    import logging

    configure_logging(level=logging.DEBUG, simple_mode=False)
"""

import logging
import sys
from typing import Dict, Optional, TextIO

PACKAGE_LOGGER = "log_volume"
REPORT_LOGGER = "log_volume.report"

# Format strings
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s: %(message)s"
REPORT_FORMAT = "%(message)s"

_loggers: Dict[str, logging.Logger] = {}
_configured: bool = False


def configure_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None,
    simple_mode: bool = True,
    report_stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the diagnostics and report loggers.

    Args:
        level: Level for diagnostics (default: INFO).
        format_string: Custom diagnostics format. If None, uses SIMPLE_FORMAT
            or DEFAULT_FORMAT based on simple_mode.
        stream: Diagnostics stream (default: sys.stderr).
        simple_mode: If True, diagnostics carry only the level and message.
        report_stream: Report stream (default: sys.stdout).
    """
    global _configured

    if format_string is None:
        format_string = SIMPLE_FORMAT if simple_mode else DEFAULT_FORMAT

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(format_string))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False

    report_handler = logging.StreamHandler(report_stream or sys.stdout)
    report_handler.setFormatter(logging.Formatter(REPORT_FORMAT))

    report_logger = logging.getLogger(REPORT_LOGGER)
    report_logger.handlers.clear()
    report_logger.addHandler(report_handler)
    report_logger.setLevel(logging.INFO)
    report_logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Configures logging with defaults on first use.

    Args:
        name: Module name (typically __name__).

    Returns:
        Cached logger instance.
    """
    if not _configured:
        configure_logging()

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def get_report_logger() -> logging.Logger:
    """Get the logger the console report is written through."""
    return get_logger(REPORT_LOGGER)


def set_level(level: int) -> None:
    """
    Set the diagnostics level for all log_volume loggers.

    The report logger keeps its own level.

    Args:
        level: Logging level (e.g., logging.DEBUG, logging.INFO).
    """
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def enable_debug() -> None:
    """Enable debug-level diagnostics."""
    set_level(logging.DEBUG)


def enable_quiet() -> None:
    """Only show warnings and errors (suppress INFO diagnostics)."""
    set_level(logging.WARNING)
