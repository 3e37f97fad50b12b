#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/logging_utils.py
"""Logging setup for the ``tidyopts`` logger namespace.

Every module logs under ``tidyopts.*``. The package leaves only a
``NullHandler`` on the ``tidyopts`` logger, so nothing is printed unless the
application asks for it. :func:`configure_logging` attaches handlers to that
logger alone; the root logger and the application's own handlers are not
touched.

Records from the option setters carry a ``tidy_option`` attribute naming the
engine option involved, shown by the trace format:

    [2025-01-01 12:00:00] [WARNING] [tidyopts.setter] [newline] Engine rejected 1 for 'newline': ...

"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from tidyopts.constants import LOGGER_NAME

OPTION_ATTRIBUTE = "tidy_option"


class OptionContextFilter(logging.Filter):
    """Give every record a ``tidy_option`` attribute, ``-`` when it has none."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, OPTION_ATTRIBUTE):
            setattr(record, OPTION_ATTRIBUTE, "-")
        return True


def option_context(option_name: str) -> dict[str, str]:
    """Build the ``extra`` mapping that tags a record with an option name."""
    return {OPTION_ATTRIBUTE: option_name}


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """Send tidyopts records to stderr and, optionally, a file.

    Calling this again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "DEBUG" to see every
        option set and its changed flag). Unknown names fall back to INFO.
    log_file : str, optional
        Path to a log file that receives the same records.
    trace_mode : bool, default False
        When true, emit timestamps, logger names and the option name.
    propagate : bool, default False
        Also pass records on to the root logger's handlers.

    Returns
    -------
    logging.Logger
        The ``tidyopts`` logger.

    """
    resolved_level = log_level if isinstance(log_level, int) else getattr(logging, str(log_level).upper(), logging.INFO)

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(resolved_level)
    package_logger.propagate = propagate
    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()

    if trace_mode:
        format_str = f"[%(asctime)s] [%(levelname)s] [%(name)s] [%({OPTION_ATTRIBUTE})s] %(message)s"
        date_format: Optional[str] = "%Y-%m-%d %H:%M:%S"
    else:
        format_str = "tidyopts %(levelname)s: %(message)s"
        date_format = None
    formatter = logging.Formatter(format_str, datefmt=date_format)
    option_filter = OptionContextFilter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(option_filter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(option_filter)
            package_logger.addHandler(file_handler)
            package_logger.debug("Logging to file: %s", log_file)

    return package_logger
