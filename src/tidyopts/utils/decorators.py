#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidyopts/utils/decorators.py
"""Timing helpers used around batches of option updates."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log the wall time of the enclosed block at DEBUG level.

    Parameters
    ----------
    logger : logging.Logger
        Logger that receives the timing record
    operation : str
        Description of the timed block, e.g. ``"Applying 12 options"``

    Examples
    --------
        >>> with debug_timer(logger, "Applying options"):
        ...     tidy.configure(options)
        ... # Logs: "Applying options completed in 0.00s"

    Notes
    -----
    Nothing is measured when DEBUG is disabled for ``logger``. The record is
    emitted even if the block raises.

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.2f}s")
