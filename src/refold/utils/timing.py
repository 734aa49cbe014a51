#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/utils/timing.py
"""Timing of pipeline stages at DEBUG level."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log the elapsed time of the enclosed block when DEBUG is enabled.

    Parameters
    ----------
    logger : logging.Logger
        Logger of the calling module
    operation : str
        Name of the stage, e.g. ``"Partitioning"``

    Examples
    --------
        >>> with debug_timer(logger, "Rendering"):
        ...     text = render(fragments, tree)

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.debug("%s completed in %.4fs", operation, time.perf_counter() - start)
