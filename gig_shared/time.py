"""
Time utilities for timestamps and performance measurement.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

from .log import get_logger

_logger = get_logger(__name__)


def now() -> float:
    """Get current timestamp in seconds (float)."""
    return time.time()

@contextmanager
def timer(label: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """
    Context manager for timing operations. Elapsed time is logged at DEBUG,
    on ``logger`` when given, else on ``gig.time``.

    Usage:
        with timer("workflow load", logger):
            load_workflow_file(path)
    """
    start = now()
    try:
        yield
    finally:
        (logger or _logger).debug("%s took %.3fs", label, now() - start)
