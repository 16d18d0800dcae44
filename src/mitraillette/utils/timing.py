"""Timing helpers."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

LOGGER = logging.getLogger(__name__)


@contextmanager
def time_block(description: str, logger: logging.Logger | None = None) -> Iterator[float]:
    """Log how long the wrapped block took, at DEBUG level.

    Parameters
    ----------
    description:
        Label for the timed block which will be included in the log message.
    logger:
        Logger receiving the message. Defaults to this module's logger.
    """

    start = time.perf_counter()
    yield start
    elapsed = time.perf_counter() - start
    (logger or LOGGER).debug(
        "%s: %.6f s", description, elapsed, extra={"stage": "timing", "elapsed_s": elapsed}
    )


__all__ = ["time_block"]
