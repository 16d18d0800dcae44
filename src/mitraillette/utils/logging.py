# src/mitraillette/utils/logging.py
"""Logging helpers for Mitraillette.

The CLI calls :func:`configure_logging` once per invocation; library modules
only ever use ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(process)d] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: str | int) -> int:
    """Normalize a logging level string or integer to ``logging`` constants.

    Unknown names fall back to ``INFO``.
    """
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def configure_logging(*, level: str | int = "INFO", log_file: str | Path | None = None) -> None:
    """Route root logging to stderr and, optionally, to ``log_file``.

    Earlier handlers are closed and replaced, so calling this twice in one
    process (as the tests do) never duplicates output.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logging.basicConfig(
        level=parse_level(level),
        handlers=handlers,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        force=True,
    )


__all__ = ["configure_logging", "parse_level"]
