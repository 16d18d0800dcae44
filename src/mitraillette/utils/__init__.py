# src/mitraillette/utils/__init__.py
"""Utility subpackage for Mitraillette.

Small helpers shared by the solver and the CLI, kept apart so that the game
and solver modules stay free of side effects such as handler configuration.
"""

from __future__ import annotations

from .logging import configure_logging, parse_level
from .timing import time_block

__all__ = ["configure_logging", "parse_level", "time_block"]
