"""Optimal-policy solver and the annotated tables it runs on."""

from __future__ import annotations

from .solver import ConvergenceError, Decision, Solver
from .tables import ChoiceStats, Option, RollTable, build_roll_tables

__all__ = [
    "ChoiceStats",
    "ConvergenceError",
    "Decision",
    "Option",
    "RollTable",
    "Solver",
    "build_roll_tables",
]
