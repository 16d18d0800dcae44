# src/mitraillette/report.py
"""Tabulate solver results as :class:`pandas.DataFrame` objects.

These helpers back the ``choices``, ``ev`` and ``win`` CLI commands. Each
returns a long-format frame so callers can pivot, filter or write it to CSV.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from mitraillette.game.distribution import enumerate_choices, split_bust
from mitraillette.solver.solver import Solver

LOGGER = logging.getLogger(__name__)

__all__ = [
    "choice_summary",
    "choice_table",
    "expected_value_table",
    "win_probability_table",
    "pivot_by_dice",
    "write_table",
]


def choice_summary(solver: Solver) -> pd.DataFrame:
    """One row per dice count: distinct scoring choice sets and bust odds."""
    rows = [
        {
            "n_dice": table.n_dice,
            "n_choice_sets": len(table.choices),
            "bust_probability": table.bust_probability,
            "scoring_probability": sum(c.probability for c in table.choices),
        }
        for table in solver.tables
    ]
    return pd.DataFrame(rows)


def choice_table(n_dice: int, n_faces: int = 6) -> pd.DataFrame:
    """Every scoring choice set for ``n_dice`` dice, most likely first."""
    _, scoring = split_bust(enumerate_choices(n_dice, n_faces))
    rows = [
        {
            "choices": " | ".join(comb.describe() for comb in choices),
            "n_options": len(choices),
            "probability": probability,
        }
        for choices, probability in scoring.items()
    ]
    frame = pd.DataFrame(rows, columns=["choices", "n_options", "probability"])
    return frame.sort_values(["probability", "choices"], ascending=[False, True], ignore_index=True)


def expected_value_table(
    solver: Solver,
    stakes: Iterable[int],
    dice_counts: Iterable[int],
    scores: Iterable[int] = (0,),
) -> pd.DataFrame:
    """Expected value, gain and roll/stop decision for every grid point."""
    dice_counts = list(dice_counts)
    stakes = list(stakes)
    rows = []
    for score in scores:
        for stake in stakes:
            for n_dice in dice_counts:
                value = solver.expected_value(stake, n_dice, score)
                rows.append(
                    {
                        "score": score,
                        "stake": stake,
                        "n_dice": n_dice,
                        "expected_value": value,
                        "expected_gain": value - stake,
                        "decision": "roll" if value > stake else "stop",
                    }
                )
    LOGGER.info(
        "Expected value table computed",
        extra={"stage": "report", "n_rows": len(rows), "cache_size": solver.cache_size()},
    )
    return pd.DataFrame(rows)


def win_probability_table(
    solver: Solver,
    scores: Iterable[int],
    stakes: Iterable[int],
    dice_counts: Iterable[int],
    max_bound: int | None = None,
) -> pd.DataFrame:
    """Probability of landing exactly on the target for every grid point."""
    dice_counts = list(dice_counts)
    stakes = list(stakes)
    rows = [
        {
            "score": score,
            "stake": stake,
            "n_dice": n_dice,
            "win_probability": solver.win_probability(score, stake, n_dice, max_bound),
        }
        for score in scores
        for stake in stakes
        for n_dice in dice_counts
    ]
    return pd.DataFrame(rows)


def pivot_by_dice(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    """Wide view: one row per ``(score, stake)``, one column per dice count."""
    wide = frame.pivot_table(index=["score", "stake"], columns="n_dice", values=column)
    wide.columns = [f"{n}d" for n in wide.columns]
    return wide


def write_table(frame: pd.DataFrame, path: Path) -> Path:
    """Write ``frame`` to CSV, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    LOGGER.info("Table written", extra={"stage": "report", "path": str(path)})
    return path
