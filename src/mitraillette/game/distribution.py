# src/mitraillette/game/distribution.py
"""Probability of each choice set when rolling ``n`` dice.

Every one of the ``n_faces ** n`` equally likely rolls is decoded as a
base-``n_faces`` number (one digit per die) into a histogram by a small
Numba kernel. Identical histograms are grouped with :func:`numpy.unique`, so
the combination enumerator only runs once per distinct multiset (at most 462
for six dice) before the roll counts are tallied per choice set.
"""

from __future__ import annotations

import functools
import logging
from collections import Counter

import numba as nb
import numpy as np

from mitraillette.game.enumerator import BUST, ChoiceSet, choice_set
from mitraillette.utils.types import Int64Array2D

LOGGER = logging.getLogger(__name__)

__all__ = [
    "RollDistribution",
    "roll_histograms",
    "enumerate_choices",
    "probability_of_bust",
    "split_bust",
]

RollDistribution = dict[ChoiceSet, float]
"""Choice set -> probability; the empty choice set carries the bust mass."""


@nb.njit(cache=True)
def _roll_histograms_nb(n_dice: int, n_faces: int) -> Int64Array2D:
    """Histogram of every raw roll, one row per roll index.

    Inputs
    ------
    n_dice (int):
        Number of dice rolled.
    n_faces (int):
        Faces per die.

    Returns
    -------
    Int64Array2D:
        ``(n_faces ** n_dice, n_faces)`` array of face counts.
    """
    n_rolls = n_faces**n_dice
    out = np.zeros((n_rolls, n_faces), dtype=np.int64)
    for roll in range(n_rolls):
        rest = roll
        for _ in range(n_dice):
            out[roll, rest % n_faces] += 1
            rest //= n_faces
    return out


def roll_histograms(n_dice: int, n_faces: int = 6) -> tuple[Int64Array2D, np.ndarray]:
    """Distinct histograms for ``n_dice`` dice and how many rolls produce each.

    Returns
    -------
    tuple[Int64Array2D, np.ndarray]:
        ``(histograms, counts)`` where ``counts[i]`` rolls share
        ``histograms[i]``; ``counts`` sums to ``n_faces ** n_dice``.
    """
    if n_dice < 1:
        raise ValueError("n_dice must be at least 1")
    raw = _roll_histograms_nb(n_dice, n_faces)
    histograms, counts = np.unique(raw, axis=0, return_counts=True)
    return histograms, counts


@functools.lru_cache(maxsize=None)
def _choice_counts(n_dice: int, n_faces: int) -> tuple[tuple[ChoiceSet, int], ...]:
    """Number of raw rolls leading to each choice set (cached, immutable)."""
    histograms, counts = roll_histograms(n_dice, n_faces)
    tally: Counter[ChoiceSet] = Counter()
    for histo, count in zip(histograms.tolist(), counts.tolist()):
        tally[choice_set(tuple(histo))] += count
    LOGGER.debug(
        "Enumerated rolls",
        extra={
            "stage": "distribution",
            "n_dice": n_dice,
            "n_rolls": n_faces**n_dice,
            "n_histograms": len(counts),
            "n_choice_sets": len(tally),
        },
    )
    return tuple(sorted(tally.items()))


def enumerate_choices(n_dice: int, n_faces: int = 6) -> RollDistribution:
    """Map each choice set reachable with ``n_dice`` dice to its probability.

    The empty choice set (:data:`BUST`) is present whenever busting is
    possible; probabilities sum to one.
    """
    norm = 1.0 / (n_faces**n_dice)
    return {choices: count * norm for choices, count in _choice_counts(n_dice, n_faces)}


def probability_of_bust(n_dice: int, n_faces: int = 6) -> float:
    """Probability that ``n_dice`` dice offer no scoring combination."""
    return enumerate_choices(n_dice, n_faces).get(BUST, 0.0)


def split_bust(distribution: RollDistribution) -> tuple[float, RollDistribution]:
    """Separate the bust mass from the scoring choice sets."""
    scoring = {choices: p for choices, p in distribution.items() if choices != BUST}
    return distribution.get(BUST, 0.0), scoring
