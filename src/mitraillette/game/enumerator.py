# src/mitraillette/game/enumerator.py
"""Enumerate the combinations a player can rationally choose from a roll.

The enumerator works on a roll's histogram (:data:`FaceCounts`) and applies
two pruning rules that keep the choice space small:

* a five is never taken before every eligible one has been taken;
* three ones (or fives) are always read as a triple, never as singles.

Both are policy choices rather than proven-optimal pruning: a rare but
rational line such as keeping a lone five while rerolling a one is not
offered.
"""

from __future__ import annotations

import functools
from typing import Sequence

from mitraillette.game.combinations import (
    FIVE,
    ONE,
    Combination,
    CombinationKind,
    double_triple,
    loose_singles,
    single_triple,
    straight,
    three_pairs,
)
from mitraillette.utils.types import FaceCounts

__all__ = [
    "ChoiceSet",
    "BUST",
    "faces_to_counts",
    "enumerate_combinations",
    "canonical_choice_set",
    "choice_set",
]

ChoiceSet = tuple[Combination, ...]
"""Sorted, duplicate-free combinations offered by one roll."""

BUST: ChoiceSet = ()


def faces_to_counts(faces: Sequence[int], n_faces: int = 6) -> FaceCounts:
    """Convert 1-based dice faces to a histogram tuple.

    Raises
    ------
    ValueError:
        If any face value is outside the ``1``-``n_faces`` range.
    """
    if not all(1 <= f <= n_faces for f in faces):
        raise ValueError(f"dice faces must be between 1 and {n_faces}")
    counts = [0] * n_faces
    for f in faces:
        counts[f - 1] += 1
    return tuple(counts)


def enumerate_combinations(counts: FaceCounts) -> list[Combination]:
    """Return every non-dominated combination readable from ``counts``.

    The result may contain duplicates and is not ordered; use
    :func:`choice_set` for the canonical form.
    """
    choices: list[Combination] = []

    if all(c == 1 for c in counts):
        choices.append(straight())

    if sum(c // 2 for c in counts) == 3:
        choices.append(three_pairs())

    for face, count in enumerate(counts):
        if count < 3:
            continue
        choices.append(single_triple(face))

        without_triple = list(counts)
        without_triple[face] -= 3
        for inner in enumerate_combinations(tuple(without_triple)):
            if inner.kind is CombinationKind.SINGLE_TRIPLE and not (inner.ones or inner.fives):
                if inner.faces[0] < face:
                    continue  # emitted when that face was processed
                choices.append(double_triple(face, inner.faces[0]))
            elif inner.kind is CombinationKind.LOOSE_SINGLES:
                choices.append(single_triple(face, inner.ones, inner.fives))
            else:
                raise AssertionError(f"unexpected combination after removing a triple: {inner}")

    eligible_ones = counts[ONE] % 3
    for ones in range(1, eligible_ones + 1):
        choices.append(loose_singles(ones, 0))
    for fives in range(1, counts[FIVE] % 3 + 1):
        choices.append(loose_singles(eligible_ones, fives))

    return choices


def canonical_choice_set(combinations: Sequence[Combination]) -> ChoiceSet:
    """Sort and deduplicate ``combinations`` into a :data:`ChoiceSet`."""
    return tuple(sorted(set(combinations)))


@functools.lru_cache(maxsize=4096)
def choice_set(counts: FaceCounts) -> ChoiceSet:
    """Canonical choice set offered by a roll with histogram ``counts``."""
    return canonical_choice_set(enumerate_combinations(tuple(counts)))
