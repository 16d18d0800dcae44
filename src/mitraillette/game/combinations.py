# src/mitraillette/game/combinations.py
"""Scoring combinations of the Mitraillette rules.

A :class:`Combination` is one way of reading (part of) a roll that the player
may bank. It is a hashable, orderable ``NamedTuple`` tagged by
:class:`CombinationKind` so that choice sets built from it can be sorted into
a canonical form. Face indices are zero based (``ONE`` is ``0``, ``FIVE`` is
``4``).
"""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

from mitraillette.config import GameConfig

__all__ = [
    "ONE",
    "FIVE",
    "DEFAULT_GAME",
    "CombinationKind",
    "Combination",
    "straight",
    "three_pairs",
    "double_triple",
    "single_triple",
    "loose_singles",
    "value_of",
    "dice_cost",
]

ONE: int = 0
FIVE: int = 4

DEFAULT_GAME = GameConfig()


class CombinationKind(IntEnum):
    """Tag of a scoring combination; also its rank in a sorted choice set."""

    STRAIGHT = 0
    THREE_PAIRS = 1
    DOUBLE_TRIPLE = 2
    SINGLE_TRIPLE = 3
    LOOSE_SINGLES = 4


class Combination(NamedTuple):
    """A scoring combination the player may bank.

    Only the fields relevant to ``kind`` are meaningful; the rest keep their
    defaults so that equal combinations compare and hash equal.
    """

    kind: CombinationKind
    faces: tuple[int, ...] = ()
    ones: int = 0
    fives: int = 0

    def value(self, game: GameConfig = DEFAULT_GAME) -> int:
        """Points scored when banking this combination."""
        return value_of(self, game)

    def dice_cost(self) -> int:
        """Number of dice consumed when banking this combination."""
        return dice_cost(self)

    def describe(self) -> str:
        """Human readable label, faces shown 1-based."""
        kind = self.kind
        if kind is CombinationKind.STRAIGHT:
            return "straight"
        if kind is CombinationKind.THREE_PAIRS:
            return "three pairs"
        if kind is CombinationKind.DOUBLE_TRIPLE:
            a, b = self.faces
            return f"triples {a + 1}+{b + 1}"
        singles = _describe_singles(self.ones, self.fives)
        if kind is CombinationKind.SINGLE_TRIPLE:
            label = f"triple {self.faces[0] + 1}"
            return f"{label} + {singles}" if singles else label
        return singles


def _describe_singles(ones: int, fives: int) -> str:
    parts = []
    if ones:
        parts.append(f"{ones}x1")
    if fives:
        parts.append(f"{fives}x5")
    return " ".join(parts)


# --------------------------------------------------------------------------- #
# Constructors
# --------------------------------------------------------------------------- #


def straight() -> Combination:
    return Combination(CombinationKind.STRAIGHT)


def three_pairs() -> Combination:
    return Combination(CombinationKind.THREE_PAIRS)


def double_triple(face_a: int, face_b: int) -> Combination:
    """Two triples; faces must already be in non-decreasing order."""
    assert face_a <= face_b, f"double triple faces out of order: {face_a} > {face_b}"
    return Combination(CombinationKind.DOUBLE_TRIPLE, faces=(face_a, face_b))


def single_triple(face: int, ones: int = 0, fives: int = 0) -> Combination:
    return Combination(CombinationKind.SINGLE_TRIPLE, faces=(face,), ones=ones, fives=fives)


def loose_singles(ones: int, fives: int = 0) -> Combination:
    assert ones + fives > 0, "loose singles must use at least one die"
    return Combination(CombinationKind.LOOSE_SINGLES, ones=ones, fives=fives)


# --------------------------------------------------------------------------- #
# Value and cost
# --------------------------------------------------------------------------- #


def value_of(combination: Combination, game: GameConfig = DEFAULT_GAME) -> int:
    """Return the points ``combination`` is worth under ``game``'s rules.

    An out-of-range face index raises ``IndexError``; combinations are only
    built by the enumerator, so that is a programming error.
    """
    kind = combination.kind
    singles = combination.ones * game.single_one_value + combination.fives * game.single_five_value
    if kind is CombinationKind.STRAIGHT:
        return game.straight_value
    if kind is CombinationKind.THREE_PAIRS:
        return game.three_pairs_value
    if kind is CombinationKind.DOUBLE_TRIPLE:
        a, b = combination.faces
        return game.triple_values[a] + game.triple_values[b]
    if kind is CombinationKind.SINGLE_TRIPLE:
        return game.triple_values[combination.faces[0]] + singles
    return singles


def dice_cost(combination: Combination) -> int:
    """Return how many dice banking ``combination`` consumes."""
    kind = combination.kind
    if kind in (
        CombinationKind.STRAIGHT,
        CombinationKind.THREE_PAIRS,
        CombinationKind.DOUBLE_TRIPLE,
    ):
        return 6
    if kind is CombinationKind.SINGLE_TRIPLE:
        return 3 + combination.ones + combination.fives
    return combination.ones + combination.fives
