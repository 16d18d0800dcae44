# src/mitraillette/solver/tables.py
"""Per-dice-count statistics the solver iterates over.

For every dice count the scoring choice sets are annotated once with what
the solver needs at each node: the value of each option, how many dice are
rerolled after banking it and the best value available in the set.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from mitraillette.config import GameConfig
from mitraillette.game.combinations import Combination
from mitraillette.game.distribution import enumerate_choices, split_bust
from mitraillette.game.enumerator import ChoiceSet
from mitraillette.utils.timing import time_block

LOGGER = logging.getLogger(__name__)

__all__ = [
    "Option",
    "ChoiceStats",
    "RollTable",
    "reroll_dice",
    "annotate_choice",
    "build_roll_tables",
]


class Option(NamedTuple):
    """A combination the player may bank, with its consequences."""

    combination: Combination
    value: int
    reroll_dice: int


class ChoiceStats(NamedTuple):
    """A scoring choice set and the probability of facing it."""

    options: tuple[Option, ...]
    probability: float
    max_value: int


class RollTable(NamedTuple):
    """Everything known about rolling ``n_dice`` dice."""

    n_dice: int
    bust_probability: float
    choices: tuple[ChoiceStats, ...]


def reroll_dice(n_dice: int, cost: int, pool_size: int = 6) -> int:
    """Dice in hand after banking ``cost`` of ``n_dice`` dice (hot dice -> full pool)."""
    remaining = n_dice - cost
    assert remaining >= 0, f"combination uses {cost} dice but only {n_dice} were rolled"
    return pool_size if remaining == 0 else remaining


def annotate_choice(
    choices: ChoiceSet, probability: float, n_dice: int, game: GameConfig
) -> ChoiceStats:
    """Wrap each combination of ``choices`` into an :class:`Option`."""
    options = tuple(
        Option(
            combination=comb,
            value=comb.value(game),
            reroll_dice=reroll_dice(n_dice, comb.dice_cost(), game.n_dice),
        )
        for comb in choices
    )
    return ChoiceStats(
        options=options,
        probability=probability,
        max_value=max(opt.value for opt in options),
    )


def _build_roll_table(n_dice: int, game: GameConfig) -> RollTable:
    bust, scoring = split_bust(enumerate_choices(n_dice, game.n_faces))
    choices = tuple(annotate_choice(cs, p, n_dice, game) for cs, p in scoring.items())
    return RollTable(n_dice=n_dice, bust_probability=bust, choices=choices)


def build_roll_tables(game: GameConfig) -> tuple[RollTable, ...]:
    """Return one :class:`RollTable` per dice count, indexed by ``n_dice - 1``."""
    with time_block("build_roll_tables", LOGGER):
        tables = tuple(_build_roll_table(n, game) for n in range(1, game.n_dice + 1))
    for table in tables:
        LOGGER.debug(
            "Roll table ready",
            extra={
                "stage": "tables",
                "n_dice": table.n_dice,
                "n_choice_sets": len(table.choices),
                "bust_probability": table.bust_probability,
            },
        )
    return tables
