"""Game model: combinations, roll enumeration and choice-set distributions."""

from __future__ import annotations

from .combinations import Combination, CombinationKind, dice_cost, value_of
from .distribution import enumerate_choices, probability_of_bust
from .enumerator import BUST, ChoiceSet, choice_set, enumerate_combinations

__all__ = [
    "BUST",
    "ChoiceSet",
    "Combination",
    "CombinationKind",
    "choice_set",
    "dice_cost",
    "enumerate_choices",
    "enumerate_combinations",
    "probability_of_bust",
    "value_of",
]
