# src/mitraillette/solver/solver.py
"""Optimal stop-or-reroll policy by memoized bound-deepening.

High-level flow
---------------
* :meth:`Solver.solve` evaluates a state while allowing at most ``bound``
  further rerolls. For every scoring choice set of the current dice count it
  keeps the best of "bank the best combination and stop" and "bank some
  combination and reroll" (one bound less), then weights by the probability
  of facing that choice set. A bust contributes nothing.
* :meth:`Solver.expected_value` raises the bound from zero until two
  successive values agree. Extra lookahead can only help, so the sequence is
  non-decreasing, and the bust probability of every roll makes it converge.
* :meth:`Solver.win_probability` runs the same recursion with a 0/1 payoff
  (landing exactly on the target score). Winning lines can sit arbitrarily
  deep, so it stops at a caller-supplied bound.

A state is fully described by ``(score, stake, n_dice, bound)``. Results are
memoized per dice count and each key is written exactly once; the memo is
owned by the solver and is not safe to share between threads.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Callable, NamedTuple

from mitraillette.config import AppConfig, GameConfig, SolverConfig
from mitraillette.game.enumerator import ChoiceSet
from mitraillette.solver.tables import (
    ChoiceStats,
    Option,
    RollTable,
    annotate_choice,
    build_roll_tables,
)

LOGGER = logging.getLogger(__name__)

__all__ = ["ConvergenceError", "Decision", "Solver"]

MemoKey = tuple[int, int, int]  # (score, stake, bound)


class ConvergenceError(RuntimeError):
    """Bound-deepening ran out of bound or time before converging."""


class Decision(NamedTuple):
    """Best action after a roll.

    ``option`` is ``None`` when every combination overshoots the target
    score, i.e. the roll is as good as a bust.
    """

    option: Option | None
    reroll: bool
    value: float


class Solver:
    """Expected value and win probability under an optimal policy."""

    def __init__(self, game: GameConfig | None = None, settings: SolverConfig | None = None):
        self.game = game or GameConfig()
        self.settings = settings or SolverConfig()
        self.tables: tuple[RollTable, ...] = build_roll_tables(self.game)
        self._value_memo: list[dict[MemoKey, float]] = [{} for _ in self.tables]
        self._win_memo: list[dict[MemoKey, float]] = [{} for _ in self.tables]

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "Solver":
        return cls(cfg.game, cfg.solver)

    # ----------------------------- rules -----------------------------
    def _can_stop(self, score: int, stake: int, max_value: int) -> bool:
        """Stopping is illegal once the best combination overshoots the target."""
        target = self.game.target_score
        return target is None or score + stake + max_value <= target

    def _can_reroll(self, score: int, new_stake: int) -> bool:
        target = self.game.target_score
        return target is None or score + new_stake < target

    def _check_state(self, score: int, stake: int, n_dice: int) -> int:
        if not 1 <= n_dice <= self.game.n_dice:
            raise ValueError(f"n_dice must be between 1 and {self.game.n_dice}, got {n_dice}")
        if stake < 0 or score < 0:
            raise ValueError("stake and score must be non-negative")
        # without a cap the banked score cannot influence the policy
        return score if self.game.target_score is not None else 0

    # ----------------------------- bounded recursion -----------------------------
    def solve(self, score: int, stake: int, n_dice: int, bound: int) -> float:
        """Expected banked stake when rolling ``n_dice`` with at most ``bound`` rerolls."""
        if self.game.target_score is None:
            score = 0
        memo = self._value_memo[n_dice - 1]
        key = (score, stake, bound)
        cached = memo.get(key)
        if cached is not None:
            return cached

        value = 0.0
        for choice in self.tables[n_dice - 1].choices:
            best = 0.0
            if self._can_stop(score, stake, choice.max_value):
                best = float(stake + choice.max_value)
            if bound > 0:
                for option in choice.options:
                    new_stake = stake + option.value
                    if not self._can_reroll(score, new_stake):
                        continue
                    best = max(best, self.solve(score, new_stake, option.reroll_dice, bound - 1))
            value += best * choice.probability

        assert key not in memo, f"memo key {key} for {n_dice} dice computed twice"
        memo[key] = value
        return value

    def solve_win(self, score: int, stake: int, n_dice: int, bound: int) -> float:
        """Probability of landing exactly on the target with at most ``bound`` rerolls."""
        target = self.game.target_score
        assert target is not None
        memo = self._win_memo[n_dice - 1]
        key = (score, stake, bound)
        cached = memo.get(key)
        if cached is not None:
            return cached

        probability = 0.0
        for choice in self.tables[n_dice - 1].choices:
            best = 1.0 if score + stake + choice.max_value == target else 0.0
            if bound > 0 and best < 1.0:
                for option in choice.options:
                    new_stake = stake + option.value
                    if not self._can_reroll(score, new_stake):
                        continue
                    reached = self.solve_win(score, new_stake, option.reroll_dice, bound - 1)
                    best = max(best, reached)
            probability += best * choice.probability

        assert key not in memo, f"win memo key {key} for {n_dice} dice computed twice"
        memo[key] = probability
        return probability

    # ----------------------------- deepening -----------------------------
    def _deepen(self, evaluate: Callable[[int], float], state: dict[str, int]) -> list[float]:
        """Evaluate bounds 0, 1, 2, ... until two successive values agree."""
        tol = self.settings.tolerance
        limit = self.settings.time_limit_s
        start = time.perf_counter()
        trace: list[float] = []
        for bound in range(self.settings.max_bound + 1):
            value = evaluate(bound)
            LOGGER.debug(
                "Deepening step",
                extra={"stage": "solver", "bound": bound, "value": value, **state},
            )
            if trace:
                assert value >= trace[-1], f"bounded values decreased: {trace[-1]} -> {value}"
                if math.isclose(value, trace[-1], rel_tol=tol, abs_tol=tol):
                    trace.append(value)
                    LOGGER.info(
                        "Converged",
                        extra={"stage": "solver", "bound": bound, "value": value, **state},
                    )
                    return trace
            trace.append(value)
            if limit is not None and time.perf_counter() - start > limit:
                raise ConvergenceError(
                    f"no convergence for {state} within {limit:.1f} s (reached bound {bound})"
                )
        raise ConvergenceError(
            f"no convergence for {state} within {self.settings.max_bound} rerolls"
        )

    def convergence_trace(self, stake: int, n_dice: int, score: int = 0) -> list[float]:
        """Bounded expected values from bound 0 up to convergence."""
        score = self._check_state(score, stake, n_dice)
        return self._deepen(
            lambda bound: self.solve(score, stake, n_dice, bound),
            {"score": score, "stake": stake, "n_dice": n_dice},
        )

    def expected_value(self, stake: int, n_dice: int, score: int = 0) -> float:
        """Expected banked stake of rolling ``n_dice`` dice with ``stake`` at risk.

        ``score`` (points banked on earlier turns) only matters when the game
        has a target score.
        """
        return self.convergence_trace(stake, n_dice, score)[-1]

    def expected_gain(self, stake: int, n_dice: int, score: int = 0) -> float:
        """How much rolling adds, on average, to the current ``stake``."""
        return self.expected_value(stake, n_dice, score) - stake

    def should_roll(self, stake: int, n_dice: int, score: int = 0) -> bool:
        """``True`` when rolling beats banking ``stake`` right now."""
        return self.expected_value(stake, n_dice, score) > stake

    def win_probability(
        self, score: int, stake: int, n_dice: int, max_bound: int | None = None
    ) -> float:
        """Probability of ending exactly on the target score this turn.

        The result is exact only if the deepening settles before
        ``max_bound`` (default ``settings.win_max_bound``); otherwise it is
        the under-estimate obtained at ``max_bound``.
        """
        if self.game.target_score is None:
            raise ValueError("win_probability needs a game with a target_score")
        self._check_state(score, stake, n_dice)
        if max_bound is None:
            max_bound = self.settings.win_max_bound

        previous = 0.0
        for bound in range(max_bound):
            probability = self.solve_win(score, stake, n_dice, bound)
            assert probability >= previous, f"win probability fell: {previous} -> {probability}"
            tol = self.settings.tolerance
            if probability > 0.0 and math.isclose(probability, previous, rel_tol=tol, abs_tol=tol):
                LOGGER.info(
                    "Win probability settled",
                    extra={
                        "stage": "solver",
                        "bound": bound,
                        "score": score,
                        "stake": stake,
                        "n_dice": n_dice,
                        "probability": probability,
                    },
                )
                return probability
            previous = probability
        return self.solve_win(score, stake, n_dice, max_bound)

    # ----------------------------- policy -----------------------------
    def best_option(self, choices: ChoiceSet, n_dice: int, stake: int, score: int = 0) -> Decision:
        """Optimal action for a concrete roll of ``n_dice`` offering ``choices``."""
        score = self._check_state(score, stake, n_dice)
        if not choices:
            return Decision(option=None, reroll=False, value=0.0)
        annotated: ChoiceStats = annotate_choice(choices, 1.0, n_dice, self.game)

        best = Decision(option=None, reroll=False, value=0.0)
        if self._can_stop(score, stake, annotated.max_value):
            top = max(annotated.options, key=lambda opt: opt.value)
            best = Decision(option=top, reroll=False, value=float(stake + top.value))
        for option in annotated.options:
            new_stake = stake + option.value
            if not self._can_reroll(score, new_stake):
                continue
            value = self.expected_value(new_stake, option.reroll_dice, score)
            if value > best.value:
                best = Decision(option=option, reroll=True, value=value)
        return best

    # ----------------------------- cache -----------------------------
    def cache_size(self) -> int:
        """Number of memoized states across all dice counts and payoffs."""
        return sum(len(m) for m in self._value_memo) + sum(len(m) for m in self._win_memo)

    def clear_cache(self) -> None:
        for memo in (*self._value_memo, *self._win_memo):
            memo.clear()
