from __future__ import annotations

import pytest
from helpers.config_factory import shared_solver
from hypothesis import given, settings
from hypothesis import strategies as st

from mitraillette.config import GameConfig, SolverConfig
from mitraillette.game.combinations import (
    CombinationKind,
    loose_singles,
    single_triple,
    straight,
)
from mitraillette.game.enumerator import BUST, choice_set, faces_to_counts
from mitraillette.solver.solver import ConvergenceError, Decision, Solver


# ---------------------------------------------------------------------------
# Bounded recursion
# ---------------------------------------------------------------------------


def test_bound_zero_one_die(uncapped_game: GameConfig) -> None:
    solver = Solver(uncapped_game)
    assert solver.solve(0, 0, 1, 0) == pytest.approx((100 + 50) / 6)
    assert solver.solve(0, 200, 1, 0) == pytest.approx((300 + 250) / 6)


def test_bound_zero_is_expected_best_single_bank(uncapped_game: GameConfig) -> None:
    solver = Solver(uncapped_game)
    for table in solver.tables:
        expected = sum(c.probability * c.max_value for c in table.choices)
        assert solver.solve(0, 0, table.n_dice, 0) == pytest.approx(expected)


@settings(max_examples=60, deadline=None)
@given(
    stake=st.integers(min_value=0, max_value=19).map(lambda k: 50 * k),
    n_dice=st.integers(min_value=1, max_value=6),
    bound=st.integers(min_value=0, max_value=5),
)
def test_extra_bound_never_hurts(stake: int, n_dice: int, bound: int) -> None:
    solver = shared_solver(1000)
    assert solver.solve(0, stake, n_dice, bound + 1) >= solver.solve(0, stake, n_dice, bound)


def test_memo_is_reused(small_solver: Solver) -> None:
    first = small_solver.solve(0, 0, 6, 3)
    size = small_solver.cache_size()
    assert small_solver.solve(0, 0, 6, 3) == first
    assert small_solver.cache_size() == size
    small_solver.clear_cache()
    assert small_solver.cache_size() == 0


# ---------------------------------------------------------------------------
# Bound-deepening
# ---------------------------------------------------------------------------


def test_convergence_from_an_empty_stake() -> None:
    solver = Solver(GameConfig(target_score=2000))
    trace = solver.convergence_trace(0, 6)
    assert len(trace) <= 42
    assert all(a <= b for a, b in zip(trace, trace[1:]))
    assert solver.expected_value(0, 6) == trace[-1]
    assert 0 < trace[-1] <= 2000


def test_forced_landing_near_target(small_solver: Solver) -> None:
    # only a lone five lands on 1000; a one overshoots and forfeits the stake
    assert small_solver.convergence_trace(950, 1) == pytest.approx([1000 / 6, 1000 / 6])
    assert small_solver.expected_value(950, 1) == pytest.approx(1000 / 6)
    assert small_solver.expected_gain(950, 1) == pytest.approx(1000 / 6 - 950)


def test_banked_score_limits_the_turn(small_solver: Solver) -> None:
    assert small_solver.expected_value(0, 1, score=900) == pytest.approx(25.0)


def test_score_and_target_trade_off() -> None:
    wide = Solver(GameConfig(target_score=1000))
    narrow = Solver(GameConfig(target_score=500))
    assert wide.expected_value(0, 4, score=500) == pytest.approx(narrow.expected_value(0, 4))


def test_should_roll(small_solver: Solver) -> None:
    assert small_solver.should_roll(0, 6)
    assert not small_solver.should_roll(950, 1)


def test_smaller_game_parameters() -> None:
    solver = Solver(GameConfig(n_dice=3, target_score=500))
    assert len(solver.tables) == 3
    assert 0 < solver.expected_value(0, 3) <= 500
    with pytest.raises(ValueError):
        solver.expected_value(0, 4)


def test_seven_faced_dice() -> None:
    game = GameConfig(
        n_faces=7, triple_values=(1000, 200, 300, 400, 500, 600, 700), target_score=500
    )
    solver = Solver(game)
    # six dice can never show seven distinct faces
    assert all(
        opt.combination.kind is not CombinationKind.STRAIGHT
        for table in solver.tables
        for choice in table.choices
        for opt in choice.options
    )
    assert solver.tables[0].bust_probability == pytest.approx(5 / 7)
    assert solver.solve(0, 0, 1, 0) == pytest.approx((100 + 50) / 7)
    assert 0 < solver.expected_value(0, 6) <= 500


def test_solve_ignores_banked_score_without_target(uncapped_game: GameConfig) -> None:
    solver = Solver(uncapped_game)
    value = solver.solve(0, 0, 2, 2)
    size = solver.cache_size()
    assert solver.solve(7500, 0, 2, 2) == value
    assert solver.cache_size() == size


def test_uncapped_game_ignores_banked_score() -> None:
    solver = shared_solver(None)
    trace = solver.convergence_trace(0, 6)
    assert len(trace) < 100
    assert all(a <= b for a, b in zip(trace, trace[1:]))
    for score in (0, 2500, 9000):
        assert solver.convergence_trace(0, 6, score=score) == trace
        assert solver.expected_value(0, 6, score=score) == trace[-1]

    choices = choice_set(faces_to_counts([1, 1, 1, 2, 3, 4]))
    assert solver.best_option(choices, 6, stake=0, score=9000) == solver.best_option(
        choices, 6, stake=0
    )


@pytest.mark.slow
def test_uncapped_game_matches_distant_target() -> None:
    uncapped = shared_solver(None).expected_value(0, 6)
    capped = shared_solver(10_000).expected_value(0, 6)
    assert uncapped == pytest.approx(capped, rel=1e-9)
    assert uncapped == pytest.approx(484.93, abs=0.01)


def test_max_bound_exhausted_raises() -> None:
    solver = Solver(GameConfig(target_score=2000), SolverConfig(max_bound=1))
    with pytest.raises(ConvergenceError):
        solver.expected_value(0, 6)


def test_time_limit_raises() -> None:
    solver = Solver(GameConfig(target_score=2000), SolverConfig(time_limit_s=0.0))
    with pytest.raises(ConvergenceError):
        solver.expected_value(0, 6)


@pytest.mark.parametrize("stake, n_dice", [(0, 0), (0, 7), (-50, 3)])
def test_invalid_states_rejected(small_solver: Solver, stake: int, n_dice: int) -> None:
    with pytest.raises(ValueError):
        small_solver.expected_value(stake, n_dice)


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


def test_straight_stop_value() -> None:
    solver = Solver(GameConfig(target_score=1500))
    choices = choice_set(faces_to_counts([1, 2, 3, 4, 5, 6]))
    decision = solver.best_option(choices, 6, stake=1000)
    assert decision.option is not None
    assert decision.option.combination == straight()
    assert not decision.reroll
    assert decision.value == 1500.0


def test_bust_and_overshoot_decisions(small_solver: Solver) -> None:
    assert small_solver.best_option(BUST, 1, stake=500) == Decision(None, False, 0.0)
    overshoot = small_solver.best_option((loose_singles(1, 0),), 1, stake=950)
    assert overshoot == Decision(None, False, 0.0)


def test_best_option_prefers_rerolling_small_stakes(small_solver: Solver) -> None:
    choices = choice_set(faces_to_counts([5, 2, 3, 4, 6, 6]))
    decision = small_solver.best_option(choices, 6, stake=0)
    assert decision.reroll
    assert decision.value == pytest.approx(small_solver.expected_value(50, 5))


def test_landing_triple_is_banked(small_solver: Solver) -> None:
    decision = small_solver.best_option((single_triple(0),), 3, stake=0)
    assert decision.option is not None
    assert not decision.reroll
    assert decision.value == 1000.0


@pytest.mark.slow
def test_full_game_converges() -> None:
    solver = Solver(GameConfig())
    trace = solver.convergence_trace(0, 6)
    assert len(trace) < 100
    assert solver.should_roll(0, 6)
