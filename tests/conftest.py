# pragma: no cover
import logging
import sys
from pathlib import Path
from typing import Generator

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists():
    sys.path.insert(0, str(SRC_PATH))
TEST_PATH = PROJECT_ROOT / "tests"
if TEST_PATH.exists():
    sys.path.insert(0, str(TEST_PATH))

from mitraillette.config import GameConfig  # noqa: E402
from mitraillette.solver.solver import Solver  # noqa: E402


@pytest.fixture
def uncapped_game() -> GameConfig:
    """Default rules without a target score."""
    return GameConfig(target_score=None)


@pytest.fixture
def small_game() -> GameConfig:
    """Default rules with a 1000-point target, cheap to solve exactly."""
    return GameConfig(target_score=1000)


@pytest.fixture
def small_solver(small_game: GameConfig) -> Solver:
    return Solver(small_game)


@pytest.fixture
def preserve_root_logger() -> Generator[None, None, None]:
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.setLevel(level)
    root.handlers[:] = handlers


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--runslow", action="store_true", default=False, help="run tests marked slow"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--runslow"):
        return
    skip_slow = pytest.mark.skip(reason="needs --runslow")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)
