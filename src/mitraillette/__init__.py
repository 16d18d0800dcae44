# src/mitraillette/__init__.py
"""Mitraillette - exact optimal-policy analysis of a bust-or-bank dice game.

The friendly surface (:class:`Solver`, :func:`enumerate_choices`, ...) is
loaded lazily so that importing a light helper such as
:mod:`mitraillette.config` does not pull in NumPy, Numba or pandas.
"""

from __future__ import annotations

import tomllib
from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _v
from pathlib import Path

# Path to the project's pyproject.toml for local version fallback
PYPROJECT_TOML = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

__all__ = [  # loads lazily, that's why reportUnsupportedDunderAll is triggered
    "Solver",  # pyright: ignore[reportUnsupportedDunderAll]
    "ConvergenceError",  # pyright: ignore[reportUnsupportedDunderAll]
    "Combination",  # pyright: ignore[reportUnsupportedDunderAll]
    "enumerate_choices",  # pyright: ignore[reportUnsupportedDunderAll]
    "probability_of_bust",  # pyright: ignore[reportUnsupportedDunderAll]
    "value_of",  # pyright: ignore[reportUnsupportedDunderAll]
    "dice_cost",  # pyright: ignore[reportUnsupportedDunderAll]
    "GameConfig",  # pyright: ignore[reportUnsupportedDunderAll]
    "SolverConfig",  # pyright: ignore[reportUnsupportedDunderAll]
]

_LAZY_IMPORTS = {
    "Solver": "mitraillette.solver.solver",
    "ConvergenceError": "mitraillette.solver.solver",
    "Combination": "mitraillette.game.combinations",
    "enumerate_choices": "mitraillette.game.distribution",
    "probability_of_bust": "mitraillette.game.distribution",
    "value_of": "mitraillette.game.combinations",
    "dice_cost": "mitraillette.game.combinations",
    "GameConfig": "mitraillette.config",
    "SolverConfig": "mitraillette.config",
}


def __getattr__(name: str):  # pragma: no cover - simple dynamic loader
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(module_name)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


def _read_version_from_toml() -> str:
    """Return the package version declared in ``pyproject.toml``."""
    with PYPROJECT_TOML.open("rb") as fh:
        data = tomllib.load(fh)
    return data["project"]["version"]


try:
    __version__ = _v("mitraillette")
except PackageNotFoundError:
    __version__ = _read_version_from_toml()
