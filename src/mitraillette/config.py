# src/mitraillette/config.py
"""Configuration schemas and helpers for the Mitraillette solver.

Defines dataclasses describing the game rules, the solver's convergence
budget and the reporting grid, and includes utilities for loading YAML
overlays and applying ``section.option=value`` overrides from the CLI.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, get_args, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

# ─────────────────────────────────────────────────────────────────────────────
# Dataclasses (schema)
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class GameConfig:
    """Rules of the game: dice pool, combination values and score cap.

    Face indices are zero based: index ``0`` is the face "one" and index ``4``
    the face "five". ``triple_values[i]`` is the value of three dice showing
    face ``i``.
    """

    n_faces: int = 6
    n_dice: int = 6
    triple_values: tuple[int, ...] = (1000, 200, 300, 400, 500, 600)
    single_one_value: int = 100
    single_five_value: int = 50
    straight_value: int = 500
    three_pairs_value: int = 500
    target_score: int | None = 10_000
    """Score that ends the game. ``None`` removes the cap entirely."""

    def __post_init__(self) -> None:
        self.triple_values = tuple(int(v) for v in self.triple_values)
        if self.n_faces < 6:
            # a straight is one die of each of six faces and costs a full pool
            raise ValueError("n_faces must be at least 6")
        if len(self.triple_values) != self.n_faces:
            raise ValueError(
                f"triple_values needs one entry per face, got {len(self.triple_values)} "
                f"for {self.n_faces} faces"
            )
        if not 1 <= self.n_dice <= 6:
            raise ValueError("n_dice must be between 1 and 6")
        if self.target_score is not None and self.target_score <= 0:
            raise ValueError("target_score must be positive or None")


@dataclass
class SolverConfig:
    """Convergence budget for bound-deepening."""

    tolerance: float = 1e-12
    """Relative and absolute tolerance between successive bounded values."""
    max_bound: int = 200
    """Deepest reroll bound tried before giving up on convergence."""
    time_limit_s: float | None = None
    """Optional wall-clock budget for a single deepening loop."""
    win_max_bound: int = 20
    """Default reroll bound for win probabilities (under-estimate beyond it)."""


@dataclass
class ReportConfig:
    """Grid of states the CLI tabulates."""

    stakes: list[int] = field(default_factory=lambda: list(range(0, 3001, 250)))
    scores: list[int] = field(default_factory=lambda: [0])
    dice_counts: list[int] = field(default_factory=lambda: [1, 2, 3, 4, 5, 6])
    float_format: str = "{:.2f}"


@dataclass
class AppConfig:
    """Top-level configuration container."""

    game: GameConfig = field(default_factory=GameConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


# ─────────────────────────────────────────────────────────────────────────────
# Loader (one or more YAML overlays; dotted keys allowed)
# ─────────────────────────────────────────────────────────────────────────────


def expand_dotted_keys(mapping: Mapping[str, Any]) -> dict[str, Any]:
    """Turn ``{"game.n_dice": 5}`` into ``{"game": {"n_dice": 5}}``."""
    result: dict[str, Any] = {}
    for raw_key, raw_value in mapping.items():
        value = expand_dotted_keys(raw_value) if isinstance(raw_value, Mapping) else raw_value
        parts = [p for p in str(raw_key).split(".") if p]
        if not parts:
            continue
        target = result
        for part in parts[:-1]:
            nested = target.setdefault(part, {})
            if not isinstance(nested, dict):
                raise TypeError(f"Cannot expand dotted key {raw_key!r}; {part!r} is not a mapping")
            target = nested
        leaf = parts[-1]
        if isinstance(target.get(leaf), dict) and isinstance(value, dict):
            target[leaf].update(value)
        else:
            target[leaf] = value
    return result


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``overlay`` onto ``base`` and return a new mapping."""
    result: dict[str, Any] = dict(base)
    for key, val in overlay.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(val, Mapping):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _annotation_contains(annotation: Any, target: type) -> bool:
    """Recursively inspect type annotations for the presence of ``target``."""
    if annotation is None:
        return False
    if annotation is target:
        return True
    origin = get_origin(annotation)
    if origin is None:
        return False
    if origin is target:
        return True
    return any(_annotation_contains(arg, target) for arg in get_args(annotation))


def _build(cls: Any, section: Mapping[str, Any]) -> Any:
    """Instantiate the dataclass ``cls`` from a mapping of attributes."""
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(section) - known
    if unknown:
        raise KeyError(f"Unknown option(s) for {cls.__name__}: {sorted(unknown)}")
    kwargs = dict(section)
    type_hints = get_type_hints(cls)
    for name, val in kwargs.items():
        if _annotation_contains(type_hints.get(name), tuple) and isinstance(val, list):
            kwargs[name] = tuple(val)
    return cls(**kwargs)


def load_app_config(*overlays: Path) -> AppConfig:
    """Deterministically merge one or more YAML overlays into an :class:`AppConfig`.

    Files are read in the order provided, dotted keys are expanded, and later
    overlays always win.
    """
    data: dict[str, Any] = {}
    for path in overlays:
        with Path(path).open("r", encoding="utf-8") as fh:
            overlay = yaml.safe_load(fh) or {}
        if not isinstance(overlay, Mapping):
            raise TypeError(f"Config file {path} must contain a mapping")
        data = _deep_merge(data, expand_dotted_keys(overlay))

    unknown = set(data) - {f.name for f in dataclasses.fields(AppConfig)}
    if unknown:
        raise KeyError(f"Unknown config section(s): {sorted(unknown)}")

    return AppConfig(
        game=_build(GameConfig, data.get("game", {})),
        solver=_build(SolverConfig, data.get("solver", {})),
        report=_build(ReportConfig, data.get("report", {})),
    )


def _coerce(value: str, current: Any, annotation: Any | None = None) -> Any:
    """Coerce the CLI string ``value`` to the type of ``current``."""
    if value.lower() in {"none", "null"} and _annotation_contains(annotation, type(None)):
        return None
    if isinstance(current, bool) or _annotation_contains(annotation, bool):
        val_lower = value.lower()
        if val_lower in {"1", "true", "yes", "on"}:
            return True
        if val_lower in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"Cannot parse boolean value from {value!r}")
    if isinstance(current, (list, tuple)) or _annotation_contains(annotation, list):
        items = [v for v in value.replace(" ", "").split(",") if v]
        parsed = [int(v) for v in items]
        return tuple(parsed) if isinstance(current, tuple) else parsed
    if isinstance(current, int) or _annotation_contains(annotation, int):
        return int(value)
    if isinstance(current, float) or _annotation_contains(annotation, float):
        return float(value)
    return value


def apply_dot_overrides(cfg: AppConfig, pairs: list[str]) -> AppConfig:
    """Apply ``section.option=value`` overrides to *cfg*.

    Sections are re-validated after all overrides are applied.
    """
    touched: set[str] = set()
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid override {pair!r}")
        key, raw = pair.split("=", 1)
        if "." not in key:
            raise ValueError(f"Invalid override {pair!r}")
        section_name, option = key.split(".", 1)
        section = getattr(cfg, section_name)
        if not hasattr(section, option):
            raise AttributeError(f"Unknown option {option!r} in section {section_name!r}")
        annotation = get_type_hints(type(section)).get(option)
        setattr(section, option, _coerce(raw, getattr(section, option), annotation))
        touched.add(section_name)

    for section_name in touched:
        section = getattr(cfg, section_name)
        if hasattr(section, "__post_init__"):
            section.__post_init__()
    return cfg


__all__ = [
    "GameConfig",
    "SolverConfig",
    "ReportConfig",
    "AppConfig",
    "expand_dotted_keys",
    "load_app_config",
    "apply_dot_overrides",
]
