# src/mitraillette/cli/main.py
"""
Command line interface for the :mod:`mitraillette` package.

``choices`` lists roll distributions, ``ev`` tabulates optimal expected
values and ``win`` tabulates the probability of landing on the target score.
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from mitraillette import report
from mitraillette.config import AppConfig, apply_dot_overrides, load_app_config
from mitraillette.solver.solver import Solver
from mitraillette.utils.logging import configure_logging, parse_level

LOGGER = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser."""
    parser = argparse.ArgumentParser(prog="mitraillette")
    parser.add_argument("--config", type=Path, help="Path to YAML configuration")
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override configuration values, e.g. game.target_score=5000",
    )
    parser.add_argument("--log-level", default="WARNING", help="Root logging level")
    parser.add_argument("--log-file", type=Path, default=None, help="Also log to this file")

    sub = parser.add_subparsers(dest="command", required=True)

    choices_parser = sub.add_parser("choices", help="Show choice-set distributions")
    choices_parser.add_argument(
        "--dice", type=int, default=None, help="List every choice set for this many dice"
    )
    choices_parser.add_argument("--output", type=Path, help="Write the table to CSV")

    ev_parser = sub.add_parser("ev", help="Tabulate optimal expected values")
    ev_parser.add_argument("--long", action="store_true", help="Print the long-format table")
    ev_parser.add_argument("--output", type=Path, help="Write the long table to CSV")

    win_parser = sub.add_parser("win", help="Tabulate win probabilities")
    win_parser.add_argument(
        "--max-bound", type=int, default=None, help="Reroll bound (default: solver.win_max_bound)"
    )
    win_parser.add_argument("--output", type=Path, help="Write the long table to CSV")

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _emit(frame: pd.DataFrame, output: Path | None, float_format: str) -> None:
    if output is not None:
        report.write_table(frame, output)
    print(frame.to_string(float_format=float_format.format))


def _run_choices(cfg: AppConfig, args: argparse.Namespace) -> None:
    if args.dice is None:
        frame = report.choice_summary(Solver.from_config(cfg))
    else:
        if not 1 <= args.dice <= cfg.game.n_dice:
            raise SystemExit(f"--dice must be between 1 and {cfg.game.n_dice}")
        frame = report.choice_table(args.dice, cfg.game.n_faces)
    _emit(frame, args.output, "{:.6f}")


def _run_ev(cfg: AppConfig, args: argparse.Namespace) -> None:
    solver = Solver.from_config(cfg)
    frame = report.expected_value_table(
        solver, cfg.report.stakes, cfg.report.dice_counts, cfg.report.scores
    )
    if args.output is not None:
        report.write_table(frame, args.output)
    if args.long:
        print(frame.to_string(index=False, float_format=cfg.report.float_format.format))
        return
    for column in ("expected_value", "expected_gain"):
        print(f"\n{column}")
        wide = report.pivot_by_dice(frame, column)
        print(wide.to_string(float_format=cfg.report.float_format.format))


def _run_win(cfg: AppConfig, args: argparse.Namespace) -> None:
    if cfg.game.target_score is None:
        raise SystemExit("win probabilities need game.target_score")
    solver = Solver.from_config(cfg)
    frame = report.win_probability_table(
        solver, cfg.report.scores, cfg.report.stakes, cfg.report.dice_counts, args.max_bound
    )
    if args.output is not None:
        report.write_table(frame, args.output)
    print(report.pivot_by_dice(frame, "win_probability").to_string(float_format="{:.6f}".format))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the ``mitraillette`` CLI dispatcher."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=parse_level(args.log_level), log_file=args.log_file)

    overlays: list[Path] = [args.config] if args.config is not None else []
    cfg = load_app_config(*overlays) if overlays else AppConfig()
    cfg = apply_dot_overrides(cfg, list(args.overrides or []))

    LOGGER.info(
        "Configuration prepared",
        extra={
            "stage": "cli",
            "command": args.command,
            "config_path": str(args.config) if args.config is not None else None,
            "overrides": list(args.overrides or []),
            "target_score": cfg.game.target_score,
        },
    )

    if args.command == "choices":
        _run_choices(cfg, args)
    elif args.command == "ev":
        _run_ev(cfg, args)
    elif args.command == "win":
        _run_win(cfg, args)
    else:  # pragma: no cover - argparse enforces valid choices
        parser.error(f"Unknown command {args.command}")


if __name__ == "__main__":  # pragma: no cover
    main()
