from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

import mitraillette.cli.main as cli_main


@pytest.fixture(autouse=True)
def _no_configure_logging(monkeypatch):
    monkeypatch.setattr(cli_main, "configure_logging", lambda **kwargs: None)


SMALL = ["--set", "game.target_score=1000"]


def test_choices_summary(capsys) -> None:
    cli_main.main([*SMALL, "choices"])
    out = capsys.readouterr().out
    assert "bust_probability" in out
    assert "0.666667" in out


def test_choices_for_one_die(tmp_path: Path, capsys) -> None:
    output = tmp_path / "choices.csv"
    cli_main.main(["choices", "--dice", "1", "--output", str(output)])
    assert "1x5" in capsys.readouterr().out
    assert len(pd.read_csv(output)) == 2


def test_choices_rejects_bad_dice() -> None:
    with pytest.raises(SystemExit):
        cli_main.main(["choices", "--dice", "9"])


def test_ev_tables(tmp_path: Path, capsys) -> None:
    output = tmp_path / "ev.csv"
    cli_main.main(
        [
            *SMALL,
            "--set",
            "report.stakes=0,950",
            "--set",
            "report.dice_counts=1,2",
            "ev",
            "--output",
            str(output),
        ]
    )
    out = capsys.readouterr().out
    assert "expected_value" in out
    assert "expected_gain" in out
    assert "166.67" in out
    frame = pd.read_csv(output)
    assert set(frame["decision"]) <= {"roll", "stop"}
    assert len(frame) == 4


def test_ev_long_format(capsys) -> None:
    cli_main.main(
        [*SMALL, "--set", "report.stakes=950", "--set", "report.dice_counts=1", "ev", "--long"]
    )
    out = capsys.readouterr().out
    assert "decision" in out
    assert "stop" in out


def test_win_table(capsys) -> None:
    cli_main.main(
        [
            *SMALL,
            "--set",
            "report.scores=900",
            "--set",
            "report.stakes=50",
            "--set",
            "report.dice_counts=1",
            "win",
            "--max-bound",
            "5",
        ]
    )
    assert "0.166667" in capsys.readouterr().out


def test_win_needs_target() -> None:
    with pytest.raises(SystemExit):
        cli_main.main(["--set", "game.target_score=none", "win"])


def test_config_file(tmp_path: Path, capsys) -> None:
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("game.target_score: 1000\nreport:\n  stakes: [950]\n  dice_counts: [1]\n")
    cli_main.main(["--config", str(cfg), "ev", "--long"])
    assert "166.67" in capsys.readouterr().out


def test_missing_command_exits() -> None:
    with pytest.raises(SystemExit):
        cli_main.main([])
