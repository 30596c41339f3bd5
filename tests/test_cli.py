"""Tests for the command-line entry point."""

import json
import sys
from pathlib import Path

import pytest

from chutes_ladders.__main__ import main


def run_cli(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["chutes_ladders", *argv])
    main()


def scripted_input(answers: list[str]):
    remaining = list(answers)

    def fake_input(prompt: str = "") -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return fake_input


# ── board / render ───────────────────────────────────────────────────

def test_board_command(monkeypatch, capsys):
    run_cli(monkeypatch, "board")
    out = capsys.readouterr().out
    assert "|100   |" in out
    assert "Ladders ^:" in out


def test_board_command_with_config(monkeypatch, capsys, tmp_path: Path):
    path = tmp_path / "small.json"
    path.write_text(json.dumps({"width": 4, "height": 3, "chutes": {"11": 2}, "ladders": {}}))

    run_cli(monkeypatch, "board", "--config", str(path))

    out = capsys.readouterr().out
    assert " 11v  " in out
    assert "Ladders ^: none" in out


def test_invalid_config_exits_1(monkeypatch, capsys, tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"ladders": {"16": 6}}))

    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "board", "--config", str(path))

    assert exc.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_render_command(monkeypatch, capsys, tmp_path: Path):
    out = tmp_path / "board.png"
    run_cli(monkeypatch, "render", "-o", str(out))
    assert out.exists()
    assert f"Board saved to {out}" in capsys.readouterr().out


def test_no_command_prints_help(monkeypatch, capsys):
    run_cli(monkeypatch)
    assert "usage:" in capsys.readouterr().out


# ── play ─────────────────────────────────────────────────────────────

def test_play_one_turn_then_quit(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", scripted_input(["", "q"]))

    run_cli(monkeypatch, "play", "--fast", "--seed", "7")

    out = capsys.readouterr().out
    assert "Sir Rowan's turn (not yet on the board)" in out
    assert "Sir Rowan rolled a" in out
    assert "Lady Isolde's turn" in out


def test_play_stops_at_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", scripted_input([]))
    run_cli(monkeypatch, "play", "--fast")
    assert "rolled" not in capsys.readouterr().out


def test_play_until_someone_wins(monkeypatch, capsys):
    # Enough Enters to finish any game; an empty answer declines the rematch.
    monkeypatch.setattr("builtins.input", scripted_input([""] * 2000))

    run_cli(monkeypatch, "play", "--fast", "--seed", "11")

    assert "wins!" in capsys.readouterr().out


def test_play_with_config(monkeypatch, capsys, tmp_path: Path):
    path = tmp_path / "pair.json"
    path.write_text(json.dumps({"players": [{"id": 1, "name": "Ann"}, {"id": 2, "name": "Bo"}]}))
    monkeypatch.setattr("builtins.input", scripted_input(["", "q"]))

    run_cli(monkeypatch, "play", "--config", str(path), "--fast", "--seed", "3", "-v")

    out = capsys.readouterr().out
    assert "Ann rolled a" in out
    assert "Bo's turn" in out


def test_render_with_short_config_flag(monkeypatch, capsys, tmp_path: Path):
    path = tmp_path / "small.json"
    path.write_text(json.dumps({"width": 4, "height": 3, "chutes": {"11": 2}, "ladders": {}}))
    out = tmp_path / "small.png"

    run_cli(monkeypatch, "render", "-c", str(path), "-o", str(out))

    assert out.exists()
