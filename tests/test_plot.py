"""Tests for chutes_ladders.plot (PNG board rendering)."""

from pathlib import Path

from chutes_ladders.board import Board, HazardTable
from chutes_ladders.config import DEFAULT_PLAYERS
from chutes_ladders.engine import GameState
from chutes_ladders.plot import render_board_image

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def test_render_empty_board(tmp_path: Path):
    out = tmp_path / "board.png"

    result = render_board_image(Board(), HazardTable(), output_path=out)

    assert result == str(out)
    assert out.read_bytes().startswith(PNG_MAGIC)


def test_render_with_tokens(tmp_path: Path):
    state = GameState.fresh(DEFAULT_PLAYERS)
    state.players[0].position = 38
    state.players[1].position = 0  # off board, not drawn
    out = tmp_path / "game.png"

    render_board_image(Board(), HazardTable(), state.snapshot(), output_path=out)

    assert out.exists()
    assert out.stat().st_size > 0


def test_render_small_board_without_hazards(tmp_path: Path):
    out = tmp_path / "small.png"
    render_board_image(
        Board(width=4, height=3),
        HazardTable(chutes={}, ladders={}),
        output_path=out,
        title="Tiny",
    )
    assert out.read_bytes().startswith(PNG_MAGIC)
