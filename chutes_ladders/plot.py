"""Render the board, tokens and chute/ladder overlays to a PNG."""

from __future__ import annotations

from pathlib import Path

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Rectangle

from chutes_ladders.board import Board, HazardTable
from chutes_ladders.engine import GameSnapshot
from chutes_ladders.render import Box, connectors

SQUARE_LIGHT = "#F4E9D8"
SQUARE_DARK = "#E6D5B8"
CHUTE_COLOR = "#B5452F"
LADDER_COLOR = "#4E7A3A"
PLAYER_COLORS = ("#F28C28", "#E75480")  # tangerine, pink


def render_board_image(
    board: Board,
    hazards: HazardTable,
    snapshot: GameSnapshot | None = None,
    output_path: Path | str = "board.png",
    title: str = "Chutes & Ladders",
) -> str:
    """Draw the board as a PNG and return the path written.

    Connector overlays are placed from the rendered square patches, so a
    square that failed to render just loses its overlay.
    """
    fig, ax = plt.subplots(figsize=(board.width * 0.8, board.height * 0.8 + 0.6))

    boxes: dict[int, Box] = {}
    for row, squares in enumerate(board.rows()):
        for col, square in enumerate(squares):
            shade = SQUARE_LIGHT if (row + col) % 2 == 0 else SQUARE_DARK
            patch = Rectangle((col, row), 1, 1, facecolor=shade, edgecolor="#3A342E", linewidth=0.8)
            ax.add_patch(patch)
            boxes[square] = Box(patch.get_x(), patch.get_y(), patch.get_width(), patch.get_height())
            ax.text(col + 0.08, row + 0.22, str(square), fontsize=7, color="#3A342E")

    for conn in connectors(hazards, boxes, Box(0, 0, board.width, board.height)):
        color = LADDER_COLOR if conn.kind == "ladder" else CHUTE_COLOR
        ax.annotate(
            "",
            xy=conn.end_point,
            xytext=(conn.left, conn.top),
            arrowprops={"arrowstyle": "->", "color": color, "lw": 2.2, "alpha": 0.8},
        )

    if snapshot is not None:
        for idx, player in enumerate(snapshot.players):
            box = boxes.get(player.position)
            if box is None:  # off the board
                continue
            cx, cy = box.center
            offset = -0.18 if idx == 0 else 0.18
            ax.add_patch(Circle(
                (cx + offset, cy + 0.12), 0.17,
                facecolor=PLAYER_COLORS[idx % len(PLAYER_COLORS)],
                edgecolor="white", linewidth=1.5, zorder=5,
            ))

    ax.set_xlim(0, board.width)
    ax.set_ylim(board.height, 0)  # row 0 on top
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(title, fontsize=14, fontweight="bold")

    plt.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return str(output_path)
