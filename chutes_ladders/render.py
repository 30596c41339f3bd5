"""Text presentation: board, status lines and connector geometry.

Nothing here mutates game state. Views consume :class:`GameSnapshot`
objects and, at most, call the engine's guarded roll trigger.
"""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TextIO

from chutes_ladders.board import Board, HazardTable
from chutes_ladders.engine import GameSnapshot, Phase

logger = logging.getLogger(__name__)

CHUTE_MARK = "v"
LADDER_MARK = "^"


# ── Text board ───────────────────────────────────────────────────────

def _cell(square: int, hazards: HazardTable, tokens: str) -> str:
    mark = CHUTE_MARK if hazards.is_chute(square) else LADDER_MARK if hazards.is_ladder(square) else " "
    return f"{square:>3}{mark}{tokens:<2}"


def _tokens_by_square(snapshot: GameSnapshot | None) -> dict[int, str]:
    tokens: dict[int, str] = {}
    if snapshot is None:
        return tokens
    for idx, player in enumerate(snapshot.players):
        tokens[player.position] = tokens.get(player.position, "") + str(idx + 1)
    return tokens


def render_board(board: Board, hazards: HazardTable, snapshot: GameSnapshot | None = None) -> str:
    """Draw the board top row first, tokens shown as player numbers."""
    tokens = _tokens_by_square(snapshot)
    rule = "+" + "+".join("-" * 6 for _ in range(board.width)) + "+"

    lines = [rule]
    for row in board.rows():
        lines.append("|" + "|".join(_cell(sq, hazards, tokens.get(sq, "")) for sq in row) + "|")
        lines.append(rule)

    if tokens.get(0):
        lines.append(f"Start: {' '.join(tokens[0])}")

    ladders = ", ".join(f"{s}→{e}" for s, e in sorted(hazards.ladders.items()))
    chutes = ", ".join(f"{s}→{e}" for s, e in sorted(hazards.chutes.items()))
    lines.append(f"Ladders {LADDER_MARK}: {ladders or 'none'}")
    lines.append(f"Chutes  {CHUTE_MARK}: {chutes or 'none'}")
    return "\n".join(lines)


def status_line(snapshot: GameSnapshot) -> str:
    if snapshot.game_over:
        return f"{snapshot.winner_name} wins!"

    player = snapshot.current
    where = "not yet on the board" if player.position == 0 else f"on square {player.position}"
    line = f"{player.name}'s turn ({where}). Die shows {snapshot.dice_value}."
    if player.setback:
        line += " Still smarting from that chute."
    return line


# ── Connector geometry ───────────────────────────────────────────────

@dataclass(frozen=True)
class Box:
    """Rendered bounding box, top-left origin."""

    left: float
    top: float
    width: float
    height: float

    @property
    def center(self) -> tuple[float, float]:
        return self.left + self.width / 2, self.top + self.height / 2


@dataclass(frozen=True)
class Connector:
    """A straight overlay from the centre of one square to another.

    ``left``/``top`` are relative to the board's own box; ``angle`` is in
    degrees, measured the way screen rotation is (y grows downward).
    """

    start: int
    end: int
    kind: str  # "chute" | "ladder"
    left: float
    top: float
    length: float
    angle: float

    @property
    def end_point(self) -> tuple[float, float]:
        rad = math.radians(self.angle)
        return self.left + self.length * math.cos(rad), self.top + self.length * math.sin(rad)


def connector_geometry(
    start: int,
    end: int,
    boxes: Mapping[int, Box],
    board_box: Box,
    kind: str = "ladder",
) -> Connector | None:
    """Place a connector between two rendered squares.

    Returns ``None`` when either square has no rendered box; that only
    costs a decoration.
    """
    start_box = boxes.get(start)
    end_box = boxes.get(end)
    if start_box is None or end_box is None:
        logger.debug("No rendered box for connector %d→%d", start, end)
        return None

    sx, sy = start_box.center
    ex, ey = end_box.center
    sx, sy = sx - board_box.left, sy - board_box.top
    ex, ey = ex - board_box.left, ey - board_box.top
    dx, dy = ex - sx, ey - sy

    return Connector(
        start=start,
        end=end,
        kind=kind,
        left=sx,
        top=sy,
        length=math.hypot(dx, dy),
        angle=math.degrees(math.atan2(dy, dx)),
    )


def connectors(hazards: HazardTable, boxes: Mapping[int, Box], board_box: Box) -> list[Connector]:
    """Every chute and ladder that can be placed, ladders first."""
    result = []
    for kind, table in (("ladder", hazards.ladders), ("chute", hazards.chutes)):
        for start, end in sorted(table.items()):
            conn = connector_geometry(start, end, boxes, board_box, kind=kind)
            if conn is not None:
                result.append(conn)
    return result


# ── Console view ─────────────────────────────────────────────────────

class ConsoleView:
    """Prints a running commentary of the game from snapshots."""

    def __init__(self, board: Board, hazards: HazardTable, stream: TextIO | None = None):
        self.board = board
        self.hazards = hazards
        self.stream = stream or sys.stdout
        self._last: GameSnapshot | None = None

    def _print(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end, file=self.stream, flush=True)

    def show(self, snapshot: GameSnapshot) -> None:
        """Full board plus status, e.g. between turns."""
        self._print(render_board(self.board, self.hazards, snapshot))
        self._print(status_line(snapshot))

    def on_snapshot(self, snapshot: GameSnapshot) -> None:
        last, self._last = self._last, snapshot
        player = snapshot.current

        if snapshot.phase is Phase.ROLLING:
            self._print(f"\r  rolling… {snapshot.dice_value}", end="")
            return
        if snapshot.phase is Phase.SETTLING:
            self._print(f"\r{player.name} rolled a {player.last_roll}.")
            return
        if last is None:
            return

        for before, after in zip(last.players, snapshot.players):
            if before.position == after.position:
                continue
            if after.position - before.position == 1:
                self._print(f"  {after.name} → {after.position}")
            elif after.position < before.position and after.setback:
                self._print(f"  Chute! {after.name} slides down to {after.position}.")
            elif after.position > before.position:
                self._print(f"  Ladder! {after.name} climbs to {after.position}.")

        if snapshot.phase is Phase.GAME_OVER and not last.game_over:
            self._print(render_board(self.board, self.hazards, snapshot))
            self._print(f"🎉 {snapshot.winner_name} wins! 🎉")
        elif snapshot.phase is Phase.IDLE and last.phase is Phase.MOVING:
            self.show(snapshot)
