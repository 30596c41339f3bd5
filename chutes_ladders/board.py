"""Board geometry and the chute/ladder table for Chutes & Ladders."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

# fmt: off
DEFAULT_LADDERS: dict[int, int] = {
     1: 38,   4: 14,   9: 31,  21: 42,  28: 84,
    36: 44,  51: 67,  71: 91,  80: 100,
}

DEFAULT_CHUTES: dict[int, int] = {
    16:  6,  47: 26,  49: 11,  56: 53,  62: 19,
    64: 60,  87: 24,  93: 73,  95: 75,  98: 78,
}
# fmt: on

DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 10


# ── Topology ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GridCell:
    """Display coordinates: row 0 is the top of the board."""

    row: int
    col: int


@dataclass(frozen=True)
class Board:
    """A width × height board numbered in boustrophedon order.

    Square 1 sits at the bottom-left. Even rows (counted from the bottom)
    run left→right, odd rows run right→left.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT

    @property
    def size(self) -> int:
        return self.width * self.height

    @property
    def off_board(self) -> GridCell:
        """Sentinel cell for position 0, one row below the board."""
        return GridCell(row=self.height, col=0)

    def to_grid(self, position: int) -> GridCell:
        if position == 0:
            return self.off_board
        if not 1 <= position <= self.size:
            raise ValueError(f"Position {position} is outside 0..{self.size}.")

        row_from_bottom, col = divmod(position - 1, self.width)
        if row_from_bottom % 2 == 1:
            col = self.width - 1 - col
        return GridCell(row=self.height - 1 - row_from_bottom, col=col)

    def from_grid(self, row: int, col: int) -> int:
        if (row, col) == (self.off_board.row, self.off_board.col):
            return 0
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise ValueError(f"Cell ({row}, {col}) is not on a {self.width}×{self.height} board.")

        row_from_bottom = self.height - 1 - row
        if row_from_bottom % 2 == 1:
            col = self.width - 1 - col
        return row_from_bottom * self.width + col + 1

    def rows(self) -> Iterator[list[int]]:
        """Yield the square numbers of each display row, top row first."""
        for row in range(self.height):
            yield [self.from_grid(row, col) for col in range(self.width)]


# ── Chutes & ladders ─────────────────────────────────────────────────

@dataclass(frozen=True)
class HazardTable:
    """Two independent start→end lookups.

    Kept separate rather than merged because landing on a chute marks the
    player with a setback while a ladder does not.
    """

    chutes: Mapping[int, int] = field(default_factory=lambda: dict(DEFAULT_CHUTES))
    ladders: Mapping[int, int] = field(default_factory=lambda: dict(DEFAULT_LADDERS))

    def __post_init__(self) -> None:
        object.__setattr__(self, "chutes", dict(self.chutes))
        object.__setattr__(self, "ladders", dict(self.ladders))

    def chute_target(self, square: int) -> int | None:
        return self.chutes.get(square)

    def ladder_target(self, square: int) -> int | None:
        return self.ladders.get(square)

    def is_chute(self, square: int) -> bool:
        return square in self.chutes

    def is_ladder(self, square: int) -> bool:
        return square in self.ladders

    def destination(self, square: int) -> int | None:
        """Where a token landing on *square* ends up, chutes checked first."""
        target = self.chute_target(square)
        if target is None:
            target = self.ladder_target(square)
        return target
