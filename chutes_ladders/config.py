"""Static game configuration and start-up validation.

Everything here is loaded once and handed to the engine at construction.
A configuration that fails :func:`validate_config` never reaches play.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from chutes_ladders.board import Board, HazardTable

# Milliseconds for each face change while the die tumbles.
ROLL_STEP_MS: tuple[int, ...] = (120, 140, 160, 180, 220, 260, 320)
SETTLE_MS = 500
STEP_MS = 300
HAZARD_MS = 500


class ConfigError(ValueError):
    """The board, hazard table, players or timings are unusable."""


@dataclass(frozen=True)
class PlayerSpec:
    id: int
    name: str


DEFAULT_PLAYERS: tuple[PlayerSpec, PlayerSpec] = (
    PlayerSpec(1, "Sir Rowan"),
    PlayerSpec(2, "Lady Isolde"),
)


@dataclass(frozen=True)
class AnimationTimings:
    """Presentation delays, in milliseconds."""

    roll_steps: tuple[int, ...] = ROLL_STEP_MS
    settle: int = SETTLE_MS
    step: int = STEP_MS
    hazard: int = HAZARD_MS

    @classmethod
    def instant(cls) -> AnimationTimings:
        """Zero delays everywhere, for tests and ``--fast`` play."""
        return cls(roll_steps=(0,) * len(ROLL_STEP_MS), settle=0, step=0, hazard=0)


@dataclass(frozen=True)
class GameConfig:
    board: Board = field(default_factory=Board)
    hazards: HazardTable = field(default_factory=HazardTable)
    players: tuple[PlayerSpec, ...] = DEFAULT_PLAYERS
    timings: AnimationTimings = field(default_factory=AnimationTimings)


# ── Validation ───────────────────────────────────────────────────────

def validate_config(config: GameConfig) -> None:
    """Raise :class:`ConfigError` describing the first problem found."""
    board = config.board
    if board.width < 1 or board.height < 1:
        raise ConfigError(f"Board must be at least 1×1, got {board.width}×{board.height}.")

    if len(config.players) != 2:
        raise ConfigError(f"Exactly two players are required, got {len(config.players)}.")
    if config.players[0].id == config.players[1].id:
        raise ConfigError(f"Player ids must differ, both are {config.players[0].id}.")

    _validate_hazards(config.hazards, board.size)
    _validate_timings(config.timings)


def _validate_hazards(hazards: HazardTable, size: int) -> None:
    for kind, table in (("Chute", hazards.chutes), ("Ladder", hazards.ladders)):
        for start, end in table.items():
            if not (1 <= start <= size and 1 <= end <= size):
                raise ConfigError(f"{kind} {start}→{end} leaves the board (1..{size}).")

    for start, end in hazards.chutes.items():
        if start <= end:
            raise ConfigError(f"Chute {start}→{end} must lead to a lower square.")
    for start, end in hazards.ladders.items():
        if start >= end:
            raise ConfigError(f"Ladder {start}→{end} must lead to a higher square.")

    overlap = sorted(set(hazards.chutes) & set(hazards.ladders))
    if overlap:
        raise ConfigError(f"Squares {overlap} start both a chute and a ladder.")

    starts = set(hazards.chutes) | set(hazards.ladders)
    for kind, table in (("Chute", hazards.chutes), ("Ladder", hazards.ladders)):
        for start, end in table.items():
            if end in starts:
                raise ConfigError(
                    f"{kind} {start}→{end} ends on another chute or ladder; tables must not chain."
                )


def _validate_timings(timings: AnimationTimings) -> None:
    if len(timings.roll_steps) != len(ROLL_STEP_MS):
        raise ConfigError(
            f"Expected {len(ROLL_STEP_MS)} roll steps, got {len(timings.roll_steps)}."
        )
    delays = (*timings.roll_steps, timings.settle, timings.step, timings.hazard)
    if any(ms < 0 for ms in delays):
        raise ConfigError("Animation delays cannot be negative.")


# ── Loading ──────────────────────────────────────────────────────────

def _int_table(raw: dict, name: str) -> dict[int, int]:
    try:
        return {int(k): int(v) for k, v in raw.items()}
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigError(f"'{name}' must map square numbers to square numbers.") from exc


def config_from_dict(data: dict) -> GameConfig:
    """Build a config from the JSON shape; missing keys keep their defaults.

    Keys: ``width``, ``height``, ``chutes``, ``ladders``, ``players``
    (list of ``{"id", "name"}``) and ``timings`` (``roll_steps``,
    ``settle``, ``step``, ``hazard``).
    """
    defaults = GameConfig()
    try:
        board = Board(
            width=int(data.get("width", defaults.board.width)),
            height=int(data.get("height", defaults.board.height)),
        )
        hazards = HazardTable(
            chutes=_int_table(data.get("chutes", defaults.hazards.chutes), "chutes"),
            ladders=_int_table(data.get("ladders", defaults.hazards.ladders), "ladders"),
        )
        players = defaults.players
        if "players" in data:
            players = tuple(PlayerSpec(int(p["id"]), str(p["name"])) for p in data["players"])
        timings = defaults.timings
        if "timings" in data:
            raw = data["timings"]
            timings = AnimationTimings(
                roll_steps=tuple(int(ms) for ms in raw.get("roll_steps", timings.roll_steps)),
                settle=int(raw.get("settle", timings.settle)),
                step=int(raw.get("step", timings.step)),
                hazard=int(raw.get("hazard", timings.hazard)),
            )
    except ConfigError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Malformed configuration: {exc}") from exc

    config = GameConfig(board=board, hazards=hazards, players=players, timings=timings)
    validate_config(config)
    return config


def load_config(path: Path | str) -> GameConfig:
    """Read and validate a JSON configuration file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read configuration {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration {path} must be a JSON object.")
    return config_from_dict(data)
