"""Turn engine: the single writer of Chutes & Ladders game state.

One turn runs as a coroutine through the phases

    IDLE → ROLLING → SETTLING → MOVING → IDLE (next player) | GAME_OVER

Animation delays are the only suspension points. A roll is accepted only in
IDLE and only for the player whose turn it is; anything else is silently
ignored, which is all the mutual exclusion the engine needs.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import random
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from chutes_ladders import dice
from chutes_ladders.config import ConfigError, GameConfig, PlayerSpec, validate_config

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[object]]


class Phase(enum.Enum):
    IDLE = "idle"
    ROLLING = "rolling"
    SETTLING = "settling"
    MOVING = "moving"
    GAME_OVER = "game_over"


# ── Mutable state (engine-owned) ─────────────────────────────────────

@dataclass
class Player:
    id: int
    name: str
    position: int = 0  # 0 = not yet on the board
    last_roll: int = 1
    setback: bool = False  # last move ended on a chute


@dataclass
class GameState:
    players: list[Player]
    current_index: int = 0
    phase: Phase = Phase.IDLE
    dice_value: int = 1  # face currently shown on the active die
    winner: int | None = None

    @classmethod
    def fresh(cls, specs: Sequence[PlayerSpec]) -> GameState:
        return cls(players=[Player(id=s.id, name=s.name) for s in specs])

    @property
    def current(self) -> Player:
        return self.players[self.current_index]

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            phase=self.phase,
            current_index=self.current_index,
            dice_value=self.dice_value,
            players=tuple(
                PlayerView(p.id, p.name, p.position, p.last_roll, p.setback)
                for p in self.players
            ),
            winner=self.winner,
        )


def validate_state(state: GameState, config: GameConfig) -> None:
    """Raise ConfigError if *state* cannot be played on *config*'s board."""
    if len(state.players) != 2:
        raise ConfigError(f"Exactly two players are needed, got {len(state.players)}.")
    if state.current_index not in (0, 1):
        raise ConfigError(f"current_index must be 0 or 1, got {state.current_index}.")
    size = config.board.size
    for player in state.players:
        if not 0 <= player.position <= size:
            raise ConfigError(
                f"{player.name} is on square {player.position}, outside 0..{size}."
            )
    if state.winner is not None and state.winner not in (0, 1):
        raise ConfigError(f"winner must be 0, 1 or None, got {state.winner}.")


# ── Read-only snapshots (what presentation sees) ─────────────────────

@dataclass(frozen=True)
class PlayerView:
    id: int
    name: str
    position: int
    last_roll: int
    setback: bool


@dataclass(frozen=True)
class GameSnapshot:
    phase: Phase
    current_index: int
    dice_value: int
    players: tuple[PlayerView, ...]
    winner: int | None = None

    @property
    def game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def current(self) -> PlayerView:
        return self.players[self.current_index]

    @property
    def positions(self) -> list[int]:
        return [p.position for p in self.players]

    @property
    def winner_name(self) -> str | None:
        if self.winner is None:
            return None
        return self.players[self.winner].name

    def die_for(self, index: int) -> int:
        """Face shown on player *index*'s die.

        The active player's die tumbles; the other one keeps showing that
        player's last roll.
        """
        if index == self.current_index:
            return self.dice_value
        return self.players[index].last_roll

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "current_index": self.current_index,
            "dice_value": self.dice_value,
            "winner": self.winner,
            "players": [
                {
                    "id": p.id,
                    "name": p.name,
                    "position": p.position,
                    "last_roll": p.last_roll,
                    "setback": p.setback,
                }
                for p in self.players
            ],
        }


# ── Observer ────────────────────────────────────────────────────────

class GameObserver(Protocol):
    """Receives a snapshot after every committed mutation."""

    def on_snapshot(self, snapshot: GameSnapshot) -> None: ...


@dataclass
class ListObserver:
    """Collects every snapshot into a list."""

    snapshots: list[GameSnapshot] = field(default_factory=list)

    def on_snapshot(self, snapshot: GameSnapshot) -> None:
        self.snapshots.append(snapshot)


# ── Engine ───────────────────────────────────────────────────────────

class TurnEngine:
    """Owns the game state and runs turns against it."""

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        state: GameState | None = None,
        rng: random.Random | None = None,
        sleep: Sleep | None = None,
        observers: Iterable[GameObserver] = (),
    ):
        self.config = config or GameConfig()
        validate_config(self.config)
        if state is not None:
            validate_state(state, self.config)
        self.state = state or GameState.fresh(self.config.players)
        self.rng = rng or random.Random()
        self.observers: list[GameObserver] = list(observers)
        self._sleep: Sleep = sleep or asyncio.sleep
        # Bumped by reset(); a turn started under an older generation stops.
        self._generation = 0
        # Strong reference to the turn started by trigger_roll().
        self._turn_task: asyncio.Task | None = None

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def snapshot(self) -> GameSnapshot:
        return self.state.snapshot()

    def subscribe(self, observer: GameObserver) -> None:
        self.observers.append(observer)

    def _emit(self) -> None:
        snap = self.state.snapshot()
        for observer in self.observers:
            try:
                observer.on_snapshot(snap)
            except Exception:
                logger.exception("Observer %r failed on a %s snapshot", observer, snap.phase.value)

    # ── Input ────────────────────────────────────────────────────────

    def can_roll(self, player: int | None = None) -> bool:
        if self.state.phase is not Phase.IDLE:
            return False
        return player is None or player == self.state.current_index

    async def roll(self, player: int | None = None) -> bool:
        """Run a full turn for *player* (default: whoever is up).

        Returns False, touching nothing, when the roll is not allowed.
        """
        generation = self._begin_turn(player)
        if generation is None:
            return False
        await self._play_turn(generation)
        return True

    def trigger_roll(self, player: int | None = None) -> asyncio.Task | None:
        """Fire-and-forget form of :meth:`roll` for UI callbacks.

        Must be called from inside a running event loop.
        """
        loop = asyncio.get_running_loop()
        generation = self._begin_turn(player)
        if generation is None:
            return None
        task = loop.create_task(self._play_turn(generation))
        self._turn_task = task
        task.add_done_callback(self._turn_done)
        return task

    def _turn_done(self, task: asyncio.Task) -> None:
        if self._turn_task is task:
            self._turn_task = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Turn failed", exc_info=exc)

    def reset(self) -> None:
        """Start a fresh game. Safe to call at any point."""
        self._generation += 1
        self.state = GameState.fresh(self.config.players)
        logger.info("Game reset")
        self._emit()

    # ── Turn sequence ────────────────────────────────────────────────

    def _begin_turn(self, player: int | None) -> int | None:
        # Runs before any suspension point, so the phase flip is atomic
        # with respect to every other caller on the loop.
        if not self.can_roll(player):
            logger.debug(
                "Ignoring roll for player %s (phase=%s, turn=%d)",
                player, self.state.phase.value, self.state.current_index,
            )
            return None
        self.state.phase = Phase.ROLLING
        self.state.current.setback = False
        self._emit()
        return self._generation

    async def _pause(self, ms: int, generation: int) -> bool:
        await self._sleep(ms / 1000)
        return generation == self._generation

    async def _play_turn(self, generation: int) -> None:
        state = self.state
        mover = state.current
        timings = self.config.timings

        final = dice.draw(self.rng)
        for ms, bias in zip(timings.roll_steps, dice.FINAL_FACE_BIAS):
            if not await self._pause(ms, generation):
                return
            state.dice_value = dice.tumble_face(final, bias, self.rng)
            self._emit()

        mover.last_roll = final
        state.dice_value = final
        state.phase = Phase.SETTLING
        self._emit()
        logger.info("%s rolled %d", mover.name, final)

        if not await self._pause(timings.settle, generation):
            return
        await self._move(final, generation)

    async def _move(self, steps: int, generation: int) -> None:
        state = self.state
        mover = state.current
        board = self.config.board
        hazards = self.config.hazards
        timings = self.config.timings

        state.phase = Phase.MOVING
        self._emit()

        # No bounce-back: an overshooting roll stops on the last square.
        target = min(mover.position + steps, board.size)
        while mover.position < target:
            if not await self._pause(timings.step, generation):
                return
            mover.position += 1
            self._emit()

        chute = hazards.chute_target(target)
        ladder = None if chute is not None else hazards.ladder_target(target)
        if chute is not None:
            if not await self._pause(timings.hazard, generation):
                return
            mover.position = chute
            mover.setback = True
            self._emit()
            logger.info("%s slid down a chute %d → %d", mover.name, target, chute)
        elif ladder is not None:
            if not await self._pause(timings.hazard, generation):
                return
            mover.position = ladder
            self._emit()
            logger.info("%s climbed a ladder %d → %d", mover.name, target, ladder)

        if mover.position >= board.size:
            state.winner = state.current_index
            state.phase = Phase.GAME_OVER
            self._emit()
            logger.info("%s wins", mover.name)
            return

        state.current_index = 1 - state.current_index
        state.phase = Phase.IDLE
        self._emit()
