"""CLI entry point: python -m chutes_ladders {play,board,render}."""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from dataclasses import replace

from rich.logging import RichHandler

from chutes_ladders.config import AnimationTimings, ConfigError, GameConfig, load_config
from chutes_ladders.engine import TurnEngine
from chutes_ladders.plot import render_board_image
from chutes_ladders.render import ConsoleView, render_board


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def _load(args: argparse.Namespace) -> GameConfig:
    """Read the configuration, or exit with a message if it is unusable."""
    if not args.config:
        return GameConfig()
    try:
        return load_config(args.config)
    except ConfigError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)


# ── play ─────────────────────────────────────────────────────────────

async def _ask(prompt: str) -> str | None:
    """Read a line without blocking the event loop; None on end of input."""
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, input, prompt)
    except EOFError:
        return None


async def play_game(engine: TurnEngine, view: ConsoleView) -> None:
    view.show(engine.snapshot())
    while True:
        snap = engine.snapshot()
        if snap.game_over:
            answer = await _ask("Play again? [y/N] ")
            if answer is None or answer.strip().lower() != "y":
                return
            engine.reset()
            view.show(engine.snapshot())
            continue

        answer = await _ask(f"{snap.current.name}, press Enter to roll (q to quit) ")
        if answer is None or answer.strip().lower() == "q":
            return
        await engine.roll(snap.current_index)


def cmd_play(args: argparse.Namespace) -> None:
    """Two players at one terminal, taking turns."""
    config = _load(args)
    if args.fast:
        config = replace(config, timings=AnimationTimings.instant())

    view = ConsoleView(config.board, config.hazards)
    engine = TurnEngine(
        config,
        rng=random.Random(args.seed),
        observers=[view],
    )
    try:
        asyncio.run(play_game(engine, view))
    except KeyboardInterrupt:
        print()


# ── board ────────────────────────────────────────────────────────────

def cmd_board(args: argparse.Namespace) -> None:
    """Print the empty board."""
    config = _load(args)
    print(render_board(config.board, config.hazards))


# ── render ───────────────────────────────────────────────────────────

def cmd_render(args: argparse.Namespace) -> None:
    """Write a PNG of the board at the start of a game."""
    config = _load(args)
    engine = TurnEngine(config)
    out = args.output or "board.png"
    render_board_image(config.board, config.hazards, engine.snapshot(), output_path=out)
    print(f"Board saved to {out}")


# ── main ─────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        prog="chutes_ladders",
        description="Two-player Chutes & Ladders",
    )
    # Shared by every subcommand, so they go after the command name.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", "-c", help="JSON file with board, chutes, ladders and players")
    common.add_argument("--verbose", "-v", action="store_true", help="Log engine events")
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", parents=[common], help="Play a game in the terminal")
    p_play.add_argument("--fast", action="store_true", help="Skip animation delays")
    p_play.add_argument("--seed", type=int, help="Seed the die for a repeatable game")

    sub.add_parser("board", parents=[common], help="Print the board")

    p_render = sub.add_parser("render", parents=[common], help="Save the board as a PNG")
    p_render.add_argument("--output", "-o", help="Output PNG path")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        return
    _setup_logging(args.verbose)

    if args.command == "play":
        cmd_play(args)
    elif args.command == "board":
        cmd_board(args)
    elif args.command == "render":
        cmd_render(args)


if __name__ == "__main__":
    main()
