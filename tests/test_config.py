"""Tests for chutes_ladders.config (validation and loading)."""

import json
from dataclasses import replace
from pathlib import Path

import pytest

from chutes_ladders.board import Board, HazardTable
from chutes_ladders.config import (
    AnimationTimings,
    ConfigError,
    GameConfig,
    PlayerSpec,
    config_from_dict,
    load_config,
    validate_config,
)


def with_hazards(chutes: dict, ladders: dict) -> GameConfig:
    return GameConfig(hazards=HazardTable(chutes=chutes, ladders=ladders))


# ── validation ───────────────────────────────────────────────────────

def test_default_config_is_valid():
    validate_config(GameConfig())


def test_chute_must_go_down():
    with pytest.raises(ConfigError, match="Chute 10→20"):
        validate_config(with_hazards({10: 20}, {}))


def test_ladder_must_go_up():
    with pytest.raises(ConfigError, match="Ladder 16→6"):
        validate_config(with_hazards({}, {16: 6}))


def test_overlapping_starts_rejected():
    with pytest.raises(ConfigError, match="both a chute and a ladder"):
        validate_config(with_hazards({50: 40}, {50: 60}))


def test_chained_hazards_rejected():
    # 9 → 21 lands on the 21 → 42 ladder.
    with pytest.raises(ConfigError, match="must not chain"):
        validate_config(with_hazards({}, {9: 21, 21: 42}))


def test_chute_into_ladder_rejected():
    with pytest.raises(ConfigError, match="must not chain"):
        validate_config(with_hazards({30: 4}, {4: 14}))


def test_hazard_off_board_rejected():
    with pytest.raises(ConfigError, match="leaves the board"):
        validate_config(with_hazards({}, {95: 120}))


def test_hazard_fits_smaller_board():
    config = GameConfig(
        board=Board(width=5, height=4),
        hazards=HazardTable(chutes={19: 3}, ladders={2: 11}),
    )
    validate_config(config)


def test_board_must_have_squares():
    with pytest.raises(ConfigError, match="at least 1×1"):
        validate_config(replace(with_hazards({}, {}), board=Board(width=0, height=10)))


def test_exactly_two_players():
    with pytest.raises(ConfigError, match="Exactly two"):
        validate_config(GameConfig(players=(PlayerSpec(1, "Solo"),)))
    with pytest.raises(ConfigError, match="Exactly two"):
        validate_config(GameConfig(players=(PlayerSpec(1, "a"), PlayerSpec(2, "b"), PlayerSpec(3, "c"))))


def test_player_ids_distinct():
    with pytest.raises(ConfigError, match="ids must differ"):
        validate_config(GameConfig(players=(PlayerSpec(1, "a"), PlayerSpec(1, "b"))))


def test_timings_need_seven_roll_steps():
    with pytest.raises(ConfigError, match="7 roll steps"):
        validate_config(GameConfig(timings=AnimationTimings(roll_steps=(100, 100))))


def test_negative_delay_rejected():
    with pytest.raises(ConfigError, match="negative"):
        validate_config(GameConfig(timings=AnimationTimings(step=-1)))


def test_instant_timings_are_valid():
    timings = AnimationTimings.instant()
    validate_config(GameConfig(timings=timings))
    assert set(timings.roll_steps) == {0}
    assert timings.settle == timings.step == timings.hazard == 0


# ── loading ──────────────────────────────────────────────────────────

def test_empty_dict_gives_defaults():
    assert config_from_dict({}) == GameConfig()


def test_from_dict_overrides():
    config = config_from_dict({
        "width": 5,
        "height": 4,
        "chutes": {"19": 3},
        "ladders": {"2": 11},
        "players": [{"id": 7, "name": "Ann"}, {"id": 8, "name": "Bo"}],
        "timings": {"step": 100},
    })
    assert config.board == Board(width=5, height=4)
    assert config.hazards.chute_target(19) == 3
    assert config.hazards.ladder_target(2) == 11
    assert [p.name for p in config.players] == ["Ann", "Bo"]
    assert config.timings.step == 100
    assert config.timings.settle == 500


def test_from_dict_validates():
    with pytest.raises(ConfigError):
        config_from_dict({"ladders": {"16": 6}, "chutes": {}})


def test_from_dict_malformed_table():
    with pytest.raises(ConfigError, match="'chutes'"):
        config_from_dict({"chutes": {"ten": 2}})


def test_from_dict_malformed_players():
    with pytest.raises(ConfigError, match="Malformed"):
        config_from_dict({"players": [{"name": "no id"}, {"id": 2, "name": "x"}]})


def test_load_config_file(tmp_path: Path):
    path = tmp_path / "game.json"
    path.write_text(json.dumps({"chutes": {"40": 2}, "ladders": {"3": 30}}))

    config = load_config(path)

    assert dict(config.hazards.chutes) == {40: 2}
    assert dict(config.hazards.ladders) == {3: 30}


def test_load_config_bad_json(tmp_path: Path):
    path = tmp_path / "game.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(path)


def test_load_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path / "nope.json")


def test_load_config_not_an_object(tmp_path: Path):
    path = tmp_path / "game.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_config(path)
