"""Tests for save and restore."""

import datetime as dt
import json
from pathlib import Path

import pytest

from delve.engine.persistence import (
    SAVE_VERSION,
    SaveError,
    list_saves,
    load_game,
    save_filename,
    save_game,
    snapshot,
)
from delve.engine.state import INVENTORY, GameState
from delve.engine.world import World


def test_save_filename():
    now = dt.datetime(2024, 1, 2, 3, 4, 5)
    assert save_filename(None, now) == "delve_save_20240102_030405.json"
    assert save_filename("slot") == "slot.json"
    assert save_filename("slot.json") == "slot.json"


def test_save_filename_stays_in_directory(state: GameState, tmp_path: Path):
    assert save_filename("../../escape") == "escape.json"
    assert save_filename("/tmp/abs") == "abs.json"
    assert save_filename("..") == "save.json"
    directory = tmp_path / "saves"
    assert save_game(state, "../escape", directory) == directory / "escape.json"
    assert not (tmp_path / "escape.json").exists()


def test_snapshot_shape(state: GameState):
    data = snapshot(state)
    assert data["version"] == SAVE_VERSION
    saved = data["game_state"]
    assert saved["location"] == "west-of-house"
    assert saved["items"]["mailbox"]["flags"] == {
        "open": False,
        "lit": False,
        "locked": False,
        "invisible": False,
    }
    assert saved["actors"]["troll"]["flags"] == {
        "alive": True,
        "staggered": False,
        "asleep": False,
    }
    assert saved["actors"]["troll"]["inventory"] == ["axe"]
    json.dumps(data)


def test_round_trip(world: World, state: GameState, tmp_path: Path):
    """Every dynamic field survives a save and restore."""
    state.move_item("leaflet", INVENTORY)
    state.move_item("lamp", INVENTORY)
    state.items["lamp"].lit = True
    state.items["lamp"].fuel = 100
    state.set_flag("window-open")
    state.location = "kitchen"
    state.visited.add("kitchen")
    state.score = 10
    state.moves = 12
    state.verbosity = "verbose"
    state.player.strength_modifier = -1
    state.actors["troll"].alive = False
    state.actors["thief"].location = "maze-2"
    state.actors["cyclops"].asleep = True

    path = save_game(state, "one", tmp_path)
    assert path == tmp_path / "one.json"

    restored = load_game(world, "one", tmp_path)
    assert restored == state
    assert restored.player.inventory == ["leaflet", "lamp"]


def test_save_creates_directory(state: GameState, tmp_path: Path):
    directory = tmp_path / "nested" / "saves"
    save_game(state, "one", directory)
    assert (directory / "one.json").exists()


def test_missing_directory(world: World, tmp_path: Path):
    with pytest.raises(SaveError, match="There are no saved games."):
        load_game(world, "one", tmp_path / "missing")


def test_missing_file(world: World, tmp_path: Path):
    with pytest.raises(SaveError, match="no saved game called nope"):
        load_game(world, "nope", tmp_path)


def test_corrupt_file(world: World, tmp_path: Path):
    (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(SaveError, match="unreadable"):
        load_game(world, "bad", tmp_path)


def test_version_mismatch(world: World, state: GameState, tmp_path: Path):
    data = snapshot(state)
    data["version"] = "0.9"
    (tmp_path / "old.json").write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(SaveError, match="version 0.9"):
        load_game(world, "old", tmp_path)


def test_missing_fields(world: World, tmp_path: Path):
    (tmp_path / "empty.json").write_text(
        json.dumps({"version": SAVE_VERSION, "game_state": {}}), encoding="utf-8"
    )
    with pytest.raises(SaveError, match="damaged"):
        load_game(world, "empty", tmp_path)


def test_unknown_room(world: World, state: GameState, tmp_path: Path):
    data = snapshot(state)
    data["game_state"]["location"] = "narnia"
    (tmp_path / "lost.json").write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(SaveError, match="damaged"):
        load_game(world, "lost", tmp_path)


def test_unknown_ids_ignored(world: World, state: GameState, tmp_path: Path):
    data = snapshot(state)
    data["game_state"]["items"]["unicorn"] = {"location": "kitchen", "flags": {}}
    data["game_state"]["actors"]["dragon"] = {"location": "kitchen", "strength": 9}
    (tmp_path / "extra.json").write_text(json.dumps(data), encoding="utf-8")
    restored = load_game(world, "extra", tmp_path)
    assert "unicorn" not in restored.items
    assert "dragon" not in restored.actors


def test_list_saves(state: GameState, tmp_path: Path):
    assert list_saves(tmp_path / "missing") == []
    save_game(state, "one", tmp_path)
    save_game(state, "two", tmp_path)
    assert sorted(list_saves(tmp_path)) == ["one", "two"]
