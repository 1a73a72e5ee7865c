"""Tests for game state."""

import random

from delve.engine.state import DESTROYED, INVENTORY, GameState, new_game_state
from delve.engine.world import World


def test_new_game_state(world: World):
    """Fresh state starts at the start room with initial item switches."""
    state = new_game_state(world)
    assert state.location == "west-of-house"
    assert state.visited == {"west-of-house"}
    assert state.score == 0
    assert state.moves == 0
    assert not state.game_over
    assert state.player.inventory == []
    assert state.player.max_weight == 100


def test_initial_item_switches(world: World):
    state = new_game_state(world)
    assert state.items["leaflet"].location == "mailbox"
    assert not state.items["mailbox"].open
    assert state.items["kitchen-table"].open
    assert state.items["grating"].locked
    assert state.items["trap-door"].invisible
    assert state.items["lamp"].fuel == 250
    assert state.items["sword"].fuel == -1


def test_actor_inventories(world: World):
    """Items located on an actor start in its inventory."""
    state = new_game_state(world)
    assert state.actors["troll"].inventory == ["axe"]
    assert state.actors["troll"].weapon == "axe"
    assert state.actors["thief"].inventory == ["stiletto"]
    assert state.actors["troll"].hostile
    assert not state.actors["thief"].hostile


def test_move_item_to_inventory(world: World):
    state = new_game_state(world)
    state.move_item("lamp", INVENTORY)
    assert state.is_carrying("lamp")
    assert state.player.inventory == ["lamp"]

    state.move_item("lamp", "kitchen")
    assert not state.is_carrying("lamp")
    assert state.player.inventory == []
    assert "lamp" in state.items_at("kitchen")


def test_move_item_from_actor_clears_weapon(world: World):
    state = new_game_state(world)
    state.move_item("axe", "troll-room")
    assert state.actors["troll"].inventory == []
    assert state.actors["troll"].weapon is None
    assert state.items["axe"].location == "troll-room"


def test_give_to_player_and_actor(world: World):
    state = new_game_state(world)
    state.give_to_player("egg")
    assert state.player.inventory == ["egg"]
    state.give_to_actor("egg", "thief")
    assert state.player.inventory == []
    assert state.actors["thief"].inventory == ["stiletto", "egg"]
    assert state.items["egg"].location == "thief"


def test_destroyed_items_leave_inventory(world: World):
    state = new_game_state(world)
    state.give_to_player("lunch")
    state.move_item("lunch", DESTROYED)
    assert state.player.inventory == []
    assert state.items_at(DESTROYED) == ["lunch"]


def test_flags(world: World):
    """Unknown flags read as False."""
    state = new_game_state(world)
    assert not state.flag("window-open")
    state.set_flag("window-open")
    assert state.flag("window-open")
    state.set_flag("window-open", False)
    assert not state.flag("window-open")


def test_actors_at(world: World):
    state = new_game_state(world)
    assert state.actors_at("troll-room") == ["troll"]
    assert state.actors_at("west-of-house") == []


def test_adopt_keeps_rng(world: World):
    """Adopting another state takes its game fields but not its rng."""
    rng = random.Random(1)
    state = new_game_state(world, rng)
    other: GameState = new_game_state(world)
    other.location = "kitchen"
    other.score = 20
    state.adopt(other)
    assert state.location == "kitchen"
    assert state.score == 20
    assert state.rng is rng


def test_rng_not_compared(world: World):
    assert new_game_state(world, random.Random(1)) == new_game_state(
        world, random.Random(2)
    )
