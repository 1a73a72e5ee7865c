"""A full game played from the opening field to the barrow."""

from delve.engine.commands import GAME_OVER
from delve.engine.state import NOWHERE, GameState


def test_walkthrough(play, state: GameState, fixed_random):
    # Every blow lands in the last slot and the thief never steals.
    state.rng = fixed_random(slot=8, fraction=0.99)

    # Egg from the tree.
    play("north", "north", "up")
    assert state.location == "up-a-tree"
    assert play("take egg") == "Taken."
    play("down", "south", "east")
    assert state.location == "behind-house"

    # Into the house through the window.
    assert play("west") == "The window is closed."
    play("open window", "west", "west")
    assert state.location == "living-room"
    play("take lamp", "take sword", "open case")
    assert play("put egg in case") == "Done."
    assert state.score == 10

    # Down to the gallery with a light.
    play("turn on lamp", "move rug", "open trap door")
    play("down")
    assert state.location == "cellar"
    play("south", "east")
    assert state.location == "gallery"
    assert play("take painting") == "Taken."
    play("north", "up")
    assert state.location == "kitchen"
    play("west", "put painting in case")
    assert state.score == 20
    assert not state.flag("won-flag")

    # Past the troll.
    play("down", "north")
    assert state.location == "troll-room"
    assert play("east") == "The troll fends you off with a menacing gesture."
    assert play("kill troll with sword").startswith("It's curtains for the troll")
    assert state.flag("troll-flag")
    play("east")
    assert state.location == "ew-passage"
    assert play("take bracelet") == "Taken."

    # Through the maze to the cyclops.
    play("west", "west", "south")
    assert state.location == "maze-3"
    assert play("take coins") == "Taken."
    play("west", "north")
    assert state.location == "cyclops-room"
    assert "flees the room" in play("ulysses")
    assert state.actors["cyclops"].location == NOWHERE

    # Chalice, then home by the secret passage.
    play("up")
    assert state.location == "treasure-room"
    assert play("take chalice") == "Taken."
    play("down", "east", "east")
    assert state.location == "living-room"
    assert {"bracelet", "coins", "chalice"} <= set(state.player.inventory)

    for treasure in ("bracelet", "coins"):
        assert play(f"put {treasure} in case") == "Done."
    result = play("put chalice in case")
    assert result.startswith("Done.")
    assert "final secret" in result
    assert state.score == 50
    assert state.flag("won-flag")
    assert state.items["chalice"].location == "trophy-case"

    # The way to the barrow is open.
    play("east", "east", "north", "west")
    assert state.location == "west-of-house"
    play("southwest")
    assert state.location == "stone-barrow"
    assert state.won
    assert state.game_over

    assert play("look") == GAME_OVER
    assert "Master Adventurer" in play("quit")
