"""Tests for combat resolution."""

import random

import pytest

from delve.engine import combat
from delve.engine.combat import Outcome
from delve.engine.state import INVENTORY, GameState
from delve.engine.world import World


@pytest.mark.parametrize(
    ("attack", "defense", "table"),
    [
        (5, 1, combat.DEFENSE_1),
        (7, 0, combat.DEFENSE_1),
        (2, 2, combat.DEFENSE_2_WEAK),
        (1, 2, combat.DEFENSE_2_WEAK),
        (3, 2, combat.DEFENSE_2_STRONG),
        (1, 3, combat.DEFENSE_3_LOSING),
        (2, 3, combat.DEFENSE_3_EVEN),
        (3, 3, combat.DEFENSE_3_EVEN),
        (4, 3, combat.DEFENSE_3_WINNING),
        (7, 10000, combat.DEFENSE_3_LOSING),
    ],
)
def test_select_table(attack: int, defense: int, table):
    assert combat.select_table(attack, defense) is table


def test_tables_have_nine_slots():
    for table in (
        combat.DEFENSE_1,
        combat.DEFENSE_2_WEAK,
        combat.DEFENSE_2_STRONG,
        combat.DEFENSE_3_LOSING,
        combat.DEFENSE_3_EVEN,
        combat.DEFENSE_3_WINNING,
    ):
        assert len(table) == 9


def test_losing_table_cannot_kill():
    assert Outcome.KILLED not in combat.DEFENSE_3_LOSING
    assert Outcome.UNCONSCIOUS not in combat.DEFENSE_3_LOSING


def test_player_strength_bounds():
    assert combat.player_strength(0) == combat.STRENGTH_MIN
    assert combat.player_strength(combat.SCORE_MAX) == combat.STRENGTH_MAX
    assert combat.player_strength(10 * combat.SCORE_MAX) == combat.STRENGTH_MAX


def test_player_strength_monotonic():
    strengths = [combat.player_strength(score) for score in range(0, 400, 10)]
    assert strengths == sorted(strengths)


def test_player_strength_wounds():
    """Wounds lower strength but never below 1."""
    assert combat.player_strength(0, -1) == 1
    assert combat.player_strength(0, -5) == 1
    assert combat.player_strength(350, -2) == 5


def test_actor_strength_best_weapon(world: World, state: GameState):
    assert combat.actor_strength(world, state, "troll") == 2
    state.move_item("sword", INVENTORY)
    assert combat.actor_strength(world, state, "troll") == 1
    state.move_item("knife", INVENTORY)
    assert combat.actor_strength(world, state, "thief") == 4


def test_actor_strength_engrossed(world: World, state: GameState):
    """Engrossment caps strength once and is then consumed."""
    state.set_flag("thief-engrossed")
    assert combat.actor_strength(world, state, "thief") == 2
    assert not state.flag("thief-engrossed")
    assert combat.actor_strength(world, state, "thief") == 5


def test_refine_outcome(fixed_random):
    assert combat.refine_outcome(Outcome.STAGGER, True, fixed_random(slot=10)) is (
        Outcome.LOSE_WEAPON
    )
    assert combat.refine_outcome(Outcome.STAGGER, True, fixed_random(slot=30)) is (
        Outcome.STAGGER
    )
    assert combat.refine_outcome(Outcome.STAGGER, False, fixed_random(slot=10)) is (
        Outcome.STAGGER
    )
    assert combat.refine_outcome(Outcome.MISSED, True, fixed_random(slot=10)) is (
        Outcome.MISSED
    )


def test_refine_outcome_rate():
    """About a quarter of staggers against armed targets become disarms."""
    rng = random.Random(7)
    trials = 10000
    disarms = sum(
        combat.refine_outcome(Outcome.STAGGER, True, rng) is Outcome.LOSE_WEAPON
        for _ in range(trials)
    )
    assert 0.22 < disarms / trials < 0.28


def test_hero_blow_kills_troll(world: World, state: GameState, fixed_random):
    state.location = "troll-room"
    state.move_item("sword", INVENTORY)
    state.rng = fixed_random(slot=8)

    blow = combat.hero_blow(world, state, "troll", "sword")

    assert blow.outcome is Outcome.KILLED
    assert blow.message.startswith(
        "It's curtains for the troll as your elvish sword removes his head."
    )
    assert "cloud of sinister black fog" in blow.message
    troll = state.actors["troll"]
    assert not troll.alive
    assert troll.strength == 0
    assert state.flag("troll-flag")
    assert state.items["axe"].location == "troll-room"


def test_hero_blow_miss(world: World, state: GameState, fixed_random):
    state.location = "troll-room"
    state.move_item("sword", INVENTORY)
    state.rng = fixed_random(slot=0)

    blow = combat.hero_blow(world, state, "troll", "sword")

    assert blow.outcome is Outcome.MISSED
    assert blow.message == "Your elvish sword misses the troll by an inch."
    assert state.actors["troll"].alive


def test_cyclops_survives(world: World, state: GameState):
    """No sequence of blows can fell an actor of overwhelming strength."""
    state.location = "cyclops-room"
    state.move_item("sword", INVENTORY)
    state.rng = random.Random(3)
    for _ in range(200):
        blow = combat.hero_blow(world, state, "cyclops", "sword")
        assert blow.outcome not in (Outcome.KILLED, Outcome.UNCONSCIOUS)
    assert state.actors["cyclops"].alive
    # Light and serious wounds take at most two points a blow.
    assert state.actors["cyclops"].strength >= 10000 - 2 * 200


def test_villain_blow_miss(world: World, state: GameState, fixed_random):
    state.location = "troll-room"
    state.rng = fixed_random(slot=0)
    blow = combat.villain_blow(world, state, "troll")
    assert blow.outcome is Outcome.MISSED
    assert blow.message == "The troll swings his axe, but it misses."


def test_villain_blow_knocks_out_player(world: World, state: GameState, fixed_random):
    """Unconscious counts as death for the player."""
    state.location = "troll-room"
    state.rng = fixed_random(slot=8)
    blow = combat.villain_blow(world, state, "troll")
    assert blow.outcome is Outcome.UNCONSCIOUS
    assert state.player.health == 0
    assert state.game_over


def test_staggered_villain_recovers(world: World, state: GameState):
    state.location = "troll-room"
    combat.apply_to_actor(world, state, "troll", Outcome.STAGGER)
    assert state.actors["troll"].staggered

    blow = combat.villain_blow(world, state, "troll")

    assert blow.outcome is Outcome.MISSED
    assert blow.message == "The troll slowly regains his feet."
    assert not state.actors["troll"].staggered


def test_wounds_weaken_then_kill(world: World, state: GameState):
    state.location = "troll-room"
    combat.apply_to_actor(world, state, "troll", Outcome.LIGHT_WOUND)
    assert state.actors["troll"].strength == 1
    assert state.actors["troll"].alive
    death = combat.apply_to_actor(world, state, "troll", Outcome.SERIOUS_WOUND)
    assert not state.actors["troll"].alive
    assert death.startswith("Almost as soon as the troll")


def test_actor_loses_weapon(world: World, state: GameState):
    state.location = "troll-room"
    combat.apply_to_actor(world, state, "troll", Outcome.LOSE_WEAPON)
    assert state.items["axe"].location == "troll-room"
    assert state.actors["troll"].weapon is None
    assert state.actors["troll"].alive


def test_player_wounds(world: World, state: GameState):
    combat.apply_to_player(world, state, Outcome.LIGHT_WOUND)
    combat.apply_to_player(world, state, Outcome.SERIOUS_WOUND)
    assert state.player.strength_modifier == -3
    assert not state.game_over


def test_player_loses_weapon(world: World, state: GameState):
    state.move_item("sword", INVENTORY)
    combat.apply_to_player(world, state, Outcome.LOSE_WEAPON)
    assert state.items["sword"].location == state.location


def test_player_killed(world: World, state: GameState):
    combat.apply_to_player(world, state, Outcome.KILLED)
    assert state.player.health == 0
    assert state.game_over
