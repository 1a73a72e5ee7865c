"""Combat resolution: strength arithmetic, outcome tables and blows.

An exchange draws one of nine equally likely slots from a table chosen
by the attacker's and defender's strengths, then applies the outcome to
the defender. All randomness comes from ``state.rng``.
"""

import enum
import random
from dataclasses import dataclass

from ..logging import get_logger
from .state import GameState
from .world import World

logger = get_logger(__name__)

STRENGTH_MIN = 2
STRENGTH_MAX = 7
SCORE_MAX = 350

# Chance, in percent, that a stagger becomes a disarm.
LOSE_WEAPON_CHANCE = 25

# Effective strength of an actor distracted by the "<id>-engrossed" flag.
ENGROSSED_STRENGTH = 2


class Outcome(enum.Enum):
    MISSED = "missed"
    UNCONSCIOUS = "unconscious"
    KILLED = "killed"
    LIGHT_WOUND = "light_wound"
    SERIOUS_WOUND = "serious_wound"
    STAGGER = "stagger"
    LOSE_WEAPON = "lose_weapon"


_M = Outcome.MISSED
_U = Outcome.UNCONSCIOUS
_K = Outcome.KILLED
_LW = Outcome.LIGHT_WOUND
_SW = Outcome.SERIOUS_WOUND
_ST = Outcome.STAGGER

DEFENSE_1 = (_M, _M, _M, _ST, _ST, _U, _K, _K, _K)
DEFENSE_2_WEAK = (_M, _M, _M, _M, _ST, _ST, _LW, _LW, _U)
DEFENSE_2_STRONG = (_M, _M, _ST, _ST, _LW, _LW, _LW, _U, _K)
DEFENSE_3_LOSING = (_M, _M, _M, _M, _ST, _ST, _LW, _LW, _SW)
DEFENSE_3_EVEN = (_M, _M, _ST, _ST, _LW, _LW, _LW, _SW, _SW)
DEFENSE_3_WINNING = (_M, _ST, _ST, _LW, _LW, _LW, _SW, _SW, _SW)

_WOUND_DAMAGE = {Outcome.LIGHT_WOUND: 1, Outcome.SERIOUS_WOUND: 2}


@dataclass(frozen=True)
class Blow:
    """The result of one strike."""

    outcome: Outcome
    message: str


def select_table(attack: int, defense: int) -> tuple[Outcome, ...]:
    """Pick the outcome table for an attacker of strength ``attack``."""
    if defense <= 1:
        return DEFENSE_1
    if defense == 2:
        return DEFENSE_2_WEAK if attack <= 2 else DEFENSE_2_STRONG
    diff = attack - defense
    if diff <= -2:
        return DEFENSE_3_LOSING
    if diff >= 1:
        return DEFENSE_3_WINNING
    return DEFENSE_3_EVEN


def player_strength(score: int, modifier: int = 0) -> int:
    """Attack strength: grows with score in fixed steps, reduced by wounds."""
    step = SCORE_MAX // (STRENGTH_MAX - STRENGTH_MIN)
    base = min(STRENGTH_MAX, STRENGTH_MIN + max(score, 0) // step)
    return max(1, base + modifier)


def actor_strength(world: World, state: GameState, actor_id: str) -> int:
    """Effective strength of an actor for one resolution.

    Consumes the "<id>-engrossed" flag if it is set.
    """
    actor = world.actors[actor_id]
    strength = state.actors[actor_id].strength

    engrossed = f"{actor_id}-engrossed"
    if state.flag(engrossed):
        strength = min(strength, ENGROSSED_STRENGTH)
        state.set_flag(engrossed, False)

    if actor.best_weapon and state.is_carrying(actor.best_weapon):
        strength = max(1, strength - actor.best_advantage)
    return strength


def roll(attack: int, defense: int, rng: random.Random) -> Outcome:
    return select_table(attack, defense)[rng.randrange(9)]


def refine_outcome(outcome: Outcome, has_weapon: bool, rng: random.Random) -> Outcome:
    """A stagger has a fixed chance of disarming a target that holds a weapon."""
    if outcome is not Outcome.STAGGER:
        return outcome
    if rng.randrange(100) < LOSE_WEAPON_CHANCE and has_weapon:
        return Outcome.LOSE_WEAPON
    return outcome


def player_weapon(world: World, state: GameState) -> str | None:
    for item_id in state.player.inventory:
        if world.items[item_id].has("weapon"):
            return item_id
    return None


def actor_weapon(world: World, state: GameState, actor_id: str) -> str | None:
    for item_id in state.actors[actor_id].inventory:
        if world.items[item_id].has("weapon"):
            return item_id
    return None


def _pick_message(
    messages: dict[str, tuple[str, ...]], outcome: Outcome, rng: random.Random
) -> str | None:
    choices = messages.get(outcome.value)
    if not choices:
        return None
    return rng.choice(choices)


def _fill(template: str, weapon: str, npc: str) -> str:
    return template.replace("{weapon}", weapon).replace("{npc}", npc)


def _kill_actor(world: World, state: GameState, actor_id: str) -> str:
    """Mark an actor dead and apply its death consequences."""
    actor = world.actors[actor_id]
    actor_state = state.actors[actor_id]
    actor_state.strength = 0
    actor_state.alive = False
    actor_state.hostile = False
    actor_state.staggered = False
    for item_id in list(actor_state.inventory):
        state.move_item(item_id, actor_state.location)
    if actor.death_flag:
        state.set_flag(actor.death_flag)
    logger.info("actor_killed", actor=actor_id, room=actor_state.location)
    return actor.death_message


def apply_to_actor(
    world: World, state: GameState, actor_id: str, outcome: Outcome
) -> str:
    """Apply the player's blow to an actor. Returns any death text."""
    actor_state = state.actors[actor_id]
    match outcome:
        case Outcome.KILLED | Outcome.UNCONSCIOUS:
            return _kill_actor(world, state, actor_id)
        case Outcome.LIGHT_WOUND | Outcome.SERIOUS_WOUND:
            actor_state.strength -= _WOUND_DAMAGE[outcome]
            if actor_state.strength <= 0:
                return _kill_actor(world, state, actor_id)
        case Outcome.STAGGER:
            actor_state.staggered = True
        case Outcome.LOSE_WEAPON:
            weapon = actor_weapon(world, state, actor_id)
            if weapon is not None:
                state.move_item(weapon, state.location)
    return ""


def apply_to_player(world: World, state: GameState, outcome: Outcome) -> None:
    """Apply an actor's blow to the player."""
    match outcome:
        case Outcome.KILLED | Outcome.UNCONSCIOUS:
            state.player.health = 0
            state.game_over = True
            logger.info("player_died", room=state.location, moves=state.moves)
        case Outcome.LIGHT_WOUND | Outcome.SERIOUS_WOUND:
            state.player.strength_modifier -= _WOUND_DAMAGE[outcome]
        case Outcome.LOSE_WEAPON:
            weapon = player_weapon(world, state)
            if weapon is not None:
                state.move_item(weapon, state.location)


def hero_blow(world: World, state: GameState, actor_id: str, weapon_id: str) -> Blow:
    """The player strikes an actor with ``weapon_id``."""
    rng = state.rng
    actor = world.actors[actor_id]
    attack = player_strength(state.score, state.player.strength_modifier)
    defense = actor_strength(world, state, actor_id)

    outcome = roll(attack, defense, rng)
    outcome = refine_outcome(
        outcome, actor_weapon(world, state, actor_id) is not None, rng
    )
    template = _pick_message(world.hero_melee, outcome, rng)
    message = _fill(
        template or f"You attack the {actor.name}!",
        world.items[weapon_id].name,
        actor.name,
    )

    death = apply_to_actor(world, state, actor_id, outcome)
    if death:
        message = f"{message}\n{death}"

    logger.debug(
        "combat_exchange",
        striker="player",
        target=actor_id,
        attack=attack,
        defense=defense,
        outcome=outcome.value,
    )
    return Blow(outcome, message)


def villain_blow(world: World, state: GameState, actor_id: str) -> Blow:
    """An actor strikes back at the player."""
    rng = state.rng
    actor = world.actors[actor_id]
    actor_state = state.actors[actor_id]

    if actor_state.staggered:
        actor_state.staggered = False
        return Blow(Outcome.MISSED, f"The {actor.name} slowly regains his feet.")

    attack = actor_strength(world, state, actor_id)
    defense = player_strength(state.score, state.player.strength_modifier)

    weapon = player_weapon(world, state)
    outcome = refine_outcome(roll(attack, defense, rng), weapon is not None, rng)
    template = _pick_message(actor.melee, outcome, rng)
    weapon_name = world.items[weapon].name if weapon else "hand"
    message = _fill(
        template or f"The {actor.name} attacks!", weapon_name, actor.name
    )

    apply_to_player(world, state, outcome)

    logger.debug(
        "combat_exchange",
        striker=actor_id,
        target="player",
        attack=attack,
        defense=defense,
        outcome=outcome.value,
    )
    return Blow(outcome, message)

