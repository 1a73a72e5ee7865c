"""Things that happen once per turn, after the player's command.

Light sources burn down, the grue lurks in the dark, wandering actors
move and steal, glowing weapons sense danger, and wounds heal.
Everything advances on the move counter, never on the wall clock.
"""

from ..logging import get_logger
from .state import GameState
from .traversal import DARKNESS, has_light
from .world import World

logger = get_logger(__name__)

# Consecutive turns in darkness before the grue strikes.
GRUE_TURNS = 3
GRUE_DEATH = "Oh, no! You have walked into the slavering fangs of a lurking grue!"

# Wandering actors act on every Nth move.
WANDER_INTERVAL = 3
STEAL_CHANCE = 0.4

# A wound heals by one point every N moves.
HEAL_INTERVAL = 30

_GLOW_MESSAGES = {
    0: "Your {item} is no longer glowing.",
    1: "Your {item} is glowing with a faint blue glow.",
    2: "Your {item} has begun to glow very brightly.",
}


def _near_player(state: GameState, item_id: str) -> bool:
    location = state.items[item_id].location
    return state.is_carrying(item_id) or location == state.location


def _tick_light_sources(world: World, state: GameState) -> list[str]:
    """Burn fuel in every lit light source."""
    messages = []
    for item_id, item_state in state.items.items():
        if not item_state.lit or item_state.fuel <= 0:
            continue
        item = world.items[item_id]
        item_state.fuel -= 1
        if item_state.fuel == 0:
            item_state.lit = False
            if _near_player(state, item_id):
                messages.append(f"The {item.name} has gone out.")
        elif item_state.fuel in item.fuel_warnings and _near_player(state, item_id):
            messages.append(item.fuel_warnings[item_state.fuel])
    return messages


def _tick_darkness(world: World, state: GameState) -> list[str]:
    if has_light(world, state):
        state.dark_turns = 0
        return []
    state.dark_turns += 1
    if state.dark_turns >= GRUE_TURNS:
        state.player.health = 0
        state.game_over = True
        logger.info("player_died", cause="grue", room=state.location)
        return [GRUE_DEATH]
    if state.dark_turns == 1:
        return [DARKNESS]
    return []


def _steal(world: World, state: GameState, actor_id: str) -> str | None:
    treasures = [
        item_id
        for item_id in state.player.inventory
        if world.items[item_id].has("treasure")
    ]
    if not treasures or state.rng.random() >= STEAL_CHANCE:
        return None
    item_id = state.rng.choice(treasures)
    state.move_item(item_id, actor_id)
    logger.debug("item_stolen", actor=actor_id, item=item_id)
    actor = world.actors[actor_id]
    return (
        f"The {actor.name} brushes past you. When you check, "
        f"the {world.items[item_id].name} is gone!"
    )


def _wander(world: World, state: GameState, actor_id: str) -> None:
    """Move a wandering actor through a random exit.

    Wanderers keep to dark rooms, plus the room where they stash loot.
    """
    actor_state = state.actors[actor_id]
    room = world.rooms[actor_state.location]
    choices = sorted(
        {
            exit_.destination
            for exit_ in room.exits.values()
            if world.rooms[exit_.destination].dark
            or exit_.destination == world.treasure_room
        }
    )
    if not choices:
        return
    actor_state.location = state.rng.choice(choices)

    if actor_state.location == world.treasure_room:
        for item_id in list(actor_state.inventory):
            if world.items[item_id].has("treasure"):
                state.move_item(item_id, actor_state.location)


def _tick_wanderers(world: World, state: GameState) -> list[str]:
    if state.moves % WANDER_INTERVAL:
        return []
    messages = []
    for actor_id, actor_state in state.actors.items():
        actor = world.actors[actor_id]
        if not actor_state.alive or not actor.has("wanders"):
            continue
        if actor_state.location == state.location and actor.has("steals"):
            stolen = _steal(world, state, actor_id)
            if stolen:
                messages.append(stolen)
        _wander(world, state, actor_id)
    return messages


def _threat_level(world: World, state: GameState) -> int:
    def hostile_in(room_id: str) -> bool:
        return any(
            state.actors[a].alive and state.actors[a].hostile
            for a in state.actors_at(room_id)
        )

    if hostile_in(state.location):
        return 2
    room = world.rooms[state.location]
    if any(hostile_in(exit_.destination) for exit_ in room.exits.values()):
        return 1
    return 0


def _tick_glow(world: World, state: GameState) -> list[str]:
    messages = []
    level = None
    for item_id, item_state in state.items.items():
        item = world.items[item_id]
        if not item.has("glows"):
            continue
        if not state.is_carrying(item_id):
            item_state.glow_level = 0
            continue
        if level is None:
            level = _threat_level(world, state)
        if level != item_state.glow_level:
            item_state.glow_level = level
            messages.append(_GLOW_MESSAGES[level].format(item=item.name))
    return messages


def _tick_healing(world: World, state: GameState) -> list[str]:
    if state.player.strength_modifier < 0 and state.moves % HEAL_INTERVAL == 0:
        state.player.strength_modifier += 1
    return []


_TICKS = (
    _tick_light_sources,
    _tick_darkness,
    _tick_wanderers,
    _tick_glow,
    _tick_healing,
)


def run_turn_events(world: World, state: GameState) -> list[str]:
    """Advance every per-turn process and collect what the player notices."""
    messages: list[str] = []
    for tick in _TICKS:
        if state.game_over:
            break
        messages.extend(tick(world, state))
    return messages
