"""Command dispatch and handler functions.

handle_command(world, state, parser, raw_input) -> str is the main entry
point. It parses the input, routes the Command to a handler by canonical
verb, then runs the per-turn events. All handlers mutate state in place
and return descriptive text.
"""

from collections.abc import Callable
from pathlib import Path

from ..config import Config
from ..logging import get_logger
from . import combat, persistence
from .events import run_turn_events
from .parser import Command, Parser, ParseError
from .state import DESTROYED, NOWHERE, GameState
from .traversal import (
    actor_line,
    article,
    close_item,
    container_contents,
    drop_item,
    find_actor,
    find_item,
    has_light,
    is_dark,
    is_tied,
    look_in,
    describe_room,
    move_player,
    open_item,
    take_item,
)
from .world import World

logger = get_logger(__name__)

VERSION = "1.0"

GAME_OVER = "The game is over. Type RESTART to play again, or QUIT to leave."
DEATH_BANNER = "****  You have died  ****"

RANKS = (
    (350, "Master Adventurer"),
    (330, "Wizard"),
    (300, "Master"),
    (200, "Adventurer"),
    (100, "Junior Adventurer"),
    (50, "Novice Adventurer"),
    (25, "Amateur Adventurer"),
    (0, "Beginner"),
)

# Verbs that talk about the game rather than act in it; they skip turn events.
META_VERBS = frozenset(
    (
        "save", "restore", "restart", "quit", "score", "help", "version",
        "brief", "verbose", "superbrief", "inventory", "diagnose",
    )
)

Handler = Callable[[World, GameState, Command], str]


def handle_command(
    world: World, state: GameState, parser: Parser, raw_input: str
) -> str:
    """Process one line of input and return the response text."""
    try:
        command = parser.parse(raw_input)
    except ParseError as exc:
        logger.debug("parse_failed", input=raw_input, reason=exc.reason.value)
        return str(exc)

    if state.game_over and command.verb not in ("restart", "restore", "quit"):
        return GAME_OVER

    logger.debug(
        "command_parsed",
        verb=command.verb,
        direct_object=command.direct_object,
        indirect_object=command.indirect_object,
        direction=command.direction,
    )
    alive = state.player.health > 0
    state.moves += 1
    result = _dispatch(world, state, command)

    if command.verb not in META_VERBS and not state.game_over:
        for message in run_turn_events(world, state):
            if message not in result:
                result = f"{result}\n\n{message}" if result else message

    if alive and state.player.health <= 0:
        result = f"{result}\n\n{DEATH_BANNER}"
    return result


def _dispatch(world: World, state: GameState, command: Command) -> str:
    if command.direction is not None:
        return move_player(world, state, command.direction)
    handler = _VERB_DISPATCH.get(command.verb)
    if handler is None:
        return f'I don\'t understand how to "{command.verb}" something.'
    return handler(world, state, command)


# -- helpers -------------------------------------------------------------------


def _display(name: str) -> str:
    return name.replace("-", " ")


def _find(world: World, state: GameState, name: str | None) -> str | None:
    """Find an item by name; in the dark only what is carried can be found."""
    if name is None:
        return None
    if is_dark(world, state):
        return name if state.is_carrying(name) else None
    return find_item(world, state, name)


def _resolve_item(
    world: World, state: GameState, name: str | None, verb: str
) -> tuple[str | None, str]:
    """Return (item_id, "") or (None, message explaining why not)."""
    if name is None:
        return None, f"What do you want to {verb}?"
    item_id = _find(world, state, name)
    if item_id is not None:
        return item_id, ""
    if is_dark(world, state):
        return None, "It's too dark to see!"
    return None, f"You can't see any {_display(name)} here."


def _held_items(world: World, state: GameState) -> list[str]:
    """Carried items plus the contents of open carried containers."""
    held = []
    for item_id in state.player.inventory:
        held.append(item_id)
        if world.items[item_id].has("container") and state.items[item_id].open:
            held.extend(container_contents(state, item_id))
    return held


def _is_within(world: World, state: GameState, item_id: str, container_id: str) -> bool:
    """True if ``item_id`` is ``container_id`` or nested somewhere inside it."""
    seen = set()
    location = item_id
    while location in world.items and location not in seen:
        if location == container_id:
            return True
        seen.add(location)
        location = state.items[location].location
    return False


def rank(score: int, max_score: int) -> str:
    """Rank title for a score, scaled to a 350-point game."""
    scaled = score * 350 // max_score if max_score else 0
    for threshold, title in RANKS:
        if scaled >= threshold:
            return title
    return RANKS[-1][1]


# -- looking -------------------------------------------------------------------


def _cmd_look(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is not None:
        return _cmd_examine(world, state, cmd)
    return describe_room(world, state, force_full=True)


def _cmd_examine(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to examine?"

    actor_id = (
        find_actor(world, state, cmd.direct_object, living_only=False)
        if has_light(world, state)
        else None
    )
    if actor_id is not None:
        actor = world.actors[actor_id]
        if not state.actors[actor_id].alive:
            return f"The {actor.name} is dead."
        return actor_line(world, state, actor_id)

    item_id, error = _resolve_item(world, state, cmd.direct_object, "examine")
    if item_id is None:
        return error

    item = world.items[item_id]
    item_state = state.items[item_id]
    text = item.examine_text or f"There's nothing special about the {item.name}."
    if item.has("light-source"):
        text += " It is on." if item_state.lit else " It is off."
    if item.has("container") or item.has("door"):
        text += " It is open." if item_state.open else " It is closed."
    if item.has("container") and (item_state.open or item.has("transparent")):
        contents = container_contents(state, item_id)
        if contents:
            lines = [f"The {item.name} contains:"]
            lines.extend(f"  {article(world.items[i].name)}" for i in contents)
            text += "\n" + "\n".join(lines)
    return text


def _cmd_look_in(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "look in")
    if item_id is None:
        return error
    return look_in(world, state, item_id)


def _cmd_read(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "read")
    if item_id is None:
        return error
    if is_dark(world, state):
        return "It is impossible to read in the dark."
    item = world.items[item_id]
    if not item.has("readable"):
        return f"You can't read the {item.name}."
    return item.read_text or "There is nothing written on it."


def _cmd_inventory(world: World, state: GameState, cmd: Command) -> str:
    if not state.player.inventory:
        return "You are empty-handed."
    lines = ["You are carrying:"]
    for item_id in state.player.inventory:
        item = world.items[item_id]
        line = f"  {article(item.name)}"
        if item.has("light-source") and state.items[item_id].lit:
            line += " (providing light)"
        lines.append(line)
        if item.has("container") and (
            state.items[item_id].open or item.has("transparent")
        ):
            for inner in container_contents(state, item_id):
                lines.append(f"    {article(world.items[inner].name)}")
    return "\n".join(lines)


# -- moving things around ------------------------------------------------------


def _cmd_take(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to take?"
    actor_id = find_actor(world, state, cmd.direct_object)
    if actor_id is not None:
        return f"The {world.actors[actor_id].name} would not appreciate that."
    item_id, error = _resolve_item(world, state, cmd.direct_object, "take")
    if item_id is None:
        return error
    return take_item(world, state, item_id)


def _cmd_drop(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to drop?"
    if not state.is_carrying(cmd.direct_object):
        return "You don't have that."
    return drop_item(world, state, cmd.direct_object)


def _score_treasure(world: World, state: GameState, item_id: str) -> str:
    """Award a treasure's value the first time it goes into the trophy case."""
    item = world.items[item_id]
    scored = f"scored-{item_id}"
    if not item.has("treasure") or state.flag(scored):
        return ""
    state.set_flag(scored)
    state.score += item.value
    logger.info("treasure_scored", item=item_id, value=item.value, score=state.score)
    if state.score >= world.max_score and not state.flag("won-flag"):
        state.set_flag("won-flag")
        return world.won_message
    return ""


def _cmd_put(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to put?"
    item_id = cmd.direct_object
    held = _held_items(world, state)
    if item_id not in held:
        return "You don't have that."
    item = world.items[item_id]
    if cmd.indirect_object is None:
        return f"Where do you want to put the {item.name}?"

    target_id, error = _resolve_item(world, state, cmd.indirect_object, "put it in")
    if target_id is None:
        return error
    target = world.items[target_id]
    if _is_within(world, state, target_id, item_id):
        return "You can't put something inside itself."
    if not target.has("container"):
        return f"You can't put things in the {target.name}."
    if not state.items[target_id].open:
        return f"The {target.name} is closed."
    if target.capacity:
        used = sum(world.items[i].weight for i in state.items_at(target_id))
        if used + item.weight > target.capacity:
            return "There's no room."

    state.move_item(item_id, target_id)
    result = "Done."
    if target_id == world.trophy_case:
        won = _score_treasure(world, state, item_id)
        if won:
            result = f"{result}\n\n{won}"
    return result


def _cmd_put_on(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "put on")
    if item_id is None:
        return error
    item = world.items[item_id]
    if not item.has("wearable"):
        return f"You can't wear the {item.name}."
    if not state.is_carrying(item_id):
        message = take_item(world, state, item_id)
        if not state.is_carrying(item_id):
            return message
    return f"You are now wearing the {item.name}."


def _cmd_throw(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to throw?"
    if not state.is_carrying(cmd.direct_object):
        return "You don't have that."
    item = world.items[cmd.direct_object]
    state.move_item(cmd.direct_object, state.location)
    actor_id = find_actor(world, state, cmd.indirect_object)
    if actor_id is not None:
        return f"The {item.name} bounces harmlessly off the {world.actors[actor_id].name}."
    return "Thrown."


def _cmd_move(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "move")
    if item_id is None:
        return error
    item = world.items[item_id]
    if item.move_reveals is None:
        if item.has("takeable"):
            return f"Moving the {item.name} reveals nothing."
        return f"You can't move the {item.name}."
    moved = f"{item_id}-moved"
    if state.flag(moved):
        return f"Having moved the {item.name} previously, you find it impossible to move it again."
    state.set_flag(moved)
    state.items[item.move_reveals].invisible = False
    return item.move_text or f"Moving the {item.name} reveals something."


# -- open, close, lock ---------------------------------------------------------


def _set_open_flag(world: World, state: GameState, item_id: str) -> None:
    open_flag = world.items[item_id].open_flag
    if open_flag:
        state.set_flag(open_flag, state.items[item_id].open)


def _cmd_open(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "open")
    if item_id is None:
        return error
    result = open_item(world, state, item_id)
    _set_open_flag(world, state, item_id)
    return result


def _cmd_close(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "close")
    if item_id is None:
        return error
    result = close_item(world, state, item_id)
    _set_open_flag(world, state, item_id)
    return result


def _check_key(world: World, state: GameState, cmd: Command, verb: str) -> tuple[str | None, str]:
    item_id, error = _resolve_item(world, state, cmd.direct_object, verb)
    if item_id is None:
        return None, error
    item = world.items[item_id]
    if not item.has("lockable"):
        return None, f"You can't {verb} that."
    if cmd.indirect_object is None:
        return None, f"{verb.capitalize()} the {item.name} with what?"
    if not state.is_carrying(cmd.indirect_object):
        return None, f"You don't have the {_display(cmd.indirect_object)}."
    if cmd.indirect_object != item.key:
        key = world.items[cmd.indirect_object]
        return None, f"The {key.name} doesn't fit the {item.name}."
    return item_id, ""


def _cmd_unlock(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _check_key(world, state, cmd, "unlock")
    if item_id is None:
        return error
    if not state.items[item_id].locked:
        return "It's not locked."
    state.items[item_id].locked = False
    return "Unlocked."


def _cmd_lock(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _check_key(world, state, cmd, "lock")
    if item_id is None:
        return error
    item_state = state.items[item_id]
    if item_state.locked:
        return "It's already locked."
    if item_state.open:
        return "You'll have to close it first."
    item_state.locked = True
    return "Locked."


# -- light ---------------------------------------------------------------------


def _cmd_turn_on(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "turn on")
    if item_id is None:
        return error
    item = world.items[item_id]
    item_state = state.items[item_id]
    if not item.has("light-source"):
        return "You can't turn that on."
    if item_state.lit:
        return "It's already on."
    if item_state.fuel == 0:
        return f"The {item.name} has burned out and won't light."
    was_dark = is_dark(world, state)
    item_state.lit = True
    result = f"The {item.name} is now on."
    if was_dark and not is_dark(world, state):
        state.dark_turns = 0
        result += "\n\n" + describe_room(world, state, force_full=True)
    return result


def _cmd_turn_off(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "turn off")
    if item_id is None:
        return error
    item = world.items[item_id]
    item_state = state.items[item_id]
    if not item.has("light-source"):
        return "You can't turn that off."
    if not item_state.lit:
        return "It's already off."
    item_state.lit = False
    return f"The {item.name} is now off."


def _cmd_turn(world: World, state: GameState, cmd: Command) -> str:
    match cmd.preposition:
        case "on":
            return _cmd_turn_on(world, state, cmd)
        case "off":
            return _cmd_turn_off(world, state, cmd)
    if cmd.direct_object is None:
        return "What do you want to turn?"
    return "Do you want to turn it on or off?"


# -- actors --------------------------------------------------------------------


def _give_troll(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    if not item.has("treasure"):
        return (
            "The troll, who is not overly proud, graciously accepts the gift "
            f"and, being for the moment sated, throws the {item.name} back to you."
        )
    state.give_to_actor(item_id, "troll")
    state.set_flag("troll-flag")
    state.actors["troll"].hostile = False
    return (
        f"The troll, who is remarkably coordinated, catches the {item.name}. "
        "Satisfied with your tribute, he steps aside and lets you pass."
    )


def _give_thief(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    state.give_to_actor(item_id, "thief")
    if item.has("treasure"):
        state.set_flag("thief-engrossed")
        return (
            "The thief is taken aback by your unexpected generosity, but accepts "
            f"the {item.name} and stops to admire its beauty."
        )
    return f"The thief places the {item.name} in his bag and thanks you politely."


def _give_cyclops(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    cyclops = state.actors["cyclops"]
    if cyclops.asleep:
        return "The cyclops is fast asleep and doesn't notice."
    if item.has("edible"):
        state.move_item(item_id, DESTROYED)
        state.set_flag("cyclops-fed")
        return (
            "The cyclops says \"Mmm Mmm. I love hot peppers! But oh, could I use "
            "a drink. Perhaps I could drink the blood of that thing.\" From the "
            "gleam in his eye, it could be surmised that you are \"that thing\"."
        )
    if item.has("drinkable") and state.flag("cyclops-fed"):
        state.move_item(item_id, DESTROYED)
        cyclops.hostile = False
        cyclops.asleep = True
        state.set_flag("cyclops-flag")
        return (
            "The cyclops takes the water and drinks it down. Within moments he "
            "is snoring loudly, and you step around him easily."
        )
    return "The cyclops is not so stupid as to eat THAT!"


_GIVE_HANDLERS: dict[str, Callable[[World, GameState, str], str]] = {
    "troll": _give_troll,
    "thief": _give_thief,
    "cyclops": _give_cyclops,
}


def _cmd_give(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to give?"
    if cmd.direct_object not in _held_items(world, state):
        return "You don't have that."
    if cmd.indirect_object is None:
        return f"Who do you want to give the {_display(cmd.direct_object)} to?"
    actor_id = find_actor(world, state, cmd.indirect_object)
    if actor_id is None:
        return f"You can't see any {_display(cmd.indirect_object)} here."
    handler = _GIVE_HANDLERS.get(actor_id)
    if handler is None:
        return f"The {world.actors[actor_id].name} politely refuses."
    return handler(world, state, cmd.direct_object)


def _cmd_attack(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to attack?"
    actor_id = find_actor(world, state, cmd.direct_object, living_only=False)
    if actor_id is None:
        if _find(world, state, cmd.direct_object) is not None:
            return "Violence isn't the answer to this one."
        return f"You can't see any {_display(cmd.direct_object)} here."

    actor = world.actors[actor_id]
    actor_state = state.actors[actor_id]
    if not actor_state.alive:
        return f"The {actor.name} is already dead."
    if not actor.has("can-fight"):
        return f"You can't attack the {actor.name}."

    if cmd.indirect_object is not None:
        weapon = cmd.indirect_object
        if not state.is_carrying(weapon):
            return f"You don't have the {_display(weapon)}."
        if not world.items[weapon].has("weapon"):
            return f"Attacking the {actor.name} with the {world.items[weapon].name} is pointless."
    else:
        weapon = combat.player_weapon(world, state)
    if weapon is None:
        return f"Attacking the {actor.name} with your bare hands is suicidal."

    actor_state.asleep = False
    actor_state.hostile = True
    lines = [combat.hero_blow(world, state, actor_id, weapon).message]
    if actor_state.alive:
        lines.append(combat.villain_blow(world, state, actor_id).message)
    return "\n".join(lines)


def _cmd_ulysses(world: World, state: GameState, cmd: Command) -> str:
    cyclops = state.actors.get("cyclops")
    if cyclops is None or not cyclops.alive or cyclops.location != state.location:
        return "Wasn't he a sailor?"
    cyclops.location = NOWHERE
    cyclops.hostile = False
    cyclops.asleep = False
    state.set_flag("cyclops-flag")
    state.set_flag("magic-flag")
    return (
        "The cyclops, hearing the name of his father's deadly nemesis, flees the "
        "room by knocking down the wall on the east of the room."
    )


# -- eating and drinking -------------------------------------------------------


def _cmd_eat(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "eat")
    if item_id is None:
        return error
    item = world.items[item_id]
    if not item.has("edible"):
        return f"I don't think that the {item.name} would agree with you."
    if item_id not in _held_items(world, state):
        return f"You're not holding the {item.name}."
    state.move_item(item_id, DESTROYED)
    return "Thank you very much. It really hit the spot."


def _cmd_drink(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "drink")
    if item_id is None:
        return error
    item = world.items[item_id]
    if not item.has("drinkable"):
        return f"You can't drink the {item.name}."
    if item_id not in _held_items(world, state):
        return f"You'll have to be holding the {item.name} to drink it."
    state.move_item(item_id, DESTROYED)
    return "Thank you very much. I was rather thirsty (from all this talking, probably)."


# -- liquids and rope ----------------------------------------------------------


def _liquid_noun(world: World, liquid_id: str) -> str:
    liquid = world.items[liquid_id]
    return liquid.aliases[0] if liquid.aliases else liquid.name


def _cmd_fill(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to fill?"
    item_id = cmd.direct_object
    if item_id not in _held_items(world, state):
        return "You don't have that."
    item = world.items[item_id]
    if item.liquid is None:
        return f"You can't fill the {item.name}."
    if not state.items[item_id].open:
        return f"The {item.name} is closed."
    if state.items[item.liquid].location == item_id:
        return f"The {item.name} is already full."
    if not world.rooms[state.location].water:
        return "There is nothing to fill it with."
    state.move_item(item.liquid, item_id)
    return f"The {item.name} is now full of {_liquid_noun(world, item.liquid)}."


def _cmd_pour(world: World, state: GameState, cmd: Command) -> str:
    if cmd.direct_object is None:
        return "What do you want to pour?"
    if cmd.direct_object not in world.items:
        return "You don't have that."
    item = world.items[cmd.direct_object]
    if item.liquid is not None:
        container_id, liquid_id = item.id, item.liquid
    else:
        container_id, liquid_id = state.items[item.id].location, item.id
    if not state.is_carrying(container_id):
        return "You don't have that."
    container = world.items[container_id]
    if state.items[liquid_id].location != container_id:
        return f"The {container.name} is empty."
    if not state.items[container_id].open:
        return f"The {container.name} is closed."
    state.move_item(liquid_id, DESTROYED)
    return (
        f"The {_liquid_noun(world, liquid_id)} spills to the floor "
        "and evaporates immediately."
    )


def _cmd_tie(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "tie")
    if item_id is None:
        return error
    item = world.items[item_id]
    if is_tied(world, state, item_id):
        return f"The {item.name} is already tied."
    if cmd.indirect_object is None:
        return f"What do you want to tie the {item.name} to?"
    if not state.is_carrying(item_id):
        return f"You don't have the {item.name}."
    target_id, error = _resolve_item(world, state, cmd.indirect_object, "tie it to")
    if target_id is None:
        return error
    if item.tie_target != target_id:
        return f"You can't tie the {item.name} to the {world.items[target_id].name}."
    state.move_item(item_id, state.location)
    state.set_flag(item.tie_flag)
    return item.tie_text or "Done."


def _cmd_untie(world: World, state: GameState, cmd: Command) -> str:
    item_id, error = _resolve_item(world, state, cmd.direct_object, "untie")
    if item_id is None:
        return error
    if not is_tied(world, state, item_id):
        return "It's not tied."
    item = world.items[item_id]
    state.set_flag(item.tie_flag, False)
    return f"The {item.name} is now untied."


# -- movement aliases ----------------------------------------------------------


def _cmd_walk(world: World, state: GameState, cmd: Command) -> str:
    return "Where do you want to go?"


def _walker(direction: str) -> Handler:
    """Handler that walks in a fixed direction."""

    def handler(world: World, state: GameState, cmd: Command) -> str:
        return move_player(world, state, direction)

    return handler


def _cmd_climb(world: World, state: GameState, cmd: Command) -> str:
    room = world.rooms[state.location]
    for direction in ("up", "down"):
        if direction in room.exits:
            return move_player(world, state, direction)
    return "You can't climb that."


# -- game ----------------------------------------------------------------------


def _cmd_score(world: World, state: GameState, cmd: Command) -> str:
    return (
        f"Your score is {state.score} (total of {world.max_score} points), "
        f"in {state.moves} moves.\n"
        f"This gives you the rank of {rank(state.score, world.max_score)}."
    )


def _cmd_diagnose(world: World, state: GameState, cmd: Command) -> str:
    wounds = -state.player.strength_modifier
    strength = combat.player_strength(state.score, state.player.strength_modifier)
    if wounds <= 0:
        text = "You are in perfect health."
    elif wounds == 1:
        text = "You have a light wound."
    else:
        text = f"You have {wounds} wounds' worth of injuries."
    return f"{text}\nYour fighting strength is {strength}."


def _cmd_verbosity(level: str, message: str) -> Handler:
    def handler(world: World, state: GameState, cmd: Command) -> str:
        state.verbosity = level
        return message

    return handler


def _cmd_help(world: World, state: GameState, cmd: Command) -> str:
    return (
        "Type simple commands like LOOK, TAKE LAMP, OPEN MAILBOX, NORTH or "
        "PUT EGG IN CASE. Useful commands: INVENTORY (I), EXAMINE (X), "
        "SCORE, DIAGNOSE, SAVE, RESTORE, RESTART and QUIT.\n"
        "Treasures placed in the trophy case count toward your score."
    )


def _cmd_version(world: World, state: GameState, cmd: Command) -> str:
    return f"{world.title or 'Delve'}, engine version {VERSION}."


def _save_dir(state: GameState) -> Path:
    if state.save_dir is not None:
        return state.save_dir
    return Config.from_env().save_dir


def _cmd_save(world: World, state: GameState, cmd: Command) -> str:
    try:
        path = persistence.save_game(state, cmd.direct_object, _save_dir(state))
    except persistence.SaveError as exc:
        return str(exc)
    return f"Game saved as {path.stem}."


def _cmd_restore(world: World, state: GameState, cmd: Command) -> str:
    directory = _save_dir(state)
    if cmd.direct_object is None:
        saves = persistence.list_saves(directory)
        if not saves:
            return "There are no saved games."
        return "Saved games:\n" + "\n".join(f"  {name}" for name in saves)
    try:
        restored = persistence.load_game(world, cmd.direct_object, directory)
    except persistence.SaveError as exc:
        logger.warning("save_failed", name=cmd.direct_object, error=str(exc))
        return str(exc)
    state.adopt(restored)
    return "Restored.\n\n" + describe_room(world, state, force_full=True)


def _cmd_restart(world: World, state: GameState, cmd: Command) -> str:
    state.restart_requested = True
    return "Restarting."


def _cmd_quit(world: World, state: GameState, cmd: Command) -> str:
    state.game_over = True
    state.quit_requested = True
    return f"{_cmd_score(world, state, cmd)}\nGoodbye."


def _cmd_wait(world: World, state: GameState, cmd: Command) -> str:
    return "Time passes..."


def _static_response(msg: str) -> Handler:
    """Return a handler that ignores all arguments and returns a fixed message."""

    def handler(world: World, state: GameState, cmd: Command) -> str:
        return msg

    return handler


_VERB_DISPATCH: dict[str, Handler] = {
    "walk": _cmd_walk,
    "look": _cmd_look,
    "examine": _cmd_examine,
    **dict.fromkeys(("look-in", "look-on", "search"), _cmd_look_in),
    "read": _cmd_read,
    "inventory": _cmd_inventory,
    "take": _cmd_take,
    "drop": _cmd_drop,
    "put": _cmd_put,
    "put-on": _cmd_put_on,
    "throw": _cmd_throw,
    "move": _cmd_move,
    "open": _cmd_open,
    "close": _cmd_close,
    "unlock": _cmd_unlock,
    "lock": _cmd_lock,
    "turn": _cmd_turn,
    **dict.fromkeys(("turn-on", "light"), _cmd_turn_on),
    **dict.fromkeys(("turn-off", "extinguish"), _cmd_turn_off),
    "give": _cmd_give,
    **dict.fromkeys(("attack", "kill"), _cmd_attack),
    "ulysses": _cmd_ulysses,
    "eat": _cmd_eat,
    "drink": _cmd_drink,
    "fill": _cmd_fill,
    "pour": _cmd_pour,
    "tie": _cmd_tie,
    "untie": _cmd_untie,
    "climb": _cmd_climb,
    "climb-up": _walker("up"),
    "climb-down": _walker("down"),
    "enter": _walker("in"),
    "exit": _walker("out"),
    "wait": _cmd_wait,
    "score": _cmd_score,
    "diagnose": _cmd_diagnose,
    "help": _cmd_help,
    "version": _cmd_version,
    "brief": _cmd_verbosity(
        "brief", "Brief descriptions: rooms are described fully on the first visit."
    ),
    "verbose": _cmd_verbosity("verbose", "Maximum verbosity."),
    "superbrief": _cmd_verbosity("superbrief", "Superbrief descriptions."),
    "save": _cmd_save,
    "restore": _cmd_restore,
    "restart": _cmd_restart,
    "quit": _cmd_quit,
    "listen": _static_response("You hear nothing unusual."),
    "smell": _static_response("You smell nothing unusual."),
    "touch": _static_response("You feel nothing unusual."),
    "jump": _static_response("Wheeeeeeeeee!!!!!"),
    "swim": _static_response("Go jump in a lake!"),
    "pray": _static_response("If you pray enough, your prayers may be answered."),
    "sleep": _static_response("There's nothing to do but wait, and you're not tired."),
    "yell": _static_response("Aaaarrrrgggghhhh!"),
    "curse": _static_response("Such language in a high-class establishment like this!"),
    "xyzzy": _static_response('A hollow voice says "Fool."'),
    "say": _static_response(
        "Talking to yourself is said to be a sign of impending mental collapse."
    ),
    "hello": _static_response("Hello."),
    "wave": _static_response("Waved."),
}
