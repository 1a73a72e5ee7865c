"""Movement, lighting, lookup and containment rules over World + GameState.

Every operation here either succeeds and mutates state, or returns a
message and leaves the entity it was asked about untouched.
"""

from .state import GLOBAL, GameState
from .world import World

DARKNESS = "It is pitch black. You are likely to be eaten by a grue."
CANT_GO = "You can't go that way."


def _a(name: str) -> str:
    return f"an {name}" if name[:1] in "aeiou" else f"a {name}"


def article(name: str) -> str:
    """The name with a capitalized indefinite article, e.g. "An egg"."""
    text = _a(name)
    return text[0].upper() + text[1:]


def has_light(world: World, state: GameState, room_id: str | None = None) -> bool:
    """True if the room is lit or the player carries a lit light source."""
    room = world.rooms.get(room_id or state.location)
    if room is not None and room.lit:
        return True
    return any(
        state.items[item_id].lit and world.items[item_id].has("light-source")
        for item_id in state.player.inventory
    )


def is_dark(world: World, state: GameState) -> bool:
    return not has_light(world, state)


def is_visible(state: GameState, item_id: str) -> bool:
    return not state.items[item_id].invisible


def can_see_inside(world: World, state: GameState, item_id: str) -> bool:
    return state.items[item_id].open or world.items[item_id].has("transparent")


def container_contents(state: GameState, item_id: str) -> list[str]:
    return [i for i in state.items_at(item_id) if is_visible(state, i)]


def _with_contents(world: World, state: GameState, item_ids: list[str]) -> list[str]:
    """Expand a list of items with the contents of open or transparent containers."""
    found = []
    for item_id in item_ids:
        if not is_visible(state, item_id):
            continue
        found.append(item_id)
        if world.items[item_id].has("container") and can_see_inside(
            world, state, item_id
        ):
            found.extend(_with_contents(world, state, state.items_at(item_id)))
    return found


def _globals_here(world: World, state: GameState) -> list[str]:
    return [
        item_id
        for item_id in state.items_at(GLOBAL)
        if is_visible(state, item_id)
        and (
            not world.items[item_id].global_rooms
            or state.location in world.items[item_id].global_rooms
        )
    ]


def reachable_items(world: World, state: GameState) -> list[str]:
    """Items the player can refer to: the room, its scenery, then inventory."""
    in_room = _with_contents(world, state, state.items_at(state.location))
    carried = _with_contents(world, state, list(state.player.inventory))
    return in_room + _globals_here(world, state) + carried


def is_reachable(world: World, state: GameState, item_id: str) -> bool:
    return item_id in reachable_items(world, state)


def _matches(name: str, entity_id: str, display: str, aliases: tuple[str, ...]) -> bool:
    return name in (entity_id, display) or name in aliases


def find_item(world: World, state: GameState, name: str | None) -> str | None:
    """Resolve ``name`` to a reachable item id by id, exact name or alias."""
    if name is None:
        return None
    for item_id in reachable_items(world, state):
        item = world.items[item_id]
        if _matches(name, item_id, item.name, item.aliases):
            return item_id
    return None


def find_actor(
    world: World, state: GameState, name: str | None, living_only: bool = True
) -> str | None:
    """Resolve ``name`` to an actor in the current room."""
    if name is None:
        return None
    for actor_id in state.actors_at(state.location):
        if living_only and not state.actors[actor_id].alive:
            continue
        actor = world.actors[actor_id]
        if _matches(name, actor_id, actor.name, actor.aliases):
            return actor_id
    return None


def is_tied(world: World, state: GameState, item_id: str) -> bool:
    flag = world.items[item_id].tie_flag
    return flag is not None and state.flag(flag)


def item_line(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    if is_tied(world, state, item_id):
        target = world.items[item.tie_target]
        return f"{article(item.name)} is tied to the {target.name}."
    return item.description or f"There is {_a(item.name)} here."


def actor_line(world: World, state: GameState, actor_id: str) -> str:
    actor = world.actors[actor_id]
    if state.actors[actor_id].asleep:
        return actor.asleep_description or f"The {actor.name} is fast asleep."
    return actor.description


def describe_room(
    world: World, state: GameState, room_id: str | None = None, force_full: bool = False
) -> str:
    """Name, description, listed items and living actors of a room."""
    room = world.rooms[room_id or state.location]
    if not has_light(world, state, room.id):
        return DARKNESS

    lines = [room.name]
    full = force_full or state.verbosity == "verbose" or room.id not in state.visited
    if room.description and state.verbosity != "superbrief" and full:
        lines.append(room.description)

    for item_id in state.items_at(room.id):
        item = world.items[item_id]
        if item.has("no-list") or not is_visible(state, item_id):
            continue
        lines.append(item_line(world, state, item_id))
        if item.has("container") and can_see_inside(world, state, item_id):
            contents = container_contents(state, item_id)
            if contents:
                lines.append(f"The {item.name} contains:")
                lines.extend(f"  {article(world.items[i].name)}" for i in contents)

    for actor_id in state.actors_at(room.id):
        if state.actors[actor_id].alive:
            lines.append(actor_line(world, state, actor_id))

    return "\n".join(lines)


def move_player(world: World, state: GameState, direction: str) -> str:
    """Walk through an exit, or explain why not. Failures never move the player."""
    room = world.rooms[state.location]
    exit_ = room.exits.get(direction)
    if exit_ is None:
        return CANT_GO
    if exit_.condition is not None and not state.flag(exit_.condition):
        return exit_.message or CANT_GO

    destination = world.rooms.get(exit_.destination)
    if destination is None:
        return CANT_GO
    if destination.dark and not has_light(world, state, destination.id):
        return DARKNESS

    state.location = destination.id
    description = describe_room(world, state)
    state.visited.add(destination.id)

    if destination.id == world.victory_room:
        state.won = True
        state.game_over = True
    return description


def open_item(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    if not (item.has("container") or item.has("door")):
        return "You can't open that."
    item_state = state.items[item_id]
    if item_state.open:
        return "It's already open."
    if item_state.locked:
        return f"The {item.name} is locked."
    item_state.open = True
    contents = container_contents(state, item_id)
    if item.has("container") and contents:
        names = ", ".join(_a(world.items[i].name) for i in contents)
        return f"Opening the {item.name} reveals {names}."
    return "Opened."


def close_item(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    if not (item.has("container") or item.has("door")):
        return "You can't close that."
    item_state = state.items[item_id]
    if not item_state.open:
        return "It's already closed."
    item_state.open = False
    return "Closed."


def look_in(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    if not item.has("container"):
        return "You can't look inside that."
    if not can_see_inside(world, state, item_id):
        return f"You can't see inside the closed {item.name}."
    contents = container_contents(state, item_id)
    if not contents:
        return f"The {item.name} is empty."
    lines = [f"The {item.name} contains:"]
    lines.extend(f"  {article(world.items[i].name)}" for i in contents)
    return "\n".join(lines)


def carried_weight(world: World, state: GameState) -> int:
    """Weight of everything carried, including the contents of carried containers."""

    def weight(item_id: str) -> int:
        return world.items[item_id].weight + sum(
            weight(inner) for inner in state.items_at(item_id)
        )

    return sum(weight(item_id) for item_id in state.player.inventory)


def take_item(world: World, state: GameState, item_id: str) -> str:
    item = world.items[item_id]
    if state.is_carrying(item_id):
        return "You already have that."
    if is_tied(world, state, item_id):
        return f"The {item.name} is tied to the {world.items[item.tie_target].name}."
    if not item.has("takeable") or not is_reachable(world, state, item_id):
        return f"You can't take the {item.name}."
    if item_id in _with_contents(world, state, list(state.player.inventory)):
        state.give_to_player(item_id)
        return "Taken."
    load = carried_weight(world, state)
    extra = item.weight + sum(world.items[i].weight for i in state.items_at(item_id))
    if load + extra > state.player.max_weight:
        return "Your load is too heavy."
    state.give_to_player(item_id)
    return "Taken."


def drop_item(world: World, state: GameState, item_id: str) -> str:
    if not state.is_carrying(item_id):
        return "You don't have that."
    state.move_item(item_id, state.location)
    return "Dropped."
