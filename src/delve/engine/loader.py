"""Build a World from the YAML world file.

The document has top-level settings plus ``rooms``, ``items``, ``actors``
and ``combat`` sections. Each section has its own parser; references
between sections are checked once everything is loaded.
"""

from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from ..logging import get_logger
from .state import DESTROYED, GLOBAL, INVENTORY
from .vocabulary import DIRECTIONS, build_vocabulary
from .world import Actor, Exit, Item, Room, World

logger = get_logger(__name__)

_DIRECTION_NAMES = {
    alias: canonical
    for canonical, aliases in DIRECTIONS.items()
    for alias in (canonical, *aliases)
}

_MARKERS = {INVENTORY, GLOBAL, DESTROYED}


class WorldError(ValueError):
    """The world file is malformed or refers to something that doesn't exist."""


def default_world_path() -> Path:
    """Locate the packaged world.yaml via importlib.resources."""
    return resources.files("delve.data").joinpath("world.yaml")


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _parse_exit(room_id: str, direction: str, spec: Any) -> tuple[str, Exit]:
    canonical = _DIRECTION_NAMES.get(str(direction))
    if canonical is None:
        raise WorldError(f"room {room_id!r}: unknown direction {direction!r}")
    if isinstance(spec, str):
        return canonical, Exit(destination=spec)
    return canonical, Exit(
        destination=spec["to"],
        condition=spec.get("if"),
        message=_text(spec.get("message")) or None,
    )


def _parse_rooms(world: World, section: dict) -> None:
    for room_id, spec in section.items():
        flags = set(spec.get("flags", ()))
        room = Room(
            id=room_id,
            name=spec["name"],
            description=_text(spec.get("description")),
            dark="dark" in flags,
            lit="dark" not in flags,
            outdoors="outdoors" in flags,
            water="water" in flags,
        )
        for direction, exit_spec in (spec.get("exits") or {}).items():
            canonical, exit_ = _parse_exit(room_id, direction, exit_spec)
            room.exits[canonical] = exit_
        world.rooms[room_id] = room


def _parse_items(world: World, section: dict) -> None:
    for item_id, spec in section.items():
        world.items[item_id] = Item(
            id=item_id,
            name=spec.get("name", item_id),
            aliases=tuple(spec.get("aliases", ())),
            description=_text(spec.get("description")),
            examine_text=_text(spec.get("examine")),
            read_text=_text(spec.get("text")),
            location=spec.get("location", DESTROYED),
            flags=frozenset(spec.get("flags", ())),
            weight=int(spec.get("weight", 5)),
            value=int(spec.get("value", 0)),
            capacity=int(spec.get("capacity", 0)),
            key=spec.get("key"),
            fuel=int(spec.get("fuel", -1)),
            fuel_warnings={
                int(turns): _text(message)
                for turns, message in (spec.get("fuel_warnings") or {}).items()
            },
            global_rooms=tuple(spec.get("rooms", ())),
            open_flag=spec.get("open_flag"),
            move_reveals=(spec.get("move") or {}).get("reveals"),
            move_text=_text((spec.get("move") or {}).get("text")),
            liquid=spec.get("liquid"),
            tie_target=(spec.get("tie") or {}).get("to"),
            tie_flag=(spec.get("tie") or {}).get("flag"),
            tie_text=_text((spec.get("tie") or {}).get("text")),
        )


def _parse_melee(section: dict | None) -> dict[str, tuple[str, ...]]:
    return {
        outcome: tuple(_text(message) for message in messages)
        for outcome, messages in (section or {}).items()
    }


def _parse_actors(world: World, section: dict) -> None:
    for actor_id, spec in section.items():
        combat = spec.get("combat") or {}
        death = spec.get("on_death") or {}
        world.actors[actor_id] = Actor(
            id=actor_id,
            name=spec.get("name", actor_id),
            aliases=tuple(spec.get("aliases", ())),
            description=_text(spec.get("description")),
            location=spec["location"],
            flags=frozenset(spec.get("flags", ())),
            strength=int(combat.get("strength", 0)),
            weapon=combat.get("weapon"),
            hostile=bool(spec.get("hostile", False)),
            best_weapon=combat.get("best_weapon"),
            best_advantage=int(combat.get("best_advantage", 0)),
            melee=_parse_melee(combat.get("melee")),
            death_flag=death.get("flag"),
            death_message=_text(death.get("message")),
            asleep_description=_text(spec.get("asleep")),
        )


def _parse_settings(world: World, document: dict) -> None:
    world.title = _text(document.get("title"))
    world.intro = _text(document.get("intro"))
    world.start_room = document["start_room"]
    world.treasure_room = document.get("treasure_room")
    world.trophy_case = document.get("trophy_case")
    world.victory_room = document.get("victory_room")
    world.won_message = _text(document.get("won_message"))
    player = document.get("player") or {}
    world.max_carry = int(player.get("max_carry", world.max_carry))
    world.max_health = int(player.get("health", world.max_health))


def _parse_combat(world: World, section: dict) -> None:
    world.hero_melee = _parse_melee(section.get("hero"))


def _check_references(world: World) -> None:
    """Raise WorldError for any id that doesn't name an existing entity."""
    if world.start_room not in world.rooms:
        raise WorldError(f"start room {world.start_room!r} does not exist")
    for room in world.rooms.values():
        for direction, exit_ in room.exits.items():
            if exit_.destination not in world.rooms:
                raise WorldError(
                    f"room {room.id!r}: exit {direction} leads to "
                    f"unknown room {exit_.destination!r}"
                )
    holders = set(world.rooms) | set(world.items) | set(world.actors) | _MARKERS
    for item in world.items.values():
        if item.location not in holders:
            raise WorldError(
                f"item {item.id!r}: unknown location {item.location!r}"
            )
        if item.key is not None and item.key not in world.items:
            raise WorldError(f"item {item.id!r}: unknown key {item.key!r}")
        for field_name in ("liquid", "tie_target"):
            ref = getattr(item, field_name)
            if ref is not None and ref not in world.items:
                raise WorldError(f"item {item.id!r}: unknown {field_name} {ref!r}")
    for actor in world.actors.values():
        if actor.location not in world.rooms:
            raise WorldError(
                f"actor {actor.id!r}: unknown location {actor.location!r}"
            )
        if actor.weapon is not None and actor.weapon not in world.items:
            raise WorldError(f"actor {actor.id!r}: unknown weapon {actor.weapon!r}")
    for setting in ("treasure_room", "victory_room"):
        room_id = getattr(world, setting)
        if room_id is not None and room_id not in world.rooms:
            raise WorldError(f"{setting} {room_id!r} does not exist")


def _object_names(world: World) -> dict[str, list[str]]:
    names: dict[str, list[str]] = {}
    for entity in (*world.items.values(), *world.actors.values()):
        names[entity.id] = [entity.name, *entity.aliases]
    return names


def load_world(data_path: Path | None = None) -> World:
    """Parse the world file and return a fully linked World."""
    data_path = data_path or default_world_path()
    try:
        document = yaml.safe_load(data_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise WorldError(f"{data_path}: {exc}") from exc

    if not isinstance(document, dict):
        raise WorldError(f"{data_path}: expected a mapping at the top level")

    world = World()
    try:
        _parse_settings(world, document)
        _parse_rooms(world, document.get("rooms") or {})
        _parse_items(world, document.get("items") or {})
        _parse_actors(world, document.get("actors") or {})
        _parse_combat(world, document.get("combat") or {})
    except KeyError as exc:
        raise WorldError(f"{data_path}: missing required field {exc}") from exc

    _check_references(world)
    world.vocabulary = build_vocabulary(_object_names(world))

    logger.info(
        "world_loaded",
        path=str(data_path),
        rooms=len(world.rooms),
        items=len(world.items),
        actors=len(world.actors),
    )
    return world
