"""Mutable per-session game state.

Every value here is plain data keyed by World ids, with no references
into World objects, so a snapshot serializes straight to JSON.
"""

import random
from dataclasses import dataclass, field, fields
from pathlib import Path

from .world import World

# Special item locations
INVENTORY = "inventory"
GLOBAL = "global"
DESTROYED = "destroyed"
# Actors that have left the map entirely
NOWHERE = "nowhere"

VERBOSITY_LEVELS = ("brief", "verbose", "superbrief")


@dataclass
class ItemState:
    """Dynamic fields of one item."""

    location: str
    open: bool = False
    lit: bool = False
    locked: bool = False
    invisible: bool = False
    fuel: int = -1  # -1 means it never runs out
    glow_level: int = 0


@dataclass
class ActorState:
    """Dynamic fields of one actor."""

    location: str
    alive: bool = True
    hostile: bool = False
    strength: int = 0
    weapon: str | None = None
    inventory: list[str] = field(default_factory=list)
    staggered: bool = False
    asleep: bool = False


@dataclass
class Player:
    inventory: list[str] = field(default_factory=list)
    max_weight: int = 100
    health: int = 100
    strength_modifier: int = 0


@dataclass
class GameState:
    """All mutable state for one game session."""

    location: str
    score: int = 0
    moves: int = 0
    flags: dict[str, bool] = field(default_factory=dict)
    game_over: bool = False
    won: bool = False
    player: Player = field(default_factory=Player)
    items: dict[str, ItemState] = field(default_factory=dict)
    actors: dict[str, ActorState] = field(default_factory=dict)
    visited: set[str] = field(default_factory=set)
    verbosity: str = "brief"
    dark_turns: int = 0
    restart_requested: bool = False
    quit_requested: bool = False
    rng: random.Random = field(
        default_factory=random.Random, repr=False, compare=False
    )
    save_dir: Path | None = field(default=None, repr=False, compare=False)

    def adopt(self, other: "GameState") -> None:
        """Take over every game field of ``other``, keeping rng and save_dir."""
        for f in fields(self):
            if f.name not in ("rng", "save_dir"):
                setattr(self, f.name, getattr(other, f.name))

    def flag(self, name: str) -> bool:
        return self.flags.get(name, False)

    def set_flag(self, name: str, value: bool = True) -> None:
        self.flags[name] = value

    def items_at(self, location: str) -> list[str]:
        """Ids of items whose location is ``location``, in world order."""
        return [
            item_id
            for item_id, item in self.items.items()
            if item.location == location
        ]

    def actors_at(self, room_id: str) -> list[str]:
        return [
            actor_id
            for actor_id, actor in self.actors.items()
            if actor.location == room_id
        ]

    def is_carrying(self, item_id: str) -> bool:
        item = self.items.get(item_id)
        return item is not None and item.location == INVENTORY

    def move_item(self, item_id: str, destination: str) -> None:
        """Relocate an item, keeping inventory lists in step with locations."""
        item = self.items[item_id]
        self._detach(item_id, item.location)
        item.location = destination
        if destination == INVENTORY:
            self.player.inventory.append(item_id)
        elif destination in self.actors:
            self.actors[destination].inventory.append(item_id)

    def give_to_player(self, item_id: str) -> None:
        self.move_item(item_id, INVENTORY)

    def give_to_actor(self, item_id: str, actor_id: str) -> None:
        self.move_item(item_id, actor_id)

    def _detach(self, item_id: str, location: str) -> None:
        if location == INVENTORY:
            if item_id in self.player.inventory:
                self.player.inventory.remove(item_id)
        elif location in self.actors:
            actor = self.actors[location]
            if item_id in actor.inventory:
                actor.inventory.remove(item_id)
            if actor.weapon == item_id:
                actor.weapon = None


def new_game_state(world: World, rng: random.Random | None = None) -> GameState:
    """Create a fresh game state with everything in its starting position."""
    state = GameState(
        location=world.start_room,
        player=Player(max_weight=world.max_carry, health=world.max_health),
        rng=rng or random.Random(),
    )

    for item_id, item in world.items.items():
        state.items[item_id] = ItemState(
            location=item.location,
            open=item.has("open"),
            lit=item.has("lit"),
            locked=item.has("locked"),
            invisible=item.has("initially-invisible"),
            fuel=item.fuel,
        )

    for actor_id, actor in world.actors.items():
        state.actors[actor_id] = ActorState(
            location=actor.location,
            hostile=actor.hostile,
            strength=actor.strength,
            weapon=actor.weapon,
        )

    for item_id, item in state.items.items():
        if item.location == INVENTORY:
            state.player.inventory.append(item_id)
        elif item.location in state.actors:
            state.actors[item.location].inventory.append(item_id)

    state.visited.add(world.start_room)
    return state
