"""Immutable definitions of the game world.

These are loaded once from the world YAML at startup. Everything that
changes during play lives in GameState, addressed by the ids defined here.
"""

from dataclasses import dataclass, field

from .vocabulary import Vocabulary


@dataclass(frozen=True)
class Exit:
    """A directed connection, optionally gated by a single named flag."""

    destination: str
    condition: str | None = None
    message: str | None = None


@dataclass
class Room:
    """A location in the game world."""

    id: str
    name: str
    description: str = ""
    exits: dict[str, Exit] = field(default_factory=dict)
    lit: bool = False
    dark: bool = False
    outdoors: bool = False
    water: bool = False


@dataclass
class Item:
    """An item definition.

    ``flags`` holds capabilities (takeable, container, weapon, ...) along
    with the starting values of the dynamic switches (open, lit, locked,
    initially-invisible) that GameState copies at game start.
    ``liquid`` names the item a container holds when filled, and the
    ``tie_*`` fields say what the item can be tied to and which flag that sets.
    """

    id: str
    name: str
    aliases: tuple[str, ...] = ()
    description: str = ""
    examine_text: str = ""
    read_text: str = ""
    location: str = ""
    flags: frozenset[str] = frozenset()
    weight: int = 5
    value: int = 0
    capacity: int = 0
    key: str | None = None
    fuel: int = -1
    fuel_warnings: dict[int, str] = field(default_factory=dict)
    global_rooms: tuple[str, ...] = ()
    open_flag: str | None = None
    move_reveals: str | None = None
    move_text: str = ""
    liquid: str | None = None
    tie_target: str | None = None
    tie_flag: str | None = None
    tie_text: str = ""

    def has(self, flag: str) -> bool:
        return flag in self.flags


@dataclass
class Actor:
    """A non-player character and its combat profile."""

    id: str
    name: str
    aliases: tuple[str, ...] = ()
    description: str = ""
    location: str = ""
    flags: frozenset[str] = frozenset()
    strength: int = 0
    weapon: str | None = None
    hostile: bool = False
    best_weapon: str | None = None
    best_advantage: int = 0
    melee: dict[str, tuple[str, ...]] = field(default_factory=dict)
    death_flag: str | None = None
    death_message: str = ""
    asleep_description: str = ""

    def has(self, flag: str) -> bool:
        return flag in self.flags


@dataclass
class World:
    """The complete static game world."""

    title: str = ""
    intro: str = ""
    start_room: str = ""
    treasure_room: str | None = None
    trophy_case: str | None = None
    victory_room: str | None = None
    won_message: str = ""
    max_carry: int = 100
    max_health: int = 100
    rooms: dict[str, Room] = field(default_factory=dict)
    items: dict[str, Item] = field(default_factory=dict)
    actors: dict[str, Actor] = field(default_factory=dict)
    hero_melee: dict[str, tuple[str, ...]] = field(default_factory=dict)
    vocabulary: Vocabulary = field(default_factory=Vocabulary)

    @property
    def max_score(self) -> int:
        """Total value of every treasure in the world."""
        return sum(item.value for item in self.items.values() if item.has("treasure"))
