"""Word tables mapping player input to canonical verbs, objects and directions.

Verbs, prepositions and directions are fixed here. Object names come from
the world data so that authored content defines its own nouns.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# canonical verb -> aliases (multi-word aliases are space separated)
VERBS: dict[str, tuple[str, ...]] = {
    "take": ("take", "get", "hold", "carry", "remove", "grab", "catch", "pick up"),
    "drop": ("drop", "release", "discard", "put down"),
    "examine": (
        "examine", "x", "inspect", "describe", "what", "whats", "look at",
    ),
    "look": ("look", "l", "stare", "gaze"),
    "look-in": ("look in", "look inside"),
    "look-on": ("look on",),
    "turn": ("turn", "switch", "flip"),
    "turn-on": ("turn on", "switch on", "activate"),
    "turn-off": ("turn off", "switch off", "deactivate"),
    "light": ("light",),
    "extinguish": ("extinguish", "douse", "blow out"),
    "attack": ("attack", "fight", "hurt", "injure", "hit", "strike"),
    "kill": ("kill", "murder", "slay", "dispatch", "stab"),
    "put": ("put", "stuff", "insert", "place", "hide"),
    "put-on": ("put on",),
    "give": ("give", "donate", "offer", "feed"),
    "inventory": ("inventory", "i", "inv"),
    "walk": ("walk", "go", "run", "proceed", "step"),
    "open": ("open",),
    "close": ("close", "shut"),
    "unlock": ("unlock",),
    "lock": ("lock",),
    "read": ("read", "skim"),
    "move": ("move", "pull", "push", "shift", "lift"),
    "eat": ("eat", "consume", "taste", "bite"),
    "drink": ("drink", "sip", "quaff"),
    "fill": ("fill",),
    "pour": ("pour", "spill", "empty"),
    "tie": ("tie", "fasten", "attach"),
    "untie": ("untie", "unfasten", "detach"),
    "climb": ("climb", "scale"),
    "climb-up": ("climb up",),
    "climb-down": ("climb down",),
    "enter": ("enter",),
    "exit": ("exit", "leave"),
    "wait": ("wait", "z"),
    "score": ("score",),
    "diagnose": ("diagnose",),
    "help": ("help", "hint", "info"),
    "version": ("version",),
    "brief": ("brief",),
    "verbose": ("verbose",),
    "superbrief": ("superbrief",),
    "save": ("save",),
    "restore": ("restore", "load"),
    "restart": ("restart",),
    "quit": ("quit", "q"),
    "listen": ("listen",),
    "smell": ("smell", "sniff"),
    "touch": ("touch", "feel", "rub"),
    "search": ("search",),
    "jump": ("jump", "leap"),
    "swim": ("swim", "wade"),
    "pray": ("pray",),
    "sleep": ("sleep",),
    "yell": ("yell", "scream", "shout"),
    "curse": ("curse", "damn", "swear"),
    "xyzzy": ("xyzzy", "plugh"),
    "ulysses": ("ulysses", "odysseus"),
    "say": ("say",),
    "hello": ("hello", "hi"),
    "wave": ("wave",),
    "throw": ("throw", "hurl", "toss"),
}

PREPOSITIONS = frozenset(
    """in into inside on onto upon at to toward towards with using from
    through across under underneath beneath behind over off for about
    around down up out away""".split()
)

DIRECTIONS: dict[str, tuple[str, ...]] = {
    "north": ("north", "n"),
    "south": ("south", "s"),
    "east": ("east", "e"),
    "west": ("west", "w"),
    "northeast": ("northeast", "ne"),
    "northwest": ("northwest", "nw"),
    "southeast": ("southeast", "se"),
    "southwest": ("southwest", "sw"),
    "up": ("up", "u"),
    "down": ("down", "d"),
    "in": ("in",),
    "out": ("out",),
}

# Canonical verb whose aliases may be followed by a bare direction.
MOVEMENT_VERB = "walk"


def _invert(table: Mapping[str, Iterable[str]]) -> dict[str, str]:
    index: dict[str, str] = {}
    for canonical, aliases in table.items():
        index[canonical] = canonical
        for alias in aliases:
            index[alias] = canonical
    return index


@dataclass(frozen=True)
class Vocabulary:
    """Read-only lookup tables. Absence is reported as None, never raised."""

    verbs: Mapping[str, str] = field(default_factory=dict)
    objects: Mapping[str, str] = field(default_factory=dict)
    directions: Mapping[str, str] = field(default_factory=dict)
    prepositions: frozenset[str] = frozenset()

    def canonical_verb(self, word: str) -> str | None:
        return self.verbs.get(word)

    def canonical_object(self, phrase: str) -> str | None:
        return self.objects.get(phrase)

    def canonical_direction(self, word: str) -> str | None:
        return self.directions.get(word)

    def is_preposition(self, word: str) -> bool:
        return word in self.prepositions

    def movement_verbs(self) -> frozenset[str]:
        """Aliases of the walk verb, used for the "go <direction>" shortcut."""
        return frozenset(
            word for word, verb in self.verbs.items() if verb == MOVEMENT_VERB
        )


def build_vocabulary(objects: Mapping[str, Iterable[str]]) -> Vocabulary:
    """Build the vocabulary from the fixed tables plus world object names.

    ``objects`` maps each canonical object id to its names and aliases.
    When two objects share an alias the first one listed wins.
    """
    object_index: dict[str, str] = {}
    for object_id, names in objects.items():
        object_index.setdefault(object_id, object_id)
        for name in names:
            object_index.setdefault(name.lower(), object_id)

    return Vocabulary(
        verbs=MappingProxyType(_invert(VERBS)),
        objects=MappingProxyType(object_index),
        directions=MappingProxyType(_invert(DIRECTIONS)),
        prepositions=PREPOSITIONS,
    )
