"""Save and restore games as versioned JSON files.

Only the dynamic part of the game is written. Restoring builds a fresh
GameState from the World and applies the saved fields to it, so names,
descriptions and connectivity always come from the current world file.
"""

import datetime as dt
import json
import random
from pathlib import Path
from typing import Any

from ..logging import get_logger
from .state import INVENTORY, VERBOSITY_LEVELS, GameState, new_game_state
from .world import World

logger = get_logger(__name__)

SAVE_VERSION = "1.0"
SAVE_SUFFIX = ".json"


class SaveError(Exception):
    """A save file could not be written, read or applied."""


def save_filename(name: str | None = None, now: dt.datetime | None = None) -> str:
    """Normalize a save name, or invent a timestamped one."""
    if not name:
        now = now or dt.datetime.now()
        return f"delve_save_{now:%Y%m%d_%H%M%S}{SAVE_SUFFIX}"
    # Saves always land directly in the save directory.
    name = Path(name).name
    if name in ("", ".", ".."):
        name = "save"
    if not name.endswith(SAVE_SUFFIX):
        name += SAVE_SUFFIX
    return name


def snapshot(state: GameState) -> dict[str, Any]:
    """The serializable subset of a GameState."""
    return {
        "version": SAVE_VERSION,
        "timestamp": dt.datetime.now(dt.UTC).isoformat(),
        "game_state": {
            "location": state.location,
            "score": state.score,
            "moves": state.moves,
            "flags": dict(state.flags),
            "game_over": state.game_over,
            "won": state.won,
            "visited": sorted(state.visited),
            "verbosity": state.verbosity,
            "dark_turns": state.dark_turns,
            "player": {
                "inventory": list(state.player.inventory),
                "health": state.player.health,
                "max_weight": state.player.max_weight,
                "strength_modifier": state.player.strength_modifier,
            },
            "items": {
                item_id: {
                    "location": item.location,
                    "flags": {
                        "open": item.open,
                        "lit": item.lit,
                        "locked": item.locked,
                        "invisible": item.invisible,
                    },
                    "fuel": item.fuel,
                    "glow_level": item.glow_level,
                }
                for item_id, item in state.items.items()
            },
            "actors": {
                actor_id: {
                    "location": actor.location,
                    "flags": {
                        "alive": actor.alive,
                        "staggered": actor.staggered,
                        "asleep": actor.asleep,
                    },
                    "strength": actor.strength,
                    "weapon": actor.weapon,
                    "inventory": list(actor.inventory),
                    "hostile": actor.hostile,
                }
                for actor_id, actor in state.actors.items()
            },
        },
    }


def _apply(world: World, data: dict[str, Any], rng: random.Random) -> GameState:
    """Build a GameState from parsed save data. Raises KeyError/TypeError/ValueError."""
    saved = data["game_state"]
    state = new_game_state(world, rng)

    if saved["location"] not in world.rooms:
        raise ValueError(f"unknown room {saved['location']!r}")
    state.location = saved["location"]
    state.score = int(saved["score"])
    state.moves = int(saved["moves"])
    state.flags = {str(k): bool(v) for k, v in saved["flags"].items()}
    state.game_over = bool(saved["game_over"])
    state.won = bool(saved["won"])
    state.visited = {r for r in saved.get("visited", ()) if r in world.rooms}
    if saved.get("verbosity") in VERBOSITY_LEVELS:
        state.verbosity = saved["verbosity"]
    state.dark_turns = int(saved.get("dark_turns", 0))

    player = saved["player"]
    state.player.health = int(player["health"])
    state.player.max_weight = int(player["max_weight"])
    state.player.strength_modifier = int(player.get("strength_modifier", 0))

    for item_id, fields in saved["items"].items():
        item = state.items.get(item_id)
        if item is None:
            continue
        flags = fields.get("flags", {})
        item.location = fields["location"]
        item.open = bool(flags.get("open", item.open))
        item.lit = bool(flags.get("lit", item.lit))
        item.locked = bool(flags.get("locked", item.locked))
        item.invisible = bool(flags.get("invisible", item.invisible))
        item.fuel = int(fields.get("fuel", item.fuel))
        item.glow_level = int(fields.get("glow_level", 0))

    for actor_id, fields in saved["actors"].items():
        actor = state.actors.get(actor_id)
        if actor is None:
            continue
        flags = fields.get("flags", {})
        actor.location = fields["location"]
        actor.alive = bool(flags.get("alive", True))
        actor.staggered = bool(flags.get("staggered", False))
        actor.asleep = bool(flags.get("asleep", False))
        actor.strength = int(fields["strength"])
        actor.weapon = fields.get("weapon")
        actor.hostile = bool(fields.get("hostile", False))

    # Inventory order comes from the save; membership from item locations.
    state.player.inventory = _ordered_holdings(
        state, INVENTORY, player["inventory"]
    )
    for actor_id, actor in state.actors.items():
        listed = saved["actors"].get(actor_id, {}).get("inventory", ())
        actor.inventory = _ordered_holdings(state, actor_id, listed)
    return state


def _ordered_holdings(state: GameState, holder: str, listed) -> list[str]:
    held = state.items_at(holder)
    ordered = [item_id for item_id in listed if item_id in held]
    return ordered + [item_id for item_id in held if item_id not in ordered]


def save_game(state: GameState, name: str | None, directory: Path) -> Path:
    """Write a save file and return its path."""
    path = directory / save_filename(name)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(snapshot(state), indent=2), encoding="utf-8")
    except OSError as exc:
        logger.warning("save_failed", path=str(path), error=str(exc))
        raise SaveError(f"Could not save to {path.name}: {exc.strerror}") from exc
    logger.info("game_saved", path=str(path), moves=state.moves, score=state.score)
    return path


def load_game(
    world: World,
    name: str,
    directory: Path,
    rng: random.Random | None = None,
) -> GameState:
    """Read a save file into a fresh GameState.

    The file is fully parsed and validated before any state is built,
    so a failure never leaves a half-restored game behind.
    """
    if not directory.is_dir():
        raise SaveError("There are no saved games.")
    path = directory / save_filename(name)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise SaveError(f"There is no saved game called {path.stem}.") from exc
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("save_failed", path=str(path), error=str(exc))
        raise SaveError(f"The saved game {path.stem} is unreadable.") from exc

    if not isinstance(data, dict):
        raise SaveError(f"The saved game {path.stem} is unreadable.")
    version = data.get("version")
    if version != SAVE_VERSION:
        raise SaveError(
            f"The saved game {path.stem} has version {version}, "
            f"expected {SAVE_VERSION}."
        )

    try:
        state = _apply(world, data, rng or random.Random())
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("save_failed", path=str(path), error=repr(exc))
        raise SaveError(f"The saved game {path.stem} is damaged.") from exc

    logger.info("game_restored", path=str(path), moves=state.moves)
    return state


def list_saves(directory: Path) -> list[str]:
    """Names of the saves in ``directory``, newest first."""
    if not directory.is_dir():
        return []
    paths = sorted(
        directory.glob(f"*{SAVE_SUFFIX}"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )
    return [path.stem for path in paths]
