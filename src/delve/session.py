"""Session layer binding one player's game to the engine."""

import random

from .config import Config
from .engine.commands import handle_command
from .engine.loader import load_world
from .engine.parser import Parser
from .engine.state import GameState, new_game_state
from .engine.traversal import describe_room
from .engine.world import World
from .logging import get_logger

logger = get_logger(__name__)


class GameSession:
    """Wraps a World + GameState + Parser for one game."""

    def __init__(self, config: Config, world: World | None = None):
        self.config = config
        self.world = world or load_world(config.world_file)
        self.rng = random.Random(config.seed)
        self.state = self._new_state()
        self.parser = Parser(self.world.vocabulary)

    def _new_state(self) -> GameState:
        state = new_game_state(self.world, self.rng)
        state.save_dir = self.config.save_dir
        return state

    @property
    def is_over(self) -> bool:
        """True once the player quits. A lost or won game waits for RESTART."""
        return self.state.quit_requested

    def opening(self) -> str:
        """Banner plus the description of the starting room."""
        parts = [self.world.intro, describe_room(self.world, self.state, force_full=True)]
        return "\n\n".join(part for part in parts if part)

    def process(self, line: str) -> str:
        """Delegate to the engine and return response text."""
        response = handle_command(self.world, self.state, self.parser, line)
        if self.state.restart_requested:
            self.reset()
            return f"{response}\n\n{self.opening()}"
        return response

    def reset(self) -> None:
        """Reset to a fresh game."""
        self.state = self._new_state()
        self.parser = Parser(self.world.vocabulary)
        logger.info("game_reset")
