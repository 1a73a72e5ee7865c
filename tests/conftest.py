"""Shared test fixtures for Delve."""

import random
from pathlib import Path

import pytest

from delve.engine.commands import handle_command
from delve.engine.loader import load_world
from delve.engine.parser import Parser
from delve.engine.state import GameState, new_game_state
from delve.engine.world import World


class FixedRandom(random.Random):
    """A Random whose draws always come out the same way."""

    def __init__(self, slot: int = 0, fraction: float = 0.0, pick: int = 0):
        super().__init__(0)
        self.slot = slot
        self.fraction = fraction
        self.pick = pick

    def randrange(self, *args, **kwargs) -> int:
        return self.slot

    def random(self) -> float:
        return self.fraction

    def choice(self, seq):
        return seq[self.pick]


@pytest.fixture(scope="session")
def world() -> World:
    return load_world()


@pytest.fixture
def state(world: World, tmp_path: Path) -> GameState:
    state = new_game_state(world, random.Random(1234))
    state.save_dir = tmp_path / "saves"
    return state


@pytest.fixture
def parser(world: World) -> Parser:
    return Parser(world.vocabulary)


@pytest.fixture
def play(world: World, state: GameState, parser: Parser):
    """Run commands in order and return the last response."""

    def _play(*commands: str) -> str:
        response = ""
        for command in commands:
            response = handle_command(world, state, parser, command)
        return response

    return _play


@pytest.fixture
def fixed_random():
    return FixedRandom

