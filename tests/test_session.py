"""Tests for the session layer and the terminal loop."""

import io
from pathlib import Path

import pytest
from rich.console import Console

from delve import cli
from delve.config import Config
from delve.engine.commands import DEATH_BANNER, GAME_OVER
from delve.engine.world import World
from delve.session import GameSession


@pytest.fixture
def session(world: World, tmp_path: Path) -> GameSession:
    return GameSession(Config(save_dir=tmp_path, seed=7), world)


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


def test_opening(session: GameSession):
    opening = session.opening()
    assert opening.startswith("DELVE: a subterranean adventure.")
    assert "West of House" in opening
    assert "open field" in opening


def test_process(session: GameSession):
    assert session.process("open mailbox") == (
        "Opening the small mailbox reveals a leaflet."
    )
    assert session.state.moves == 1


def test_save_dir_from_config(session: GameSession, tmp_path: Path):
    assert session.state.save_dir == tmp_path
    assert session.process("save here") == "Game saved as here."
    assert (tmp_path / "here.json").exists()


def test_restart(session: GameSession):
    session.process("open mailbox")
    session.process("take leaflet")
    result = session.process("restart")
    assert result.startswith("Restarting.")
    assert "West of House" in result
    assert session.state.items["leaflet"].location == "mailbox"
    assert session.state.moves == 0
    assert not session.state.restart_requested


def test_restart_keeps_save_dir(session: GameSession, tmp_path: Path):
    session.process("restart")
    assert session.state.save_dir == tmp_path


def test_is_over(session: GameSession):
    assert not session.is_over
    session.process("quit")
    assert session.is_over


def test_death_does_not_end_session(session: GameSession):
    """A dead player can still restart."""
    session.state.location = "cellar"
    for _ in range(3):
        session.process("wait")
    assert session.state.game_over
    assert not session.is_over
    assert session.process("look") == GAME_OVER
    assert "West of House" in session.process("restart")
    assert not session.state.game_over


def test_seed_is_reproducible(world: World, tmp_path: Path):
    first = GameSession(Config(save_dir=tmp_path, seed=99), world)
    second = GameSession(Config(save_dir=tmp_path, seed=99), world)
    assert first.state.rng.random() == second.state.rng.random()


def test_config_from_env(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("DELVE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("DELVE_SAVE_DIR", str(tmp_path))
    monkeypatch.setenv("DELVE_SEED", "5")
    monkeypatch.setenv("DELVE_JSON_LOGS", "true")
    monkeypatch.delenv("DELVE_WORLD_FILE", raising=False)
    config = Config.from_env()
    assert config.log_level == "DEBUG"
    assert config.save_dir == tmp_path
    assert config.seed == 5
    assert config.json_logs
    assert config.world_file is None


def test_config_defaults(monkeypatch):
    for name in ("DELVE_LOG_LEVEL", "DELVE_SAVE_DIR", "DELVE_SEED", "DELVE_JSON_LOGS"):
        monkeypatch.delenv(name, raising=False)
    config = Config.from_env()
    assert config.log_level == "WARNING"
    assert config.save_dir == Path.home() / ".delve" / "saves"
    assert config.seed is None
    assert not config.json_logs


def test_cli_runs_until_quit(session: GameSession):
    lines = iter(["open mailbox", "", "quit", "look"])
    console = _console()

    cli.run(session, console=console, input_fn=lambda: next(lines))

    output = console.file.getvalue()
    assert "West of House" in output
    assert "Opening the small mailbox reveals a leaflet." in output
    assert "Goodbye." in output
    assert session.is_over
    assert next(lines) == "look"


def test_cli_keeps_running_after_death(session: GameSession):
    session.state.location = "cellar"
    lines = iter(["wait", "wait", "wait", "look", "restart", "quit"])
    console = _console()

    cli.run(session, console=console, input_fn=lambda: next(lines))

    output = console.file.getvalue()
    assert DEATH_BANNER in output
    assert GAME_OVER in output
    assert "Restarting." in output
    assert "Goodbye." in output
    assert session.is_over


def test_cli_stops_at_end_of_input(session: GameSession):
    def read() -> str:
        raise EOFError

    console = _console()
    cli.run(session, console=console, input_fn=read)
    assert not session.is_over
    assert "Delve" in console.file.getvalue()


def test_cli_prints_brackets_literally(session: GameSession):
    """Game text is not interpreted as console markup."""
    lines = iter(["[bold]hi[/bold]"])

    def read() -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    console = _console()
    cli.run(session, console=console, input_fn=read)
    assert 'I don\'t know the word "[bold]hi[/bold]".' in console.file.getvalue()
