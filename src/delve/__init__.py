"""Delve: a text adventure engine."""

from . import cli
from .config import Config
from .logging import configure_logging, get_logger
from .session import GameSession

__all__ = ["main", "GameSession", "Config"]


def main() -> None:
    """Entry point for the delve application."""
    config = Config.from_env()

    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        json_logs=config.json_logs,
    )

    logger = get_logger(__name__)
    logger.info(
        "application_starting",
        world_file=str(config.world_file) if config.world_file else None,
        save_dir=str(config.save_dir),
        log_level=config.log_level,
    )

    cli.run(GameSession(config))
