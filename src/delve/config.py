"""Configuration for Delve."""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _default_save_dir() -> Path:
    return Path.home() / ".delve" / "saves"


@dataclass
class Config:
    """Application configuration."""

    log_level: str = "WARNING"
    log_file: Path | None = None
    json_logs: bool = False
    save_dir: Path = field(default_factory=_default_save_dir)
    world_file: Path | None = None
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        log_file = os.getenv("DELVE_LOG_FILE")
        save_dir = os.getenv("DELVE_SAVE_DIR")
        world_file = os.getenv("DELVE_WORLD_FILE")
        seed = os.getenv("DELVE_SEED")

        return cls(
            log_level=os.getenv("DELVE_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=os.getenv("DELVE_JSON_LOGS", "").lower()
            in ("true", "1", "yes"),
            save_dir=Path(save_dir).expanduser() if save_dir else _default_save_dir(),
            world_file=Path(world_file) if world_file else None,
            seed=int(seed) if seed else None,
        )
