"""
Configuration - Match rules and process settings.

Values come from defaults, overridden by environment variables:
    ORLOG_MAX_HEALTH      Starting and maximum health (15)
    ORLOG_DICE            Dice per player (6)
    ORLOG_ROLLS           Rolls per round (3)
    ORLOG_LOG_CAPACITY    Match log entries kept (300)
    ORLOG_SEED            Random seed (unset = random)
    ORLOG_SAVE_DIR        Snapshot directory (~/.orlog/saves)
    ORLOG_LOG_LEVEL       Python logging level (WARNING)
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .engine_core.state import (
    DEFAULT_LOG_CAPACITY,
    DEFAULT_MAX_HEALTH,
    DEFAULT_ROLLS_PER_ROUND,
)

DEFAULT_DICE_PER_PLAYER = 6


@dataclass
class GameConfig:
    """Settings for a match and the surrounding process."""
    max_health: int = DEFAULT_MAX_HEALTH
    dice_per_player: int = DEFAULT_DICE_PER_PLAYER
    rolls_per_round: int = DEFAULT_ROLLS_PER_ROUND
    log_capacity: int = DEFAULT_LOG_CAPACITY
    seed: int | None = None
    save_dir: Path = field(default_factory=lambda: Path.home() / ".orlog" / "saves")
    log_level: str = "WARNING"

    def __post_init__(self):
        for name in ("max_health", "dice_per_player", "rolls_per_round", "log_capacity"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_env(cls) -> GameConfig:
        """Build a config from ORLOG_* environment variables."""
        save_dir = os.getenv("ORLOG_SAVE_DIR")
        return cls(
            max_health=_env_int("ORLOG_MAX_HEALTH", DEFAULT_MAX_HEALTH),
            dice_per_player=_env_int("ORLOG_DICE", DEFAULT_DICE_PER_PLAYER),
            rolls_per_round=_env_int("ORLOG_ROLLS", DEFAULT_ROLLS_PER_ROUND),
            log_capacity=_env_int("ORLOG_LOG_CAPACITY", DEFAULT_LOG_CAPACITY),
            seed=_env_int("ORLOG_SEED", None),
            save_dir=Path(save_dir).expanduser() if save_dir else Path.home() / ".orlog" / "saves",
            log_level=os.getenv("ORLOG_LOG_LEVEL", "WARNING").upper(),
        )


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def configure_logging(config: GameConfig):
    """Set up process logging at the configured level."""
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
