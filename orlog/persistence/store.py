"""
Snapshot Store - Saves and loads matches as JSON files.

The store:
- Keeps one JSON file per save name in a directory
- Writes the full MatchSnapshot (lossless)
- Validates on load; malformed files raise SnapshotError

Usage:
    store = SnapshotStore(save_dir="~/.orlog/saves")
    store.save(match, "evening-game")
    match = store.load("evening-game")
"""

from __future__ import annotations
import logging
import random
import re
from pathlib import Path

from pydantic import ValidationError

from ..engine_core.state import MatchState
from .schemas import MatchSnapshot

logger = logging.getLogger("orlog.persistence.store")

_SAVE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")


class SnapshotError(Exception):
    """Raised when a save is missing or cannot be read back."""


class SnapshotStore:
    """File-based store for match snapshots."""

    def __init__(self, save_dir: str | Path | None = None):
        if save_dir is None:
            save_dir = Path.home() / ".orlog" / "saves"
        self.save_dir = Path(save_dir).expanduser()
        self.save_dir.mkdir(parents=True, exist_ok=True)

    def save(self, match: MatchState, name: str) -> Path:
        """Write a snapshot of the match. Overwrites an existing save."""
        path = self._path(name)
        snapshot = MatchSnapshot.from_match(match)
        path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Saved match to %s (round %d)", path, match.round_number)
        return path

    def load(self, name: str, rng: random.Random | None = None) -> MatchState:
        """Read a save back into a MatchState."""
        return self.load_snapshot(name).to_match(rng)

    def load_snapshot(self, name: str) -> MatchSnapshot:
        path = self._path(name)
        if not path.exists():
            raise SnapshotError(f"No save named {name!r} in {self.save_dir}")
        try:
            snapshot = MatchSnapshot.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise SnapshotError(f"Save {name!r} is invalid: {e}") from e
        logger.info("Loaded match from %s (round %d)", path, snapshot.round_number)
        return snapshot

    def list_saves(self) -> list[str]:
        """Names of all saves, sorted."""
        return sorted(f.stem for f in self.save_dir.glob("*.json"))

    def delete(self, name: str):
        self._path(name).unlink(missing_ok=True)

    def _path(self, name: str) -> Path:
        if not _SAVE_NAME.match(name):
            raise ValueError(f"Invalid save name: {name!r}")
        return self.save_dir / f"{name}.json"
