"""Persistence - Match snapshots and the file store."""

from .schemas import (
    MatchSnapshot,
    PlayerSnapshot,
    DieSnapshot,
    LogEntrySnapshot,
    RoundSummarySnapshot,
    SideTallySnapshot,
)
from .store import SnapshotStore, SnapshotError

__all__ = [
    "MatchSnapshot",
    "PlayerSnapshot",
    "DieSnapshot",
    "LogEntrySnapshot",
    "RoundSummarySnapshot",
    "SideTallySnapshot",
    "SnapshotStore",
    "SnapshotError",
]
