"""
Engine Core - Deterministic round resolution.

The engine is the runtime that:
1. Models die faces and dice pools
2. Holds the god favor catalog
3. Tracks players and the match
4. Resolves a round from two dice rolls
"""

from .faces import Face, FaceCategory, FaceCounts, count_faces, gold_count, remove_up_to
from .dice import Die, DicePool, InvalidDieIndexError
from .favors import EffectKind, FavorDefinition, Phase, all_favors, get_favor
from .state import EventLog, LogEntry, MatchState, PlayerState, RoundSummary, SideTally
from .resolver import ResolutionStage, RoundResolver, resolve_round

__all__ = [
    "Face",
    "FaceCategory",
    "FaceCounts",
    "count_faces",
    "gold_count",
    "remove_up_to",
    "Die",
    "DicePool",
    "InvalidDieIndexError",
    "EffectKind",
    "FavorDefinition",
    "Phase",
    "all_favors",
    "get_favor",
    "EventLog",
    "LogEntry",
    "MatchState",
    "PlayerState",
    "RoundSummary",
    "SideTally",
    "ResolutionStage",
    "RoundResolver",
    "resolve_round",
]
