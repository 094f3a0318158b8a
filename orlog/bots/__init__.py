"""
Bots module - Computer opponent implementations.

Provides:
- FavorPolicy / LockPolicy: Interfaces for bot decisions
- GreedyBot: Heuristic opponent
- RandomBot: Seeded random baseline
"""

from .policy import FavorPolicy, LockPolicy, FavorDecision, RandomBot, affordable_options
from .greedy_bot import GreedyBot

__all__ = [
    "FavorPolicy",
    "LockPolicy",
    "FavorDecision",
    "RandomBot",
    "affordable_options",
    "GreedyBot",
]
