"""Session module - Match flow around the round engine."""

from .game_loop import GameLoop, LoopState, TurnResult, GameOverError, FavorSelectionError

__all__ = [
    "GameLoop",
    "LoopState",
    "TurnResult",
    "GameOverError",
    "FavorSelectionError",
]
