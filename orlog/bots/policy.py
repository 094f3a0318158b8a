"""
Bot Policy - Interface for opponent decision-making.

A bot makes three kinds of decisions:
- Which three favors to bring to the match (once)
- Which favor and tier to invoke this round (or none)
- Which dice to keep locked between rolls
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from ..engine_core.state import LOADOUT_SIZE

if TYPE_CHECKING:
    from ..engine_core.favors import FavorDefinition
    from ..engine_core.state import MatchState, PlayerState


@dataclass
class FavorDecision:
    """
    A favor choice made by a bot.

    `favor` is None when the bot passes this round.
    """
    favor: FavorDefinition | None
    tier: int = 0
    score: float = 0.0
    explanation: str = ""


class FavorPolicy(ABC):
    """Chooses a loadout and a favor for each round."""

    @abstractmethod
    def choose_loadout(self, catalog: Sequence[FavorDefinition]) -> list[FavorDefinition]:
        """
        Pick the match loadout from the catalog.

        Returns exactly three distinct favors.
        """
        pass

    @abstractmethod
    def choose_favor(self, match: MatchState, me: PlayerState) -> FavorDecision:
        """
        Pick a favor and tier for this round.

        Must only return loadout favors the player can afford.
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class LockPolicy(ABC):
    """Chooses which dice to keep between rolls."""

    @abstractmethod
    def choose_locks(self, match: MatchState, me: PlayerState) -> list[bool]:
        """Return one lock flag per die in the player's pool."""
        pass


def affordable_options(me: PlayerState) -> list[tuple[FavorDefinition, int]]:
    """Every (favor, tier) from the loadout the player can pay for now."""
    return [
        (favor, tier)
        for favor in me.loadout
        for tier in range(len(favor.costs))
        if favor.costs[tier] <= me.tokens
    ]


class RandomBot(FavorPolicy, LockPolicy):
    """
    Random policy - decides uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def choose_loadout(self, catalog: Sequence[FavorDefinition]) -> list[FavorDefinition]:
        if len(catalog) < LOADOUT_SIZE:
            raise ValueError("Not enough favors in catalog")
        return self.rng.sample(list(catalog), LOADOUT_SIZE)

    def choose_favor(self, match: MatchState, me: PlayerState) -> FavorDecision:
        options = affordable_options(me)
        if not options:
            return FavorDecision(favor=None, explanation="Nothing affordable")
        favor, tier = self.rng.choice(options)
        return FavorDecision(favor=favor, tier=tier, explanation="Selected randomly")

    def choose_locks(self, match: MatchState, me: PlayerState) -> list[bool]:
        return [self.rng.random() < 0.5 for _ in range(me.dice.size)]
