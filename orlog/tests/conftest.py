"""
Pytest fixtures for Orlog tests.
"""

import random

import pytest

from ..engine_core.dice import DicePool
from ..engine_core.favors import get_favor
from ..engine_core.state import EventLog, MatchState, PlayerState


def make_player(name: str, tokens: int = 0, health: int = 15, seed: int = 0) -> PlayerState:
    """Player with a fresh six-die pool."""
    return PlayerState(
        name=name,
        dice=DicePool.create(6, random.Random(seed)),
        health=health,
        tokens=tokens,
    )


def pick(player: PlayerState, favor_name: str, tier: int = 0):
    """Set a player's favor choice without loadout checks."""
    player.choose_favor(get_favor(favor_name), tier)


@pytest.fixture
def match() -> MatchState:
    """Fresh match between Alice and Bob, no tokens, full health."""
    return MatchState(
        players=[make_player("Alice", seed=1), make_player("Bob", seed=2)],
        log=EventLog(capacity=300),
    )


@pytest.fixture
def alice(match: MatchState) -> PlayerState:
    return match.p1


@pytest.fixture
def bob(match: MatchState) -> PlayerState:
    return match.p2
