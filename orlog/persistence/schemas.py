"""
Pydantic Schemas for match snapshots.

A snapshot captures everything needed to continue a match:
round and roll counters, both players (health, tokens, loadout,
favor choice, dice faces and locks), the match log and the
last round's tallies.

Faces and favors are stored by name; favors are resolved against
the catalog when the snapshot is turned back into a MatchState.
"""

from __future__ import annotations
import random
from dataclasses import asdict
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..engine_core.dice import DicePool
from ..engine_core.faces import Face
from ..engine_core.favors import TIER_COUNT, get_favor
from ..engine_core.state import (
    DEFAULT_LOG_CAPACITY,
    DEFAULT_ROLLS_PER_ROUND,
    EventLog,
    LogEntry,
    MatchState,
    PlayerState,
    RoundSummary,
    SideTally,
)

SNAPSHOT_VERSION = 1


def _check_favor_name(name: str) -> str:
    try:
        get_favor(name)
    except KeyError:
        raise ValueError(f"Unknown god favor: {name}") from None
    return name


# =============================================================================
# Nested models
# =============================================================================

class DieSnapshot(BaseModel):
    """One die: shown face (None before the first roll) and lock."""
    face: Optional[str] = None
    locked: bool = False

    @field_validator("face")
    @classmethod
    def check_face(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in Face.__members__:
            raise ValueError(f"Unknown face: {v}")
        return v


class PlayerSnapshot(BaseModel):
    """Player state."""
    name: str
    max_health: int = Field(gt=0)
    health: int = Field(ge=0)
    tokens: int = Field(ge=0)
    loadout: list[str] = Field(default_factory=list)
    chosen_favor: Optional[str] = None
    chosen_tier: int = Field(default=0, ge=0, lt=TIER_COUNT)
    dice: list[DieSnapshot] = Field(min_length=1)

    @field_validator("loadout")
    @classmethod
    def check_loadout(cls, v: list[str]) -> list[str]:
        return [_check_favor_name(name) for name in v]

    @field_validator("chosen_favor")
    @classmethod
    def check_choice(cls, v: Optional[str]) -> Optional[str]:
        return _check_favor_name(v) if v is not None else v

    @model_validator(mode="after")
    def check_health(self) -> PlayerSnapshot:
        if self.health > self.max_health:
            raise ValueError(f"health {self.health} exceeds max_health {self.max_health}")
        return self

    @classmethod
    def from_player(cls, player: PlayerState) -> PlayerSnapshot:
        return cls(
            name=player.name,
            max_health=player.max_health,
            health=player.health,
            tokens=player.tokens,
            loadout=[f.name for f in player.loadout],
            chosen_favor=player.chosen_favor.name if player.chosen_favor else None,
            chosen_tier=player.chosen_tier,
            dice=[
                DieSnapshot(face=d.face.name if d.face else None, locked=d.locked)
                for d in player.dice.dice
            ],
        )

    def to_player(self, rng: random.Random) -> PlayerState:
        dice = DicePool.create(len(self.dice), rng)
        dice.restore(
            [Face[d.face] if d.face else None for d in self.dice],
            [d.locked for d in self.dice],
        )
        return PlayerState(
            name=self.name,
            dice=dice,
            max_health=self.max_health,
            health=self.health,
            tokens=self.tokens,
            loadout=tuple(get_favor(name) for name in self.loadout),
            chosen_favor=get_favor(self.chosen_favor) if self.chosen_favor else None,
            chosen_tier=self.chosen_tier,
        )


class LogEntrySnapshot(BaseModel):
    """One match log line."""
    round_number: int
    kind: str
    message: str


class SideTallySnapshot(BaseModel):
    """One side's numbers for the last round."""
    melee: int = 0
    ranged: int = 0
    opp_shields: int = 0
    opp_helmets: int = 0
    melee_damage: int = 0
    ranged_damage: int = 0
    stolen: int = 0
    gold_income: int = 0
    pre_favor: Optional[str] = None
    post_favor: Optional[str] = None


class RoundSummarySnapshot(BaseModel):
    """Last round's tallies, kept for display."""
    round_number: int
    sides: list[SideTallySnapshot] = Field(min_length=2, max_length=2)


# =============================================================================
# Match snapshot
# =============================================================================

class MatchSnapshot(BaseModel):
    """Complete, lossless match snapshot."""
    version: int = SNAPSHOT_VERSION
    round_number: int = Field(ge=1)
    roll_phase: int = Field(ge=1)
    rolls_per_round: int = Field(default=DEFAULT_ROLLS_PER_ROUND, gt=0)
    log_capacity: int = Field(default=DEFAULT_LOG_CAPACITY, gt=0)
    players: list[PlayerSnapshot] = Field(min_length=2, max_length=2)
    log: list[LogEntrySnapshot] = Field(default_factory=list, description="Newest first")
    last_round: Optional[RoundSummarySnapshot] = None

    @classmethod
    def from_match(cls, match: MatchState) -> MatchSnapshot:
        last = match.last_round
        return cls(
            round_number=match.round_number,
            roll_phase=match.roll_phase,
            rolls_per_round=match.rolls_per_round,
            log_capacity=match.log.capacity,
            players=[PlayerSnapshot.from_player(p) for p in match.players],
            log=[LogEntrySnapshot(**asdict(e)) for e in match.log.entries()],
            last_round=RoundSummarySnapshot(
                round_number=last.round_number,
                sides=[SideTallySnapshot(**asdict(s)) for s in last.sides],
            ) if last else None,
        )

    def to_match(self, rng: random.Random | None = None) -> MatchState:
        """Rebuild the match. Restored dice share one random source."""
        rng = rng or random.Random()
        last = None
        if self.last_round is not None:
            a, b = (SideTally(**s.model_dump()) for s in self.last_round.sides)
            last = RoundSummary(round_number=self.last_round.round_number, sides=(a, b))
        return MatchState(
            players=[p.to_player(rng) for p in self.players],
            round_number=self.round_number,
            roll_phase=self.roll_phase,
            rolls_per_round=self.rolls_per_round,
            log=EventLog(
                capacity=self.log_capacity,
                entries=[LogEntry(**e.model_dump()) for e in self.log],
            ),
            last_round=last,
        )
