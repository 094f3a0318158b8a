"""
Match State - Players, counters, and the round log.

Design principles:
- Mutable: the resolver updates the match in place
- Serializable: every field can be written to a snapshot
- Bounded: the event log keeps only the most recent entries
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator

from .dice import DicePool
from .favors import FavorDefinition, check_tier

DEFAULT_MAX_HEALTH = 15
DEFAULT_ROLLS_PER_ROUND = 3
DEFAULT_LOG_CAPACITY = 300
LOADOUT_SIZE = 3


@dataclass
class LogEntry:
    """One line of the match log."""
    round_number: int
    kind: str  # "round", "favor", "roll", "summary", "loadout", ...
    message: str

    def __str__(self) -> str:
        return self.message


class EventLog:
    """
    Most-recent-first log with a fixed capacity.

    Adding past capacity silently drops the oldest entry.
    """

    def __init__(self, capacity: int = DEFAULT_LOG_CAPACITY, entries: list[LogEntry] | None = None):
        if capacity <= 0:
            raise ValueError(f"Log capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: list[LogEntry] = list(entries or [])[:capacity]

    def add(self, entry: LogEntry):
        self._entries.insert(0, entry)
        if len(self._entries) > self.capacity:
            self._entries.pop()

    @property
    def newest(self) -> LogEntry | None:
        return self._entries[0] if self._entries else None

    @property
    def oldest(self) -> LogEntry | None:
        return self._entries[-1] if self._entries else None

    def entries(self) -> list[LogEntry]:
        """Copy of the entries, newest first."""
        return list(self._entries)

    def messages(self) -> list[str]:
        return [e.message for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(list(self._entries))


@dataclass
class PlayerState:
    """
    State for a single player.

    Health stays within [0, max_health]; tokens never go negative.
    Health starts at max_health unless given.
    The favor choice only lives for the current round.
    """
    name: str
    dice: DicePool
    max_health: int = DEFAULT_MAX_HEALTH
    health: int | None = None
    tokens: int = 0
    loadout: tuple[FavorDefinition, ...] = ()

    # Per-round choice
    chosen_favor: FavorDefinition | None = None
    chosen_tier: int = 0

    def __post_init__(self):
        if self.max_health <= 0:
            raise ValueError(f"max_health must be positive, got {self.max_health}")
        if self.health is None:
            self.health = self.max_health
        if not 0 <= self.health <= self.max_health:
            raise ValueError(
                f"Health must be between 0 and {self.max_health}, got {self.health}"
            )
        if self.tokens < 0:
            raise ValueError(f"Tokens cannot be negative, got {self.tokens}")

    @property
    def is_defeated(self) -> bool:
        return self.health == 0

    @property
    def chosen_cost(self) -> int:
        """Token cost of the current favor choice, 0 when none."""
        if self.chosen_favor is None:
            return 0
        return self.chosen_favor.cost(self.chosen_tier)

    def add_tokens(self, amount: int):
        self.tokens = max(0, self.tokens + amount)

    def spend_tokens(self, amount: int) -> int:
        """Remove up to `amount` tokens. Returns how many were removed."""
        taken = min(max(0, amount), self.tokens)
        self.tokens -= taken
        return taken

    def take_damage(self, amount: int) -> int:
        """Lose up to `amount` health. Returns the health actually lost."""
        lost = min(max(0, amount), self.health)
        self.health -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Regain health up to the maximum. Returns the health actually gained."""
        gained = min(max(0, amount), self.max_health - self.health)
        self.health += gained
        return gained

    def set_loadout(self, favors: list[FavorDefinition] | tuple[FavorDefinition, ...]):
        """Fix the match loadout. Can only be done once."""
        if self.loadout:
            raise ValueError(f"{self.name} already has a loadout")
        favors = tuple(favors)
        if len(favors) != LOADOUT_SIZE:
            raise ValueError(f"Loadout must contain exactly {LOADOUT_SIZE} favors, got {len(favors)}")
        if len({f.name for f in favors}) != len(favors):
            raise ValueError("Loadout favors must be distinct")
        self.loadout = favors

    def choose_favor(self, favor: FavorDefinition, tier: int):
        self.chosen_favor = favor
        self.chosen_tier = check_tier(tier)

    def clear_favor(self):
        self.chosen_favor = None
        self.chosen_tier = 0


@dataclass
class SideTally:
    """
    One side's combat numbers for a round.

    Attack counts belong to this side, block counts to the side it attacked.
    """
    melee: int = 0
    ranged: int = 0
    opp_shields: int = 0
    opp_helmets: int = 0
    melee_damage: int = 0
    ranged_damage: int = 0
    stolen: int = 0
    gold_income: int = 0
    pre_favor: str | None = None
    post_favor: str | None = None

    @property
    def damage(self) -> int:
        return self.melee_damage + self.ranged_damage


@dataclass
class RoundSummary:
    """Structured result of one resolved round."""
    round_number: int
    sides: tuple[SideTally, SideTally]

    def describe(self, names: tuple[str, str]) -> str:
        a, b = self.sides
        return (
            f"R{self.round_number}: "
            f"{names[0]} dealt {a.damage} (M:{a.melee} vs S:{a.opp_shields}, "
            f"R:{a.ranged} vs H:{a.opp_helmets}) | "
            f"{names[1]} dealt {b.damage} (M:{b.melee} vs S:{b.opp_shields}, "
            f"R:{b.ranged} vs H:{b.opp_helmets})"
        )


@dataclass
class MatchState:
    """
    Complete state of a two-player match.

    The round number starts at 1 and only increases. The roll phase
    counts rolls taken this round: 1 means no roll yet, and
    rolls_per_round + 1 means the round is ready to resolve.
    """
    players: list[PlayerState]
    round_number: int = 1
    roll_phase: int = 1
    rolls_per_round: int = DEFAULT_ROLLS_PER_ROUND
    log: EventLog = field(default_factory=EventLog)

    # Display cache of the previous round
    last_round: RoundSummary | None = None

    def __post_init__(self):
        if len(self.players) != 2:
            raise ValueError(f"A match needs exactly 2 players, got {len(self.players)}")

    @property
    def p1(self) -> PlayerState:
        return self.players[0]

    @property
    def p2(self) -> PlayerState:
        return self.players[1]

    @property
    def names(self) -> tuple[str, str]:
        return self.p1.name, self.p2.name

    @property
    def rolls_done(self) -> bool:
        return self.roll_phase > self.rolls_per_round

    def opponent_of(self, player: PlayerState) -> PlayerState:
        return self.p2 if player is self.p1 else self.p1

    def is_game_over(self) -> bool:
        return self.p1.is_defeated or self.p2.is_defeated

    def winner(self) -> PlayerState | None:
        """The surviving player, or None while both stand or both fell."""
        if not self.is_game_over():
            return None
        alive = [p for p in self.players if not p.is_defeated]
        return alive[0] if len(alive) == 1 else None

    def add_log(self, message: str, kind: str = "info"):
        self.log.add(LogEntry(round_number=self.round_number, kind=kind, message=message))
