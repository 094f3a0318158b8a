"""
Dice - Single dice and per-player dice pools.

A pool holds a fixed number of dice for the whole match.
Each die can be locked so that it keeps its face across rolls
within a round; locks are cleared when the round is resolved.
"""

from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Sequence

from .faces import ALL_FACES, Face


class InvalidDieIndexError(ValueError):
    """Raised when a die index is outside the pool."""


@dataclass
class Die:
    """
    A single die.

    `face` is None until the die is rolled for the first time.
    """
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)
    face: Face | None = None
    locked: bool = False

    def roll(self) -> Face | None:
        """Roll the die unless it is locked. Returns the shown face."""
        if not self.locked:
            self.face = self.rng.choice(ALL_FACES)
        return self.face


@dataclass
class DicePool:
    """
    Ordered dice belonging to one player.

    The index range is fixed at creation.
    """
    dice: list[Die] = field(default_factory=list)

    @classmethod
    def create(cls, size: int, rng: random.Random | None = None) -> DicePool:
        """Create a pool of `size` unrolled dice sharing one random source."""
        if size <= 0:
            raise ValueError(f"Dice pool size must be positive, got {size}")
        rng = rng or random.Random()
        return cls(dice=[Die(rng=rng) for _ in range(size)])

    @property
    def size(self) -> int:
        return len(self.dice)

    @property
    def locked_count(self) -> int:
        return sum(1 for d in self.dice if d.locked)

    def roll_unlocked(self) -> list[Face | None]:
        """Roll every unlocked die; locked dice keep their face."""
        return [die.roll() for die in self.dice]

    def toggle(self, index: int) -> bool:
        """Flip the lock on a die. Returns the new lock state."""
        die = self._die(index)
        die.locked = not die.locked
        return die.locked

    def set_locked(self, index: int, locked: bool):
        self._die(index).locked = locked

    def is_locked(self, index: int) -> bool:
        return self._die(index).locked

    def current_faces(self) -> list[Face | None]:
        """Snapshot of the shown faces, without rolling."""
        return [die.face for die in self.dice]

    def clear_locks(self):
        for die in self.dice:
            die.locked = False

    def restore(self, faces: Sequence[Face | None], locks: Sequence[bool]):
        """Put saved faces and locks back on the dice."""
        if len(faces) != self.size or len(locks) != self.size:
            raise ValueError(
                f"Expected {self.size} faces and locks, got {len(faces)} and {len(locks)}"
            )
        for die, face, locked in zip(self.dice, faces, locks):
            die.face = face
            die.locked = locked

    def _die(self, index: int) -> Die:
        if not 0 <= index < len(self.dice):
            raise InvalidDieIndexError(
                f"Die index {index} out of range for pool of {len(self.dice)}"
            )
        return self.dice[index]
