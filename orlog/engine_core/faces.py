"""
Faces - Die face symbols and face counting.

A die shows one of ten faces:
- Five categories (melee, ranged, shield, helmet, steal)
- Each category has a plain and a gold variant

Gold faces fight exactly like their plain variant; the gold flag only
matters for token income at the end of the round.
"""

from __future__ import annotations
from enum import Enum
from typing import Iterable


class FaceCategory(Enum):
    """Face categories."""
    MELEE = "melee"      # Axe
    RANGED = "ranged"    # Arrow
    SHIELD = "shield"    # Blocks melee
    HELMET = "helmet"    # Blocks ranged
    STEAL = "steal"      # Hand

    @property
    def base(self) -> Face:
        """The plain face of this category."""
        return Face.of(self, gold=False)

    @property
    def gold(self) -> Face:
        """The gold face of this category."""
        return Face.of(self, gold=True)


class Face(Enum):
    """Die faces. Value is (category, gold)."""
    MELEE = (FaceCategory.MELEE, False)
    MELEE_GOLD = (FaceCategory.MELEE, True)
    RANGED = (FaceCategory.RANGED, False)
    RANGED_GOLD = (FaceCategory.RANGED, True)
    SHIELD = (FaceCategory.SHIELD, False)
    SHIELD_GOLD = (FaceCategory.SHIELD, True)
    HELMET = (FaceCategory.HELMET, False)
    HELMET_GOLD = (FaceCategory.HELMET, True)
    STEAL = (FaceCategory.STEAL, False)
    STEAL_GOLD = (FaceCategory.STEAL, True)

    @property
    def category(self) -> FaceCategory:
        return self.value[0]

    @property
    def gold(self) -> bool:
        return self.value[1]

    @classmethod
    def of(cls, category: FaceCategory, gold: bool = False) -> Face:
        """Look up the face for a category and gold flag."""
        return cls((category, gold))

    def is_attack_melee(self) -> bool:
        return self.category == FaceCategory.MELEE

    def is_attack_ranged(self) -> bool:
        return self.category == FaceCategory.RANGED

    def is_shield(self) -> bool:
        return self.category == FaceCategory.SHIELD

    def is_helmet(self) -> bool:
        return self.category == FaceCategory.HELMET

    def is_steal(self) -> bool:
        return self.category == FaceCategory.STEAL

    def is_attack(self) -> bool:
        return self.category in ATTACK_CATEGORIES

    def is_defense(self) -> bool:
        return self.category in DEFENSE_CATEGORIES


ATTACK_CATEGORIES = frozenset({FaceCategory.MELEE, FaceCategory.RANGED})
DEFENSE_CATEGORIES = frozenset({FaceCategory.SHIELD, FaceCategory.HELMET})

# Every face, in a stable order (used for uniform rolls)
ALL_FACES: tuple[Face, ...] = tuple(Face)

FaceCounts = dict[Face, int]


def count_faces(faces: Iterable[Face | None]) -> FaceCounts:
    """
    Count occurrences of each face.

    Unrolled slots (None) are skipped. Faces that do not occur
    are absent from the result.
    """
    counts: FaceCounts = {}
    for face in faces:
        if face is not None:
            counts[face] = counts.get(face, 0) + 1
    return counts


def category_count(counts: FaceCounts, category: FaceCategory) -> int:
    """Plain plus gold count for a category."""
    return counts.get(category.base, 0) + counts.get(category.gold, 0)


def melee(counts: FaceCounts) -> int:
    return category_count(counts, FaceCategory.MELEE)


def ranged(counts: FaceCounts) -> int:
    return category_count(counts, FaceCategory.RANGED)


def shields(counts: FaceCounts) -> int:
    return category_count(counts, FaceCategory.SHIELD)


def helmets(counts: FaceCounts) -> int:
    return category_count(counts, FaceCategory.HELMET)


def steals(counts: FaceCounts) -> int:
    return category_count(counts, FaceCategory.STEAL)


def gold_count(faces: Iterable[Face | None]) -> int:
    """Number of gold faces in a raw roll."""
    return sum(1 for f in faces if f is not None and f.gold)


def add_to(counts: FaceCounts, face: Face, amount: int) -> None:
    """Add to a face count in place."""
    counts[face] = counts.get(face, 0) + amount


def remove_up_to(counts: FaceCounts, category: FaceCategory, amount: int) -> int:
    """
    Remove up to `amount` faces of a category, plain faces first.

    Mutates `counts` in place and returns how many were removed.
    """
    removed = 0
    for face in (category.base, category.gold):
        if removed >= amount:
            break
        have = counts.get(face, 0)
        take = min(have, amount - removed)
        if take > 0:
            counts[face] = have - take
            removed += take
    return removed
