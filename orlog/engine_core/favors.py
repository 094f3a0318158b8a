"""
God Favors - Favor definitions and the static catalog.

A favor is an ability a player may invoke once per round:
- Three tiers, each with a token cost and an effect magnitude
- A phase: PRE (before combat) or POST (after combat)
- A priority: lower values resolve first within a phase
- An effect kind from a closed set, handled by the resolver

The catalog is read-only data shared by every match.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

TIER_COUNT = 3


class Phase(Enum):
    """When a favor resolves relative to base combat."""
    PRE = "pre"
    POST = "post"


class EffectKind(Enum):
    """Closed set of favor effects. Each has exactly one resolver handler."""
    DAMAGE = "damage"
    HEAL = "heal"
    GAIN_TOKENS = "gain_tokens"
    STEAL_TOKENS = "steal_tokens"
    REMOVE_OPP_HELMETS = "remove_opp_helmets"
    IGNORE_OPP_RANGED_BLOCKS = "ignore_opp_ranged_blocks"
    DOUBLE_BLOCKS = "double_blocks"
    BONUS_PER_RANGED = "bonus_per_ranged"
    MULTIPLY_MELEE = "multiply_melee"
    BONUS_MAJORITY = "bonus_majority"
    HEAL_PER_BLOCKED = "heal_per_blocked"
    HEAL_PER_INCOMING_MELEE = "heal_per_incoming_melee"
    DESTROY_OPP_TOKENS_PER_ARROW = "destroy_opp_tokens_per_arrow"
    TOKENS_PER_DAMAGE_TAKEN = "tokens_per_damage_taken"
    TOKENS_PER_STEAL = "tokens_per_steal"
    REDUCE_OPP_FAVOR_LEVEL = "reduce_opp_favor_level"
    HEAL_PER_OPP_FAVOR_SPENT = "heal_per_opp_favor_spent"
    BAN_OPP_DICE = "ban_opp_dice"


@dataclass(frozen=True)
class FavorDefinition:
    """
    Immutable catalog entry for one god favor.

    `costs` and `magnitudes` are indexed by tier (0..2).
    """
    name: str
    costs: tuple[int, int, int]
    magnitudes: tuple[int, int, int]
    phase: Phase
    priority: int
    kind: EffectKind
    description: str = ""

    def __post_init__(self):
        if len(self.costs) != TIER_COUNT or len(self.magnitudes) != TIER_COUNT:
            raise ValueError(f"Favor {self.name} must define {TIER_COUNT} tiers")

    def cost(self, tier: int) -> int:
        return self.costs[check_tier(tier)]

    def magnitude(self, tier: int) -> int:
        return self.magnitudes[check_tier(tier)]

    def min_cost(self) -> int:
        return min(self.costs)

    def __str__(self) -> str:
        return f"{self.name} [{self.costs[0]}/{self.costs[1]}/{self.costs[2]}]"


def check_tier(tier: int) -> int:
    """Validate a tier index."""
    if not 0 <= tier < TIER_COUNT:
        raise ValueError(f"Tier must be between 0 and {TIER_COUNT - 1}, got {tier}")
    return tier


# ============================================================================
# Catalog
# ============================================================================

FAVOR_CATALOG: tuple[FavorDefinition, ...] = (
    FavorDefinition(
        name="Thor's Strike",
        costs=(4, 8, 12),
        magnitudes=(2, 5, 8),
        phase=Phase.POST,
        priority=6,
        kind=EffectKind.DAMAGE,
        description="Deal damage to the opponent after combat.",
    ),
    FavorDefinition(
        name="Idun's Rejuvenation",
        costs=(4, 7, 10),
        magnitudes=(2, 4, 6),
        phase=Phase.POST,
        priority=7,
        kind=EffectKind.HEAL,
        description="Heal health after combat.",
    ),
    FavorDefinition(
        name="Odin's Sacrifice",
        costs=(6, 8, 10),
        magnitudes=(3, 4, 5),
        phase=Phase.POST,
        priority=7,
        kind=EffectKind.HEAL,
        description="Heal health after combat.",
    ),
    FavorDefinition(
        name="Vidar's Might",
        costs=(2, 4, 6),
        magnitudes=(2, 4, 6),
        phase=Phase.PRE,
        priority=4,
        kind=EffectKind.REMOVE_OPP_HELMETS,
        description="Remove helmets from the opponent's dice.",
    ),
    FavorDefinition(
        name="Ullr's Aim",
        costs=(2, 3, 4),
        magnitudes=(2, 3, 6),
        phase=Phase.PRE,
        priority=4,
        kind=EffectKind.IGNORE_OPP_RANGED_BLOCKS,
        description="The opponent's shields do not count this round.",
    ),
    FavorDefinition(
        name="Baldr's Invulnerability",
        costs=(3, 6, 9),
        magnitudes=(1, 2, 3),
        phase=Phase.PRE,
        priority=4,
        kind=EffectKind.DOUBLE_BLOCKS,
        description="Add blocks for every shield and helmet rolled.",
    ),
    FavorDefinition(
        name="Heimdall's Watch",
        costs=(4, 7, 10),
        magnitudes=(1, 2, 3),
        phase=Phase.POST,
        priority=6,
        kind=EffectKind.HEAL_PER_BLOCKED,
        description="Heal for every incoming attack blocked.",
    ),
    FavorDefinition(
        name="Brunhild's Fury",
        costs=(6, 10, 18),
        magnitudes=(150, 200, 300),
        phase=Phase.PRE,
        priority=4,
        kind=EffectKind.MULTIPLY_MELEE,
        description="Multiply melee attacks (percent, rounded down).",
    ),
    FavorDefinition(
        name="Freyr's Gift",
        costs=(4, 6, 8),
        magnitudes=(2, 3, 4),
        phase=Phase.PRE,
        priority=2,
        kind=EffectKind.BONUS_MAJORITY,
        description="Add to whichever face you rolled the most.",
    ),
    FavorDefinition(
        name="Hel's Grip",
        costs=(6, 12, 18),
        magnitudes=(1, 2, 3),
        phase=Phase.POST,
        priority=6,
        kind=EffectKind.HEAL_PER_INCOMING_MELEE,
        description="Heal for every unblocked incoming melee attack.",
    ),
    FavorDefinition(
        name="Skadi's Hunt",
        costs=(6, 10, 14),
        magnitudes=(1, 2, 3),
        phase=Phase.PRE,
        priority=4,
        kind=EffectKind.BONUS_PER_RANGED,
        description="Add arrows for every ranged face rolled.",
    ),
    FavorDefinition(
        name="Skuld's Claim",
        costs=(4, 6, 8),
        magnitudes=(2, 3, 4),
        phase=Phase.PRE,
        priority=3,
        kind=EffectKind.DESTROY_OPP_TOKENS_PER_ARROW,
        description="Destroy opponent tokens for every ranged face rolled.",
    ),
    FavorDefinition(
        name="Frigg's Sight",
        costs=(2, 3, 4),
        magnitudes=(2, 3, 4),
        phase=Phase.PRE,
        priority=1,
        kind=EffectKind.BAN_OPP_DICE,
        description="Cancel some of the opponent's dice this round.",
    ),
    FavorDefinition(
        name="Loki's Trick",
        costs=(3, 6, 9),
        magnitudes=(1, 2, 3),
        phase=Phase.PRE,
        priority=1,
        kind=EffectKind.BAN_OPP_DICE,
        description="Ban some of the opponent's dice this round.",
    ),
    FavorDefinition(
        name="Freyja's Plenty",
        costs=(2, 4, 6),
        magnitudes=(3, 6, 9),
        phase=Phase.PRE,
        priority=1,
        kind=EffectKind.GAIN_TOKENS,
        description="Gain favor tokens.",
    ),
    FavorDefinition(
        name="Ran's Net",
        costs=(3, 5, 7),
        magnitudes=(2, 4, 6),
        phase=Phase.PRE,
        priority=2,
        kind=EffectKind.STEAL_TOKENS,
        description="Take favor tokens from the opponent.",
    ),
    FavorDefinition(
        name="Mimir's Wisdom",
        costs=(3, 5, 7),
        magnitudes=(1, 2, 3),
        phase=Phase.POST,
        priority=4,
        kind=EffectKind.TOKENS_PER_DAMAGE_TAKEN,
        description="Gain tokens for every point of damage taken.",
    ),
    FavorDefinition(
        name="Bragi's Verve",
        costs=(4, 8, 12),
        magnitudes=(2, 3, 4),
        phase=Phase.POST,
        priority=4,
        kind=EffectKind.TOKENS_PER_STEAL,
        description="Gain tokens for every steal face rolled.",
    ),
    FavorDefinition(
        name="Var's Bond",
        costs=(10, 14, 18),
        magnitudes=(1, 2, 3),
        phase=Phase.POST,
        priority=1,
        kind=EffectKind.HEAL_PER_OPP_FAVOR_SPENT,
        description="Heal for every token the opponent spends on a favor.",
    ),
    FavorDefinition(
        name="Thrymr's Theft",
        costs=(3, 6, 9),
        magnitudes=(1, 2, 3),
        phase=Phase.PRE,
        priority=1,
        kind=EffectKind.REDUCE_OPP_FAVOR_LEVEL,
        description="Lower the tier of the opponent's favor.",
    ),
)

_BY_NAME = {favor.name: favor for favor in FAVOR_CATALOG}


def all_favors() -> tuple[FavorDefinition, ...]:
    """The full favor catalog."""
    return FAVOR_CATALOG


def get_favor(name: str) -> FavorDefinition:
    """Look up a favor by name. Raises KeyError if unknown."""
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown god favor: {name}") from None
