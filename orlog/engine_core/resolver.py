"""
Round Resolver - Turns two dice rolls into a resolved round.

One call resolves one round, in this order:
1. Count each player's faces
2. Apply PRE favors (may change face counts, tokens, favor choices)
3. Steal tokens (both directions, from the balances before stealing)
4. Compute melee and ranged damage from the counts
5. Add one token per gold face in the original roll
6. Apply damage
7. Apply POST favors (may read the damage each side took)
8. Log the round and reset per-round state

Favors within a phase run in ascending priority. A player without a
favor for the phase is skipped. Equal priorities run in player order
(player 1 first). A favor the player can no longer afford when its
phase is reached is skipped entirely.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence

from .faces import (
    Face,
    FaceCategory,
    FaceCounts,
    add_to,
    category_count,
    count_faces,
    gold_count,
    helmets,
    melee,
    ranged,
    remove_up_to,
    shields,
    steals,
)
from .favors import EffectKind, FavorDefinition, Phase
from .state import MatchState, PlayerState, RoundSummary, SideTally

logger = logging.getLogger("orlog.engine.resolver")

# Tie order for the majority bonus
MAJORITY_ORDER = (
    FaceCategory.MELEE,
    FaceCategory.RANGED,
    FaceCategory.HELMET,
    FaceCategory.SHIELD,
    FaceCategory.STEAL,
)

# Which opponent dice a ban cancels first
BAN_ORDER = (
    FaceCategory.MELEE,
    FaceCategory.RANGED,
    FaceCategory.STEAL,
    FaceCategory.HELMET,
    FaceCategory.SHIELD,
)


class ResolutionStage(Enum):
    """Progress of a single round resolution."""
    UNRESOLVED = "unresolved"
    PRE_APPLIED = "pre_applied"
    COMBAT_RESOLVED = "combat_resolved"
    POST_APPLIED = "post_applied"
    ROUND_CLOSED = "round_closed"


@dataclass
class SideContext:
    """
    One player's view of the round.

    `own` and `enemy` are the live count maps; handlers mutate them.
    """
    index: int
    me: PlayerState
    opp: PlayerState
    own: FaceCounts
    enemy: FaceCounts
    tally: SideTally
    damage_taken: int = 0


@dataclass
class RoundContext:
    """Everything a single resolution call works on."""
    match: MatchState
    faces: tuple[list[Face | None], list[Face | None]]
    counts: tuple[FaceCounts, FaceCounts]
    tallies: tuple[SideTally, SideTally] = field(default_factory=lambda: (SideTally(), SideTally()))
    stage: ResolutionStage = ResolutionStage.UNRESOLVED

    def side(self, index: int) -> SideContext:
        other = 1 - index
        return SideContext(
            index=index,
            me=self.match.players[index],
            opp=self.match.players[other],
            own=self.counts[index],
            enemy=self.counts[other],
            tally=self.tallies[index],
        )


EffectHandler = Callable[[SideContext, int], str]


@dataclass
class RoundResolver:
    """
    Resolves rounds.

    Stateless between calls - all match state lives in MatchState,
    all per-round state in RoundContext.
    """

    def __post_init__(self):
        self._handlers: dict[EffectKind, EffectHandler] = {
            EffectKind.DAMAGE: self._effect_damage,
            EffectKind.HEAL: self._effect_heal,
            EffectKind.GAIN_TOKENS: self._effect_gain_tokens,
            EffectKind.STEAL_TOKENS: self._effect_steal_tokens,
            EffectKind.REMOVE_OPP_HELMETS: self._effect_remove_opp_helmets,
            EffectKind.IGNORE_OPP_RANGED_BLOCKS: self._effect_ignore_opp_ranged_blocks,
            EffectKind.DOUBLE_BLOCKS: self._effect_double_blocks,
            EffectKind.BONUS_PER_RANGED: self._effect_bonus_per_ranged,
            EffectKind.MULTIPLY_MELEE: self._effect_multiply_melee,
            EffectKind.BONUS_MAJORITY: self._effect_bonus_majority,
            EffectKind.HEAL_PER_BLOCKED: self._effect_heal_per_blocked,
            EffectKind.HEAL_PER_INCOMING_MELEE: self._effect_heal_per_incoming_melee,
            EffectKind.DESTROY_OPP_TOKENS_PER_ARROW: self._effect_destroy_opp_tokens,
            EffectKind.TOKENS_PER_DAMAGE_TAKEN: self._effect_tokens_per_damage_taken,
            EffectKind.TOKENS_PER_STEAL: self._effect_tokens_per_steal,
            EffectKind.REDUCE_OPP_FAVOR_LEVEL: self._effect_reduce_opp_favor_level,
            EffectKind.HEAL_PER_OPP_FAVOR_SPENT: self._effect_heal_per_opp_favor_spent,
            EffectKind.BAN_OPP_DICE: self._effect_ban_opp_dice,
        }
        missing = set(EffectKind) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for effect kinds: {sorted(k.value for k in missing)}")

    def resolve(
        self,
        match: MatchState,
        p1_faces: Sequence[Face | None],
        p2_faces: Sequence[Face | None],
    ) -> RoundSummary:
        """
        Resolve one round in place.

        Returns the round summary, which is also stored on
        match.last_round and written to the match log.
        """
        faces = (list(p1_faces), list(p2_faces))
        ctx = RoundContext(
            match=match,
            faces=faces,
            counts=(count_faces(faces[0]), count_faces(faces[1])),
        )

        self._apply_phase(ctx, Phase.PRE, damage_taken=(0, 0))
        ctx.stage = ResolutionStage.PRE_APPLIED

        self._resolve_combat(ctx)
        ctx.stage = ResolutionStage.COMBAT_RESOLVED

        # Each side's incoming damage is the other side's dealt damage
        taken = (ctx.tallies[1].damage, ctx.tallies[0].damage)
        self._apply_phase(ctx, Phase.POST, damage_taken=taken)
        ctx.stage = ResolutionStage.POST_APPLIED

        summary = self._close_round(ctx)
        ctx.stage = ResolutionStage.ROUND_CLOSED
        return summary

    # =========================================================================
    # Stages
    # =========================================================================

    def _apply_phase(self, ctx: RoundContext, phase: Phase, damage_taken: tuple[int, int]):
        """Apply each player's favor for this phase, lowest priority first."""
        sides = [ctx.side(0), ctx.side(1)]
        for side, taken in zip(sides, damage_taken):
            side.damage_taken = taken

        # sorted() is stable, so equal priorities keep player order
        ordered = sorted(sides, key=lambda s: self._phase_priority(s.me, phase))
        for side in ordered:
            self._apply_favor(ctx, side, phase)

    @staticmethod
    def _phase_priority(player: PlayerState, phase: Phase) -> float:
        favor = player.chosen_favor
        if favor is None or favor.phase != phase:
            return float("inf")
        return favor.priority

    def _apply_favor(self, ctx: RoundContext, side: SideContext, phase: Phase):
        player = side.me
        favor = player.chosen_favor
        if favor is None or favor.phase != phase:
            return

        tier = player.chosen_tier
        cost = favor.cost(tier)
        if player.tokens < cost:
            logger.debug(
                "Skipping %s for %s: needs %d tokens, has %d",
                favor.name, player.name, cost, player.tokens,
            )
            return

        player.spend_tokens(cost)
        detail = self._handlers[favor.kind](side, favor.magnitude(tier))

        if phase == Phase.PRE:
            side.tally.pre_favor = favor.name
        else:
            side.tally.post_favor = favor.name

        message = f"{player.name} used {favor.name} ({detail})"
        ctx.match.add_log(message, kind="favor")
        logger.debug("%s [tier %d, cost %d]", message, tier + 1, cost)

    def _resolve_combat(self, ctx: RoundContext):
        """Steal, damage calculation, gold income, then damage."""
        p1, p2 = ctx.match.players
        a, b = ctx.counts
        ta, tb = ctx.tallies

        # Steal is simultaneous: both amounts come from the balances before either transfer
        ta.stolen = min(steals(a), p2.tokens)
        tb.stolen = min(steals(b), p1.tokens)
        p1.add_tokens(ta.stolen)
        p2.spend_tokens(ta.stolen)
        p2.add_tokens(tb.stolen)
        p1.spend_tokens(tb.stolen)

        for tally, own, enemy in ((ta, a, b), (tb, b, a)):
            tally.melee = melee(own)
            tally.ranged = ranged(own)
            tally.opp_shields = shields(enemy)
            tally.opp_helmets = helmets(enemy)
            tally.melee_damage = max(0, tally.melee - tally.opp_shields)
            tally.ranged_damage = max(0, tally.ranged - tally.opp_helmets)

        # Gold income counts the roll as rolled, not the favor-modified counts
        ta.gold_income = gold_count(ctx.faces[0])
        tb.gold_income = gold_count(ctx.faces[1])
        p1.add_tokens(ta.gold_income)
        p2.add_tokens(tb.gold_income)

        p2.take_damage(ta.damage)
        p1.take_damage(tb.damage)

    def _close_round(self, ctx: RoundContext) -> RoundSummary:
        match = ctx.match
        summary = RoundSummary(round_number=match.round_number, sides=ctx.tallies)
        match.last_round = summary
        match.add_log(summary.describe(match.names), kind="round")
        logger.info(summary.describe(match.names))

        match.round_number += 1
        match.roll_phase = 1
        for player in match.players:
            player.clear_favor()
            player.dice.clear_locks()
        return summary

    # =========================================================================
    # Effect handlers
    #
    # Each receives the acting side and the tier magnitude, mutates state,
    # and returns a short description for the match log.
    # =========================================================================

    def _effect_damage(self, side: SideContext, magnitude: int) -> str:
        side.opp.take_damage(magnitude)
        return f"{magnitude} dmg"

    def _effect_heal(self, side: SideContext, magnitude: int) -> str:
        healed = side.me.heal(magnitude)
        return f"heal {healed}"

    def _effect_gain_tokens(self, side: SideContext, magnitude: int) -> str:
        side.me.add_tokens(magnitude)
        return f"+{magnitude} tokens"

    def _effect_steal_tokens(self, side: SideContext, magnitude: int) -> str:
        taken = side.opp.spend_tokens(magnitude)
        side.me.add_tokens(taken)
        return f"stole {taken} tokens"

    def _effect_remove_opp_helmets(self, side: SideContext, magnitude: int) -> str:
        removed = remove_up_to(side.enemy, FaceCategory.HELMET, magnitude)
        return f"-{removed} helmets"

    def _effect_ignore_opp_ranged_blocks(self, side: SideContext, magnitude: int) -> str:
        removed = remove_up_to(side.enemy, FaceCategory.SHIELD, magnitude)
        return f"ignore {removed} shields"

    def _effect_double_blocks(self, side: SideContext, magnitude: int) -> str:
        added = 0
        for face in (Face.SHIELD, Face.SHIELD_GOLD, Face.HELMET, Face.HELMET_GOLD):
            extra = side.own.get(face, 0) * magnitude
            add_to(side.own, face, extra)
            added += extra
        return f"+{added} blocks"

    def _effect_bonus_per_ranged(self, side: SideContext, magnitude: int) -> str:
        bonus = magnitude * ranged(side.own)
        add_to(side.own, Face.RANGED, bonus)
        return f"+{bonus} arrows"

    def _effect_multiply_melee(self, side: SideContext, magnitude: int) -> str:
        extra = melee(side.own) * (magnitude - 100) // 100
        add_to(side.own, Face.MELEE, max(0, extra))
        return f"x{magnitude}% melee"

    def _effect_bonus_majority(self, side: SideContext, magnitude: int) -> str:
        # max() keeps the first of equal counts, so MAJORITY_ORDER breaks ties
        best = max(MAJORITY_ORDER, key=lambda c: category_count(side.own, c))
        add_to(side.own, best.base, magnitude)
        return f"+{magnitude} {best.value}"

    def _effect_destroy_opp_tokens(self, side: SideContext, magnitude: int) -> str:
        destroyed = side.opp.spend_tokens(magnitude * ranged(side.own))
        return f"-{destroyed} opp tokens"

    def _effect_heal_per_blocked(self, side: SideContext, magnitude: int) -> str:
        blocked = (
            min(melee(side.enemy), helmets(side.own))
            + min(ranged(side.enemy), shields(side.own))
        )
        healed = side.me.heal(blocked * magnitude)
        return f"heal {healed}"

    def _effect_heal_per_incoming_melee(self, side: SideContext, magnitude: int) -> str:
        incoming = max(0, melee(side.enemy) - helmets(side.own))
        healed = side.me.heal(incoming * magnitude)
        return f"heal {healed}"

    def _effect_tokens_per_damage_taken(self, side: SideContext, magnitude: int) -> str:
        tokens = side.damage_taken * magnitude
        side.me.add_tokens(tokens)
        return f"+{tokens} tokens"

    def _effect_tokens_per_steal(self, side: SideContext, magnitude: int) -> str:
        tokens = steals(side.own) * magnitude
        side.me.add_tokens(tokens)
        return f"+{tokens} tokens"

    def _effect_reduce_opp_favor_level(self, side: SideContext, magnitude: int) -> str:
        opp = side.opp
        levels = magnitude
        lowered = 0
        if opp.chosen_favor is not None:
            lowered = min(levels, opp.chosen_tier)
            opp.chosen_tier -= lowered
            levels -= lowered
        # Levels the tier could not absorb come off the token balance
        destroyed = opp.spend_tokens(levels)
        return f"-{lowered} tier, -{destroyed} opp tokens"

    def _effect_heal_per_opp_favor_spent(self, side: SideContext, magnitude: int) -> str:
        healed = side.me.heal(side.opp.chosen_cost * magnitude)
        return f"heal {healed}"

    def _effect_ban_opp_dice(self, side: SideContext, magnitude: int) -> str:
        banned = 0
        for category in BAN_ORDER:
            if banned >= magnitude:
                break
            banned += remove_up_to(side.enemy, category, magnitude - banned)
        return f"banned {banned} dice"


def resolve_round(
    match: MatchState,
    p1_faces: Sequence[Face | None],
    p2_faces: Sequence[Face | None],
) -> RoundSummary:
    """
    Convenience function to resolve a round.

    Creates a RoundResolver and resolves the round.
    """
    return RoundResolver().resolve(match, p1_faces, p2_faces)
