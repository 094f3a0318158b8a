"""
Greedy Bot - Simple scoring heuristics for the computer opponent.

Favor choice:
- Every affordable (favor, tier) pair in the loadout gets a score
- Damage scores highest, then healing (more so when behind on health),
  then token gain; everything else gets a small constant
- Tiers are tried from highest to lowest, so ties keep the stronger tier

Dice locks:
- Gold faces are always kept
- Steal faces are kept when behind on tokens, otherwise the more
  common of melee and ranged
- From the second round on, helmets and shields are kept when the
  previous round showed the opponent out-attacking them
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Sequence

from ..engine_core.faces import FaceCategory
from ..engine_core.favors import EffectKind
from ..engine_core.state import LOADOUT_SIZE
from .policy import FavorDecision, FavorPolicy, LockPolicy

if TYPE_CHECKING:
    from ..engine_core.favors import FavorDefinition
    from ..engine_core.state import MatchState, PlayerState

PASS_SCORE = -999


class GreedyBot(FavorPolicy, LockPolicy):
    """
    Greedy opponent.

    Stateless: every decision is made from the current match state.
    """

    def choose_loadout(self, catalog: Sequence[FavorDefinition]) -> list[FavorDefinition]:
        if len(catalog) < LOADOUT_SIZE:
            raise ValueError("Not enough favors in catalog")
        ranked = sorted(
            catalog,
            key=lambda f: (0 if f.kind == EffectKind.DAMAGE else 1, f.priority),
        )
        return ranked[:LOADOUT_SIZE]

    def choose_favor(self, match: MatchState, me: PlayerState) -> FavorDecision:
        opponent = match.opponent_of(me)
        best = FavorDecision(favor=None, score=PASS_SCORE, explanation="Nothing affordable")

        for favor in me.loadout:
            for tier in reversed(range(len(favor.costs))):
                if favor.costs[tier] > me.tokens:
                    continue
                score = self.score_favor(favor, tier, me, opponent)
                if score > best.score:
                    best = FavorDecision(
                        favor=favor,
                        tier=tier,
                        score=score,
                        explanation=f"{favor.name} tier {tier + 1} scored {score}",
                    )
        return best

    def score_favor(
        self,
        favor: FavorDefinition,
        tier: int,
        me: PlayerState,
        opponent: PlayerState,
    ) -> int:
        magnitude = favor.magnitude(tier)
        if favor.kind == EffectKind.DAMAGE:
            return 100 + magnitude * 15
        if favor.kind == EffectKind.HEAL:
            behind = 40 if opponent.health > me.health else 0
            return behind + magnitude * 10
        if favor.kind == EffectKind.GAIN_TOKENS:
            return 20 + magnitude * 5
        return 10

    def choose_locks(self, match: MatchState, me: PlayerState) -> list[bool]:
        faces = me.dice.current_faces()
        opponent = match.opponent_of(me)

        melee = sum(1 for f in faces if f is not None and f.is_attack_melee())
        ranged = sum(1 for f in faces if f is not None and f.is_attack_ranged())
        steal = sum(1 for f in faces if f is not None and f.is_steal())

        if me.tokens < opponent.tokens and steal > 0:
            keep = FaceCategory.STEAL
        elif melee >= ranged:
            keep = FaceCategory.MELEE
        else:
            keep = FaceCategory.RANGED

        need_helmets, need_shields = self._defensive_needs(match, me)

        locks = []
        for face in faces:
            if face is None:
                locks.append(False)
                continue
            locks.append(
                face.gold
                or face.category == keep
                or (need_helmets and face.is_helmet())
                or (need_shields and face.is_shield())
            )
        return locks

    @staticmethod
    def _defensive_needs(match: MatchState, me: PlayerState) -> tuple[bool, bool]:
        """Whether last round's opponent attacks outnumbered our helmets / shields."""
        last = match.last_round
        if match.round_number <= 1 or last is None:
            return False, False
        # The opponent's tally holds its attacks against our blocks
        theirs = last.sides[0] if me is match.p2 else last.sides[1]
        return theirs.opp_helmets < theirs.ranged, theirs.opp_shields < theirs.melee
