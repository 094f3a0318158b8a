"""
Tests for round resolution.

Tests:
- Base combat (damage, steal, gold income)
- Favor ordering and affordability
- Each favor effect
- Round close-out
"""

from ..engine_core.faces import Face
from ..engine_core.resolver import RoundResolver, resolve_round
from .conftest import pick

M, MG = Face.MELEE, Face.MELEE_GOLD
R = Face.RANGED
S = Face.SHIELD
H = Face.HELMET
ST = Face.STEAL


class TestBaseCombat:
    """Rounds without favors."""

    def test_melee_ranged_vs_shield(self, match, alice, bob):
        """2 melee - 1 shield plus 1 ranged - 0 helmets."""
        summary = resolve_round(match, [M, M, R], [S])

        assert bob.health == 13
        assert alice.health == 15
        assert alice.tokens == 0
        assert bob.tokens == 0

        mine, theirs = summary.sides
        assert (mine.melee, mine.opp_shields, mine.melee_damage) == (2, 1, 1)
        assert (mine.ranged, mine.opp_helmets, mine.ranged_damage) == (1, 0, 1)
        assert mine.damage == 2
        assert theirs.damage == 0

    def test_blocks_never_give_negative_damage(self, match, alice, bob):
        resolve_round(match, [M], [S, S, S, H, H])
        assert bob.health == 15
        assert alice.health == 15

    def test_health_clamped_at_zero(self, match, bob):
        bob.health = 3
        resolve_round(match, [M, M, M, M, M, M], [])
        assert bob.health == 0
        assert match.is_game_over()
        assert match.winner() is match.p1

    def test_steal_capped_by_balance(self, match, alice, bob):
        """Three steal faces against a single token take one."""
        bob.tokens = 1
        summary = resolve_round(match, [ST, ST, ST], [S])

        assert alice.tokens == 1
        assert bob.tokens == 0
        assert summary.sides[0].stolen == 1

    def test_steal_is_simultaneous(self, match, alice, bob):
        """Both steals use the balances from before either transfer."""
        alice.tokens = 2
        bob.tokens = 1
        resolve_round(match, [ST, ST], [ST, ST])

        assert alice.tokens == 1
        assert bob.tokens == 2

    def test_gold_income(self, match, alice, bob):
        resolve_round(match, [MG, Face.STEAL_GOLD, H], [Face.HELMET_GOLD])
        # Alice: 2 gold faces; steal finds nothing to take
        assert alice.tokens == 2
        assert bob.tokens == 1

    def test_unrolled_dice_ignored(self, match, bob):
        resolve_round(match, [None, M, None], [None])
        assert bob.health == 14


class TestFavorOrdering:
    """Phase order, priorities, and affordability."""

    def test_unaffordable_favor_is_noop(self, match, alice, bob):
        alice.tokens = 3
        pick(alice, "Thor's Strike", 0)  # costs 4
        resolve_round(match, [], [])

        assert bob.health == 15
        assert alice.tokens == 3
        assert all(e.kind != "favor" for e in match.log)

    def test_thor_strike(self, match, alice, bob):
        alice.tokens = 4
        pick(alice, "Thor's Strike", 0)
        summary = resolve_round(match, [M], [])

        assert bob.health == 12
        assert alice.tokens == 0
        assert summary.sides[0].post_favor == "Thor's Strike"

    def test_helmet_removal_changes_damage(self, match, alice, bob):
        """Vidar's Might removes the helmet before damage is computed."""
        alice.tokens = 3
        pick(alice, "Vidar's Might", 0)
        resolve_round(match, [R], [H])

        assert bob.health == 14
        assert alice.tokens == 1

    def test_helmet_blocks_without_favor(self, match, bob):
        resolve_round(match, [R], [H])
        assert bob.health == 15

    def test_lower_priority_first(self, match, alice, bob):
        """Freyja's Plenty (priority 1) resolves before Ran's Net (priority 2)."""
        alice.tokens = 3
        bob.tokens = 2
        pick(alice, "Ran's Net", 0)
        pick(bob, "Freyja's Plenty", 0)
        resolve_round(match, [], [])

        # Bob: 2 - 2 + 3 = 3, then Alice steals 2
        assert alice.tokens == 2
        assert bob.tokens == 1

    def test_equal_priority_player_order(self, match, alice, bob):
        """On equal priority, player 1 resolves first."""
        alice.tokens = 3
        bob.tokens = 2
        pick(alice, "Thrymr's Theft", 0)
        pick(bob, "Freyja's Plenty", 0)
        resolve_round(match, [], [])

        # Alice destroys one of Bob's tokens; Bob can no longer afford his favor
        assert alice.tokens == 0
        assert bob.tokens == 1
        favor_lines = [e.message for e in reversed(match.log.entries()) if e.kind == "favor"]
        assert len(favor_lines) == 1
        assert favor_lines[0].startswith("Alice used Thrymr's Theft")

    def test_gold_income_uses_original_roll(self, match, alice, bob):
        """Brunhild's Fury adds melee but no gold."""
        alice.tokens = 6
        pick(alice, "Brunhild's Fury", 0)
        summary = resolve_round(match, [MG, MG], [])

        assert summary.sides[0].melee == 3
        assert summary.sides[0].gold_income == 2
        assert bob.health == 12
        assert alice.tokens == 2

    def test_gold_income_ignores_large_inflation(self, match, alice, bob):
        """Freyr's Gift pushes two gold melee to five; income stays two."""
        alice.tokens = 6
        pick(alice, "Freyr's Gift", 1)
        summary = resolve_round(match, [MG, MG], [])

        assert summary.sides[0].melee == 5
        assert summary.sides[0].gold_income == 2
        assert bob.health == 10
        assert alice.tokens == 2

    def test_post_favor_sees_damage_taken(self, match, alice):
        alice.tokens = 3
        pick(alice, "Mimir's Wisdom", 0)
        resolve_round(match, [], [M, M])

        assert alice.health == 13
        assert alice.tokens == 2


class TestEffects:
    """One test per remaining effect kind."""

    def test_heal_capped(self, match, alice):
        alice.health = 14
        alice.tokens = 4
        pick(alice, "Idun's Rejuvenation", 0)
        resolve_round(match, [], [])
        assert alice.health == 15
        assert alice.tokens == 0

    def test_gain_tokens(self, match, alice):
        alice.tokens = 2
        pick(alice, "Freyja's Plenty", 0)
        resolve_round(match, [], [])
        assert alice.tokens == 3

    def test_ignore_shields(self, match, alice, bob):
        alice.tokens = 2
        pick(alice, "Ullr's Aim", 0)
        resolve_round(match, [M, M], [S, S])
        assert bob.health == 13

    def test_double_blocks(self, match, alice, bob):
        bob.tokens = 3
        pick(bob, "Baldr's Invulnerability", 0)
        resolve_round(match, [M, M], [S])
        assert bob.health == 15
        assert bob.tokens == 0

    def test_bonus_per_ranged(self, match, alice, bob):
        alice.tokens = 6
        pick(alice, "Skadi's Hunt", 0)
        resolve_round(match, [R, R], [])
        assert bob.health == 11

    def test_majority_tie_prefers_melee(self, match, alice, bob):
        alice.tokens = 4
        pick(alice, "Freyr's Gift", 0)
        summary = resolve_round(match, [R, M], [])
        assert summary.sides[0].melee == 3
        assert summary.sides[0].ranged == 1
        assert bob.health == 11

    def test_majority_picks_largest(self, match, alice):
        alice.tokens = 4
        pick(alice, "Freyr's Gift", 0)
        summary = resolve_round(match, [M, R, R], [])
        assert summary.sides[0].ranged == 4

    def test_heal_per_blocked(self, match, alice):
        alice.health = 10
        alice.tokens = 4
        pick(alice, "Heimdall's Watch", 0)
        resolve_round(match, [H, S], [M])
        assert alice.health == 11

    def test_heal_per_incoming_melee(self, match, alice):
        alice.tokens = 6
        pick(alice, "Hel's Grip", 0)
        resolve_round(match, [], [M, M, M])
        assert alice.health == 15

    def test_destroy_tokens_per_arrow(self, match, alice, bob):
        alice.tokens = 4
        bob.tokens = 5
        pick(alice, "Skuld's Claim", 0)
        resolve_round(match, [R], [])
        assert bob.tokens == 3
        assert bob.health == 14

    def test_tokens_per_steal(self, match, alice):
        alice.tokens = 4
        pick(alice, "Bragi's Verve", 0)
        resolve_round(match, [ST], [])
        assert alice.tokens == 2

    def test_heal_per_opp_favor_spent(self, match, alice, bob):
        """Var's Bond (priority 1) heals before Thor's Strike (priority 6) hits."""
        alice.health = 5
        alice.tokens = 10
        bob.tokens = 4
        pick(alice, "Var's Bond", 0)
        pick(bob, "Thor's Strike", 0)
        resolve_round(match, [], [])
        assert alice.health == 7
        assert alice.tokens == 0
        assert bob.tokens == 0

    def test_reduce_opp_favor_level(self, match, alice, bob):
        alice.tokens = 3
        bob.tokens = 8
        pick(alice, "Thrymr's Theft", 0)
        pick(bob, "Thor's Strike", 1)
        resolve_round(match, [], [])
        # Thor's Strike drops to tier 1: costs 4, deals 2
        assert bob.tokens == 4
        assert alice.health == 13

    def test_ban_opponent_dice(self, match, alice):
        alice.tokens = 3
        pick(alice, "Loki's Trick", 0)
        resolve_round(match, [], [M, R])
        assert alice.health == 14

    def test_ban_order(self, match, alice):
        alice.tokens = 2
        pick(alice, "Frigg's Sight", 0)
        summary = resolve_round(match, [], [M, R, ST])
        assert alice.health == 15
        assert summary.sides[1].stolen == 0


class TestRoundClose:
    """Per-round state is reset after resolution."""

    def test_counters_and_choices_reset(self, match, alice, bob):
        alice.tokens = 4
        pick(alice, "Thor's Strike", 0)
        alice.dice.roll_unlocked()
        alice.dice.toggle(0)
        bob.dice.toggle(3)
        match.roll_phase = 4

        summary = RoundResolver().resolve(match, [M], [S])

        assert match.round_number == 2
        assert match.roll_phase == 1
        assert alice.chosen_favor is None
        assert bob.chosen_favor is None
        assert alice.dice.locked_count == 0
        assert bob.dice.locked_count == 0
        assert match.last_round is summary

    def test_summary_logged(self, match):
        resolve_round(match, [M, M, R], [S])
        entry = match.log.newest
        assert entry.kind == "round"
        assert entry.round_number == 1
        assert entry.message.startswith("R1: Alice dealt 2")

    def test_resolver_reusable(self, match, bob):
        resolver = RoundResolver()
        resolver.resolve(match, [M], [])
        resolver.resolve(match, [M], [])
        assert bob.health == 13
        assert match.round_number == 3
