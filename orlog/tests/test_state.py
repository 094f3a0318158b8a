"""
Tests for players, the match, and the event log.
"""

import random

import pytest

from ..engine_core.dice import DicePool
from ..engine_core.favors import get_favor
from ..engine_core.state import EventLog, LogEntry, MatchState, PlayerState
from .conftest import make_player


class TestPlayerState:
    """Tests for health, tokens, and favor choice."""

    def test_health_defaults_to_max(self):
        """A player without explicit health starts at its own maximum."""
        player = PlayerState(name="A", dice=DicePool.create(6, random.Random(0)), max_health=10)
        assert player.health == 10
        assert player.health <= player.max_health

    @pytest.mark.parametrize("kwargs", [
        {"max_health": 0},
        {"max_health": 10, "health": 11},
        {"health": -1},
        {"tokens": -1},
    ])
    def test_invalid_construction(self, kwargs):
        with pytest.raises(ValueError):
            PlayerState(name="A", dice=DicePool.create(6, random.Random(0)), **kwargs)

    def test_damage_clamped_at_zero(self):
        player = make_player("Alice", health=3)
        lost = player.take_damage(10)
        assert lost == 3
        assert player.health == 0
        assert player.is_defeated

    def test_heal_clamped_at_max(self):
        player = make_player("Alice", health=14)
        gained = player.heal(5)
        assert gained == 1
        assert player.health == 15

    def test_spend_capped_by_balance(self):
        player = make_player("Alice", tokens=2)
        assert player.spend_tokens(5) == 2
        assert player.tokens == 0

    def test_negative_amounts_ignored(self):
        player = make_player("Alice", tokens=2, health=10)
        player.take_damage(-3)
        player.heal(-3)
        player.spend_tokens(-3)
        assert player.health == 10
        assert player.tokens == 2

    def test_chosen_cost(self):
        player = make_player("Alice")
        assert player.chosen_cost == 0
        player.choose_favor(get_favor("Thor's Strike"), 1)
        assert player.chosen_cost == 8
        player.clear_favor()
        assert player.chosen_favor is None
        assert player.chosen_tier == 0


class TestLoadout:
    """Tests for loadout selection."""

    def test_set_once(self):
        player = make_player("Alice")
        favors = [get_favor("Thor's Strike"), get_favor("Vidar's Might"), get_favor("Ullr's Aim")]
        player.set_loadout(favors)
        assert len(player.loadout) == 3
        with pytest.raises(ValueError):
            player.set_loadout(favors)

    def test_wrong_size(self):
        player = make_player("Alice")
        with pytest.raises(ValueError):
            player.set_loadout([get_favor("Thor's Strike")])

    def test_duplicates_rejected(self):
        player = make_player("Alice")
        thor = get_favor("Thor's Strike")
        with pytest.raises(ValueError):
            player.set_loadout([thor, thor, get_favor("Ullr's Aim")])


class TestMatchState:
    """Tests for match-level helpers."""

    def test_needs_two_players(self):
        with pytest.raises(ValueError):
            MatchState(players=[make_player("Solo")])

    def test_opponent_of(self, match):
        assert match.opponent_of(match.p1) is match.p2
        assert match.opponent_of(match.p2) is match.p1

    def test_winner(self, match):
        assert match.winner() is None
        match.p2.take_damage(15)
        assert match.is_game_over()
        assert match.winner() is match.p1

    def test_double_knockout_is_draw(self, match):
        match.p1.take_damage(15)
        match.p2.take_damage(15)
        assert match.is_game_over()
        assert match.winner() is None

    def test_rolls_done(self, match):
        assert not match.rolls_done
        match.roll_phase = match.rolls_per_round + 1
        assert match.rolls_done


class TestEventLog:
    """Tests for the bounded log."""

    def test_newest_first(self):
        log = EventLog(capacity=5)
        log.add(LogEntry(1, "info", "first"))
        log.add(LogEntry(1, "info", "second"))
        assert log.messages() == ["second", "first"]
        assert log.newest.message == "second"
        assert log.oldest.message == "first"

    def test_capacity(self):
        """Only the most recent entries are kept."""
        log = EventLog(capacity=300)
        for i in range(1, 306):
            log.add(LogEntry(1, "info", f"msg-{i}"))

        assert len(log) == 300
        assert log.newest.message == "msg-305"
        assert log.oldest.message == "msg-6"

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            EventLog(capacity=0)

    def test_match_log_tags_round(self, match):
        match.round_number = 4
        match.add_log("hello", kind="roll")
        entry = match.log.newest
        assert entry.round_number == 4
        assert entry.kind == "roll"
        assert str(entry) == "hello"
