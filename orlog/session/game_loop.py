"""
Game Loop - Drives a match round by round.

The loop:
1. Both players pick a loadout of three favors (once per match)
2. Each round, both pools are rolled up to rolls_per_round times;
   players lock dice between rolls
3. Players may pick a favor and tier they can afford
4. The round is resolved by the engine
5. Repeat until a player reaches 0 health

Bots (keyed by player index) make their decisions automatically.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from ..config import GameConfig
from ..engine_core.dice import DicePool
from ..engine_core.favors import FavorDefinition, all_favors, get_favor
from ..engine_core.resolver import RoundResolver
from ..engine_core.state import EventLog, MatchState, PlayerState, RoundSummary

if TYPE_CHECKING:
    from ..bots.greedy_bot import GreedyBot
    from ..bots.policy import FavorDecision

logger = logging.getLogger("orlog.session.game_loop")


class LoopState(Enum):
    """State of the game loop."""
    ROLLING = "rolling"
    READY_TO_RESOLVE = "ready_to_resolve"
    GAME_OVER = "game_over"


class GameOverError(RuntimeError):
    """Raised when acting on a finished match."""


class FavorSelectionError(ValueError):
    """Raised when a favor choice is not in the loadout or not affordable."""


@dataclass
class TurnResult:
    """
    Result of a roll or a resolution.

    Contains the log lines the step produced and, after a
    resolution, the round summary.
    """
    loop_state: LoopState
    summary: RoundSummary | None = None
    log_lines: list[str] = field(default_factory=list)
    winner: str | None = None


class GameLoop:
    """
    The match driver.

    Usage:
        loop = GameLoop.new_match(bots={1: GreedyBot()})
        loop.select_loadouts(["Thor's Strike", "Vidar's Might", "Ullr's Aim"])

        while loop.state != LoopState.GAME_OVER:
            while loop.state == LoopState.ROLLING:
                loop.roll()
                loop.toggle_lock(0)
            loop.choose_favor(0, "Thor's Strike", 0)
            result = loop.resolve()
    """

    def __init__(
        self,
        match: MatchState,
        bots: dict[int, GreedyBot] | None = None,
        resolver: RoundResolver | None = None,
    ):
        self.match = match
        self.bots = dict(bots or {})
        self.resolver = resolver or RoundResolver()
        for index in self.bots:
            if index not in (0, 1):
                raise ValueError(f"Bot player index must be 0 or 1, got {index}")

    @classmethod
    def new_match(
        cls,
        config: GameConfig | None = None,
        names: tuple[str, str] = ("You", "AI"),
        bots: dict[int, GreedyBot] | None = None,
        rng: random.Random | None = None,
    ) -> GameLoop:
        """Create a fresh match from a config."""
        config = config or GameConfig()
        rng = rng or random.Random(config.seed)
        players = [
            PlayerState(
                name=name,
                dice=DicePool.create(config.dice_per_player, rng),
                max_health=config.max_health,
                health=config.max_health,
            )
            for name in names
        ]
        match = MatchState(
            players=players,
            rolls_per_round=config.rolls_per_round,
            log=EventLog(capacity=config.log_capacity),
        )
        logger.info("New match: %s vs %s", *names)
        return cls(match, bots=bots)

    @property
    def state(self) -> LoopState:
        if self.match.is_game_over():
            return LoopState.GAME_OVER
        if self.match.rolls_done:
            return LoopState.READY_TO_RESOLVE
        return LoopState.ROLLING

    # =========================================================================
    # Loadouts and favors
    # =========================================================================

    def select_loadouts(
        self,
        p1_favors: Sequence[str | FavorDefinition] | None = None,
        p2_favors: Sequence[str | FavorDefinition] | None = None,
    ):
        """
        Fix both loadouts.

        A bot player picks its own when its list is omitted.
        """
        for index, favors in enumerate((p1_favors, p2_favors)):
            player = self.match.players[index]
            if player.loadout:
                continue
            if favors is None:
                bot = self.bots.get(index)
                if bot is None:
                    raise FavorSelectionError(f"{player.name} needs a loadout")
                chosen = bot.choose_loadout(all_favors())
            else:
                chosen = [_as_favor(f) for f in favors]
            self._set_loadout(player, chosen)

    def choose_favor(self, player_index: int, favor: str | FavorDefinition, tier: int):
        """
        Pick a favor for this round.

        The favor must be in the loadout and affordable right now.
        """
        self._check_active()
        player = self.match.players[player_index]
        favor = _as_favor(favor)
        if favor not in player.loadout:
            raise FavorSelectionError(f"{favor.name} is not in {player.name}'s loadout")
        need = favor.cost(tier)
        if player.tokens < need:
            raise FavorSelectionError(
                f"Not enough tokens (required: {need}, {player.name} has: {player.tokens})"
            )
        player.choose_favor(favor, tier)
        self.match.add_log(
            f"{player.name} selected favor: {favor.name} (Tier {tier + 1})",
            kind="favor_choice",
        )

    def clear_favor(self, player_index: int):
        self.match.players[player_index].clear_favor()

    def bot_choose_favor(self, player_index: int) -> FavorDecision:
        """Let the bot for a player pick its favor for this round."""
        bot = self.bots[player_index]
        player = self.match.players[player_index]
        decision = bot.choose_favor(self.match, player)
        if decision.favor is not None:
            self.choose_favor(player_index, decision.favor, decision.tier)
        logger.debug("%s favor decision: %s", player.name, decision.explanation)
        return decision

    # =========================================================================
    # Rolling
    # =========================================================================

    def roll(self) -> TurnResult:
        """Roll both pools' unlocked dice, then let bots set their locks."""
        self._check_active()
        if self.match.rolls_done:
            raise ValueError("No rolls left this round - resolve it first")
        self._ensure_bot_loadouts()

        for player in self.match.players:
            player.dice.roll_unlocked()

        for index, bot in self.bots.items():
            player = self.match.players[index]
            for die_index, locked in enumerate(bot.choose_locks(self.match, player)):
                player.dice.set_locked(die_index, locked)

        line = f"Roll {self.match.roll_phase}"
        self.match.add_log(line, kind="roll")
        self.match.roll_phase += 1
        return TurnResult(loop_state=self.state, log_lines=[line])

    def toggle_lock(self, index: int, player_index: int = 0) -> bool:
        """Flip the lock on one of a player's dice."""
        self._check_active()
        return self.match.players[player_index].dice.toggle(index)

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self) -> TurnResult:
        """Resolve the round once every roll has been taken."""
        self._check_active()
        if not self.match.rolls_done:
            raise ValueError(
                f"Round not ready: roll {self.match.roll_phase} of {self.match.rolls_per_round}"
            )

        for index in self.bots:
            if self.match.players[index].chosen_favor is None:
                self.bot_choose_favor(index)

        p1, p2 = self.match.players
        tokens_before = (p1.tokens, p2.tokens)

        summary = self.resolver.resolve(
            self.match, p1.dice.current_faces(), p2.dice.current_faces()
        )
        lines = self._summary_lines(summary, tokens_before)
        for line in lines:
            self.match.add_log(line, kind="summary")

        winner = self.match.winner()
        if self.match.is_game_over():
            outcome = f"Winner: {winner.name}" if winner else "Both players fell - draw"
            self.match.add_log(outcome, kind="game_over")
            lines.append(outcome)
            logger.info(outcome)

        return TurnResult(
            loop_state=self.state,
            summary=summary,
            log_lines=lines,
            winner=winner.name if winner else None,
        )

    def _summary_lines(
        self,
        summary: RoundSummary,
        tokens_before: tuple[int, int],
    ) -> list[str]:
        p1, p2 = self.match.players
        a, b = summary.sides
        net = (p1.tokens - tokens_before[0], p2.tokens - tokens_before[1])
        lines = [
            f"Favor summary ({p1.name}/{p2.name}): "
            f"+gold {a.gold_income}/{b.gold_income}, "
            f"steal {a.stolen}/{b.stolen}, net {net[0]}/{net[1]}",
        ]
        for player, tally in ((p1, a), (p2, b)):
            lines.append(
                f"Summary: {player.name} dealt {tally.damage} base damage "
                f"(melee: {tally.melee_damage}, ranged: {tally.ranged_damage}) + favor effects"
            )
        for player, opponent, tally in ((p1, p2, a), (p2, p1, b)):
            lines.append(
                f"Details: {player.name} melee {tally.melee} vs {opponent.name} shield "
                f"{tally.opp_shields} | {player.name} ranged {tally.ranged} vs "
                f"{opponent.name} helmet {tally.opp_helmets}"
            )
        return lines

    def _ensure_bot_loadouts(self):
        for index, bot in self.bots.items():
            player = self.match.players[index]
            if not player.loadout:
                self._set_loadout(player, bot.choose_loadout(all_favors()))

    def _set_loadout(self, player: PlayerState, favors: Sequence[FavorDefinition]):
        player.set_loadout(favors)
        self.match.add_log(
            f"Loadout ({player.name}): [{', '.join(str(f) for f in player.loadout)}]",
            kind="loadout",
        )

    def _check_active(self):
        if self.match.is_game_over():
            raise GameOverError("Game over - start a new match")


def _as_favor(favor: str | FavorDefinition) -> FavorDefinition:
    return get_favor(favor) if isinstance(favor, str) else favor
