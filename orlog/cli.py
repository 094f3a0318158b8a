"""
Orlog CLI - Command-line interface for the engine.

Usage:
    orlog catalog                              List the god favors
    orlog simulate [--rounds N] [--seed S]     Play a bot vs bot match
    orlog show <name>                          Print a saved match
"""

import argparse
import sys

from .bots import GreedyBot, RandomBot
from .config import GameConfig, configure_logging
from .engine_core.favors import all_favors
from .persistence import SnapshotError, SnapshotStore
from .session import GameLoop, LoopState


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Orlog - Dice Combat Engine",
        prog="orlog",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Catalog command
    subparsers.add_parser("catalog", help="List the god favors")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a bot vs bot match")
    simulate_parser.add_argument("--rounds", type=int, default=50, help="Maximum rounds to play")
    simulate_parser.add_argument("--seed", type=int, help="Random seed")
    simulate_parser.add_argument("--opponent", choices=["greedy", "random"], default="greedy",
                                 help="Policy for the second player")
    simulate_parser.add_argument("--save", help="Save the final match under this name")

    # Show command
    show_parser = subparsers.add_parser("show", help="Print a saved match")
    show_parser.add_argument("name", help="Save name")

    args = parser.parse_args(argv)

    try:
        config = GameConfig.from_env()
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    configure_logging(config)

    if args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "simulate":
        cmd_simulate(args, config)
    elif args.command == "show":
        cmd_show(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_catalog(args):
    """Print the favor table."""
    print(f"{'Favor':<26}{'Phase':<6}{'Prio':>5}  {'Costs':<10}{'Values':<12}Effect")
    for favor in all_favors():
        costs = "/".join(str(c) for c in favor.costs)
        values = "/".join(str(m) for m in favor.magnitudes)
        print(
            f"{favor.name:<26}{favor.phase.value:<6}{favor.priority:>5}  "
            f"{costs:<10}{values:<12}{favor.description}"
        )


def cmd_simulate(args, config: GameConfig):
    """Play a full match between two bots and print its log."""
    if args.seed is not None:
        config.seed = args.seed
    opponent = GreedyBot() if args.opponent == "greedy" else RandomBot(seed=config.seed)

    loop = GameLoop.new_match(
        config,
        names=("Player 1", "Player 2"),
        bots={0: GreedyBot(), 1: opponent},
    )
    print(f"Player 1: GreedyBot  Player 2: {opponent.get_name()}")
    loop.select_loadouts()

    for _ in range(args.rounds):
        if loop.state == LoopState.GAME_OVER:
            break
        while loop.state == LoopState.ROLLING:
            loop.roll()
        loop.resolve()

    _print_match(loop.match)

    if args.save:
        store = SnapshotStore(config.save_dir)
        path = store.save(loop.match, args.save)
        print(f"\nSaved to {path}")


def cmd_show(args, config: GameConfig):
    """Print a saved match."""
    store = SnapshotStore(config.save_dir)
    try:
        match = store.load(args.name)
    except SnapshotError as e:
        print(f"Error: {e}")
        sys.exit(1)
    _print_match(match)


def _print_match(match):
    for entry in reversed(match.log.entries()):
        print(entry.message)

    print()
    print(f"Round: {match.round_number}  Roll: {match.roll_phase}")
    for player in match.players:
        loadout = ", ".join(f.name for f in player.loadout) or "-"
        print(f"{player.name}: health {player.health}/{player.max_health}, "
              f"tokens {player.tokens}, loadout [{loadout}]")
    if match.is_game_over():
        winner = match.winner()
        print(f"Winner: {winner.name}" if winner else "Draw")
