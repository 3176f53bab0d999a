#!/usr/bin/env python3
"""
Minimal CLI for simulating games between automated players.

Every player is computer-controlled and plays synchronously; the game ends
when one solvent player is left or the turn limit is reached, in which case
the richest player wins.
"""

import argparse
import logging
from typing import Optional

from boardsim.config import GameConfig
from boardsim.events import EventType, GameEvent
from boardsim.game import Game, create_game
from boardsim.game_logger import GameLogger
from boardsim.player import Player

PLAYER_NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Hank"]


def print_game_summary(game: Game) -> None:
    """Print final game summary."""
    print("\n" + "=" * 60)
    print("GAME OVER")
    print("=" * 60)

    if game.winner is not None:
        winner = game.winner
        print(f"\nWinner: {winner.name}")
        print(f"Final Money: ${winner.money}")
        print(f"Properties Owned: {len(winner.properties)}")

    print("\nFinal Standings:")
    for player in game.players:
        status = "BANKRUPT" if player.is_bankrupt else f"${player.total_assets(game.board)}"
        print(f"  {player.name}: {status}")

    print(f"\nTotal Turns: {game.turn_number}")


def simulate_game(
    num_players: int = 4,
    seed: Optional[int] = None,
    max_turns: int = 200,
    verbose: bool = False,
    log_file: Optional[str] = None,
    config: Optional[GameConfig] = None,
) -> Game:
    """
    Simulate a complete game between automated players.

    Args:
        num_players: Number of players (2-8)
        seed: Random seed for reproducibility
        max_turns: Turn limit after which the richest player wins
        verbose: Whether to print a summary at the end
        log_file: Path to a JSONL event log (None = no log)
        config: Base configuration; `seed` and `max_turns` override it

    Returns:
        The finished game.
    """
    if not 2 <= num_players <= len(PLAYER_NAMES):
        raise ValueError(f"num_players must be between 2 and {len(PLAYER_NAMES)}, got {num_players}")

    base = config if config is not None else GameConfig()
    config = GameConfig(**{**vars(base), "seed": seed, "time_limit_turns": max_turns})
    players = [Player(i, PLAYER_NAMES[i], automated=True) for i in range(num_players)]
    game = create_game(config, players)

    logger = GameLogger(log_file) if log_file is not None else None
    if logger is not None:
        logger.attach(game)

        def snapshot_on_turn_start(event: GameEvent) -> None:
            if event.event_type == EventType.TURN_START:
                logger.log_turn_snapshot(game)

        game.events.subscribe(snapshot_on_turn_start)

    if verbose:
        print(f"Starting game with {num_players} automated players")
        print(f"Seed: {seed}")

    with game:
        game.start()

    if verbose:
        print_game_summary(game)
        if logger is not None:
            print(f"\nGame logged to: {logger.log_file}")

    return game


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Simulate a game between automated players")
    parser.add_argument(
        "--players",
        type=int,
        default=4,
        choices=range(2, 9),
        help="Number of players (2-8)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--max-turns", type=int, default=200, help="Turn limit")
    parser.add_argument("--quiet", action="store_true", help="Reduce output verbosity")
    parser.add_argument("--log-file", type=str, default=None, help="Path to JSONL log file")

    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING if args.quiet else logging.INFO, format="%(message)s")

    simulate_game(
        num_players=args.players,
        seed=args.seed,
        max_turns=args.max_turns,
        verbose=not args.quiet,
        log_file=args.log_file,
    )


if __name__ == "__main__":
    main()
