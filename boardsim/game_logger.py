"""
JSONL logger for game events.

Subscribes to a game's event bus and writes every event as one JSON object
per line.
"""

import json
from datetime import datetime
from typing import Any, Callable, Optional

from boardsim.events import EventType, GameEvent
from boardsim.game import Game


class GameLogger:
    """Logger that writes game events to a JSONL file."""

    def __init__(self, log_file: Optional[str] = None):
        """
        Initialize game logger.

        Args:
            log_file: Path to log file. If None, generates timestamped filename.
        """
        if log_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = f"boardsim_game_{timestamp}.jsonl"

        self.log_file = log_file
        self.event_count = 0
        self._game: Optional[Game] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

        # Create/clear log file
        with open(self.log_file, "w"):
            pass

    def log_event(self, event_type: str, **kwargs: Any) -> None:
        """
        Log a game event to the JSONL file.

        Args:
            event_type: Type of event (e.g., "game_start", "dice_rolled")
            **kwargs: Additional event data
        """
        event = {
            "event_id": self.event_count,
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            **kwargs,
        }

        with open(self.log_file, "a") as f:
            f.write(json.dumps(event) + "\n")

        self.event_count += 1

    def attach(self, game: Game) -> None:
        """Start logging every event the game emits."""
        self.detach()
        self._game = game
        self._unsubscribe = game.events.subscribe(self.on_event)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = None
        self._game = None

    def on_event(self, event: GameEvent) -> None:
        """Event bus subscriber: enrich the event with names and write it."""
        record = dict(event.details)
        game = self._game

        if event.player_id is not None:
            record["player_id"] = event.player_id
        if game is not None:
            record.setdefault("turn_number", game.turn_number)
            if event.player_id is not None:
                record["player_name"] = game.get_player(event.player_id).name
            if event.event_type == EventType.RENT_PAID:
                record["owner_name"] = game.get_player(record["owner"]).name
            if event.event_type == EventType.GAME_END:
                record["final_standings"] = self._final_standings(game)

        self.log_event(event.event_type.value, **record)

    def _final_standings(self, game: Game) -> list:
        return [
            {
                "player_id": p.player_id,
                "player_name": p.name,
                "money": p.money,
                "total_assets": p.total_assets(game.board),
                "is_bankrupt": p.is_bankrupt,
            }
            for p in game.players
        ]

    def log_turn_snapshot(self, game: Game) -> None:
        """Log the state of every player, e.g. at the start of a turn."""
        for player in game.players:
            tile = game.board.get_player_tile(player)
            self.log_event(
                "player_state",
                turn_number=game.turn_number,
                player_id=player.player_id,
                player_name=player.name,
                money=player.money,
                position=player.position,
                position_name=tile.name if tile is not None else None,
                properties=[t.name for t in game.controller.get_player_properties(player)],
                is_bankrupt=player.is_bankrupt,
                total_assets=player.total_assets(game.board),
            )
