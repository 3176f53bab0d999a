"""
Game events: the engine's notification channel and event log.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    GAME_PAUSED = "game_paused"
    GAME_RESUMED = "game_resumed"
    GAME_END = "game_end"

    TURN_START = "turn_start"
    TURN_END = "turn_end"

    DICE_ROLLED = "dice_rolled"
    TRIPLE_DOUBLE = "triple_double"

    PLAYER_MOVED = "player_moved"
    PASS_START = "pass_start"
    LANDED = "landed"

    PROPERTY_PURCHASED = "property_purchased"
    PROPERTY_SOLD = "property_sold"
    RENT_PAID = "rent_paid"

    PLAYER_BANKRUPT = "player_bankrupt"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        player_str = f"P{self.player_id}" if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


Subscriber = Callable[[GameEvent], None]


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def append(self, event: GameEvent) -> None:
        self.events.append(event)

    def get_events(self) -> List[GameEvent]:
        """Get all logged events."""
        return self.events.copy()

    def get_recent_events(self, count: int = 10) -> List[GameEvent]:
        """Get the most recent N events."""
        return self.events[-count:]

    def of_type(self, event_type: EventType) -> List[GameEvent]:
        """Get all logged events of one type, oldest first."""
        return [e for e in self.events if e.event_type == event_type]

    def clear(self) -> None:
        """Clear the event log."""
        self.events.clear()


class EventBus:
    """
    Fire-and-forget fan-out of game events to subscribers.

    Every emitted event is recorded in the event log, then delivered to each
    subscriber in subscription order. A failing subscriber is logged and
    skipped; the engine never depends on anyone listening.
    """

    def __init__(self, event_log: Optional[EventLog] = None):
        self.event_log = event_log if event_log is not None else EventLog()
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a subscriber. Returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def clear_subscribers(self) -> None:
        self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def emit(self, event_type: EventType, player_id: Optional[int] = None, **details: Any) -> GameEvent:
        """Record an event and deliver it to all current subscribers."""
        event = GameEvent(event_type, player_id, details)
        self.event_log.append(event)

        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                # Best-effort delivery: a broken listener must not stall the game
                logger.exception(f"Subscriber {callback!r} failed on {event_type.value}")

        return event
