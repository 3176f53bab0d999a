"""
Dice rolling with consecutive-double tracking.
"""

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol

from boardsim.events import EventBus, EventType

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


@dataclass(frozen=True)
class DiceRoll:
    """Result of one roll of two dice."""

    die1: int
    die2: int
    is_triple_double: bool = False

    @property
    def total(self) -> int:
        return self.die1 + self.die2

    @property
    def is_double(self) -> bool:
        return self.die1 == self.die2


class DiceEngine:
    """
    Rolls two dice and tracks the current player's streak of doubles.

    The streak belongs to one turn-chain: it is reset by a non-double, by
    reaching the triple-double threshold, and by `reset()` between players.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        min_value: int = 1,
        max_value: int = 6,
        max_double_streak: int = 3,
        events: Optional[EventBus] = None,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.min_value = min_value
        self.max_value = max_value
        self.max_double_streak = max_double_streak
        self.events = events
        self._streak = 0

    @property
    def streak(self) -> int:
        """Number of consecutive doubles rolled in the current turn-chain."""
        return self._streak

    @property
    def can_roll_again(self) -> bool:
        return self._streak > 0

    def roll(self) -> DiceRoll:
        """Roll both dice and update the doubles streak."""
        die1 = self.rng.randint(self.min_value, self.max_value)
        die2 = self.rng.randint(self.min_value, self.max_value)
        is_triple_double = False

        if die1 == die2:
            self._streak += 1
            if self._streak >= self.max_double_streak:
                is_triple_double = True
                self._streak = 0
                logger.info(f"Rolled {self.max_double_streak} doubles in a row")
                self._emit(EventType.TRIPLE_DOUBLE)
        else:
            self._streak = 0

        result = DiceRoll(die1, die2, is_triple_double)
        self._emit(
            EventType.DICE_ROLLED,
            die1=die1,
            die2=die2,
            total=result.total,
            is_double=result.is_double,
        )
        return result

    def reset(self) -> None:
        """Clear the doubles streak."""
        self._streak = 0

    def _emit(self, event_type: EventType, **details) -> None:
        if self.events is not None:
            self.events.emit(event_type, **details)
