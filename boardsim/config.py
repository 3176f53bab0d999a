"""
Game configuration settings.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Optional

from boardsim.exceptions import ConfigurationError

if TYPE_CHECKING:
    from boardsim.settings import EngineSettings


@dataclass
class GameConfig:
    """Configuration for a game, fixed at initialization."""

    board_size: int = 40
    starting_money: int = 1500
    pass_start_bonus: int = 200

    max_double_streak: int = 3
    dice_min: int = 1
    dice_max: int = 6

    jail_index: int = 10

    # Player whose fate decides the game (the interactive player in a
    # player-vs-AI setup). None disables the primary-player rules.
    primary_player_id: Optional[int] = None

    seed: Optional[int] = None
    time_limit_turns: Optional[int] = None

    # Pacing for automated players and animated moves (seconds)
    think_delay: float = 0.5
    post_move_delay: float = 0.3
    step_delay: float = 0.2

    def __post_init__(self) -> None:
        if self.board_size <= 0:
            raise ConfigurationError(f"board_size must be positive, got {self.board_size}")
        if not 0 <= self.jail_index < self.board_size:
            raise ConfigurationError(
                f"jail_index {self.jail_index} is outside the board (size {self.board_size})"
            )
        if self.dice_min < 1:
            raise ConfigurationError(f"dice_min must be at least 1, got {self.dice_min}")
        if self.dice_min > self.dice_max:
            raise ConfigurationError(f"dice range {self.dice_min}..{self.dice_max} is empty")
        if self.max_double_streak <= 0:
            raise ConfigurationError("max_double_streak must be at least 1")
        if self.starting_money < 0 or self.pass_start_bonus < 0:
            raise ConfigurationError("money amounts must not be negative")
        if self.time_limit_turns is not None and self.time_limit_turns <= 0:
            raise ConfigurationError("time_limit_turns must be positive when set")
        if min(self.think_delay, self.post_move_delay, self.step_delay) < 0:
            raise ConfigurationError("delays must not be negative")

    @classmethod
    def from_settings(cls, settings: "EngineSettings", **overrides) -> "GameConfig":
        """Build a config from environment settings, applying explicit overrides."""
        known = {f.name for f in fields(cls)}
        values = {name: value for name, value in settings.model_dump().items() if name in known}
        values.update(overrides)
        return cls(**values)
