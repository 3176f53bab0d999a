"""
Environment-driven engine defaults using pydantic-settings.

Environment variables (prefix: BOARDSIM_):
    BOARDSIM_BOARD_SIZE         - Number of positions on the ring (default: 40)
    BOARDSIM_STARTING_MONEY     - Money each player starts with (default: 1500)
    BOARDSIM_PASS_START_BONUS   - Bonus for passing the start tile (default: 200)
    BOARDSIM_MAX_DOUBLE_STREAK  - Doubles in a row that send a player to jail (default: 3)
    BOARDSIM_DICE_MIN / _MAX    - Inclusive die face range (default: 1..6)
    BOARDSIM_JAIL_INDEX         - Position of the jail tile (default: 10)
    BOARDSIM_THINK_DELAY        - Automated player delay before rolling, seconds
    BOARDSIM_POST_MOVE_DELAY    - Automated player delay before buying, seconds
    BOARDSIM_STEP_DELAY         - Pause between animated board steps, seconds
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Defaults for new games, overridable from the environment or a .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="BOARDSIM_",
    )

    board_size: int = Field(default=40, gt=0, description="Number of positions on the board ring.")
    starting_money: int = Field(default=1500, ge=0, description="Money each player starts with.")
    pass_start_bonus: int = Field(default=200, ge=0, description="Bonus credited when a move passes start.")
    max_double_streak: int = Field(default=3, gt=0, description="Consecutive doubles forcing jail.")
    dice_min: int = Field(default=1, ge=1)
    dice_max: int = Field(default=6, ge=1)
    jail_index: int = Field(default=10, ge=0)
    seed: Optional[int] = Field(default=None, description="RNG seed for reproducible games.")
    time_limit_turns: Optional[int] = Field(default=None, gt=0)

    think_delay: float = Field(default=0.5, ge=0)
    post_move_delay: float = Field(default=0.3, ge=0)
    step_delay: float = Field(default=0.2, ge=0)

    @model_validator(mode="after")
    def check_ranges(self) -> "EngineSettings":
        """Reject dice ranges and jail positions the board cannot honor."""
        if self.dice_min > self.dice_max:
            raise ValueError(f"dice_min ({self.dice_min}) must not exceed dice_max ({self.dice_max})")
        if self.jail_index >= self.board_size:
            raise ValueError(f"jail_index ({self.jail_index}) must be below board_size ({self.board_size})")
        return self


@lru_cache
def get_engine_settings() -> EngineSettings:
    """Return cached engine settings instance."""
    return EngineSettings()
