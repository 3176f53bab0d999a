"""
Board Simulation Turn Engine

A deterministic, seedable turn engine for ring-board economy games: dice,
movement, property trading, bankruptcy and win conditions.
"""

from .agents import AutoPlayer
from .board import Board
from .config import GameConfig
from .dice import DiceEngine, DiceRoll
from .events import EventBus, EventLog, EventType, GameEvent
from .exceptions import BoardConfigurationError, BoardSimError, ConfigurationError, InvalidPlayerError
from .game import Game, create_game
from .player import Player, PlayerAccount
from .tiles import PropertyTile, Tile, TileKind
from .turns import GameState, ImmediateDriver, TurnController

__all__ = [
    "AutoPlayer",
    "Board",
    "GameConfig",
    "DiceEngine",
    "DiceRoll",
    "EventBus",
    "EventLog",
    "EventType",
    "GameEvent",
    "BoardConfigurationError",
    "BoardSimError",
    "ConfigurationError",
    "InvalidPlayerError",
    "Game",
    "create_game",
    "Player",
    "PlayerAccount",
    "PropertyTile",
    "Tile",
    "TileKind",
    "GameState",
    "ImmediateDriver",
    "TurnController",
]
