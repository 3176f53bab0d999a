"""Shared test fixtures for the turn engine tests."""

from typing import Iterable, List, Tuple

import pytest

from boardsim import GameConfig, Player, create_game
from boardsim.board import Board
from boardsim.events import EventBus
from boardsim.landing import LandingResolver
from boardsim.movement import MovementService
from boardsim.player import PlayerAccount


class ScriptedRng:
    """Random source that returns queued die faces in order."""

    def __init__(self, rolls: Iterable[Tuple[int, int]] = ()):
        self.values: List[int] = []
        self.queue(*rolls)

    def queue(self, *rolls: Tuple[int, int]) -> None:
        for die1, die2 in rolls:
            self.values.extend([die1, die2])

    def randint(self, a: int, b: int) -> int:
        if not self.values:
            raise AssertionError("ScriptedRng ran out of queued dice")
        return self.values.pop(0)


@pytest.fixture
def game_config():
    """Default game configuration with fixed seed for reproducibility."""
    return GameConfig(seed=42)


@pytest.fixture
def two_players():
    """Two interactive test players."""
    return [Player(0, "Alice"), Player(1, "Bob")]


@pytest.fixture
def rng():
    """Scripted dice; queue rolls with `rng.queue((3, 4), ...)`."""
    return ScriptedRng()


@pytest.fixture
def basic_game(game_config, two_players, rng):
    """Two interactive players and scripted dice, not yet started."""
    return create_game(game_config, two_players, rng=rng)


@pytest.fixture
def board():
    return Board()


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def alice():
    return PlayerAccount(0, "Alice", 1500)


@pytest.fixture
def bob():
    return PlayerAccount(1, "Bob", 1500)


@pytest.fixture
def movement(board, events, alice, bob):
    """Movement service for Alice and Bob on the default board."""
    landing = LandingResolver({alice.player_id: alice, bob.player_id: bob}, events)
    return MovementService(board, events, landing, pass_start_bonus=200)
