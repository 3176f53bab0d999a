"""
Composition root: builds and owns every engine service for one game.
"""

import logging
import random
from typing import List, Optional, Sequence

from boardsim.board import Board
from boardsim.config import GameConfig
from boardsim.dice import DiceEngine, RandomSource
from boardsim.events import EventBus, EventLog
from boardsim.exceptions import ConfigurationError, InvalidPlayerError
from boardsim.interfaces import VisualSync
from boardsim.landing import LandingResolver
from boardsim.movement import MovementService
from boardsim.player import Player, PlayerAccount
from boardsim.tiles import AnyTile
from boardsim.turns import GameState, ImmediateDriver, TurnController, TurnDriver

logger = logging.getLogger(__name__)


class Game:
    """
    A fully wired game.

    Services are created by `create_game` and live until `close()`. All rule
    changes go through `controller` (turn flow and trading) and `movement`.
    """

    def __init__(
        self,
        config: GameConfig,
        board: Board,
        players: List[PlayerAccount],
        events: EventBus,
        dice: DiceEngine,
        landing: LandingResolver,
        movement: MovementService,
        controller: TurnController,
    ):
        self.config = config
        self.board = board
        self.players = players
        self.events = events
        self.dice = dice
        self.landing = landing
        self.movement = movement
        self.controller = controller
        self.closed = False

    @property
    def state(self) -> GameState:
        return self.controller.state

    @property
    def event_log(self) -> EventLog:
        return self.events.event_log

    @property
    def current_player(self) -> Optional[PlayerAccount]:
        return self.controller.current_player

    @property
    def winner(self) -> Optional[PlayerAccount]:
        return self.controller.winner

    @property
    def turn_number(self) -> int:
        return self.controller.turn_number

    def get_player(self, player_id: int) -> PlayerAccount:
        """Get a player by id."""
        try:
            return self.controller.players_by_id[player_id]
        except KeyError:
            raise InvalidPlayerError(f"Unknown player id {player_id}") from None

    def start(self) -> bool:
        """Begin play. Returns False if the game was already started or closed."""
        if self.closed:
            logger.warning("Cannot start a closed game")
            return False
        if (
            isinstance(self.controller.driver, ImmediateDriver)
            and self.config.time_limit_turns is None
            and all(p.is_automated for p in self.players)
        ):
            # Played synchronously, such a game could run forever inside start()
            raise ConfigurationError("A headless game of only automated players needs time_limit_turns")
        return self.controller.begin()

    def close(self) -> None:
        """Detach all subscribers. The game cannot be started afterwards."""
        if self.closed:
            return
        self.events.clear_subscribers()
        self.closed = True

    def __enter__(self) -> "Game":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _build_accounts(config: GameConfig, players: Sequence[Player]) -> List[PlayerAccount]:
    if len(players) < 1:
        raise InvalidPlayerError("Game requires at least 1 player")

    seen = set()
    accounts = []
    for player in players:
        if player.player_id in seen:
            raise InvalidPlayerError(f"Duplicate player id {player.player_id}")
        seen.add(player.player_id)
        accounts.append(
            PlayerAccount(player.player_id, player.name, config.starting_money, is_automated=player.automated)
        )

    if config.primary_player_id is not None and config.primary_player_id not in seen:
        raise InvalidPlayerError(f"Primary player {config.primary_player_id} is not in the roster")
    return accounts


def create_game(
    config: Optional[GameConfig] = None,
    players: Optional[Sequence[Player]] = None,
    *,
    tiles: Optional[Sequence[AnyTile]] = None,
    visual_sync: Optional[VisualSync] = None,
    rng: Optional[RandomSource] = None,
    driver: Optional[TurnDriver] = None,
) -> Game:
    """
    Create a new game with the specified configuration and players.

    Args:
        config: Game configuration (defaults to `GameConfig()`)
        players: Roster in turn order (defaults to two interactive players)
        tiles: Pre-built tile registry; the default board is built otherwise
        visual_sync: Presentation hook for position changes
        rng: Random source for the dice (defaults to `random.Random(config.seed)`)
        driver: Runner for automated turns (defaults to `ImmediateDriver`)

    Returns:
        A game in the INITIALIZING state; call `start()` to begin.
    """
    config = config if config is not None else GameConfig()
    if players is None:
        players = [Player(0, "Player 1"), Player(1, "Player 2")]

    accounts = _build_accounts(config, players)

    board = Board(config.board_size, tiles, jail_index=config.jail_index)
    events = EventBus()
    dice = DiceEngine(
        rng if rng is not None else random.Random(config.seed),
        min_value=config.dice_min,
        max_value=config.dice_max,
        max_double_streak=config.max_double_streak,
        events=events,
    )
    players_by_id = {account.player_id: account for account in accounts}
    landing = LandingResolver(players_by_id, events)
    movement = MovementService(board, events, landing, visual_sync, config.pass_start_bonus, config.jail_index)
    controller = TurnController(
        config,
        board,
        accounts,
        dice,
        movement,
        events,
        driver=driver if driver is not None else ImmediateDriver(),
    )

    for account in accounts:
        movement.visual_sync.update_visual_position(account)

    return Game(config, board, accounts, events, dice, landing, movement, controller)
