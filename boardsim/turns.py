"""
Turn and game flow.

`TurnController` is the only writer of the game state, the current-player
index and the dice streak. Automated turns are handed to a turn driver:
`ImmediateDriver` plays them synchronously for headless games, while
`boardsim.runner.GameRunner` paces them on an asyncio loop.
"""

import functools
import logging
from collections import deque
from contextlib import contextmanager
from enum import Enum
from typing import ContextManager, Deque, Dict, Iterator, List, Optional, Protocol, Tuple

from boardsim import transactions
from boardsim.agents import AutoPlayer
from boardsim.board import Board
from boardsim.config import GameConfig
from boardsim.dice import DiceEngine, DiceRoll
from boardsim.events import EventBus, EventType
from boardsim.movement import AnimatedMove, MovementService
from boardsim.player import PlayerAccount
from boardsim.tiles import PropertyTile

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Lifecycle of a game."""

    INITIALIZING = "initializing"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class TurnDriver(Protocol):
    """Runs the turns of automated players."""

    def schedule_automated_turn(self, controller: "TurnController", player: PlayerAccount) -> None: ...

    def batch(self) -> ContextManager[None]: ...


class ImmediateDriver:
    """
    Plays automated turns synchronously, without delays or animation.

    Scheduled turns are queued and only played once the outermost controller
    call has finished, so a chain of automated players never recurses and
    win conditions are settled before the next turn begins.
    """

    def __init__(self, policy: Optional[AutoPlayer] = None):
        self.policy = policy if policy is not None else AutoPlayer()
        self._queue: Deque[Tuple["TurnController", PlayerAccount]] = deque()
        self._depth = 0

    @contextmanager
    def batch(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                self._drain()

    def schedule_automated_turn(self, controller: "TurnController", player: PlayerAccount) -> None:
        self._queue.append((controller, player))
        if self._depth == 0:
            self._drain()

    def _drain(self) -> None:
        self._depth += 1
        try:
            while self._queue:
                controller, player = self._queue.popleft()
                self._play(controller, player)
        finally:
            self._depth -= 1

    def _play(self, controller: "TurnController", player: PlayerAccount) -> None:
        turn = controller.turn_number
        if not controller.is_turn_of(player, turn):
            return

        roll = controller.roll_and_move()
        if not controller.is_turn_of(player, turn):
            return
        if roll is None:
            controller.end_turn()
            return

        self.policy.purchase_phase(controller, player)
        if controller.is_turn_of(player, turn):
            controller.end_turn()


def _batched(method):
    """Defer automated turns scheduled during `method` until it returns."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.driver.batch():
            return method(self, *args, **kwargs)

    return wrapper


class TurnController:
    """
    Orchestrates turns: roll, move, landing, bankruptcy, rotation and the end
    of the game.
    """

    def __init__(
        self,
        config: GameConfig,
        board: Board,
        players: List[PlayerAccount],
        dice: DiceEngine,
        movement: MovementService,
        events: EventBus,
        driver: Optional[TurnDriver] = None,
    ):
        self.config = config
        self.board = board
        self.players = players
        self.players_by_id: Dict[int, PlayerAccount] = {p.player_id: p for p in players}
        self.dice = dice
        self.movement = movement
        self.events = events
        self.driver: TurnDriver = driver if driver is not None else ImmediateDriver()

        self.state = GameState.INITIALIZING
        self.current_player_index = 0
        self.turn_number = 0
        self.winner: Optional[PlayerAccount] = None
        self.active_move: Optional[AnimatedMove] = None
        self.last_roll: Optional[DiceRoll] = None
        self._announced_bankrupt: set[int] = set()
        self._pending_end_turn = False

    # === Queries ===

    @property
    def current_player(self) -> Optional[PlayerAccount]:
        if 0 <= self.current_player_index < len(self.players):
            return self.players[self.current_player_index]
        return None

    @property
    def primary_player(self) -> Optional[PlayerAccount]:
        if self.config.primary_player_id is None:
            return None
        return self.players_by_id.get(self.config.primary_player_id)

    @property
    def can_roll_again(self) -> bool:
        """Whether the current player's last roll was a double that keeps the turn going."""
        return self.dice.can_roll_again

    def get_active_players(self) -> List[PlayerAccount]:
        """Get all non-bankrupt players in turn order."""
        return [p for p in self.players if not p.is_bankrupt]

    def is_turn_of(self, player: PlayerAccount, turn_number: int) -> bool:
        """Whether `player` is still taking turn `turn_number` in a running game."""
        return (
            self.state == GameState.PLAYING
            and self.current_player is player
            and self.turn_number == turn_number
        )

    # === Lifecycle ===

    @_batched
    def begin(self) -> bool:
        """Start play with the first player in the roster."""
        if self.state != GameState.INITIALIZING:
            logger.warning(f"Cannot begin a game in state {self.state.value}")
            return False
        if not self.players:
            logger.warning("Cannot begin a game without players")
            return False

        self.current_player_index = 0
        self.state = GameState.PLAYING
        self.events.emit(
            EventType.GAME_START,
            players=[p.name for p in self.players],
            starting_money=self.config.starting_money,
            seed=self.config.seed,
        )
        logger.info(f"Game started with {len(self.players)} players")
        self.start_turn()
        return True

    def pause(self) -> bool:
        if self.state != GameState.PLAYING:
            return False
        self.state = GameState.PAUSED
        self.events.emit(EventType.GAME_PAUSED)
        logger.info("Game paused")
        return True

    @_batched
    def resume(self) -> bool:
        if self.state != GameState.PAUSED:
            return False
        self.state = GameState.PLAYING
        self.events.emit(EventType.GAME_RESUMED)
        logger.info("Game resumed")

        if self._pending_end_turn:
            # A bankruptcy settled while paused still owes its forced end of turn
            self._pending_end_turn = False
            self.end_turn()
            return True

        # An automated turn that was skipped while paused has to be retried
        player = self.current_player
        if player is not None and player.is_automated and self.last_roll is None:
            self.driver.schedule_automated_turn(self, player)
        return True

    # === Turn flow ===

    @_batched
    def start_turn(self) -> None:
        """Begin the current player's turn-chain, skipping bankrupt players."""
        if self.state != GameState.PLAYING:
            return

        player = self.current_player
        if player is None or player.is_bankrupt:
            if not self._rotate():
                self.end_game()
                return
            player = self.current_player

        self.dice.reset()
        self.last_roll = None
        self.events.emit(EventType.TURN_START, player_id=player.player_id, turn=self.turn_number)
        logger.info(f"Turn {self.turn_number}: {player.name} to act")

        if player.is_automated:
            self.driver.schedule_automated_turn(self, player)

    @_batched
    def roll_and_move(self, animated: bool = False) -> Optional[DiceRoll]:
        """
        Roll for the current player and move them.

        On a triple double the player goes straight to jail, without landing
        effects, and the turn ends. Otherwise the player moves and the
        destination's landing effect is applied once the move settles. With
        `animated=True` the move is left in `active_move` for the caller to
        tick.

        Returns:
            The roll, or None if rolling is not allowed right now.
        """
        if self.state != GameState.PLAYING:
            logger.warning(f"Cannot roll while game is {self.state.value}")
            return None

        player = self.current_player
        if player is None or player.is_bankrupt:
            logger.warning("Current player is missing or bankrupt, cannot roll")
            return None
        if player.is_moving:
            logger.warning(f"{player.name} is still moving, cannot roll")
            return None

        roll = self.dice.roll()
        self.last_roll = roll

        if roll.is_triple_double:
            logger.info(f"{player.name} rolled a triple double and goes to jail")
            self.movement.move_to(player, self.board.jail_index)
            self.end_turn()
            return roll

        if animated:
            move = self.movement.begin_move(player, roll.total)
            if move is None:
                return roll
            self.active_move = move
            move.add_done_callback(self._on_move_settled)
            return roll

        if self.movement.execute_move(player, roll.total) is not None:
            self._after_landing(player)
        return roll

    def _on_move_settled(self, move: AnimatedMove) -> None:
        if self.active_move is move:
            self.active_move = None
        with self.driver.batch():
            self._after_landing(move.player)

    def _after_landing(self, player: PlayerAccount) -> None:
        self.check_bankruptcy(player)

    @_batched
    def end_turn(self) -> bool:
        """End the current turn-chain and hand the turn to the next solvent player."""
        if self.state != GameState.PLAYING:
            return False

        player = self.current_player
        if player is not None and player.is_moving:
            logger.warning(f"{player.name} is still moving, cannot end the turn")
            return False
        if player is not None:
            self.events.emit(EventType.TURN_END, player_id=player.player_id, turn=self.turn_number)

        self.dice.reset()
        self.last_roll = None

        if not self._rotate():
            self.end_game()
            return True

        self.turn_number += 1
        if self.config.time_limit_turns and self.turn_number >= self.config.time_limit_turns:
            logger.info(f"Turn limit {self.config.time_limit_turns} reached")
            self.end_game()
            return True

        self.start_turn()
        return True

    def _rotate(self) -> bool:
        """Advance to the next non-bankrupt player. False if nobody is left."""
        count = len(self.players)
        for _ in range(count):
            self.current_player_index = (self.current_player_index + 1) % count
            if not self.players[self.current_player_index].is_bankrupt:
                return True
        return False

    # === Bankruptcy and winning ===

    @_batched
    def check_bankruptcy(self, player: Optional[PlayerAccount]) -> bool:
        """
        Handle a player that may have gone bankrupt.

        Announces the bankruptcy, ends the player's turn if it is theirs, then
        re-evaluates how the game stands.

        Returns:
            True if the player is bankrupt.
        """
        if player is None or not player.is_bankrupt:
            return False

        if player.player_id not in self._announced_bankrupt:
            self._announced_bankrupt.add(player.player_id)
            self.events.emit(EventType.PLAYER_BANKRUPT, player_id=player.player_id, money=player.money)
            logger.info(f"{player.name} went bankrupt")

        if player is self.current_player:
            if self.state == GameState.PAUSED:
                self._pending_end_turn = True
            else:
                self.end_turn()

        self._check_primary_player_outcome()
        self._check_last_player_standing()
        return True

    def _check_primary_player_outcome(self) -> None:
        primary = self.primary_player
        if primary is None:
            return

        if primary.is_bankrupt:
            logger.info(f"Primary player {primary.name} is bankrupt, game lost")
            self.end_game()
            return

        if all(p.is_bankrupt for p in self.players if p is not primary):
            logger.info(f"All opponents of {primary.name} are bankrupt, game won")
            self.end_game(primary)

    def _check_last_player_standing(self) -> None:
        active = self.get_active_players()
        if len(active) == 1:
            self.end_game(active[0])

    def end_game(self, winner: Optional[PlayerAccount] = None) -> bool:
        """
        Finish the game. Only the first call has any effect.

        Without an explicit winner the solvent player with the most assets
        wins; ties go to the earlier player in turn order.
        """
        if self.state == GameState.GAME_OVER:
            return False

        if winner is None:
            winner = self._richest_player()

        self.state = GameState.GAME_OVER
        self.winner = winner
        self.events.emit(
            EventType.GAME_END,
            player_id=winner.player_id if winner else None,
            winner=winner.name if winner else None,
            turn=self.turn_number,
            total_assets=winner.total_assets(self.board) if winner else None,
        )
        logger.info(f"Game over, winner: {winner.name if winner else 'none'}")
        return True

    def _richest_player(self) -> Optional[PlayerAccount]:
        best: Optional[PlayerAccount] = None
        best_assets = 0
        for player in self.get_active_players():
            assets = player.total_assets(self.board)
            if best is None or assets > best_assets:
                best, best_assets = player, assets
        return best

    # === Property trading ===

    def _resolve_player(self, player: Optional[PlayerAccount]) -> Optional[PlayerAccount]:
        return player if player is not None else self.current_player

    @_batched
    def buy_property(self, player: Optional[PlayerAccount] = None, index: Optional[int] = None) -> bool:
        """
        Player buys the property at `index` (default: where they stand).
        Returns True if successful, False otherwise.
        """
        player = self._resolve_player(player)
        if player is None or self.state == GameState.GAME_OVER:
            logger.warning("No player can buy right now")
            return False

        if index is None:
            index = player.position
        tile = self.board.get_property_tile(index)
        if tile is None:
            logger.warning(f"Tile {index} is not a property, {player.name} cannot buy it")
            return False

        if not transactions.purchase(tile, player):
            return False

        self.events.emit(
            EventType.PROPERTY_PURCHASED,
            player_id=player.player_id,
            property=tile.name,
            position=tile.index,
            price=tile.price,
            new_balance=player.money,
        )
        self.check_bankruptcy(player)
        return True

    def sell_property(
        self,
        tile: PropertyTile,
        player: Optional[PlayerAccount] = None,
        price: Optional[int] = None,
    ) -> bool:
        """
        Player sells a property back to the bank (default: half its price).
        Returns True if successful, False otherwise.
        """
        player = self._resolve_player(player)
        if player is None or tile is None:
            logger.warning("Sale needs both a player and a property")
            return False

        received = transactions.sell(tile, player, price)
        if received is None:
            return False

        self.events.emit(
            EventType.PROPERTY_SOLD,
            player_id=player.player_id,
            property=tile.name,
            position=tile.index,
            price=received,
            new_balance=player.money,
        )
        return True

    @_batched
    def pay_rent(self, player: Optional[PlayerAccount] = None, index: Optional[int] = None) -> bool:
        """
        Player pays rent for the property at `index` (default: where they stand).
        Returns True if successful, False otherwise.
        """
        player = self._resolve_player(player)
        if player is None:
            return False

        if index is None:
            index = player.position
        tile = self.board.get_property_tile(index)
        if tile is None:
            logger.warning(f"Tile {index} is not a property, no rent due")
            return False

        owner = self.players_by_id.get(tile.owner_id) if tile.owner_id is not None else None
        if not transactions.pay_rent(tile, player, owner):
            return False

        if owner is not player:
            rent = transactions.calculate_rent(tile)
            self.events.emit(
                EventType.RENT_PAID,
                player_id=player.player_id,
                owner=owner.player_id,
                property=tile.name,
                position=tile.index,
                amount=rent,
                forced=False,
                payer_balance=player.money,
                owner_balance=owner.money,
            )
        self.check_bankruptcy(player)
        return True

    def get_purchasable_property(self, player: Optional[PlayerAccount] = None) -> Optional[PropertyTile]:
        """The unowned property the player stands on, if any."""
        player = self._resolve_player(player)
        if player is None:
            return None
        tile = self.board.get_property_tile(player.position)
        if tile is not None and not tile.is_owned:
            return tile
        return None

    def get_player_properties(self, player: Optional[PlayerAccount] = None) -> List[PropertyTile]:
        """Properties owned by the player, in board order."""
        player = self._resolve_player(player)
        if player is None:
            return []
        return [t for t in self.board.property_tiles() if t.index in player.properties]
