"""
Player movement around the board.

A move has exactly two rule-relevant moments: validation when it starts and
commit when it ends. The commit (pass-start bonus, new position, visual
sync, landing) is shared by immediate and animated moves, so both produce
identical game state.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from boardsim.board import new_position, passed_start
from boardsim.events import EventBus, EventType
from boardsim.interfaces import BoardProvider, NullVisualSync, VisualSync
from boardsim.landing import LandingOutcome, LandingResolver
from boardsim.player import PlayerAccount

logger = logging.getLogger(__name__)


@dataclass
class MoveResult:
    """Committed outcome of one move."""

    player_id: int
    start: int
    destination: int
    steps: int
    passed_start: bool
    outcome: Optional[LandingOutcome]


class AnimatedMove:
    """
    A move split into per-tile steps for presentation.

    Each `tick()` advances the displayed position by one tile. Nothing about
    the game changes until the final tick, which commits the whole move.
    """

    def __init__(self, service: "MovementService", player: PlayerAccount, steps: int):
        self._service = service
        self.player = player
        self.steps = steps
        self.start_position = player.position
        self.steps_taken = 0
        self.display_position = player.position
        self.result: Optional[MoveResult] = None
        self._callbacks: List[Callable[["AnimatedMove"], None]] = []

    @property
    def done(self) -> bool:
        return self.result is not None

    @property
    def remaining_steps(self) -> int:
        return self.steps - self.steps_taken

    def tick(self) -> int:
        """Advance one tile and return the position to display."""
        if self.done:
            return self.display_position

        if self.steps_taken < self.steps:
            self.steps_taken += 1
            self.display_position = self._service.position_after(self.start_position, self.steps_taken)

        if self.steps_taken >= self.steps:
            self._complete()
        return self.display_position

    def progress(self) -> Iterator[int]:
        """Tick to completion, yielding each displayed position."""
        while not self.done:
            yield self.tick()

    def run_to_completion(self) -> MoveResult:
        for _ in self.progress():
            pass
        return self.result

    def add_done_callback(self, callback: Callable[["AnimatedMove"], None]) -> None:
        """Call `callback(move)` once the move has committed."""
        if self.done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def _complete(self) -> None:
        self.player.is_moving = False
        self.result = self._service._commit(self.player, self.steps)
        self.display_position = self.player.position
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)


class MovementService:
    """Executes moves and relocations for all players."""

    def __init__(
        self,
        board: BoardProvider,
        events: EventBus,
        landing: LandingResolver,
        visual_sync: Optional[VisualSync] = None,
        pass_start_bonus: int = 200,
        jail_index: int = 10,
    ):
        self.board = board
        self.events = events
        self.landing = landing
        self.visual_sync = visual_sync if visual_sync is not None else NullVisualSync()
        self.pass_start_bonus = pass_start_bonus
        self.jail_index = jail_index

    def position_after(self, position: int, steps: int) -> int:
        return new_position(position, steps, self.board.board_size)

    def _is_valid_position(self, position: int) -> bool:
        return self.board.get_tile(position) is not None

    def _can_move(self, player: PlayerAccount, steps: int) -> bool:
        if player is None:
            logger.warning("Move requested without a player")
            return False
        if steps < 0:
            logger.warning(f"{player.name}: cannot move {steps} steps")
            return False
        if not self._is_valid_position(player.position):
            logger.warning(f"{player.name}: invalid current position {player.position}")
            return False
        if player.is_moving:
            logger.warning(f"{player.name}: move rejected, another move is in progress")
            return False
        return True

    def move(self, player: PlayerAccount, steps: int) -> bool:
        """
        Move a player forward immediately.
        Returns True if successful, False if the move was rejected.
        """
        return self.execute_move(player, steps) is not None

    def execute_move(self, player: PlayerAccount, steps: int) -> Optional[MoveResult]:
        """Move a player forward immediately and return what happened."""
        if not self._can_move(player, steps):
            return None
        return self._commit(player, steps)

    def begin_move(self, player: PlayerAccount, steps: int) -> Optional[AnimatedMove]:
        """
        Start an animated move. The player is locked until the move's last
        tick; returns None if the move was rejected.
        """
        if not self._can_move(player, steps):
            return None
        player.is_moving = True
        return AnimatedMove(self, player, steps)

    def move_to(self, player: PlayerAccount, position: int, resolve_landing: bool = False) -> bool:
        """
        Relocate a player directly, without passing start.
        Landing is only resolved when asked for.
        """
        if not self._is_valid_position(position):
            logger.warning(f"{player.name}: cannot relocate to invalid position {position}")
            return False
        if player.is_moving:
            logger.warning(f"{player.name}: relocation rejected, a move is in progress")
            return False

        old_position = player.position
        player.position = position
        self.visual_sync.update_visual_position(player)
        self.events.emit(
            EventType.PLAYER_MOVED,
            player_id=player.player_id,
            **{"from": old_position, "to": position, "direct": True},
        )
        logger.info(f"{player.name} relocated to position {position}")

        if resolve_landing:
            self._resolve_landing(player)
        return True

    def _commit(self, player: PlayerAccount, steps: int) -> MoveResult:
        start = player.position
        destination = self.position_after(start, steps)
        passed = passed_start(start, destination)

        if passed:
            player.receive_money(self.pass_start_bonus)
            self.events.emit(
                EventType.PASS_START,
                player_id=player.player_id,
                amount=self.pass_start_bonus,
                new_balance=player.money,
            )

        player.position = destination
        self.visual_sync.update_visual_position(player)
        self.events.emit(
            EventType.PLAYER_MOVED,
            player_id=player.player_id,
            **{"from": start, "to": destination, "spaces": steps},
        )
        logger.info(f"{player.name} moved {steps} steps to position {destination}")

        outcome = self._resolve_landing(player)
        return MoveResult(player.player_id, start, destination, steps, passed, outcome)

    def _resolve_landing(self, player: PlayerAccount) -> Optional[LandingOutcome]:
        tile = self.board.get_player_tile(player)
        if tile is None:
            return None
        outcome = self.landing.on_landed(tile, player)
        if outcome == LandingOutcome.GO_TO_JAIL:
            self.move_to(player, self.jail_index)
        return outcome
