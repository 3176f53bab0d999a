from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Dict, Optional, Set

from boardsim.agents import AutoPlayer
from boardsim.events import EventType, GameEvent
from boardsim.game import Game
from boardsim.movement import AnimatedMove
from boardsim.player import PlayerAccount
from boardsim.turns import GameState, TurnController

logger = logging.getLogger(__name__)


class GameRunner:
    """Owns a single Game and paces it on an asyncio loop.

    Responsibilities:
    - Drive automated turns with think and post-move delays
    - Tick animated moves, one board step per `step_delay`
    - Fan out engine events to subscribed queues for presentation clients
    """

    def __init__(
        self,
        game: Game,
        policy: Optional[AutoPlayer] = None,
        think_delay: Optional[float] = None,
        post_move_delay: Optional[float] = None,
        step_delay: Optional[float] = None,
    ):
        self.game = game
        self.policy = policy if policy is not None else AutoPlayer()
        config = game.config
        self.think_delay = config.think_delay if think_delay is None else think_delay
        self.post_move_delay = config.post_move_delay if post_move_delay is None else post_move_delay
        self.step_delay = config.step_delay if step_delay is None else step_delay

        self._turn_tasks: Dict[int, asyncio.Task] = {}
        self._clients: Set[asyncio.Queue] = set()
        self._finished = asyncio.Event()
        self._unsubscribe = game.events.subscribe(self._on_event)

        game.controller.driver = self

    @property
    def controller(self) -> TurnController:
        return self.game.controller

    # Turn driver interface

    def batch(self):
        return contextlib.nullcontext()

    def schedule_automated_turn(self, controller: TurnController, player: PlayerAccount) -> None:
        turn = controller.turn_number
        existing = self._turn_tasks.get(turn)
        if existing is not None and not existing.done():
            return
        task = asyncio.get_running_loop().create_task(self._automated_turn(player, turn))
        self._turn_tasks[turn] = task
        task.add_done_callback(lambda t, turn=turn: self._on_task_done(turn, t))

    def _on_task_done(self, turn: int, task: asyncio.Task) -> None:
        if self._turn_tasks.get(turn) is task:
            del self._turn_tasks[turn]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Automated turn {turn} failed: {exc!r}")

    # Lifecycle

    async def start(self) -> bool:
        """Begin the game on the running loop."""
        return self.game.start()

    async def wait(self, timeout: Optional[float] = None) -> Optional[PlayerAccount]:
        """Wait for the game to end and return the winner."""
        if self.controller.state != GameState.GAME_OVER:
            await asyncio.wait_for(self._finished.wait(), timeout)
        return self.controller.winner

    async def stop(self) -> None:
        """Cancel pending automated turns and detach from the game."""
        tasks = list(self._turn_tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._turn_tasks.clear()
        self._unsubscribe()

    # Subscription management for presentation clients
    def subscribe(self) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue()
        self._clients.add(q)
        return q

    def unsubscribe(self, q: asyncio.Queue) -> None:
        self._clients.discard(q)

    def _on_event(self, event: GameEvent) -> None:
        for q in list(self._clients):
            # Best-effort; don't block if client is slow
            try:
                q.put_nowait(event)
            except asyncio.QueueFull:
                self._clients.discard(q)
        if event.event_type == EventType.GAME_END:
            self._finished.set()

    # Pacing

    async def animate(self, move: AnimatedMove) -> None:
        """Tick an animated move to completion, pausing between steps."""
        while not move.done:
            await self._wait_while_paused()
            move.tick()
            if not move.done and self.step_delay > 0:
                await asyncio.sleep(self.step_delay)

    async def roll_and_move(self):
        """Roll for the current (interactive) player and animate the move."""
        roll = self.controller.roll_and_move(animated=True)
        move = self.controller.active_move
        if roll is not None and move is not None:
            await self.animate(move)
        return roll

    async def _wait_while_paused(self) -> None:
        while self.controller.state == GameState.PAUSED:
            await asyncio.sleep(max(self.step_delay, 0.01))

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
        await self._wait_while_paused()

    async def _automated_turn(self, player: PlayerAccount, turn: int) -> None:
        controller = self.controller

        await self._pause(self.think_delay)
        if not controller.is_turn_of(player, turn):
            return

        roll = await self.roll_and_move()
        if not controller.is_turn_of(player, turn):
            return
        if roll is None:
            controller.end_turn()
            return

        await self._pause(self.post_move_delay)
        if not controller.is_turn_of(player, turn):
            return

        self.policy.purchase_phase(controller, player)
        if controller.is_turn_of(player, turn):
            controller.end_turn()
