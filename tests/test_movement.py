"""
Tests for immediate and animated moves, the pass-start bonus and relocation.
"""

from boardsim.board import Board
from boardsim.events import EventBus, EventType
from boardsim.landing import LandingOutcome, LandingResolver
from boardsim.movement import MovementService
from boardsim.player import PlayerAccount
from boardsim.tiles import Tile, TileKind


class RecordingSync:
    def __init__(self):
        self.positions = []

    def update_visual_position(self, player):
        self.positions.append((player.player_id, player.position))


def _world(owner_of_destination=False):
    """Fresh board, two players and a movement service."""
    board = Board()
    events = EventBus()
    alice = PlayerAccount(0, "Alice", 1500)
    bob = PlayerAccount(1, "Bob", 1500)
    if owner_of_destination:
        tile = board.get_property_tile(3)
        tile.owner_id = bob.player_id
        bob.add_property(tile)
    landing = LandingResolver({0: alice, 1: bob}, events)
    return MovementService(board, events, landing), alice, bob


def test_simple_move(movement, alice):
    result = movement.execute_move(alice, 7)

    assert alice.position == 7
    assert result.start == 0
    assert result.destination == 7
    assert not result.passed_start
    assert result.outcome == LandingOutcome.PURCHASABLE
    assert alice.money == 1500


def test_passing_start_pays_bonus_once(movement, events, alice):
    alice.position = 38
    result = movement.execute_move(alice, 5)

    assert alice.position == 3
    assert result.passed_start
    assert alice.money == 1700
    assert len(events.event_log.of_type(EventType.PASS_START)) == 1


def test_landing_exactly_on_start_pays_bonus(movement, alice):
    alice.position = 36
    movement.move(alice, 4)
    assert alice.position == 0
    assert alice.money == 1700


def test_zero_step_move_resolves_landing_in_place(movement, events, alice):
    alice.position = 5
    assert movement.move(alice, 0)
    assert alice.position == 5
    assert alice.money == 1500
    assert len(events.event_log.of_type(EventType.LANDED)) == 1


def test_invalid_moves_rejected(movement, alice):
    assert not movement.move(alice, -1)
    assert not movement.move(None, 3)

    alice.position = 55
    assert not movement.move(alice, 3)
    assert alice.position == 55


def test_player_moved_event(movement, events, alice):
    movement.move(alice, 4)
    event = events.event_log.of_type(EventType.PLAYER_MOVED)[0]
    assert event.details == {"from": 0, "to": 4, "spaces": 4}


def test_visual_sync_called_on_commit(board, events, alice):
    sync = RecordingSync()
    service = MovementService(board, events, LandingResolver({0: alice}, events), visual_sync=sync)
    service.move(alice, 6)
    assert sync.positions == [(0, 6)]


def test_go_to_jail_relocates_without_bonus(movement, events, alice):
    alice.position = 25
    result = movement.execute_move(alice, 5)

    assert result.destination == 30
    assert result.outcome == LandingOutcome.GO_TO_JAIL
    assert alice.position == 10
    assert alice.money == 1500
    # Only the Go To Jail tile was landed on, the jail itself is not resolved
    assert len(events.event_log.of_type(EventType.LANDED)) == 1


def test_move_to_does_not_pay_bonus(movement, alice):
    alice.position = 35
    assert movement.move_to(alice, 2)
    assert alice.position == 2
    assert alice.money == 1500
    assert not movement.move_to(alice, 40)


def test_move_to_can_resolve_landing(movement, events, alice):
    movement.move_to(alice, 7, resolve_landing=True)
    assert len(events.event_log.of_type(EventType.LANDED)) == 1


def test_animated_move_ticks_then_commits(movement, events, alice):
    alice.position = 38
    move = movement.begin_move(alice, 4)

    assert alice.is_moving
    assert move.tick() == 39
    assert move.tick() == 0
    assert move.tick() == 1
    # Nothing has been committed before the last tick
    assert alice.position == 38
    assert alice.money == 1500
    assert not events.event_log.of_type(EventType.PLAYER_MOVED)

    assert move.tick() == 2
    assert move.done
    assert not alice.is_moving
    assert alice.position == 2
    assert alice.money == 1700
    assert move.result.passed_start


def test_animated_move_progress(movement, alice):
    move = movement.begin_move(alice, 3)
    assert list(move.progress()) == [1, 2, 3]
    assert move.remaining_steps == 0


def test_zero_step_animated_move_completes_on_first_tick(movement, alice):
    move = movement.begin_move(alice, 0)
    assert not move.done
    move.tick()
    assert move.done
    assert not alice.is_moving


def test_move_rejected_while_moving(movement, alice):
    move = movement.begin_move(alice, 5)

    assert movement.begin_move(alice, 2) is None
    assert not movement.move(alice, 2)
    assert not movement.move_to(alice, 10)

    move.run_to_completion()
    assert alice.position == 5
    assert movement.move(alice, 2)
    assert alice.position == 7


def test_done_callback_fires_after_commit(movement, alice):
    seen = []
    move = movement.begin_move(alice, 2)
    move.add_done_callback(lambda m: seen.append((m.player.position, m.player.is_moving)))

    move.run_to_completion()
    assert seen == [(2, False)]

    # Callbacks added after completion run immediately
    move.add_done_callback(lambda m: seen.append("late"))
    assert seen[-1] == "late"


def test_animated_and_immediate_moves_agree():
    """Both ways of moving produce the same state, including rent."""
    immediate, alice_a, bob_a = _world(owner_of_destination=True)
    animated, alice_b, bob_b = _world(owner_of_destination=True)
    alice_a.position = alice_b.position = 37

    result_a = immediate.execute_move(alice_a, 6)
    result_b = animated.begin_move(alice_b, 6).run_to_completion()

    assert result_a == result_b
    assert result_a.outcome == LandingOutcome.RENT_PAID
    for a, b in ((alice_a, alice_b), (bob_a, bob_b)):
        assert (a.position, a.money, a.is_bankrupt) == (b.position, b.money, b.is_bankrupt)
    assert [e.event_type for e in immediate.events.event_log.events] == [
        e.event_type for e in animated.events.event_log.events
    ]


class RingOfStarts:
    """Minimal board provider: every tile is a Start tile."""

    def __init__(self, size):
        self.board_size = size
        self.tiles = [Tile(i, f"Start {i}", TileKind.START) for i in range(size)]

    def get_tile(self, index):
        return self.tiles[index] if 0 <= index < self.board_size else None

    def get_player_tile(self, player):
        return self.get_tile(player.position)


def test_movement_only_needs_a_board_provider(events, alice):
    service = MovementService(RingOfStarts(6), events, LandingResolver({0: alice}, events), pass_start_bonus=50)
    alice.position = 4

    result = service.execute_move(alice, 3)

    assert alice.position == 1
    assert result.passed_start
    assert alice.money == 1550
    assert not service.move_to(alice, 6)


def test_move_of_more_than_a_lap_pays_bonus_once(movement, events, alice):
    alice.position = 38
    movement.move(alice, 45)

    assert alice.position == 3
    assert alice.money == 1700
    assert len(events.event_log.of_type(EventType.PASS_START)) == 1


def test_move_of_exactly_one_lap_pays_nothing(movement, events, alice):
    alice.position = 3
    result = movement.execute_move(alice, 40)

    assert alice.position == 3
    assert not result.passed_start
    assert alice.money == 1500
    assert not events.event_log.of_type(EventType.PASS_START)
