"""
Tests for headless simulated games between automated players.
"""

import json

import pytest

from boardsim import GameState
from boardsim.events import EventType
from boardsim.simulation import simulate_game


def test_simulated_game_finishes():
    game = simulate_game(num_players=4, seed=42, max_turns=100)

    assert game.state == GameState.GAME_OVER
    assert game.winner is not None
    assert not game.winner.is_bankrupt
    assert game.turn_number <= 100
    assert len(game.event_log.of_type(EventType.GAME_END)) == 1


def test_simulation_is_reproducible():
    first = simulate_game(num_players=3, seed=7, max_turns=60)
    second = simulate_game(num_players=3, seed=7, max_turns=60)

    assert first.winner.player_id == second.winner.player_id
    assert [p.money for p in first.players] == [p.money for p in second.players]
    assert [p.position for p in first.players] == [p.position for p in second.players]


def test_simulation_writes_log(tmp_path):
    log_file = tmp_path / "sim.jsonl"
    game = simulate_game(num_players=2, seed=1, max_turns=20, log_file=str(log_file))

    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    turn_starts = game.event_log.of_type(EventType.TURN_START)
    # Every engine event plus one state record per player at the start of each turn
    assert len(records) == len(game.event_log.events) + 2 * len(turn_starts)

    states = [r for r in records if r["event_type"] == "player_state"]
    assert [r["turn_number"] for r in states[::2]] == [e.details["turn"] for e in turn_starts]
    # The first snapshot shows the opening position, not the final one
    assert all(r["money"] == 1500 and r["position"] == 0 for r in states[:2])


def test_invalid_player_count():
    with pytest.raises(ValueError):
        simulate_game(num_players=1)
