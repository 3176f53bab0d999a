"""
Public snapshot serialization of a Game.

Produces a UI-friendly, JSON-compatible view of the current game.
"""

from __future__ import annotations

from typing import Any, Dict, List

from boardsim.game import Game


def serialize_snapshot(game: Game) -> Dict[str, Any]:
    """Serialize a Game into a stable JSON dict.

    The snapshot includes:
    - state, turn_number and current_player_id
    - players with balance, position, bankruptcy and owned properties
    - every property tile with its price, rent and owner
    - the last roll of the current turn (if any) and the winner
    """
    controller = game.controller
    board = game.board

    players: List[Dict[str, Any]] = []
    for player in game.players:
        props: List[Dict[str, Any]] = []
        for tile in controller.get_player_properties(player):
            props.append({"position": tile.index, "name": tile.name, "price": tile.price})

        players.append(
            {
                "player_id": player.player_id,
                "name": player.name,
                "money": player.money,
                "position": player.position,
                "is_automated": player.is_automated,
                "is_moving": player.is_moving,
                "is_bankrupt": player.is_bankrupt,
                "total_assets": player.total_assets(board),
                "properties": props,
            }
        )

    properties = [
        {
            "position": tile.index,
            "name": tile.name,
            "price": tile.price,
            "rent": tile.base_rent,
            "owner_id": tile.owner_id,
        }
        for tile in board.property_tiles()
    ]

    last_roll = None
    if controller.last_roll is not None:
        roll = controller.last_roll
        last_roll = {
            "die1": roll.die1,
            "die2": roll.die2,
            "total": roll.total,
            "is_double": roll.is_double,
            "is_triple_double": roll.is_triple_double,
        }

    current = controller.current_player
    winner = controller.winner
    return {
        "state": controller.state.value,
        "turn_number": controller.turn_number,
        "current_player_id": current.player_id if current is not None else None,
        "double_streak": game.dice.streak,
        "last_roll": last_roll,
        "winner_id": winner.player_id if winner is not None else None,
        "board_size": board.board_size,
        "players": players,
        "properties": properties,
    }
