"""
Player state and money ledger.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boardsim.board import Board
    from boardsim.tiles import PropertyTile

logger = logging.getLogger(__name__)


class PlayerAccount:
    """
    Complete state of a player in the game.

    Money, ownership and bankruptcy change only through the methods below;
    position and the moving flag are owned by the movement service.
    """

    def __init__(self, player_id: int, name: str, starting_money: int, is_automated: bool = False):
        self.player_id = player_id
        self.name = name
        self.money = starting_money
        self.position = 0
        self.is_bankrupt = False
        self.is_moving = False
        self.is_automated = is_automated
        self.properties: set[int] = set()

    def pay_money(self, amount: int) -> bool:
        """
        Pay `amount` to the bank or another party.

        Returns True only when the balance covered the amount. A short payment
        is still deducted and returns False; whenever the balance ends up
        negative the player is flagged bankrupt.
        """
        if amount < 0:
            logger.warning(f"{self.name}: refusing negative payment {amount}")
            return False

        covered = self.money >= amount
        self.money -= amount
        if not covered:
            logger.info(f"{self.name} could not cover {amount}, balance now {self.money}")
        self._check_bankruptcy()
        return covered

    def receive_money(self, amount: int) -> bool:
        """Credit `amount`. Negative amounts are rejected."""
        if amount < 0:
            logger.warning(f"{self.name}: refusing negative credit {amount}")
            return False
        self.money += amount
        return True

    def has_enough_money(self, amount: int) -> bool:
        return self.money >= amount

    def add_property(self, tile: "PropertyTile") -> None:
        self.properties.add(tile.index)

    def remove_property(self, tile: "PropertyTile") -> None:
        self.properties.discard(tile.index)

    def owns(self, tile: "PropertyTile") -> bool:
        return tile.index in self.properties

    def total_assets(self, board: "Board") -> int:
        """Money plus the purchase price of every owned property."""
        total = self.money
        for index in self.properties:
            tile = board.get_property_tile(index)
            if tile is not None:
                total += tile.price
        return total

    def _check_bankruptcy(self) -> None:
        if self.money < 0 and not self.is_bankrupt:
            self.is_bankrupt = True
            logger.info(f"{self.name} is bankrupt (balance {self.money})")

    def __repr__(self) -> str:
        return (
            f"PlayerAccount(id={self.player_id}, name='{self.name}', "
            f"money={self.money}, position={self.position}, bankrupt={self.is_bankrupt})"
        )


class Player:
    """
    Convenience wrapper for player information.
    This is the roster entry passed to `create_game`.
    """

    def __init__(self, player_id: int, name: str, automated: bool = False):
        self.player_id = player_id
        self.name = name
        self.automated = automated

    def __repr__(self) -> str:
        kind = "automated" if self.automated else "interactive"
        return f"Player(id={self.player_id}, name='{self.name}', {kind})"
