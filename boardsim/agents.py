"""Policy for automated (computer-controlled) players."""

from typing import TYPE_CHECKING, Optional

from boardsim.player import PlayerAccount
from boardsim.tiles import PropertyTile

if TYPE_CHECKING:
    from boardsim.turns import TurnController


class AutoPlayer:
    """
    Simple AI that buys every property it lands on and can afford.

    It never rolls again on doubles: after one roll and an optional purchase
    the turn is ended.
    """

    def should_buy(self, player: PlayerAccount, tile: Optional[PropertyTile]) -> bool:
        """Decide whether to buy the property the player is standing on."""
        if tile is None or tile.is_owned:
            return False
        return player.has_enough_money(tile.price)

    def purchase_phase(self, controller: "TurnController", player: PlayerAccount) -> bool:
        """
        Buy the landed property if the policy wants it.

        Returns:
            True if a property was bought.
        """
        tile = controller.get_purchasable_property(player)
        if not self.should_buy(player, tile):
            return False
        return controller.buy_property(player, tile.index)
