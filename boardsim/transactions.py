"""
Property transactions: purchase, rent and sale.

Each function either commits the whole transaction or changes nothing and
returns a failure value.
"""

import logging
from typing import Optional

from boardsim.player import PlayerAccount
from boardsim.tiles import PropertyTile

logger = logging.getLogger(__name__)


def calculate_rent(tile: PropertyTile) -> int:
    """Rent owed for landing on `tile`. Flat base rent; no improvements."""
    return tile.base_rent


def default_sell_price(tile: PropertyTile) -> int:
    """Price the bank pays when no sale price is given: half the purchase price."""
    return tile.price // 2


def purchase(tile: PropertyTile, buyer: PlayerAccount) -> bool:
    """
    Buyer purchases an unowned property from the bank.
    Returns True if successful, False otherwise.
    """
    if tile.is_owned:
        logger.warning(f"{buyer.name} cannot buy {tile.name}: already owned by player {tile.owner_id}")
        return False

    if not buyer.has_enough_money(tile.price):
        logger.warning(f"{buyer.name} cannot afford {tile.name} ({tile.price} > {buyer.money})")
        return False

    buyer.pay_money(tile.price)
    tile.owner_id = buyer.player_id
    buyer.add_property(tile)
    return True


def pay_rent(tile: PropertyTile, payer: PlayerAccount, owner: Optional[PlayerAccount]) -> bool:
    """
    Payer pays the property's rent to its owner.
    Returns True if successful (or if the payer owns the property),
    False if the property is unowned or the payer cannot afford it.
    """
    if not tile.is_owned or owner is None or owner.player_id != tile.owner_id:
        logger.warning(f"No rent due on {tile.name}: no matching owner")
        return False

    if payer.player_id == owner.player_id:
        return True

    rent = calculate_rent(tile)
    if not payer.has_enough_money(rent):
        logger.info(f"{payer.name} cannot afford rent {rent} on {tile.name}")
        return False

    payer.pay_money(rent)
    owner.receive_money(rent)
    return True


def sell(tile: PropertyTile, seller: PlayerAccount, price: Optional[int] = None) -> Optional[int]:
    """
    Seller sells a property back to the bank.
    Returns the price received, or None if the seller does not own it.
    """
    if not tile.is_owned:
        logger.warning(f"{seller.name} cannot sell {tile.name}: not owned")
        return None

    if tile.owner_id != seller.player_id:
        logger.warning(f"{seller.name} cannot sell {tile.name}: owned by player {tile.owner_id}")
        return None

    if price is None:
        price = default_sell_price(tile)
    elif price < 0:
        logger.warning(f"{seller.name} cannot sell {tile.name} for negative price {price}")
        return None

    seller.receive_money(price)
    tile.owner_id = None
    seller.remove_property(tile)
    return price
