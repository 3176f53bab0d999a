"""
Landing effects, dispatched on the kind of tile a move ends on.
"""

import logging
from enum import Enum
from typing import Dict

from boardsim.events import EventBus, EventType
from boardsim.player import PlayerAccount
from boardsim.tiles import AnyTile, PropertyTile, TileKind
from boardsim import transactions

logger = logging.getLogger(__name__)


class LandingOutcome(Enum):
    """What happened when a player landed on a tile."""

    NOTHING = "nothing"
    PURCHASABLE = "purchasable"
    OWN_PROPERTY = "own_property"
    RENT_PAID = "rent_paid"
    RENT_DEFAULTED = "rent_defaulted"
    GO_TO_JAIL = "go_to_jail"


class LandingResolver:
    """Applies the effect of landing on a tile. Called once per completed move."""

    def __init__(self, players: Dict[int, PlayerAccount], events: EventBus):
        self.players = players
        self.events = events

    def on_landed(self, tile: AnyTile, player: PlayerAccount) -> LandingOutcome:
        """
        Resolve a landing of `player` on `tile`.

        Relocation for Go To Jail is left to the caller, which knows how to
        move players; this function only reports it.
        """
        self.events.emit(
            EventType.LANDED,
            player_id=player.player_id,
            position=tile.index,
            tile=tile.name,
            kind=tile.kind.value,
        )

        kind = tile.kind
        if kind == TileKind.PROPERTY:
            return self._land_on_property(tile, player)
        elif kind == TileKind.GO_TO_JAIL:
            logger.info(f"{player.name} landed on {tile.name}")
            return LandingOutcome.GO_TO_JAIL
        elif kind in (TileKind.START, TileKind.JAIL, TileKind.FREE_PARKING):
            # Start bonus is paid by the move itself; jail here is just visiting
            return LandingOutcome.NOTHING
        raise ValueError(f"Unhandled tile kind: {kind}")

    def _land_on_property(self, tile: PropertyTile, player: PlayerAccount) -> LandingOutcome:
        if not tile.is_owned:
            # Buying is the caller's decision (interactive input or automated policy)
            return LandingOutcome.PURCHASABLE

        if tile.owner_id == player.player_id:
            return LandingOutcome.OWN_PROPERTY

        owner = self.players.get(tile.owner_id)
        if owner is None:
            logger.warning(f"{tile.name} is owned by unknown player {tile.owner_id}")
            return LandingOutcome.NOTHING

        rent = transactions.calculate_rent(tile)
        if transactions.pay_rent(tile, player, owner):
            self._emit_rent(player, owner, tile, rent, forced=False)
            return LandingOutcome.RENT_PAID

        # Rent on landing is a debt: it is collected even if it sinks the
        # payer below zero, which is what marks the payer bankrupt.
        player.pay_money(rent)
        owner.receive_money(rent)
        self._emit_rent(player, owner, tile, rent, forced=True)
        logger.info(f"{player.name} defaulted on rent {rent} to {owner.name}, balance {player.money}")
        return LandingOutcome.RENT_DEFAULTED

    def _emit_rent(
        self,
        payer: PlayerAccount,
        owner: PlayerAccount,
        tile: PropertyTile,
        rent: int,
        forced: bool,
    ) -> None:
        self.events.emit(
            EventType.RENT_PAID,
            player_id=payer.player_id,
            owner=owner.player_id,
            property=tile.name,
            position=tile.index,
            amount=rent,
            forced=forced,
            payer_balance=payer.money,
            owner_balance=owner.money,
        )
