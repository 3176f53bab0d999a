"""
Board tile definitions.

Tiles form a closed set of kinds. Landing effects are dispatched on
`Tile.kind` in `boardsim.landing`, not through subclass overrides.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class TileKind(Enum):
    """Kinds of tiles on the board."""

    START = "start"
    PROPERTY = "property"
    JAIL = "jail"
    GO_TO_JAIL = "go_to_jail"
    FREE_PARKING = "free_parking"


@dataclass(frozen=True)
class Tile:
    """A non-ownable board tile."""

    index: int
    name: str
    kind: TileKind

    @property
    def is_property(self) -> bool:
        return self.kind == TileKind.PROPERTY

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', index={self.index})"


@dataclass(eq=False)
class PropertyTile:
    """
    An ownable tile.

    Everything except `owner_id` is fixed after the board is built. The owner
    is held as a player id; the player keeps the matching entry in its own
    property set.
    """

    index: int
    name: str
    price: int
    base_rent: int
    owner_id: Optional[int] = field(default=None)

    kind = TileKind.PROPERTY
    is_property = True

    @property
    def is_owned(self) -> bool:
        """Check if the property is owned by any player."""
        return self.owner_id is not None

    def __repr__(self) -> str:
        return f"PropertyTile(name='{self.name}', index={self.index}, owner={self.owner_id})"


AnyTile = Union[Tile, PropertyTile]


def property_price(index: int) -> int:
    """Purchase price of the default property at `index`."""
    return 100 + (index % 10) * 50


def property_rent(index: int) -> int:
    """Base rent of the default property at `index`."""
    return property_price(index) // 10


def make_property(index: int, name: Optional[str] = None) -> PropertyTile:
    """Create the default property for a board position."""
    return PropertyTile(
        index=index,
        name=name or f"Property {index}",
        price=property_price(index),
        base_rent=property_rent(index),
    )
