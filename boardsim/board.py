from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from boardsim.exceptions import BoardConfigurationError
from boardsim.tiles import AnyTile, PropertyTile, Tile, TileKind, make_property

if TYPE_CHECKING:
    from boardsim.player import PlayerAccount

START_INDEX = 0
FREE_PARKING_INDEX = 20
GO_TO_JAIL_INDEX = 30


def new_position(position: int, steps: int, board_size: int) -> int:
    """Position reached by moving `steps` forward on a ring of `board_size`."""
    return (position + steps) % board_size


def passed_start(start: int, destination: int) -> bool:
    """
    Whether a forward move from `start` to `destination` went past the start tile.

    Only a single wrap is ever detected: a move of a full lap or more
    still counts once at most.
    """
    return destination < start


def create_default_tiles(board_size: int = 40, jail_index: int = 10) -> List[AnyTile]:
    """
    Create the default tile registry.

    Start, Jail, Free Parking and Go To Jail sit at their fixed indices (when
    the board is large enough to have them); every other position is a
    property priced from its index.
    """
    fixed = {
        START_INDEX: ("Start", TileKind.START),
        FREE_PARKING_INDEX: ("Free Parking", TileKind.FREE_PARKING),
        GO_TO_JAIL_INDEX: ("Go To Jail", TileKind.GO_TO_JAIL),
    }
    if jail_index in fixed:
        raise BoardConfigurationError(
            f"Jail index {jail_index} collides with the {fixed[jail_index][0]} tile"
        )
    specials = {**fixed, jail_index: ("Jail", TileKind.JAIL)}

    tiles: List[AnyTile] = []
    for index in range(board_size):
        if index in specials:
            name, kind = specials[index]
            tiles.append(Tile(index, name, kind))
        else:
            tiles.append(make_property(index))
    return tiles


class Board:
    """A fixed ring of tiles with position arithmetic."""

    def __init__(self, size: int = 40, tiles: Optional[Sequence[AnyTile]] = None, jail_index: int = 10):
        if size <= 0:
            raise BoardConfigurationError(f"Board size must be positive, got {size}")
        self.size = size
        self.jail_index = jail_index
        if tiles is None:
            tiles = create_default_tiles(size, jail_index)
        self.tiles: List[AnyTile] = self._validate_tiles(list(tiles))
        self._properties: Dict[int, PropertyTile] = {
            t.index: t for t in self.tiles if isinstance(t, PropertyTile)
        }

    def _validate_tiles(self, tiles: List[AnyTile]) -> List[AnyTile]:
        if len(tiles) != self.size:
            raise BoardConfigurationError(f"Expected {self.size} tiles, got {len(tiles)}")
        for expected, tile in enumerate(tiles):
            if tile.index != expected:
                raise BoardConfigurationError(
                    f"Tile '{tile.name}' has index {tile.index} but sits at position {expected}"
                )
        if self.jail_index >= self.size:
            raise BoardConfigurationError(f"Jail index {self.jail_index} is off the board")
        return tiles

    @property
    def board_size(self) -> int:
        return self.size

    def new_position(self, position: int, steps: int) -> int:
        """Position reached by moving `steps` forward from `position`."""
        return new_position(position, steps, self.size)

    def passed_start(self, start: int, destination: int) -> bool:
        return passed_start(start, destination)

    def steps_between(self, from_position: int, to_position: int) -> int:
        """Forward distance from one position to another, wrapping at start."""
        if to_position >= from_position:
            return to_position - from_position
        return (self.size - from_position) + to_position

    def is_valid_position(self, position: int) -> bool:
        return 0 <= position < self.size

    def get_tile(self, index: int) -> Optional[AnyTile]:
        """Get the tile at the given index, or None if off the board."""
        if self.is_valid_position(index):
            return self.tiles[index]
        return None

    def get_player_tile(self, player: "PlayerAccount") -> Optional[AnyTile]:
        """Get the tile the player currently stands on."""
        if player is None:
            return None
        return self.get_tile(player.position)

    def get_property_tile(self, index: int) -> Optional[PropertyTile]:
        """Get a property tile, or None if the index is not a property."""
        return self._properties.get(index)

    def property_tiles(self) -> List[PropertyTile]:
        """All property tiles in board order."""
        return [self._properties[i] for i in sorted(self._properties)]

    def owned_by(self, player_id: int) -> List[PropertyTile]:
        """Property tiles currently owned by a player."""
        return [t for t in self.property_tiles() if t.owner_id == player_id]
