"""
Contracts with collaborators outside the rules engine.

The board and presentation layers are consumed only through these
protocols, so the engine runs headless with the defaults.
"""

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from boardsim.player import PlayerAccount
    from boardsim.tiles import AnyTile


class BoardProvider(Protocol):
    """Read access to the tile ring."""

    @property
    def board_size(self) -> int: ...

    def get_tile(self, index: int) -> Optional["AnyTile"]: ...

    def get_player_tile(self, player: "PlayerAccount") -> Optional["AnyTile"]: ...


class VisualSync(Protocol):
    """Presentation hook invoked after every committed position change."""

    def update_visual_position(self, player: "PlayerAccount") -> None: ...


class NullVisualSync:
    """Visual sync for headless games."""

    def update_visual_position(self, player: "PlayerAccount") -> None:
        return None
