"""
Custom exception hierarchy for the board-economy engine.

Rule violations during play are reported through False/None returns;
these errors cover construction-time problems the caller must fix.
"""


class BoardSimError(Exception):
    """Base exception for all engine errors."""


class ConfigurationError(BoardSimError):
    """Game configuration is invalid."""


class BoardConfigurationError(ConfigurationError):
    """Tile registry does not describe a valid board."""


class InvalidPlayerError(BoardSimError):
    """Player roster is invalid (empty, duplicated ids, unknown id)."""
