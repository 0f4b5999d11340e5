"""
Custom exceptions used across layers.

NOTE: GameError is not a ValueError, so pydantic validators let it through instead of wrapping it into a ValidationError.
"""


class GameError(Exception):
    """Top-level error for anything that goes wrong while playing a game."""


class InvalidFENError(GameError):
    """Position descriptor (FEN string) could not be parsed."""


class InvalidMoveError(GameError):
    """Move string (UCI notation) could not be parsed."""


class IllegalMoveError(GameError):
    """The move breaks the rules of chess (or leaves your own king in check)."""


class MissingPromotionError(GameError):
    """A pawn reached the final rank, but no piece to promote into was named."""


class GameStateError(GameError):
    """The requested action does not fit the current state of the game."""


class NotYourTurnError(GameError):
    """The side submitting the move is not the side to move."""


class RepositoryError(GameError):
    """Something went wrong while looking up a stored game."""


class InvalidRequestError(GameError):
    """Request data does not have the expected shape."""
