"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    DRAW_OFFERED = "draw offered"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DRAW_MOVE_CLOCK = "draw by move clock"
    DRAW_CLAIMED = "draw claimed"

    @property
    def is_over(self) -> bool:
        """A draw offer does not end the game, everything apart from IN_PROGRESS does."""
        return self not in (Status.IN_PROGRESS, Status.DRAW_OFFERED)


class Color(StrEnum):
    # NOTE: unlike src/chess/pieces.py, there is no option for empty squares at the boundary
    WHITE = "white"
    BLACK = "black"
