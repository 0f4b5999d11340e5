"""
Boundary layer data model.

The Service receives this from the repository, hands it to the Game (`Game.from_model`) and stores what comes back (`Game.to_model`).
None of the layers need to know how the others represent a game.
"""

from dataclasses import dataclass


@dataclass
class GameModel:
    """
    * current_fen: the position, incl. castling rights, en passant square and the draw clock (see src/chess/fen.py)
    * status: value of src.core.shared_types.Status
    """

    current_fen: str
    status: str
