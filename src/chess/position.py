"""
Representation of a single position: the board plus the two clocks. The part that can be encoded in a FEN string.

The Position is a plain value. It holds no references to anything outside itself, so `deepcopy` gives a fully
independent copy. "Trying out" a move is done by changing a copy and throwing it away (or restoring from it).
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from src.chess.board import PAWN_START_ROW, Board
from src.chess.pieces import Color
from src.chess.square import Square

if TYPE_CHECKING:
    from src.chess.moves import Move, MoveCheck


@dataclass
class Position:
    """
    * duration: number of plies played since the start of the game. Even = white to move, odd = black to move.
    * last_big_move: the ply of the last capture (the draw clocks count from here)
    """

    board: Board
    duration: int = 0
    last_big_move: int = 0

    @classmethod
    def starting_position(cls) -> Self:
        return cls(Board.starting_position())

    @property
    def color_to_move(self) -> Color:
        return Color.WHITE if self.duration % 2 == 0 else Color.BLACK

    @property
    def half_move_clock(self) -> int:
        """Plies since the last capture"""
        return self.duration - self.last_big_move

    @property
    def full_move_number(self) -> int:
        """Starts at 1 and increments after every move black makes."""
        return self.duration // 2 + 1

    def copy(self) -> Self:
        return deepcopy(self)

    def restore(self, snapshot: "Position") -> None:
        """Roll back to an earlier copy (taken with `copy`)."""
        self.board = snapshot.board
        self.duration = snapshot.duration
        self.last_big_move = snapshot.last_big_move

    def execute(self, move: "Move", check: "MoveCheck") -> None:
        """
        Apply a move the legality checker accepted. No checks happen here.
        ---

        1. remove the piece taken en passant (if any)
        2. relocate the moving piece (promoting it if needed), advancing the ply clock once
        3. castling? Also hop the rook over, without advancing the ply clock a second time.
        4. a capture (on the target square or en passant) resets the draw clock
        """
        board = self.board
        is_capture = (not board.piece(move.to_square).is_empty) or (
            check.captured is not None
        )
        if check.captured is not None:
            board.remove_piece(check.captured)

        self.duration += 1
        self._relocate(move.from_square, move.to_square)
        if check.promotion is not None:
            board.piece(move.to_square).promote_to(check.promotion)

        if check.castle is not None:
            self._relocate(check.castle.from_square, check.castle.to_square)

        if is_capture:
            self.last_big_move = self.duration

    def _relocate(self, from_square: Square, to_square: Square) -> None:
        """Move the piece and stamp it with its new move count and the current ply."""
        piece = self.board.piece(from_square)
        self.board.remove_piece(from_square)
        piece.moves += 1
        piece.last_move = self.duration
        self.board.place_piece(piece, to_square)


def final_row(color: Color) -> int:
    """The row where pawns of this color promote"""
    return 0 if color == Color.WHITE else 7


def pawn_direction(color: Color) -> int:
    """white moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def en_passant_row(color: Color) -> int:
    """The row a pawn of this color must stand on to take en passant (next to an enemy pawn that just double-stepped)."""
    return PAWN_START_ROW[color] + 3 * pawn_direction(color)
