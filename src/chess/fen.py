"""
Reading / writing a Position as a FEN string (the position descriptor).
"""

from dataclasses import dataclass
from string import ascii_lowercase, digits
from typing import Optional, Self

from src.chess.board import PAWN_START_ROW, Board
from src.chess.castling import (
    CASTLING_ORDER,
    CASTLING_RULES,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
)
from src.chess.pieces import Color, PieceType
from src.chess.position import Position, pawn_direction
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
CASTLING_LETTERS = frozenset(direction.value for direction in CastlingDirection)

# En passant target squares lie behind the pawn that just made a double step: rank 3 (white pawn) or rank 6 (black pawn)
EN_PASSANT_RANKS: dict[Color, str] = {Color.WHITE: "3", Color.BLACK: "6"}


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string can be turned into a Position.
    """
    try:
        FENState.from_fen(fen).to_position()
    except InvalidFENError:
        return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """Either a '-' if all rights have been revoked, or any of the letters K, Q, k, q (each at most once, in any order)."""
    if castling == "-":
        return True
    return (
        len(castling) > 0
        and set(castling) <= CASTLING_LETTERS
        and len(set(castling)) == len(castling)
    )


def is_valid_en_passant(en_passant: str) -> bool:
    """Valid en passant square encoding should be a square on the 3rd or 6th rank, or a '-'"""
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1] in EN_PASSANT_RANKS.values()


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_rows, num_cols = BOARD_DIMENSIONS
    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    allowed_file_names = ascii_lowercase[:num_cols]
    if file_char not in allowed_file_names:
        return False

    if rank_char not in digits:
        return False

    if not (1 <= int(rank_char) <= num_rows):
        return False

    return True


def is_valid_move_counter(counter: str) -> bool:
    return counter.isascii() and counter.isdecimal()


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    FEN, or Forsyth-Edwards Notation, is a standard notation for describing a particular board position of a chess game.
    The purpose of FEN is to provide all the necessary information to restart a game from a particular position.

    <board position string><active color><castling rights><en passant square>[<# half move clock><number turns played>]

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
        Each letter says the rook on that corner has not moved yet. "-" if no rights are left.
    * The en passant square is the square behind a pawn that just made a double step. If not available a "-" is used.
    * The half move clock counts the number of plies made since the last capture. (Used for the draw clocks)
    * The number of turns starts at 1 and increments after every move black makes.
    * The two counters are optional. Without them the draw clock starts at zero.

    ex) The standard starting position has a FEN
    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
    """

    position: str
    color_to_move: Color
    castling_rights: list[CastlingDirection]
    en_passant_square: Optional[Square]
    half_move_clock: int = 0
    num_turns: int = 1

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data. Only checks the shape of every part, see `to_position` for the rest."""

        # extract the different components. FEN is space separated
        parts = fen.split(" ")
        if len(parts) not in (4, 5, 6):
            raise InvalidFENError(
                f"FEN string must contain 4 to 6 space-separated parts: {fen!r}"
            )
        position, active_color, castling_str, en_passant_algebraic, *counters = parts

        if not is_valid_color_code(active_color):
            raise InvalidFENError(f"Invalid active color {active_color!r} in {fen!r}")
        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK

        if not is_valid_castling_rights(castling_str):
            raise InvalidFENError(f"Invalid castling rights {castling_str!r} in {fen!r}")
        castling_rights = castling_from_fen(castling_str)

        if not is_valid_en_passant(en_passant_algebraic):
            raise InvalidFENError(
                f"Invalid en passant square {en_passant_algebraic!r} in {fen!r}"
            )
        en_passant_square = (
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )

        if not all(is_valid_move_counter(counter) for counter in counters):
            raise InvalidFENError(f"Move counters must be numbers: {fen!r}")
        half_move_clock = int(counters[0]) if len(counters) > 0 else 0
        num_turns = int(counters[1]) if len(counters) > 1 else 1
        if num_turns < 1:
            raise InvalidFENError(f"Number of turns starts counting at 1: {fen!r}")

        return cls(
            position,
            color_to_move,
            castling_rights,
            en_passant_square,
            half_move_clock,
            num_turns,
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)

        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        half_move_clock = str(self.half_move_clock)
        num_turns = str(self.num_turns)

        fen = f"{self.position} {active_color} {castling_str} {en_passant_algebraic} {half_move_clock} {num_turns}"
        return fen

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_position(self) -> Position:
        """
        Build the Position
        ---

        1. the board (see Board.from_fen for the guesses made about how often each piece moved)
        2. the clocks: plies played follow from the number of turns + active color
        3. castling rights: the named rooks must be in their corner. Those are marked as 'never moved'.
        4. en passant: the pawn in front of the en passant square must be there. It is marked as 'moved on the last ply'.
        """
        board = Board.from_fen(self.position)
        duration = 2 * (self.num_turns - 1) + (
            0 if self.color_to_move == Color.WHITE else 1
        )
        last_big_move = duration - self.half_move_clock

        for direction in self.castling_rights:
            rook_square = CASTLING_RULES[direction].rook_from
            rook = board.piece(rook_square)
            if rook.type != PieceType.ROOK or rook.color != direction.color:
                raise InvalidFENError(
                    f"Castling right {direction.value!r} needs a rook on {rook_square.to_algebraic()}"
                )
            rook.moves = 0

        if self.en_passant_square is not None:
            pawn_color = self.color_to_move.opponent
            if self.en_passant_square.to_algebraic()[1] != EN_PASSANT_RANKS[pawn_color]:
                raise InvalidFENError(
                    f"{self.en_passant_square.to_algebraic()} cannot be an en passant square when {self.color_to_move.name.lower()} is to move"
                )
            pawn_square = self.en_passant_square.shift(pawn_direction(pawn_color), 0)
            pawn = board.piece(pawn_square)
            if pawn.type != PieceType.PAWN or pawn.color != pawn_color:
                raise InvalidFENError(
                    f"En passant square {self.en_passant_square.to_algebraic()} needs a pawn on {pawn_square.to_algebraic()}"
                )
            pawn.last_move = duration

        return Position(board, duration, last_big_move)

    @classmethod
    def from_position(cls, position: Position) -> Self:
        """Describe the Position. Reading the result back with `to_position` gives a Position the rules treat the same way."""
        return cls(
            position=position.board.to_fen(),
            color_to_move=position.color_to_move,
            castling_rights=_castling_rights(position.board),
            en_passant_square=_en_passant_square(position),
            half_move_clock=position.half_move_clock,
            num_turns=position.full_move_number,
        )


def _castling_rights(board: Board) -> list[CastlingDirection]:
    """Both the king and the rook of a corner must still be unmoved"""
    rights: list[CastlingDirection] = []
    for direction in CASTLING_ORDER:
        rule = CASTLING_RULES[direction]
        king = board.piece(rule.king_from)
        rook = board.piece(rule.rook_from)
        king_unmoved = (
            king.type == PieceType.KING and king.color == direction.color and king.moves == 0
        )
        rook_unmoved = (
            rook.type == PieceType.ROOK and rook.color == direction.color and rook.moves == 0
        )
        if king_unmoved and rook_unmoved:
            rights.append(direction)
    return rights


def _en_passant_square(position: Position) -> Optional[Square]:
    """Look for a pawn of the player who just moved, that made its double step on the last ply."""
    pawn_color = position.color_to_move.opponent
    direction = pawn_direction(pawn_color)
    double_step_row = PAWN_START_ROW[pawn_color] + 2 * direction
    for square, piece in position.board.squares():
        if (
            piece.type == PieceType.PAWN
            and piece.color == pawn_color
            and square.row == double_step_row
            and piece.moves == 1
            and piece.last_move == position.duration
        ):
            return square.shift(-direction, 0)
    return None
