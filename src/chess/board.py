"""The Board: an 8x8 grid of pieces, addressed by Square(row, col)"""

from dataclasses import dataclass
from string import digits
from typing import Iterator, Optional, Self

from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InvalidFENError

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

# Rows the pawns start from (white moves UP the board = towards row 0)
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


@dataclass
class Board:
    """
    Flat storage: a list of rows, each a list of Piece records. No piece is shared between squares,
    so a deepcopy of the board is a fully independent board.
    """

    grid: list[list[Piece]]

    @classmethod
    def empty(cls) -> Self:
        num_rows, num_cols = BOARD_DIMENSIONS
        return cls([[Piece.empty() for _ in range(num_cols)] for _ in range(num_rows)])

    @classmethod
    def starting_position(cls) -> Self:
        """Standard arrangement. Nothing has moved yet."""
        board = cls.from_fen(STARTING_POSITION)
        for _, piece in board.squares():
            piece.moves = 0
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the first part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on row 0 (rank 8), starting with rook on a8, knight on b8, etc.
        * pawns cover row 1 (rank 7) entirely
        * rows 2 through 5 have 8 consecutive empty squares
        * row 6 are the white pawns (capital letters)
        * row 7 are the white pieces.

        A FEN string does not record how often a piece moved, so we make the following guesses:
        * kings have not moved (whether they may castle is decided by the rooks, see src/chess/fen.py)
        * pawns have not moved if they are on their starting row, otherwise they moved once
        * all other pieces have moved once
        """
        num_rows, num_cols = BOARD_DIMENSIONS
        fen_by_rows = fen_str.split("/")
        if len(fen_by_rows) != num_rows:
            raise InvalidFENError(
                f"Expected {num_rows} rows separated by '/', got {len(fen_by_rows)}: {fen_str!r}"
            )

        board = cls.empty()
        for row, fen_one_row in enumerate(fen_by_rows):
            col = 0
            for character in fen_one_row:
                if character in digits:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
                elif character.lower() in FEN_TO_PIECE:
                    if col >= num_cols:
                        raise InvalidFENError(f"Row {row} overflows: {fen_one_row!r}")
                    piece = Piece.from_fen(character)
                    piece.moves = _assumed_move_count(piece, row)
                    board.grid[row][col] = piece
                    col += 1
                else:
                    raise InvalidFENError(
                        f"Unknown character {character!r} in row {fen_one_row!r}"
                    )

                if col > num_cols:
                    raise InvalidFENError(f"Row {row} overflows: {fen_one_row!r}")

            if col != num_cols:
                raise InvalidFENError(
                    f"Row {row} covers {col} columns instead of {num_cols}: {fen_one_row!r}"
                )
        return board

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in self.grid[row]:
            if not piece.is_empty:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, square: Square) -> Piece:
        return self.grid[square.row][square.col]

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> None:
        self.grid[square.row][square.col] = Piece.empty()

    def squares(self) -> Iterator[tuple[Square, Piece]]:
        """Walk over the whole board, row by row (a8, b8, ..., h1)"""
        for row, pieces in enumerate(self.grid):
            for col, piece in enumerate(pieces):
                yield Square(row, col), piece

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.squares() if piece.color == color]

    def locate_king(self, color: Color) -> Optional[Square]:
        return next(
            (
                square
                for square, piece in self.squares()
                if piece.type == PieceType.KING and piece.color == color
            ),
            None,
        )


def _assumed_move_count(piece: Piece, row: int) -> int:
    if piece.type == PieceType.KING:
        return 0
    if piece.type == PieceType.PAWN:
        return 0 if row == PAWN_START_ROW[piece.color] else 1
    return 1
