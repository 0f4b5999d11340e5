"""Unit tests for /src/chess/board.py"""

import pytest

from src.chess.board import STARTING_POSITION, Board
from src.chess.pieces import Color, Piece, PieceType
from src.chess.square import Square
from src.core.exceptions import InvalidFENError

EMPTY_FEN = "/".join(["8"] * 8)
BACK_RANK = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


def test_empty_board() -> None:
    board = Board.empty()
    assert all(piece.is_empty for _, piece in board.squares())
    assert board.to_fen() == EMPTY_FEN


def test_starting_position() -> None:
    """Standard arrangement, white at the bottom (rows 6 and 7), nothing moved yet"""
    board = Board.starting_position()
    for col, piece_type in enumerate(BACK_RANK):
        assert board.piece(Square(0, col)) == Piece(piece_type, Color.BLACK)
        assert board.piece(Square(7, col)) == Piece(piece_type, Color.WHITE)
        assert board.piece(Square(1, col)) == Piece(PieceType.PAWN, Color.BLACK)
        assert board.piece(Square(6, col)) == Piece(PieceType.PAWN, Color.WHITE)
    for row in range(2, 6):
        for col in range(8):
            assert board.piece(Square(row, col)).is_empty


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_POSITION,
        EMPTY_FEN,
        "r3k2r/8/8/8/8/8/8/R3K2R",
        "8/8/8/3pP3/8/8/8/4K2k",
        "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR",
    ],
)
def test_fen_round_trip(fen: str) -> None:
    assert Board.from_fen(fen).to_fen() == fen


@pytest.mark.parametrize(
    "fen",
    [
        "8/8/8/8/8/8/8",  # 7 rows
        "8/8/8/8/8/8/8/8/8",  # 9 rows
        "9/8/8/8/8/8/8/8",  # row too long
        "7/8/8/8/8/8/8/8",  # row too short
        "ppppppppp/8/8/8/8/8/8/8",  # 9 pieces in a row
        "7x/8/8/8/8/8/8/8",  # unknown piece
        "44p/8/8/8/8/8/8/8",  # overflow after the digits
        "4K2²/8/8/8/8/8/8/8",  # superscript two is not a run of empty squares
    ],
)
def test_invalid_fen(fen: str) -> None:
    with pytest.raises(InvalidFENError):
        Board.from_fen(fen)


@pytest.mark.parametrize(
    "fen, square, expected_moves",
    [
        ("8/8/8/8/8/8/4P3/8", "e2", 0),  # pawn on its start row
        ("8/8/8/8/4P3/8/8/8", "e4", 1),  # pawn moved forward
        ("8/3p4/8/8/8/8/8/8", "d7", 0),
        ("8/8/3p4/8/8/8/8/8", "d6", 1),
        ("8/8/8/8/8/8/8/4K3", "e1", 0),  # kings never count as moved
        ("8/8/8/8/8/8/8/7R", "h1", 1),  # rooks count as moved (castling rights can reset this)
        ("8/8/8/8/8/8/8/1N6", "b1", 1),
    ],
)
def test_assumed_move_count(fen: str, square: str, expected_moves: int) -> None:
    """A FEN does not record how often a piece moved, so the board makes a guess."""
    board = Board.from_fen(fen)
    assert board.piece(Square.from_algebraic(square)).moves == expected_moves


def test_place_and_remove_piece() -> None:
    board = Board.empty()
    d4 = Square.from_algebraic("d4")
    board.place_piece(Piece(PieceType.QUEEN, Color.WHITE), d4)
    assert board.piece(d4).type == PieceType.QUEEN
    assert board.to_fen() == "8/8/8/8/3Q4/8/8/8"

    board.remove_piece(d4)
    assert board.piece(d4).is_empty


def test_locate_color() -> None:
    board = Board.from_fen("8/8/8/8/8/8/4P3/3QK3")
    assert board.locate_color(Color.WHITE) == [
        Square.from_algebraic("e2"),
        Square.from_algebraic("d1"),
        Square.from_algebraic("e1"),
    ]
    assert board.locate_color(Color.BLACK) == []


def test_locate_king() -> None:
    board = Board.starting_position()
    assert board.locate_king(Color.WHITE) == Square.from_algebraic("e1")
    assert board.locate_king(Color.BLACK) == Square.from_algebraic("e8")
    assert Board.empty().locate_king(Color.WHITE) is None


def test_squares_are_independent() -> None:
    """Every square holds its own Piece record (no sharing), so changing one does not change another"""
    board = Board.empty()
    board.piece(Square(0, 0)).moves = 3
    assert board.piece(Square(0, 1)).moves == 0
