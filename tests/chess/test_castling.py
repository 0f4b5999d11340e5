"""Unit tests for /src/chess/castling.py"""

import pytest

from src.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
)
from src.chess.pieces import Color
from src.chess.square import Square


@pytest.mark.parametrize(
    "castling_str, expected",
    [
        ("-", []),
        ("K", [CastlingDirection.WHITE_KING_SIDE]),
        ("Qk", [CastlingDirection.WHITE_QUEEN_SIDE, CastlingDirection.BLACK_KING_SIDE]),
        (
            "KQkq",
            [
                CastlingDirection.WHITE_KING_SIDE,
                CastlingDirection.WHITE_QUEEN_SIDE,
                CastlingDirection.BLACK_KING_SIDE,
                CastlingDirection.BLACK_QUEEN_SIDE,
            ],
        ),
    ],
)
def test_castling_rights_fen(castling_str: str, expected: list[CastlingDirection]) -> None:
    assert castling_from_fen(castling_str) == expected
    assert castling_to_fen(expected) == castling_str


def test_castling_to_fen_uses_canonical_order() -> None:
    directions = [CastlingDirection.BLACK_QUEEN_SIDE, CastlingDirection.WHITE_KING_SIDE]
    assert castling_to_fen(directions) == "Kq"


def test_direction_color() -> None:
    assert CastlingDirection.WHITE_QUEEN_SIDE.color == Color.WHITE
    assert CastlingDirection.BLACK_KING_SIDE.color == Color.BLACK


def test_castling_squares() -> None:
    rule = CASTLING_RULES[CastlingDirection.BLACK_QUEEN_SIDE]
    assert rule.king_from == Square.from_algebraic("e8")
    assert rule.king_to == Square.from_algebraic("c8")
    assert rule.rook_from == Square.from_algebraic("a8")
    assert rule.rook_to == Square.from_algebraic("d8")
