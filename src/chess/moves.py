"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define, for each piece type, whether a given move is allowed.

NOTE: the rules in here ignore whether the move leaves your own king in check. That is checked one layer up (see src/chess/game.py),
by playing the move on a copy of the position.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional, Self

from loguru import logger

from src.chess.board import PAWN_START_ROW
from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType, piece_to_char
from src.chess.position import (
    Position,
    en_passant_row,
    final_row,
    pawn_direction,
)
from src.chess.square import Square
from src.core.exceptions import InvalidMoveError

# -- PAWN PROMOTION OPTIONS --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        * "e1g1": the king castles king-side (the rook's hop is implied)

        Parsing is case-insensitive. Squares are NOT validated here: "z9a1" parses into an out-of-bounds move
        which the legality checker then rejects.
        """
        if len(uci) < 4:
            raise InvalidMoveError(f"Move must have at least 4 characters: {uci!r}")

        from_sq = Square.from_algebraic(uci[:2])
        to_sq = Square.from_algebraic(uci[2:4])
        promotion_char = uci[4:].lower()
        if not promotion_char:
            return cls(from_sq, to_sq)

        promote_to = FEN_TO_PIECE.get(promotion_char)
        if promote_to not in PROMOTION_OPTIONS:
            raise InvalidMoveError(f"Cannot promote into {uci[4:]!r}: {uci!r}")
        return cls(from_sq, to_sq, promote_to)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = piece_to_char(self.promote_to) if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    @property
    def d_row(self) -> int:
        return self.to_square.row - self.from_square.row

    @property
    def d_col(self) -> int:
        return self.to_square.col - self.from_square.col


class Verdict(Enum):
    LEGAL = auto()
    ILLEGAL = auto()
    MISSING_PROMOTION = auto()


@dataclass(frozen=True)
class MoveCheck:
    """
    Outcome of checking a move against the rules.
    ---

    Besides the verdict, a legal move may come with side effects the executor has to apply:
    * captured: the square of a piece taken that is NOT on the target square (en passant)
    * castle: a second move to play along (the rook hopping over the king)
    * promotion: the piece type the pawn turns into
    """

    verdict: Verdict
    captured: Optional[Square] = None
    castle: Optional[Move] = None
    promotion: Optional[PieceType] = None

    @property
    def is_legal(self) -> bool:
        return self.verdict == Verdict.LEGAL


ILLEGAL = MoveCheck(Verdict.ILLEGAL)
LEGAL = MoveCheck(Verdict.LEGAL)


def check_move(
    position: Position, move: Move, color: Color, allow_castling: bool = True
) -> MoveCheck:
    """
    Is the move allowed for the player with the `color` pieces? (Ignoring checks on your own king)
    ---

    1. reject coordinates that fall off the board
    2. reject moving an empty square or an opponent's piece
    3. reject capturing your own piece (this also rejects "moves" that stay on the same square)
    4. dispatch on the piece type
    """
    if not (move.from_square.is_within_bounds() and move.to_square.is_within_bounds()):
        return ILLEGAL

    board = position.board
    piece = board.piece(move.from_square)
    if piece.is_empty or piece.color != color:
        return ILLEGAL

    target = board.piece(move.to_square)
    if not target.is_empty and target.color == piece.color:
        return ILLEGAL

    if piece.type == PieceType.KING:
        return check_king_move(position, move, allow_castling)

    legality_rule: LegalityFn = LEGALITY_RULES[piece.type]
    return legality_rule(position, move)


# --- MOVEMENT RULES ---
def is_path_clear(position: Position, move: Move) -> bool:
    """Walk from the starting square towards the target square (along a straight line or a diagonal). Every square in between must be empty."""
    step_row = (move.d_row > 0) - (move.d_row < 0)
    step_col = (move.d_col > 0) - (move.d_col < 0)
    square = move.from_square.shift(step_row, step_col)
    while square != move.to_square:
        if not position.board.piece(square).is_empty:
            return False
        square = square.shift(step_row, step_col)
    return True


def check_rook_move(position: Position, move: Move) -> MoveCheck:
    """Rooks move either horizontally or vertically"""
    if move.d_row * move.d_col != 0:
        return ILLEGAL
    return LEGAL if is_path_clear(position, move) else ILLEGAL


def check_knight_move(position: Position, move: Move) -> MoveCheck:
    """Knights jump (1, 2) or (2, 1) squares away. Other pieces cannot block them."""
    steps = sorted([abs(move.d_row), abs(move.d_col)])
    return LEGAL if steps == [1, 2] else ILLEGAL


def check_bishop_move(position: Position, move: Move) -> MoveCheck:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    if abs(move.d_row) != abs(move.d_col):
        return ILLEGAL
    return LEGAL if is_path_clear(position, move) else ILLEGAL


def check_queen_move(position: Position, move: Move) -> MoveCheck:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    if move.d_row * move.d_col == 0:
        return check_rook_move(position, move)
    if abs(move.d_row) == abs(move.d_col):
        return check_bishop_move(position, move)
    return ILLEGAL


def check_king_move(
    position: Position, move: Move, allow_castling: bool = True
) -> MoveCheck:
    """
    The king can move by a single square at the time.

    Castling is modelled as a king move by two squares along its row. You are allowed to castle if:
    * the king never moved
    * the first piece found in the direction of travel is a rook that never moved (so all squares in between are empty)
    * the king's square, the square it passes, and the square it lands on are not under attack
    """
    if abs(move.d_row) <= 1 and abs(move.d_col) <= 1:
        return LEGAL

    king = position.board.piece(move.from_square)
    if not allow_castling or king.moves != 0 or move.d_row != 0 or abs(move.d_col) != 2:
        return ILLEGAL

    step = 1 if move.d_col > 0 else -1
    rook_square = move.from_square.shift(0, step)
    while (
        rook_square.is_within_bounds() and position.board.piece(rook_square).is_empty
    ):
        rook_square = rook_square.shift(0, step)

    if not rook_square.is_within_bounds():
        return ILLEGAL

    rook = position.board.piece(rook_square)
    if rook.type != PieceType.ROOK or rook.color != king.color or rook.moves != 0:
        return ILLEGAL

    king_path = [move.from_square.shift(0, step * n) for n in range(3)]
    if any(is_square_attacked(position, square, king.color) for square in king_path):
        return ILLEGAL

    rook_hop = Move(from_square=rook_square, to_square=move.from_square.shift(0, step))
    return MoveCheck(Verdict.LEGAL, castle=rook_hop)


def check_pawn_move(position: Position, move: Move) -> MoveCheck:
    """
    A pawn:
    - moves by a single square forward.
    - It can move by two in their first move (so when on their starting row)
    - takes diagonally, also en passant: an enemy pawn right next to it that just made its double step
    - must name a piece to promote into when reaching the final row
    """
    board = position.board
    pawn = board.piece(move.from_square)
    direction = pawn_direction(pawn.color)
    one_step = move.from_square.shift(direction, 0)
    if not one_step.is_within_bounds():
        return ILLEGAL

    captured: Optional[Square] = None
    if move.d_col == 0:
        if not board.piece(one_step).is_empty:
            return ILLEGAL
        is_single_step = move.to_square == one_step
        is_double_step = (
            move.d_row == 2 * direction
            and move.from_square.row == PAWN_START_ROW[pawn.color]
            and board.piece(move.to_square).is_empty
        )
        if not (is_single_step or is_double_step):
            return ILLEGAL

    elif abs(move.d_col) == 1:
        if move.d_row != direction:
            return ILLEGAL
        if board.piece(move.to_square).is_empty:
            captured = Square(move.from_square.row, move.to_square.col)
            if not _can_take_en_passant(position, pawn, move.from_square, captured):
                return ILLEGAL

    else:
        return ILLEGAL

    if move.to_square.row != final_row(pawn.color):
        return MoveCheck(Verdict.LEGAL, captured=captured)

    if move.promote_to not in PROMOTION_OPTIONS:
        return MoveCheck(Verdict.MISSING_PROMOTION)
    return MoveCheck(Verdict.LEGAL, captured=captured, promotion=move.promote_to)


def _can_take_en_passant(
    position: Position, pawn: Piece, from_square: Square, victim_square: Square
) -> bool:
    """
    The victim must be an enemy pawn that moved exactly once, and did so on the previous ply (so the window is exactly one ply).
    The capturing pawn must stand on the row next to the victim's double step.
    """
    victim = position.board.piece(victim_square)
    return (
        victim.type == PieceType.PAWN
        and victim.color == pawn.color.opponent
        and victim.moves == 1
        and victim.last_move == position.duration
        and from_square.row == en_passant_row(pawn.color)
    )


# -- STRATEGY PATTERN: MOVEMENT RULES ---
LegalityFn = Callable[[Position, Move], MoveCheck]
LEGALITY_RULES: dict[PieceType, LegalityFn] = {
    PieceType.PAWN: check_pawn_move,
    PieceType.KNIGHT: check_knight_move,
    PieceType.BISHOP: check_bishop_move,
    PieceType.ROOK: check_rook_move,
    PieceType.QUEEN: check_queen_move,
    PieceType.KING: check_king_move,
}


# --- ATTACKING RULES ---
def is_square_attacked(position: Position, square: Square, color: Color) -> bool:
    """
    Is the square attacked by the opponent of the player with the `color` pieces?
    ---

    Every opponent piece is asked: "Could you legally move onto this square?"

    NOTE: pawns only move diagonally when they capture something. So an empty square gets a marker
    (a pawn of our own color) while we ask around, and is restored afterwards.

    NOTE: en passant is not considered. A pawn that can only be taken en passant does not count as attacked.
    """
    board = position.board
    original = board.piece(square)
    if original.is_empty:
        board.place_piece(Piece(PieceType.PAWN, color), square)

    try:
        opponent = color.opponent
        for attacker_square in board.locate_color(opponent):
            probe = Move(attacker_square, square, promote_to=PieceType.QUEEN)
            if check_move(position, probe, opponent, allow_castling=False).is_legal:
                return True
        return False
    finally:
        board.place_piece(original, square)


def is_in_check(position: Position, color: Color) -> bool:
    """Is the king of this color under attack? A missing king counts as being in check."""
    king_square = position.board.locate_king(color)
    if king_square is None:
        logger.warning(f"No {color.name.lower()} king on the board. Treating as check.")
        return True
    return is_square_attacked(position, king_square, color)
