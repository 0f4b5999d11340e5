"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn:

1. check the move against the rules (src/chess/moves.py)
2. play it, unless it leaves your own king in check
3. decide whether the game goes on, and pass this information to the service layer.
"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from loguru import logger

from src.chess.fen import FENState
from src.chess.moves import (
    ILLEGAL,
    PROMOTION_OPTIONS,
    Move,
    MoveCheck,
    Verdict,
    check_move,
    is_in_check,
)
from src.chess.pieces import Color, PieceType
from src.chess.position import Position
from src.chess.square import all_squares
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    MissingPromotionError,
)
from src.core.models import GameModel
from src.core.shared_types import Status

# Plies since the last capture
DRAW_OFFER_PLIES = 100
FORCED_DRAW_PLIES = 150


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    position: Position
    status: Status = Status.IN_PROGRESS

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, white to move."""
        return cls(Position.starting_position())

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """
        Continue from a given position. Raises InvalidFENError on a malformed string.

        A position where the player to move has no legal reply is over before it starts: checkmate or stalemate.
        """
        position = FENState.from_fen(fen).to_position()
        return cls(position, no_reply_outcome(position) or Status.IN_PROGRESS)

    def to_fen(self) -> str:
        return FENState.from_position(self.position).to_fen()

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        try:
            status = Status(model.status)
        except ValueError as e:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            ) from e
        return cls(FENState.from_fen(model.current_fen).to_position(), status)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(current_fen=self.to_fen(), status=self.status.value)

    @property
    def color_to_move(self) -> Color:
        return self.position.color_to_move

    @property
    def winner(self) -> Optional[Color]:
        """
        Only a checkmate has a winner.
        Given we know it is checkmate, the player who is to move just got mated and the opponent must be the winner
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.color_to_move.opponent

    def is_check(self) -> bool:
        """Is the player to move in check?"""
        return is_in_check(self.position, self.color_to_move)

    def make_move(self, move: Move | str) -> Status:
        """
        Attempt to make a move for the player to move
        -----

        1. make sure the game is not over yet
        2. play the move, if it is legal (raises IllegalMoveError / MissingPromotionError otherwise, leaving the game untouched)
        3. update game status
        """
        if self.status.is_over:
            raise GameStateError(f"Game is over. status: {self.status}")

        if isinstance(move, str):
            move = Move.from_uci(move)

        player_color = self.color_to_move
        check = try_move(self.position, move)
        if check.verdict == Verdict.MISSING_PROMOTION:
            raise MissingPromotionError(
                f"Pawn reaches the final rank, pick a piece to promote into: {move.to_uci()}"
            )
        if not check.is_legal:
            logger.debug(f"Rejected {player_color.name.lower()} move {move.to_uci()}")
            raise IllegalMoveError(f"Move not allowed: {move.to_uci()}")

        logger.info(
            f"{player_color.name.lower()} played {move.to_uci()} (ply {self.position.duration})"
        )
        self.status = resolve_outcome(self.position)
        if self.status != Status.IN_PROGRESS:
            logger.info(f"Game status after {move.to_uci()}: {self.status}")
        return self.status

    def claim_draw(self) -> None:
        """After a draw was offered by the move clock, the player to move may take it."""
        if self.status != Status.DRAW_OFFERED:
            raise GameStateError(
                f"There is no draw to claim. status: {self.status}"
            )
        self.status = Status.DRAW_CLAIMED
        logger.info(f"{self.color_to_move.name.lower()} claimed the draw")

    def legal_moves(self) -> list[str]:
        """
        Every legal move for the player to move, in UCI notation.
        ----

        A pawn move onto the final rank gets one entry for every piece type it can promote into.
        """
        if self.status.is_over:
            raise GameStateError(f"Game is over. status: {self.status}")

        legal: list[Move] = []
        for move in candidate_moves(self.position):
            check = dry_run(self.position, move)
            if check.verdict == Verdict.MISSING_PROMOTION:
                legal.extend(replace(move, promote_to=option) for option in PROMOTION_OPTIONS)
            elif check.is_legal:
                legal.append(move)
        return [move.to_uci() for move in legal]


# --- MOVE EXECUTION ---
def try_move(position: Position, move: Move) -> MoveCheck:
    """
    Play the move for the player to move, but only if it is fully legal.
    ---

    1. check the rules (ignoring your own king)
    2. keep a copy of the position, then play the move
    3. does it leave your king in check? --> restore the copy and report the move as illegal.

    A pawn move onto the final rank without a promotion choice is only reported as such when the move would otherwise be legal.
    """
    color = position.color_to_move
    check = check_move(position, move, color)

    if check.verdict == Verdict.MISSING_PROMOTION:
        with_queen = replace(move, promote_to=PieceType.QUEEN)
        return check if dry_run(position, with_queen).is_legal else ILLEGAL

    if not check.is_legal:
        return check

    backup = position.copy()
    position.execute(move, check)
    if is_in_check(position, color):
        position.restore(backup)
        return ILLEGAL
    return check


def dry_run(position: Position, move: Move) -> MoveCheck:
    """Like try_move, but never changes the position: works on a private copy."""
    if check_move(position, move, position.color_to_move).verdict == Verdict.ILLEGAL:
        return ILLEGAL
    return try_move(position.copy(), move)


def candidate_moves(position: Position) -> list[Move]:
    """All (from, to) pairs starting on a square of the player to move."""
    own_squares = position.board.locate_color(position.color_to_move)
    return [
        Move(from_square, to_square)
        for from_square in own_squares
        for to_square in all_squares()
    ]


# --- CHECKS FOR ENDING THE GAME ---
def has_legal_reply(position: Position) -> bool:
    """
    Brute force: try every (from, to) pair.
    Promotions default to a queen, the resulting position does not matter here, only whether the move is legal.
    """
    return any(
        dry_run(position, replace(move, promote_to=PieceType.QUEEN)).is_legal
        for move in candidate_moves(position)
    )


def resolve_outcome(position: Position) -> Status:
    """
    Decide how the game continues after a move.
    ---

    1. 150 plies without a capture: forced draw
    2. 100 plies without a capture: a draw is offered, the game can go on
    3. no legal reply: checkmate when in check, stalemate otherwise
    """
    if position.half_move_clock >= FORCED_DRAW_PLIES:
        return Status.DRAW_MOVE_CLOCK

    if position.half_move_clock >= DRAW_OFFER_PLIES:
        return Status.DRAW_OFFERED

    return no_reply_outcome(position) or Status.IN_PROGRESS


def no_reply_outcome(position: Position) -> Optional[Status]:
    """Checkmate or stalemate when the player to move is stuck, None while there is still a legal move."""
    if has_legal_reply(position):
        return None
    if is_in_check(position, position.color_to_move):
        return Status.CHECKMATE
    return Status.STALEMATE
