"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.chess.fen import is_valid_fen
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Status


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        """The FEN must describe a position the rules can work with."""
        if value is None:
            return value

        if not is_valid_fen(value):
            raise InvalidRequestError(f"Invalid FEN string: {value!r}")
        return value


class MoveRequest(BaseModel):
    game_id: UUID
    color: Color
    move: str

    @field_validator("move")
    @classmethod
    def validate_move(cls, value: str) -> str:
        """<from square><to square>[promotion piece], ex. e2e4 or e7e8q"""

        def _is_square_name(value: str) -> bool:
            return value[0].isalpha() and value[1].isnumeric()

        if not (4 <= len(value) <= 5):
            raise InvalidRequestError(
                f"Cannot interpret move: {value!r}. Expected 4 or 5 characters."
            )
        if not (_is_square_name(value[:2]) and _is_square_name(value[2:4])):
            raise InvalidRequestError(
                f"Cannot interpret move: {value!r} as two square names."
            )
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    color: Color


class ClaimDrawRequest(BaseModel):
    game_id: UUID
    color: Color


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    fen_state: str
    color_to_move: Color
    status: Status
    in_check: bool
    winner: Optional[Color] = None


class LegalMovesResponse(BaseModel):
    game_id: UUID
    color: Color
    legal_moves: list[str]
