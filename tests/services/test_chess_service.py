"""Unit tests for src/services/chess_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.chess.fen import STARTING_FEN
from src.core.exceptions import (
    GameStateError,
    IllegalMoveError,
    MissingPromotionError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.services.chess_service import (
    ChessService,
    ClaimDrawRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GetGameRequest,
    LegalMovesRequest,
    MoveRequest,
)

PROMOTION_FEN = "4k3/P7/8/8/8/8/8/4K3 w - - 0 1"
DRAW_CLOCK_FEN = "4k3/8/8/8/8/8/8/R3K3 w - - 99 60"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository)


def new_game_id(service: ChessService, starting_fen: str | None = None) -> UUID:
    return service.create_new_game(CreateGameRequest(starting_fen=starting_fen)).game_id


# --- CREATE / GET / DELETE ----
def test_create_a_new_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    assert response.fen_state == STARTING_FEN
    assert response.status == Status.IN_PROGRESS
    assert response.color_to_move == Color.WHITE
    assert not response.in_check
    assert response.winner is None
    assert mock_repository.get_game(response.game_id) == GameModel(
        current_fen=STARTING_FEN, status="in progress"
    )


def test_create_game_from_fen(service: ChessService) -> None:
    response = service.create_new_game(CreateGameRequest(starting_fen=PROMOTION_FEN))
    assert response.fen_state == PROMOTION_FEN


def test_create_game_from_finished_position(service: ChessService) -> None:
    response = service.create_new_game(
        CreateGameRequest(starting_fen="R5k1/5ppp/8/8/8/8/8/6K1 b - - 0 1")
    )
    assert response.status == Status.CHECKMATE
    assert response.winner == Color.WHITE


def test_get_game_state(service: ChessService) -> None:
    game_id = new_game_id(service)
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.game_id == game_id
    assert response.fen_state == STARTING_FEN


def test_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_delete_game(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert mock_repository.get_game(game_id) is None


# --- MOVES ----
def test_make_move(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service)
    response = service.make_move(MoveRequest(game_id=game_id, color=Color.WHITE, move="e2e4"))

    expected_fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 1 1"
    assert response.fen_state == expected_fen
    assert response.color_to_move == Color.BLACK
    assert mock_repository.get_game(game_id).current_fen == expected_fen


def test_not_your_turn(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service)
    with pytest.raises(NotYourTurnError):
        service.make_move(MoveRequest(game_id=game_id, color=Color.BLACK, move="e7e5"))
    assert mock_repository.get_game(game_id).current_fen == STARTING_FEN


@pytest.mark.parametrize(
    "starting_fen, move, error",
    [
        (None, "e2e5", IllegalMoveError),
        (PROMOTION_FEN, "a7a8", MissingPromotionError),
    ],
)
def test_rejected_move_is_not_stored(
    service: ChessService,
    mock_repository: MockRepository,
    starting_fen: str | None,
    move: str,
    error: type[Exception],
) -> None:
    game_id = new_game_id(service, starting_fen)
    before = mock_repository.get_game(game_id)
    with pytest.raises(error):
        service.make_move(MoveRequest(game_id=game_id, color=Color.WHITE, move=move))
    assert mock_repository.get_game(game_id) == before


def test_checkmate_response(service: ChessService) -> None:
    game_id = new_game_id(service)
    for color, move in [
        (Color.WHITE, "f2f3"),
        (Color.BLACK, "e7e5"),
        (Color.WHITE, "g2g4"),
    ]:
        service.make_move(MoveRequest(game_id=game_id, color=color, move=move))

    response = service.make_move(MoveRequest(game_id=game_id, color=Color.BLACK, move="d8h4"))
    assert response.status == Status.CHECKMATE
    assert response.winner == Color.BLACK
    assert response.in_check


# --- LEGAL MOVES / DRAWS ----
def test_legal_moves(service: ChessService) -> None:
    game_id = new_game_id(service, PROMOTION_FEN)
    response = service.legal_moves(LegalMovesRequest(game_id=game_id, color=Color.WHITE))
    assert response.color == Color.WHITE
    assert "a7a8q" in response.legal_moves
    assert "e1d1" in response.legal_moves


def test_legal_moves_not_your_turn(service: ChessService) -> None:
    game_id = new_game_id(service)
    with pytest.raises(NotYourTurnError):
        service.legal_moves(LegalMovesRequest(game_id=game_id, color=Color.BLACK))


def test_claim_draw(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service, DRAW_CLOCK_FEN)
    response = service.make_move(MoveRequest(game_id=game_id, color=Color.WHITE, move="a1a2"))
    assert response.status == Status.DRAW_OFFERED

    response = service.claim_draw(ClaimDrawRequest(game_id=game_id, color=Color.BLACK))
    assert response.status == Status.DRAW_CLAIMED
    assert mock_repository.get_game(game_id).status == "draw claimed"


def test_claim_draw_without_offer(service: ChessService) -> None:
    game_id = new_game_id(service)
    with pytest.raises(GameStateError):
        service.claim_draw(ClaimDrawRequest(game_id=game_id, color=Color.WHITE))
