"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

from uuid import UUID

from loguru import logger

from src.api.models import (
    ClaimDrawRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
)
from src.chess.game import Game
from src.core.exceptions import NotYourTurnError, RepositoryError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.db.repository import GameRepository


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a new game, from the standard starting position unless a FEN string is supplied."""

        # Create a new Game, and convert into GameModel
        new_game = (
            Game.from_fen(request.starting_fen)
            if request.starting_fen
            else Game.new_game()
        )
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        _, game_id = self.repo.create_game(created_game_data)
        logger.info(f"Created game {game_id}")

        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves."""
        game = Game.from_model(self._fetch_game(request.game_id))
        self._assert_your_turn(game, request.color)
        return LegalMovesResponse(
            game_id=request.game_id,
            color=request.color,
            legal_moves=game.legal_moves(),
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. Errors raised by the Game (illegal move, missing promotion) are propagated, nothing gets stored then."""
        game = Game.from_model(self._fetch_game(request.game_id))
        self._assert_your_turn(game, request.color)

        game.make_move(request.move)

        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def claim_draw(self, request: ClaimDrawRequest) -> GameResponse:
        """Take the draw offered by the move clock."""
        game = Game.from_model(self._fetch_game(request.game_id))
        self._assert_your_turn(game, request.color)

        game.claim_draw()

        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game into a GameResponse (for game with given ID.)"""
        winner = game.winner
        return GameResponse(
            game_id=game_id,
            fen_state=game.to_fen(),
            color_to_move=Color[game.color_to_move.name],
            status=game.status,
            in_check=game.is_check(),
            winner=Color[winner.name] if winner else None,
        )

    def _assert_your_turn(self, game: Game, color: Color) -> None:
        """You must wait for your turn before calculating legal moves / making a move."""
        if game.color_to_move.name != color.name:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {game.color_to_move.name.lower()} to make a move first."
            )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
