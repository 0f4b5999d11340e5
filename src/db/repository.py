"""Where games are kept between two requests. The Service only depends on this Protocol."""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """
    Store of game records, keyed by game ID.

    A record is only the current FEN + status. Lookups of unknown IDs return None, it is up to the caller to decide if that is an error.
    """

    def get_game(self, game_id: UUID) -> GameModel | None: ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Returns the stored record and the ID it got."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace position and status after a move / claimed draw."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Returns the removed record (if there was one)."""
        ...
