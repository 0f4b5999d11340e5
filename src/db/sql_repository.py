"""GameRepository backed by a SQL database (SQLAlchemy ORM)"""

from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame


class SQLGameRepository:
    """One row in the games table per game. Every write commits straight away."""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        row = self.db.get(DBGame, game_id)
        return _to_model(row) if row else None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        row = DBGame(id=uuid4())
        _write_row(row, game)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return _to_model(row), row.id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        row = self.db.get(DBGame, game_id)
        if row is None:
            return None
        _write_row(row, game)
        self.db.commit()
        self.db.refresh(row)
        return _to_model(row)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        row = self.db.get(DBGame, game_id)
        if row is None:
            return None
        removed = _to_model(row)
        self.db.delete(row)
        self.db.commit()
        return removed


def _write_row(row: DBGame, game: GameModel) -> None:
    """Copy the transport model onto the table row (id + timestamps are managed by the table)"""
    row.current_fen = game.current_fen
    row.status = game.status


def _to_model(row: DBGame) -> GameModel:
    return GameModel(current_fen=row.current_fen, status=row.status)
