"""Database tables / schema"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.core.shared_types import Status

# Longest FEN: 8 rows of 8 characters, plus separators and the other 5 fields
MAX_FEN_LENGTH = 100


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """Only the latest position is kept, no move history."""

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    current_fen: Mapped[str] = mapped_column(String(MAX_FEN_LENGTH))
    status: Mapped[str] = mapped_column(String(20), default=Status.IN_PROGRESS.value)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
