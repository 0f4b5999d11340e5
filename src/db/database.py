"""Generate database sessions"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Settings, load_settings
from src.core.logging import setup_logging
from src.db.schema import Base


def init_database(settings: Optional[Settings] = None) -> sessionmaker[Session]:
    """
    Application start-up: configure logging, connect to the database and make sure all tables exist.
    Without explicit settings, they are read from the CHESS_* environment variables.
    """
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    engine = create_engine(settings.database_url, echo=settings.echo_sql)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """One session per request, closed again afterwards."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
