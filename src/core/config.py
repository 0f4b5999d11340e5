"""Runtime settings, read from the environment."""

import os

from pydantic import BaseModel

ENV_PREFIX = "CHESS_"


class Settings(BaseModel):
    database_url: str = "sqlite:///:memory:"
    log_level: str = "INFO"
    echo_sql: bool = False


def load_settings() -> Settings:
    """Collect CHESS_* environment variables. Pydantic takes care of converting them into the proper types."""
    values = {
        field: os.environ[f"{ENV_PREFIX}{field.upper()}"]
        for field in Settings.model_fields
        if f"{ENV_PREFIX}{field.upper()}" in os.environ
    }
    return Settings(**values)
