"""
Configuration - settings for the scheduler service.

Values come from TODO_* environment variables, then a local .env file,
then the defaults below.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_DIR = Path(__file__).resolve().parent.parent

DEFAULT_PORT = 7540
DEFAULT_DB_FILE = "scheduler.db"

# Task list settings
TASKS_LIMIT = 50
SEARCH_DATE_FORMAT = "%d.%m.%Y"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TODO_", env_file=".env", extra="ignore")

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    dbfile: str = ""
    webdir: str = "web"

    @property
    def db_path(self) -> Path:
        if self.dbfile:
            return Path(self.dbfile)
        return PROJECT_DIR / DEFAULT_DB_FILE

    @property
    def web_path(self) -> Path:
        path = Path(self.webdir)
        return path if path.is_absolute() else PROJECT_DIR / path


def get_settings() -> Settings:
    """Reads the environment on every call so tests can override it."""
    return Settings()
