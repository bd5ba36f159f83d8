"""Store configuration (environment variables and config/.env)."""

from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# snippets_hub/core/config.py -> корень проекта -> config/.env
BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE = BASE_DIR / "config" / ".env"


class Settings(BaseSettings):
    """
    Настройки хранилища.

    Приоритет: переменные окружения > config/.env > значения по умолчанию.
    Пример: DATABASE_URL=sqlite+aiosqlite:////tmp/hub.sqlite python init_db.py
    """

    # Встроенная SQLite база (FTS5 + триггеры поискового зеркала)
    DATABASE_URL: str = "sqlite+aiosqlite:///./snippets_hub.sqlite"
    DATABASE_ECHO: bool = False

    APP_NAME: str = "SnippetsHub"
    DEBUG: bool = False

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "simple"] = "json"

    model_config = SettingsConfigDict(env_file=str(ENV_FILE), env_file_encoding="utf-8", case_sensitive=True)

    @field_validator("LOG_LEVEL", "LOG_FORMAT", mode="before")
    @classmethod
    def _normalize_case(cls, value: str, info) -> str:
        if not isinstance(value, str):
            return value
        return value.upper() if info.field_name == "LOG_LEVEL" else value.lower()

    @field_validator("DATABASE_URL")
    @classmethod
    def _require_sqlite(cls, value: str) -> str:
        if not value.startswith("sqlite"):
            raise ValueError("DATABASE_URL must point to an embedded SQLite database (sqlite+aiosqlite://...)")
        return value


settings = Settings()
