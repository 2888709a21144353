"""Runtime settings and logging setup shared by the fetchers, CLI and API."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ROOT_DIR = Path(__file__).resolve().parent.parent

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Settings loaded from environment variables and an optional ``.env`` file."""

    # Provider credentials
    TICKETMASTER_API_KEY: SecretStr | None = None
    EVENTBRITE_API_KEY: SecretStr | None = None

    # Storage
    DATABASE_PATH: Path = ROOT_DIR / "events.db"

    # HTTP behaviour
    HTTP_TIMEOUT: float = 30.0
    FETCH_MAX_RETRIES: int = 3
    TICKETMASTER_MAX_PAGES: int = 1
    GOOGLE_CALENDAR_MAX_RESULTS: int = 50

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(ROOT_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging once for CLI and server entry points."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
