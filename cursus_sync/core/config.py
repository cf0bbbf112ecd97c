"""
Application configuration models and helpers.

Centralizes settings for the sync job: 42 API credentials, the paginated
users endpoint, retry policy and the local store.
"""

from functools import lru_cache
from pathlib import Path

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file into the environment."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class FtTokenSettings(BaseSettings):
    """OAuth client-credentials configuration for the 42 intra API."""

    model_config = SettingsConfigDict(frozen=True)

    token_url: AnyHttpUrl = Field(
        "https://api.intra.42.fr/oauth/token", validation_alias="FT_TOKEN_URL"
    )
    client_id: str = Field(..., validation_alias="FT_CLIENT_ID")
    client_secret: str = Field(..., validation_alias="FT_CLIENT_SECRET")
    grant_type: str = Field("client_credentials", validation_alias="FT_GRANT_TYPE")
    scope: str = Field("public", validation_alias="FT_SCOPE")


class UsersApiSettings(BaseSettings):
    """Paginated users endpoint and the retry policy applied to it."""

    model_config = SettingsConfigDict(frozen=True)

    url_template: str = Field(
        ...,
        validation_alias="FT_USERS_URL_TEMPLATE",
        description="Collection URL with a '{page}' placeholder for the page number.",
    )
    page_header: str = Field("X-Page", validation_alias="FT_PAGE_HEADER")
    total_header: str = Field("X-Total", validation_alias="FT_TOTAL_HEADER")
    per_page_header: str = Field("X-Per-Page", validation_alias="FT_PER_PAGE_HEADER")
    retry_attempts: int = Field(3, ge=1, validation_alias="SYNC_RETRY_ATTEMPTS")
    retry_backoff_seconds: float = Field(
        300.0, ge=0, validation_alias="SYNC_RETRY_BACKOFF_SECONDS"
    )
    timeout_seconds: float = Field(30.0, gt=0, validation_alias="SYNC_HTTP_TIMEOUT")

    @field_validator("url_template")
    @classmethod
    def _require_page_placeholder(cls, value: str) -> str:
        if "{page}" not in value:
            raise ValueError("url_template must contain a '{page}' placeholder")
        return value

    def format_url(self, page: int) -> str:
        return self.url_template.replace("{page}", str(page))


class StorageSettings(BaseSettings):
    """Location of the SQLite database holding synced users."""

    model_config = SettingsConfigDict(frozen=True)

    db_path: str = Field("data/cursus_sync.db", validation_alias="SYNC_DB_PATH")


class AppSettings(BaseSettings):
    """Root settings object for the sync job."""

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    ft_token: FtTokenSettings = Field(default_factory=FtTokenSettings)
    users_api: UsersApiSettings = Field(default_factory=UsersApiSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "FtTokenSettings",
    "StorageSettings",
    "UsersApiSettings",
    "get_settings",
]
