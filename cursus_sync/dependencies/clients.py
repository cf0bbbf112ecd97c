"""
Factory functions that assemble the sync job from settings.

Callers receive the public components only; one ``httpx.AsyncClient`` is
shared by the token provider and the users client for a whole run.
"""

import asyncio
from functools import lru_cache

import httpx

from cursus_sync.clients import CursusUsersClient, FtTokenProvider, SQLiteUserStore
from cursus_sync.core.config import AppSettings, get_settings
from cursus_sync.services import UserRepository, UserSyncService
from cursus_sync.utils.http import SleepFunc


@lru_cache()
def _settings() -> AppSettings:
    """Internal helper to cache settings for client factories."""
    return get_settings()


def build_http_client(settings: AppSettings | None = None) -> httpx.AsyncClient:
    """Create the HTTP client used for one run; the caller owns closing it."""
    settings = settings or _settings()
    return httpx.AsyncClient(timeout=settings.users_api.timeout_seconds)


def get_token_provider(
    http_client: httpx.AsyncClient, settings: AppSettings | None = None
) -> FtTokenProvider:
    """Provide a token provider with its own empty cache."""
    settings = settings or _settings()
    return FtTokenProvider(settings.ft_token, http_client)


def get_user_store(settings: AppSettings | None = None) -> SQLiteUserStore:
    """Provide the SQLite user store."""
    settings = settings or _settings()
    return SQLiteUserStore(settings.storage.db_path)


def get_user_sync_service(
    http_client: httpx.AsyncClient,
    settings: AppSettings | None = None,
    *,
    repository: UserRepository | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> UserSyncService:
    """Build the sync service with freshly constructed collaborators."""
    settings = settings or _settings()
    token_provider = get_token_provider(http_client, settings)
    users_client = CursusUsersClient(
        settings.users_api, token_provider, http_client, sleep=sleep
    )
    return UserSyncService(
        token_provider=token_provider,
        users_client=users_client,
        repository=repository if repository is not None else get_user_store(settings),
    )


__all__ = [
    "build_http_client",
    "get_token_provider",
    "get_user_store",
    "get_user_sync_service",
]
