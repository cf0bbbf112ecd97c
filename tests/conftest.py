"""Pytest configuration shared across the suite."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path

import pytest

from cursus_sync.core.config import (
    AppSettings,
    FtTokenSettings,
    StorageSettings,
    UsersApiSettings,
)
from fakes import TOKEN_URL, USERS_URL_TEMPLATE, FakeFtApi, SleepRecorder


@pytest.fixture
def fake_api() -> FakeFtApi:
    return FakeFtApi()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def token_settings() -> FtTokenSettings:
    return FtTokenSettings(
        FT_TOKEN_URL=TOKEN_URL,
        FT_CLIENT_ID="client-id",
        FT_CLIENT_SECRET="client-secret",
    )


@pytest.fixture
def users_settings() -> UsersApiSettings:
    return UsersApiSettings(FT_USERS_URL_TEMPLATE=USERS_URL_TEMPLATE)


@pytest.fixture
def app_settings(
    tmp_path: Path, token_settings: FtTokenSettings, users_settings: UsersApiSettings
) -> AppSettings:
    return AppSettings(
        ft_token=token_settings,
        users_api=users_settings,
        storage=StorageSettings(SYNC_DB_PATH=str(tmp_path / "db" / "users.db")),
    )
