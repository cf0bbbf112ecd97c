from __future__ import annotations

import httpx
import pytest

from cursus_sync import main as entrypoint
from cursus_sync.clients.sqlite_store import SQLiteUserStore
from cursus_sync.core.config import AppSettings, UsersApiSettings
from fakes import USERS_URL_TEMPLATE, FakeFtApi, cursus_user


@pytest.fixture
def fast_settings(app_settings: AppSettings) -> AppSettings:
    users_api = UsersApiSettings(
        FT_USERS_URL_TEMPLATE=USERS_URL_TEMPLATE, SYNC_RETRY_BACKOFF_SECONDS=0
    )
    return app_settings.model_copy(update={"users_api": users_api})


def _wire(monkeypatch: pytest.MonkeyPatch, settings: AppSettings, api: FakeFtApi) -> None:
    monkeypatch.setattr(entrypoint, "get_settings", lambda: settings)
    monkeypatch.setattr(entrypoint, "build_http_client", lambda _settings: api.client())


def test_main_syncs_users_into_the_store(monkeypatch, fast_settings) -> None:
    api = FakeFtApi(users=[cursus_user("alice"), cursus_user("bob", None)])
    _wire(monkeypatch, fast_settings, api)

    assert entrypoint.main() == entrypoint.EXIT_OK

    store = SQLiteUserStore(fast_settings.storage.db_path)
    assert store.get("alice") is not None
    assert store.get("bob").flagged_at is None


def test_main_reports_fatal_errors_with_exit_code(monkeypatch, fast_settings) -> None:
    api = FakeFtApi(users=[cursus_user("alice")])
    api.user_responses.extend(httpx.Response(503) for _ in range(3))
    _wire(monkeypatch, fast_settings, api)

    assert entrypoint.main() == entrypoint.EXIT_FAILURE
    assert len(api.user_requests) == 3


def test_cli_exits_with_main_status(monkeypatch) -> None:
    monkeypatch.setattr(entrypoint, "main", lambda: entrypoint.EXIT_FAILURE)

    with pytest.raises(SystemExit) as excinfo:
        entrypoint.cli()

    assert excinfo.value.code == entrypoint.EXIT_FAILURE
