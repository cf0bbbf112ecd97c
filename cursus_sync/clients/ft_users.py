"""
Client for the paginated 42 cursus users collection.

Each page request carries the cached bearer token, is retried on failure with
a flat backoff, and refreshes the token when the API answers 401.
"""

from __future__ import annotations

import asyncio
import logging
import math
from http import HTTPStatus
from typing import Any, Dict, List, Optional

import httpx

from cursus_sync.clients.ft_auth import FtTokenProvider
from cursus_sync.core.config import UsersApiSettings
from cursus_sync.models.users import UserPage
from cursus_sync.utils.http import RetryConfig, SleepFunc, request_with_retry

logger = logging.getLogger(__name__)


class MalformedPageError(Exception):
    """Raised when a successful response is missing its body or pagination headers."""


class CursusUsersClient:
    """Fetch pages of cursus users with retry and token refresh."""

    def __init__(
        self,
        settings: UsersApiSettings,
        token_provider: FtTokenProvider,
        http_client: httpx.AsyncClient,
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._tokens = token_provider
        self._http = http_client
        self._sleep = sleep
        self._retry = RetryConfig(
            attempts=settings.retry_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )

    async def fetch(self, page: int) -> UserPage:
        """Fetch one page, raising ``ConnectionExhaustedError`` when retries run out."""
        url = self._settings.format_url(page)
        logger.info("Requesting users page", extra={"page": page})

        async def send() -> httpx.Response:
            token = await self._tokens.get()
            return await self._http.get(url, headers={"Authorization": f"Bearer {token}"})

        response = await request_with_retry(
            send,
            url=url,
            retry_config=self._retry,
            on_failure=self._handle_failure,
            sleep=self._sleep,
        )
        return self._parse_page(response)

    async def _handle_failure(self, response: Optional[httpx.Response]) -> None:
        if response is not None and response.status_code == HTTPStatus.UNAUTHORIZED:
            await self._tokens.refresh()

    def _parse_page(self, response: httpx.Response) -> UserPage:
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedPageError("users page body is not valid JSON") from exc
        if not isinstance(body, list) or not all(isinstance(item, dict) for item in body):
            raise MalformedPageError("users page body is not a JSON array of objects")

        current_page = self._int_header(response, self._settings.page_header)
        total_pages = self._total_pages(response)
        items: List[Dict[str, Any]] = body

        logger.info(
            "Parsed users page",
            extra={
                "current_page": current_page,
                "total_pages": total_pages,
                "items": len(items),
            },
        )
        return UserPage(items=items, total_pages=total_pages, current_page=current_page)

    def _total_pages(self, response: httpx.Response) -> int:
        total = self._int_header(response, self._settings.total_header)
        per_page_raw = response.headers.get(self._settings.per_page_header)
        if per_page_raw is None:
            return total
        per_page = self._to_int(per_page_raw, self._settings.per_page_header)
        if per_page <= 0:
            return 0
        return math.ceil(total / per_page)

    def _int_header(self, response: httpx.Response, name: str) -> int:
        raw = response.headers.get(name)
        if raw is None:
            raise MalformedPageError(f"missing pagination header {name!r}")
        return self._to_int(raw, name)

    @staticmethod
    def _to_int(raw: str, name: str) -> int:
        try:
            return int(raw)
        except ValueError as exc:
            raise MalformedPageError(
                f"pagination header {name!r} is not an integer: {raw!r}"
            ) from exc


__all__ = ["CursusUsersClient", "MalformedPageError"]
