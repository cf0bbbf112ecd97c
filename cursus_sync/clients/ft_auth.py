"""
42 intra OAuth utilities.

Acquires an application token with the client-credentials grant and keeps it
cached for the lifetime of the provider.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

import httpx

from cursus_sync.core.config import FtTokenSettings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"


class AuthError(Exception):
    """Raised when the token endpoint refuses the request or returns no token."""


class FtTokenProvider:
    """Fetch, cache and refresh the bearer token used against the 42 API."""

    def __init__(self, settings: FtTokenSettings, http_client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http_client
        self._token: str | None = None

    async def get(self) -> str:
        """Return the cached token, fetching one on first use."""
        if self._token is None:
            self._token = await self._fetch_token()
        return self._token

    async def refresh(self) -> str:
        """Discard the cached token and fetch a new one."""
        logger.info("Refreshing 42 API token")
        self._token = await self._fetch_token()
        return self._token

    async def _fetch_token(self) -> str:
        logger.info("Fetching 42 API token")
        payload = {
            "client_secret": self._settings.client_secret,
            "client_id": self._settings.client_id,
            "grant_type": self._settings.grant_type,
            "scope": self._settings.scope,
        }
        try:
            response = await self._http.post(str(self._settings.token_url), data=payload)
        except httpx.HTTPError as exc:
            raise AuthError(f"token endpoint unreachable: {exc}") from exc

        if response.status_code != HTTPStatus.OK:
            logger.error(
                "Token request rejected", extra={"status_code": response.status_code}
            )
            raise AuthError(f"server is not connected: {response.status_code}")

        try:
            token_payload = response.json()
        except ValueError as exc:
            raise AuthError("token endpoint returned a non-JSON body") from exc

        access_token = None
        if isinstance(token_payload, dict):
            access_token = token_payload.get(ACCESS_TOKEN_KEY)
        if not access_token or not isinstance(access_token, str):
            raise AuthError("access token is not found")

        logger.info("Fetched 42 API token")
        return access_token


__all__ = ["AuthError", "FtTokenProvider"]
