"""HTTP utilities providing retry/backoff semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

SendFunc = Callable[[], Awaitable[httpx.Response]]
FailureHook = Callable[[Optional[httpx.Response]], Awaitable[None]]
SleepFunc = Callable[[float], Awaitable[None]]


class TransientFetchError(Exception):
    """A single failed attempt: non-2xx status or a transport failure."""

    def __init__(self, url: str, status_code: int | None = None, detail: str = "") -> None:
        self.url = url
        self.status_code = status_code
        message = f"request to {url} failed"
        if status_code is not None:
            message += f" with status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class ConnectionExhaustedError(Exception):
    """Raised when every attempt allowed by the retry budget has failed."""

    def __init__(self, url: str, attempts: int) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(f"server is not connected: {url} ({attempts} failed attempts)")


class RetryConfig:
    def __init__(self, *, attempts: int = 3, backoff_seconds: float = 300.0) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds


async def request_with_retry(
    send: SendFunc,
    *,
    url: str,
    retry_config: RetryConfig | None = None,
    on_failure: FailureHook | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> httpx.Response:
    """
    Call ``send`` until it yields a 2xx response or the budget is spent.

    ``send`` is invoked afresh for every attempt so it can rebuild the request
    (for example with a refreshed token). Between attempts ``on_failure`` is
    awaited with the failed response (``None`` for transport errors) and then
    the call sleeps for a flat ``backoff_seconds``. No sleep follows the final
    failure.
    """
    config = retry_config or RetryConfig()
    last_error: TransientFetchError | None = None

    for attempt in range(1, config.attempts + 1):
        response: httpx.Response | None = None
        try:
            response = await send()
        except httpx.TransportError as exc:
            last_error = TransientFetchError(url, detail=str(exc) or type(exc).__name__)
        else:
            if response.is_success:
                return response
            last_error = TransientFetchError(url, status_code=response.status_code)

        logger.warning(
            "Request attempt failed",
            extra={
                "url": url,
                "attempt": attempt,
                "max_attempts": config.attempts,
                "error": str(last_error),
            },
        )
        if attempt == config.attempts:
            break
        if on_failure is not None:
            await on_failure(response)
        await sleep(config.backoff_seconds)

    raise ConnectionExhaustedError(url, config.attempts) from last_error


__all__ = [
    "ConnectionExhaustedError",
    "RetryConfig",
    "TransientFetchError",
    "request_with_retry",
]
