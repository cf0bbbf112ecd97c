"""Fakes for the 42 API shared by the test modules."""

from __future__ import annotations

from typing import Any, Callable, Union

import httpx

TOKEN_URL = "https://auth.example.com/oauth/token"
USERS_URL_TEMPLATE = "https://api.example.com/v2/cursus/21/cursus_users?page={page}"

ScriptedResponse = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


def cursus_user(login: str, blackholed_at: Any = "2023-08-29T23:58:16.887Z") -> dict:
    return {
        "id": sum(map(ord, login)),
        "blackholed_at": blackholed_at,
        "user": {"login": login, "email": f"{login}@student.42.fr"},
    }


def page_response(items: list, *, page: int, total: int, per_page: int = 100) -> httpx.Response:
    return httpx.Response(
        200,
        json=items,
        headers={"X-Page": str(page), "X-Total": str(total), "X-Per-Page": str(per_page)},
    )


class FakeFtApi:
    """In-memory stand-in for the 42 token and cursus_users endpoints."""

    def __init__(self, users: list[dict] | None = None, per_page: int = 100) -> None:
        self.users = list(users or [])
        self.per_page = per_page
        self.token_requests: list[httpx.Request] = []
        self.user_requests: list[httpx.Request] = []
        self.token_responses: list[httpx.Response] = []
        self.user_responses: list[ScriptedResponse] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            self.token_requests.append(request)
            if self.token_responses:
                return self.token_responses.pop(0)
            return httpx.Response(
                200,
                json={
                    "access_token": f"token-{len(self.token_requests)}",
                    "token_type": "bearer",
                    "expires_in": 7200,
                },
            )

        self.user_requests.append(request)
        if self.user_responses:
            scripted = self.user_responses.pop(0)
            return scripted(request) if callable(scripted) else scripted

        return self.serve_page(request)

    def serve_page(self, request: httpx.Request) -> httpx.Response:
        page = int(request.url.params["page"])
        start = (page - 1) * self.per_page
        return page_response(
            self.users[start : start + self.per_page],
            page=page,
            total=len(self.users),
            per_page=self.per_page,
        )

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requested_pages(self) -> list[int]:
        return [int(request.url.params["page"]) for request in self.user_requests]

    def authorization_headers(self) -> list[str | None]:
        return [request.headers.get("Authorization") for request in self.user_requests]


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
