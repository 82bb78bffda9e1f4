"""Authentication for the Capella V4 API."""

from __future__ import annotations

from collections.abc import Generator

import httpx


class BearerTokenAuth(httpx.Auth):
    """Authenticate with a Capella API key token (Authorization: Bearer header)."""

    def __init__(self, token: str) -> None:
        self.token = token

    def auth_flow(
        self, request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


def resolve_auth(token: str | None) -> httpx.Auth | None:
    """Build the auth flow for a credential, or None for anonymous calls."""
    if token:
        return BearerTokenAuth(token)
    return None
