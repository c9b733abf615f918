"""Authentication for the Tableau REST API."""

from __future__ import annotations

from collections.abc import Generator

import httpx

from tableau_projects.config.models import ServerProfile


class SessionTokenAuth(httpx.Auth):
    """Attach a signed-in session token (X-Tableau-Auth header)."""

    def __init__(self, token: str) -> None:
        self.token = token

    def auth_flow(
        self, request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["X-Tableau-Auth"] = self.token
        yield request


def resolve_auth(profile: ServerProfile) -> httpx.Auth | None:
    """Resolve authentication from a server profile."""
    if profile.token:
        return SessionTokenAuth(profile.token)
    return None
