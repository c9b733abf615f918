"""Server HTTP transport."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from tableau_projects.client.auth import resolve_auth
from tableau_projects.client.errors import (
    APIError,
    AuthenticationError,
    ServerConnectionError,
)
from tableau_projects.config.models import ServerProfile
from tableau_projects.models.common import ErrorDetail

logger = logging.getLogger(__name__)


class ServerClient:
    """Synchronous HTTP transport for the site-scoped Tableau REST API.

    Performs no retries; callers decide whether a failure is worth repeating.
    """

    def __init__(self, profile: ServerProfile) -> None:
        self.profile = profile
        self.base_url = profile.api_base
        auth = resolve_auth(profile)
        if not profile.verify_ssl:
            print("Warning: TLS certificate verification is disabled", file=sys.stderr)
        transport = httpx.HTTPTransport(retries=0)
        self._client = httpx.Client(
            base_url=self.base_url,
            auth=auth,
            verify=profile.verify_ssl,
            timeout=profile.timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ServerClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        detail = _error_detail(response)
        if status in (401, 403):
            msg = "Authentication failed. Check your session token."
            if detail:
                msg += f" ({detail})"
            raise AuthenticationError(msg)
        raise APIError(status, detail)

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise ServerConnectionError(
                f"Cannot connect to server at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise ServerConnectionError(
                f"Request to {self.profile.url} timed out: {exc}"
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise ServerConnectionError(
                f"Invalid URL for server at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise ServerConnectionError(
                f"Request to {self.profile.url} failed: {exc}"
            ) from exc
        return self._handle_response(response)

    def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: dict[str, Any] | None = None,
    ) -> bytes:
        """Run one request and return the raw response body."""
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body
        if params:
            kwargs["params"] = params
        return self.request(method, path, **kwargs).content


def _error_detail(response: httpx.Response) -> str:
    """Pull the human readable part out of a Tableau error body."""
    try:
        error = ErrorDetail.model_validate(response.json()["error"])
    except (
        json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError,
        PydanticValidationError,
    ):
        return response.text
    text = ": ".join(part for part in (error.summary, error.detail) if part) or response.text
    return f"{text} (code {error.code})" if error.code else text
