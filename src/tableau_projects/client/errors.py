"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class TableauError(Exception):
    """Base exception for tableau-projects."""

    exit_code: int = 1


class TransportError(TableauError):
    """The request did not complete with a success status."""

    exit_code = 2


class ServerConnectionError(TransportError):
    """Cannot connect to the server."""


class AuthenticationError(TransportError):
    """Authentication failed (401/403)."""

    exit_code = 3


class APIError(TransportError):
    """Non-success status returned by the REST API."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Server returned {status_code}: {detail}")


class NotFoundError(TableauError):
    """Identifier absent after scanning every page of a listing."""

    exit_code = 4

    def __init__(self, identifier: str, kind: str = "project") -> None:
        self.identifier = identifier
        self.kind = kind
        super().__init__(f"Did not find {kind} ID {identifier}")


class CreatedNotVisibleError(NotFoundError):
    """Create succeeded but the new project never showed up in the listing.

    ``project`` is the entity the server returned from the create. ``state``
    is filled in by whoever records it, so the caller can keep the new ID.
    """

    def __init__(self, project: Any) -> None:
        super().__init__(project.id)
        self.project = project
        self.state: Any = None

    def __str__(self) -> str:
        return (
            f"Created project ID {self.identifier}, but it did not appear in the listing"
        )


class ConfigurationError(TableauError):
    """Missing or invalid configuration."""

    exit_code = 6


class ValidationError(TableauError):
    """Desired attributes rejected before reaching the server."""

    exit_code = 7

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or "Validation error")


class DecodeError(TableauError):
    """Response body or pagination envelope could not be decoded."""

    exit_code = 8


def error_handler(func: F) -> F:
    """Decorator that catches TableauError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except TableauError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
