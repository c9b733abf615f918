"""Pydantic models for CLI configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from tableau_projects.config.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_SETTLE_ATTEMPTS,
    DEFAULT_SETTLE_MAX_DELAY,
    DEFAULT_TIMEOUT,
)


class ServerProfile(BaseModel):
    """A named Tableau server connection profile."""

    name: str
    url: str = Field(description="Server base URL, e.g. https://tableau.example.com")
    site_id: str = Field(default="", description="Site LUID the projects live in")
    api_version: str = Field(
        default=DEFAULT_API_VERSION, description="REST API version",
    )
    token: str | None = Field(
        default=None, description="Session credentials token (X-Tableau-Auth)",
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Request timeout in seconds",
    )
    page_size: int | None = Field(
        default=None, gt=0, le=1000, description="Items requested per listing page",
    )
    settle_attempts: int = Field(
        default=DEFAULT_SETTLE_ATTEMPTS, ge=0, le=50,
        description="Read-back attempts after create (0 disables)",
    )
    settle_max_delay: float = Field(
        default=DEFAULT_SETTLE_MAX_DELAY, ge=0, le=600,
        description="Total seconds to keep polling after create",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def auth_configured(self) -> bool:
        return self.token is not None

    @property
    def api_base(self) -> str:
        """Site-scoped REST root every project path is relative to."""
        return f"{self.url}/api/{self.api_version}/sites/{self.site_id}"


class CLIConfig(BaseModel):
    """Root configuration model."""

    default_profile: str | None = None
    default_format: str = "table"
    profiles: dict[str, ServerProfile] = Field(default_factory=dict)
