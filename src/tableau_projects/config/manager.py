"""Configuration manager — read/write TOML config, resolve profiles."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from tableau_projects.client.errors import ConfigurationError
from tableau_projects.config.constants import (
    CONFIG_FILE,
    DEFAULT_API_VERSION,
    DEFAULT_SETTLE_ATTEMPTS,
    DEFAULT_SETTLE_MAX_DELAY,
    DEFAULT_TIMEOUT,
    ENV_AUTH_TOKEN,
    ENV_PROFILE,
    ENV_SERVER_URL,
    ENV_SITE_ID,
)
from tableau_projects.config.models import CLIConfig, ServerProfile

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

# Profile fields dropped on save when they hold their default value
_PROFILE_DEFAULTS: dict[str, Any] = {
    "api_version": DEFAULT_API_VERSION,
    "verify_ssl": True,
    "timeout": DEFAULT_TIMEOUT,
    "settle_attempts": DEFAULT_SETTLE_ATTEMPTS,
    "settle_max_delay": DEFAULT_SETTLE_MAX_DELAY,
}


class ConfigManager:
    """Manages CLI configuration on disk and resolves server profiles."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or CONFIG_FILE
        self._config: CLIConfig | None = None

    @property
    def config(self) -> CLIConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> CLIConfig:
        if not self.config_path.exists():
            return CLIConfig()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
            profiles: dict[str, ServerProfile] = {}
            for name, prof_data in data.get("profiles", {}).items():
                profiles[name] = ServerProfile(name=name, **prof_data)
        except (tomllib.TOMLDecodeError, PydanticValidationError) as exc:
            raise ConfigurationError(
                f"Invalid config file {self.config_path}: {exc}"
            ) from exc
        return CLIConfig(
            default_profile=data.get("default_profile"),
            default_format=data.get("default_format", "table"),
            profiles=profiles,
        )

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        # Secure directory permissions (owner-only)
        os.chmod(self.config_path.parent, 0o700)
        data: dict[str, Any] = {}
        if self.config.default_profile:
            data["default_profile"] = self.config.default_profile
        if self.config.default_format != "table":
            data["default_format"] = self.config.default_format
        if self.config.profiles:
            data["profiles"] = {}
            for name, profile in self.config.profiles.items():
                prof_dict = profile.model_dump(exclude={"name"}, exclude_none=True)
                for key, default in _PROFILE_DEFAULTS.items():
                    if prof_dict.get(key) == default:
                        del prof_dict[key]
                data["profiles"][name] = prof_dict
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.config_path)

    def add_profile(self, profile: ServerProfile) -> None:
        self.config.profiles[profile.name] = profile
        if not self.config.default_profile:
            self.config.default_profile = profile.name
        self.save()

    def remove_profile(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        del self.config.profiles[name]
        if self.config.default_profile == name:
            self.config.default_profile = next(iter(self.config.profiles), None)
        self.save()
        return True

    def set_default(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        self.config.default_profile = name
        self.save()
        return True

    def get_profile(self, name: str | None = None) -> ServerProfile | None:
        if name:
            return self.config.profiles.get(name)
        default = self.config.default_profile
        if default:
            return self.config.profiles.get(default)
        return None

    def resolve_server(
        self,
        profile_name: str | None = None,
        url: str | None = None,
        token: str | None = None,
        site_id: str | None = None,
    ) -> ServerProfile:
        """Resolve the server connection.

        Precedence: CLI flags > env vars > config profile.
        """
        env_profile = os.environ.get(ENV_PROFILE)
        requested = profile_name or env_profile
        profile = self.get_profile(requested)
        if requested and profile is None:
            raise ConfigurationError(f"Profile '{requested}' not found.")

        resolved_url = (
            url or os.environ.get(ENV_SERVER_URL) or (profile.url if profile else None)
        )
        resolved_token = (
            token or os.environ.get(ENV_AUTH_TOKEN) or (profile.token if profile else None)
        )
        resolved_site = (
            site_id or os.environ.get(ENV_SITE_ID) or (profile.site_id if profile else None)
        )

        if not resolved_url:
            raise ConfigurationError(
                "No server URL configured. Use 'tableau-projects config add' or set "
                f"{ENV_SERVER_URL} or pass --url."
            )
        if not resolved_site:
            raise ConfigurationError(
                "No site ID configured. Add one to the profile, set "
                f"{ENV_SITE_ID} or pass --site."
            )

        base = profile.model_dump(exclude={"name", "url", "token", "site_id"}) if profile else {}
        try:
            return ServerProfile(
                name=profile.name if profile else "cli",
                url=resolved_url,
                token=resolved_token,
                site_id=resolved_site,
                **base,
            )
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid server settings: {exc}") from exc
