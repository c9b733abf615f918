"""Tests for config models."""

import pytest
from pydantic import ValidationError

from tableau_projects.config.models import CLIConfig, ServerProfile


class TestServerProfile:
    def test_create_with_token(self):
        p = ServerProfile(name="test", url="https://tab:443", site_id="s-1", token="tok")
        assert p.name == "test"
        assert p.url == "https://tab:443"
        assert p.token == "tok"
        assert p.auth_configured is True

    def test_create_no_auth(self):
        p = ServerProfile(name="test", url="https://tab")
        assert p.auth_configured is False

    def test_defaults(self):
        p = ServerProfile(name="test", url="https://tab")
        assert p.verify_ssl is True
        assert p.timeout == 30.0
        assert p.api_version == "3.19"
        assert p.site_id == ""
        assert p.page_size is None
        assert p.settle_attempts == 5
        assert p.settle_max_delay == 10.0

    def test_api_base(self):
        p = ServerProfile(name="test", url="https://tab/", site_id="abc", api_version="3.21")
        assert p.api_base == "https://tab/api/3.21/sites/abc"

    def test_url_must_start_with_http(self):
        with pytest.raises(ValidationError, match="URL must start with http"):
            ServerProfile(name="test", url="ftp://tab")

    def test_url_strips_trailing_slash(self):
        p = ServerProfile(name="test", url="https://tab/")
        assert p.url == "https://tab"

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            ServerProfile(name="test", url="https://tab", timeout=0)

    def test_timeout_max_600(self):
        with pytest.raises(ValidationError):
            ServerProfile(name="test", url="https://tab", timeout=601)

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            ServerProfile(name="test", url="https://tab", page_size=0)
        with pytest.raises(ValidationError):
            ServerProfile(name="test", url="https://tab", page_size=1001)

    def test_settle_attempts_may_be_zero(self):
        p = ServerProfile(name="test", url="https://tab", settle_attempts=0)
        assert p.settle_attempts == 0

    def test_settle_attempts_not_negative(self):
        with pytest.raises(ValidationError):
            ServerProfile(name="test", url="https://tab", settle_attempts=-1)


class TestCLIConfig:
    def test_empty_config(self):
        c = CLIConfig()
        assert c.default_profile is None
        assert c.default_format == "table"
        assert c.profiles == {}

    def test_config_with_profiles(self):
        p = ServerProfile(name="dev", url="https://dev")
        c = CLIConfig(default_profile="dev", profiles={"dev": p})
        assert c.default_profile == "dev"
        assert "dev" in c.profiles
