"""Shared test fixtures."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from tenacity import wait_none

from tableau_projects.client.projects import ProjectsAPI
from tableau_projects.client.server import ServerClient
from tableau_projects.config.manager import ConfigManager
from tableau_projects.config.models import ServerProfile

SERVER = "https://tableau.test"
SITE = "site-1"
BASE = f"{SERVER}/api/3.19/sites/{SITE}"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("TABLEAU_SERVER_URL", "TABLEAU_AUTH_TOKEN", "TABLEAU_SITE_ID", "TABLEAU_PROFILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def sample_profile() -> ServerProfile:
    """Return a sample server profile for testing."""
    return ServerProfile(
        name="test-server",
        url=SERVER,
        site_id=SITE,
        token="session-token-123",
    )


@pytest.fixture
def client(sample_profile: ServerProfile):
    with ServerClient(sample_profile) as c:
        yield c


@pytest.fixture
def api(client: ServerClient) -> ProjectsAPI:
    """ProjectsAPI whose post-create read-back never sleeps."""
    return ProjectsAPI(client, settle_wait=wait_none())


def project_json(
    project_id: str,
    name: str,
    *,
    parent: str = "",
    description: str = "",
    permissions: str = "ManagedByOwner",
    owner: str = "owner-1",
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": project_id,
        "name": name,
        "description": description,
        "contentPermissions": permissions,
        "owner": {"id": owner},
    }
    if parent:
        data["parentProjectId"] = parent
    return data


def paginate(items: list[dict[str, Any]], page_size: int) -> list[dict[str, Any]]:
    """Split items into listing bodies the way the server pages them."""
    total = len(items)
    count = max(1, math.ceil(total / page_size))
    pages = []
    for number in range(1, count + 1):
        chunk = items[(number - 1) * page_size:number * page_size]
        pages.append({
            "pagination": {
                "pageNumber": str(number),
                "pageSize": str(page_size),
                "totalAvailable": str(total),
            },
            "projects": {"project": chunk} if chunk else {},
        })
    return pages


def serve_pages(pages: list[dict[str, Any]]) -> Callable[[httpx.Request], httpx.Response]:
    """respx side effect answering ``GET /projects`` by ``pageNumber``."""

    def handler(request: httpx.Request) -> httpx.Response:
        number = int(request.url.params.get("pageNumber", "1"))
        return httpx.Response(200, json=pages[number - 1])

    return handler


@pytest.fixture
def sample_projects() -> list[dict[str, Any]]:
    return [
        project_json("p-1", "Default", permissions="LockedToProject"),
        project_json("p-2", "Sales", description="Sales team"),
        project_json("p-3", "Finance", parent="p-2"),
        project_json("p-4", "Marketing", owner="owner-2"),
        project_json("p-5", "Archive", permissions="LockedToProjectWithoutNested"),
    ]
