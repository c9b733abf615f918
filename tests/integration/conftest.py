"""Fixtures for CLI tests: an isolated config file and a fake project server."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from tableau_projects.config.manager import ConfigManager
from tests.conftest import BASE, SERVER, SITE, paginate, project_json

PROJECTS_URL = f"{BASE}/projects"
CONN = ["--url", SERVER, "--token", "session-token-123", "--site", SITE]


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep commands away from the user's real config file."""
    path = tmp_path / "config.toml"
    monkeypatch.setattr(
        "tableau_projects.commands._common.ConfigManager",
        lambda: ConfigManager(config_path=path),
    )


class FakeServer:
    """Projects endpoint that remembers what was created, updated and deleted."""

    def __init__(self, page_size: int = 2) -> None:
        self.page_size = page_size
        self.projects: dict[str, dict[str, Any]] = {}
        self.requests: list[tuple[str, dict[str, Any] | None]] = []
        self._next = 1

    def add(self, project_id: str, name: str, **fields: Any) -> None:
        self.projects[project_id] = project_json(project_id, name, **fields)

    def _body(self, request: httpx.Request) -> dict[str, Any]:
        body = json.loads(request.content)
        self.requests.append((request.method, body))
        return body["project"]

    def list(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, None))
        pages = paginate(list(self.projects.values()), self.page_size)
        number = int(request.url.params.get("pageNumber", "1"))
        return httpx.Response(200, json=pages[number - 1])

    def create(self, request: httpx.Request) -> httpx.Response:
        fields = self._body(request)
        project_id = f"new-{self._next}"
        self._next += 1
        project = {"id": project_id, "description": "", **fields}
        project.setdefault("owner", {"id": "admin"})
        self.projects[project_id] = project
        return httpx.Response(201, json={"project": project})

    def update(self, request: httpx.Request) -> httpx.Response:
        project_id = request.url.path.rsplit("/", 1)[-1]
        fields = self._body(request)
        if project_id not in self.projects:
            return _missing(project_id)
        project = {"id": project_id, **fields}
        if not project.get("parentProjectId"):
            project.pop("parentProjectId", None)
        self.projects[project_id] = project
        return httpx.Response(200, json={"project": project})

    def delete(self, request: httpx.Request) -> httpx.Response:
        project_id = request.url.path.rsplit("/", 1)[-1]
        self.requests.append((request.method, None))
        if self.projects.pop(project_id, None) is None:
            return _missing(project_id)
        return httpx.Response(204)


def _missing(project_id: str) -> httpx.Response:
    return httpx.Response(404, json={
        "error": {"summary": "Resource Not Found", "detail": f"Project {project_id}", "code": "404005"},
    })


@pytest.fixture
def server():
    fake = FakeServer()
    with respx.mock(assert_all_called=False) as mock:
        mock.get(PROJECTS_URL).mock(side_effect=fake.list)
        mock.post(PROJECTS_URL).mock(side_effect=fake.create)
        mock.put(url__startswith=f"{PROJECTS_URL}/").mock(side_effect=fake.update)
        mock.delete(url__startswith=f"{PROJECTS_URL}/").mock(side_effect=fake.delete)
        yield fake
