"""Shared helpers for CLI commands — client factory and option aliases."""

from __future__ import annotations

from typing import Annotated

import typer

from tableau_projects.client.projects import ProjectsAPI
from tableau_projects.client.server import ServerClient
from tableau_projects.config.manager import ConfigManager
from tableau_projects.models.project import Project

# Shared Typer option type aliases
ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-p", help="Server profile"),
]
UrlOpt = Annotated[
    str | None,
    typer.Option("--url", help="Server URL override"),
]
TokenOpt = Annotated[
    str | None,
    typer.Option("--token", help="Session token override"),
]
SiteOpt = Annotated[
    str | None,
    typer.Option("--site", help="Site ID override"),
]
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (table, json, yaml, csv)"),
]

PROJECT_COLUMNS = ["ID", "Name", "Parent", "Content Permissions", "Owner"]


def make_client(
    profile: str | None,
    url: str | None,
    token: str | None,
    site: str | None,
) -> ServerClient:
    """Create a ServerClient from CLI options, env vars, or config profile."""
    mgr = ConfigManager()
    resolved = mgr.resolve_server(profile_name=profile, url=url, token=token, site_id=site)
    return ServerClient(resolved)


def make_api(client: ServerClient) -> ProjectsAPI:
    return ProjectsAPI(client)


def project_row(project: Project) -> list[str]:
    return [
        project.id,
        project.name,
        project.parent_project_id,
        project.content_permissions,
        project.owner.id,
    ]
