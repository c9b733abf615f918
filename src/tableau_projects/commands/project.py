"""Project commands.

list, show, create, update, delete.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from tableau_projects.client.errors import error_handler
from tableau_projects.commands._common import (
    PROJECT_COLUMNS,
    FormatOpt,
    ProfileOpt,
    SiteOpt,
    TokenOpt,
    UrlOpt,
    make_api,
    make_client,
    project_row,
)
from tableau_projects.models.project import ContentPermissions
from tableau_projects.output.formatter import output

app = typer.Typer(name="project", help="Manage Tableau projects.")
console = Console()

PermissionsOpt = Annotated[
    ContentPermissions | None,
    typer.Option("--permissions", help="Content permissions mode"),
]


@app.command("list")
@error_handler
def list_projects(
    filter_text: Annotated[
        str | None,
        typer.Option("--filter", help="Filter by name"),
    ] = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """List every project on the site, across all pages."""
    with make_client(profile, url, token, site) as client:
        projects = make_api(client).list_projects()
    if filter_text:
        projects = [p for p in projects if filter_text.lower() in p.name.lower()]
    rows = [project_row(p) for p in projects]
    output(projects, fmt, columns=PROJECT_COLUMNS, rows=rows, title="Projects")


@app.command()
@error_handler
def show(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Show project details."""
    with make_client(profile, url, token, site) as client:
        project = make_api(client).get_project(project_id)
    output(project, fmt, title=f"Project: {project.name}")


@app.command()
@error_handler
def create(
    name: Annotated[str, typer.Argument(help="Project name")],
    parent: Annotated[
        str, typer.Option("--parent", help="Parent project ID"),
    ] = "",
    description: Annotated[str, typer.Option("--description", "-d")] = "",
    permissions: Annotated[
        ContentPermissions,
        typer.Option("--permissions", help="Content permissions mode"),
    ] = ContentPermissions.MANAGED_BY_OWNER,
    owner: Annotated[str, typer.Option("--owner", help="Owner user ID")] = "",
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Create a new project."""
    with make_client(profile, url, token, site) as client:
        project = make_api(client).create_project(
            name, parent, description, permissions.value, owner,
        )
    if fmt == "table":
        console.print(f"[green]Project '{project.name}' created with ID {project.id}.[/]")
    else:
        output(project, fmt)


@app.command()
@error_handler
def update(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="New name")] = None,
    parent: Annotated[
        str | None, typer.Option("--parent", help="Parent project ID ('' for top level)"),
    ] = None,
    description: Annotated[str | None, typer.Option("--description", "-d")] = None,
    permissions: PermissionsOpt = None,
    owner: Annotated[str | None, typer.Option("--owner", help="Owner user ID")] = None,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Update a project; options left out keep their current value."""
    with make_client(profile, url, token, site) as client:
        api = make_api(client)
        current = api.get_project(project_id)
        project = api.update_project(
            project_id,
            current.name if name is None else name,
            current.parent_project_id if parent is None else parent,
            current.description if description is None else description,
            current.content_permissions if permissions is None else permissions.value,
            current.owner.id if owner is None else owner,
        )
    if fmt == "table":
        console.print(f"[green]Project '{project_id}' updated.[/]")
    else:
        output(project, fmt)


@app.command()
@error_handler
def delete(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    force: Annotated[bool, typer.Option("--force", help="Skip confirmation")] = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
) -> None:
    """Delete a project."""
    if not force:
        from rich.prompt import Confirm

        if not Confirm.ask(f"Delete project '{project_id}'? This cannot be undone"):
            console.print("Cancelled.")
            return
    with make_client(profile, url, token, site) as client:
        make_api(client).delete_project(project_id)
    console.print(f"[green]Project '{project_id}' deleted.[/]")
