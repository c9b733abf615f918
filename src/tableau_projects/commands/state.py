"""State commands — converge declared projects with the server.

plan, apply, refresh, import, show, destroy.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from tableau_projects.client.errors import error_handler
from tableau_projects.client.server import ServerClient
from tableau_projects.commands._common import (
    ProfileOpt,
    SiteOpt,
    TokenOpt,
    UrlOpt,
    make_api,
    make_client,
)
from tableau_projects.config.constants import DEFAULT_DESIRED_FILE, DEFAULT_STATE_FILE
from tableau_projects.output.formatter import output
from tableau_projects.output.tables import changes_table
from tableau_projects.resource.controller import ProjectController
from tableau_projects.resource.reconcile import (
    NOOP,
    UPDATE,
    Change,
    Reconciler,
    StateFile,
    load_desired,
)
from tableau_projects.utils.diff import diff_attributes

app = typer.Typer(name="state", help="Plan and apply declared projects.")
console = Console()

ConfigFileOpt = Annotated[
    Path,
    typer.Option("--config", "-c", help="Desired projects file (TOML)"),
]
StateFileOpt = Annotated[
    Path,
    typer.Option("--state", "-s", help="State file (JSON)"),
]
AutoApproveOpt = Annotated[
    bool,
    typer.Option("--auto-approve", help="Skip confirmation"),
]


def _reconciler(client: ServerClient, state_path: Path) -> Reconciler:
    return Reconciler(ProjectController(make_api(client)), StateFile(state_path))


def _print_changes(changes: list[Change], title: str) -> None:
    pending = [c for c in changes if c.action != NOOP]
    if not pending:
        console.print("[green]No changes. Projects match the configuration.[/]")
        return
    console.print(changes_table([c.as_dict() for c in changes], title=title))
    for change in pending:
        if change.action == UPDATE:
            before = change.before.model_dump() if change.before else None
            after = change.after.model_dump() if change.after else None
            diff_attributes(change.address, before, after, console)


@app.command()
@error_handler
def plan(
    config: ConfigFileOpt = Path(DEFAULT_DESIRED_FILE),
    state: StateFileOpt = Path(DEFAULT_STATE_FILE),
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
) -> None:
    """Show what apply would change."""
    desired = load_desired(config)
    with make_client(profile, url, token, site) as client:
        changes = _reconciler(client, state).plan(desired)
    _print_changes(changes, "Plan")


@app.command()
@error_handler
def apply(
    config: ConfigFileOpt = Path(DEFAULT_DESIRED_FILE),
    state: StateFileOpt = Path(DEFAULT_STATE_FILE),
    auto_approve: AutoApproveOpt = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
) -> None:
    """Create, update and delete projects until they match the configuration."""
    desired = load_desired(config)
    with make_client(profile, url, token, site) as client:
        reconciler = _reconciler(client, state)
        doc = None
        if not auto_approve:
            # The approved plan is carried out against the same reads
            doc = reconciler.refresh(save=False)
            changes = reconciler.plan(desired, doc)
            _print_changes(changes, "Plan")
            if all(c.action == NOOP for c in changes):
                return
            from rich.prompt import Confirm

            if not Confirm.ask("Apply these changes?"):
                console.print("Cancelled.")
                return
        applied = reconciler.apply(desired, doc)
    done = [c for c in applied if c.action != NOOP]
    counts = {
        action: sum(1 for c in done if c.action == action)
        for action in ("create", "update", "delete")
    }
    console.print(
        f"[green]Apply complete.[/] {counts['create']} created,"
        f" {counts['update']} updated, {counts['delete']} deleted."
    )


@app.command()
@error_handler
def refresh(
    state: StateFileOpt = Path(DEFAULT_STATE_FILE),
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
) -> None:
    """Re-read tracked projects; forget those deleted outside this tool."""
    with make_client(profile, url, token, site) as client:
        doc = _reconciler(client, state).refresh()
    console.print(f"[green]Refreshed {len(doc.resources)} project(s).[/]")


@app.command("import")
@error_handler
def import_project(
    address: Annotated[str, typer.Argument(help="Address in the configuration, e.g. sales")],
    project_id: Annotated[str, typer.Argument(help="Existing project ID")],
    state: StateFileOpt = Path(DEFAULT_STATE_FILE),
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
) -> None:
    """Start tracking an existing project."""
    with make_client(profile, url, token, site) as client:
        imported = _reconciler(client, state).import_resource(address, project_id)
    console.print(f"[green]Imported project '{imported.name}' as {address}.[/]")


@app.command()
@error_handler
def show(
    state: StateFileOpt = Path(DEFAULT_STATE_FILE),
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show recorded state without contacting the server."""
    doc = StateFile(state).load()
    if not doc.resources:
        console.print("[yellow]No projects tracked.[/]")
        return
    columns = ["Address", "ID", "Name", "Parent", "Content Permissions", "Owner", "Last Updated"]
    rows = [
        [
            address,
            s.id,
            s.name,
            s.parent_project_id,
            s.content_permissions,
            s.owner_id,
            s.last_updated,
        ]
        for address, s in doc.resources.items()
    ]
    output(doc, fmt, columns=columns, rows=rows, title="Tracked Projects")


@app.command()
@error_handler
def destroy(
    state: StateFileOpt = Path(DEFAULT_STATE_FILE),
    auto_approve: AutoApproveOpt = False,
    profile: ProfileOpt = None,
    url: UrlOpt = None,
    token: TokenOpt = None,
    site: SiteOpt = None,
) -> None:
    """Delete every tracked project."""
    tracked = StateFile(state).load().resources
    if not tracked:
        console.print("[yellow]No projects tracked.[/]")
        return
    if not auto_approve:
        from rich.prompt import Confirm

        if not Confirm.ask(f"Delete {len(tracked)} project(s)? This cannot be undone"):
            console.print("Cancelled.")
            return
    with make_client(profile, url, token, site) as client:
        removed = _reconciler(client, state).destroy()
    console.print(f"[green]Destroyed {len(removed)} project(s).[/]")
