"""Config commands — manage server profiles."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt

from tableau_projects.client.errors import error_handler
from tableau_projects.config.manager import ConfigManager
from tableau_projects.config.models import ServerProfile
from tableau_projects.output.formatter import output

app = typer.Typer(name="config", help="Manage server profiles and CLI configuration.")
console = Console()


def _get_manager() -> ConfigManager:
    return ConfigManager()


def _mask(token: str) -> str:
    return token[:8] + "..." if len(token) > 8 else "***"


@app.command()
@error_handler
def init() -> None:
    """Interactive setup wizard — create your first server profile."""
    mgr = _get_manager()
    console.print("[bold]Tableau Projects Setup Wizard[/]\n")

    name = Prompt.ask("Profile name", default="default")
    url = Prompt.ask("Server URL (e.g. https://tableau.example.com)")
    site_id = Prompt.ask("Site ID (LUID)")
    token = Prompt.ask("Session token (X-Tableau-Auth)", default=None)
    verify_ssl = Confirm.ask("Verify SSL certificates?", default=True)

    profile = ServerProfile(
        name=name,
        url=url,
        site_id=site_id,
        token=token if token else None,
        verify_ssl=verify_ssl,
    )
    mgr.add_profile(profile)
    console.print(f"\n[green]Profile '{name}' saved.[/]")
    console.print(f"Config file: {mgr.config_path}")


@app.command()
@error_handler
def add(
    name: Annotated[str, typer.Argument(help="Profile name")],
    url: Annotated[str, typer.Option("--url", "-u", help="Server URL")],
    site: Annotated[str, typer.Option("--site", help="Site ID")] = "",
    token: Annotated[Optional[str], typer.Option("--token", "-t", help="Session token")] = None,
    api_version: Annotated[
        Optional[str], typer.Option("--api-version", help="REST API version"),
    ] = None,
    page_size: Annotated[
        Optional[int], typer.Option("--page-size", help="Items per listing page"),
    ] = None,
    no_verify_ssl: Annotated[bool, typer.Option("--no-verify-ssl", help="Disable SSL verification")] = False,
    set_default: Annotated[bool, typer.Option("--default", help="Set as default profile")] = False,
) -> None:
    """Add a server profile."""
    mgr = _get_manager()
    extra = {"api_version": api_version} if api_version else {}
    profile = ServerProfile(
        name=name,
        url=url,
        site_id=site,
        token=token,
        page_size=page_size,
        verify_ssl=not no_verify_ssl,
        **extra,
    )
    mgr.add_profile(profile)
    if set_default:
        mgr.set_default(name)
    console.print(f"[green]Profile '{name}' added.[/]")


@app.command("list")
@error_handler
def list_profiles(
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """List all configured profiles."""
    mgr = _get_manager()
    profiles = mgr.config.profiles
    if not profiles:
        console.print("[yellow]No profiles configured. Run 'tableau-projects config init' to get started.[/]")
        return

    default = mgr.config.default_profile
    columns = ["Name", "URL", "Site", "Auth", "Default"]
    rows = []
    for name, p in profiles.items():
        auth = "token" if p.token else "none"
        is_default = "*" if name == default else ""
        rows.append([name, p.url, p.site_id, auth, is_default])

    listed = []
    for p in profiles.values():
        data = p.model_dump(exclude_none=True)
        if "token" in data:
            data["token"] = _mask(data["token"])
        listed.append(data)
    output({"profiles": listed}, fmt, columns=columns, rows=rows, title="Server Profiles")


@app.command()
@error_handler
def show(
    name: Annotated[str, typer.Argument(help="Profile name")],
    fmt: Annotated[str, typer.Option("--format", "-f", help="Output format")] = "table",
) -> None:
    """Show profile details."""
    mgr = _get_manager()
    profile = mgr.get_profile(name)
    if not profile:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    data = profile.model_dump(exclude_none=True)
    if "token" in data:
        data["token"] = _mask(data["token"])

    output(data, fmt, title=f"Profile: {name}")


@app.command("set-default")
@error_handler
def set_default(
    name: Annotated[str, typer.Argument(help="Profile name to set as default")],
) -> None:
    """Set the default server profile."""
    mgr = _get_manager()
    if mgr.set_default(name):
        console.print(f"[green]Default profile set to '{name}'.[/]")
    else:
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)


@app.command()
@error_handler
def test(
    name: Annotated[Optional[str], typer.Argument(help="Profile name (uses default if omitted)")] = None,
) -> None:
    """Test connectivity by reading the first page of projects."""
    from tableau_projects.client.projects import PROJECTS_PATH, decode_project_page
    from tableau_projects.client.server import ServerClient

    mgr = _get_manager()
    profile = mgr.resolve_server(profile_name=name)
    console.print(f"Testing connection to [bold]{profile.api_base}[/]...")

    with ServerClient(profile) as client:
        page = decode_project_page(client.execute("GET", PROJECTS_PATH, params={"pageSize": 1}))
        console.print(
            f"[green]Connected![/] {page.pagination.total_available} project(s) on site."
        )


@app.command()
@error_handler
def remove(
    name: Annotated[str, typer.Argument(help="Profile name to remove")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
) -> None:
    """Remove a server profile."""
    mgr = _get_manager()
    if not mgr.get_profile(name):
        console.print(f"[red]Profile '{name}' not found.[/]")
        raise typer.Exit(1)

    if not force:
        if not Confirm.ask(f"Remove profile '{name}'?"):
            console.print("Cancelled.")
            return

    mgr.remove_profile(name)
    console.print(f"[green]Profile '{name}' removed.[/]")
