"""Root Typer app — global options and command group registration."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

from tableau_projects import __version__
from tableau_projects.client.errors import err_console
from tableau_projects.commands import config_cmd, project, state

app = typer.Typer(
    name="tableau-projects",
    help="Declarative management of Tableau projects over the REST API.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"tableau-projects {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Send library log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO; keep it for --verbose only
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log requests, page fetches and reconcile steps."
    ),
) -> None:
    """Tableau projects CLI — list, create, update and reconcile projects."""
    configure_logging(verbose)


# Register command groups
app.add_typer(config_cmd.app, name="config")
app.add_typer(project.app, name="project")
app.add_typer(state.app, name="state")


def main() -> None:
    app()
