"""Rich table rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.table import Table

ACTION_STYLES = {
    "create": "green",
    "update": "yellow",
    "delete": "red",
    "no-op": "dim",
}


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(str(cell) if cell is not None else "" for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False)
    table.add_column("Attribute", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value) if value is not None else "")
    return table


def changes_table(changes: Sequence[dict[str, Any]], *, title: str | None = None) -> Table:
    """One row per planned change, colored by action."""
    table = Table(title=title)
    table.add_column("Address", no_wrap=True)
    table.add_column("Action")
    table.add_column("ID")
    table.add_column("Name")
    for change in changes:
        state = change.get("after") or change.get("before") or {}
        action = change["action"]
        style = ACTION_STYLES.get(action, "")
        table.add_row(
            change["address"],
            f"[{style}]{action}[/]" if style else action,
            state.get("id", ""),
            state.get("name", ""),
        )
    return table
