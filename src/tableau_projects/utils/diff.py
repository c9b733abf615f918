"""Attribute diff rendering for planned project changes."""

from __future__ import annotations

import difflib
import json
from typing import Any

from rich.console import Console
from rich.syntax import Syntax


def diff_attributes(
    address: str,
    before: dict[str, Any] | None,
    after: dict[str, Any] | None,
    console: Console,
) -> bool:
    """Show a colored diff of one resource's attributes.

    Returns False when there is nothing to show.
    """
    before_json = _lines(before)
    after_json = _lines(after)

    diff_lines = list(difflib.unified_diff(
        before_json,
        after_json,
        fromfile=f"{address} (recorded)",
        tofile=f"{address} (desired)",
        lineterm="",
    ))
    if not diff_lines:
        return False

    diff_text = "\n".join(line.rstrip() for line in diff_lines)
    console.print(Syntax(diff_text, "diff", theme="monokai"))
    return True


def _lines(attrs: dict[str, Any] | None) -> list[str]:
    if attrs is None:
        return []
    shown = {k: v for k, v in attrs.items() if k != "last_updated"}
    return json.dumps(shown, indent=2, sort_keys=True).splitlines(keepends=True)
