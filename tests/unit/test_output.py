"""Tests for table and diff rendering."""

from io import StringIO

from rich.console import Console

from tableau_projects.output.tables import changes_table, kv_table, make_table
from tableau_projects.utils.diff import diff_attributes


def _render(renderable) -> str:
    buf = StringIO()
    Console(file=buf, force_terminal=False, width=120).print(renderable)
    return buf.getvalue()


class TestTables:
    def test_make_table(self):
        out = _render(make_table("Test", ["A", "B"], [["1", "2"], ["3", None]]))
        assert "Test" in out
        assert "1" in out
        assert "3" in out

    def test_kv_table(self):
        out = _render(kv_table({"key1": "val1", "key2": "val2"}, title="KV"))
        assert "key1" in out
        assert "val1" in out

    def test_kv_table_none_values(self):
        out = _render(kv_table({"key": None}))
        assert "key" in out
        assert "None" not in out

    def test_changes_table(self):
        changes = [
            {"address": "sales", "action": "create", "before": None, "after": {"name": "Sales"}},
            {"address": "old", "action": "delete", "before": {"id": "p-2", "name": "Old"}, "after": None},
        ]
        out = _render(changes_table(changes, title="Plan"))
        assert "Plan" in out
        assert "sales" in out
        assert "create" in out
        assert "p-2" in out
        assert "Old" in out


class TestDiffAttributes:
    def test_changed_attribute(self):
        buf = StringIO()
        console = Console(file=buf, force_terminal=False, width=120)
        shown = diff_attributes(
            "sales",
            {"id": "p-1", "name": "Sales", "last_updated": "yesterday"},
            {"id": "p-1", "name": "Revenue", "last_updated": "today"},
            console,
        )
        out = buf.getvalue()
        assert shown is True
        assert '-  "name": "Sales"' in out
        assert '+  "name": "Revenue"' in out
        assert "last_updated" not in out

    def test_identical_shows_nothing(self):
        buf = StringIO()
        console = Console(file=buf, force_terminal=False, width=120)
        attrs = {"id": "p-1", "name": "Sales"}
        assert diff_attributes("sales", attrs, dict(attrs), console) is False
        assert buf.getvalue() == ""

    def test_create_diffs_against_nothing(self):
        buf = StringIO()
        console = Console(file=buf, force_terminal=False, width=120)
        assert diff_attributes("fresh", None, {"name": "Fresh"}, console) is True
        assert '"name": "Fresh"' in buf.getvalue()
