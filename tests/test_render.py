from __future__ import annotations

from xtenant.cli.render import SUMMARY_FIELDS, render_result, render_table
from xtenant.core.models import ActivityResult, Direction, SummaryRow


def test_render_table_aligns_columns() -> None:
    lines = render_table([{"a": "x", "b": None}, {"a": "long", "b": 2}], ["a", "b"])
    assert lines[0] == "a     b"
    assert lines[2] == "x     -"
    assert lines[3] == "long  2"


def test_render_empty() -> None:
    assert render_table([]) == ["(No rows)"]


def test_render_summary_result() -> None:
    row = SummaryRow("tenant-a", Direction.OUTBOUND, 3, 2, 1, 2, 1)
    lines = render_result(ActivityResult(rows=[row], summary=True, event_count=3))
    assert lines[0].split() == SUMMARY_FIELDS
    assert lines[2].split() == ["tenant-a", "Outbound", "3", "2", "1", "2", "1"]
