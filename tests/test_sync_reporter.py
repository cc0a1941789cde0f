"""Tests for push report formatting."""

from notion_edit.core.models import BlockKind, BlockToCreate
from notion_edit.errors import AppendChildrenError, CreateBlocksError
from notion_edit.sync.models import PushReport
from notion_edit.sync.reporter import (
    format_create_failure,
    format_push_report,
    report_to_json,
)


def _report(**overrides):
    defaults = {
        "page_id": "0b89a6e8-f006-4acc-8ec6-e6902b039e3a",
        "deleted_blocks": 4,
        "created_blocks": 7,
        "top_level_tags": 3,
        "started_at": "2026-01-01T00:00:00+00:00",
        "completed_at": "2026-01-01T00:00:05+00:00",
    }
    defaults.update(overrides)
    return PushReport(**defaults)


class TestFormatPushReport:
    def test_contains_counts_and_timestamps(self):
        text = format_push_report(_report())

        assert "0b89a6e8-f006-4acc-8ec6-e6902b039e3a" in text
        assert "Erased 4 blocks, created 7 blocks from 3 top-level elements" in text
        assert "Started: 2026-01-01T00:00:00+00:00" in text
        assert "Completed: 2026-01-01T00:00:05+00:00" in text

    def test_incomplete_report_omits_completion(self):
        assert "Completed" not in format_push_report(_report(completed_at=None))


def test_format_create_failure_lists_every_parent():
    block = BlockToCreate(kind=BlockKind.PARAGRAPH, rich_text=["x"])
    error = CreateBlocksError(
        [
            AppendChildrenError("parent-a", [block], "boom"),
            AppendChildrenError("parent-b", [block, block], "bang"),
        ]
    )

    lines = format_create_failure(error).splitlines()

    assert lines[0] == "2 block creation request(s) failed:"
    assert "under parent-a (1 blocks)" in lines[1]
    assert "boom" in lines[1]
    assert "under parent-b (2 blocks)" in lines[2]


def test_report_to_json():
    data = report_to_json(_report())

    assert data["counts"] == {"deleted": 4, "created": 7, "top_level_tags": 3}
    assert data["page_id"] == "0b89a6e8-f006-4acc-8ec6-e6902b039e3a"
