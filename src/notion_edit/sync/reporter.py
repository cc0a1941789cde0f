"""Push report formatting functions.

Provides human-readable and machine-readable output for push operations:

- ``format_push_report`` -- post-push summary.
- ``format_create_failure`` -- every failed creation request of a push.
- ``report_to_json`` -- structured dict for JSON output.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import CreateBlocksError
    from .models import PushReport

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_push_report(report: PushReport) -> str:
    """Format a push report as human-readable text.

    Args:
        report: The completed push report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    lines.append(f"Push report for page {report.page_id}")
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")
    lines.append(
        f"Erased {report.deleted_blocks} blocks, "
        f"created {report.created_blocks} blocks "
        f"from {report.top_level_tags} top-level elements"
    )
    return "\n".join(lines)


def format_create_failure(error: CreateBlocksError) -> str:
    """Format an aggregated creation failure, one line per failed request.

    The page may be left partially recreated; the listed parents are
    where content is missing.
    """
    lines = [f"{len(error.errors)} block creation request(s) failed:"]
    for detail in error.details():
        lines.append(
            f"  under {detail['parent_id']} "
            f"({detail['blocks']} blocks): {detail['error']}"
        )
    return "\n".join(lines)


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: PushReport) -> dict:
    """Convert a push report to a structured dict for JSON serialisation."""
    return {
        "page_id": report.page_id,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "deleted": report.deleted_blocks,
            "created": report.created_blocks,
            "top_level_tags": report.top_level_tags,
        },
    }
