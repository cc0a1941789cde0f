"""Pydantic models for push results.

- ``PushReport``: Outcome of a successful push (erase then recreate).

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from pydantic import BaseModel


class PushReport(BaseModel):
    """Aggregate report for one push.

    Attributes:
        page_id: The page whose content was replaced.
        deleted_blocks: Number of top-level blocks erased.
        created_blocks: Number of blocks created, at every nesting level.
        top_level_tags: Number of top-level tags in the pushed document.
        started_at: ISO 8601 timestamp when the push started.
        completed_at: ISO 8601 timestamp when the push completed.
    """

    page_id: str
    deleted_blocks: int = 0
    created_blocks: int = 0
    top_level_tags: int = 0
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}
