"""Notion page export and replacement.

Modules:

- ``fetcher``   -- recursive, concurrent fetch of a page's block forest.
- ``engine``    -- ``SyncEngine``: export to Markdown, erase and recreate.
- ``models``    -- ``PushReport``: outcome of a push.
- ``reporter``  -- human-readable and JSON report formatting.

Usage example
-------------
::

    from notion_edit.config import load_config
    from notion_edit.core.client import NotionClient
    from notion_edit.sync import SyncEngine, format_push_report

    engine = SyncEngine(NotionClient(load_config()))
    markdown = await engine.export_markdown(page_id)
    report = await engine.push_markdown(page_id, markdown)
    print(format_push_report(report))
"""

from .engine import SyncEngine
from .fetcher import fetch_block_tree, list_all_children
from .models import PushReport
from .reporter import format_create_failure, format_push_report, report_to_json

__all__ = [
    "SyncEngine",
    "PushReport",
    "fetch_block_tree",
    "list_all_children",
    "format_create_failure",
    "format_push_report",
    "report_to_json",
]
