"""Sync engine that exports a Notion page or replaces its content.

The ``SyncEngine`` ties together the fetcher, the converters and the block
client:

- Export: fetch the block forest, transduce it to tags, render Markdown.
- Push: parse Markdown, erase the page, recreate the tags level by level.

Erasing deletes the page's top-level blocks one at a time; parallel
deletion has been observed to skip blocks on the Notion side. The first
failing delete aborts the erase, and nothing is rolled back.

Creation is breadth-first. A new block's identifier is only known from the
creation response, so each level is created in one batch request, every
result is paired with its request by position, and the children of each
created block are created by a concurrent recursive call. Failures from all
branches are collected rather than short-circuited.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from ..converters.markdown_to_tags import parse_markdown
from ..converters.notion_to_tags import transduce
from ..converters.tags import Tag
from ..converters.tags_to_markdown import tags_to_markdown
from ..converters.tags_to_notion import tags_to_blocks
from ..core.async_utils import gather_limited, run_sync_limited
from ..core.client import BlockClient
from ..core.models import BlockWithChildrenToCreate
from ..errors import (
    AppendChildrenError,
    CreateBlocksError,
    DeleteBlockError,
    EraseError,
    NotionEditError,
    PaginationRequiredError,
)
from .fetcher import fetch_block_tree, list_all_children
from .models import PushReport

logger = logging.getLogger(__name__)


class SyncEngine:
    """Export or replace the content of Notion pages.

    Args:
        client: Block client shared by every request of a run.
    """

    def __init__(self, client: BlockClient) -> None:
        self.client = client

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    async def fetch_tags(self, page_id: str) -> list[Tag]:
        """Fetch a page and convert its blocks to document tags."""
        blocks = await fetch_block_tree(self.client, page_id)
        tags = list(transduce(blocks))
        logger.info(
            "Fetched page %s: %d top-level blocks, %d tags",
            page_id,
            len(blocks),
            len(tags),
        )
        return tags

    async def export_markdown(self, page_id: str) -> str:
        """Fetch a page and render it as Markdown."""
        return tags_to_markdown(await self.fetch_tags(page_id))

    # ------------------------------------------------------------------
    # Erase
    # ------------------------------------------------------------------

    async def erase(self, container_id: str) -> int:
        """Delete every direct child of a container, sequentially.

        Returns:
            Number of deleted blocks.

        Raises:
            PaginationRequiredError: If the container has more children
                than one listing returns.
            EraseError: If the children cannot be listed.
            DeleteBlockError: On the first failing delete. Later blocks are
                left in place.
        """
        try:
            blocks = await list_all_children(self.client, container_id)
        except PaginationRequiredError:
            raise
        except NotionEditError as exc:
            raise EraseError(
                container_id, f"listing children failed: {exc}"
            ) from exc

        for index, block in enumerate(blocks, start=1):
            try:
                await run_sync_limited(self.client.delete_block, block.id)
            except NotionEditError as exc:
                logger.error(
                    "Deleting block %s (%d of %d) failed: %s",
                    block.id,
                    index,
                    len(blocks),
                    exc,
                )
                raise DeleteBlockError(container_id, block.id, exc) from exc
            logger.debug("Deleted block %s", block.id)

        logger.info("Erased %d blocks from %s", len(blocks), container_id)
        return len(blocks)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(self, container_id: str, tags: Sequence[Tag]) -> int:
        """Create tags under a container, nested content included.

        Returns:
            Number of blocks created.

        Raises:
            CreateBlocksError: With every failure collected across all
                branches, if any request failed.
        """
        blocks = tags_to_blocks(tags)
        created, errors = await self._create_level(container_id, blocks)
        if errors:
            for error in errors:
                logger.error("%s", error)
            raise CreateBlocksError(errors)
        logger.info("Created %d blocks under %s", created, container_id)
        return created

    async def _create_level(
        self,
        parent_id: str,
        blocks: Sequence[BlockWithChildrenToCreate],
    ) -> tuple[int, list[AppendChildrenError]]:
        """Create one level of siblings, then their children concurrently.

        Returns:
            Number of blocks created in this subtree, and the failures.
        """
        if not blocks:
            return 0, []

        requested = [block.block for block in blocks]
        try:
            created = await run_sync_limited(
                self.client.create_children, parent_id, requested
            )
        except NotionEditError as exc:
            return 0, [
                AppendChildrenError(parent_id, requested, str(exc), cause=exc)
            ]

        if len(created) != len(blocks):
            return len(created), [
                AppendChildrenError(
                    parent_id,
                    requested,
                    f"requested {len(blocks)} blocks but the response "
                    f"contains {len(created)}",
                )
            ]

        # Pair by position: the response keeps request order
        nested = [
            self._create_level(created_block.id, block.children)
            for block, created_block in zip(blocks, created)
            if block.children
        ]
        results = await gather_limited(nested)

        total = len(created)
        errors: list[AppendChildrenError] = []
        for subtree_count, subtree_errors in results:
            total += subtree_count
            errors.extend(subtree_errors)
        return total, errors

    # ------------------------------------------------------------------
    # Push
    # ------------------------------------------------------------------

    async def push(self, page_id: str, tags: Sequence[Tag]) -> PushReport:
        """Replace the content of a page with ``tags``.

        The page is erased first. If creation then fails, the page is left
        empty or partially recreated.

        Raises:
            EraseError: If erasing fails (nothing is created).
            CreateBlocksError: If any creation request failed.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        deleted = await self.erase(page_id)
        created = await self.create(page_id, tags)
        return PushReport(
            page_id=page_id,
            deleted_blocks=deleted,
            created_blocks=created,
            top_level_tags=len(tags),
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    async def push_markdown(self, page_id: str, markdown_text: str) -> PushReport:
        """Parse Markdown and push it; a parse failure leaves the page untouched.

        Raises:
            ParseError: If the Markdown cannot be parsed.
            EraseError: If erasing fails.
            CreateBlocksError: If any creation request failed.
        """
        tags = parse_markdown(markdown_text)
        return await self.push(page_id, tags)
