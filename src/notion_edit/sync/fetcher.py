"""Recursive fetch of a Notion block forest."""

from __future__ import annotations

import logging

from ..core.async_utils import gather_limited, run_sync_limited
from ..core.client import BlockClient
from ..core.models import RemoteBlock, RemoteBlockWithChildren
from ..errors import PaginationRequiredError

logger = logging.getLogger(__name__)


async def list_all_children(
    client: BlockClient, block_id: str
) -> list[RemoteBlock]:
    """List the direct children of a block, failing on paginated listings.

    Raises:
        PaginationRequiredError: If the API reports more children than one
            page holds.
    """
    page = await run_sync_limited(client.list_children, block_id)
    if page.has_more:
        raise PaginationRequiredError(block_id)
    return list(page.items)


async def fetch_block_tree(
    client: BlockClient, block_id: str
) -> list[RemoteBlockWithChildren]:
    """Fetch every descendant of ``block_id``.

    Children flagged ``has_children`` are fetched concurrently with their
    siblings; the rest are leaves and cost no request. The returned list
    keeps the API's sibling order.

    Raises:
        PaginationRequiredError: If any listing is paginated.
        NotionApiError: If a request fails.
        NotionResponseError: If a response cannot be decoded.
    """
    children = await list_all_children(client, block_id)
    logger.debug("Block %s has %d children", block_id, len(children))
    return await gather_limited(
        [_fetch_subtree(client, child) for child in children]
    )


async def _fetch_subtree(
    client: BlockClient, block: RemoteBlock
) -> RemoteBlockWithChildren:
    if not block.has_children:
        return RemoteBlockWithChildren(block=block)
    children = await fetch_block_tree(client, block.id)
    return RemoteBlockWithChildren(block=block, children=children)
