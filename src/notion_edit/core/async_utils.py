"""Bounded fan-out of blocking Notion requests from asyncio code.

``NotionClient`` is a plain ``requests`` client. The fetcher lists children
of many blocks at once and the sync engine creates sibling subtrees at
once, so each request runs in a worker thread and a module semaphore caps
how many are in flight against the API.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Sequence, TypeVar

T = TypeVar("T")
logger = logging.getLogger(__name__)

# Set by the CLI for each fetch or push; None means unbounded
_semaphore: asyncio.Semaphore | None = None


def init_semaphore(max_parallel: int = 5) -> None:
    """Cap concurrent Notion requests. Call inside the running event loop."""
    global _semaphore
    _semaphore = asyncio.Semaphore(max_parallel)
    logger.debug(
        "Notion request semaphore initialized: max_parallel=%d",
        max_parallel,
    )


def reset_semaphore() -> None:
    global _semaphore
    _semaphore = None


async def run_sync_limited(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Issue one blocking client call from a worker thread.

    Holds a semaphore slot for the duration of the request, so a wide page
    never has more than ``max_parallel`` listings, appends or deletes
    outstanding. Without ``init_semaphore`` the call is unbounded.

    Example:
        page = await run_sync_limited(client.list_children, block_id)
    """
    if _semaphore is None:
        return await asyncio.to_thread(func, *args, **kwargs)
    async with _semaphore:
        return await asyncio.to_thread(func, *args, **kwargs)


async def gather_limited(
    coros: Sequence[Coroutine[Any, Any, T]],
) -> list[T]:
    """Await sibling subtree requests together and keep their order.

    The coroutines are expected to reach the API through
    ``run_sync_limited``; this function adds no limit of its own. Results
    line up with ``coros`` so callers can pair them with the blocks they
    came from. The first exception propagates and the remaining coroutines
    keep running.
    """
    return list(await asyncio.gather(*coros))
