"""Core Notion client functionality shared by the fetcher and the sync engine."""

from .async_utils import run_sync_limited
from .client import BlockClient, NotionClient

__all__ = ["BlockClient", "NotionClient", "run_sync_limited"]
