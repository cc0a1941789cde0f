"""Shared pytest fixtures for notion-edit tests."""

import threading
import time
from unittest.mock import MagicMock

import pytest
from dotenv import load_dotenv

from notion_edit.config import Config
from notion_edit.core import async_utils
from notion_edit.core.models import (
    BlockKind,
    ChildrenPage,
    RemoteBlock,
    RemoteBlockWithChildren,
    RemoteRichText,
)
from notion_edit.errors import NotionApiError

load_dotenv()


def pytest_addoption(parser):
    """Add custom CLI options for test filtering."""
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run tests that require a live Notion workspace",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "live: mark test as requiring a live Notion workspace"
    )


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --run-live is passed."""
    if config.getoption("--run-live"):
        # --run-live given: do not skip live tests
        return
    skip_live = pytest.mark.skip(reason="need --run-live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture(autouse=True)
def _reset_semaphore():
    """Each test starts without a semaphore bound to a previous event loop."""
    async_utils.reset_semaphore()
    yield
    async_utils.reset_semaphore()


@pytest.fixture
def mock_config():
    """Create a Config instance for testing."""
    return Config(
        api_key="secret_test_key",
        api_url="https://api.notion.example.com/v1",
    )


class FakeNotionClient:
    """In-memory Notion block store implementing the block client protocol.

    Children are kept per parent id; ``has_children`` is derived from the
    store when listing. Every call is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.children: dict[str, list[RemoteBlock]] = {}
        self.calls: list[tuple] = []
        self.has_more: set[str] = set()
        self.fail_list: set[str] = set()
        self.fail_delete: set[str] = set()
        self.fail_create_texts: set[str] = set()
        self.create_delays: dict[str, float] = {}
        self.delete_delay = 0.0
        self.deletes_in_flight = 0
        self.max_deletes_in_flight = 0
        self._next_id = 0
        self._lock = threading.Lock()

    def add(self, parent_id, kind, *texts, block_id=None):
        """Append a block under ``parent_id`` and return its id."""
        kind = BlockKind(kind)
        with self._lock:
            self._next_id += 1
            block = RemoteBlock(
                id=block_id or f"block-{self._next_id}",
                kind=kind,
                type_name=kind.value,
                rich_text=[RemoteRichText(plain_text=t) for t in texts],
            )
            self.children.setdefault(parent_id, []).append(block)
        return block.id

    def texts(self, parent_id):
        """Plain text of each direct child of ``parent_id``."""
        return [
            "".join(run.plain_text for run in block.rich_text)
            for block in self.children.get(parent_id, [])
        ]

    def list_children(self, block_id):
        with self._lock:
            self.calls.append(("list", block_id))
        if block_id in self.fail_list:
            raise NotionApiError(
                "GET", f"blocks/{block_id}/children", "boom", status_code=500
            )
        items = [
            block.model_copy(
                update={"has_children": bool(self.children.get(block.id))}
            )
            for block in self.children.get(block_id, [])
        ]
        return ChildrenPage(
            items=items,
            has_more=block_id in self.has_more,
            next_cursor="cursor" if block_id in self.has_more else None,
        )

    def create_children(self, parent_id, blocks):
        with self._lock:
            self.calls.append(
                ("create", parent_id, ["".join(b.rich_text) for b in blocks])
            )
        time.sleep(self.create_delays.get(parent_id, 0.0))
        if any(
            "".join(b.rich_text) in self.fail_create_texts for b in blocks
        ):
            raise NotionApiError(
                "PATCH",
                f"blocks/{parent_id}/children",
                "validation_error: boom",
                status_code=400,
            )
        return [
            self._find(parent_id, self.add(parent_id, b.kind, *b.rich_text))
            for b in blocks
        ]

    def delete_block(self, block_id):
        with self._lock:
            self.calls.append(("delete", block_id))
            self.deletes_in_flight += 1
            self.max_deletes_in_flight = max(
                self.max_deletes_in_flight, self.deletes_in_flight
            )
        try:
            time.sleep(self.delete_delay)
            if block_id in self.fail_delete:
                raise NotionApiError(
                    "DELETE", f"blocks/{block_id}", "boom", status_code=500
                )
            with self._lock:
                for siblings in self.children.values():
                    siblings[:] = [b for b in siblings if b.id != block_id]
        finally:
            with self._lock:
                self.deletes_in_flight -= 1

    def calls_of(self, name):
        return [call for call in self.calls if call[0] == name]

    def _find(self, parent_id, block_id):
        return next(
            b for b in self.children[parent_id] if b.id == block_id
        )


@pytest.fixture
def fake_client():
    """An empty in-memory Notion block store."""
    return FakeNotionClient()


@pytest.fixture
def mock_notion_client(mock_config):
    """Create a mock NotionClient instance for testing."""
    from notion_edit.core.client import NotionClient

    client = MagicMock(spec=NotionClient)
    client.config = mock_config
    return client


@pytest.fixture
def make_block():
    """Factory fixture for remote blocks with optional fetched children."""

    def _make_block(
        block_id, kind, *texts, children=None, rich_text_type="text"
    ):
        kind = BlockKind.from_type_name(kind)
        block = RemoteBlock(
            id=block_id,
            kind=kind,
            type_name=kind.value if kind is not BlockKind.UNHANDLED else "callout",
            has_children=bool(children),
            rich_text=[
                RemoteRichText(type=rich_text_type, plain_text=t) for t in texts
            ],
        )
        return RemoteBlockWithChildren(block=block, children=children or [])

    return _make_block
