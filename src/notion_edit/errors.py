"""Typed exception hierarchy for notion-edit.

All exceptions inherit from ``NotionEditError`` so callers can catch any
application-level failure in one place. Each exception keeps the identifiers
and payload needed to diagnose it as attributes, next to a readable message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

if TYPE_CHECKING:
    from .core.models import BlockToCreate


class NotionEditError(Exception):
    """Base exception for all notion-edit errors."""


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class NotionApiError(NotionEditError):
    """Raised when a Notion API request fails or returns an error status."""

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
    ):
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"{method} {url} failed{status}: {message}")
        self.method = method
        self.url = url
        self.status_code = status_code
        self.message = message


class NotionResponseError(NotionEditError):
    """Raised when a Notion API response body cannot be deserialized."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Unexpected response from {url}: {message}")
        self.url = url
        self.message = message


# ---------------------------------------------------------------------------
# Domain modelling
# ---------------------------------------------------------------------------


class PaginationRequiredError(NotionEditError):
    """Raised when a block has more children than a single page returns."""

    def __init__(self, block_id: str):
        super().__init__(
            f"Block {block_id} has more children than fit in one page; "
            "paginated listings are not supported"
        )
        self.block_id = block_id


class UnhandledBlockKindError(NotionEditError):
    """Raised for a remote block type that has no Markdown counterpart."""

    def __init__(self, block_id: str, type_name: str):
        super().__init__(
            f"Block {block_id} has unsupported type '{type_name}'"
        )
        self.block_id = block_id
        self.type_name = type_name


class UnhandledRichTextError(NotionEditError):
    """Raised for a rich-text run that is not plain text (mention, equation)."""

    def __init__(self, block_id: str, type_name: str):
        super().__init__(
            f"Block {block_id} contains unsupported rich text of type '{type_name}'"
        )
        self.block_id = block_id
        self.type_name = type_name


class UnexpectedChildrenError(NotionEditError):
    """Raised when a block that cannot nest content has children."""

    def __init__(self, block_id: str, type_name: str):
        super().__init__(
            f"Block {block_id} of type '{type_name}' has nested children, "
            "which only numbered list items may carry"
        )
        self.block_id = block_id
        self.type_name = type_name


class EmptyBlockError(NotionEditError):
    """Raised for a heading or list item block without any text."""

    def __init__(self, block_id: str, type_name: str):
        super().__init__(f"Block {block_id} of type '{type_name}' has no text")
        self.block_id = block_id
        self.type_name = type_name


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------


class ParseError(NotionEditError):
    """Raised when a Markdown event stream does not match a supported shape."""


class UnsupportedHeadingLevelError(ParseError):
    """Raised for headings deeper than level 3."""

    def __init__(self, level: int):
        super().__init__(
            f"Heading level {level} is not supported (Notion supports levels 1-3)"
        )
        self.level = level


class MarkupRenderError(NotionEditError):
    """Raised when an event stream cannot be rendered as Markdown."""


# ---------------------------------------------------------------------------
# Synchronization
# ---------------------------------------------------------------------------


class EraseError(NotionEditError):
    """Raised when the existing content of a page cannot be erased."""

    def __init__(self, container_id: str, message: str):
        super().__init__(f"Erasing {container_id} failed: {message}")
        self.container_id = container_id


class DeleteBlockError(EraseError):
    """Raised when deleting a single block fails during an erase."""

    def __init__(self, container_id: str, block_id: str, cause: Exception):
        super().__init__(
            container_id, f"deleting block {block_id} failed: {cause}"
        )
        self.block_id = block_id
        self.cause = cause


class AppendChildrenError(NotionEditError):
    """Raised when one batch of child blocks cannot be created."""

    def __init__(
        self,
        parent_id: str,
        children: Sequence[BlockToCreate],
        message: str,
        cause: Exception | None = None,
    ):
        super().__init__(
            f"Creating {len(children)} block(s) under {parent_id} failed: {message}"
        )
        self.parent_id = parent_id
        self.children = list(children)
        self.cause = cause


class CreateBlocksError(NotionEditError):
    """Aggregate of every creation failure collected during one push."""

    def __init__(self, errors: Sequence[AppendChildrenError]):
        super().__init__(f"{len(errors)} block creation request(s) failed")
        self.errors: list[AppendChildrenError] = list(errors)

    def details(self) -> list[dict[str, Any]]:
        """Return one dict per failure, for reporting."""
        return [
            {
                "parent_id": error.parent_id,
                "blocks": len(error.children),
                "error": str(error),
            }
            for error in self.errors
        ]
