"""Pydantic models mirroring the subset of Notion blocks notion-edit handles.

- ``BlockKind``: Enum of the Notion block types the engine understands.
- ``RemoteRichText``: One rich-text run as returned by the API.
- ``RemoteBlock``: A block as listed or created by the API.
- ``ChildrenPage``: One page of a children listing.
- ``RemoteBlockWithChildren``: A block together with its fetched subtree.
- ``BlockToCreate`` / ``BlockWithChildrenToCreate``: Creation requests.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel


class BlockKind(str, Enum):
    """Notion block types with a Markdown counterpart."""

    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    PARAGRAPH = "paragraph"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    UNHANDLED = "unhandled"

    @classmethod
    def from_type_name(cls, type_name: str) -> BlockKind:
        """Map a Notion ``type`` string, falling back to ``UNHANDLED``."""
        try:
            kind = cls(type_name)
        except ValueError:
            return cls.UNHANDLED
        return kind


class RemoteRichText(BaseModel):
    """A rich-text run. Only ``type == "text"`` runs are plain text."""

    type: str = "text"
    plain_text: str

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RemoteRichText:
        plain_text = payload.get("plain_text")
        if plain_text is None:
            plain_text = payload.get("text", {}).get("content", "")
        return cls(type=payload.get("type", "text"), plain_text=plain_text)


class RemoteBlock(BaseModel):
    """A Notion block.

    Attributes:
        id: Server-assigned block identifier.
        kind: Recognised block kind, ``UNHANDLED`` for anything else.
        type_name: The raw Notion ``type`` string.
        has_children: Whether the block has nested children.
        rich_text: The block's text runs (empty for unhandled kinds).
    """

    id: str
    kind: BlockKind
    type_name: str
    has_children: bool = False
    rich_text: list[RemoteRichText] = []

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> RemoteBlock:
        """Build a block from a Notion API block object.

        Raises:
            KeyError: If the payload has no ``id`` or ``type``.
        """
        type_name = payload["type"]
        kind = BlockKind.from_type_name(type_name)
        rich_text: list[RemoteRichText] = []
        if kind is not BlockKind.UNHANDLED:
            content = payload.get(type_name) or {}
            rich_text = [
                RemoteRichText.from_api(item)
                for item in content.get("rich_text", [])
            ]
        return cls(
            id=payload["id"],
            kind=kind,
            type_name=type_name,
            has_children=bool(payload.get("has_children", False)),
            rich_text=rich_text,
        )


class ChildrenPage(BaseModel):
    """One page of a ``list_children`` call."""

    items: list[RemoteBlock] = []
    has_more: bool = False
    next_cursor: str | None = None

    model_config = {"frozen": True}


class RemoteBlockWithChildren(BaseModel):
    """A remote block and its recursively fetched children, in order."""

    block: RemoteBlock
    children: list[RemoteBlockWithChildren] = []

    model_config = {"frozen": True}


RemoteBlockWithChildren.model_rebuild()


class BlockToCreate(BaseModel):
    """A block creation request without nested children.

    Notion only returns the identifier of a new block in the creation
    response, so nested children are created by a later request.
    """

    kind: BlockKind
    rich_text: list[str]

    model_config = {"frozen": True}

    def to_api(self) -> dict[str, Any]:
        """Render the Notion append-children payload for this block."""
        if self.kind is BlockKind.UNHANDLED:
            raise ValueError("Cannot create a block of an unhandled kind")
        content: dict[str, Any] = {
            "rich_text": [
                {
                    "type": "text",
                    "text": {"content": text, "link": None},
                    "annotations": {
                        "bold": False,
                        "italic": False,
                        "strikethrough": False,
                        "underline": False,
                        "code": False,
                        "color": "default",
                    },
                }
                for text in self.rich_text
            ],
            "color": "default",
        }
        return {
            "object": "block",
            "type": self.kind.value,
            self.kind.value: content,
        }


class BlockWithChildrenToCreate(BaseModel):
    """A creation request together with the children to attach afterwards."""

    block: BlockToCreate
    children: list[BlockWithChildrenToCreate] = []

    model_config = {"frozen": True}


BlockWithChildrenToCreate.model_rebuild()
