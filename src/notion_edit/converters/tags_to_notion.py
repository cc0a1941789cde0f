"""Document tags to Notion block creation requests.

Notion has no list container, so an ``OrderedList`` expands into one
``numbered_list_item`` request per item. Item children travel with the
request and are created once the item's identifier is known.
"""

from __future__ import annotations

from typing import Iterable

from ..core.models import BlockKind, BlockToCreate, BlockWithChildrenToCreate
from .tags import Heading, HeadingLevel, OrderedList, Paragraph, RichText, Tag

_HEADING_KINDS = {
    HeadingLevel.H1: BlockKind.HEADING_1,
    HeadingLevel.H2: BlockKind.HEADING_2,
    HeadingLevel.H3: BlockKind.HEADING_3,
}


def _block(kind: BlockKind, text: list[RichText]) -> BlockToCreate:
    return BlockToCreate(kind=kind, rich_text=[run.text for run in text])


def tag_to_blocks(tag: Tag) -> list[BlockWithChildrenToCreate]:
    """Map one tag to the sibling blocks that represent it."""
    match tag:
        case Heading(level=level, text=text):
            return [BlockWithChildrenToCreate(block=_block(_HEADING_KINDS[level], text))]
        case Paragraph(text=text):
            return [BlockWithChildrenToCreate(block=_block(BlockKind.PARAGRAPH, text))]
        case OrderedList(items=items):
            return [
                BlockWithChildrenToCreate(
                    block=_block(BlockKind.NUMBERED_LIST_ITEM, item.text),
                    children=tags_to_blocks(item.children),
                )
                for item in items
            ]
    raise TypeError(f"Unknown tag type: {type(tag).__name__}")


def tags_to_blocks(tags: Iterable[Tag]) -> list[BlockWithChildrenToCreate]:
    """Map a sequence of sibling tags to sibling block requests, in order."""
    blocks: list[BlockWithChildrenToCreate] = []
    for tag in tags:
        blocks.extend(tag_to_blocks(tag))
    return blocks
