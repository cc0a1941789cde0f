"""Tests for mapping document tags to Notion creation requests."""

import pytest

from notion_edit.converters.tags import (
    Heading,
    HeadingLevel,
    OrderedList,
    OrderedListItem,
    Paragraph,
    RichText,
    text_runs,
)
from notion_edit.converters.tags_to_notion import tag_to_blocks, tags_to_blocks
from notion_edit.core.models import BlockKind, BlockToCreate


@pytest.mark.parametrize(
    "level,kind",
    [
        (HeadingLevel.H1, BlockKind.HEADING_1),
        (HeadingLevel.H2, BlockKind.HEADING_2),
        (HeadingLevel.H3, BlockKind.HEADING_3),
    ],
)
def test_heading_levels(level, kind):
    [block] = tag_to_blocks(Heading(level=level, text=text_runs("Title")))
    assert block.block == BlockToCreate(kind=kind, rich_text=["Title"])
    assert block.children == []


def test_paragraph_keeps_runs():
    [block] = tag_to_blocks(
        Paragraph(text=[RichText(text="a"), RichText(text="b")])
    )
    assert block.block.kind is BlockKind.PARAGRAPH
    assert block.block.rich_text == ["a", "b"]


def test_list_expands_to_sibling_items():
    tag = OrderedList(
        items=[
            OrderedListItem(text=text_runs("one")),
            OrderedListItem(
                text=text_runs("two"),
                children=[Paragraph(text=text_runs("detail"))],
            ),
        ]
    )
    blocks = tag_to_blocks(tag)
    assert [b.block.rich_text for b in blocks] == [["one"], ["two"]]
    assert all(b.block.kind is BlockKind.NUMBERED_LIST_ITEM for b in blocks)
    assert blocks[0].children == []
    assert [c.block.rich_text for c in blocks[1].children] == [["detail"]]


def test_sibling_order_is_preserved():
    tags = [
        Heading(level=HeadingLevel.H1, text=text_runs("h")),
        OrderedList(items=[OrderedListItem(text=text_runs("i"))]),
        Paragraph(text=text_runs("p")),
    ]
    assert [b.block.kind for b in tags_to_blocks(tags)] == [
        BlockKind.HEADING_1,
        BlockKind.NUMBERED_LIST_ITEM,
        BlockKind.PARAGRAPH,
    ]


def test_creation_payload():
    payload = BlockToCreate(
        kind=BlockKind.NUMBERED_LIST_ITEM, rich_text=["Item"]
    ).to_api()
    assert payload["type"] == "numbered_list_item"
    [run] = payload["numbered_list_item"]["rich_text"]
    assert run["type"] == "text"
    assert run["text"]["content"] == "Item"
    assert "children" not in payload["numbered_list_item"]


def test_unhandled_kind_cannot_be_created():
    with pytest.raises(ValueError):
        BlockToCreate(kind=BlockKind.UNHANDLED, rich_text=["x"]).to_api()
