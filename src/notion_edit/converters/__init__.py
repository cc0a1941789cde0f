"""Format conversion between Notion blocks, document tags and Markdown."""

from .markdown_to_tags import MarkdownEventParser, parse_markdown
from .notion_to_tags import transduce
from .tags import (
    Heading,
    HeadingLevel,
    OrderedList,
    OrderedListItem,
    Paragraph,
    RichText,
    Tag,
)
from .tags_to_markdown import render_events, tag_to_events, tags_to_markdown
from .tags_to_notion import tags_to_blocks

__all__ = [
    "Heading",
    "HeadingLevel",
    "MarkdownEventParser",
    "OrderedList",
    "OrderedListItem",
    "Paragraph",
    "RichText",
    "Tag",
    "parse_markdown",
    "render_events",
    "tag_to_events",
    "tags_to_blocks",
    "tags_to_markdown",
    "transduce",
]
