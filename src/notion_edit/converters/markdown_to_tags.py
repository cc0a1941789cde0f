"""Markdown to document tags, via a recursive-descent parser over events.

The parser is strict: it reconstructs the shapes produced by
``tags_to_markdown`` (plus tight lists, which hand-edited files often use)
and raises ``ParseError`` on anything else instead of returning a partial
tree.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import ParseError, UnsupportedHeadingLevelError
from .events import (
    EndHeading,
    EndItem,
    EndList,
    EndParagraph,
    Event,
    PeekableEvents,
    StartHeading,
    StartItem,
    StartList,
    StartParagraph,
    Text,
    Unsupported,
    markdown_events,
)
from .tags import (
    Heading,
    HeadingLevel,
    OrderedList,
    OrderedListItem,
    Paragraph,
    RichText,
    Tag,
)

logger = logging.getLogger(__name__)


class MarkdownEventParser:
    """Rebuild tags from a Markdown event stream.

    Example:
        tags = MarkdownEventParser(markdown_events(text)).parse()
    """

    def __init__(self, events: Iterable[Event]):
        self._events = PeekableEvents(events)

    def parse(self) -> list[Tag]:
        """Consume the whole stream and return the top-level tags.

        Raises:
            ParseError: If the stream does not describe a supported document.
        """
        tags: list[Tag] = []
        while (event := self._events.next()) is not None:
            tags.append(self._parse_block(event))
        return tags

    def _expect(self, context: str) -> Event:
        event = self._events.next()
        if event is None:
            raise ParseError(f"Unexpected end of document inside {context}")
        return event

    def _parse_block(self, event: Event) -> Tag:
        match event:
            case StartHeading(level=level):
                return self._parse_heading(level)
            case StartParagraph():
                return self._parse_paragraph()
            case StartList(ordered=True):
                return self._parse_list()
            case StartList(ordered=False):
                raise ParseError(
                    "Bulleted lists are not supported, use a numbered list"
                )
            case Unsupported(construct=construct):
                raise ParseError(
                    f"Unsupported Markdown construct '{construct}'"
                )
            case _:
                raise ParseError(f"Unexpected {event!r} at block level")

    def _parse_text(self, context: str) -> list[RichText]:
        """Consume one or more Text events and join them into one run."""
        parts: list[str] = []
        while isinstance(event := self._events.peek(), Text):
            self._events.next()
            parts.append(event.text)

        text = "".join(parts)
        if not text.strip():
            found = self._events.peek()
            raise ParseError(
                f"{context} must contain text, found {found!r}"
            )
        return [RichText(text=text)]

    def _expect_end(self, end_type: type, context: str) -> None:
        event = self._expect(context)
        if not isinstance(event, end_type):
            raise ParseError(
                f"{context} should end with {end_type.__name__}, found {event!r}"
            )

    def _parse_heading(self, level: int) -> Heading:
        try:
            heading_level = HeadingLevel(level)
        except ValueError:
            raise UnsupportedHeadingLevelError(level) from None

        text = self._parse_text("Heading")
        self._expect_end(EndHeading, "Heading")
        return Heading(level=heading_level, text=text)

    def _parse_paragraph(self) -> Paragraph:
        text = self._parse_text("Paragraph")
        self._expect_end(EndParagraph, "Paragraph")
        return Paragraph(text=text)

    def _parse_list(self) -> OrderedList:
        items: list[OrderedListItem] = []
        while isinstance(self._events.peek(), StartItem):
            self._events.next()
            items.append(self._parse_list_item())

        if not items:
            raise ParseError("Numbered list must contain at least one item")
        self._expect_end(EndList, "Numbered list")
        return OrderedList(items=items)

    def _parse_list_item(self) -> OrderedListItem:
        # Loose lists wrap the item text in a paragraph, tight lists do not
        if isinstance(self._events.peek(), StartParagraph):
            self._events.next()
            text = self._parse_text("List item")
            self._expect_end(EndParagraph, "List item paragraph")
        else:
            text = self._parse_text("List item")

        children: list[Tag] = []
        while True:
            event = self._expect("list item")
            if isinstance(event, EndItem):
                break
            children.append(self._parse_block(event))

        return OrderedListItem(text=text, children=children)


def parse_markdown(markdown_text: str) -> list[Tag]:
    """Parse Markdown text into document tags.

    Raises:
        ParseError: If the document uses unsupported or malformed constructs.
    """
    tags = MarkdownEventParser(markdown_events(markdown_text)).parse()
    logger.debug("Parsed %d top-level tags from Markdown", len(tags))
    return tags
