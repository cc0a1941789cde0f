"""Document tags to Markdown.

Serialization happens in two steps, mirroring parsing:

1. ``tag_to_events`` turns each tag into a well-formed event sequence.
2. ``render_events`` writes an event stream as CommonMark text.

The output is the canonical form read back by ``markdown_to_tags``: blocks
separated by one blank line, loose numbered lists with every item numbered
``1.``, and nested content indented by the width of the list marker.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator

from ..errors import MarkupRenderError
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
)
from .tags import Heading, OrderedList, Paragraph, RichText, Tag, normalize_text

logger = logging.getLogger(__name__)

LIST_MARKER = "1. "
LIST_INDENT = " " * len(LIST_MARKER)

# Characters that start inline constructs (emphasis, code, links, HTML,
# entities, closing heading sequences)
_INLINE_SPECIAL = re.compile(r"([\\`*_\[\]<>&#])")
# Line starts that would open a block construct
_BLOCK_START = re.compile(r"^(\s*)([-+=>~|])")
_ORDERED_MARKER = re.compile(r"^(\s*\d+)([.)])")


def tag_to_events(tag: Tag) -> list[Event]:
    """Serialize one tag into its event sequence."""
    match tag:
        case Heading(level=level, text=text):
            return [StartHeading(int(level)), *_text_events(text), EndHeading()]
        case Paragraph(text=text):
            return [StartParagraph(), *_text_events(text), EndParagraph()]
        case OrderedList(items=items):
            events: list[Event] = [StartList(ordered=True, start=None)]
            for item in items:
                events.append(StartItem())
                events.append(StartParagraph())
                events.extend(_text_events(item.text))
                events.append(EndParagraph())
                for child in item.children:
                    events.extend(tag_to_events(child))
                events.append(EndItem())
            events.append(EndList())
            return events
    raise TypeError(f"Unknown tag type: {type(tag).__name__}")


def tags_to_events(tags: Iterable[Tag]) -> Iterator[Event]:
    """Serialize a document into one continuous event stream."""
    for tag in tags:
        yield from tag_to_events(tag)


def _text_events(runs: list[RichText]) -> list[Event]:
    return [Text(run.text) for run in runs]


def escape_text(text: str) -> str:
    """Backslash-escape text so it reads back as plain text.

    Whitespace is normalized first: indented lines would read back as code
    and blank lines would split the block.
    """
    lines = []
    for line in _INLINE_SPECIAL.sub(r"\\\1", normalize_text(text)).split("\n"):
        line = _BLOCK_START.sub(r"\1\\\2", line)
        line = _ORDERED_MARKER.sub(r"\1\\\2", line)
        lines.append(line)
    return "\n".join(lines)


def _indent(body: str, first: str, rest: str) -> str:
    """Prefix the first line with ``first`` and other non-blank lines with ``rest``."""
    lines = body.split("\n")
    out = [first + lines[0]]
    out.extend(rest + line if line else "" for line in lines[1:])
    return "\n".join(out)


class MarkdownWriter:
    """Render an event stream as Markdown text.

    The writer expects the event shapes produced by ``tag_to_events`` and
    raises ``MarkupRenderError`` on anything else.
    """

    def __init__(self, events: Iterable[Event]):
        self._events = PeekableEvents(events)

    def render(self) -> str:
        blocks: list[str] = []
        while (event := self._events.next()) is not None:
            blocks.append(self._render_block(event))
        return "\n\n".join(blocks)

    def _expect(self, expected: type) -> None:
        event = self._events.next()
        if not isinstance(event, expected):
            raise MarkupRenderError(
                f"Expected {expected.__name__}, found {event!r}"
            )

    def _render_text(self) -> str:
        parts: list[str] = []
        while isinstance(event := self._events.peek(), Text):
            self._events.next()
            parts.append(event.text)
        if not parts:
            raise MarkupRenderError(
                f"Expected text, found {self._events.peek()!r}"
            )
        text = escape_text("".join(parts))
        if not text:
            raise MarkupRenderError("Text is empty after whitespace normalization")
        return text

    def _render_block(self, event: Event) -> str:
        match event:
            case StartHeading(level=level):
                text = self._render_text()
                if "\n" in text:
                    logger.warning(
                        "Heading text spans several lines; joining them: %r", text
                    )
                    text = text.replace("\n", " ")
                self._expect(EndHeading)
                return f"{'#' * level} {text}"
            case StartParagraph():
                text = self._render_text()
                self._expect(EndParagraph)
                return text
            case StartList(ordered=True):
                items: list[str] = []
                while isinstance(self._events.peek(), StartItem):
                    self._events.next()
                    items.append(self._render_item())
                self._expect(EndList)
                return "\n\n".join(items)
        raise MarkupRenderError(f"Unexpected {event!r} at block level")

    def _render_item(self) -> str:
        if isinstance(self._events.peek(), StartParagraph):
            self._events.next()
            parts = [self._render_text()]
            self._expect(EndParagraph)
        else:
            parts = [self._render_text()]

        while not isinstance(event := self._events.next(), EndItem):
            if event is None:
                raise MarkupRenderError("Unexpected end of events inside list item")
            parts.append(self._render_block(event))

        return _indent("\n\n".join(parts), LIST_MARKER, LIST_INDENT)


def render_events(events: Iterable[Event]) -> str:
    """Render an event stream as Markdown, without a trailing newline."""
    return MarkdownWriter(events).render()


def tags_to_markdown(tags: Iterable[Tag]) -> str:
    """Serialize a document to Markdown text ending with a newline."""
    return render_events(tags_to_events(tags)) + "\n"
