"""Lexical Markdown events.

Markdown is lexed with mistune's AST renderer and the AST is flattened into
a linear stream of start/end/text events. The parser in
``markdown_to_tags`` reconstructs tags from that stream and the serializer
in ``tags_to_markdown`` produces the same kind of stream from tags.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Union

import mistune

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartHeading:
    level: int


@dataclass(frozen=True)
class EndHeading:
    pass


@dataclass(frozen=True)
class StartParagraph:
    pass


@dataclass(frozen=True)
class EndParagraph:
    pass


@dataclass(frozen=True)
class StartList:
    ordered: bool = True
    start: int | None = None


@dataclass(frozen=True)
class EndList:
    pass


@dataclass(frozen=True)
class StartItem:
    pass


@dataclass(frozen=True)
class EndItem:
    pass


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Unsupported:
    """A Markdown construct with no tag counterpart (code block, quote...)."""

    construct: str


Event = Union[
    StartHeading,
    EndHeading,
    StartParagraph,
    EndParagraph,
    StartList,
    EndList,
    StartItem,
    EndItem,
    Text,
    Unsupported,
]


class PeekableEvents:
    """Iterator wrapper with one-event lookahead."""

    def __init__(self, events: Iterable[Event]):
        self._events: Iterator[Event] = iter(events)
        self._lookahead: deque[Event] = deque()

    def peek(self) -> Event | None:
        if not self._lookahead:
            try:
                self._lookahead.append(next(self._events))
            except StopIteration:
                return None
        return self._lookahead[0]

    def next(self) -> Event | None:
        if self._lookahead:
            return self._lookahead.popleft()
        return next(self._events, None)


# Inline tokens whose styling is dropped but whose text is kept
_STYLED_INLINE = frozenset({"emphasis", "strong", "link", "strikethrough"})


def parse_markdown_ast(markdown_text: str) -> list[dict[str, Any]]:
    """Lex Markdown into mistune's AST token list."""
    markdown = mistune.create_markdown(renderer="ast")
    tokens = markdown(markdown_text)
    return tokens  # type: ignore[return-value]


def markdown_events(markdown_text: str) -> Iterator[Event]:
    """Lex Markdown text into a flat event stream."""
    return ast_to_events(parse_markdown_ast(markdown_text))


def ast_to_events(tokens: Iterable[dict[str, Any]]) -> Iterator[Event]:
    """Flatten mistune block tokens into events, in document order."""
    for token in tokens:
        yield from _block_events(token)


def _block_events(token: dict[str, Any]) -> Iterator[Event]:
    token_type = token.get("type")
    children = token.get("children") or []

    match token_type:
        case "blank_line":
            return
        case "heading":
            level = token.get("attrs", {}).get("level", 1)
            yield StartHeading(level)
            yield from _inline_events(children)
            yield EndHeading()
        case "paragraph":
            yield StartParagraph()
            yield from _inline_events(children)
            yield EndParagraph()
        case "block_text":
            # Tight list items hold their text without a paragraph
            yield from _inline_events(children)
        case "list":
            attrs = token.get("attrs", {})
            yield StartList(
                ordered=bool(attrs.get("ordered", False)),
                start=attrs.get("start"),
            )
            for child in children:
                yield from _block_events(child)
            yield EndList()
        case "list_item":
            yield StartItem()
            for child in children:
                yield from _block_events(child)
            yield EndItem()
        case _:
            yield Unsupported(str(token_type))


def _inline_events(tokens: Iterable[dict[str, Any]]) -> Iterator[Event]:
    for token in tokens:
        token_type = token.get("type")
        match token_type:
            case "text" | "codespan":
                if token_type == "codespan":
                    logger.warning(
                        "Inline code formatting is not supported, keeping plain text"
                    )
                yield Text(token.get("raw", ""))
            case "softbreak" | "linebreak":
                yield Text("\n")
            case _ if token_type in _STYLED_INLINE:
                logger.warning(
                    "%s formatting is not supported, keeping plain text",
                    token_type,
                )
                yield from _inline_events(token.get("children") or [])
            case _:
                yield Unsupported(str(token_type))
