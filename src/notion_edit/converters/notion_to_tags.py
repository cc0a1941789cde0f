"""Notion blocks to document tags.

Notion has no list container: a numbered list is a run of sibling
``numbered_list_item`` blocks. ``transduce`` walks siblings in order and
collapses each run into a single ``OrderedList`` tag while emitting every
other block as soon as the order allows.

The conversion is a three-state machine:

- ``Idle``: no pending list.
- ``ProcessingList``: list items collected, waiting for the run to end.
- ``WithBufferedTag``: a run just ended; the list was emitted and the tag
  that ended it is held for the next pull.

``step`` is the transition function and ``flush`` handles end of input. At
most one tag is emitted per input block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from ..core.models import BlockKind, RemoteBlock, RemoteBlockWithChildren
from ..errors import (
    EmptyBlockError,
    UnexpectedChildrenError,
    UnhandledBlockKindError,
    UnhandledRichTextError,
)
from .tags import (
    Heading,
    HeadingLevel,
    OrderedList,
    OrderedListItem,
    Paragraph,
    RichText,
    Tag,
    normalize_text,
    text_runs,
)

logger = logging.getLogger(__name__)

_HEADING_LEVELS = {
    BlockKind.HEADING_1: HeadingLevel.H1,
    BlockKind.HEADING_2: HeadingLevel.H2,
    BlockKind.HEADING_3: HeadingLevel.H3,
}


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class ProcessingList:
    items: tuple[OrderedListItem, ...]


@dataclass(frozen=True)
class WithBufferedTag:
    tag: Tag


State = Union[Idle, ProcessingList, WithBufferedTag]


def step(
    state: State, converted: Tag | OrderedListItem
) -> tuple[State, Tag | None]:
    """Advance the state machine by one converted block.

    Args:
        state: Current state.
        converted: The converted input: an ``OrderedListItem`` for a list
            block, a ``Tag`` for anything else.

    Returns:
        The new state and the tag to emit, if any.
    """
    is_item = isinstance(converted, OrderedListItem)

    match state:
        case Idle():
            if is_item:
                return ProcessingList((converted,)), None
            return Idle(), converted
        case ProcessingList(items=items):
            if is_item:
                return ProcessingList(items + (converted,)), None
            return WithBufferedTag(converted), OrderedList(items=list(items))
        case WithBufferedTag(tag=buffered):
            if is_item:
                return ProcessingList((converted,)), buffered
            return WithBufferedTag(converted), buffered
    raise TypeError(f"Unknown transducer state: {state!r}")


def flush(state: State) -> Tag | None:
    """Return the tag still pending at end of input, if any."""
    match state:
        case Idle():
            return None
        case ProcessingList(items=items):
            return OrderedList(items=list(items))
        case WithBufferedTag(tag=buffered):
            return buffered
    raise TypeError(f"Unknown transducer state: {state!r}")


def _plain_text(block: RemoteBlock) -> str:
    for run in block.rich_text:
        if run.type != "text":
            raise UnhandledRichTextError(block.id, run.type)
    return normalize_text("".join(run.plain_text for run in block.rich_text))


def _rich_text(block: RemoteBlock, single_line: bool = False) -> list[RichText]:
    """Join the runs of a block into one normalized run.

    Styling is not modelled, so run boundaries carry no information and the
    single run is what a Markdown round trip yields.
    """
    text = _plain_text(block)
    if not text:
        raise EmptyBlockError(block.id, block.type_name)
    if single_line:
        text = text.replace("\n", " ")
    return text_runs(text)


def _is_spacer(node: RemoteBlockWithChildren) -> bool:
    """Blank paragraphs are Notion spacer lines with no Markdown form."""
    return (
        node.block.kind is BlockKind.PARAGRAPH
        and not node.children
        and not _plain_text(node.block)
    )


def convert_block(
    node: RemoteBlockWithChildren,
) -> Tag | OrderedListItem:
    """Convert one block; list blocks become items with converted children.

    Raises:
        UnhandledBlockKindError: For block types without a tag counterpart.
        UnexpectedChildrenError: For non-list blocks that have children.
        UnhandledRichTextError: For mentions, equations and other non-text runs.
        EmptyBlockError: For headings and list items without text.
    """
    block = node.block

    if block.kind is BlockKind.UNHANDLED:
        raise UnhandledBlockKindError(block.id, block.type_name)

    if block.kind is BlockKind.NUMBERED_LIST_ITEM:
        return OrderedListItem(
            text=_rich_text(block),
            children=list(transduce(node.children)),
        )

    if node.children:
        raise UnexpectedChildrenError(block.id, block.type_name)

    if block.kind in _HEADING_LEVELS:
        return Heading(
            level=_HEADING_LEVELS[block.kind],
            text=_rich_text(block, single_line=True),
        )
    return Paragraph(text=_rich_text(block))


def transduce(blocks: Iterable[RemoteBlockWithChildren]) -> Iterator[Tag]:
    """Lazily convert sibling blocks into tags, collapsing list runs.

    Example:
        tags = list(transduce(await fetch_block_tree(client, page_id)))
    """
    state: State = Idle()
    for node in blocks:
        if _is_spacer(node):
            logger.debug("Skipping empty paragraph %s", node.block.id)
            continue
        state, emitted = step(state, convert_block(node))
        if emitted is not None:
            yield emitted

    pending = flush(state)
    if pending is not None:
        yield pending
