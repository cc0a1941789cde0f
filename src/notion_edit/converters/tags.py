"""Transport-agnostic document tree.

A document is an ordered list of ``Tag`` values. Tags are frozen pydantic
models; the tree owns its children outright, so there are no cycles and no
shared nodes.

- ``Heading`` and ``Paragraph`` carry one or more ``RichText`` runs.
- ``OrderedList`` carries one or more ``OrderedListItem``.
- ``OrderedListItem`` carries its own text plus nested ``Tag`` children.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Union

from pydantic import BaseModel, Field


class HeadingLevel(IntEnum):
    """Heading levels supported by Notion."""

    H1 = 1
    H2 = 2
    H3 = 3


class RichText(BaseModel):
    """A plain-text run. Styling is not modelled."""

    text: str = Field(min_length=1)

    model_config = {"frozen": True}


class Heading(BaseModel):
    level: HeadingLevel
    text: list[RichText] = Field(min_length=1)

    model_config = {"frozen": True}


class Paragraph(BaseModel):
    text: list[RichText] = Field(min_length=1)

    model_config = {"frozen": True}


class OrderedListItem(BaseModel):
    """One numbered item with its nested content.

    Attributes:
        text: The item's own text.
        children: Nested tags, commonly an ``OrderedList`` optionally
            followed by paragraphs.
    """

    text: list[RichText] = Field(min_length=1)
    children: list[Tag] = []

    model_config = {"frozen": True}


class OrderedList(BaseModel):
    items: list[OrderedListItem] = Field(min_length=1)

    model_config = {"frozen": True}


Tag = Union[Heading, Paragraph, OrderedList]

OrderedListItem.model_rebuild()


def plain_text(runs: list[RichText]) -> str:
    """Concatenate rich-text runs into one string."""
    return "".join(run.text for run in runs)


def text_runs(text: str) -> list[RichText]:
    """Build the run list for a single piece of plain text."""
    return [RichText(text=text)]


def normalize_text(text: str) -> str:
    """Reduce text to the form Markdown preserves.

    Markdown drops leading and trailing whitespace of every line, reads four
    leading spaces as a code block and splits paragraphs at blank lines, so
    lines are stripped and blank lines removed.
    """
    lines = (line.strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)
