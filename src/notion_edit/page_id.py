"""Parsing of Notion page identifiers given on the command line.

A page can be named by its UUID, in canonical (hyphenated) or compact form,
or by the URL the Notion app shows for it::

    https://www.notion.so/workspace/Page-title-0b89a6e8f0064acc8ec6e6902b039e3a

For a database row opened as a peek, the row's page id is carried by the
``p`` query parameter and takes precedence over the id in the path.
"""

from __future__ import annotations

import uuid
from urllib.parse import parse_qs, urlsplit

NOTION_HOSTNAMES = frozenset({"www.notion.so", "notion.so"})


class PageIdError(ValueError):
    """Base class for page identifier parsing failures."""


class InvalidUuidError(PageIdError):
    def __init__(self, candidate: str):
        super().__init__(f"Invalid UUID: cannot parse '{candidate}'")
        self.candidate = candidate


class MissingHostnameError(PageIdError):
    def __init__(self) -> None:
        super().__init__("Invalid URL: missing hostname")


class NotNotionHostnameError(PageIdError):
    def __init__(self, hostname: str):
        super().__init__(f"Invalid URL: not a Notion URL: {hostname}")
        self.hostname = hostname


class NoPathSegmentsError(PageIdError):
    def __init__(self) -> None:
        super().__init__("Invalid URL: empty path")


class NotEnoughPathSegmentsError(PageIdError):
    def __init__(self) -> None:
        super().__init__(
            "Invalid URL: page ID missing in the URL. "
            "Expected page ID to be the 2nd segment in the path"
        )


class InvalidUuidInPathError(PageIdError):
    def __init__(self, candidate: str):
        super().__init__(f"Invalid URL: invalid UUID '{candidate}' in path")
        self.candidate = candidate


class InvalidUuidInQueryError(PageIdError):
    def __init__(self, candidate: str):
        super().__init__(
            f"Invalid URL: invalid UUID '{candidate}' in query parameters"
        )
        self.candidate = candidate


def _parse_uuid(candidate: str) -> str | None:
    try:
        return str(uuid.UUID(hex=candidate))
    except ValueError:
        return None


def parse_page_id_from_uuid(value: str) -> str:
    """Normalize a bare page UUID to its hyphenated lowercase form.

    Raises:
        InvalidUuidError: If ``value`` is not a UUID.
    """
    page_id = _parse_uuid(value.strip())
    if page_id is None:
        raise InvalidUuidError(value)
    return page_id


def parse_page_id_from_url(url: str) -> str:
    """Extract the page id from a Notion page URL.

    Raises:
        MissingHostnameError: If the URL has no host.
        NotNotionHostnameError: If the host is not a Notion host.
        NoPathSegmentsError: If the URL has no path.
        NotEnoughPathSegmentsError: If the path has no second segment.
        InvalidUuidInPathError: If the second segment does not end in a UUID.
        InvalidUuidInQueryError: If the ``p`` query parameter is not a UUID.
    """
    parts = urlsplit(url)
    hostname = parts.hostname
    if not hostname:
        raise MissingHostnameError()
    if hostname not in NOTION_HOSTNAMES:
        raise NotNotionHostnameError(hostname)

    if not parts.path:
        raise NoPathSegmentsError()
    segments = parts.path[1:].split("/")
    if len(segments) < 2 or not segments[1]:
        raise NotEnoughPathSegmentsError()

    # The title slug precedes the id: Page-title-<id>
    path_candidate = segments[1].split("-")[-1]
    page_id = _parse_uuid(path_candidate)
    if page_id is None:
        raise InvalidUuidInPathError(path_candidate)

    query = parse_qs(parts.query)
    if "p" in query:
        query_candidate = query["p"][0]
        page_id = _parse_uuid(query_candidate)
        if page_id is None:
            raise InvalidUuidInQueryError(query_candidate)

    return page_id


def parse_page_id(value: str) -> str:
    """Parse a page id given as a UUID or as a Notion URL.

    Returns:
        The hyphenated lowercase page UUID.

    Raises:
        PageIdError: If ``value`` names no page.
    """
    if "://" in value:
        return parse_page_id_from_url(value)
    return parse_page_id_from_uuid(value)
