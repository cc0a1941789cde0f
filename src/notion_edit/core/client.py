import logging
import threading
from typing import Any, Protocol, Sequence

import requests
from pydantic import ValidationError

from ..config import Config
from ..errors import NotionApiError, NotionResponseError
from .models import BlockToCreate, ChildrenPage, RemoteBlock

logger = logging.getLogger(__name__)

# Largest page the Notion API returns for a children listing
MAX_PAGE_SIZE = 100


class BlockClient(Protocol):
    """The block operations the fetcher and the sync engine rely on."""

    def list_children(self, block_id: str) -> ChildrenPage: ...

    def create_children(
        self, parent_id: str, blocks: Sequence[BlockToCreate]
    ) -> list[RemoteBlock]: ...

    def delete_block(self, block_id: str) -> None: ...


class NotionClient:
    """Synchronous Notion REST client.

    Safe to share across threads: each thread gets its own
    ``requests.Session``. Async callers wrap the methods with
    ``run_sync_limited``.
    """

    def __init__(self, config: Config):
        self.config = config
        self._thread_local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The current thread's session."""
        return self._get_session()

    def _get_session(self) -> requests.Session:
        """Get or create a thread-local requests.Session."""
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "Authorization": f"Bearer {self.config.api_key}",
                "Notion-Version": self.config.notion_version,
                "Content-Type": "application/json",
            }
        )
        return session

    def _url(self, path: str) -> str:
        return f"{self.config.api_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Make a request to the Notion API and return the decoded JSON body.
        """
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._get_session().request(
                method,
                url,
                params=params,
                json=json,
                timeout=(10, self.config.request_timeout),
            )
        except requests.RequestException as e:
            raise NotionApiError(method, url, str(e)) from e

        if not response.ok:
            raise NotionApiError(
                method,
                url,
                self._error_message(response),
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise NotionResponseError(url, f"invalid JSON body: {e}") from e
        if not isinstance(body, dict):
            raise NotionResponseError(url, "expected a JSON object")
        return body

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract Notion's error message, falling back to the reason phrase."""
        try:
            body = response.json()
        except ValueError:
            return response.reason or "unknown error"
        if isinstance(body, dict) and body.get("message"):
            code = body.get("code")
            return f"{code}: {body['message']}" if code else body["message"]
        return response.reason or "unknown error"

    def _parse_blocks(
        self, url: str, results: Any
    ) -> list[RemoteBlock]:
        if not isinstance(results, list):
            raise NotionResponseError(url, "missing 'results' list")
        try:
            return [RemoteBlock.from_api(item) for item in results]
        except (KeyError, TypeError, ValidationError) as e:
            raise NotionResponseError(url, f"malformed block: {e}") from e

    def list_children(self, block_id: str) -> ChildrenPage:
        """
        List the direct children of a block or page (first page only).

        Returns:
            ChildrenPage with the blocks in document order and the
            ``has_more`` flag reported by the API.
        """
        path = f"blocks/{block_id}/children"
        body = self._request("GET", path, params={"page_size": MAX_PAGE_SIZE})
        items = self._parse_blocks(self._url(path), body.get("results"))
        return ChildrenPage(
            items=items,
            has_more=bool(body.get("has_more", False)),
            next_cursor=body.get("next_cursor"),
        )

    def create_children(
        self, parent_id: str, blocks: Sequence[BlockToCreate]
    ) -> list[RemoteBlock]:
        """
        Append blocks to a parent in one request.

        Returns:
            The created blocks, in request order, with their new identifiers.
        """
        path = f"blocks/{parent_id}/children"
        body = self._request(
            "PATCH",
            path,
            json={"children": [block.to_api() for block in blocks]},
        )
        return self._parse_blocks(self._url(path), body.get("results"))

    def delete_block(self, block_id: str) -> None:
        """
        Delete (archive) a block.
        """
        self._request("DELETE", f"blocks/{block_id}")
