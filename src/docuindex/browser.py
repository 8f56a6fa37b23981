"""Cursor-based iteration over every document of an index."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from docuindex.exceptions import IllegalStateError, MalformedResponseError, UnsupportedOperationError
from docuindex.query import Query
from docuindex.transport import Transport

logger = logging.getLogger(__name__)


class IndexBrowser:
    """Forward-only scan of an index, one browse page at a time.

    `has_next` is the only method that touches the network: it fetches the
    first page on its first call and the following page whenever the current
    one is used up and the last response carried a non-empty cursor. `next`
    returns the document `has_next` positioned on.

    An exhausted browser stays exhausted. To resume a scan later, keep
    `cursor` and start a new browser with `Index.browse_from`; the new
    browser starts at the page after the last one this browser fetched.

    Usable with ``async for`` as well.
    """

    def __init__(
        self,
        transport: Transport,
        encoded_index_name: str,
        query: Optional[Query] = None,
        cursor: Optional[str] = None,
    ) -> None:
        self._transport = transport
        self._path = f"/1/indexes/{encoded_index_name}/browse"
        self._params = (query or Query()).to_params()
        self._start_cursor = cursor
        self._cursor: Optional[str] = None
        self._hits: List[Dict[str, Any]] = []
        self._position = 0
        self._current: Optional[Dict[str, Any]] = None
        self._started = False
        self._ready = False
        self._exhausted = False
        self.pages_fetched = 0

    @property
    def cursor(self) -> Optional[str]:
        """Cursor returned with the last fetched page, if any."""
        return self._cursor

    @property
    def remaining_in_page(self) -> int:
        """Hits of the current page not yet handed out by `has_next`."""
        return len(self._hits) - self._position

    async def _fetch(self, cursor: Optional[str]) -> None:
        params = dict(self._params)
        if cursor is not None:
            params["cursor"] = cursor
        data = await self._transport.request("GET", self._path, params=params or None)
        hits = data.get("hits")
        if not isinstance(hits, list):
            raise MalformedResponseError("Browse response is missing hits")
        next_cursor = data.get("cursor")
        self._hits = hits
        self._position = 0
        self._cursor = next_cursor if isinstance(next_cursor, str) and next_cursor else None
        self.pages_fetched += 1
        logger.debug(
            "Browse page %d: %d hit(s), more=%s", self.pages_fetched, len(hits), bool(self._cursor)
        )

    async def has_next(self) -> bool:
        if self._ready:
            return True
        if self._exhausted:
            return False
        if not self._started:
            await self._fetch(self._start_cursor)
            self._started = True
        while True:
            if self._position < len(self._hits):
                self._current = self._hits[self._position]
                self._position += 1
                self._ready = True
                return True
            if self._cursor:
                await self._fetch(self._cursor)
                continue
            self._exhausted = True
            self._hits = []
            return False

    def next(self) -> Dict[str, Any]:
        if not self._ready or self._current is None:
            raise IllegalStateError("next() called without a successful has_next()")
        self._ready = False
        return self._current

    def remove(self) -> None:
        raise UnsupportedOperationError("Cannot remove while browsing")

    def __aiter__(self) -> IndexBrowser:
        return self

    async def __anext__(self) -> Dict[str, Any]:
        if not await self.has_next():
            raise StopAsyncIteration
        return self.next()
