"""Index tools for FastMCP.

Thin wrappers over `Index` so agents can search, inspect and clean up an index.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from fastmcp import FastMCP

from docuindex.client import SearchClient
from docuindex.query import Query
from docuindex.tasks import TaskReference


def _serialize_task(task: TaskReference) -> Dict[str, Any]:
    return {"index": task.index_name, "task_id": task.task_id, "object_id": task.object_id}


def register_index_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register index tools on the given FastMCP instance.

    The `get_state` callable should return an object with attribute `client`
    holding a configured `SearchClient`.
    """

    def _get_client() -> SearchClient:
        state = get_state()
        client = getattr(state, "client", None)
        if client is None:
            raise RuntimeError(
                "Search service is not configured. Set DOCUINDEX_SERVICE__BASE_URL, "
                "DOCUINDEX_SERVICE__APP_ID, DOCUINDEX_SERVICE__API_KEY."
            )
        return client

    @mcp.tool
    async def index_search(
        index_name: str,
        query: str = "",
        *,
        filters: Optional[str] = None,
        hits_per_page: Optional[int] = 20,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Search an index and return the raw search response (hits, nbHits, page...)."""
        index = _get_client().init_index(index_name)
        q = Query(query=query, filters=filters, hits_per_page=hits_per_page, page=page)
        return await index.search(q)

    @mcp.tool
    async def index_get_object(
        index_name: str, object_id: str, attributes: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Fetch one document by objectID, optionally projecting attributes."""
        index = _get_client().init_index(index_name)
        return await index.get_object(object_id, attributes=attributes)

    @mcp.tool
    async def index_save_objects(
        index_name: str, objects: List[Dict[str, Any]], wait: bool = False
    ) -> Dict[str, Any]:
        """Add or replace documents. Each document must carry an objectID.

        With ``wait`` the call returns only once the write is searchable.
        """
        index = _get_client().init_index(index_name)
        task = await index.save_objects(objects)
        if wait:
            await index.wait_task(task)
        return {**_serialize_task(task), "published": wait}

    @mcp.tool
    async def index_delete_objects(
        index_name: str, object_ids: List[str], wait: bool = False
    ) -> Dict[str, Any]:
        """Delete documents by objectID."""
        index = _get_client().init_index(index_name)
        task = await index.delete_objects(object_ids)
        if wait:
            await index.wait_task(task)
        return {**_serialize_task(task), "published": wait}

    @mcp.tool
    async def index_wait_task(index_name: str, task_id: str) -> Dict[str, Any]:
        """Wait until a task returned by a write is published."""
        index = _get_client().init_index(index_name)
        await index.wait_task(task_id)
        return {"index": index_name, "task_id": task_id, "published": True}

    @mcp.tool
    async def index_browse(
        index_name: str,
        query: str = "",
        *,
        cursor: Optional[str] = None,
        limit: int = 100,
    ) -> Dict[str, Any]:
        """Scan an index, returning about `limit` documents and a resume cursor.

        Scanning stops on a page boundary: once `limit` is reached the rest of
        the current page is still returned, so resuming from `cursor` never
        skips a hit. `cursor` is null when the scan is complete.
        """
        index = _get_client().init_index(index_name)
        q = Query(query=query or None)
        browser = index.browse_from(q, cursor) if cursor else index.browse(q)
        hits: List[Dict[str, Any]] = []
        while len(hits) < max(0, int(limit)) and await browser.has_next():
            hits.append(browser.next())
        # Drain the page in hand without fetching the next one
        while browser.remaining_in_page > 0 and await browser.has_next():
            hits.append(browser.next())
        return {"hits": hits, "cursor": browser.cursor}

    @mcp.tool
    async def index_delete_by_query(
        index_name: str, query: str = "", filters: Optional[str] = None
    ) -> Dict[str, Any]:
        """Delete every document matching the query and filters."""
        index = _get_client().init_index(index_name)
        deleted = await index.delete_by_query(Query(query=query, filters=filters))
        return {"index": index_name, "deleted": deleted}

    @mcp.tool
    async def index_list_keys(index_name: str) -> List[Dict[str, Any]]:
        """List API keys scoped to an index."""
        index = _get_client().init_index(index_name)
        return await index.list_keys()
