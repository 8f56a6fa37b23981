"""Operations on a single remote index.

All writes are asynchronous on the service side: they return a
`TaskReference` immediately and become visible once `wait_task` returns.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union
from urllib.parse import quote

from docuindex.actions import (
    OBJECT_ID,
    ActionRecord,
    add_actions,
    check_object_id,
    delete_actions,
    partial_update_actions,
    update_actions,
)
from docuindex.browser import IndexBrowser
from docuindex.config import DEFAULT_TASK_WAIT_MS
from docuindex.exceptions import InvalidArgumentError, MalformedResponseError
from docuindex.keys import KeyDefinition, key_payload
from docuindex.query import Query
from docuindex.tasks import SleepFn, TaskPoller, TaskReference
from docuindex.transport import Transport

logger = logging.getLogger(__name__)

DELETE_BY_QUERY_BATCH_SIZE = 100


def encode_path_segment(value: Any, *, what: str = "objectID") -> str:
    """Percent-encode one path segment; empty or unencodable values are rejected."""
    if not isinstance(value, str):
        raise InvalidArgumentError(f"{what} must be a string, got {type(value).__name__}")
    if not value:
        raise InvalidArgumentError(f"Invalid {what}: empty string")
    try:
        return quote(value, safe="")
    except UnicodeEncodeError as exc:
        raise InvalidArgumentError(f"{what} cannot be encoded as UTF-8: {value!r}") from exc


class Index:
    """Handle on one named index. Immutable; safe to share across tasks.

    Construction does not contact the service.
    """

    def __init__(
        self,
        transport: Transport,
        name: str,
        *,
        wait_delay_ms: int = DEFAULT_TASK_WAIT_MS,
        max_wait_delay_ms: int = DEFAULT_TASK_WAIT_MS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._name = name
        self._encoded_name = encode_path_segment(name, what="index name")
        self._wait_delay_ms = wait_delay_ms
        self._max_wait_delay_ms = max_wait_delay_ms
        self._sleep = sleep

    @property
    def name(self) -> str:
        return self._name

    @property
    def encoded_name(self) -> str:
        return self._encoded_name

    def __repr__(self) -> str:
        return f"Index({self._name!r})"

    def _path(self, *segments: str) -> str:
        return "/".join(["/1/indexes", self._encoded_name, *segments])

    def _object_path(self, object_id: Any, *suffix: str) -> str:
        return self._path(encode_path_segment(object_id), *suffix)

    async def _task(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> TaskReference:
        data = await self._transport.request(method, path, body=body)
        return TaskReference.from_response(self._name, data)

    # ----- Single documents -----

    async def add_object(self, doc: Mapping[str, Any], object_id: Optional[str] = None) -> TaskReference:
        """Add a document; the service assigns an objectID unless one is given."""
        if object_id is not None:
            return await self.save_object(doc, object_id)
        return await self._task("POST", self._path(), dict(doc))

    async def save_object(self, doc: Mapping[str, Any], object_id: str) -> TaskReference:
        """Add or fully replace the document stored under ``object_id``."""
        return await self._task("PUT", self._object_path(object_id), dict(doc))

    async def partial_update_object(self, partial: Mapping[str, Any], object_id: str) -> TaskReference:
        return await self._task("POST", self._object_path(object_id, "partial"), dict(partial))

    async def delete_object(self, object_id: str) -> TaskReference:
        return await self._task("DELETE", self._object_path(object_id))

    async def get_object(self, object_id: str, attributes: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """Fetch one document, optionally restricted to ``attributes``."""
        params = {"attributes": ",".join(attributes)} if attributes else None
        return await self._transport.request("GET", self._object_path(object_id), params=params)

    async def get_objects(self, object_ids: Iterable[str]) -> List[Optional[Dict[str, Any]]]:
        """Fetch several documents in one call, in the order of ``object_ids``.

        Missing documents come back as None.
        """
        requests = []
        for oid in object_ids:
            check_object_id(oid)
            requests.append({"indexName": self._name, OBJECT_ID: oid})
        if not requests:
            raise InvalidArgumentError("get_objects requires at least one objectID")
        data = await self._transport.request("POST", "/1/indexes/*/objects", body={"requests": requests})
        results = data.get("results")
        if not isinstance(results, list):
            raise MalformedResponseError("Multi-object response is missing results")
        return results

    # ----- Batches -----

    async def batch(self, actions: Iterable[Union[ActionRecord, Mapping[str, Any]]]) -> TaskReference:
        """Submit action records as one batch, applied in the given order.

        Raw ``{action, objectID?, body}`` mappings are validated the same way
        as records. Submission is never retried.
        """
        records = [a if isinstance(a, ActionRecord) else ActionRecord.from_dict(a) for a in actions]
        if not records:
            raise InvalidArgumentError("A batch needs at least one action")
        body = {"requests": [r.to_dict() for r in records]}
        logger.debug("Submitting batch of %d action(s) to %s", len(records), self._name)
        return await self._task("POST", self._path("batch"), body)

    async def add_objects(self, docs: Iterable[Mapping[str, Any]]) -> TaskReference:
        return await self.batch(add_actions(docs))

    async def save_objects(self, docs: Iterable[Mapping[str, Any]]) -> TaskReference:
        """Replace documents in bulk; each one must carry its objectID."""
        return await self.batch(update_actions(docs))

    async def partial_update_objects(self, docs: Iterable[Mapping[str, Any]]) -> TaskReference:
        return await self.batch(partial_update_actions(docs))

    async def delete_objects(self, items: Iterable[Union[str, Mapping[str, Any]]]) -> TaskReference:
        """Delete by objectID; documents carrying an objectID are accepted too."""
        return await self.batch(delete_actions(items))

    # ----- Reads -----

    async def search(self, query: Optional[Query] = None) -> Dict[str, Any]:
        params = (query or Query()).to_params()
        return await self._transport.request("GET", self._path(), params=params or None)

    def browse(self, query: Optional[Query] = None) -> IndexBrowser:
        """Iterate over all documents matching ``query``."""
        return IndexBrowser(self._transport, self._encoded_name, query)

    def browse_from(self, query: Optional[Query], cursor: str) -> IndexBrowser:
        """Resume a scan from a cursor obtained from an earlier browser."""
        if not cursor:
            raise InvalidArgumentError("browse_from requires a non-empty cursor")
        return IndexBrowser(self._transport, self._encoded_name, query, cursor)

    async def browse_page(self, page: int, hits_per_page: Optional[int] = None) -> Dict[str, Any]:
        """Fetch one browse page by page number (no cursor)."""
        params: Dict[str, Any] = {"page": page}
        if hits_per_page is not None:
            params["hitsPerPage"] = hits_per_page
        return await self._transport.request("GET", self._path("browse"), params=params)

    # ----- Tasks -----

    async def wait_task(
        self,
        task: Union[TaskReference, str],
        *,
        initial_delay_ms: Optional[int] = None,
        max_delay_ms: Optional[int] = None,
    ) -> None:
        """Block until the task is published.

        A zero ``initial_delay_ms`` means tight polling: the doubled delay stays
        zero. Transport errors end the wait immediately.
        """
        task_id = task.task_id if isinstance(task, TaskReference) else task
        poller = TaskPoller(
            self._transport,
            self._encoded_name,
            initial_delay_ms=self._wait_delay_ms if initial_delay_ms is None else initial_delay_ms,
            max_delay_ms=self._max_wait_delay_ms if max_delay_ms is None else max_delay_ms,
            sleep=self._sleep,
        )
        await poller.wait(task_id, encode_path_segment(task_id, what="taskID"))

    # ----- Composite -----

    async def delete_by_query(self, query: Optional[Query] = None) -> int:
        """Delete every document matching ``query``; returns the number deleted.

        Each round searches, deletes the page of hits and waits for that
        deletion to publish before searching again, until nothing matches.
        Only objectIDs are retrieved, 100 per round; the caller's query is not
        modified.
        """
        scoped = (query or Query()).copy(
            attributes_to_retrieve=[OBJECT_ID], hits_per_page=DELETE_BY_QUERY_BATCH_SIZE
        )
        deleted = 0
        rounds = 0
        results = await self.search(scoped)
        while _nb_hits(results) != 0:
            hits = results.get("hits")
            if not isinstance(hits, list) or not hits:
                raise MalformedResponseError("Search reported matches but returned no hits")
            object_ids = []
            for hit in hits:
                if not isinstance(hit, dict) or OBJECT_ID not in hit:
                    raise MalformedResponseError("Search hit is missing objectID")
                object_ids.append(str(hit[OBJECT_ID]))
            task = await self.delete_objects(object_ids)
            await self.wait_task(task)
            deleted += len(object_ids)
            rounds += 1
            results = await self.search(scoped)
        logger.info("Deleted %d object(s) from %s in %d batch(es)", deleted, self._name, rounds)
        return deleted

    # ----- Settings -----

    async def get_settings(self) -> Dict[str, Any]:
        return await self._transport.request("GET", self._path("settings"))

    async def set_settings(self, settings: Mapping[str, Any]) -> TaskReference:
        return await self._task("PUT", self._path("settings"), dict(settings))

    async def clear_index(self) -> TaskReference:
        """Delete all documents but keep the index and its settings."""
        return await self._task("POST", self._path("clear"))

    # ----- Keys -----

    def _key_path(self, key: Any) -> str:
        return self._path("keys", encode_path_segment(key, what="key"))

    async def list_keys(self) -> List[Dict[str, Any]]:
        data = await self._transport.request("GET", self._path("keys"))
        keys = data.get("keys")
        if not isinstance(keys, list):
            raise MalformedResponseError("Key listing is missing keys")
        return keys

    async def get_key(self, key: str) -> Dict[str, Any]:
        """Return the ACL and limits of one key."""
        return await self._transport.request("GET", self._key_path(key))

    async def add_key(self, definition: KeyDefinition) -> Dict[str, Any]:
        """Create a key from an ACL list, a `KeyParams`, or a raw mapping."""
        return await self._transport.request("POST", self._path("keys"), body=key_payload(definition))

    async def update_key(self, key: str, definition: KeyDefinition) -> Dict[str, Any]:
        return await self._transport.request("PUT", self._key_path(key), body=key_payload(definition))

    async def delete_key(self, key: str) -> Dict[str, Any]:
        return await self._transport.request("DELETE", self._key_path(key))


def _nb_hits(results: Dict[str, Any]) -> int:
    value = results.get("nbHits")
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedResponseError("Search response is missing nbHits")
    return value
