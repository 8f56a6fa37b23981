"""Waiting for asynchronous write tasks to become durable.

Every mutating call returns a task id. The service applies the write later and
reports ``"published"`` once it is visible to searches. `TaskPoller` probes the
task status endpoint until that happens, sleeping between probes with a capped
exponential backoff:

    probe -> published? done
          -> sleep(min(delay, max_delay)); delay *= 2; probe again

The first probe is immediate. There is no iteration limit or overall timeout;
polling ends on ``published`` or on the first transport error, which is raised
unchanged. Cancelling the awaiting task interrupts the sleep and propagates.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional

from docuindex.config import DEFAULT_TASK_WAIT_MS
from docuindex.exceptions import InvalidArgumentError, MalformedResponseError
from docuindex.transport import Transport

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class TaskReference:
    """Handle on a server-side task created by a mutating call.

    ``task_id`` is opaque: it is only ever handed back to the task endpoint.
    """

    index_name: str
    task_id: str
    object_id: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(cls, index_name: str, data: Dict[str, Any]) -> TaskReference:
        task_id = data.get("taskID")
        if task_id is None or task_id == "":
            raise MalformedResponseError("Response is missing taskID")
        object_id = data.get("objectID")
        return cls(
            index_name=index_name,
            task_id=str(task_id),
            object_id=str(object_id) if object_id is not None else None,
            raw=data,
        )


class TaskStatus(str, Enum):
    UNKNOWN = "unknown"
    ENQUEUED = "notPublished"
    PUBLISHED = "published"

    @classmethod
    def parse(cls, value: Any) -> TaskStatus:
        if value == cls.PUBLISHED.value:
            return cls.PUBLISHED
        if value == cls.ENQUEUED.value:
            return cls.ENQUEUED
        return cls.UNKNOWN


def backoff_delays(initial_delay_ms: int, max_delay_ms: int) -> Iterator[int]:
    """Yield the sleeps applied between probes, in milliseconds.

    The nominal delay doubles without bound; only the applied value is capped.
    A zero initial delay stays zero, i.e. tight polling.
    """
    delay = initial_delay_ms
    while True:
        yield min(delay, max_delay_ms)
        delay *= 2


class TaskPoller:
    """Polls one task to completion. Holds per-call state; do not share."""

    def __init__(
        self,
        transport: Transport,
        encoded_index_name: str,
        *,
        initial_delay_ms: int = DEFAULT_TASK_WAIT_MS,
        max_delay_ms: int = DEFAULT_TASK_WAIT_MS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if initial_delay_ms < 0 or max_delay_ms < 0:
            raise InvalidArgumentError("Task wait delays must be >= 0")
        self._transport = transport
        self._encoded_index_name = encoded_index_name
        self._initial_delay_ms = initial_delay_ms
        self._max_delay_ms = max_delay_ms
        self._sleep = sleep
        self.probes = 0

    async def status(self, task_id: str, encoded_task_id: str) -> TaskStatus:
        data = await self._transport.request(
            "GET", f"/1/indexes/{self._encoded_index_name}/task/{encoded_task_id}"
        )
        self.probes += 1
        if "status" not in data:
            raise MalformedResponseError(f"Task {task_id} status response is missing status")
        return TaskStatus.parse(data["status"])

    async def wait(self, task_id: str, encoded_task_id: str) -> None:
        delays = backoff_delays(self._initial_delay_ms, self._max_delay_ms)
        while True:
            status = await self.status(task_id, encoded_task_id)
            if status is TaskStatus.PUBLISHED:
                logger.debug("Task %s published after %d probe(s)", task_id, self.probes)
                return
            delay_ms = next(delays)
            logger.debug("Task %s is %s; sleeping %d ms", task_id, status.value, delay_ms)
            await self._sleep(delay_ms / 1000.0)
