"""Entry point that hands out `Index` handles sharing one transport."""

from __future__ import annotations

import asyncio
from typing import Optional

from docuindex.config import DEFAULT_TASK_WAIT_MS, Settings
from docuindex.exceptions import ConfigError
from docuindex.index import Index
from docuindex.tasks import SleepFn
from docuindex.transport import HttpTransport, Transport


class SearchClient:
    def __init__(
        self,
        transport: Transport,
        *,
        wait_delay_ms: int = DEFAULT_TASK_WAIT_MS,
        max_wait_delay_ms: int = DEFAULT_TASK_WAIT_MS,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self.transport = transport
        self.wait_delay_ms = wait_delay_ms
        self.max_wait_delay_ms = max_wait_delay_ms
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, *, transport: Optional[Transport] = None) -> SearchClient:
        """Build a client from configuration.

        Raises `ConfigError` when no transport is given and the service
        base URL or credentials are missing.
        """
        if transport is None:
            cfg = settings.service
            if not cfg.base_url or not cfg.app_id or not cfg.api_key:
                raise ConfigError(
                    "Search service is not configured. Set DOCUINDEX_SERVICE__BASE_URL, "
                    "DOCUINDEX_SERVICE__APP_ID, DOCUINDEX_SERVICE__API_KEY."
                )
            transport = HttpTransport(
                base_url=cfg.base_url,
                app_id=cfg.app_id,
                api_key=cfg.api_key,
                verify_ssl=cfg.verify_ssl,
                timeout=cfg.timeout,
            )
        return cls(
            transport,
            wait_delay_ms=settings.tasks.initial_delay_ms,
            max_wait_delay_ms=settings.tasks.max_delay_ms,
        )

    def init_index(self, name: str) -> Index:
        """Return a handle on ``name``. No request is made."""
        return Index(
            self.transport,
            name,
            wait_delay_ms=self.wait_delay_ms,
            max_wait_delay_ms=self.max_wait_delay_ms,
            sleep=self._sleep,
        )
