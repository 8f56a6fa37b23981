"""HTTP transport for the remote search service.

The index operations only depend on the `Transport` protocol; `HttpTransport`
is the httpx-backed implementation used in production. Auth is an application
id plus API key sent as headers on every request.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from docuindex.exceptions import MalformedResponseError, TransportError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Performs one signed request and returns the decoded JSON object."""

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        ...


class HttpTransport:
    def __init__(
        self,
        *,
        base_url: str,
        app_id: str,
        api_key: str,
        verify_ssl: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.app_id = app_id
        self.api_key = api_key
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            verify=self.verify_ssl,
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json; charset=utf-8",
                "X-Application-Id": self.app_id,
                "X-API-Key": self.api_key,
            },
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            async with self._client() as client:
                resp = await client.request(method, path, params=params, json=body)
        except httpx.HTTPError as exc:
            raise TransportError(None, str(exc) or exc.__class__.__name__) from exc

        if resp.status_code >= 400:
            raise TransportError(resp.status_code, _error_message(resp))
        try:
            data = resp.json()
        except ValueError as exc:
            raise MalformedResponseError(f"{method} {path} returned a non-JSON body") from exc
        if not isinstance(data, dict):
            raise MalformedResponseError(f"{method} {path} returned {type(data).__name__}, expected object")
        return data


def _error_message(resp: httpx.Response) -> str:
    # The service reports errors as {"message": "...", "status": N}
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return resp.text or resp.reason_phrase
