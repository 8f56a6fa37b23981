from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from docuindex.exceptions import TransportError


class FakeTransport:
    """In-memory stand-in for the HTTP transport.

    Routes are keyed by (method, path). A route is a dict (returned as-is),
    a list of dicts/exceptions (consumed in order), an exception (raised), or
    a callable ``(params, body) -> dict``.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Dict[str, Any]] = []

    def on(self, method: str, path: str, response: Any) -> None:
        self.routes[(method, path)] = response

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        self.calls.append({"method": method, "path": path, "params": params, "body": body})
        route = self.routes.get((method, path))
        if route is None:
            raise TransportError(404, f"no route for {method} {path}")
        if isinstance(route, list):
            if not route:
                raise AssertionError(f"route {method} {path} exhausted")
            route = route.pop(0)
        if isinstance(route, BaseException):
            raise route
        if callable(route):
            return route(params, body)
        return route


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()
