"""Async client for index operations on a remote document-search service."""

from .actions import ActionKind, ActionRecord, build_action
from .browser import IndexBrowser
from .client import SearchClient
from .exceptions import (
    ConfigError,
    DocuIndexError,
    IllegalStateError,
    InvalidArgumentError,
    MalformedResponseError,
    TransportError,
    UnsupportedOperationError,
)
from .index import Index
from .keys import KeyParams
from .query import Query
from .tasks import TaskReference, TaskStatus
from .transport import HttpTransport, Transport

__all__ = [
    "ActionKind",
    "ActionRecord",
    "build_action",
    "IndexBrowser",
    "SearchClient",
    "ConfigError",
    "DocuIndexError",
    "IllegalStateError",
    "InvalidArgumentError",
    "MalformedResponseError",
    "TransportError",
    "UnsupportedOperationError",
    "Index",
    "KeyParams",
    "Query",
    "TaskReference",
    "TaskStatus",
    "HttpTransport",
    "Transport",
]
