"""Custom exception hierarchy for docuindex.

Every public operation either returns a well-typed value or raises exactly one
of these, so callers can discriminate local validation problems from service
failures without inspecting messages.
"""

from __future__ import annotations

from typing import Optional


class DocuIndexError(Exception):
    """Base class for all docuindex exceptions."""


class ConfigError(DocuIndexError):
    """Raised when configuration loading or validation fails."""


class TransportError(DocuIndexError):
    """Raised when an HTTP request fails (network error or error status).

    ``status_code`` is None when no response was received at all.
    """

    def __init__(self, status_code: Optional[int], message: str) -> None:
        prefix = f"HTTP {status_code}" if status_code is not None else "Transport failure"
        super().__init__(f"{prefix}: {message}")
        self.status_code = status_code
        self.message = message


class InvalidArgumentError(DocuIndexError, ValueError):
    """Raised locally, before any network call, for invalid caller input."""


class MalformedResponseError(DocuIndexError):
    """Raised when a well-formed HTTP response lacks an expected field."""


class IllegalStateError(DocuIndexError):
    """Raised when an object is used out of its expected call order."""


class UnsupportedOperationError(DocuIndexError):
    """Raised for operations an object deliberately does not support."""
