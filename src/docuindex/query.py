"""Structured search/browse query parameters."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Python attribute -> service parameter name
_PARAM_NAMES = {
    "query": "query",
    "filters": "filters",
    "page": "page",
    "hits_per_page": "hitsPerPage",
    "attributes_to_retrieve": "attributesToRetrieve",
    "attributes_to_highlight": "attributesToHighlight",
    "numeric_filters": "numericFilters",
    "tag_filters": "tagFilters",
    "distinct": "distinct",
}


@dataclass
class Query:
    """Search parameters understood by the search and browse endpoints.

    Unset fields are omitted from the request. ``extra`` carries any other
    service parameter verbatim, keyed by its wire name.
    """

    query: Optional[str] = None
    filters: Optional[str] = None
    page: Optional[int] = None
    hits_per_page: Optional[int] = None
    attributes_to_retrieve: Optional[List[str]] = None
    attributes_to_highlight: Optional[List[str]] = None
    numeric_filters: Optional[List[str]] = None
    tag_filters: Optional[str] = None
    distinct: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def copy(self, **overrides: Any) -> Query:
        """Return an independent copy with ``overrides`` applied."""
        base = dataclasses.replace(self, extra=dict(self.extra))
        for name in ("attributes_to_retrieve", "attributes_to_highlight", "numeric_filters"):
            value = getattr(base, name)
            if value is not None:
                setattr(base, name, list(value))
        return dataclasses.replace(base, **overrides)

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for attr, wire in _PARAM_NAMES.items():
            value = getattr(self, attr)
            if value is not None:
                params[wire] = _format(value)
        for key, value in self.extra.items():
            if value is not None:
                params[key] = _format(value)
        return params


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)
