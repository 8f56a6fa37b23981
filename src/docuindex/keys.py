"""Per-index API key payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from docuindex.exceptions import InvalidArgumentError


@dataclass
class KeyParams:
    """Credential settings sent when creating or updating a key.

    ``validity`` is in seconds, 0 meaning no expiry. The rate limits use 0 for
    unlimited.
    """

    acl: List[str]
    validity: int = 0
    max_queries_per_ip_per_hour: int = 0
    max_hits_per_query: int = 0
    indices: Optional[List[str]] = None
    referers: Optional[List[str]] = None
    description: Optional[str] = None
    query_parameters: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "acl": list(self.acl),
            "validity": int(self.validity),
            "maxQueriesPerIPPerHour": int(self.max_queries_per_ip_per_hour),
            "maxHitsPerQuery": int(self.max_hits_per_query),
        }
        if self.indices is not None:
            payload["indices"] = list(self.indices)
        if self.referers is not None:
            payload["referers"] = list(self.referers)
        if self.description is not None:
            payload["description"] = self.description
        if self.query_parameters is not None:
            payload["queryParameters"] = self.query_parameters
        return payload


KeyDefinition = Union[KeyParams, Mapping[str, Any], Sequence[str]]


def key_payload(definition: KeyDefinition) -> Dict[str, Any]:
    """Normalize an ACL list, a `KeyParams`, or a raw mapping to a request body."""
    if isinstance(definition, KeyParams):
        return definition.to_payload()
    if isinstance(definition, Mapping):
        return dict(definition)
    if isinstance(definition, str):
        raise InvalidArgumentError("acl must be a list of permissions, not a string")
    return KeyParams(acl=list(definition)).to_payload()
