"""Batch action envelopes.

Every mutation the batch endpoint understands is one `{action, objectID?, body}`
record. `ActionRecord` is that record as a tagged value; the batch executor only
ever deals with records and never with the individual mutation kinds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from docuindex.exceptions import InvalidArgumentError

OBJECT_ID = "objectID"


class ActionKind(str, Enum):
    ADD_OBJECT = "addObject"
    UPDATE_OBJECT = "updateObject"
    PARTIAL_UPDATE_OBJECT = "partialUpdateObject"
    DELETE_OBJECT = "deleteObject"

    @property
    def requires_object_id(self) -> bool:
        return self is not ActionKind.ADD_OBJECT


@dataclass(frozen=True)
class ActionRecord:
    """One entry of a batch request."""

    kind: ActionKind
    body: Dict[str, Any] = field(default_factory=dict)
    object_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"action": self.kind.value}
        if self.object_id is not None:
            out[OBJECT_ID] = self.object_id
        out["body"] = dict(self.body)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ActionRecord:
        body = data.get("body") or {}
        if not isinstance(body, Mapping):
            raise InvalidArgumentError("Batch action body must be an object")
        object_id = data.get(OBJECT_ID)
        # Delete records may carry the id only inside the body
        if object_id is None and data.get("action") == ActionKind.DELETE_OBJECT.value:
            object_id = body.get(OBJECT_ID)
        return build_action(data.get("action"), body, object_id=object_id)


def check_object_id(object_id: Any) -> str:
    if not isinstance(object_id, str):
        raise InvalidArgumentError(f"objectID must be a string, got {type(object_id).__name__}")
    if not object_id:
        raise InvalidArgumentError("Invalid objectID: empty string")
    return object_id


def build_action(
    kind: Any, body: Optional[Mapping[str, Any]] = None, *, object_id: Optional[str] = None
) -> ActionRecord:
    """Build a validated action record.

    ``kind`` is an `ActionKind` or its wire name. Kinds other than
    ``addObject`` require a non-empty ``object_id``. An empty ``object_id`` is
    rejected for every kind. Delete records get a synthesized
    ``{"objectID": id}`` body regardless of the ``body`` argument.
    """
    try:
        kind = ActionKind(kind)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unknown batch action: {kind!r}") from exc
    if object_id is None:
        if kind.requires_object_id:
            raise InvalidArgumentError(f"{kind.value} requires an objectID")
    else:
        object_id = check_object_id(object_id)

    if kind is ActionKind.DELETE_OBJECT:
        return ActionRecord(kind=kind, body={OBJECT_ID: object_id}, object_id=object_id)
    return ActionRecord(kind=kind, body=dict(body or {}), object_id=object_id)


def _id_of(doc: Mapping[str, Any]) -> Any:
    if OBJECT_ID not in doc:
        raise InvalidArgumentError("Document is missing the objectID attribute")
    return doc[OBJECT_ID]


def add_actions(docs: Iterable[Mapping[str, Any]]) -> List[ActionRecord]:
    return [build_action(ActionKind.ADD_OBJECT, d) for d in docs]


def update_actions(docs: Iterable[Mapping[str, Any]]) -> List[ActionRecord]:
    return [build_action(ActionKind.UPDATE_OBJECT, d, object_id=_id_of(d)) for d in docs]


def partial_update_actions(docs: Iterable[Mapping[str, Any]]) -> List[ActionRecord]:
    return [build_action(ActionKind.PARTIAL_UPDATE_OBJECT, d, object_id=_id_of(d)) for d in docs]


def delete_actions(items: Iterable[Union[str, Mapping[str, Any]]]) -> List[ActionRecord]:
    """Delete records from bare objectIDs or from documents carrying one."""
    return [
        build_action(
            ActionKind.DELETE_OBJECT,
            object_id=_id_of(item) if isinstance(item, Mapping) else item,
        )
        for item in items
    ]
