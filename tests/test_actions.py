import json

import pytest

from docuindex.actions import (
    ActionKind,
    ActionRecord,
    add_actions,
    build_action,
    delete_actions,
    partial_update_actions,
    update_actions,
)
from docuindex.exceptions import InvalidArgumentError

ID_KINDS = [ActionKind.UPDATE_OBJECT, ActionKind.PARTIAL_UPDATE_OBJECT, ActionKind.DELETE_OBJECT]


@pytest.mark.parametrize("kind", ID_KINDS)
def test_kinds_requiring_id_reject_missing_id(kind: ActionKind) -> None:
    with pytest.raises(InvalidArgumentError):
        build_action(kind, {"name": "x"})


@pytest.mark.parametrize("kind", list(ActionKind))
def test_every_kind_rejects_empty_id(kind: ActionKind) -> None:
    with pytest.raises(InvalidArgumentError):
        build_action(kind, {"name": "x"}, object_id="")


@pytest.mark.parametrize("kind", list(ActionKind))
def test_every_kind_accepts_non_empty_id(kind: ActionKind) -> None:
    record = build_action(kind, {"name": "x"}, object_id="42")
    assert record.object_id == "42"
    assert record.kind is kind


def test_add_without_id_has_no_object_id_on_the_wire() -> None:
    record = build_action(ActionKind.ADD_OBJECT, {"name": "x"})
    assert record.to_dict() == {"action": "addObject", "body": {"name": "x"}}


def test_delete_body_is_synthesized_from_id() -> None:
    record = build_action(ActionKind.DELETE_OBJECT, {"ignored": True}, object_id="7")
    assert record.to_dict() == {"action": "deleteObject", "objectID": "7", "body": {"objectID": "7"}}


def test_non_string_id_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        build_action(ActionKind.UPDATE_OBJECT, {}, object_id=12)  # type: ignore[arg-type]


def test_unknown_action_name_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        ActionRecord.from_dict({"action": "upsert", "body": {}})


def test_wire_name_is_accepted_as_kind() -> None:
    assert build_action("partialUpdateObject", {"a": 1}, object_id="1").kind is ActionKind.PARTIAL_UPDATE_OBJECT


@pytest.mark.parametrize(
    "record",
    [
        build_action(ActionKind.ADD_OBJECT, {"title": "a"}),
        build_action(ActionKind.ADD_OBJECT, {"title": "a"}, object_id="1"),
        build_action(ActionKind.UPDATE_OBJECT, {"objectID": "2", "title": "b"}, object_id="2"),
        build_action(ActionKind.PARTIAL_UPDATE_OBJECT, {"objectID": "3", "n": 1}, object_id="3"),
        build_action(ActionKind.DELETE_OBJECT, object_id="4"),
    ],
)
def test_records_survive_batch_json(record: ActionRecord) -> None:
    payload = json.loads(json.dumps({"requests": [record.to_dict()]}))
    restored = ActionRecord.from_dict(payload["requests"][0])
    assert restored == record
    assert restored.to_dict() == record.to_dict()


def test_bulk_helpers_preserve_order_and_take_ids_from_documents() -> None:
    docs = [{"objectID": "a", "v": 1}, {"objectID": "a", "v": 2}, {"objectID": "b", "v": 3}]
    records = update_actions(docs)
    assert [(r.object_id, r.body["v"]) for r in records] == [("a", 1), ("a", 2), ("b", 3)]
    assert [r.kind for r in partial_update_actions(docs)] == [ActionKind.PARTIAL_UPDATE_OBJECT] * 3
    assert [r.object_id for r in delete_actions(["x", "y"])] == ["x", "y"]
    assert [r.object_id for r in add_actions([{"v": 1}, {"v": 2}])] == [None, None]


def test_bulk_update_requires_object_id_attribute() -> None:
    with pytest.raises(InvalidArgumentError):
        update_actions([{"objectID": "a"}, {"title": "no id"}])


def test_delete_record_with_id_only_in_body_is_accepted() -> None:
    record = ActionRecord.from_dict({"action": "deleteObject", "body": {"objectID": "5"}})
    assert record.object_id == "5"
