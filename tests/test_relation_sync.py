"""
tests/test_relation_sync.py
Unit tests for src/azure/relation_sync.py.
"""

import gc
from unittest.mock import MagicMock

from src.azure import relation_sync
from src.azure.relation_sync import apply_add_child, apply_parent_change, apply_remove_child, item_lock
from src.workitems.types import RelationKind, RelationRecord, ViolationKind


def _client(records: list[RelationRecord]) -> MagicMock:
    client = MagicMock()
    client.organization = "contoso"
    client.project = "Board"
    client.fetch_relations.return_value = records
    return client


def test_parent_change_fetches_fresh_relations_and_applies_in_order():
    client = _client([RelationRecord(RelationKind.CHILD, 9, 0), RelationRecord(RelationKind.PARENT, 5, 1)])
    result = apply_parent_change(client, 3, 6)
    client.fetch_relations.assert_called_once_with(3)
    applied = [call.args[0] for call in client.apply_relation_intent.call_args_list]
    assert [(intent.action, intent.position, intent.target_id) for intent in applied] == [
        ("remove", 1, None),
        ("add", None, 6),
    ]
    assert result.intents == applied


def test_rejected_edit_performs_no_writes():
    client = _client([RelationRecord(RelationKind.CHILD, 9, 0)])
    result = apply_parent_change(client, 3, 9)
    assert result.violation.kind is ViolationKind.CYCLE
    client.apply_relation_intent.assert_not_called()


def test_add_child_writes_single_forward_link():
    client = _client([])
    apply_add_child(client, 3, 4)
    intent = client.apply_relation_intent.call_args.args[0]
    assert (intent.item_id, intent.relation_kind, intent.target_id) == (3, RelationKind.CHILD, 4)


def test_remove_child_uses_fetched_position():
    client = _client([RelationRecord(RelationKind.CHILD, 4, 2)])
    apply_remove_child(client, 3, 4)
    assert client.apply_relation_intent.call_args.args[0].position == 2


def test_item_lock_is_shared_while_held_and_dropped_after():
    client = _client([])
    key = ("contoso", "Board", 3)
    with item_lock(client, 3):
        held = relation_sync._ITEM_LOCKS[key]
        assert held.locked()
        assert not held.acquire(blocking=False)
        del held
    gc.collect()
    assert key not in relation_sync._ITEM_LOCKS
