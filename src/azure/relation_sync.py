"""
src/azure/relation_sync.py
Runs one relation edit as fetch -> compute intents -> apply, serialized per item.
Exports: apply_parent_change, apply_add_child, apply_remove_child
"""

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Callable, Iterator

from src.azure.client import AzureDevOpsClient
from src.workitems.relation_editor import RelationEditor
from src.workitems.relations import RelationIndex
from src.workitems.types import RelationEditResult

logger = logging.getLogger(__name__)

_LOCKS_GUARD = threading.Lock()
# Entries vanish once no edit holds or waits on the lock.
_ITEM_LOCKS: "weakref.WeakValueDictionary[tuple[str, str, int], threading.Lock]" = weakref.WeakValueDictionary()


@contextmanager
def item_lock(client: AzureDevOpsClient, item_id: int) -> Iterator[None]:
    """Hold the edit lock for one item of one organization/project."""
    key = (client.organization, client.project, item_id)
    with _LOCKS_GUARD:
        lock = _ITEM_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _ITEM_LOCKS[key] = lock
    with lock:
        yield


def _run_edit(
    client: AzureDevOpsClient,
    item_id: int,
    compute: Callable[[RelationEditor], RelationEditResult],
) -> RelationEditResult:
    """
    Fetch the item's relations, compute intents and apply them in order.

    Positions are only valid for the list just fetched, so nothing here is
    cached between calls.

    Returns:
        The edit result; rejected edits perform no writes.
    Raises:
        AzureDevOpsError: Any fetch or write failure.
    """
    with item_lock(client, item_id):
        index = RelationIndex({item_id: client.fetch_relations(item_id)})
        result = compute(RelationEditor(index))
        if not result.ok:
            logger.warning("Relation edit on work item %s rejected: %s", item_id, result.violation.message)
            return result
        for intent in result.intents:
            client.apply_relation_intent(intent)
        return result


def apply_parent_change(
    client: AzureDevOpsClient, item_id: int, new_parent_id: int | None
) -> RelationEditResult:
    """Move `item_id` under `new_parent_id`, or clear its parent when None."""
    return _run_edit(client, item_id, lambda editor: editor.change_parent(item_id, new_parent_id))


def apply_add_child(client: AzureDevOpsClient, parent_id: int, child_id: int) -> RelationEditResult:
    return _run_edit(client, parent_id, lambda editor: editor.add_child(parent_id, child_id))


def apply_remove_child(client: AzureDevOpsClient, parent_id: int, child_id: int) -> RelationEditResult:
    return _run_edit(client, parent_id, lambda editor: editor.remove_child(parent_id, child_id))
