"""Parent/child lookups over per-item hierarchy relation records."""

from typing import Any, Mapping

from src.workitems.types import RelationKind, RelationRecord

_KIND_BY_REL = {kind.value: kind for kind in RelationKind}


def _target_id_from_url(url: Any) -> int | None:
    """Return trailing integer id of a work item URL, else None."""
    tail = str(url or "").rstrip("/").rsplit("/", 1)[-1]
    return int(tail) if tail.isdigit() else None


def parse_relation_records(raw_relations: Any) -> list[RelationRecord]:
    """
    Convert a remote `relations` array into hierarchy records.

    Non-hierarchy links (attachments, related, artifacts) are skipped but
    still count toward `source_ordinal`, because removal is positional over
    the whole remote list.

    Args:
        raw_relations: List of `{"rel": ..., "url": ...}` dicts (anything else tolerated).
    Returns:
        Hierarchy records in list order.
    """
    if not isinstance(raw_relations, list):
        return []
    records: list[RelationRecord] = []
    for ordinal, relation in enumerate(raw_relations):
        if not isinstance(relation, dict):
            continue
        kind = _KIND_BY_REL.get(str(relation.get("rel", "")))
        target_id = _target_id_from_url(relation.get("url"))
        if kind is None or target_id is None:
            continue
        records.append(RelationRecord(kind=kind, target_id=target_id, source_ordinal=ordinal))
    return records


class RelationIndex:
    """Read-only projection of a relation snapshot keyed by owning item id."""

    def __init__(self, relations: Mapping[int, list[RelationRecord]] | None = None) -> None:
        self._relations: dict[int, list[RelationRecord]] = {
            item_id: list(records) for item_id, records in (relations or {}).items()
        }

    def records_of(self, item_id: int) -> list[RelationRecord]:
        return list(self._relations.get(item_id, []))

    def _first(self, item_id: int, kind: RelationKind, target_id: int | None = None) -> RelationRecord | None:
        for record in self._relations.get(item_id, []):
            if record.kind is kind and (target_id is None or record.target_id == target_id):
                return record
        return None

    def parent_of(self, item_id: int) -> int | None:
        """Return first parent link target; extra parent links are tolerated and ignored."""
        record = self._first(item_id, RelationKind.PARENT)
        return record.target_id if record else None

    def children_of(self, item_id: int) -> list[int]:
        """Return child link targets in list order, duplicates kept."""
        return [
            record.target_id
            for record in self._relations.get(item_id, [])
            if record.kind is RelationKind.CHILD
        ]

    def parent_position(self, item_id: int) -> int | None:
        record = self._first(item_id, RelationKind.PARENT)
        return record.source_ordinal if record else None

    def child_position(self, item_id: int, child_id: int) -> int | None:
        record = self._first(item_id, RelationKind.CHILD, child_id)
        return record.source_ordinal if record else None
