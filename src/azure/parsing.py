"""Parsing helpers for Azure DevOps work item and classification node payloads."""

from typing import Any

from src.workitems.relations import parse_relation_records
from src.workitems.types import RelationRecord, WorkItem

AREA_PATH_SEPARATOR = "\\"


def safe_dict(value: Any) -> dict[str, Any]:
    """Return dict-like values, else empty dict."""
    return value if isinstance(value, dict) else {}


def safe_list(value: Any) -> list[Any]:
    """Return list-like values, else empty list."""
    return value if isinstance(value, list) else []


def _text(fields: dict[str, Any], name: str) -> str:
    value = fields.get(name)
    return str(value).strip() if value is not None else ""


def _optional_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _business_value(value: Any) -> int:
    try:
        return max(0, min(100, int(value)))
    except (TypeError, ValueError):
        return 0


def parse_work_item(payload: Any) -> WorkItem | None:
    """
    Build a WorkItem from one REST work item payload.

    Args:
        payload: `{"id": ..., "fields": {...}}` dict.
    Returns:
        WorkItem, or None when the id is missing or not positive.
    """
    data = safe_dict(payload)
    try:
        item_id = int(data.get("id"))
    except (TypeError, ValueError):
        return None
    if item_id <= 0:
        return None
    fields = safe_dict(data.get("fields"))
    return WorkItem(
        id=item_id,
        work_item_type=_text(fields, "System.WorkItemType"),
        state=_text(fields, "System.State"),
        title=_text(fields, "System.Title"),
        description=_text(fields, "System.Description"),
        area_path=_text(fields, "System.AreaPath"),
        tags=_text(fields, "System.Tags"),
        effort=_optional_float(fields.get("Microsoft.VSTS.Scheduling.Effort")),
        business_value=_business_value(fields.get("Microsoft.VSTS.Common.BusinessValue")),
        acceptance_criteria=_text(fields, "Microsoft.VSTS.Common.AcceptanceCriteria"),
    )


def parse_snapshot(payloads: Any) -> tuple[list[WorkItem], dict[int, list[RelationRecord]]]:
    """Parse a batch response `value` list into items plus their relation map."""
    items: list[WorkItem] = []
    relations: dict[int, list[RelationRecord]] = {}
    for payload in safe_list(payloads):
        item = parse_work_item(payload)
        if item is None:
            continue
        items.append(item)
        relations[item.id] = parse_relation_records(safe_dict(payload).get("relations"))
    return items, relations


def flatten_area_paths(root: Any) -> list[str]:
    """
    Flatten a classification node tree into backslash-joined paths.

    Only root, children and grandchildren are listed.
    """
    node = safe_dict(root)
    root_name = str(node.get("name", "")).strip()
    if not root_name:
        return []
    paths = [root_name]
    for child in safe_list(node.get("children")):
        child_name = str(safe_dict(child).get("name", "")).strip()
        if not child_name:
            continue
        child_path = f"{root_name}{AREA_PATH_SEPARATOR}{child_name}"
        paths.append(child_path)
        for grandchild in safe_list(safe_dict(child).get("children")):
            grandchild_name = str(safe_dict(grandchild).get("name", "")).strip()
            if grandchild_name:
                paths.append(f"{child_path}{AREA_PATH_SEPARATOR}{grandchild_name}")
    return paths
