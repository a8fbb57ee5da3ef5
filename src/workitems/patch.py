"""
src/workitems/patch.py
JSON-Patch payloads for creating and updating remote work items.
Exports: FIELD_PATHS, validate_draft, build_create_operations, build_update_operations
"""

from typing import Any

from src.workitems.scoring import score_selection
from src.workitems.states import is_valid_state, valid_states
from src.workitems.tag_codec import encode_category_tags
from src.workitems.types import (
    PRODUCT_BACKLOG_ITEM,
    WORK_ITEM_TYPES,
    PatchOperation,
    WorkItemDraft,
    WorkItemValidationError,
)

FIELD_PATHS: dict[str, str] = {
    "title": "/fields/System.Title",
    "description": "/fields/System.Description",
    "state": "/fields/System.State",
    "area_path": "/fields/System.AreaPath",
    "tags": "/fields/System.Tags",
    "effort": "/fields/Microsoft.VSTS.Scheduling.Effort",
    "business_value": "/fields/Microsoft.VSTS.Common.BusinessValue",
    "acceptance_criteria": "/fields/Microsoft.VSTS.Common.AcceptanceCriteria",
    "history": "/fields/System.History",
}


def validate_draft(draft: WorkItemDraft, area_paths: list[str] | None = None) -> None:
    """
    Check a draft before building a payload.

    Args:
        draft: Form values.
        area_paths: Known area paths; None skips the area path check.
    Raises:
        WorkItemValidationError: Unknown type, blank title, invalid state or unknown area path.
    """
    if draft.work_item_type not in WORK_ITEM_TYPES:
        raise WorkItemValidationError(f"Unsupported work item type: {draft.work_item_type}")
    if not draft.title.strip():
        raise WorkItemValidationError("Title is required.")
    if not is_valid_state(draft.work_item_type, draft.state):
        allowed = ", ".join(valid_states(draft.work_item_type))
        raise WorkItemValidationError(
            f"State '{draft.state}' is not valid for {draft.work_item_type} (allowed: {allowed})."
        )
    if draft.area_path and area_paths is not None and draft.area_path not in area_paths:
        raise WorkItemValidationError(f"Unknown area path: {draft.area_path}")


def _field_values(draft: WorkItemDraft) -> list[tuple[str, Any]]:
    """Return (field, value) pairs in payload order."""
    values: list[tuple[str, Any]] = [
        ("title", draft.title.strip()),
        ("description", draft.description),
        ("state", draft.state),
        ("area_path", draft.area_path),
        ("tags", encode_category_tags(draft.tags, draft.categories)),
    ]
    if draft.work_item_type == PRODUCT_BACKLOG_ITEM and draft.effort is not None:
        values.append(("effort", draft.effort))
    values.append(("business_value", score_selection(draft.categories)))
    values.append(("acceptance_criteria", draft.acceptance_criteria))
    return values


def _history_operation(draft: WorkItemDraft) -> list[PatchOperation]:
    comment = draft.history_comment.strip()
    if not comment:
        return []
    return [PatchOperation(op="add", path=FIELD_PATHS["history"], value=comment)]


def build_create_operations(draft: WorkItemDraft) -> list[PatchOperation]:
    """Build `add` operations for a new item; blank optional text fields are omitted."""
    operations = [
        PatchOperation(op="add", path=FIELD_PATHS[name], value=value)
        for name, value in _field_values(draft)
        if value != "" or name in ("title", "state")
    ]
    return operations + _history_operation(draft)


def build_update_operations(draft: WorkItemDraft) -> list[PatchOperation]:
    """Build `replace` operations for an existing item plus an optional history `add`."""
    operations = [
        PatchOperation(op="replace", path=FIELD_PATHS[name], value=value)
        for name, value in _field_values(draft)
    ]
    return operations + _history_operation(draft)
