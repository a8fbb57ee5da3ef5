"""
tests/test_model.py
Unit tests for src/workitems/model.py.
"""

import pytest

from src.workitems.model import WorkItemModel
from src.workitems.types import (
    CategorySelection,
    FilterSpec,
    RelationKind,
    RelationRecord,
    ViolationKind,
    WorkItem,
    WorkItemValidationError,
)


def _model() -> WorkItemModel:
    items = [
        WorkItem(id=1, work_item_type="Epic", state="New", title="Platform"),
        WorkItem(
            id=2,
            work_item_type="Product Backlog Item",
            state="Approved",
            title="Login",
            tags="auth; Gov:RTB; Impact:High; Cost:Medium; Effort:High; Complexity:Low",
            effort=3,
            business_value=88,
            area_path="Proj\\Web",
        ),
        WorkItem(id=3, work_item_type="Bug", state="Resolved", title="Crash"),
    ]
    relations = {
        1: [RelationRecord(RelationKind.CHILD, 2, 0)],
        2: [RelationRecord(RelationKind.PARENT, 1, 0)],
    }
    return WorkItemModel(items, relations, ["Proj", "Proj\\Web"])


def test_visible_items_follow_filter():
    model = _model()
    assert [item.id for item in model.visible_items()] == [1, 2, 3]
    model.set_filter(FilterSpec(selected_states=frozenset({"Resolved"})))
    assert [item.id for item in model.visible_items()] == [3]
    model.clear_filter()
    assert len(model.visible_items()) == 3


def test_hierarchy_lookups():
    model = _model()
    assert model.parent_of(2) == 1
    assert model.children_of(1) == [2]


def test_draft_for_splits_user_tags_from_categories():
    draft = _model().draft_for(2)
    assert draft.tags == "auth"
    assert draft.categories == CategorySelection(1, 1, 2, 3, 1)
    assert draft.effort == 3


def test_update_intent_re_encodes_tags():
    model = _model()
    draft = model.draft_for(2)
    draft.tags = "auth; sso"
    operations = {operation.path: operation.value for operation in model.update_intent(2, draft)}
    assert operations["/fields/System.Tags"] == (
        "auth; sso; Gov:RTB; Impact:High; Cost:Medium; Effort:High; Complexity:Low"
    )


def test_update_intent_rejects_type_change():
    model = _model()
    draft = model.draft_for(3)
    draft.change_type("Epic")
    with pytest.raises(WorkItemValidationError, match="cannot change"):
        model.update_intent(3, draft)


def test_create_intent_for_new_draft():
    model = _model()
    draft = model.new_draft("Feature")
    draft.title = "Search"
    draft.area_path = "Proj"
    intent = model.create_intent(draft)
    assert intent.work_item_type == "Feature"
    assert intent.operations[0].to_dict() == {"op": "add", "path": "/fields/System.Title", "value": "Search"}


def test_create_intent_rejects_unknown_area_path():
    model = _model()
    draft = model.new_draft("Bug")
    draft.title = "Typo"
    draft.area_path = "Other"
    with pytest.raises(WorkItemValidationError):
        model.create_intent(draft)


def test_relation_edits_delegate_to_editor():
    model = _model()
    assert model.change_parent(1, 2).violation.kind is ViolationKind.CYCLE
    assert model.add_child(1, 3).intents[0].target_id == 3
    assert model.remove_child(1, 2).intents[0].position == 0
