"""
tests/test_patch.py
Unit tests for src/workitems/patch.py and src/workitems/states.py.
"""

import pytest

from src.workitems.patch import (
    FIELD_PATHS,
    build_create_operations,
    build_update_operations,
    validate_draft,
)
from src.workitems.states import default_state, is_valid_state, valid_states
from src.workitems.types import CategorySelection, WorkItemDraft, WorkItemValidationError

SELECTION = CategorySelection(gov_type=5, impact=3, cost_savings=3, effort_category=1, complexity=3)


def _draft(**kwargs) -> WorkItemDraft:
    values = {"work_item_type": "Product Backlog Item", "title": "Checkout", "state": "New"}
    values.update(kwargs)
    return WorkItemDraft(**values)


def test_valid_state_table():
    assert valid_states("Epic") == ("New", "In Progress", "Done", "Removed")
    assert valid_states("Feature") == valid_states("Epic")
    assert valid_states("Product Backlog Item") == ("New", "Approved", "Committed", "Done", "Removed")
    assert valid_states("Bug") == ("New", "In Progress", "Resolved", "Closed")
    assert valid_states("Test Suite") == valid_states("Bug")
    assert default_state("Product Backlog Item") == "New"
    assert not is_valid_state("Epic", "Resolved")


def test_change_type_resets_state():
    draft = _draft(work_item_type="Bug", state="Resolved")
    draft.change_type("Epic")
    assert draft.work_item_type == "Epic"
    assert draft.state == "New"


def test_update_operations_use_exact_paths_and_replace():
    draft = _draft(
        description="Body",
        area_path="Proj\\Web",
        tags="checkout; Gov:RTB",
        categories=SELECTION,
        effort=5,
        acceptance_criteria="Works",
        history_comment="  moved to sprint 3 ",
    )
    operations = [operation.to_dict() for operation in build_update_operations(draft)]
    assert operations == [
        {"op": "replace", "path": "/fields/System.Title", "value": "Checkout"},
        {"op": "replace", "path": "/fields/System.Description", "value": "Body"},
        {"op": "replace", "path": "/fields/System.State", "value": "New"},
        {"op": "replace", "path": "/fields/System.AreaPath", "value": "Proj\\Web"},
        {
            "op": "replace",
            "path": "/fields/System.Tags",
            "value": "checkout; Gov:Innovation; Impact:Low; Cost:Low; Effort:Low; Complexity:High",
        },
        {"op": "replace", "path": "/fields/Microsoft.VSTS.Scheduling.Effort", "value": 5},
        {"op": "replace", "path": "/fields/Microsoft.VSTS.Common.BusinessValue", "value": 40},
        {"op": "replace", "path": "/fields/Microsoft.VSTS.Common.AcceptanceCriteria", "value": "Works"},
        {"op": "add", "path": "/fields/System.History", "value": "moved to sprint 3"},
    ]


def test_effort_is_only_sent_for_backlog_items():
    draft = _draft(work_item_type="Bug", effort=8)
    paths = [operation.path for operation in build_update_operations(draft)]
    assert FIELD_PATHS["effort"] not in paths


def test_blank_history_comment_is_omitted():
    paths = [operation.path for operation in build_update_operations(_draft(history_comment="  "))]
    assert FIELD_PATHS["history"] not in paths


def test_create_operations_are_adds_and_skip_blank_text():
    operations = build_create_operations(_draft())
    assert {operation.op for operation in operations} == {"add"}
    assert [operation.path for operation in operations] == [
        FIELD_PATHS["title"],
        FIELD_PATHS["state"],
        FIELD_PATHS["business_value"],
    ]
    assert operations[-1].value == 0


@pytest.mark.parametrize(
    ("draft", "message"),
    [
        (_draft(work_item_type="User Story"), "Unsupported work item type"),
        (_draft(title="   "), "Title is required"),
        (_draft(state="Resolved"), "not valid for Product Backlog Item"),
        (_draft(area_path="Elsewhere"), "Unknown area path"),
    ],
)
def test_validate_draft_rejects(draft, message):
    with pytest.raises(WorkItemValidationError, match=message):
        validate_draft(draft, ["Proj", "Proj\\Web"])


def test_validate_draft_accepts_empty_area_path():
    validate_draft(_draft(area_path=""), ["Proj"])
