"""Dataclasses and enums shared by the work-item core."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.workitems.states import default_state

WORK_ITEM_TYPES: tuple[str, ...] = (
    "Epic",
    "Feature",
    "Product Backlog Item",
    "Bug",
    "Issue",
    "Test Case",
    "Test Plan",
    "Test Suite",
)
PRODUCT_BACKLOG_ITEM = "Product Backlog Item"


class RelationKind(str, Enum):
    """Hierarchy link direction, valued with the remote link type name."""

    PARENT = "System.LinkTypes.Hierarchy-Reverse"
    CHILD = "System.LinkTypes.Hierarchy-Forward"


class ViolationKind(str, Enum):
    """Reasons a relation edit is rejected before any remote call."""

    SELF_REFERENCE = "self_reference"
    CYCLE = "cycle"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class CategorySelection:
    """Five-axis business-value judgment; every field is a numeric code or None."""

    gov_type: int | None = None
    impact: int | None = None
    cost_savings: int | None = None
    effort_category: int | None = None
    complexity: int | None = None

    @property
    def is_complete(self) -> bool:
        return None not in (
            self.gov_type,
            self.impact,
            self.cost_savings,
            self.effort_category,
            self.complexity,
        )


@dataclass(frozen=True)
class WorkItem:
    """Snapshot of one remote work item."""

    id: int
    work_item_type: str
    state: str
    title: str
    description: str = ""
    area_path: str = ""
    tags: str = ""
    effort: float | None = None
    business_value: int = 0
    acceptance_criteria: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "work_item_type": self.work_item_type,
            "state": self.state,
            "title": self.title,
            "description": self.description,
            "area_path": self.area_path,
            "tags": self.tags,
            "effort": self.effort,
            "business_value": self.business_value,
            "acceptance_criteria": self.acceptance_criteria,
        }


@dataclass
class WorkItemDraft:
    """Editable form values for creating or updating a work item.

    `tags` holds only user-entered tags; category tags are regenerated from
    `categories` when the draft is turned into patch operations.
    """

    work_item_type: str
    title: str = ""
    state: str = "New"
    description: str = ""
    area_path: str = ""
    tags: str = ""
    categories: CategorySelection = field(default_factory=CategorySelection)
    effort: float | None = None
    acceptance_criteria: str = ""
    history_comment: str = ""

    def change_type(self, work_item_type: str) -> None:
        """Switch type on an unsaved draft and reset state to the type's first state."""
        self.work_item_type = work_item_type
        self.state = default_state(work_item_type)


@dataclass(frozen=True)
class RelationRecord:
    """One hierarchy link stored on an item, addressed by its list position."""

    kind: RelationKind
    target_id: int
    source_ordinal: int


@dataclass(frozen=True)
class FilterSpec:
    """Board filter; empty or None axes are unconstrained."""

    area_path: str | None = None
    work_item_type: str | None = None
    selected_tags: frozenset[str] = frozenset()
    selected_states: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return (
            not self.area_path
            and not self.work_item_type
            and not self.selected_tags
            and not self.selected_states
        )


@dataclass(frozen=True)
class PatchOperation:
    """One JSON-Patch entry sent verbatim to the work item store."""

    op: str
    path: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "path": self.path, "value": self.value}


@dataclass(frozen=True)
class RelationIntent:
    """Desired relation change on one item: add by target or remove by position."""

    action: str
    item_id: int
    relation_kind: RelationKind
    target_id: int | None = None
    position: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "item_id": self.item_id,
            "relation_kind": self.relation_kind.value,
            "target_id": self.target_id,
            "position": self.position,
        }


@dataclass(frozen=True)
class ConstraintViolation:
    """Rejected relation edit with a user-facing message."""

    kind: ViolationKind
    message: str


@dataclass
class RelationEditResult:
    """Outcome of a relation edit: ordered intents, or a violation and no intents."""

    intents: list[RelationIntent] = field(default_factory=list)
    violation: ConstraintViolation | None = None

    @property
    def ok(self) -> bool:
        return self.violation is None


class WorkItemValidationError(ValueError):
    """Raised when a draft cannot be turned into a valid create/update payload."""
