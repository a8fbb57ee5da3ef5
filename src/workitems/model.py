"""
src/workitems/model.py
Aggregate over one fetched snapshot: items, relations, area paths and filter.
Exports: WorkItemModel, CreateIntent
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from src.workitems.filters import apply_filter
from src.workitems.patch import build_create_operations, build_update_operations, validate_draft
from src.workitems.relation_editor import RelationEditor
from src.workitems.relations import RelationIndex
from src.workitems.states import default_state
from src.workitems.tag_codec import TAG_JOINER, decode_category_tags, strip_category_tags
from src.workitems.types import (
    FilterSpec,
    PatchOperation,
    RelationEditResult,
    RelationRecord,
    WorkItem,
    WorkItemDraft,
    WorkItemValidationError,
)


@dataclass(frozen=True)
class CreateIntent:
    """Create request for the store: the type plus its `add` operations."""

    work_item_type: str
    operations: list[PatchOperation]


class WorkItemModel:
    """Holds the current snapshot and turns user actions into store intents."""

    def __init__(
        self,
        items: Iterable[WorkItem] = (),
        relations: Mapping[int, list[RelationRecord]] | None = None,
        area_paths: Iterable[str] = (),
    ) -> None:
        self.filter = FilterSpec()
        self.load_snapshot(items, relations, area_paths)

    def load_snapshot(
        self,
        items: Iterable[WorkItem],
        relations: Mapping[int, list[RelationRecord]] | None = None,
        area_paths: Iterable[str] = (),
    ) -> None:
        """Replace held data with a freshly fetched snapshot; the filter is kept."""
        self.items: dict[int, WorkItem] = {item.id: item for item in items}
        self.relations = RelationIndex(relations)
        self.area_paths: list[str] = list(area_paths)

    def get(self, item_id: int) -> WorkItem | None:
        return self.items.get(item_id)

    def set_filter(self, spec: FilterSpec) -> None:
        self.filter = spec

    def clear_filter(self) -> None:
        self.filter = FilterSpec()

    def visible_items(self) -> list[WorkItem]:
        return apply_filter(self.items.values(), self.filter)

    def parent_of(self, item_id: int) -> int | None:
        return self.relations.parent_of(item_id)

    def children_of(self, item_id: int) -> list[int]:
        return self.relations.children_of(item_id)

    def new_draft(self, work_item_type: str) -> WorkItemDraft:
        return WorkItemDraft(work_item_type=work_item_type, state=default_state(work_item_type))

    def draft_for(self, item_id: int) -> WorkItemDraft:
        """
        Prefill an edit draft from a held item.

        Raises:
            KeyError: Item is not in the snapshot.
        """
        item = self.items[item_id]
        return WorkItemDraft(
            work_item_type=item.work_item_type,
            title=item.title,
            state=item.state,
            description=item.description,
            area_path=item.area_path,
            tags=TAG_JOINER.join(strip_category_tags(item.tags)),
            categories=decode_category_tags(item.tags),
            effort=item.effort,
            acceptance_criteria=item.acceptance_criteria,
        )

    def create_intent(self, draft: WorkItemDraft) -> CreateIntent:
        validate_draft(draft, self.area_paths or None)
        return CreateIntent(
            work_item_type=draft.work_item_type,
            operations=build_create_operations(draft),
        )

    def update_intent(self, item_id: int, draft: WorkItemDraft) -> list[PatchOperation]:
        """
        Build update operations for an existing item.

        Raises:
            KeyError: Item is not in the snapshot.
            WorkItemValidationError: Draft is invalid or tries to change the type.
        """
        item = self.items[item_id]
        if draft.work_item_type != item.work_item_type:
            raise WorkItemValidationError("Work item type cannot change after creation.")
        validate_draft(draft, self.area_paths or None)
        return build_update_operations(draft)

    def change_parent(self, item_id: int, new_parent_id: int | None) -> RelationEditResult:
        return RelationEditor(self.relations).change_parent(item_id, new_parent_id)

    def add_child(self, parent_id: int, child_id: int) -> RelationEditResult:
        return RelationEditor(self.relations).add_child(parent_id, child_id)

    def remove_child(self, parent_id: int, child_id: int) -> RelationEditResult:
        return RelationEditor(self.relations).remove_child(parent_id, child_id)
