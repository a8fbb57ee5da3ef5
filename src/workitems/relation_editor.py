"""
src/workitems/relation_editor.py
Computes hierarchy add/remove intents and rejects unsafe edits.
Exports: RelationEditor
"""

from src.workitems.relations import RelationIndex
from src.workitems.types import (
    ConstraintViolation,
    RelationEditResult,
    RelationIntent,
    RelationKind,
    ViolationKind,
)


def _rejected(kind: ViolationKind, message: str) -> RelationEditResult:
    return RelationEditResult(violation=ConstraintViolation(kind=kind, message=message))


class RelationEditor:
    """
    Relation edit rules over one relation snapshot.

    Positions come from the snapshot handed in, so callers must build the
    index from a fresh fetch for every edit action. Each action emits only
    one side of a hierarchy link; the store keeps the inverse side itself.
    """

    def __init__(self, index: RelationIndex) -> None:
        self.index = index

    def change_parent(self, item_id: int, new_parent_id: int | None) -> RelationEditResult:
        """
        Move an item under a new parent, or detach it when `new_parent_id` is None.

        Args:
            item_id: Item whose parent link changes.
            new_parent_id: Target parent id, or None to clear.
        Returns:
            Remove-old then add-new intents, or a violation.
        """
        if new_parent_id == item_id:
            return _rejected(ViolationKind.SELF_REFERENCE, f"Work item {item_id} cannot be its own parent.")
        if new_parent_id is not None and new_parent_id in self.index.children_of(item_id):
            return _rejected(
                ViolationKind.CYCLE,
                f"Work item {new_parent_id} is a child of {item_id} and cannot become its parent.",
            )
        current_parent = self.index.parent_of(item_id)
        if current_parent == new_parent_id:
            return RelationEditResult()

        intents: list[RelationIntent] = []
        position = self.index.parent_position(item_id)
        if position is not None:
            intents.append(
                RelationIntent(
                    action="remove",
                    item_id=item_id,
                    relation_kind=RelationKind.PARENT,
                    position=position,
                )
            )
        if new_parent_id is not None:
            intents.append(
                RelationIntent(
                    action="add",
                    item_id=item_id,
                    relation_kind=RelationKind.PARENT,
                    target_id=new_parent_id,
                )
            )
        return RelationEditResult(intents=intents)

    def add_child(self, parent_id: int, child_id: int) -> RelationEditResult:
        """Link `child_id` under `parent_id` with a single forward link on the parent."""
        if child_id == parent_id:
            return _rejected(ViolationKind.SELF_REFERENCE, f"Work item {parent_id} cannot be its own child.")
        if self.index.parent_of(parent_id) == child_id:
            return _rejected(
                ViolationKind.CYCLE,
                f"Work item {child_id} is the parent of {parent_id} and cannot become its child.",
            )
        if child_id in self.index.children_of(parent_id):
            return _rejected(
                ViolationKind.DUPLICATE,
                f"Work item {child_id} is already a child of {parent_id}.",
            )
        return RelationEditResult(
            intents=[
                RelationIntent(
                    action="add",
                    item_id=parent_id,
                    relation_kind=RelationKind.CHILD,
                    target_id=child_id,
                )
            ]
        )

    def remove_child(self, parent_id: int, child_id: int) -> RelationEditResult:
        """Remove the parent's child link by position; a missing link is a no-op."""
        position = self.index.child_position(parent_id, child_id)
        if position is None:
            return RelationEditResult()
        return RelationEditResult(
            intents=[
                RelationIntent(
                    action="remove",
                    item_id=parent_id,
                    relation_kind=RelationKind.CHILD,
                    position=position,
                )
            ]
        )
