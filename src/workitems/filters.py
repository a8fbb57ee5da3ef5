"""Board filtering over a work item snapshot."""

from typing import Iterable

from src.workitems.tag_codec import split_tags, strip_category_tags
from src.workitems.types import FilterSpec, WorkItem


def matches_filter(item: WorkItem, spec: FilterSpec) -> bool:
    """
    Return whether one item satisfies every non-empty filter axis.

    Tags match when any of the item's tags is selected; axes are AND'd.
    Malformed fields simply fail to match.
    """
    if spec.area_path and getattr(item, "area_path", None) != spec.area_path:
        return False
    if spec.work_item_type and getattr(item, "work_item_type", None) != spec.work_item_type:
        return False
    if spec.selected_tags and not any(
        tag in spec.selected_tags for tag in split_tags(getattr(item, "tags", None))
    ):
        return False
    if spec.selected_states and getattr(item, "state", None) not in spec.selected_states:
        return False
    return True


def apply_filter(items: Iterable[WorkItem], spec: FilterSpec) -> list[WorkItem]:
    """Return matching items in input order."""
    if spec.is_empty:
        return list(items)
    return [item for item in items if matches_filter(item, spec)]


def collect_tag_options(items: Iterable[WorkItem]) -> list[str]:
    """Return sorted unique user tags across items (category tags excluded)."""
    return sorted({tag for item in items for tag in strip_category_tags(item.tags)})


def collect_state_options(items: Iterable[WorkItem]) -> list[str]:
    """Return sorted unique non-empty states across items."""
    return sorted({item.state for item in items if item.state})
