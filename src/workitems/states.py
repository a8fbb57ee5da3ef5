"""Valid workflow states per work item type."""

EPIC_FEATURE_STATES: tuple[str, ...] = ("New", "In Progress", "Done", "Removed")
BACKLOG_ITEM_STATES: tuple[str, ...] = ("New", "Approved", "Committed", "Done", "Removed")
DEFAULT_STATES: tuple[str, ...] = ("New", "In Progress", "Resolved", "Closed")

STATES_BY_TYPE: dict[str, tuple[str, ...]] = {
    "Epic": EPIC_FEATURE_STATES,
    "Feature": EPIC_FEATURE_STATES,
    "Product Backlog Item": BACKLOG_ITEM_STATES,
}


def valid_states(work_item_type: str) -> tuple[str, ...]:
    """Return ordered valid states for a type; unknown types use the default list."""
    return STATES_BY_TYPE.get(work_item_type, DEFAULT_STATES)


def default_state(work_item_type: str) -> str:
    """Return the first valid state for a type."""
    return valid_states(work_item_type)[0]


def is_valid_state(work_item_type: str, state: str) -> bool:
    return state in valid_states(work_item_type)
