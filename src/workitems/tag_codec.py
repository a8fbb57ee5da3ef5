"""
src/workitems/tag_codec.py
Packs a CategorySelection into the shared `System.Tags` field and reads it back.
Exports: split_tags, strip_category_tags, encode_category_tags, decode_category_tags
"""

from src.workitems.types import CategorySelection

TAG_SEPARATOR = ";"
TAG_JOINER = "; "

# (selection attribute, reserved prefix, code -> label); order is emission order.
CATEGORY_TABLE: list[tuple[str, str, dict[int, str]]] = [
    (
        "gov_type",
        "Gov:",
        {1: "RTB", 2: "Regulatory", 3: "Strategic", 4: "CTB", 5: "Innovation"},
    ),
    ("impact", "Impact:", {1: "High", 2: "Medium", 3: "Low"}),
    ("cost_savings", "Cost:", {1: "High", 2: "Medium", 3: "Low"}),
    ("effort_category", "Effort:", {1: "Low", 2: "Medium", 3: "High"}),
    ("complexity", "Complexity:", {1: "Low", 2: "Medium", 3: "High"}),
]
RESERVED_PREFIXES: tuple[str, ...] = tuple(prefix for _, prefix, _ in CATEGORY_TABLE)


def split_tags(tags: str | None) -> list[str]:
    """
    Split a semicolon-delimited tag string into trimmed, non-empty tags.

    Args:
        tags: Raw tag field value (None tolerated).
    Returns:
        Tags in original order.
    """
    if not isinstance(tags, str):
        return []
    return [tag.strip() for tag in tags.split(TAG_SEPARATOR) if tag.strip()]


def is_category_tag(tag: str) -> bool:
    """Return whether a tag carries one of the reserved category prefixes."""
    return tag.startswith(RESERVED_PREFIXES)


def strip_category_tags(tags: str | None) -> list[str]:
    """Return user tags only, in original order."""
    return [tag for tag in split_tags(tags) if not is_category_tag(tag)]


def category_tags(categories: CategorySelection) -> list[str]:
    """Render one reserved tag per present category, in table order."""
    rendered: list[str] = []
    for attribute, prefix, labels in CATEGORY_TABLE:
        label = labels.get(getattr(categories, attribute))
        if label:
            rendered.append(f"{prefix}{label}")
    return rendered


def encode_category_tags(existing_tags: str | None, categories: CategorySelection) -> str:
    """
    Replace category tags inside a tag string with ones rendered from `categories`.

    Args:
        existing_tags: Current tag field; user tags are kept in order.
        categories: Selection to persist.
    Returns:
        Tag string joined with "; ".
    """
    return TAG_JOINER.join(strip_category_tags(existing_tags) + category_tags(categories))


def decode_category_tags(tags: str | None) -> CategorySelection:
    """
    Read a CategorySelection back from a tag string.

    The first tag per prefix wins. A label missing from the table leaves the
    field empty instead of failing, since other tools may write tags that
    share a prefix.
    """
    entries = split_tags(tags)
    values: dict[str, int | None] = {}
    for attribute, prefix, labels in CATEGORY_TABLE:
        codes_by_label = {label: code for code, label in labels.items()}
        first = next((tag for tag in entries if tag.startswith(prefix)), None)
        values[attribute] = (
            codes_by_label.get(first[len(prefix):].strip()) if first is not None else None
        )
    return CategorySelection(**values)
