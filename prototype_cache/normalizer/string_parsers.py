"""
String parsing helpers for upstream list fields.

The upstream API encodes tags, users, materials, events and awards as a single
pipe-delimited string ("IoT|AI | Robotics"). These helpers turn such a string
into a clean list.
"""

from typing import Any

LIST_DELIMITER = "|"


def split_list(value: Any, delimiter: str = LIST_DELIMITER) -> list[str]:
    """
    Split a delimiter-separated string into trimmed, non-empty segments.

    Consecutive delimiters collapse and leading/trailing delimiters are
    dropped, so the result never contains empty strings. Order is preserved
    and duplicates are kept.

    Examples:
        >>> split_list("tag1| tag2 |tag1||tag3|")
        ['tag1', 'tag2', 'tag1', 'tag3']
        >>> split_list(None)
        []

    Args:
        value: Raw field value; anything that is not a non-empty string
            yields an empty list
        delimiter: Segment separator (default: "|")

    Returns:
        A new list on every call
    """
    if not value or not isinstance(value, str):
        return []

    return [segment.strip() for segment in value.split(delimiter) if segment.strip()]
