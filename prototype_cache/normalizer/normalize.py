"""
Prototype Normalization Logic

This module transforms raw prototype records from the upstream API into our
canonical format. It is a structural mapping: it splits list fields, converts
timestamps to UTC and applies default values, but it never coerces or
validates the types of pass-through fields.

Key Responsibilities:
- Split pipe-delimited list fields into lists
- Normalize timestamp fields to canonical UTC strings
- Apply default values for missing optional fields
- Never mutate the input record
"""

import logging
from typing import Any, Iterable, Mapping

from ..types import NormalizedPrototype
from .string_parsers import split_list
from .timestamps import normalize_timestamp

logger = logging.getLogger(__name__)


LIST_FIELDS = ("users", "tags", "materials", "events", "awards")
TIMESTAMP_FIELDS = ("createDate", "updateDate", "releaseDate")

# Text fields that default to "" when missing
TEXT_DEFAULTS = {
    "summary": "",
    "freeComment": "",
    "systemDescription": "",
    "teamNm": "",
}

# Flag/status fields, each defaulted independently; explicit 0 is kept
FLAG_DEFAULTS = {
    "releaseFlg": 2,  # released
    "revision": 0,
    "licenseType": 1,  # CC BY
    "thanksFlg": 0,
}

PASSTHROUGH_FIELDS = (
    "id",
    "createId",
    "updateId",
    "status",
    "prototypeNm",
    "officialLink",
    "videoUrl",
    "mainUrl",
    "relatedLink",
    "relatedLink2",
    "relatedLink3",
    "relatedLink4",
    "relatedLink5",
    "viewCount",
    "goodCount",
    "commentCount",
    "uuid",
    "nid",
    "slideMode",
)


def _value_or_default(value: Any, default: Any) -> Any:
    """Return `default` only when the value is missing (None)."""
    return default if value is None else value


def _normalize_timestamp_field(raw_data: Mapping[str, Any], field_name: str) -> Any:
    """
    Normalize one timestamp field, falling back to the upstream value.

    An unparseable non-empty string is kept verbatim and logged so the
    problem stays visible without failing the whole batch.
    """
    original = raw_data.get(field_name)
    normalized = normalize_timestamp(original)
    if normalized is not None:
        return normalized

    if isinstance(original, str) and original.strip():
        logger.warning(
            "Failed to normalize timestamp, keeping upstream value",
            extra={
                'field': field_name,
                'value': original,
                'prototype_id': raw_data.get('id'),
            }
        )
    return original


def normalize_prototype(raw_data: Mapping[str, Any]) -> NormalizedPrototype:
    """
    Normalize a raw upstream prototype into our canonical format.

    The normalized format includes:
    - `users`, `tags`, `materials`, `events`, `awards`: always lists
    - `createDate`, `updateDate`, `releaseDate`: canonical UTC strings, or the
      upstream value when it cannot be parsed
    - `summary`, `freeComment`, `systemDescription`, `teamNm`: "" when missing
    - `releaseFlg` (2), `revision` (0), `licenseType` (1), `thanksFlg` (0):
      defaulted only when missing or None
    - every other known field copied as-is

    Args:
        raw_data: Dictionary containing one upstream prototype record

    Returns:
        A new dictionary; list values are fresh objects on every call

    Examples:
        >>> normalized = normalize_prototype({
        ...     'id': 7,
        ...     'tags': 'IoT|AI',
        ...     'createDate': '2024-01-01 09:00:00.0',
        ... })
        >>> normalized['tags']
        ['IoT', 'AI']
        >>> normalized['createDate']
        '2024-01-01T00:00:00.000Z'
    """
    normalized: NormalizedPrototype = {
        field_name: raw_data.get(field_name) for field_name in PASSTHROUGH_FIELDS
    }

    for field_name in TIMESTAMP_FIELDS:
        normalized[field_name] = _normalize_timestamp_field(raw_data, field_name)

    for field_name, default in TEXT_DEFAULTS.items():
        normalized[field_name] = _value_or_default(raw_data.get(field_name), default)

    for field_name in LIST_FIELDS:
        normalized[field_name] = split_list(raw_data.get(field_name))

    for field_name, default in FLAG_DEFAULTS.items():
        normalized[field_name] = _value_or_default(raw_data.get(field_name), default)

    logger.debug(
        "Normalized prototype",
        extra={'prototype_id': normalized['id']}
    )

    return normalized


def normalize_prototypes(records: Iterable[Mapping[str, Any]]) -> list[NormalizedPrototype]:
    """Normalize a batch of upstream records, preserving order."""
    return [normalize_prototype(record) for record in records]
