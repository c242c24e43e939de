"""
Snapshot analysis helpers.

Pure functions over a sequence of normalized prototypes. They only look at
the data they are given (the current snapshot), never at the upstream API.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Sequence

from ..types import NormalizedPrototype

TOP_TAGS_LIMIT = 10


@dataclass(frozen=True)
class NumericStats:
    """Total, mean and range of a numeric field."""

    total: float = 0
    avg: float = 0
    min: float = 0
    max: float = 0


@dataclass(frozen=True)
class ExtendedAnalysis:
    """Summary statistics for a snapshot."""

    count: int
    id_range: dict[str, Optional[int]]
    unique_tags: int
    unique_users: int
    top_tags: list[tuple[str, int]] = field(default_factory=list)
    view_count: NumericStats = NumericStats()
    good_count: NumericStats = NumericStats()
    comment_count: NumericStats = NumericStats()


def analyze_id_range(prototypes: Iterable[NormalizedPrototype]) -> dict[str, Optional[int]]:
    """
    Return the smallest and largest id in a single pass.

    Records whose id is missing are ignored. Both values are None when no id
    is present.
    """
    min_id: Optional[int] = None
    max_id: Optional[int] = None
    for prototype in prototypes:
        prototype_id = prototype.get("id")
        if prototype_id is None:
            continue
        if min_id is None or prototype_id < min_id:
            min_id = prototype_id
        if max_id is None or prototype_id > max_id:
            max_id = prototype_id
    return {"min": min_id, "max": max_id}


def _numeric_stats(values: Sequence[Any]) -> NumericStats:
    numbers = [
        value for value in values
        if isinstance(value, (int, float)) and not isinstance(value, bool)
    ]
    if not numbers:
        return NumericStats()
    total = sum(numbers)
    return NumericStats(
        total=total,
        avg=total / len(numbers),
        min=min(numbers),
        max=max(numbers),
    )


def analyze_extended(
    prototypes: Sequence[NormalizedPrototype],
    top_tags_limit: int = TOP_TAGS_LIMIT,
) -> ExtendedAnalysis:
    """
    Compute summary statistics for a snapshot.

    Tag popularity counts each occurrence; ties keep first-seen order.
    Counter fields that are missing or non-numeric are skipped.
    """
    tag_counts: Counter[str] = Counter()
    users: set[str] = set()
    for prototype in prototypes:
        tag_counts.update(prototype.get("tags") or [])
        users.update(prototype.get("users") or [])

    return ExtendedAnalysis(
        count=len(prototypes),
        id_range=analyze_id_range(prototypes),
        unique_tags=len(tag_counts),
        unique_users=len(users),
        top_tags=tag_counts.most_common(top_tags_limit),
        view_count=_numeric_stats([p.get("viewCount") for p in prototypes]),
        good_count=_numeric_stats([p.get("goodCount") for p in prototypes]),
        comment_count=_numeric_stats([p.get("commentCount") for p in prototypes]),
    )
