"""
Snapshot Repository

Coordinates the fetcher and the store and exposes the read API.

Key responsibilities:
- Coalesce concurrent fetches into one upstream call
- Normalize fetched records and replace the store snapshot
- Keep the previous snapshot when a fetch fails
- Serve reads and analyses from memory
"""

from .analysis import ExtendedAnalysis, NumericStats, analyze_extended, analyze_id_range
from .errors import ValidationError
from .events import (
    SNAPSHOT_COMPLETED,
    SNAPSHOT_FAILED,
    SNAPSHOT_STARTED,
    RepositoryEvents,
)
from .repository import SnapshotRepository

__all__ = [
    "SnapshotRepository",
    "RepositoryEvents",
    "ValidationError",
    "ExtendedAnalysis",
    "NumericStats",
    "analyze_extended",
    "analyze_id_range",
    "SNAPSHOT_STARTED",
    "SNAPSHOT_COMPLETED",
    "SNAPSHOT_FAILED",
]
