"""In-memory snapshot store."""

from .errors import ConfigurationError, StoreError
from .store import (
    DEFAULT_DATA_SIZE_BYTES,
    DEFAULT_TTL_MS,
    MAX_DATA_SIZE_BYTES,
    PrototypeStore,
    Snapshot,
    SnapshotStats,
)

__all__ = [
    "PrototypeStore",
    "Snapshot",
    "SnapshotStats",
    "StoreError",
    "ConfigurationError",
    "DEFAULT_TTL_MS",
    "DEFAULT_DATA_SIZE_BYTES",
    "MAX_DATA_SIZE_BYTES",
]
