"""Prototype Cache Package.

A caching and normalization layer in front of the prototype-sharing API:
- fetcher: Fetcher interface, result type and error normalization
- normalizer: Converts upstream records to the canonical shape
- store: In-memory snapshot with TTL and size ceiling
- repository: Coalesces fetches and serves reads from memory
- common: Display helpers for code fields
"""

from .config import CacheConfig, StoreConfig, load_cache_config
from .fetcher import (
    Fetcher,
    FetchFailure,
    FetchResult,
    MockFetcher,
    UpstreamApiError,
    UpstreamFailure,
    normalize_error,
)
from .normalizer import normalize_prototype, normalize_timestamp, split_list
from .repository import SnapshotRepository, ValidationError
from .store import ConfigurationError, PrototypeStore, SnapshotStats

__all__ = [
    "CacheConfig",
    "StoreConfig",
    "load_cache_config",
    "Fetcher",
    "FetchResult",
    "FetchFailure",
    "MockFetcher",
    "UpstreamApiError",
    "UpstreamFailure",
    "normalize_error",
    "normalize_prototype",
    "normalize_timestamp",
    "split_list",
    "SnapshotRepository",
    "ValidationError",
    "PrototypeStore",
    "SnapshotStats",
    "ConfigurationError",
]
__version__ = "0.1.0"
