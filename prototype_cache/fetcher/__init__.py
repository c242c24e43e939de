"""Fetcher boundary.

This package defines how the repository talks to the upstream API and how
every kind of upstream failure is normalized.

Main components:
- Fetcher: Abstract base class for upstream fetchers
- FetchResult: Result type returned by fetchers
- MockFetcher: In-process fetcher for tests and demos
- normalize_error: Maps any failure to a FetchFailure
"""

from .base import Fetcher, FetchAbortedError, FetchResult, UpstreamApiError
from .errors import FetchFailure, UpstreamFailure, normalize_error
from .mock_fetcher import MockFetcher

__all__ = [
    "Fetcher",
    "FetchResult",
    "FetchAbortedError",
    "UpstreamApiError",
    "FetchFailure",
    "UpstreamFailure",
    "normalize_error",
    "MockFetcher",
]
