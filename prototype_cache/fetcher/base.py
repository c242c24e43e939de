"""Fetcher Base Class.

This module defines the interface the repository uses to pull prototype
batches from the upstream API. The HTTP client itself lives outside this
package; anything that implements `Fetcher` can be plugged in.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..types import FetchParams, UpstreamPrototype


@dataclass
class FetchResult:
    """Outcome of one upstream call.

    Successful results carry the raw records in `data`. Failed results carry
    the upstream status and message plus optional request/response metadata
    in `details` (keys `request` and `response`).
    """

    ok: bool
    data: List[UpstreamPrototype] = field(default_factory=list)
    status: Optional[int] = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, data: List[UpstreamPrototype]) -> "FetchResult":
        return cls(ok=True, data=list(data))

    @classmethod
    def failure(
        cls,
        status: Optional[int],
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "FetchResult":
        return cls(ok=False, status=status, message=message, details=dict(details or {}))


class UpstreamApiError(Exception):
    """Structured error raised by an upstream API client.

    Carries the HTTP status and request metadata reported by the API, so the
    error normalizer can keep them in the failure descriptor.
    """

    def __init__(
        self,
        message: str,
        status: int,
        status_text: Optional[str] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text
        self.method = method
        self.url = url


class FetchAbortedError(Exception):
    """Raised by a fetcher when it abandons a request (e.g. its own deadline)."""


class Fetcher(ABC):
    """Abstract base class for upstream prototype fetchers.

    Implementations must either return a `FetchResult` or raise; both paths
    are handled by the repository through the error normalizer. Timeouts are
    the fetcher's responsibility: the repository never cancels a fetch.

    Usage:
        class HttpFetcher(Fetcher):
            def __init__(self, client):
                super().__init__(source_name="protopedia")
                self.client = client

            async def fetch_records(self, params):
                payload = await self.client.list_prototypes(**params)
                return FetchResult.success(payload["results"])
    """

    def __init__(self, source_name: str):
        """Initialize the fetcher.

        Args:
            source_name: Identifier used in log records
        """
        self.source_name = source_name

    @abstractmethod
    async def fetch_records(self, params: FetchParams) -> FetchResult:
        """Fetch one batch of prototypes.

        Args:
            params: Merged fetch parameters (`offset`, `limit`, optional
                `record_id`)

        Returns:
            FetchResult with `ok=True` and the raw records, or `ok=False` with
            upstream status and message

        Raises:
            UpstreamApiError: If the API answered with an error status
            TimeoutError: If the fetcher's own deadline expired
            Exception: Any transport error; normalized by the repository
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source='{self.source_name}')"
