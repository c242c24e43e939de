"""
Snapshot repository: coordinates fetching, normalizing and caching.

The repository owns one `PrototypeStore` and one `Fetcher`. It guarantees at
most one upstream fetch in flight per instance: callers arriving while a
fetch is running join it and receive the same result (or the same
`UpstreamFailure`) instead of starting another one, whatever parameters they
passed.

The in-flight slot is a single task reference that is checked and set before
the first await, so no lock is needed on the event loop. Read methods are
synchronous and only touch the store.
"""

import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import Optional

from ..fetcher.base import Fetcher
from ..fetcher.errors import UpstreamFailure, normalize_error
from ..normalizer import normalize_prototypes
from ..store import PrototypeStore, SnapshotStats
from ..types import FetchParams, NormalizedPrototype, merge_fetch_params
from .analysis import ExtendedAnalysis, analyze_extended, analyze_id_range
from .errors import validate_prototype_id, validate_sample_size
from .events import SNAPSHOT_COMPLETED, SNAPSHOT_FAILED, SNAPSHOT_STARTED, RepositoryEvents

logger = logging.getLogger(__name__)


def _consume_outcome(task: asyncio.Task) -> None:
    """Mark the fetch outcome as retrieved even when every waiter was cancelled."""
    if not task.cancelled():
        task.exception()


class SnapshotRepository:
    """
    In-memory repository of normalized prototypes backed by an upstream fetcher.

    Example:
        repo = SnapshotRepository(MockFetcher(num_records=50))
        stats = await repo.ensure_snapshot({"limit": 20})
        prototype = repo.get_by_id(3)
        stats = await repo.force_refresh()   # replays {"offset": 0, "limit": 20}
    """

    def __init__(
        self,
        fetcher: Fetcher,
        store: Optional[PrototypeStore] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the repository.

        Args:
            fetcher: Upstream fetcher implementation
            store: Snapshot store; a store with default limits is created when
                omitted
            rng: Random source for sampling reads
        """
        self._fetcher = fetcher
        self._store = store if store is not None else PrototypeStore()
        self._rng = rng or random.Random()
        self._last_params: FetchParams = merge_fetch_params()
        self._in_flight: Optional[asyncio.Task] = None
        self.events = RepositoryEvents()

    @property
    def store(self) -> PrototypeStore:
        return self._store

    @property
    def last_params(self) -> FetchParams:
        """Parameters `force_refresh` will replay."""
        return dict(self._last_params)

    def is_refresh_in_flight(self) -> bool:
        return self._in_flight is not None

    def get_config(self) -> dict[str, int]:
        return self._store.get_config()

    def get_stats(self) -> SnapshotStats:
        return self._store.get_stats()

    # ------------------------------------------------------------------
    # Snapshot operations
    # ------------------------------------------------------------------

    async def ensure_snapshot(self, params: Optional[FetchParams] = None) -> SnapshotStats:
        """
        Fetch a batch with `params` (merged with defaults) and store it.

        If a fetch is already running, joins it instead; `params` are then
        ignored.

        Returns:
            Store statistics after the operation

        Raises:
            UpstreamFailure: If the fetch failed; the cached snapshot is kept
        """
        return await self._run_exclusive(merge_fetch_params(params), "ensure")

    async def force_refresh(self) -> SnapshotStats:
        """
        Re-fetch using the last successful parameters (defaults if none).

        Joins a running fetch if there is one.

        Raises:
            UpstreamFailure: If the fetch failed; the cached snapshot is kept
        """
        return await self._run_exclusive(dict(self._last_params), "refresh")

    def _run_exclusive(self, params: FetchParams, operation: str) -> "asyncio.Future[SnapshotStats]":
        # Check-and-set happens before any await
        if self._in_flight is not None:
            logger.debug(
                "Joining in-flight snapshot fetch",
                extra={"operation": operation, "requested_params": params},
            )
            return asyncio.shield(self._in_flight)

        task = asyncio.ensure_future(self._fetch_and_store(params, operation))
        task.add_done_callback(_consume_outcome)
        self._in_flight = task
        return asyncio.shield(task)

    async def _fetch_and_store(self, params: FetchParams, operation: str) -> SnapshotStats:
        """Fetch, normalize and store one batch; releases the in-flight slot."""
        start_time = datetime.now(timezone.utc)
        try:
            logger.info(
                "Starting snapshot fetch",
                extra={
                    "operation": operation,
                    "params": params,
                    "source": self._fetcher.source_name,
                },
            )
            self.events.emit(SNAPSHOT_STARTED, operation)

            try:
                result = await self._fetcher.fetch_records(params)
            except Exception as e:
                failure = normalize_error(e)
                self.events.emit(SNAPSHOT_FAILED, failure)
                raise UpstreamFailure(failure) from e

            if not result.ok:
                failure = normalize_error(result)
                self.events.emit(SNAPSHOT_FAILED, failure)
                raise UpstreamFailure(failure)

            try:
                records = normalize_prototypes(result.data)
                stored_bytes = self._store.replace(records)
            except Exception as e:
                # Malformed payload; the store only swaps after a successful build
                failure = normalize_error(e)
                self.events.emit(SNAPSHOT_FAILED, failure)
                raise UpstreamFailure(failure) from e

            self._last_params = dict(params)

            stats = self._store.get_stats()
            duration = (datetime.now(timezone.utc) - start_time).total_seconds()
            logger.info(
                "Snapshot fetch completed",
                extra={
                    "operation": operation,
                    "fetched": len(records),
                    "stored": stored_bytes is not None,
                    "size": stats.size,
                    "duration_seconds": duration,
                },
            )
            self.events.emit(SNAPSHOT_COMPLETED, stats)
            return stats
        finally:
            self._in_flight = None

    # ------------------------------------------------------------------
    # Reads (never touch the network)
    # ------------------------------------------------------------------

    def get_by_id(self, prototype_id: int) -> Optional[NormalizedPrototype]:
        """
        Look up a prototype in the current snapshot.

        Raises:
            ValidationError: If `prototype_id` is not a positive integer
        """
        validate_prototype_id(prototype_id)
        return self._store.get_by_id(prototype_id)

    def get_all(self) -> tuple[NormalizedPrototype, ...]:
        return self._store.get_all()

    def get_all_ids(self) -> list[int]:
        return self._store.get_ids()

    def get_random_one(self) -> Optional[NormalizedPrototype]:
        return self._store.get_random()

    def get_random_sample(self, size: int) -> list[NormalizedPrototype]:
        """
        Return up to `size` distinct prototypes in random order.

        `size` is clamped to the snapshot size; zero, negative sizes and an
        empty snapshot yield an empty list.

        Raises:
            ValidationError: If `size` is not an integer
        """
        validate_sample_size(size)
        all_prototypes = self._store.get_all()
        if size <= 0 or not all_prototypes:
            return []
        return self._rng.sample(all_prototypes, min(size, len(all_prototypes)))

    def analyze(self) -> dict[str, Optional[int]]:
        """Return {"min": ..., "max": ...} over the ids in the snapshot."""
        return analyze_id_range(self._store.get_all())

    def analyze_extended(self) -> ExtendedAnalysis:
        return analyze_extended(self._store.get_all())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(fetcher={self._fetcher!r}, store={self._store!r})"
