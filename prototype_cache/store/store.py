"""
In-memory snapshot store for normalized prototypes.

This module keeps the most recent batch of normalized prototypes in memory
with an id index for O(1) lookups, a TTL for staleness checks and a size
ceiling that protects the process from oversized payloads.

The whole dataset lives in one immutable `Snapshot` object. A write builds a
new snapshot and swaps it in with a single assignment, so readers never see
the index and the ordered list disagree.
"""

import json
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from ..types import NormalizedPrototype
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_TTL_MS = 30 * 60 * 1000  # 30 minutes
DEFAULT_DATA_SIZE_BYTES = 10 * 1024 * 1024  # 10 MiB
MAX_DATA_SIZE_BYTES = 30 * 1024 * 1024  # 30 MiB


@dataclass(frozen=True)
class Snapshot:
    """One complete, immutable generation of cached prototypes."""

    ordered: tuple[NormalizedPrototype, ...] = ()
    index: Mapping[int, NormalizedPrototype] = field(default_factory=lambda: MappingProxyType({}))
    cached_at: Optional[datetime] = None
    approx_size_bytes: int = 0
    min_id: Optional[int] = None
    max_id: Optional[int] = None


@dataclass(frozen=True)
class SnapshotStats:
    """Statistics describing the current snapshot."""

    size: int
    cached_at: Optional[datetime]
    ttl_ms: int
    is_expired: bool
    approx_size_bytes: int
    remaining_ttl_ms: int


EMPTY_SNAPSHOT = Snapshot()


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PrototypeStore:
    """
    Holds the current snapshot of normalized prototypes.

    Writes replace the whole dataset at once; there are no partial updates.
    Reads never block and always see one consistent snapshot.

    Example:
        store = PrototypeStore(ttl_ms=60_000)
        store.replace(records)
        store.get_by_id(42)
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        max_data_size_bytes: int = DEFAULT_DATA_SIZE_BYTES,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the store.

        Args:
            ttl_ms: Age in milliseconds after which the snapshot is stale
            max_data_size_bytes: Largest serialized snapshot accepted by
                `replace`; must not exceed 30 MiB
            clock: Returns the current time (timezone-aware); defaults to UTC now
            rng: Random source for `get_random`

        Raises:
            ConfigurationError: If a limit is out of range
        """
        if max_data_size_bytes > MAX_DATA_SIZE_BYTES:
            max_mib = MAX_DATA_SIZE_BYTES // (1024 * 1024)
            raise ConfigurationError(
                f"max_data_size_bytes must be <= {MAX_DATA_SIZE_BYTES} bytes ({max_mib} MiB), "
                f"got {max_data_size_bytes}"
            )
        if max_data_size_bytes <= 0:
            raise ConfigurationError(
                f"max_data_size_bytes must be positive, got {max_data_size_bytes}"
            )
        if ttl_ms < 0:
            raise ConfigurationError(f"ttl_ms must not be negative, got {ttl_ms}")

        self.ttl_ms = ttl_ms
        self.max_data_size_bytes = max_data_size_bytes
        self._clock = clock or _utc_now
        self._rng = rng or random.Random()
        self._snapshot = EMPTY_SNAPSHOT

        logger.info(
            "PrototypeStore initialized",
            extra={
                "ttl_ms": self.ttl_ms,
                "max_data_size_bytes": self.max_data_size_bytes,
            },
        )

    def get_config(self) -> dict[str, int]:
        """Return the limits this store was created with."""
        return {
            "ttl_ms": self.ttl_ms,
            "max_data_size_bytes": self.max_data_size_bytes,
        }

    @property
    def size(self) -> int:
        return len(self._snapshot.ordered)

    @property
    def cached_at(self) -> Optional[datetime]:
        return self._snapshot.cached_at

    @property
    def min_id(self) -> Optional[int]:
        return self._snapshot.min_id

    @property
    def max_id(self) -> Optional[int]:
        return self._snapshot.max_id

    @staticmethod
    def estimate_size(records: Iterable[NormalizedPrototype]) -> int:
        """Return the UTF-8 byte length of the records serialized as compact JSON."""
        serialized = json.dumps(
            list(records), ensure_ascii=False, separators=(",", ":"), default=str
        )
        return len(serialized.encode("utf-8"))

    def replace(self, records: list[NormalizedPrototype]) -> Optional[int]:
        """
        Replace the whole snapshot with `records`.

        Oversized payloads are not an error: the write is skipped, a warning
        is logged and the current snapshot stays as it was.
        Records without an id are dropped with a warning, so the index, the
        ordered tuple and the id range always describe the same records.

        Args:
            records: Normalized prototypes in upstream order

        Returns:
            Serialized size in bytes of the stored snapshot, or None when the
            payload exceeded `max_data_size_bytes` and nothing was written
        """
        data_size_bytes = self.estimate_size(records)

        if data_size_bytes > self.max_data_size_bytes:
            logger.warning(
                "Snapshot skipped: data exceeds maximum size",
                extra={
                    "data_size_bytes": data_size_bytes,
                    "max_data_size_bytes": self.max_data_size_bytes,
                    "count": len(records),
                },
            )
            return None

        index: dict[int, NormalizedPrototype] = {}
        missing_ids = 0
        for record in records:
            prototype_id = record.get("id")
            if prototype_id is None:
                missing_ids += 1
                continue
            index[prototype_id] = record

        if missing_ids:
            logger.warning(
                "Prototypes without id dropped from snapshot",
                extra={"count": len(records), "missing_ids": missing_ids},
            )

        if len(index) + missing_ids != len(records):
            logger.warning(
                "Duplicate prototype ids collapsed in snapshot",
                extra={
                    "count": len(records),
                    "unique_ids": len(index),
                },
            )

        self._snapshot = Snapshot(
            ordered=tuple(index.values()),
            index=MappingProxyType(index),
            cached_at=self._clock(),
            approx_size_bytes=data_size_bytes,
            min_id=min(index) if index else None,
            max_id=max(index) if index else None,
        )

        logger.info(
            "PrototypeStore snapshot updated",
            extra={
                "count": len(index),
                "data_size_bytes": data_size_bytes,
                "max_id": self._snapshot.max_id,
            },
        )
        return data_size_bytes

    def clear(self) -> None:
        """Drop all cached data and metadata."""
        previous_size = self.size
        self._snapshot = EMPTY_SNAPSHOT
        logger.info("PrototypeStore cleared", extra={"previous_size": previous_size})

    def get_by_id(self, prototype_id: int) -> Optional[NormalizedPrototype]:
        return self._snapshot.index.get(prototype_id)

    def get_all(self) -> tuple[NormalizedPrototype, ...]:
        """Return all prototypes in upstream order (read-only tuple)."""
        return self._snapshot.ordered

    def get_ids(self) -> list[int]:
        return [record["id"] for record in self._snapshot.ordered]

    def get_random(self) -> Optional[NormalizedPrototype]:
        """Return one prototype chosen uniformly at random, or None when empty."""
        ordered = self._snapshot.ordered
        if not ordered:
            return None
        return self._rng.choice(ordered)

    def _elapsed(self) -> timedelta:
        cached_at = self._snapshot.cached_at
        if cached_at is None:
            return timedelta(0)
        return self._clock() - cached_at

    def is_expired(self) -> bool:
        """True when nothing was ever stored or the snapshot outlived its TTL."""
        if self._snapshot.cached_at is None:
            return True
        return self._elapsed() > timedelta(milliseconds=self.ttl_ms)

    def remaining_ttl_ms(self) -> int:
        if self._snapshot.cached_at is None:
            return 0
        remaining = timedelta(milliseconds=self.ttl_ms) - self._elapsed()
        return max(0, int(remaining.total_seconds() * 1000))

    def get_stats(self) -> SnapshotStats:
        snapshot = self._snapshot
        return SnapshotStats(
            size=len(snapshot.ordered),
            cached_at=snapshot.cached_at,
            ttl_ms=self.ttl_ms,
            is_expired=self.is_expired(),
            approx_size_bytes=snapshot.approx_size_bytes,
            remaining_ttl_ms=self.remaining_ttl_ms(),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size}, ttl_ms={self.ttl_ms})"
