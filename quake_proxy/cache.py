"""In-memory snapshot cache for parsed bulletin records."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from .models import CacheSnapshot, EarthquakeRecord

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class SnapshotCache:
    """Holds the latest record set and replaces it as a single unit.

    Readers get an immutable snapshot, so a refresh finishing between two
    awaits never exposes a partially written record set.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        self._ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._snapshot = CacheSnapshot()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def read(self) -> CacheSnapshot:
        return self._snapshot

    def has_data(self) -> bool:
        return bool(self._snapshot.records)

    def is_fresh(self) -> bool:
        snapshot = self._snapshot
        if not snapshot.records:
            return False
        return self._clock() - snapshot.captured_at < self._ttl_seconds

    def write(self, records: Iterable[EarthquakeRecord]) -> CacheSnapshot:
        snapshot = CacheSnapshot(records=tuple(records), captured_at=self._clock())
        self._snapshot = snapshot
        logger.debug("Cached %d records", len(snapshot.records))
        return snapshot

    def age_seconds(self) -> float | None:
        if not self._snapshot.captured_at:
            return None
        return max(0.0, self._clock() - self._snapshot.captured_at)
