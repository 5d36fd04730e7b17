"""Fetch orchestration: cache lookup, live refresh and stale fallback."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .bulletin import BULLETIN_ENCODING, BulletinDecodeError, decode_bulletin, extract_preformatted_text
from .cache import SnapshotCache
from .fetcher import BulletinFetcher, UpstreamFetchError
from .models import EarthquakeRecord, FeedResult
from .parser import parse_bulletin

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_API = "api"
SOURCE_CACHE_FALLBACK = "cache_fallback"


class FeedUnavailableError(RuntimeError):
    """Raised when the bulletin cannot be fetched and nothing is cached."""


def records_from_bytes(raw: bytes, *, encoding: str = BULLETIN_ENCODING) -> list[EarthquakeRecord]:
    """Decode, extract and parse one bulletin payload."""

    html = decode_bulletin(raw, encoding)
    return parse_bulletin(extract_preformatted_text(html))


class QuakeFeedService:
    """Serves bulletin records from the cache or from a live fetch.

    Concurrent callers are not coalesced: each one decides freshness on its
    own and may start its own fetch. All of them end with a whole-snapshot
    write, so the cache converges on the latest bulletin.
    """

    def __init__(
        self,
        fetcher: BulletinFetcher,
        cache: SnapshotCache,
        *,
        encoding: str = BULLETIN_ENCODING,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._encoding = encoding

    @property
    def cache(self) -> SnapshotCache:
        return self._cache

    async def get_earthquakes(self, *, force_refresh: bool = False) -> FeedResult:
        if not force_refresh and self._cache.is_fresh():
            snapshot = self._cache.read()
            logger.info("Serving %d cached records", len(snapshot.records))
            return FeedResult(records=snapshot.records, source=SOURCE_CACHE)

        logger.info("Fetching bulletin from %s", self._fetcher.url)
        try:
            raw = await self._fetcher.fetch()
            records = records_from_bytes(raw, encoding=self._encoding)
        except (UpstreamFetchError, BulletinDecodeError) as exc:
            return self._fallback(exc)

        snapshot = self._cache.write(records)
        logger.info("Fetched %d records from the bulletin", len(snapshot.records))
        return FeedResult(records=snapshot.records, source=SOURCE_API)

    def _fallback(self, exc: Exception) -> FeedResult:
        snapshot = self._cache.read()
        if snapshot.records:
            logger.warning(
                "Bulletin fetch failed (%s); serving %d stale records", exc, len(snapshot.records)
            )
            return FeedResult(records=snapshot.records, source=SOURCE_CACHE_FALLBACK)

        logger.error("Bulletin fetch failed with an empty cache: %s", exc)
        raise FeedUnavailableError(f"Could not reach the Kandilli bulletin: {exc}") from exc

    def status(self) -> dict[str, object]:
        snapshot = self._cache.read()
        captured_at = (
            datetime.fromtimestamp(snapshot.captured_at, tz=timezone.utc).isoformat()
            if snapshot.captured_at
            else None
        )
        return {
            "cached_count": len(snapshot.records),
            "captured_at": captured_at,
            "age_seconds": self._cache.age_seconds(),
            "fresh": self._cache.is_fresh(),
            "ttl_seconds": self._cache.ttl_seconds,
            "upstream_url": self._fetcher.url,
        }
