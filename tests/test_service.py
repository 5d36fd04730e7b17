"""Tests for cache/fetch orchestration and fallback."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from quake_proxy.cache import SnapshotCache
from quake_proxy.fetcher import BulletinFetcher
from quake_proxy.service import FeedUnavailableError, QuakeFeedService


class FakeUpstream:
    """MockTransport handler whose behaviour can be switched between calls."""

    def __init__(self, body: bytes) -> None:
        self.body = body
        self.calls = 0
        self.fail = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.fail:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, content=self.body)


@pytest.fixture
def upstream(bulletin_bytes) -> FakeUpstream:
    return FakeUpstream(bulletin_bytes)


@pytest.fixture
def make_service(upstream, clock):
    def factory(**kwargs) -> QuakeFeedService:
        fetcher = BulletinFetcher(url="http://bulletin.test/", transport=httpx.MockTransport(upstream))
        return QuakeFeedService(fetcher, SnapshotCache(ttl_seconds=300, clock=clock), **kwargs)

    return factory


def test_first_call_fetches_from_api(make_service, upstream):
    service = make_service()

    result = asyncio.run(service.get_earthquakes())

    assert result.source == "api"
    assert len(result.records) == 3
    assert upstream.calls == 1
    assert service.cache.read().records == result.records


def test_fresh_cache_is_served_without_fetching(make_service, upstream, clock):
    service = make_service()
    asyncio.run(service.get_earthquakes())
    clock.advance(60)

    result = asyncio.run(service.get_earthquakes())

    assert result.source == "cache"
    assert upstream.calls == 1


def test_force_refresh_bypasses_fresh_cache(make_service, upstream):
    service = make_service()
    asyncio.run(service.get_earthquakes())

    result = asyncio.run(service.get_earthquakes(force_refresh=True))

    assert result.source == "api"
    assert upstream.calls == 2


def test_stale_cache_triggers_refetch(make_service, upstream, clock):
    service = make_service()
    asyncio.run(service.get_earthquakes())
    clock.advance(301)

    result = asyncio.run(service.get_earthquakes())

    assert result.source == "api"
    assert upstream.calls == 2


def test_failure_with_cache_falls_back_to_stale_snapshot(make_service, upstream, clock):
    service = make_service()
    before = asyncio.run(service.get_earthquakes())
    clock.advance(600)
    upstream.fail = True

    result = asyncio.run(service.get_earthquakes())

    assert result.source == "cache_fallback"
    assert len(result.records) == len(before.records)
    assert result.records == before.records


def test_failure_without_cache_raises(make_service, upstream):
    upstream.fail = True
    service = make_service()

    with pytest.raises(FeedUnavailableError, match="timed out"):
        asyncio.run(service.get_earthquakes())


def test_decode_failure_is_treated_as_upstream_failure(make_service):
    service = make_service(encoding="no-such-codec")

    with pytest.raises(FeedUnavailableError, match="Unknown bulletin encoding"):
        asyncio.run(service.get_earthquakes())


def test_page_without_pre_block_caches_zero_records(make_service, upstream):
    upstream.body = b"<html><body>bakim</body></html>"
    service = make_service()

    result = asyncio.run(service.get_earthquakes())

    assert result.source == "api"
    assert result.records == ()
    assert not service.cache.is_fresh()


def test_concurrent_requests_are_not_coalesced(bulletin_bytes, clock):
    calls = 0

    async def slow_handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return httpx.Response(200, content=bulletin_bytes)

    fetcher = BulletinFetcher(url="http://bulletin.test/", transport=httpx.MockTransport(slow_handler))
    service = QuakeFeedService(fetcher, SnapshotCache(clock=clock))

    async def run():
        return await asyncio.gather(service.get_earthquakes(), service.get_earthquakes())

    first, second = asyncio.run(run())

    assert calls == 2
    assert first.source == second.source == "api"
    assert first.records == second.records


def test_status_reports_cache_state(make_service, clock):
    service = make_service()
    assert service.status()["cached_count"] == 0
    assert service.status()["captured_at"] is None

    asyncio.run(service.get_earthquakes())
    clock.advance(30)
    status = service.status()

    assert status["cached_count"] == 3
    assert status["fresh"] is True
    assert status["age_seconds"] == 30
    assert status["ttl_seconds"] == 300
