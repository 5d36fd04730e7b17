"""FastAPI wrapper that serves the Kandilli bulletin as JSON."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from quake_proxy.cache import SnapshotCache
from quake_proxy.config import load_settings
from quake_proxy.fetcher import BulletinFetcher
from quake_proxy.heartbeat import heartbeat_stream
from quake_proxy.service import FeedUnavailableError, QuakeFeedService

SETTINGS = load_settings()

logging.basicConfig(
    level=getattr(logging, SETTINGS.log_level, logging.INFO),
    format="%(levelname)s %(message)s",
)
logging.getLogger("httpx").setLevel(logging.INFO)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

TRUTHY_FLAGS = {"1", "true", "yes", "on"}

app = FastAPI(title="Kandilli Quake Proxy")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# One service per process; the cache lives inside it.
_service: QuakeFeedService | None = None
_fetcher: BulletinFetcher | None = None


def _build_service() -> QuakeFeedService:
    global _fetcher
    _fetcher = BulletinFetcher(
        url=SETTINGS.feed_url,
        user_agent=SETTINGS.user_agent,
        connect_timeout=SETTINGS.connect_timeout,
        read_timeout=SETTINGS.read_timeout,
    )
    cache = SnapshotCache(ttl_seconds=SETTINGS.cache_ttl_seconds)
    return QuakeFeedService(_fetcher, cache, encoding=SETTINGS.feed_encoding)


def get_service() -> QuakeFeedService:
    global _service
    if _service is None:
        _service = _build_service()
    return _service


@app.on_event("startup")
async def _on_startup() -> None:
    get_service()
    logger.info("Serving bulletin from %s", SETTINGS.feed_url)


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    global _service, _fetcher
    if _fetcher is not None:
        await _fetcher.aclose()
    _fetcher = None
    _service = None


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in TRUTHY_FLAGS


@app.get("/api/proxy")
async def proxy(refresh: str | None = None, service: QuakeFeedService = Depends(get_service)):
    try:
        result = await service.get_earthquakes(force_refresh=_is_truthy(refresh))
    except FeedUnavailableError as exc:
        return JSONResponse({"success": False, "error": str(exc)}, status_code=500)
    except Exception as exc:  # pragma: no cover - last resort, keep the JSON contract
        logger.exception("Unexpected error while serving /api/proxy")
        return JSONResponse(
            {"success": False, "error": f"Unexpected error: {exc}"}, status_code=500
        )
    return result.to_payload()


@app.get("/api/status")
def status(service: QuakeFeedService = Depends(get_service)):
    return service.status()


@app.get("/api/realtime")
async def realtime(request: Request):
    client = request.client.host if request.client else "unknown"

    async def frames():
        logger.info("Realtime client connected: %s", client)
        try:
            async for frame in heartbeat_stream(SETTINGS.heartbeat_interval_seconds):
                yield frame
        finally:
            logger.info("Realtime client disconnected: %s", client)

    return StreamingResponse(
        frames(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )
