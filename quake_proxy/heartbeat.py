"""Simulated heartbeat frames for the ``/api/realtime`` event stream."""

from __future__ import annotations

import asyncio
import json
import random
from datetime import datetime, timezone
from typing import AsyncIterator, Awaitable, Callable

CONNECTED_MESSAGE = "Gerçek zamanlı bağlantı kuruldu"
DEFAULT_INTERVAL_SECONDS = 30.0

# Displayed user count is cosmetic: a per-connection base plus a small jitter.
BASE_USERS_RANGE = (20, 49)
USERS_JITTER_MAX = 4


def connected_frame() -> dict[str, object]:
    return {"type": "connected", "message": CONNECTED_MESSAGE}


def heartbeat_frame(counter: int, base_users: int, rng: random.Random) -> dict[str, object]:
    return {
        "type": "heartbeat",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "activeUsers": base_users + rng.randint(0, USERS_JITTER_MAX),
        "counter": counter,
    }


def format_sse(payload: dict[str, object]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def heartbeat_stream(
    interval: float = DEFAULT_INTERVAL_SECONDS,
    *,
    rng: random.Random | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    max_frames: int | None = None,
) -> AsyncIterator[str]:
    """Yield SSE-formatted frames for one client connection.

    The first heartbeat follows the connected frame immediately; later ones
    are spaced by *interval*. The stream runs until the consumer stops
    iterating or, when given, *max_frames* heartbeats have been sent.
    """

    if interval <= 0:
        raise ValueError("interval must be > 0")

    rng = rng or random.Random()
    base_users = rng.randint(*BASE_USERS_RANGE)

    yield format_sse(connected_frame())

    counter = 0
    while max_frames is None or counter < max_frames:
        if counter:
            await sleep(interval)
        yield format_sse(heartbeat_frame(counter, base_users, rng))
        counter += 1
