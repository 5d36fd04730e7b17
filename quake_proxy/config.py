"""Environment-driven settings for the proxy and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .bulletin import BULLETIN_ENCODING
from .cache import DEFAULT_TTL_SECONDS
from .fetcher import DEFAULT_USER_AGENT, KANDILLI_URL
from .heartbeat import DEFAULT_INTERVAL_SECONDS


def _env_str(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip()
    return value or default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    return items or default


@dataclass(frozen=True, slots=True)
class Settings:
    feed_url: str = KANDILLI_URL
    feed_encoding: str = BULLETIN_ENCODING
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS
    heartbeat_interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    connect_timeout: float = 10.0
    read_timeout: float = 20.0
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from ``QUAKE_*`` environment variables."""

    return Settings(
        feed_url=_env_str("QUAKE_FEED_URL", KANDILLI_URL),
        feed_encoding=_env_str("QUAKE_FEED_ENCODING", BULLETIN_ENCODING),
        cache_ttl_seconds=_env_float("QUAKE_CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS),
        heartbeat_interval_seconds=_env_float(
            "QUAKE_HEARTBEAT_INTERVAL_SECONDS", DEFAULT_INTERVAL_SECONDS
        ),
        user_agent=_env_str("QUAKE_USER_AGENT", DEFAULT_USER_AGENT),
        connect_timeout=_env_float("QUAKE_CONNECT_TIMEOUT", 10.0),
        read_timeout=_env_float("QUAKE_READ_TIMEOUT", 20.0),
        cors_origins=_env_list("QUAKE_CORS_ORIGINS", ("*",)),
        log_level=_env_str("QUAKE_LOG_LEVEL", "INFO").upper(),
    )
