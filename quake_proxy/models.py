"""Data models used across the Kandilli quake proxy."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

MIN_TOKENS = 9
LABEL_START = 8
# Solution quality column: "İlksel" (preliminary) or "REVIZE01", "REVIZE02", ... (revised).
PRELIMINARY_MARKER = "İlksel"
REVISED_MARKER_PREFIX = "REVIZE"


def _parse_float(value: str) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True, slots=True)
class LineSkip:
    """Describes a bulletin data line that did not produce a record."""

    line: str
    reason: str


@dataclass(frozen=True, slots=True)
class EarthquakeRecord:
    """One seismic event as published in the bulletin."""

    id: str
    occurred_at: str
    label: str
    magnitude: float
    depth_km: float
    latitude: float
    longitude: float

    @classmethod
    def from_tokens(cls, tokens: Sequence[str], *, line: str = "") -> EarthquakeRecord | LineSkip:
        """Build a record from whitespace-split bulletin tokens.

        Latitude, longitude and magnitude are required; a depth that does not
        parse is recorded as 0.
        """

        source = line or " ".join(tokens)
        if len(tokens) < MIN_TOKENS:
            return LineSkip(source, "too_few_tokens")

        date_token, time_token = tokens[0], tokens[1]
        latitude = _parse_float(tokens[2])
        if latitude is None:
            return LineSkip(source, "invalid_latitude")
        longitude = _parse_float(tokens[3])
        if longitude is None:
            return LineSkip(source, "invalid_longitude")
        magnitude = _parse_float(tokens[6])
        if magnitude is None:
            return LineSkip(source, "invalid_magnitude")
        depth = _parse_float(tokens[4])

        return cls(
            id=make_record_id(date_token, time_token),
            occurred_at=f"{date_token.replace('.', '-')}T{time_token}",
            label=_collect_label(tokens[LABEL_START:]),
            magnitude=magnitude,
            depth_km=depth if depth is not None else 0.0,
            latitude=latitude,
            longitude=longitude,
        )

    def to_dict(self) -> dict[str, object]:
        """Return the JSON shape served by ``/api/proxy``."""

        return {
            "id": self.id,
            "date": self.occurred_at,
            "title": self.label,
            "mag": self.magnitude,
            "depth": self.depth_km,
            "lat": self.latitude,
            "lng": self.longitude,
        }


def make_record_id(date_token: str, time_token: str) -> str:
    return f"eq_{date_token.replace('.', '')}_{time_token.replace(':', '')}"


def is_quality_marker(token: str) -> bool:
    return token == PRELIMINARY_MARKER or token.startswith(REVISED_MARKER_PREFIX)


def _collect_label(words: Sequence[str]) -> str:
    collected: list[str] = []
    for word in words:
        if is_quality_marker(word):
            break
        collected.append(word)
    return " ".join(collected).strip()


@dataclass(frozen=True, slots=True)
class CacheSnapshot:
    """Most recently parsed record set and the time it was captured."""

    records: tuple[EarthquakeRecord, ...] = ()
    captured_at: float = 0.0


@dataclass(frozen=True, slots=True)
class FeedResult:
    """Records returned to a caller together with their provenance tag."""

    records: tuple[EarthquakeRecord, ...]
    source: str

    def to_payload(self) -> dict[str, object]:
        return {
            "success": True,
            "count": len(self.records),
            "earthquakes": [record.to_dict() for record in self.records],
            "source": self.source,
        }
