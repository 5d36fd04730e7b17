"""Record parsing for the Kandilli bulletin table."""

from __future__ import annotations

import enum
import logging
from typing import Iterator

from .models import EarthquakeRecord, LineSkip

logger = logging.getLogger(__name__)

# Column titles on the header row: date, time, latitude, longitude.
HEADER_TOKENS: tuple[str, ...] = ("Tarih", "Saat", "Enlem", "Boylam")

# Separator rows and blank padding are shorter than this.
MIN_DATA_LINE_LENGTH = 11


class ParserState(enum.Enum):
    BEFORE_HEADER = "before_header"
    IN_DATA = "in_data"


def is_header_line(line: str) -> bool:
    return all(token in line for token in HEADER_TOKENS)


def iter_data_lines(text: str) -> Iterator[str]:
    """Yield the stripped table lines of the bulletin *text*.

    Lines before the header row are never considered, even if they look like
    data. Short lines inside the table are padding and are dropped.
    """

    state = ParserState.BEFORE_HEADER
    for raw_line in text.splitlines():
        line = raw_line.strip()

        if state is ParserState.BEFORE_HEADER:
            if is_header_line(line):
                state = ParserState.IN_DATA
            continue

        if len(line) < MIN_DATA_LINE_LENGTH:
            continue

        yield line


def parse_line(line: str) -> EarthquakeRecord | LineSkip:
    return EarthquakeRecord.from_tokens(line.split(), line=line)


def iter_parsed_lines(text: str) -> Iterator[EarthquakeRecord | LineSkip]:
    for line in iter_data_lines(text):
        yield parse_line(line)


def parse_bulletin(text: str) -> list[EarthquakeRecord]:
    """Parse bulletin *text* into records, preserving the published order."""

    records: list[EarthquakeRecord] = []
    skipped = 0
    for line in iter_data_lines(text):
        try:
            result = parse_line(line)
        except Exception as exc:  # pragma: no cover - one bad line never aborts the batch
            logger.warning("Failed to parse bulletin line %r: %s", line, exc)
            skipped += 1
            continue

        if isinstance(result, LineSkip):
            skipped += 1
            logger.debug("Skipping bulletin line (%s): %r", result.reason, result.line)
            continue
        records.append(result)

    logger.debug("Parsed %d records, skipped %d lines", len(records), skipped)
    return records
