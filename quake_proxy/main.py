"""CLI entry point for the Kandilli quake proxy."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .bulletin import BulletinDecodeError
from .config import load_settings
from .fetcher import BulletinFetcher, UpstreamFetchError
from .models import EarthquakeRecord, FeedResult
from .service import SOURCE_API, records_from_bytes

SOURCE_FILE = "file"


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the CLI."""

    settings = load_settings()
    args = _parse_args(argv, default_url=settings.feed_url, default_encoding=settings.feed_encoding)
    _configure_logging(args.log_level or settings.log_level)

    try:
        if args.input:
            logging.info("Reading bulletin from %s", args.input)
            records = records_from_bytes(Path(args.input).read_bytes(), encoding=args.encoding)
            source = SOURCE_FILE
        else:
            logging.info("Fetching bulletin from %s", args.url)
            records = asyncio.run(
                _fetch_records(
                    url=args.url,
                    encoding=args.encoding,
                    user_agent=settings.user_agent,
                    connect_timeout=settings.connect_timeout,
                    read_timeout=settings.read_timeout,
                )
            )
            source = SOURCE_API
    except (UpstreamFetchError, BulletinDecodeError, OSError) as exc:
        logging.error("Could not load bulletin: %s", exc)
        return 1

    if args.limit is not None and args.limit >= 0:
        records = records[: args.limit]

    payload = json.dumps(
        FeedResult(records=tuple(records), source=source).to_payload(),
        ensure_ascii=False,
        indent=2,
    )
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload + "\n", encoding="utf-8")
        logging.info("Wrote %d records to %s", len(records), output_path)
    else:
        sys.stdout.write(payload + "\n")
    return 0


async def _fetch_records(
    *,
    url: str,
    encoding: str,
    user_agent: str,
    connect_timeout: float,
    read_timeout: float,
) -> list[EarthquakeRecord]:
    async with BulletinFetcher(
        url=url,
        user_agent=user_agent,
        connect_timeout=connect_timeout,
        read_timeout=read_timeout,
    ) as fetcher:
        raw = await fetcher.fetch()
    return records_from_bytes(raw, encoding=encoding)


def _parse_args(
    argv: Sequence[str] | None,
    *,
    default_url: str,
    default_encoding: str,
) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--url", default=default_url, help="Bulletin URL to fetch")
    parser.add_argument(
        "--input",
        default=None,
        help="Parse a saved bulletin page instead of fetching one",
    )
    parser.add_argument(
        "--encoding",
        default=default_encoding,
        help="Character set of the bulletin bytes",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the JSON payload to this path instead of stdout",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Optional limit on the number of records to emit",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (e.g. INFO, DEBUG)",
    )

    return parser.parse_args(argv)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(message)s",
    )


if __name__ == "__main__":
    raise SystemExit(main())
