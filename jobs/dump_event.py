"""Download a single event-overview page and print its summary."""
from __future__ import annotations

import argparse
import json
import logging
import os
from datetime import datetime, tzinfo
from typing import List, Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

from ingest.download import NetworkError, PageParseError, download_event
from ingest.schemas import Event
from scrapers.datumprikker_page import NonExistingEvent

load_dotenv()

logger = logging.getLogger(__name__)
if os.getenv("SCRAPER_DEBUG"):
    logging.basicConfig(level=logging.INFO, format="%(message)s")

EXIT_OK = 0
EXIT_NON_EXISTING = 2
EXIT_UNEXPECTED_PAGE = 3
EXIT_NETWORK = 4


def _display_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Return the zone to render dates in; ``None`` means system local time."""
    name = name or os.getenv("DISPLAY_TIMEZONE")
    return ZoneInfo(name) if name else None


def _localize(value: datetime, zone: Optional[tzinfo]) -> datetime:
    return value.astimezone(zone)


def format_event(event: Event, zone: Optional[tzinfo] = None) -> str:
    """Render ``event`` as the lines printed by the command."""
    lines = [
        f"event url: {event.canonical_url}",
        f"title: {event.title}",
    ]
    if event.final_date:
        lines.append(f"start: {_localize(event.final_date.start, zone)}")
        lines.append(f"end: {_localize(event.final_date.end, zone)}")
    else:
        lines.append("no final date selected")
    if event.open_registration_link:
        lines.append(f"registration link: {event.open_registration_link}")
    return "\n".join(lines)


def run(url: str, zone: Optional[tzinfo] = None, as_json: bool = False) -> int:
    """Download ``url`` and print it. Returns the process exit code."""
    try:
        event = download_event(url)
    except NetworkError as exc:
        print("❌ Failed to fetch page:", exc)
        return EXIT_NETWORK
    except PageParseError as exc:
        if isinstance(exc.reason, NonExistingEvent):
            print("No event exists at", url)
            return EXIT_NON_EXISTING
        print("❌ Failed to parse page:", exc.reason)
        return EXIT_UNEXPECTED_PAGE

    if as_json:
        print(json.dumps(event.to_dict(), indent=2))
    else:
        print(format_event(event, zone))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Show the summary of a datumprikker event")
    parser.add_argument("url", help="event overview url")
    parser.add_argument(
        "--timezone",
        help="IANA timezone used for dates (default: $DISPLAY_TIMEZONE or local time)",
    )
    parser.add_argument("--json", action="store_true", help="print the event as JSON")
    args = parser.parse_args(argv)

    try:
        zone = _display_timezone(args.timezone)
    except (KeyError, ValueError) as exc:
        parser.error(f"unknown timezone: {exc}")

    logger.info("Downloading %s", args.url)
    try:
        return run(args.url, zone=zone, as_json=args.json)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    raise SystemExit(main())
