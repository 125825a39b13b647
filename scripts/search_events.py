#!/usr/bin/env python3
"""Search events from the command line.

Runs the same search pipeline as the HTTP entry point against a running
events API and prints one line per matching event.

Usage:
    # Upcoming events, soonest first
    python scripts/search_events.py --date-range upcoming

    # Events within 50 km of a city, nearest first
    python scripts/search_events.py --near "San Francisco" --max-distance 50 --sort-by distance

    # Events within 10 km of explicit coordinates
    python scripts/search_events.py --lat 40.7128 --lng -74.0060 --max-distance 10

Environment:
    CONFIG_PATH: Path to config file (default: config/config.yaml)
    EVENTS_API_URL: Events collection URL (when no config file exists)
"""

import argparse
import logging
import os
import sys
import time

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.core.formatter import format_event_summary
from src.core.geo import Coordinate
from src.core.location import UserLocation
from src.core.search import DateRange, SearchFilters, SortKey, SortOrder
from src.search_service import EventSearchService
from src.shell.config_loader import load_config
from src.shell.events_client import EventsApiError

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search events")
    parser.add_argument("--location", default="", help="Server-side location filter")
    parser.add_argument(
        "--date-range",
        choices=[d.value for d in DateRange],
        default=None,
    )
    parser.add_argument("--max-distance", type=float, default=None, help="Kilometers")
    parser.add_argument(
        "--sort-by",
        choices=[k.value for k in SortKey],
        default=None,
    )
    parser.add_argument(
        "--sort-order",
        choices=[o.value for o in SortOrder],
        default=None,
    )
    parser.add_argument("--near", help="Use this place name as the origin")
    parser.add_argument("--lat", type=float, help="Origin latitude")
    parser.add_argument("--lng", type=float, help="Origin longitude")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    config = load_config()
    service = EventSearchService(config)
    defaults = config.search.as_filters()

    filters = SearchFilters(
        location=args.location,
        date_range=DateRange(args.date_range) if args.date_range else defaults.date_range,
        max_distance=args.max_distance if args.max_distance is not None else defaults.max_distance,
        sort_by=SortKey(args.sort_by) if args.sort_by else defaults.sort_by,
        sort_order=SortOrder(args.sort_order) if args.sort_order else defaults.sort_order,
    )

    origin = None
    if args.lat is not None and args.lng is not None:
        try:
            coordinate = Coordinate(args.lat, args.lng)
        except ValueError as e:
            logger.error("%s", e)
            return 2
        origin = UserLocation(coordinate=coordinate, timestamp=int(time.time() * 1000))
    elif args.near:
        coordinate = service.location_resolver.resolve(args.near)
        if coordinate is None:
            logger.error("Unknown place: %s", args.near)
            return 2
        origin = UserLocation(coordinate=coordinate, timestamp=int(time.time() * 1000))

    try:
        result = service.search(filters, origin)
    except EventsApiError as e:
        logger.error("Search failed (%d): %s", e.status, e.message)
        return 1

    for event in result.events:
        print(format_event_summary(event))

    print(f"\n{result.summary}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
