"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Event data parsing
- Geo/distance calculations
- Location name lookup and device location error classification
- Date-range/distance filtering and sorting
- Input validation
- Display formatting

All functions here are deterministic and have no I/O.
"""

from src.core.event import Event, parse_event, parse_events, event_to_dict
from src.core.geo import Coordinate, calculate_distance, distance_between
from src.core.location import (
    LocationError,
    LocationErrorKind,
    StaticLocationResolver,
    UserLocation,
)
from src.core.search import (
    DateRange,
    SearchFilters,
    SortKey,
    SortOrder,
    annotate_distances,
    filter_and_sort_events,
)
from src.core.validation import validate_event_payload, is_valid_event_id
from src.core.formatter import format_distance, format_event_summary

__all__ = [
    # Event
    "Event",
    "parse_event",
    "parse_events",
    "event_to_dict",
    # Geo
    "Coordinate",
    "calculate_distance",
    "distance_between",
    # Location
    "LocationError",
    "LocationErrorKind",
    "StaticLocationResolver",
    "UserLocation",
    # Search
    "DateRange",
    "SearchFilters",
    "SortKey",
    "SortOrder",
    "annotate_distances",
    "filter_and_sort_events",
    # Validation
    "validate_event_payload",
    "is_valid_event_id",
    # Formatter
    "format_distance",
    "format_event_summary",
]
