"""Event search pipeline - Pure functions.

This module annotates events with distances from the user and applies
date-range filtering, distance filtering and sorting.
All functions are pure with no side effects; input lists are never mutated.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from functools import cmp_to_key

from src.core.event import Event
from src.core.geo import Coordinate, distance_between
from src.core.location import LocationResolver, UserLocation


class DateRange(str, Enum):
    """Named time-relative filter buckets."""
    ALL = "all"
    UPCOMING = "upcoming"
    TODAY = "today"
    THIS_WEEK = "this-week"
    THIS_MONTH = "this-month"


class SortKey(str, Enum):
    DATE = "date"
    DISTANCE = "distance"
    PARTICIPANTS = "participants"
    CREATED = "created"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SearchFilters:
    """Criteria for one search.

    Attributes:
        location: Free-text location (applied upstream by the events API)
        date_range: Date bucket to keep
        max_distance: Maximum distance from origin in km (None or 0 disables)
        sort_by: Sort key
        sort_order: Sort direction
    """
    location: str = ""
    date_range: DateRange = DateRange.ALL
    max_distance: float | None = None
    sort_by: SortKey = SortKey.DATE
    sort_order: SortOrder = SortOrder.ASC


def attach_coordinates(events: list[Event], resolver: LocationResolver) -> list[Event]:
    """Resolve each event's location text and attach coordinates.

    Pure with respect to its inputs (the resolver may do I/O).
    Events that already carry coordinates, or whose location doesn't
    resolve, are returned unchanged.
    """
    result = []
    for event in events:
        if event.coordinates is None:
            coordinates = resolver.resolve(event.location)
            if coordinates is not None:
                event = replace(event, coordinates=coordinates)
        result.append(event)
    return result


def annotate_distances(events: list[Event], origin: UserLocation) -> list[Event]:
    """Decorate events that have coordinates with their distance from origin.

    Pure function. Same length and order as the input.
    """
    return [
        replace(event, distance=distance_between(origin.coordinate, event.coordinates))
        if event.coordinates is not None
        else event
        for event in events
    ]


def _localize(wall_clock: datetime, tz: tzinfo | None) -> datetime:
    """Attach a timezone to a naive wall-clock time.

    With no timezone the system's local rules apply, including DST.
    """
    if tz is None:
        return wall_clock.astimezone()
    return wall_clock.replace(tzinfo=tz)


def _boundary_zone(now: datetime) -> tzinfo | None:
    """Zone in which to build boundaries; None means system local time.

    A fixed offset equal to the local offset at `now` is what
    `datetime.astimezone()` returns, so it is read as local time and
    boundaries follow the local DST rules instead of that offset.
    """
    tz = now.tzinfo
    if tz is None:
        return None
    if isinstance(tz, timezone) and now.utcoffset() == now.astimezone().utcoffset():
        return None
    return tz


def date_range_window(
    date_range: DateRange,
    now: datetime,
) -> tuple[datetime, datetime | None] | None:
    """Compute the [start, end) window for a date bucket.

    Pure function. Boundaries are local midnights in the timezone of `now`,
    or in system local time when `now` is naive or carries the local fixed
    offset. Day arithmetic is done on wall-clock values, so a DST change
    inside the window doesn't shift the boundaries.

    Returns:
        (start, end) where end may be None for open-ended, or None for no filtering
    """
    tz = _boundary_zone(now)

    if date_range == DateRange.UPCOMING:
        return _localize(now.replace(tzinfo=None), tz), None

    today = now.replace(tzinfo=None, hour=0, minute=0, second=0, microsecond=0)

    if date_range == DateRange.TODAY:
        start, end = today, today + timedelta(days=1)

    elif date_range == DateRange.THIS_WEEK:
        # weekday(): Monday=0 .. Sunday=6
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        end = start + timedelta(days=7)

    elif date_range == DateRange.THIS_MONTH:
        start = today.replace(day=1)
        if start.month == 12:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)

    else:
        return None

    return _localize(start, tz), _localize(end, tz)


def filter_by_date_range(
    events: list[Event],
    date_range: DateRange,
    now: datetime,
) -> list[Event]:
    """Keep events that fall in the date bucket.

    Pure function.
    """
    window = date_range_window(date_range, now)
    if window is None:
        return list(events)

    start, end = window
    return [
        e for e in events
        if e.date >= start and (end is None or e.date < end)
    ]


def filter_by_distance(
    events: list[Event],
    origin: Coordinate,
    max_distance_km: float,
) -> list[Event]:
    """Keep events within max_distance_km of origin.

    Pure function. Events without coordinates are always kept.
    """
    return [
        e for e in events
        if e.coordinates is None
        or distance_between(origin, e.coordinates) <= max_distance_km
    ]


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_distance_presence(a: Event, b: Event) -> int | None:
    """Order events when at least one lacks a distance.

    Events without a distance sort after those with one, whatever the
    sort direction. Returns None when both have a distance.
    """
    if a.distance is not None and b.distance is not None:
        return None
    if a.distance is not None:
        return -1
    if b.distance is not None:
        return 1
    return 0


def compare_created_presence(a: Event, b: Event) -> int | None:
    """Order events when at least one lacks a creation time.

    Events without `created_at` sort after those with one, whatever the
    sort direction. Returns None when both have one.
    """
    if a.created_at is not None and b.created_at is not None:
        return None
    if a.created_at is not None:
        return -1
    if b.created_at is not None:
        return 1
    return 0


def compare_events(a: Event, b: Event, sort_by: SortKey, sort_order: SortOrder) -> int:
    """Three-way comparison of two events for the given key and order.

    Pure function.
    """
    if sort_by == SortKey.DISTANCE:
        presence = compare_distance_presence(a, b)
        if presence is not None:
            return presence
        comparison = _sign(a.distance - b.distance)
    elif sort_by == SortKey.DATE:
        comparison = _sign((a.date - b.date).total_seconds())
    elif sort_by == SortKey.PARTICIPANTS:
        comparison = _sign(a.current_participants - b.current_participants)
    elif sort_by == SortKey.CREATED:
        presence = compare_created_presence(a, b)
        if presence is not None:
            return presence
        comparison = _sign((a.created_at - b.created_at).total_seconds())
    else:
        comparison = 0

    return -comparison if sort_order == SortOrder.DESC else comparison


def sort_events(events: list[Event], sort_by: SortKey, sort_order: SortOrder) -> list[Event]:
    """Stable sort of events by key and order.

    Pure function. Returns a new list.
    """
    return sorted(
        events,
        key=cmp_to_key(lambda a, b: compare_events(a, b, sort_by, sort_order)),
    )


def filter_and_sort_events(
    events: list[Event],
    filters: SearchFilters,
    origin: UserLocation | None = None,
    now: datetime | None = None,
) -> list[Event]:
    """Apply date, distance and sort criteria to a list of events.

    Pure function (given `now`). Filters are assumed to be validated by
    the caller.

    Args:
        events: Events to search (not mutated)
        filters: Search criteria
        origin: User's location, required for distance filtering
        now: Reference time for date buckets (defaults to local now; naive
            values are read as system local time)

    Returns:
        New list of matching events in sorted order
    """
    if now is None:
        now = datetime.now()

    result = filter_by_date_range(events, filters.date_range, now)

    if origin is not None and filters.max_distance and filters.max_distance > 0:
        result = filter_by_distance(result, origin.coordinate, filters.max_distance)

    return sort_events(result, filters.sort_by, filters.sort_order)
