"""Event data models and parsing - Pure functions.

This module handles parsing event records from the events API (camelCase
JSON) into typed Event objects, and back again.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from src.core.geo import Coordinate


@dataclass(frozen=True)
class Event:
    """Immutable event data model.

    Attributes:
        id: Opaque event identifier
        title: Event title
        description: Event description
        location: Free-text location (usually a city name)
        date: Scheduled date/time (timezone-aware)
        max_participants: Capacity (>= 1)
        current_participants: Participants signed up (0..max_participants)
        created_at: Creation timestamp
        updated_at: Last update timestamp
        coordinates: Resolved coordinates of the location (optional)
        distance: Distance from the user's origin in km (optional)
    """
    id: str
    title: str
    description: str
    location: str
    date: datetime
    max_participants: int
    current_participants: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    coordinates: Coordinate | None = None
    distance: float | None = None

    @property
    def spots_remaining(self) -> int:
        """Number of places still open."""
        return max(self.max_participants - self.current_participants, 0)

    @property
    def is_full(self) -> bool:
        """Returns True if no places remain."""
        return self.current_participants >= self.max_participants


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or datetime into an aware datetime.

    Pure function. Naive values are assumed to be UTC.

    Returns:
        Aware datetime, or None if the value can't be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        # fromisoformat doesn't accept a trailing Z before 3.11
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_coordinates(value: Any) -> Coordinate | None:
    if not isinstance(value, dict):
        return None
    try:
        return Coordinate(lat=float(value["lat"]), lng=float(value["lng"]))
    except (KeyError, TypeError, ValueError):
        return None


def parse_event(data: dict[str, Any]) -> Event | None:
    """Parse a single event record into an Event.

    Pure function: takes raw dict, returns typed Event or None if invalid.

    Args:
        data: Event record as returned by the events API

    Returns:
        Event object or None if parsing fails
    """
    try:
        event_id = data.get("_id") or data.get("id")
        if not event_id:
            return None

        date = parse_timestamp(data.get("date"))
        if date is None:
            return None

        max_participants = data.get("maxParticipants")
        if max_participants is None:
            return None

        distance = data.get("distance")

        return Event(
            id=str(event_id),
            title=data.get("title", ""),
            description=data.get("description", ""),
            location=data.get("location", ""),
            date=date,
            max_participants=int(max_participants),
            current_participants=int(data.get("currentParticipants") or 0),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            coordinates=_parse_coordinates(data.get("coordinates")),
            distance=float(distance) if distance is not None else None,
        )
    except (AttributeError, TypeError, ValueError):
        return None


def parse_events(records: list[dict[str, Any]]) -> list[Event]:
    """Parse a list of event records, dropping invalid ones.

    Pure function. Input order is preserved.

    Args:
        records: Raw event records

    Returns:
        List of valid Event objects
    """
    events = []

    for record in records:
        event = parse_event(record)
        if event is not None:
            events.append(event)

    return events


def event_to_dict(event: Event) -> dict[str, Any]:
    """Convert an Event to its JSON-serializable wire form.

    Pure function.
    """
    data: dict[str, Any] = {
        "_id": event.id,
        "title": event.title,
        "description": event.description,
        "location": event.location,
        "date": event.date.isoformat(),
        "maxParticipants": event.max_participants,
        "currentParticipants": event.current_participants,
        "createdAt": event.created_at.isoformat() if event.created_at else None,
        "updatedAt": event.updated_at.isoformat() if event.updated_at else None,
    }

    if event.coordinates is not None:
        data["coordinates"] = event.coordinates.to_dict()

    if event.distance is not None:
        data["distance"] = event.distance

    return data
