"""Display formatting - Pure functions.

This module formats events, distances and search results for display
and log lines. All functions are pure with no side effects.
"""

from datetime import datetime, timezone

from src.core.event import Event


def format_distance(distance_km: float) -> str:
    """Format a distance for display.

    Pure function.

    Under 1 km shows meters, under 10 km one decimal, otherwise whole km.
    """
    if distance_km < 1:
        return f"{round(distance_km * 1000)}m"
    elif distance_km < 10:
        return f"{distance_km:.1f}km"
    else:
        return f"{round(distance_km)}km"


def format_event_date(date: datetime) -> str:
    """Format an event date, e.g. 'March 1, 2025 at 06:30 PM'.

    Pure function.
    """
    return f"{date.strftime('%B')} {date.day}, {date.year} at {date.strftime('%I:%M %p')}"


def truncate_text(text: str, max_length: int) -> str:
    """Truncate text to max_length characters, adding '...' if cut."""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def format_participants(event: Event) -> str:
    """Format participant count as 'current/max'."""
    return f"{event.current_participants}/{event.max_participants}"


def is_event_in_past(event: Event, now: datetime | None = None) -> bool:
    """Check if an event's date is before now.

    Pure function (given `now`).
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return event.date < now


def format_event_summary(event: Event) -> str:
    """Format a one-line summary of an event.

    Pure function.

    Args:
        event: Event to summarize

    Returns:
        One-line summary string
    """
    summary = (
        f"{event.title} - {event.location} on {format_event_date(event.date)} "
        f"({format_participants(event)} participants)"
    )
    if event.distance is not None:
        summary += f" [{format_distance(event.distance)} away]"
    return summary


def format_search_summary(fetched: int, geocoded: int, returned: int) -> str:
    """Human-readable summary of one search run."""
    return (
        f"Fetched {fetched} events, "
        f"{geocoded} geocoded, "
        f"{returned} returned"
    )
