"""Input validation - Pure functions.

Validates event payloads, event IDs, search parameters and coordinates.
Validators return a list of ValidationError rather than raising, so the
caller decides how to surface them.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from src.core.event import parse_timestamp
from src.core.search import DateRange, SearchFilters, SortKey, SortOrder


EVENT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

REQUIRED_EVENT_FIELDS = ("title", "description", "location", "date", "maxParticipants")


@dataclass
class ValidationError:
    """A validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating a set of inputs.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def is_valid_event_id(event_id: str) -> bool:
    """Check that an event ID is a 24-character hexadecimal string."""
    return bool(EVENT_ID_PATTERN.match(event_id))


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def validate_event_payload(data: Mapping[str, Any]) -> list[ValidationError]:
    """Validate a create-event payload.

    Pure function. Stops at the first failing rule, like the backend does,
    so at most one error is returned.

    Args:
        data: Create-event payload (camelCase keys)

    Returns:
        List of validation errors (empty if valid)
    """
    missing = [name for name in REQUIRED_EVENT_FIELDS if not data.get(name)]
    if missing:
        return [ValidationError(
            field=missing[0],
            message=(
                "All fields (title, description, location, date, maxParticipants) "
                "are required"
            ),
        )]

    if parse_timestamp(data["date"]) is None:
        return [ValidationError(field="date", message="Invalid date format")]

    max_participants = _as_int(data["maxParticipants"])
    if max_participants is None or max_participants < 1:
        return [ValidationError(
            field="maxParticipants",
            message="Maximum participants must be at least 1",
        )]

    current = data.get("currentParticipants")
    if current is not None:
        current_participants = _as_int(current)
        if current_participants is None or not 0 <= current_participants <= max_participants:
            return [ValidationError(
                field="currentParticipants",
                message="Current participants must be between 0 and maximum participants",
            )]

    return []


def validate_event_form(
    data: Mapping[str, str],
    now: datetime | None = None,
) -> dict[str, str]:
    """Validate a create-event form as entered by a user.

    Pure function (given `now`). Stricter than validate_event_payload:
    minimum lengths and a future date are required.

    Args:
        data: Form values as strings
        now: Reference time for the future-date check

    Returns:
        Mapping of field name to error message (empty if valid)
    """
    if now is None:
        now = datetime.now(timezone.utc)

    errors: dict[str, str] = {}

    title = (data.get("title") or "").strip()
    if not title:
        errors["title"] = "Title is required"
    elif len(title) < 3:
        errors["title"] = "Title must be at least 3 characters"

    description = (data.get("description") or "").strip()
    if not description:
        errors["description"] = "Description is required"
    elif len(description) < 10:
        errors["description"] = "Description must be at least 10 characters"

    if not (data.get("location") or "").strip():
        errors["location"] = "Location is required"

    date_text = data.get("date") or ""
    if not date_text:
        errors["date"] = "Date is required"
    else:
        date = parse_timestamp(date_text)
        if date is None or date <= now:
            errors["date"] = "Date must be in the future"

    max_participants = _as_int(data.get("maxParticipants"))
    if max_participants is None or max_participants < 1:
        errors["maxParticipants"] = "Maximum participants must be at least 1"

    current_text = data.get("currentParticipants") or ""
    if current_text:
        current_participants = _as_int(current_text)
        if current_participants is None or current_participants < 0:
            errors["currentParticipants"] = "Current participants must be 0 or greater"
        elif max_participants is not None and current_participants > max_participants:
            errors["currentParticipants"] = (
                "Current participants cannot exceed maximum participants"
            )

    return errors


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


def validate_search_params(params: Mapping[str, str]) -> list[ValidationError]:
    """Validate raw search query parameters.

    Pure function.

    Args:
        params: Query parameters (dateRange, sortBy, sortOrder, maxDistance, lat, lng)

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    for name, enum_cls in (
        ("dateRange", DateRange),
        ("sortBy", SortKey),
        ("sortOrder", SortOrder),
    ):
        value = params.get(name)
        if value and value not in _enum_values(enum_cls):
            errors.append(ValidationError(
                field=name,
                message=f"Must be one of {', '.join(_enum_values(enum_cls))}, got '{value}'",
            ))

    max_distance = params.get("maxDistance")
    if max_distance:
        try:
            if float(max_distance) < 0:
                errors.append(ValidationError(
                    field="maxDistance",
                    message="Maximum distance must not be negative",
                ))
        except ValueError:
            errors.append(ValidationError(
                field="maxDistance",
                message=f"Maximum distance must be a number, got '{max_distance}'",
            ))

    lat, lng = params.get("lat"), params.get("lng")
    if bool(lat) != bool(lng):
        errors.append(ValidationError(
            field="lat" if not lat else "lng",
            message="Both lat and lng are required for a user location",
        ))
    elif lat and lng:
        try:
            errors.extend(validate_coordinates(float(lat), float(lng), "lat/lng"))
        except ValueError:
            errors.append(ValidationError(
                field="lat/lng",
                message="Latitude and longitude must be numbers",
            ))

    return errors


def search_filters_from_params(
    params: Mapping[str, str],
    defaults: SearchFilters | None = None,
) -> SearchFilters:
    """Build SearchFilters from validated query parameters.

    Pure function. Missing parameters fall back to `defaults`.
    """
    defaults = defaults or SearchFilters()

    max_distance = params.get("maxDistance")

    return SearchFilters(
        location=(params.get("location") or "").strip(),
        date_range=DateRange(params.get("dateRange") or defaults.date_range),
        max_distance=float(max_distance) if max_distance else defaults.max_distance,
        sort_by=SortKey(params.get("sortBy") or defaults.sort_by),
        sort_order=SortOrder(params.get("sortOrder") or defaults.sort_order),
    )
