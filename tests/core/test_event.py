"""Unit tests for event parsing."""

from datetime import datetime, timezone

import pytest

from src.core.event import (
    Event,
    event_to_dict,
    parse_event,
    parse_events,
    parse_timestamp,
)
from src.core.geo import Coordinate


@pytest.fixture
def sample_record():
    """A record as returned by the events API."""
    return {
        "_id": "65a1b2c3d4e5f6a7b8c9d0e1",
        "title": "Tech Meetup",
        "description": "Monthly meetup for local developers",
        "location": "San Francisco",
        "date": "2025-03-01T18:30:00.000Z",
        "maxParticipants": 50,
        "currentParticipants": 12,
        "createdAt": "2025-01-15T10:00:00.000Z",
        "updatedAt": "2025-01-16T10:00:00.000Z",
    }


class TestParseTimestamp:
    """Tests for parse_timestamp()."""

    def test_parses_z_suffix(self):
        """Trailing Z is read as UTC."""
        result = parse_timestamp("2025-03-01T18:30:00.000Z")
        assert result == datetime(2025, 3, 1, 18, 30, tzinfo=timezone.utc)

    def test_naive_string_assumed_utc(self):
        """Strings without offset are assumed UTC."""
        result = parse_timestamp("2025-03-01T18:30")
        assert result.tzinfo is not None
        assert result.utcoffset().total_seconds() == 0

    def test_datetime_passthrough(self):
        """Aware datetimes pass through."""
        dt = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert parse_timestamp(dt) == dt

    @pytest.mark.parametrize("value", [None, "", "not a date", 12345])
    def test_invalid_returns_none(self, value):
        """Unparseable values return None."""
        assert parse_timestamp(value) is None


class TestParseEvent:
    """Tests for parse_event()."""

    def test_parses_valid_record(self, sample_record):
        """Valid record parses into an Event."""
        event = parse_event(sample_record)

        assert event is not None
        assert event.id == "65a1b2c3d4e5f6a7b8c9d0e1"
        assert event.title == "Tech Meetup"
        assert event.location == "San Francisco"
        assert event.date == datetime(2025, 3, 1, 18, 30, tzinfo=timezone.utc)
        assert event.max_participants == 50
        assert event.current_participants == 12
        assert event.created_at == datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert event.coordinates is None
        assert event.distance is None

    def test_accepts_id_key(self, sample_record):
        """`id` is accepted in place of `_id`."""
        del sample_record["_id"]
        sample_record["id"] = "abc"

        assert parse_event(sample_record).id == "abc"

    def test_missing_id_returns_none(self, sample_record):
        del sample_record["_id"]
        assert parse_event(sample_record) is None

    def test_invalid_date_returns_none(self, sample_record):
        sample_record["date"] = "tomorrow-ish"
        assert parse_event(sample_record) is None

    def test_missing_max_participants_returns_none(self, sample_record):
        del sample_record["maxParticipants"]
        assert parse_event(sample_record) is None

    def test_non_numeric_participants_returns_none(self, sample_record):
        sample_record["maxParticipants"] = "lots"
        assert parse_event(sample_record) is None

    def test_current_participants_defaults_to_zero(self, sample_record):
        del sample_record["currentParticipants"]
        assert parse_event(sample_record).current_participants == 0

    def test_parses_coordinates_and_distance(self, sample_record):
        """Optional coordinates and distance are read when present."""
        sample_record["coordinates"] = {"lat": 37.7749, "lng": -122.4194}
        sample_record["distance"] = 4.2

        event = parse_event(sample_record)

        assert event.coordinates == Coordinate(37.7749, -122.4194)
        assert event.distance == 4.2

    def test_invalid_coordinates_ignored(self, sample_record):
        """Out-of-range coordinates are dropped, not fatal."""
        sample_record["coordinates"] = {"lat": 120, "lng": 0}

        event = parse_event(sample_record)

        assert event is not None
        assert event.coordinates is None


class TestParseEvents:
    """Tests for parse_events()."""

    def test_drops_invalid_records_and_keeps_order(self, sample_record):
        second = dict(sample_record, _id="second")
        invalid = {"title": "no id"}

        events = parse_events([sample_record, invalid, second])

        assert [e.id for e in events] == ["65a1b2c3d4e5f6a7b8c9d0e1", "second"]

    def test_empty_list(self):
        assert parse_events([]) == []


class TestEventProperties:
    """Tests for Event convenience properties."""

    def test_spots_remaining(self, sample_record):
        event = parse_event(sample_record)
        assert event.spots_remaining == 38
        assert event.is_full is False

    def test_full_event(self):
        event = Event(
            id="x",
            title="Full",
            description="",
            location="Paris",
            date=datetime(2025, 1, 1, tzinfo=timezone.utc),
            max_participants=5,
            current_participants=5,
        )
        assert event.spots_remaining == 0
        assert event.is_full is True


class TestEventToDict:
    """Tests for event_to_dict()."""

    def test_round_trips_wire_keys(self, sample_record):
        """Serialized form uses camelCase keys and ISO dates."""
        data = event_to_dict(parse_event(sample_record))

        assert data["_id"] == sample_record["_id"]
        assert data["maxParticipants"] == 50
        assert data["currentParticipants"] == 12
        assert data["date"] == "2025-03-01T18:30:00+00:00"
        assert "coordinates" not in data
        assert "distance" not in data

    def test_includes_coordinates_and_distance(self, sample_record):
        sample_record["coordinates"] = {"lat": 1.0, "lng": 2.0}
        sample_record["distance"] = 3.5

        data = event_to_dict(parse_event(sample_record))

        assert data["coordinates"] == {"lat": 1.0, "lng": 2.0}
        assert data["distance"] == 3.5
