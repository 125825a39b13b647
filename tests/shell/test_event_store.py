"""Tests for the Firestore event store.

The Firestore client is replaced with a MagicMock.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from src.core.validation import is_valid_event_id
from src.shell.event_store import (
    EventStoreConfig,
    FirestoreEventStore,
    _to_record,
    new_event_id,
)


def make_doc(doc_id, data, exists=True):
    doc = MagicMock()
    doc.id = doc_id
    doc.exists = exists
    doc.to_dict.return_value = data
    return doc


@pytest.fixture
def store():
    store = FirestoreEventStore(EventStoreConfig(collection="events"))
    store._client = MagicMock()
    return store


@pytest.fixture
def payload():
    return {
        "title": "  Tech Meetup ",
        "description": "Monthly meetup for local developers",
        "location": "San Francisco",
        "date": "2025-03-01T18:30:00.000Z",
        "maxParticipants": 50,
    }


class TestNewEventId:
    """Tests for new_event_id()."""

    def test_is_valid_event_id(self):
        assert is_valid_event_id(new_event_id())

    def test_unique(self):
        assert new_event_id() != new_event_id()


class TestToRecord:
    """Tests for _to_record()."""

    def test_serializes_datetimes(self):
        record = _to_record("abc", {
            "title": "Meetup",
            "date": datetime(2025, 3, 1, 18, 30, tzinfo=timezone.utc),
        })

        assert record == {
            "_id": "abc",
            "title": "Meetup",
            "date": "2025-03-01T18:30:00+00:00",
        }


class TestCreateEvent:
    """Tests for FirestoreEventStore.create_event()."""

    def test_stores_document(self, store, payload):
        record = store.create_event(payload)

        store._client.collection.assert_called_with("events")
        document = store._client.collection.return_value.document
        document.assert_called_once_with(record["_id"])
        stored = document.return_value.set.call_args[0][0]

        assert stored["title"] == "Tech Meetup"
        assert stored["date"] == datetime(2025, 3, 1, 18, 30, tzinfo=timezone.utc)
        assert stored["currentParticipants"] == 0
        assert stored["createdAt"] == stored["updatedAt"]

    def test_returns_record(self, store, payload):
        record = store.create_event(payload)

        assert is_valid_event_id(record["_id"])
        assert record["date"] == "2025-03-01T18:30:00+00:00"
        assert record["maxParticipants"] == 50
        assert "createdAt" in record

    def test_rejects_current_over_max(self, store, payload):
        payload["currentParticipants"] = 51

        with pytest.raises(ValueError):
            store.create_event(payload)

        store._client.collection.return_value.document.assert_not_called()


class TestListEvents:
    """Tests for FirestoreEventStore.list_events()."""

    @pytest.fixture
    def docs(self, store):
        query = store._client.collection.return_value.order_by.return_value
        query.stream.return_value = [
            make_doc("a", {"title": "One", "location": "New York City"}),
            make_doc("b", {"title": "Two", "location": "Boston"}),
        ]
        return query

    def test_lists_all_sorted_by_date(self, store, docs):
        records = store.list_events()

        store._client.collection.return_value.order_by.assert_called_once_with("date")
        assert [r["_id"] for r in records] == ["a", "b"]

    def test_location_substring_case_insensitive(self, store, docs):
        records = store.list_events("  new york ")
        assert [r["_id"] for r in records] == ["a"]


class TestGetEvent:
    """Tests for FirestoreEventStore.get_event()."""

    def test_found(self, store):
        document = store._client.collection.return_value.document
        document.return_value.get.return_value = make_doc("a", {"title": "One"})

        assert store.get_event("a") == {"_id": "a", "title": "One"}
        document.assert_called_once_with("a")

    def test_missing_returns_none(self, store):
        document = store._client.collection.return_value.document
        document.return_value.get.return_value = make_doc("a", None, exists=False)

        assert store.get_event("a") is None


class TestClient:
    """Tests for lazy Firestore client creation."""

    def test_uses_configured_database(self):
        store = FirestoreEventStore(EventStoreConfig(project_id="proj", database="events-db"))

        with patch("src.shell.event_store.firestore") as mock_firestore:
            client = store.client

        mock_firestore.Client.assert_called_once_with(project="proj", database="events-db")
        assert client is mock_firestore.Client.return_value
