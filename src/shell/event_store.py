"""Event Store - Imperative Shell.

This module persists events as documents in Google Cloud Firestore.
All I/O is contained here; payload validation is in the core module.

Document structure (collection `events`, document ID = 24 hex chars):
{
    "title": str,
    "description": str,
    "location": str,
    "date": <timestamp>,
    "maxParticipants": int,
    "currentParticipants": int,
    "createdAt": <timestamp>,
    "updatedAt": <timestamp>
}
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from google.cloud import firestore

from src.core.event import parse_timestamp


logger = logging.getLogger(__name__)


# Default collection name for event documents
DEFAULT_COLLECTION = "events"


def new_event_id() -> str:
    """Generate a 24-character hexadecimal event ID."""
    return secrets.token_hex(12)


@dataclass
class EventStoreConfig:
    """Configuration for the event store.

    Attributes:
        project_id: GCP project ID (None for default)
        database: Firestore database name (None for default database)
        collection: Firestore collection name
    """
    project_id: str | None = None
    database: str | None = None
    collection: str = DEFAULT_COLLECTION


def _to_record(doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Convert a stored document to a JSON-ready event record."""
    record: dict[str, Any] = {"_id": doc_id}
    for key, value in data.items():
        record[key] = value.isoformat() if isinstance(value, datetime) else value
    return record


class FirestoreEventStore:
    """Document store for events backed by Firestore.

    This is part of the imperative shell - it handles database I/O.
    Errors from Firestore propagate to the caller.
    """

    def __init__(self, config: EventStoreConfig | None = None) -> None:
        """Initialize event store.

        Args:
            config: Store configuration
        """
        self.config = config or EventStoreConfig()
        self._client: firestore.Client | None = None

    @property
    def client(self) -> firestore.Client:
        """Lazy initialization of Firestore client."""
        if self._client is None:
            kwargs = {}
            if self.config.project_id:
                kwargs["project"] = self.config.project_id
            if self.config.database:
                kwargs["database"] = self.config.database
            self._client = firestore.Client(**kwargs)
        return self._client

    def _collection(self) -> Any:
        return self.client.collection(self.config.collection)

    def create_event(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Store a new event.

        This method performs database I/O. The payload is expected to have
        passed validate_event_payload.

        Args:
            payload: Create-event payload (camelCase keys)

        Returns:
            The stored event record, including `_id` and timestamps

        Raises:
            ValueError: If current participants exceed the maximum
        """
        max_participants = int(payload["maxParticipants"])
        current_participants = int(payload.get("currentParticipants") or 0)
        if current_participants > max_participants:
            raise ValueError("Current participants cannot exceed maximum participants")

        now = datetime.now(timezone.utc)
        data = {
            "title": str(payload["title"]).strip(),
            "description": str(payload["description"]).strip(),
            "location": str(payload["location"]).strip(),
            "date": parse_timestamp(payload["date"]),
            "maxParticipants": max_participants,
            "currentParticipants": current_participants,
            "createdAt": now,
            "updatedAt": now,
        }

        event_id = new_event_id()
        logger.info("Creating event %s: %s", event_id, data["title"])

        self._collection().document(event_id).set(data)

        return _to_record(event_id, data)

    def list_events(self, location: str | None = None) -> list[dict[str, Any]]:
        """List events, optionally filtered by location.

        This method performs database I/O. The location filter is a
        case-insensitive substring match. Results are sorted by date ascending.

        Args:
            location: Location substring to match

        Returns:
            Event records
        """
        docs = self._collection().order_by("date").stream()

        needle = location.strip().lower() if location else ""
        records = []
        for doc in docs:
            data = doc.to_dict() or {}
            if needle and needle not in str(data.get("location", "")).lower():
                continue
            records.append(_to_record(doc.id, data))

        logger.info("Listed %d events (location=%r)", len(records), location)
        return records

    def get_event(self, event_id: str) -> dict[str, Any] | None:
        """Fetch a single event.

        This method performs database I/O.

        Returns:
            The event record, or None if it doesn't exist
        """
        doc = self._collection().document(event_id).get()

        if not doc.exists:
            logger.info("Event %s not found", event_id)
            return None

        return _to_record(doc.id, doc.to_dict() or {})
