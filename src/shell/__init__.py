"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Events API client (HTTP)
- Geocoding client (HTTP)
- Device location provider (platform geolocation)
- Event store (Firestore)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.events_client import EventsApiClient, EventsApiError
from src.shell.geocoding_client import NominatimGeocoder, create_location_resolver
from src.shell.device_location import DeviceLocationResolver, PositionProvider
from src.shell.event_store import FirestoreEventStore
from src.shell.config_loader import load_config, Config

__all__ = [
    "EventsApiClient",
    "EventsApiError",
    "NominatimGeocoder",
    "create_location_resolver",
    "DeviceLocationResolver",
    "PositionProvider",
    "FirestoreEventStore",
    "load_config",
    "Config",
]
