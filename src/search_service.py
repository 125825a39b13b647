"""Search Service - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure search
pipeline and the I/O-performing shell components: fetch events from the
events API, resolve their locations, annotate distances, then filter
and sort.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from src.core.config import Config
from src.core.event import Event, parse_events
from src.core.formatter import format_search_summary
from src.core.location import LocationError, LocationResolver, UserLocation
from src.core.search import (
    SearchFilters,
    annotate_distances,
    attach_coordinates,
    filter_and_sort_events,
)
from src.shell.device_location import DeviceLocationResolver
from src.shell.events_client import EventsApiClient
from src.shell.geocoding_client import create_location_resolver


logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Result of a single search.

    Attributes:
        events: Matching events, decorated and sorted
        fetched: Events returned by the events API
        geocoded: Events whose location resolved to coordinates
    """
    events: list[Event]
    fetched: int
    geocoded: int

    @property
    def returned(self) -> int:
        return len(self.events)

    @property
    def summary(self) -> str:
        """Human-readable summary of the search."""
        return format_search_summary(self.fetched, self.geocoded, self.returned)


class EventSearchService:
    """Runs location-aware event searches.

    This class wires together:
    - Events API client (fetches events)
    - Location resolver (place name -> coordinates)
    - Core functions (parsing, annotation, filtering, sorting)
    """

    def __init__(
        self,
        config: Config,
        events_client: EventsApiClient | None = None,
        location_resolver: LocationResolver | None = None,
    ) -> None:
        """Initialize service with configuration.

        Args:
            config: Application configuration
            events_client: Events API client (created if not provided)
            location_resolver: Place-name resolver (created from config if not provided)
        """
        self.config = config
        self.events_client = events_client or EventsApiClient(
            base_url=config.events_api.base_url,
            timeout=config.events_api.timeout_seconds,
        )
        self.location_resolver = location_resolver or create_location_resolver(
            config.geocoding
        )

    def _fetch_events(self, location: str) -> list[Event]:
        """Fetch and parse events from the events API.

        Raises:
            EventsApiError: If the events API request fails
        """
        records = self.events_client.fetch_events(location or None)
        events = parse_events(records)

        dropped = len(records) - len(events)
        if dropped:
            logger.warning("Dropped %d malformed event records", dropped)

        return events

    def search(
        self,
        filters: SearchFilters,
        origin: UserLocation | None = None,
        now: datetime | None = None,
    ) -> SearchResult:
        """Run a search.

        Args:
            filters: Search criteria
            origin: User's location (enables distance annotation and filtering)
            now: Reference time for date buckets

        Returns:
            SearchResult with the matching events

        Raises:
            EventsApiError: If the events API request fails
        """
        events = self._fetch_events(filters.location)

        events = attach_coordinates(events, self.location_resolver)
        geocoded = sum(1 for e in events if e.coordinates is not None)

        if origin is not None:
            events = annotate_distances(events, origin)

        matches = filter_and_sort_events(events, filters, origin, now)

        result = SearchResult(
            events=matches,
            fetched=len(events),
            geocoded=geocoded,
        )

        logger.info("Search completed: %s", result.summary)
        return result

    async def locate(self, device_resolver: DeviceLocationResolver) -> UserLocation:
        """Get the user's location from their device.

        Raises:
            LocationError: If the device location request fails
        """
        try:
            return await device_resolver.resolve()
        except LocationError as e:
            logger.warning("Could not get user location: %s", e)
            raise
