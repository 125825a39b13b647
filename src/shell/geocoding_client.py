"""Geocoding Client - Imperative Shell.

This module resolves place names to coordinates using a Nominatim-style
HTTP search API (OpenStreetMap Nominatim, or a compatible hosted service
such as LocationIQ when an API key is configured).

All I/O is contained here; the static lookup table lives in the core module.
"""

import logging

import requests

from src.core.config import GeocodingConfig, NOMINATIM_URL
from src.core.geo import Coordinate, is_valid_coordinate
from src.core.location import LocationResolver, StaticLocationResolver, normalize_location_name


logger = logging.getLogger(__name__)


# Default timeout for geocoding requests (seconds)
DEFAULT_TIMEOUT = 10


class NominatimGeocoder:
    """Resolves place names through a Nominatim-compatible search endpoint.

    This is part of the imperative shell - it handles HTTP I/O.
    Results (including misses) are memoized per normalized name for the
    lifetime of the instance.
    """

    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        user_agent: str = "event-finder/1.0",
        timeout: float = DEFAULT_TIMEOUT,
        api_key: str | None = None,
    ) -> None:
        """Initialize geocoder.

        Args:
            base_url: Search endpoint URL
            user_agent: User-Agent header (Nominatim requires one)
            timeout: Request timeout in seconds
            api_key: API key for hosted geocoders (sent as `key`)
        """
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout
        self.api_key = api_key
        self._cache: dict[str, Coordinate | None] = {}

    def _build_params(self, name: str) -> dict[str, str]:
        params = {
            "q": name,
            "format": "json",
            "limit": "1",
        }
        if self.api_key:
            params["key"] = self.api_key
        return params

    def _lookup(self, name: str) -> Coordinate | None:
        """Query the geocoder for a single name.

        This method performs HTTP I/O.
        """
        try:
            response = requests.get(
                self.base_url,
                params=self._build_params(name),
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            results = response.json()

        except requests.Timeout:
            logger.error("Geocoding request timed out for %r", name)
            return None
        except requests.RequestException as e:
            logger.error("Geocoding request failed for %r: %s", name, str(e))
            return None
        except ValueError:
            logger.error("Geocoder returned invalid JSON for %r", name)
            return None

        if not results:
            logger.info("No geocoding match for %r", name)
            return None

        try:
            lat = float(results[0]["lat"])
            lng = float(results[0]["lon"])
        except (KeyError, TypeError, ValueError, IndexError):
            logger.warning("Unexpected geocoder result for %r: %s", name, results[0])
            return None

        if not is_valid_coordinate(lat, lng):
            logger.warning("Geocoder returned out-of-range coordinates for %r", name)
            return None

        return Coordinate(lat, lng)

    def resolve(self, name: str) -> Coordinate | None:
        """Resolve a place name. Returns None on no match or failure."""
        key = normalize_location_name(name)
        if not key:
            return None

        if key not in self._cache:
            self._cache[key] = self._lookup(key)

        return self._cache[key]


def create_location_resolver(config: GeocodingConfig) -> LocationResolver:
    """Build the place-name resolver selected by configuration.

    Args:
        config: Geocoding configuration

    Returns:
        A static table resolver or an HTTP geocoder

    Raises:
        ValueError: If the provider is unknown
    """
    if config.provider == "static":
        return StaticLocationResolver(config.extra_locations)

    if config.provider == "nominatim":
        return NominatimGeocoder(
            base_url=config.base_url,
            user_agent=config.user_agent,
            timeout=config.timeout_seconds,
            api_key=config.api_key,
        )

    raise ValueError(f"Unknown geocoding provider: {config.provider}")
