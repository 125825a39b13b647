"""Location resolution models - Pure functions.

This module holds the pieces of location resolution that don't touch
the outside world:
- Place-name normalization and the static city lookup table
- The UserLocation model and device position options
- Classification of device position failures into LocationError

Real geocoding and device position access live in the shell layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Protocol

from src.core.geo import Coordinate


# Position error codes reported by device location providers
PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class LocationErrorKind(str, Enum):
    """Why a device location request failed."""
    UNSUPPORTED = "unsupported"
    INSECURE_CONTEXT = "insecure-context"
    PERMISSION_DENIED = "permission-denied"
    POSITION_UNAVAILABLE = "position-unavailable"
    TIMEOUT = "timeout"


_MESSAGES: dict[LocationErrorKind, tuple[str, str]] = {
    LocationErrorKind.UNSUPPORTED: (
        "Geolocation is not supported by this browser. "
        "Please update your browser or try a different one.",
        "",
    ),
    LocationErrorKind.INSECURE_CONTEXT: (
        "Location services require HTTPS. Please access this site via HTTPS "
        "or try searching by city name instead.",
        "",
    ),
    LocationErrorKind.PERMISSION_DENIED: (
        "Location access denied",
        "Please allow location access in your browser settings and try again. "
        "Look for the location icon in your browser's address bar.",
    ),
    LocationErrorKind.POSITION_UNAVAILABLE: (
        "Location information unavailable",
        "Your device may not have location services enabled, or you may be in "
        "an area without GPS/WiFi positioning. Try searching by city name "
        "instead, or check if location services are enabled on your device.",
    ),
    LocationErrorKind.TIMEOUT: (
        "Location request timed out",
        "The location request took too long. Please check your internet "
        "connection and try again. You can also try searching by city name "
        "instead.",
    ),
}

_CODE_TO_KIND = {
    PERMISSION_DENIED: LocationErrorKind.PERMISSION_DENIED,
    POSITION_UNAVAILABLE: LocationErrorKind.POSITION_UNAVAILABLE,
    TIMEOUT: LocationErrorKind.TIMEOUT,
}


class LocationError(Exception):
    """A device location request failed.

    Attributes:
        kind: Classified failure kind
        message: Human-readable message
        suggestion: Remediation hint (empty for capability/context failures)
    """

    def __init__(self, kind: LocationErrorKind, message: str, suggestion: str = "") -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.suggestion = suggestion

    @classmethod
    def of(cls, kind: LocationErrorKind) -> "LocationError":
        """Build a LocationError with the standard message for its kind."""
        message, suggestion = _MESSAGES[kind]
        return cls(kind, message, suggestion)


def classify_position_error(code: int) -> LocationError:
    """Map a provider error code to a LocationError.

    Pure function. Unknown codes get a generic message and no suggestion,
    classified as position-unavailable.
    """
    kind = _CODE_TO_KIND.get(code)
    if kind is None:
        return LocationError(
            LocationErrorKind.POSITION_UNAVAILABLE,
            "Unable to get your location",
        )
    return LocationError.of(kind)


def is_secure_origin(protocol: str, hostname: str) -> bool:
    """Check if an origin may request device location.

    Pure function. HTTPS origins and localhost are secure.
    """
    return protocol == "https:" or hostname == "localhost"


@dataclass(frozen=True)
class PositionOptions:
    """Options passed to the device position provider.

    Attributes:
        high_accuracy: Ask for GPS-grade accuracy
        timeout_ms: Give up after this many milliseconds
        maximum_age_ms: Accept a cached position up to this old
    """
    high_accuracy: bool = True
    timeout_ms: int = 15_000
    maximum_age_ms: int = 300_000


@dataclass(frozen=True)
class UserLocation:
    """The user's position from a successful device location request.

    Attributes:
        coordinate: Where the user is
        timestamp: Capture time in epoch milliseconds
        accuracy: Accuracy radius in meters (optional)
    """
    coordinate: Coordinate
    timestamp: int
    accuracy: float | None = None

    @property
    def lat(self) -> float:
        return self.coordinate.lat

    @property
    def lng(self) -> float:
        return self.coordinate.lng


class LocationResolver(Protocol):
    """Resolves a free-text place name to coordinates."""

    def resolve(self, name: str) -> Coordinate | None:
        ...


def normalize_location_name(text: str) -> str:
    """Normalize a place name for lookup (trimmed, lower-cased)."""
    return text.strip().lower()


STATIC_LOCATIONS: dict[str, Coordinate] = {
    "new york": Coordinate(40.7128, -74.0060),
    "nyc": Coordinate(40.7128, -74.0060),
    "london": Coordinate(51.5074, -0.1278),
    "paris": Coordinate(48.8566, 2.3522),
    "tokyo": Coordinate(35.6762, 139.6503),
    "san francisco": Coordinate(37.7749, -122.4194),
    "los angeles": Coordinate(34.0522, -118.2437),
    "chicago": Coordinate(41.8781, -87.6298),
    "boston": Coordinate(42.3601, -71.0589),
    "seattle": Coordinate(47.6062, -122.3321),
    "delhi": Coordinate(28.7041, 77.1025),
    "mumbai": Coordinate(19.0760, 72.8777),
    "bangalore": Coordinate(12.9716, 77.5946),
    "hyderabad": Coordinate(17.3850, 78.4867),
    "chennai": Coordinate(13.0827, 80.2707),
    "pune": Coordinate(18.5204, 73.8567),
}


class StaticLocationResolver:
    """Resolves place names from a fixed lookup table.

    Used offline and in tests. Names not in the table resolve to None.
    """

    def __init__(self, extra_locations: Mapping[str, Coordinate] | None = None) -> None:
        """Initialize resolver.

        Args:
            extra_locations: Additional entries merged over the built-in table
        """
        self.table = dict(STATIC_LOCATIONS)
        for name, coordinate in (extra_locations or {}).items():
            self.table[normalize_location_name(name)] = coordinate

    def resolve(self, name: str) -> Coordinate | None:
        """Look up a place name. Returns None if it isn't known."""
        return self.table.get(normalize_location_name(name))
