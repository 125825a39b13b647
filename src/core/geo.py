"""Geographic calculations - Pure functions.

This module provides distance calculations between event locations and
the user's position. All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass


# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Check if a latitude/longitude pair is within valid ranges."""
    return -90 <= lat <= 90 and -180 <= lng <= 180


@dataclass(frozen=True)
class Coordinate:
    """Immutable latitude/longitude pair in decimal degrees.

    Attributes:
        lat: Latitude in [-90, 90]
        lng: Longitude in [-180, 180]

    Raises:
        ValueError: If either value is out of range
    """
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not is_valid_coordinate(self.lat, self.lng):
            raise ValueError(
                f"Coordinate out of range: lat={self.lat}, lng={self.lng}"
            )

    def to_dict(self) -> dict[str, float]:
        """Return the wire form {"lat": ..., "lng": ...}."""
        return {"lat": self.lat, "lng": self.lng}


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function. Inputs are not range-checked.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in kilometers, rounded to one decimal place
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return round(EARTH_RADIUS_KM * c, 1)


def distance_between(a: Coordinate, b: Coordinate) -> float:
    """Calculate distance in kilometers between two coordinates.

    Pure function.
    """
    return calculate_distance(a.lat, a.lng, b.lat, b.lng)
