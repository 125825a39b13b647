"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from src.core.geo import Coordinate
from src.core.location import PositionOptions
from src.core.search import DateRange, SearchFilters, SortKey, SortOrder
from src.core.validation import ValidationError, ValidationResult


GEOCODING_PROVIDERS = ("static", "nominatim")

DEFAULT_EVENTS_API_URL = "http://localhost:8080/api/events"
NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


@dataclass
class EventsApiConfig:
    """Where to fetch events from.

    Attributes:
        base_url: Events collection URL
        timeout_seconds: Request timeout
    """
    base_url: str = DEFAULT_EVENTS_API_URL
    timeout_seconds: float = 10


@dataclass
class GeocodingConfig:
    """Place-name resolution settings.

    Attributes:
        provider: 'static' (lookup table) or 'nominatim' (HTTP geocoder)
        base_url: Geocoder search URL
        user_agent: User-Agent sent to the geocoder
        timeout_seconds: Request timeout
        api_key: Optional API key for hosted geocoders
        extra_locations: Additional static table entries (name -> coordinate)
    """
    provider: str = "static"
    base_url: str = NOMINATIM_URL
    user_agent: str = "event-finder/1.0"
    timeout_seconds: float = 10
    api_key: str | None = None
    extra_locations: dict[str, Coordinate] = field(default_factory=dict)


@dataclass
class SearchDefaults:
    """Search criteria used when a request doesn't specify them."""
    date_range: DateRange = DateRange.ALL
    sort_by: SortKey = SortKey.DATE
    sort_order: SortOrder = SortOrder.ASC
    max_distance_km: float | None = None

    def as_filters(self) -> SearchFilters:
        """Return these defaults as SearchFilters with no location."""
        return SearchFilters(
            date_range=self.date_range,
            max_distance=self.max_distance_km,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )


@dataclass
class StoreConfig:
    """Document store settings.

    Attributes:
        firestore_database: Firestore database name (None for default)
        firestore_collection: Collection holding event documents
    """
    firestore_database: str | None = None
    firestore_collection: str = "events"


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.
    """
    events_api: EventsApiConfig = field(default_factory=EventsApiConfig)
    geocoding: GeocodingConfig = field(default_factory=GeocodingConfig)
    position: PositionOptions = field(default_factory=PositionOptions)
    search: SearchDefaults = field(default_factory=SearchDefaults)
    store: StoreConfig = field(default_factory=StoreConfig)


def _is_placeholder(value: str | None) -> bool:
    return bool(value) and value.startswith("${")


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.events_api.base_url:
        errors.append(ValidationError(
            field="events_api.base_url",
            message="Events API URL is empty",
        ))
    elif _is_placeholder(config.events_api.base_url):
        errors.append(ValidationError(
            field="events_api.base_url",
            message="Events API URL not resolved (still contains placeholder)",
            severity="warning",
        ))

    if config.events_api.timeout_seconds <= 0:
        errors.append(ValidationError(
            field="events_api.timeout_seconds",
            message=f"Timeout must be positive, got {config.events_api.timeout_seconds}",
        ))

    geocoding = config.geocoding
    if geocoding.provider not in GEOCODING_PROVIDERS:
        errors.append(ValidationError(
            field="geocoding.provider",
            message=(
                f"Unknown geocoding provider '{geocoding.provider}', "
                f"expected one of {', '.join(GEOCODING_PROVIDERS)}"
            ),
        ))

    if geocoding.timeout_seconds <= 0:
        errors.append(ValidationError(
            field="geocoding.timeout_seconds",
            message=f"Timeout must be positive, got {geocoding.timeout_seconds}",
        ))

    if _is_placeholder(geocoding.api_key):
        errors.append(ValidationError(
            field="geocoding.api_key",
            message="Geocoding API key not resolved (still contains placeholder)",
            severity="warning",
        ))

    if config.position.timeout_ms <= 0:
        errors.append(ValidationError(
            field="position.timeout_ms",
            message=f"Timeout must be positive, got {config.position.timeout_ms}",
        ))

    max_distance = config.search.max_distance_km
    if max_distance is not None and max_distance < 0:
        errors.append(ValidationError(
            field="search.max_distance_km",
            message=f"Maximum distance must not be negative, got {max_distance}",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
