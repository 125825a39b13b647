"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config, GeocodingConfig, ...) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from src.core.config import (
    Config,
    EventsApiConfig,
    GeocodingConfig,
    SearchDefaults,
    StoreConfig,
    validate_config,
)
from src.core.geo import Coordinate, is_valid_coordinate
from src.core.location import PositionOptions
from src.core.search import DateRange, SortKey, SortOrder
from src.shell.secret_manager_client import SecretManagerClient, SecretManagerConfig


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"


def _get_secret_manager_client() -> Optional[SecretManagerClient]:
    """Get a Secret Manager client.

    Returns None if GCP_PROJECT is not set (e.g., local development).
    """
    project_id = os.environ.get("GCP_PROJECT")
    if project_id:
        return SecretManagerClient(SecretManagerConfig(project_id=project_id))
    return None


def _resolve_value(value: Any, secret_client: Optional[SecretManagerClient] = None) -> Any:
    """Resolve a value that may contain secret or env var placeholders.

    Args:
        value: Value to resolve (may contain ${...} placeholders)
        secret_client: Client for resolving secrets

    Returns:
        Resolved value
    """
    if not isinstance(value, str):
        return value

    if secret_client:
        return secret_client.resolve(value)

    # No secret client - only handle env vars
    if value.startswith("${") and value.endswith("}"):
        var_spec = value[2:-1]
        if not var_spec.startswith("secret:"):
            env_value = os.environ.get(var_spec)
            if env_value:
                return env_value
            logger.warning("Environment variable %s not set", var_spec)

    return value


def _parse_events_api(
    data: dict[str, Any],
    secret_client: Optional[SecretManagerClient] = None,
) -> EventsApiConfig:
    """Parse events API settings from config data."""
    defaults = EventsApiConfig()
    return EventsApiConfig(
        base_url=_resolve_value(data.get("base_url", defaults.base_url), secret_client),
        timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
    )


def _parse_extra_locations(data: dict[str, Any]) -> dict[str, Coordinate]:
    """Parse extra static locations, skipping entries with invalid coordinates."""
    locations = {}
    for name, point in data.items():
        try:
            lat, lng = float(point["lat"]), float(point["lng"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Skipping location %s: lat/lng missing or not numeric", name)
            continue
        if not is_valid_coordinate(lat, lng):
            logger.warning("Skipping location %s: coordinates out of range", name)
            continue
        locations[name] = Coordinate(lat, lng)
    return locations


def _parse_geocoding(
    data: dict[str, Any],
    secret_client: Optional[SecretManagerClient] = None,
) -> GeocodingConfig:
    """Parse geocoding settings from config data."""
    defaults = GeocodingConfig()
    api_key = data.get("api_key")
    return GeocodingConfig(
        provider=data.get("provider", defaults.provider),
        base_url=data.get("base_url", defaults.base_url),
        user_agent=data.get("user_agent", defaults.user_agent),
        timeout_seconds=float(data.get("timeout_seconds", defaults.timeout_seconds)),
        api_key=_resolve_value(api_key, secret_client) if api_key else None,
        extra_locations=_parse_extra_locations(data.get("extra_locations") or {}),
    )


def _parse_position(data: dict[str, Any]) -> PositionOptions:
    """Parse device position options from config data."""
    defaults = PositionOptions()
    return PositionOptions(
        high_accuracy=bool(data.get("high_accuracy", defaults.high_accuracy)),
        timeout_ms=int(data.get("timeout_ms", defaults.timeout_ms)),
        maximum_age_ms=int(data.get("maximum_age_ms", defaults.maximum_age_ms)),
    )


def _parse_search(data: dict[str, Any]) -> SearchDefaults:
    """Parse default search criteria from config data."""
    defaults = SearchDefaults()
    max_distance = data.get("max_distance_km")
    return SearchDefaults(
        date_range=DateRange(data.get("date_range", defaults.date_range)),
        sort_by=SortKey(data.get("sort_by", defaults.sort_by)),
        sort_order=SortOrder(data.get("sort_order", defaults.sort_order)),
        max_distance_km=float(max_distance) if max_distance is not None else None,
    )


def _parse_store(data: dict[str, Any]) -> StoreConfig:
    """Parse document store settings from config data."""
    return StoreConfig(
        firestore_database=data.get("firestore_database"),
        firestore_collection=data.get("firestore_collection", "events"),
    )


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only placeholder expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object

    Raises:
        ValueError: If an enum value (date_range, sort_by, ...) is invalid
    """
    secret_client = _get_secret_manager_client()

    return Config(
        events_api=_parse_events_api(data.get("events_api", {}), secret_client),
        geocoding=_parse_geocoding(data.get("geocoding", {}), secret_client),
        position=_parse_position(data.get("position", {})),
        search=_parse_search(data.get("search", {})),
        store=_parse_store(data.get("store", {})),
    )


def _check_config(config: Config) -> None:
    """Log validation issues and reject invalid configuration.

    Raises:
        ValueError: If the configuration has critical errors
    """
    result = validate_config(config)

    for issue in result.warnings:
        logger.warning("Config warning at %s: %s", issue.field, issue.message)

    if not result.valid:
        details = "; ".join(f"{e.field}: {e.message}" for e in result.critical_errors)
        raise ValueError(f"Invalid configuration: {details}")


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
        ValueError: If the configuration is invalid
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using environment", path)
        return load_config_from_env()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)
    _check_config(config)

    logger.info(
        "Loaded config: events API %s, geocoder %s, %d extra locations",
        config.events_api.base_url,
        config.geocoding.provider,
        len(config.geocoding.extra_locations),
    )

    return config


def load_config_from_env() -> Config:
    """Load minimal configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        EVENTS_API_URL: Events collection URL
        GEOCODER_PROVIDER: 'static' or 'nominatim'
        FIRESTORE_DATABASE: Firestore database name
        DEFAULT_MAX_DISTANCE_KM: Default distance filter

    Returns:
        Config object from environment
    """
    config = Config()

    events_api_url = os.environ.get("EVENTS_API_URL")
    if events_api_url:
        config.events_api.base_url = events_api_url

    provider = os.environ.get("GEOCODER_PROVIDER")
    if provider:
        config.geocoding.provider = provider

    firestore_database = os.environ.get("FIRESTORE_DATABASE")
    if firestore_database:
        config.store.firestore_database = firestore_database

    max_distance = os.environ.get("DEFAULT_MAX_DISTANCE_KM")
    if max_distance:
        config.search.max_distance_km = float(max_distance)

    _check_config(config)
    return config
