"""Cloud Function Entry Point.

This module provides the HTTP entry point for event searches.
It's a thin wrapper that parses the query, loads configuration and
invokes the search service.

Query parameters:
    location, dateRange, maxDistance, sortBy, sortOrder: search criteria
    lat, lng, accuracy: the user's location (optional)
"""

import logging
import os
import time
from typing import Any

import functions_framework
from flask import Request

from src.core.event import event_to_dict
from src.core.geo import Coordinate
from src.core.location import UserLocation
from src.core.validation import search_filters_from_params, validate_search_params
from src.search_service import EventSearchService
from src.shell.config_loader import load_config
from src.shell.events_client import EventsApiError


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _envelope(
    status_code: int,
    data: Any,
    message: str,
) -> tuple[dict[str, Any], int]:
    """Wrap a response body in the standard envelope."""
    return {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < 400,
    }, status_code


_search_service: EventSearchService | None = None


def get_search_service() -> EventSearchService:
    """Get or create the search service.

    The service is reused across requests so the location resolver's
    cache survives between calls.
    """
    global _search_service
    if _search_service is None:
        _search_service = EventSearchService(load_config())
        logger.info("Search service initialized")
    return _search_service


def _origin_from_params(params: dict[str, str]) -> UserLocation | None:
    """Build the user's location from validated lat/lng parameters."""
    if not params.get("lat") or not params.get("lng"):
        return None

    accuracy = params.get("accuracy")
    return UserLocation(
        coordinate=Coordinate(float(params["lat"]), float(params["lng"])),
        timestamp=int(time.time() * 1000),
        accuracy=float(accuracy) if accuracy else None,
    )


@functions_framework.http
def event_search(request: Request) -> tuple[dict[str, Any], int]:
    """HTTP Cloud Function entry point.

    Args:
        request: Flask request object

    Returns:
        Tuple of (response envelope, HTTP status code)
    """
    params = {key: value for key, value in request.args.items()}

    errors = validate_search_params(params)
    if errors:
        logger.warning("Rejected search with %d invalid parameters", len(errors))
        return _envelope(
            400,
            [{"field": e.field, "message": e.message} for e in errors],
            "Invalid search parameters",
        )

    try:
        service = get_search_service()
        filters = search_filters_from_params(params, service.config.search.as_filters())
        origin = _origin_from_params(params)

        result = service.search(filters, origin)

        logger.info("Completed: %s", result.summary)

        return _envelope(
            200,
            [event_to_dict(e) for e in result.events],
            "Events retrieved successfully",
        )

    except EventsApiError as e:
        logger.error("Events API failed (%d): %s", e.status, e.message)
        return _envelope(502, None, f"Failed to fetch events: {e.message}")

    except Exception as e:
        logger.exception("Unexpected error in event search")
        return _envelope(500, None, str(e))


# For local testing
if __name__ == "__main__":
    import json

    from flask import Flask

    print("Running event search locally...")

    app = Flask(__name__)
    with app.test_request_context("/?dateRange=upcoming&sortBy=date"):
        from flask import request as local_request

        response, status = event_search(local_request)

    print(f"\nResponse ({status}):")
    print(json.dumps(response, indent=2))
