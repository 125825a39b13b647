"""Events API Client - Imperative Shell.

This module handles HTTP communication with the events backend.
Responses arrive in an envelope {statusCode, data, message, success};
this client unwraps it and returns the raw `data` records.
All I/O is contained here; parsing is in the core module.
"""

import logging
from typing import Any

import requests

from src.core.config import DEFAULT_EVENTS_API_URL


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 10

CONNECTION_ERROR_MESSAGE = (
    "Unable to connect to server. Please check if the backend is running."
)
INVALID_RESPONSE_MESSAGE = (
    "Server returned invalid response. Make sure the backend is running."
)


class EventsApiError(Exception):
    """The events API returned an error or could not be reached.

    Attributes:
        status: HTTP status code (0 if the server was unreachable)
        message: Error message from the server or client
    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class EventsApiClient:
    """Client for the events backend.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_EVENTS_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize events client.

        Args:
            base_url: Events collection URL (e.g. http://host/api/events)
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _unwrap(self, response: requests.Response) -> Any:
        """Validate a response and return its envelope `data`.

        Raises:
            EventsApiError: On non-JSON, unparseable or error responses
        """
        content_type = response.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            logger.error("Received non-JSON response: %s", response.text[:200])
            raise EventsApiError(response.status_code, INVALID_RESPONSE_MESSAGE)

        try:
            body = response.json()
        except ValueError:
            logger.error("Failed to parse events API response")
            raise EventsApiError(500, "Failed to parse server response") from None

        if not isinstance(body, dict):
            raise EventsApiError(500, "Failed to parse server response")

        if not response.ok:
            raise EventsApiError(
                response.status_code,
                body.get("message") or "Something went wrong",
            )

        return body.get("data")

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = requests.request(
                method,
                url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                **kwargs,
            )
        except requests.Timeout:
            logger.error("Events API request timed out: %s %s", method, url)
            raise EventsApiError(0, "Request timed out") from None
        except requests.ConnectionError:
            logger.error("Events API unreachable: %s %s", method, url)
            raise EventsApiError(0, CONNECTION_ERROR_MESSAGE) from None
        except requests.RequestException as e:
            logger.error("Events API request failed: %s %s: %s", method, url, str(e))
            raise EventsApiError(0, str(e)) from e

        return self._unwrap(response)

    def fetch_events(self, location: str | None = None) -> list[dict[str, Any]]:
        """Fetch events, optionally filtered by location substring.

        This method performs HTTP I/O.

        Args:
            location: Case-insensitive location filter applied by the server

        Returns:
            Raw event records

        Raises:
            EventsApiError: If the request fails
        """
        params = {}
        if location and location.strip():
            params["location"] = location.strip()

        logger.info("Fetching events", extra={"params": params})

        data = self._request("GET", self.base_url, params=params)
        records = data or []

        logger.info("Fetched %d events", len(records))
        return records

    def fetch_event(self, event_id: str) -> dict[str, Any]:
        """Fetch a single event by ID.

        Raises:
            EventsApiError: If the request fails (404 if not found)
        """
        return self._request("GET", f"{self.base_url}/{event_id}")

    def create_event(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create an event.

        Args:
            payload: Create-event payload (camelCase keys)

        Returns:
            The created event record

        Raises:
            EventsApiError: If the request fails (400 on validation errors)
        """
        logger.info("Creating event %r", payload.get("title"))
        return self._request("POST", self.base_url, json=payload)
