"""Device Location - Imperative Shell.

This module requests the user's current position from a device location
provider (the platform's geolocation capability). The provider is injected,
so the resolver never touches ambient global state and can be tested with
a fake.

Error classification and messages live in the core module.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from src.core.geo import Coordinate
from src.core.location import (
    TIMEOUT,
    LocationError,
    LocationErrorKind,
    PositionOptions,
    UserLocation,
    classify_position_error,
    is_secure_origin,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    """A raw position reported by a provider.

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        accuracy: Accuracy radius in meters
    """
    latitude: float
    longitude: float
    accuracy: float | None = None


class PositionError(Exception):
    """A provider failed to produce a position.

    Attributes:
        code: 1 (permission denied), 2 (position unavailable) or 3 (timeout)
    """

    def __init__(self, code: int, message: str = "") -> None:
        super().__init__(message or f"Position error {code}")
        self.code = code


class PositionProvider(Protocol):
    """The platform's geolocation capability."""

    supported: bool
    protocol: str
    hostname: str

    async def get_current_position(self, options: PositionOptions) -> Position:
        ...


def _now_ms() -> int:
    return int(time.time() * 1000)


class DeviceLocationResolver:
    """Single-shot device location requests.

    Each call to resolve() issues an independent request; concurrent calls
    are neither deduplicated nor cancellable once issued.
    """

    def __init__(
        self,
        provider: PositionProvider,
        options: PositionOptions | None = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize resolver.

        Args:
            provider: Platform geolocation capability
            options: Accuracy/timeout/cache options passed to the provider
            clock: Returns the current time in epoch milliseconds
        """
        self.provider = provider
        self.options = options or PositionOptions()
        self.clock = clock

    def _check_capability(self) -> None:
        """Fail before contacting the provider if it can't be used."""
        if not self.provider.supported:
            raise LocationError.of(LocationErrorKind.UNSUPPORTED)

        if not is_secure_origin(self.provider.protocol, self.provider.hostname):
            raise LocationError.of(LocationErrorKind.INSECURE_CONTEXT)

    async def resolve(self) -> UserLocation:
        """Request the current device position.

        Suspends until the provider responds or the timeout elapses.

        Returns:
            UserLocation stamped with the capture time

        Raises:
            LocationError: On any failure, classified by kind
        """
        self._check_capability()

        logger.info("Requesting device location")

        try:
            position = await asyncio.wait_for(
                self.provider.get_current_position(self.options),
                timeout=self.options.timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            logger.warning("Device location request timed out")
            raise classify_position_error(TIMEOUT) from None
        except PositionError as e:
            error = classify_position_error(e.code)
            logger.warning("Device location failed: %s", error.kind.value)
            raise error from e

        try:
            coordinate = Coordinate(position.latitude, position.longitude)
        except ValueError:
            logger.warning("Provider reported out-of-range position")
            raise LocationError.of(LocationErrorKind.POSITION_UNAVAILABLE) from None

        location = UserLocation(
            coordinate=coordinate,
            timestamp=self.clock(),
            accuracy=position.accuracy,
        )

        logger.info("Device location acquired (accuracy %s m)", location.accuracy)
        return location
