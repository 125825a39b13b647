"""Unit tests for location resolution models."""

import pytest

from src.core.geo import Coordinate
from src.core.location import (
    PERMISSION_DENIED,
    POSITION_UNAVAILABLE,
    STATIC_LOCATIONS,
    TIMEOUT,
    LocationError,
    LocationErrorKind,
    StaticLocationResolver,
    UserLocation,
    classify_position_error,
    is_secure_origin,
    normalize_location_name,
)


class TestNormalizeLocationName:
    """Tests for normalize_location_name()."""

    def test_trims_and_lowercases(self):
        assert normalize_location_name("  New York ") == "new york"

    def test_empty(self):
        assert normalize_location_name("   ") == ""


class TestStaticLocationResolver:
    """Tests for StaticLocationResolver."""

    def test_table_has_sixteen_entries(self):
        assert len(STATIC_LOCATIONS) == 16

    def test_case_and_whitespace_insensitive(self):
        """Padded and lower-case names resolve to the same coordinate."""
        resolver = StaticLocationResolver()

        padded = resolver.resolve("  New York ")
        lower = resolver.resolve("new york")

        assert padded is not None
        assert padded == lower == Coordinate(40.7128, -74.0060)

    def test_alias_resolves(self):
        resolver = StaticLocationResolver()
        assert resolver.resolve("NYC") == resolver.resolve("new york")

    def test_unknown_returns_none(self):
        """Names missing from the table aren't an error."""
        assert StaticLocationResolver().resolve("Atlantis") is None

    def test_extra_locations_merged(self):
        """Extra entries are normalized and added to the table."""
        resolver = StaticLocationResolver({"  Austin ": Coordinate(30.2672, -97.7431)})

        assert resolver.resolve("austin") == Coordinate(30.2672, -97.7431)
        assert resolver.resolve("london") is not None

    def test_extra_locations_do_not_modify_global_table(self):
        StaticLocationResolver({"berlin": Coordinate(52.52, 13.405)})
        assert "berlin" not in STATIC_LOCATIONS


class TestIsSecureOrigin:
    """Tests for is_secure_origin()."""

    def test_https_is_secure(self):
        assert is_secure_origin("https:", "events.example.com") is True

    def test_localhost_is_secure(self):
        assert is_secure_origin("http:", "localhost") is True

    def test_plain_http_is_insecure(self):
        assert is_secure_origin("http:", "events.example.com") is False


class TestClassifyPositionError:
    """Tests for classify_position_error()."""

    @pytest.mark.parametrize("code,kind,message", [
        (PERMISSION_DENIED, LocationErrorKind.PERMISSION_DENIED, "Location access denied"),
        (POSITION_UNAVAILABLE, LocationErrorKind.POSITION_UNAVAILABLE, "Location information unavailable"),
        (TIMEOUT, LocationErrorKind.TIMEOUT, "Location request timed out"),
    ])
    def test_known_codes(self, code, kind, message):
        """Each provider code maps to its kind with a suggestion."""
        error = classify_position_error(code)

        assert error.kind == kind
        assert error.message == message
        assert error.suggestion

    def test_unknown_code_gets_generic_message(self):
        error = classify_position_error(99)

        assert error.message == "Unable to get your location"
        assert error.suggestion == ""


class TestLocationError:
    """Tests for LocationError."""

    def test_is_exception_with_message(self):
        error = LocationError.of(LocationErrorKind.TIMEOUT)

        assert isinstance(error, Exception)
        assert str(error) == "Location request timed out"

    def test_capability_errors_have_no_suggestion(self):
        unsupported = LocationError.of(LocationErrorKind.UNSUPPORTED)
        insecure = LocationError.of(LocationErrorKind.INSECURE_CONTEXT)

        assert "not supported" in unsupported.message
        assert "HTTPS" in insecure.message
        assert unsupported.suggestion == ""
        assert insecure.suggestion == ""

    def test_kind_values_are_wire_strings(self):
        assert LocationErrorKind.PERMISSION_DENIED.value == "permission-denied"
        assert LocationErrorKind.INSECURE_CONTEXT.value == "insecure-context"


class TestUserLocation:
    """Tests for UserLocation."""

    def test_lat_lng_shortcuts(self):
        location = UserLocation(Coordinate(1.0, 2.0), timestamp=1700000000000, accuracy=25.0)

        assert location.lat == 1.0
        assert location.lng == 2.0
        assert location.accuracy == 25.0
