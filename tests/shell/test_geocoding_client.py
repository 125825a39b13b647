"""Tests for the Nominatim geocoding client.

Uses the `responses` library to mock HTTP requests.
"""

import pytest
import requests
import responses

from src.core.config import GeocodingConfig, NOMINATIM_URL
from src.core.geo import Coordinate
from src.core.location import StaticLocationResolver
from src.shell.geocoding_client import NominatimGeocoder, create_location_resolver


class TestNominatimGeocoderResolve:
    """Tests for NominatimGeocoder.resolve()."""

    @responses.activate
    def test_successful_lookup(self):
        """First result's lat/lon strings become a Coordinate."""
        responses.add(
            responses.GET,
            NOMINATIM_URL,
            json=[{"lat": "30.2672", "lon": "-97.7431", "display_name": "Austin"}],
            status=200,
        )

        result = NominatimGeocoder().resolve("Austin")

        assert result == Coordinate(30.2672, -97.7431)

    @responses.activate
    def test_sends_query_and_user_agent(self):
        responses.add(responses.GET, NOMINATIM_URL, json=[], status=200)

        NominatimGeocoder(user_agent="test-agent/1.0").resolve("  Austin ")

        request = responses.calls[0].request
        assert "q=austin" in request.url
        assert "format=json" in request.url
        assert "limit=1" in request.url
        assert request.headers["User-Agent"] == "test-agent/1.0"

    @responses.activate
    def test_sends_api_key_when_configured(self):
        responses.add(responses.GET, NOMINATIM_URL, json=[], status=200)

        NominatimGeocoder(api_key="abc123").resolve("Austin")

        assert "key=abc123" in responses.calls[0].request.url

    @responses.activate
    def test_no_match_returns_none(self):
        responses.add(responses.GET, NOMINATIM_URL, json=[], status=200)
        assert NominatimGeocoder().resolve("Atlantis") is None

    @responses.activate
    def test_results_are_memoized(self):
        """Repeated names, including misses, hit the network once."""
        responses.add(responses.GET, NOMINATIM_URL, json=[], status=200)
        geocoder = NominatimGeocoder()

        geocoder.resolve("Atlantis")
        geocoder.resolve("atlantis ")

        assert len(responses.calls) == 1

    @responses.activate
    def test_server_error_returns_none(self):
        responses.add(responses.GET, NOMINATIM_URL, json={"error": "boom"}, status=500)
        assert NominatimGeocoder().resolve("Austin") is None

    @responses.activate
    def test_timeout_returns_none(self):
        responses.add(responses.GET, NOMINATIM_URL, body=requests.Timeout())
        assert NominatimGeocoder().resolve("Austin") is None

    @responses.activate
    def test_invalid_json_returns_none(self):
        responses.add(responses.GET, NOMINATIM_URL, body="<html>", status=200)
        assert NominatimGeocoder().resolve("Austin") is None

    @responses.activate
    def test_malformed_result_returns_none(self):
        responses.add(responses.GET, NOMINATIM_URL, json=[{"name": "Austin"}], status=200)
        assert NominatimGeocoder().resolve("Austin") is None

    @responses.activate
    def test_out_of_range_result_returns_none(self):
        responses.add(responses.GET, NOMINATIM_URL, json=[{"lat": "95", "lon": "0"}], status=200)
        assert NominatimGeocoder().resolve("Austin") is None

    def test_blank_name_skips_request(self):
        with responses.RequestsMock() as rsps:
            assert NominatimGeocoder().resolve("   ") is None
            assert len(rsps.calls) == 0


class TestCreateLocationResolver:
    """Tests for create_location_resolver()."""

    def test_static_provider(self):
        config = GeocodingConfig(extra_locations={"austin": Coordinate(30.2672, -97.7431)})

        resolver = create_location_resolver(config)

        assert isinstance(resolver, StaticLocationResolver)
        assert resolver.resolve("Austin") == Coordinate(30.2672, -97.7431)

    def test_nominatim_provider(self):
        config = GeocodingConfig(provider="nominatim", api_key="abc123", timeout_seconds=3)

        resolver = create_location_resolver(config)

        assert isinstance(resolver, NominatimGeocoder)
        assert resolver.api_key == "abc123"
        assert resolver.timeout == 3

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unknown geocoding provider"):
            create_location_resolver(GeocodingConfig(provider="bogus"))
