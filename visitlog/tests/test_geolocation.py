"""Tests for best-effort geolocation lookups (network mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

pytestmark = pytest.mark.unit

from visitlog.domains.visits.models.visit_record import GeoLocation
from visitlog.domains.visits.services.geolocation import (
    DisabledGeolocator,
    GeoStatus,
    IpApiGeolocator,
    build_geolocator,
)

IPAPI_BODY = {
    "ip": "8.8.8.8",
    "city": "Mountain View",
    "region": "California",
    "country": "US",
    "country_name": "United States",
    "latitude": 37.42301,
    "longitude": -122.083352,
    "asn": "AS15169",
    "org": "GOOGLE",
}


def _http(body=None, status=200, exc=None) -> MagicMock:
    http = MagicMock(spec=requests.Session)
    if exc is not None:
        http.get.side_effect = exc
        return http
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    http.get.return_value = resp
    return http


def test_successful_lookup_maps_fields():
    http = _http(IPAPI_BODY)
    result = IpApiGeolocator(http=http, timeout=3).locate("8.8.8.8")

    assert result.status is GeoStatus.FOUND
    assert result.location == GeoLocation(
        country="United States",
        country_code="US",
        region="California",
        city="Mountain View",
        org="GOOGLE",
        asn="AS15169",
        latitude=37.42301,
        longitude=-122.083352,
    )
    http.get.assert_called_once_with("https://ipapi.co/8.8.8.8/json/", timeout=3)


def test_org_name_fallback_and_missing_coordinates():
    body = {"country_name": "Netherlands", "country": "NL", "org_name": "Example BV", "latitude": None}
    result = IpApiGeolocator(http=_http(body)).locate("203.0.113.9")
    assert result.location.org == "Example BV"
    assert result.location.latitude is None
    assert result.location.city is None


@pytest.mark.parametrize(
    "http",
    [
        _http(exc=requests.Timeout("slow")),
        _http(exc=requests.ConnectionError("down")),
        _http({"error": True, "reason": "RateLimited"}, status=429),
        _http({"error": True, "reason": "Reserved IP Address"}),
        _http(["not", "a", "dict"]),
    ],
)
def test_failures_degrade_to_unavailable(http):
    result = IpApiGeolocator(http=http).locate("8.8.8.8")
    assert result.status is GeoStatus.UNAVAILABLE
    assert result.location is None


def test_undecodable_body_is_unavailable():
    http = _http()
    http.get.return_value.json.side_effect = ValueError("no json")
    assert IpApiGeolocator(http=http).locate("8.8.8.8").status is GeoStatus.UNAVAILABLE


def test_private_address_never_hits_network():
    http = _http(IPAPI_BODY)
    result = IpApiGeolocator(http=http).locate("192.168.1.5")
    assert result.status is GeoStatus.SKIPPED
    http.get.assert_not_called()


def test_build_geolocator_respects_mode():
    assert isinstance(build_geolocator({"GEOLOOKUP": "off"}), DisabledGeolocator)
    assert DisabledGeolocator().locate("8.8.8.8").status is GeoStatus.DISABLED
    locator = build_geolocator({"GEOLOOKUP": "ipapi", "GEO_TIMEOUT_SECONDS": 1.5, "GEO_BASE_URL": "https://geo.test/"})
    assert isinstance(locator, IpApiGeolocator)
    assert locator.timeout == 1.5
    assert locator.base_url == "https://geo.test"


def test_lookup_failure_is_logged_at_debug(caplog):
    http = _http(exc=requests.Timeout("slow"))
    with caplog.at_level("DEBUG", logger="visitlog.domains.visits.services.geolocation"):
        IpApiGeolocator(http=http).locate("8.8.8.8")
    assert "Geolocation lookup failed for 8.8.8.8: slow" in caplog.text
