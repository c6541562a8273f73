"""Best-effort IP geolocation via ipapi.co."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol
from urllib.parse import quote

import requests

from visitlog.core.utils.network import is_private_address
from visitlog.domains.visits.models.visit_record import GeoLocation

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://ipapi.co"
DEFAULT_TIMEOUT_SECONDS = 3.0


class GeoStatus(str, Enum):
    FOUND = "found"
    DISABLED = "disabled"
    SKIPPED = "skipped"  # empty or non-routable origin
    UNAVAILABLE = "unavailable"  # lookup attempted and failed


@dataclass(frozen=True)
class GeoLookup:
    status: GeoStatus
    location: Optional[GeoLocation] = None

    @classmethod
    def found(cls, location: GeoLocation) -> "GeoLookup":
        return cls(GeoStatus.FOUND, location)


DISABLED = GeoLookup(GeoStatus.DISABLED)
SKIPPED = GeoLookup(GeoStatus.SKIPPED)
UNAVAILABLE = GeoLookup(GeoStatus.UNAVAILABLE)


class Geolocator(Protocol):
    def locate(self, address: str) -> GeoLookup: ...


class DisabledGeolocator:
    """Used when GEOLOOKUP=off."""

    def locate(self, address: str) -> GeoLookup:
        return DISABLED


class IpApiGeolocator:
    """Looks addresses up against the ipapi.co JSON endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def locate(self, address: str) -> GeoLookup:
        if is_private_address(address):
            return SKIPPED
        url = f"{self.base_url}/{quote(address, safe='')}/json/"
        try:
            resp = self.http.get(url, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.debug("Geolocation lookup failed for %s: %s", address, e)
            return UNAVAILABLE
        if not isinstance(data, dict) or data.get("error"):
            logger.debug("Geolocation lookup returned no data for %s", address)
            return UNAVAILABLE
        return GeoLookup.found(_parse_location(data))


def _parse_location(data: Dict[str, Any]) -> GeoLocation:
    return GeoLocation(
        country=data.get("country_name") or None,
        country_code=data.get("country") or None,
        region=data.get("region") or None,
        city=data.get("city") or None,
        org=data.get("org") or data.get("org_name") or None,
        asn=data.get("asn") or None,
        latitude=_as_float(data.get("latitude")),
        longitude=_as_float(data.get("longitude")),
    )


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def build_geolocator(config) -> Geolocator:
    """Pick a geolocator from app config (GEOLOOKUP=ipapi|on|off)."""
    mode = (config.get("GEOLOOKUP") or "off").lower()
    if mode in ("off", "false", "0", "no", "none"):
        return DisabledGeolocator()
    return IpApiGeolocator(
        base_url=config.get("GEO_BASE_URL", DEFAULT_BASE_URL),
        timeout=float(config.get("GEO_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
    )


__all__ = [
    "GeoStatus",
    "GeoLookup",
    "Geolocator",
    "DisabledGeolocator",
    "IpApiGeolocator",
    "build_geolocator",
]
