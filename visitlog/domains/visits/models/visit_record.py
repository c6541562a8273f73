"""Immutable visit records as produced by ingestion and returned by the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class GeoLocation:
    country: Optional[str] = None
    country_code: Optional[str] = None
    region: Optional[str] = None
    city: Optional[str] = None
    org: Optional[str] = None
    asn: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class VisitRecord:
    id: str
    timestamp: str  # ISO-8601 UTC, millisecond precision, "Z" suffix
    client_origin: str = ""
    user_agent: Optional[str] = None
    page: Optional[str] = None
    referrer: Optional[str] = None
    timezone: Optional[str] = None
    languages: Tuple[str, ...] = field(default_factory=tuple)
    screen: Optional[str] = None
    geo: Optional[GeoLocation] = None
