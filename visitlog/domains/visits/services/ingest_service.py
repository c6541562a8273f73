"""Visit ingestion: origin resolution, sanitization, enrichment, storage."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from visitlog.core.utils.network import is_private_address, resolve_client_origin
from visitlog.domains.visits.models.visit_record import VisitRecord
from visitlog.domains.visits.schemas.visit_schemas import FIELD_LIMITS, TrackRequest, clean_text
from visitlog.domains.visits.services.geolocation import SKIPPED, Geolocator, GeoLookup
from visitlog.domains.visits.services.visit_store import VisitStore

VISIT_ID_BYTES = 12


@dataclass(frozen=True)
class RequestMetadata:
    """The transport-level facts about a tracking request."""

    headers: Mapping[str, str]
    remote_addr: Optional[str] = None
    trust_proxy: bool = True

    @property
    def user_agent(self) -> Optional[str]:
        return self.headers.get("User-Agent")

    @classmethod
    def from_request(cls, request, trust_proxy: bool = True) -> "RequestMetadata":
        return cls(headers=request.headers, remote_addr=request.remote_addr, trust_proxy=trust_proxy)


def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class VisitIngestor:
    def __init__(
        self,
        store: VisitStore,
        geolocator: Geolocator,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.geolocator = geolocator
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def ingest(self, raw_payload: Any, meta: RequestMetadata) -> VisitRecord:
        origin = resolve_client_origin(meta.headers, meta.remote_addr, meta.trust_proxy)
        fields = TrackRequest.from_payload(raw_payload)
        lookup = self.enrich(origin)
        record = VisitRecord(
            id=secrets.token_urlsafe(VISIT_ID_BYTES),
            timestamp=utc_timestamp(self.clock()),
            client_origin=origin,
            user_agent=clean_text(meta.user_agent, FIELD_LIMITS["user_agent"]),
            page=fields.page,
            referrer=fields.referrer,
            timezone=fields.tz,
            languages=tuple(fields.languages),
            screen=fields.screen,
            geo=lookup.location,
        )
        return self.store.add(record)

    def enrich(self, origin: str) -> GeoLookup:
        if not origin or is_private_address(origin):
            return SKIPPED
        return self.geolocator.locate(origin)


__all__ = ["RequestMetadata", "VisitIngestor", "utc_timestamp"]
