from visitlog.domains.visits.services.geolocation import (
    DisabledGeolocator,
    GeoLookup,
    GeoStatus,
    IpApiGeolocator,
    build_geolocator,
)
from visitlog.domains.visits.services.ingest_service import RequestMetadata, VisitIngestor
from visitlog.domains.visits.services.visit_store import StorageError, VisitStore, resolve_limit

__all__ = [
    "DisabledGeolocator",
    "GeoLookup",
    "GeoStatus",
    "IpApiGeolocator",
    "build_geolocator",
    "RequestMetadata",
    "VisitIngestor",
    "StorageError",
    "VisitStore",
    "resolve_limit",
]
