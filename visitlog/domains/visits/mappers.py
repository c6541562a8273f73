"""Mappers between visit records, rows and API payloads."""

from __future__ import annotations

from dataclasses import asdict

from visitlog.domains.visits.models.visit_models import Visit
from visitlog.domains.visits.models.visit_record import GeoLocation, VisitRecord


def record_to_row(record: VisitRecord) -> Visit:
    return Visit(
        id=record.id,
        ts=record.timestamp,
        ip=record.client_origin,
        ua=record.user_agent,
        page=record.page,
        referrer=record.referrer,
        tz=record.timezone,
        languages=list(record.languages),
        screen=record.screen,
        geo=asdict(record.geo) if record.geo is not None else None,
    )


def row_to_record(row: Visit) -> VisitRecord:
    geo = GeoLocation(**row.geo) if isinstance(row.geo, dict) else None
    return VisitRecord(
        id=row.id,
        timestamp=row.ts,
        client_origin=row.ip or "",
        user_agent=row.ua,
        page=row.page,
        referrer=row.referrer,
        timezone=row.tz,
        languages=tuple(row.languages or ()),
        screen=row.screen,
        geo=geo,
    )


def map_visit(record: VisitRecord) -> dict:
    return {
        "id": record.id,
        "ts": record.timestamp,
        "ip": record.client_origin,
        "ua": record.user_agent,
        "page": record.page,
        "referrer": record.referrer,
        "tz": record.timezone,
        "languages": list(record.languages),
        "screen": record.screen,
        "geo": asdict(record.geo) if record.geo is not None else None,
    }
