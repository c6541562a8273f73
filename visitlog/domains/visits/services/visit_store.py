"""Size-bounded visit log backed by a single SQLite file."""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional

from sqlalchemy import delete, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from visitlog.domains.visits.mappers import record_to_row, row_to_record
from visitlog.domains.visits.models.visit_models import Visit
from visitlog.domains.visits.models.visit_record import VisitRecord
from visitlog.extensions import db

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 200
MAX_LIST_LIMIT = 1000


class StorageError(Exception):
    """Raised when the visit store cannot read or write."""


def resolve_limit(raw: Any, default: int = DEFAULT_LIST_LIMIT, ceiling: int = MAX_LIST_LIMIT) -> int:
    """Clamp a requested page size; missing, non-integer or non-positive values get the default."""
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        limit = default
    if limit <= 0:
        limit = default
    return min(limit, ceiling)


def configure_sqlite(engine: Engine) -> None:
    """WAL journal with synchronous commits, applied on every new connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=FULL")
        cursor.close()


class VisitStore:
    """Append-only visit log capped at ``max_records`` rows.

    ``add`` appends and prunes under one lock so concurrent ingests never
    interleave and every prune sees the append that triggered it.
    """

    def __init__(
        self,
        max_records: int,
        *,
        default_limit: int = DEFAULT_LIST_LIMIT,
        max_limit: int = MAX_LIST_LIMIT,
        session=None,
    ):
        if max_records <= 0:
            raise ValueError("max_records must be positive")
        self.max_records = max_records
        self.default_limit = default_limit
        self.max_limit = max_limit
        self._session = session
        self._write_lock = threading.Lock()

    @property
    def session(self):
        return self._session or db.session

    def add(self, record: VisitRecord) -> VisitRecord:
        with self._write_lock:
            self.append(record)
            self.prune(self.max_records)
        return record

    def append(self, record: VisitRecord) -> None:
        try:
            self.session.add(record_to_row(record))
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to append visit %s", record.id)
            raise StorageError("append failed") from exc

    def prune(self, max_count: int) -> int:
        """Delete the oldest rows beyond ``max_count``; returns the number deleted."""
        try:
            total = self.count()
            if total <= max_count:
                return 0
            excess = total - max_count
            oldest = select(Visit.seq).order_by(Visit.ts.asc(), Visit.seq.asc()).limit(excess)
            deleted = self.session.execute(delete(Visit).where(Visit.seq.in_(oldest))).rowcount
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to prune visit log")
            raise StorageError("prune failed") from exc
        logger.info("Pruned %s visits (cap %s)", deleted, max_count)
        return deleted

    def list(self, limit: Any = None, max_limit: Optional[int] = None) -> List[VisitRecord]:
        """Most recent records first."""
        ceiling = self.max_limit if max_limit is None else max_limit
        size = resolve_limit(limit, self.default_limit, ceiling)
        try:
            rows = self.session.scalars(
                select(Visit).order_by(Visit.ts.desc(), Visit.seq.desc()).limit(size)
            ).all()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("Failed to list visits")
            raise StorageError("list failed") from exc
        return [row_to_record(row) for row in rows]

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(Visit)) or 0


__all__ = ["StorageError", "VisitStore", "configure_sqlite", "resolve_limit"]
