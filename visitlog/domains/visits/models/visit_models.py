"""Visit persistence model."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy.orm import Mapped, mapped_column

from visitlog.extensions import db


class Visit(db.Model):
    __tablename__ = "visits"
    __table_args__ = (
        db.Index("idx_visits_ts", "ts"),
        db.Index("idx_visits_ip", "ip"),
    )

    # Monotonic insertion sequence; breaks ties between identical timestamps.
    seq: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(db.String(32), unique=True, nullable=False)
    ts: Mapped[str] = mapped_column(db.String(32), nullable=False)
    ip: Mapped[Optional[str]] = mapped_column(db.String(64), nullable=True)
    ua: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    page: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    referrer: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    tz: Mapped[Optional[str]] = mapped_column(db.String(128), nullable=True)
    languages: Mapped[list[str]] = mapped_column(db.JSON, nullable=False, default=list)
    screen: Mapped[Optional[str]] = mapped_column(db.String(64), nullable=True)
    geo: Mapped[Optional[dict[str, Any]]] = mapped_column(db.JSON, nullable=True)
