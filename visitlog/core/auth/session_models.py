"""Session envelopes handed out by the registry and the query gate."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """An issued bearer token and its absolute expiry (epoch seconds)."""

    token: str
    expires_at: float

    @property
    def expires_at_ms(self) -> int:
        return int(self.expires_at * 1000)


@dataclass(frozen=True)
class Denied:
    """Returned by the query gate instead of a session."""

    reason: str


__all__ = ["Session", "Denied"]
