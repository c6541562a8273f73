"""Process-local bearer token registry with sliding expiry."""

from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Callable, Dict, Optional

from visitlog.core.auth.constants import (
    DEFAULT_REAP_INTERVAL_SECONDS,
    DEFAULT_SESSION_TTL_SECONDS,
    MIN_SESSION_TTL_SECONDS,
    TOKEN_BYTES,
)
from visitlog.core.auth.session_models import Session

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps opaque tokens to expiry timestamps.

    Every operation takes the registry lock, so a token's expiry is never read
    and extended by two callers at once. Expired tokens are removed lazily on
    access and actively by the reaper thread (see ``start``/``stop``).
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        *,
        reap_interval: float = DEFAULT_REAP_INTERVAL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        if ttl_seconds < MIN_SESSION_TTL_SECONDS:
            raise ValueError(f"session ttl must be at least {MIN_SESSION_TTL_SECONDS} seconds")
        self.ttl_seconds = float(ttl_seconds)
        self.reap_interval = reap_interval
        self.clock = clock or time.time
        self._sessions: Dict[str, float] = {}
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._reaper: Optional[threading.Thread] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._sessions

    def issue(self) -> Session:
        token = secrets.token_urlsafe(TOKEN_BYTES)
        with self._lock:
            expires_at = self.clock() + self.ttl_seconds
            self._sessions[token] = expires_at
        return Session(token=token, expires_at=expires_at)

    def renew(self, token: Optional[str]) -> Optional[Session]:
        """Slide the expiry of a live token; drop it if it has already expired."""
        if not token:
            return None
        with self._lock:
            now = self.clock()
            expires_at = self._sessions.get(token)
            if expires_at is None:
                return None
            if expires_at < now:
                del self._sessions[token]
                return None
            expires_at = now + self.ttl_seconds
            self._sessions[token] = expires_at
        return Session(token=token, expires_at=expires_at)

    def authenticate(self, token: Optional[str]) -> bool:
        return self.renew(token) is not None

    def revoke(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def reap(self) -> int:
        """Delete every expired token; returns how many were removed."""
        with self._lock:
            now = self.clock()
            expired = [token for token, expires_at in self._sessions.items() if expires_at < now]
            for token in expired:
                del self._sessions[token]
        if expired:
            logger.debug("Reaped %s expired sessions", len(expired))
        return len(expired)

    # --- reaper lifecycle ---

    @property
    def running(self) -> bool:
        return self._reaper is not None and self._reaper.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._reaper = threading.Thread(target=self._reap_loop, name="session-reaper", daemon=True)
        self._reaper.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        reaper, self._reaper = self._reaper, None
        if reaper is not None and reaper is not threading.current_thread():
            reaper.join(timeout)

    def _reap_loop(self) -> None:
        while not self._stop_event.wait(self.reap_interval):
            try:
                self.reap()
            except Exception:
                logger.exception("Session reaper sweep failed")


__all__ = ["SessionRegistry"]
