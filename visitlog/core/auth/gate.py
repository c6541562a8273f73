"""Read authorization for stored visits."""

from __future__ import annotations

from typing import Optional, Union

from visitlog.core.auth.constants import DENIED_INVALID_TOKEN, DENIED_MISSING_TOKEN
from visitlog.core.auth.session_models import Denied, Session
from visitlog.core.auth.session_registry import SessionRegistry


def bearer_token(header: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        return None
    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token:
        return None
    return token


def authorize_read(registry: SessionRegistry, token: Optional[str]) -> Union[Session, Denied]:
    """Renew the caller's session, or say why the read is refused."""
    if not token:
        return Denied(DENIED_MISSING_TOKEN)
    session = registry.renew(token)
    if session is None:
        return Denied(DENIED_INVALID_TOKEN)
    return session


__all__ = ["authorize_read", "bearer_token"]
