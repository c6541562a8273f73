"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import current_app, g, jsonify, request

from visitlog.core.auth.gate import authorize_read, bearer_token
from visitlog.core.auth.session_models import Denied

F = TypeVar("F", bound=Callable)


def require_session(fn: F) -> F:
    """Enforce a live bearer session; the renewed session lands on ``g.session``."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        registry = current_app.extensions["session_registry"]
        result = authorize_read(registry, bearer_token(request.headers.get("Authorization")))
        if isinstance(result, Denied):
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        g.session = result
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
