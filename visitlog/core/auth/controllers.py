"""Auth HTTP controllers (API only)."""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from visitlog.core.auth.gate import bearer_token
from visitlog.core.auth.schemas import LoginRequest, LoginResponse
from visitlog.core.utils.network import client_origin_key
from visitlog.extensions import limiter

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth_api", __name__)


def _login_limit() -> str:
    return current_app.config["RATELIMIT_LOGIN"]


def _jsonable_errors(exc: ValidationError) -> list[dict]:
    errors = exc.errors(include_input=False)
    for err in errors:
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
    return errors


@auth_bp.post("/login")
@limiter.limit(_login_limit)
def login():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    try:
        data = LoginRequest.model_validate(payload)
    except ValidationError as exc:
        return (
            jsonify({"ok": False, "error": "bad_request", "details": _jsonable_errors(exc)}),
            400,
        )

    verifier = current_app.extensions["credential_verifier"]
    if not verifier.verify(data.password):
        logger.warning("Rejected operator login from %s", client_origin_key())
        return jsonify({"ok": False, "error": "invalid_credentials"}), 401

    registry = current_app.extensions["session_registry"]
    session = registry.issue()
    logger.info("Operator session issued for %s", client_origin_key())
    body = LoginResponse(
        token=session.token,
        expiresIn=int(registry.ttl_seconds),
        expiresAt=session.expires_at_ms,
    )
    return jsonify(body.model_dump())


@auth_bp.post("/logout")
def logout():
    registry = current_app.extensions["session_registry"]
    registry.revoke(bearer_token(request.headers.get("Authorization")))
    return "", 204
