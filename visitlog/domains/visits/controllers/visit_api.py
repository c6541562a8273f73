"""Visit API controllers: public tracking beacon and gated listing."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from visitlog.core.utils.decorators import require_session
from visitlog.domains.visits.mappers import map_visit
from visitlog.domains.visits.services import RequestMetadata, StorageError
from visitlog.extensions import limiter

visit_api_bp = Blueprint("visit_api", __name__)


def _track_limit() -> str:
    return current_app.config["RATELIMIT_TRACK"]


@visit_api_bp.post("/track")
@limiter.limit(_track_limit)
def track():
    payload = request.get_json(silent=True)
    meta = RequestMetadata.from_request(request, trust_proxy=current_app.config.get("TRUST_PROXY", True))
    ingestor = current_app.extensions["visit_ingestor"]
    try:
        record = ingestor.ingest(payload, meta)
    except StorageError:
        return jsonify({"ok": False, "error": "storage_error"}), 500
    return jsonify({"ok": True, "id": record.id}), 201


@visit_api_bp.get("/visitors")
@require_session
def list_visitors():
    store = current_app.extensions["visit_store"]
    try:
        records = store.list(request.args.get("limit"))
    except StorageError:
        return jsonify({"ok": False, "error": "storage_error"}), 500
    return jsonify([map_visit(r) for r in records])
