"""visitlog application factory and bootstrap."""

from __future__ import annotations

import atexit
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask, request

from visitlog.config import MIN_MAX_RECORDS, MIN_SESSION_MINUTES, config_by_name
from visitlog.core.auth.credential import Credential, CredentialVerifier
from visitlog.core.auth.session_registry import SessionRegistry
from visitlog.extensions import db, init_extensions

logger = logging.getLogger(__name__)


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the visitlog Flask application.

    Raises ``CredentialConfigError`` when ADMIN_PASSWORD_SECRET is missing or
    malformed, so a misconfigured process never serves traffic.
    """
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent

    app = Flask(__name__, instance_path=str(project_root / "instance"))
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)

    app.config["SESSION_MINUTES"] = max(MIN_SESSION_MINUTES, int(app.config["SESSION_MINUTES"]))
    app.config["MAX_RECORDS"] = max(MIN_MAX_RECORDS, int(app.config["MAX_RECORDS"]))

    # Parse before anything else touches disk.
    credential = Credential.parse(app.config.get("ADMIN_PASSWORD_SECRET"))

    # Normalize sqlite path to absolute and make sure its directory exists
    db_uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if db_uri.startswith("sqlite:///"):
        db_path = Path(db_uri.replace("sqlite:///", "", 1))
        if not db_path.is_absolute():
            db_path = project_root / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{db_path}"

    init_extensions(app)
    _init_components(app, credential)
    _register_blueprints(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    logger.info(
        "visitlog ready (session_minutes=%s, max_records=%s, geolookup=%s, trust_proxy=%s)",
        app.config["SESSION_MINUTES"],
        app.config["MAX_RECORDS"],
        app.config["GEOLOOKUP"],
        app.config["TRUST_PROXY"],
    )
    return app


def _init_components(app: Flask, credential: Credential) -> None:
    """Build the owned components and attach them to ``app.extensions``."""
    from visitlog.domains.visits.services import VisitIngestor, VisitStore, build_geolocator
    from visitlog.domains.visits.services.visit_store import configure_sqlite

    with app.app_context():
        if db.engine.dialect.name == "sqlite":
            configure_sqlite(db.engine)
        db.create_all()

    registry = SessionRegistry(
        ttl_seconds=app.config["SESSION_MINUTES"] * 60,
        reap_interval=float(app.config["SESSION_REAP_SECONDS"]),
    )
    store = VisitStore(
        app.config["MAX_RECORDS"],
        default_limit=app.config["VISITORS_DEFAULT_LIMIT"],
        max_limit=app.config["VISITORS_MAX_LIMIT"],
    )
    geolocator = build_geolocator(app.config)

    app.extensions["credential_verifier"] = CredentialVerifier(credential)
    app.extensions["session_registry"] = registry
    app.extensions["visit_store"] = store
    app.extensions["geolocator"] = geolocator
    app.extensions["visit_ingestor"] = VisitIngestor(store, geolocator)

    if app.config.get("SESSION_REAPER_ENABLED", True):
        registry.start()
        atexit.register(registry.stop)


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from visitlog.core.auth.controllers import auth_bp  # local import to avoid circulars
    from visitlog.domains.visits.controllers.visit_api import visit_api_bp

    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(visit_api_bp, url_prefix="/api")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses with a stable ``ok``/``error`` shape."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        # "Method Not Allowed" -> "method_not_allowed"
        kind = (exc.name or "error").lower().replace(" ", "_")
        return {"ok": False, "error": kind}, exc.code

    @app.errorhandler(404)
    def _not_found(exc: HTTPException):
        logger.debug("No route for %s %s", request.method, request.path)
        return {"ok": False, "error": "not_found"}, 404

    @app.errorhandler(413)
    def _too_large(exc: HTTPException):
        return {"ok": False, "error": "payload_too_large"}, 413

    @app.errorhandler(429)
    def _rate_limited(exc: HTTPException):
        return {"ok": False, "error": "rate_limited"}, 429

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500
