"""Shared extensions for the visitlog application."""

from flask_limiter import Limiter
from flask_sqlalchemy import SQLAlchemy

from visitlog.core.utils.network import client_origin_key

# Persistence and request throttling; limiter settings come from RATELIMIT_* config
db = SQLAlchemy(session_options={"expire_on_commit": False})
limiter = Limiter(key_func=client_origin_key)


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    db.init_app(app)
    limiter.init_app(app)
