"""Application configuration for visitlog."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Type

from dotenv import load_dotenv

load_dotenv()

MIN_SESSION_MINUTES = 5
MIN_MAX_RECORDS = 100


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


def _database_uri() -> str:
    data_root = Path(os.environ.get("DATA_DIR") or Path.cwd() / "data").resolve()
    db_file = os.environ.get("DATA_FILE", "visitors.db")
    return f"sqlite:///{data_root / db_file}"


class BaseConfig:
    """Base configuration loaded for all environments."""

    # Required. Format: scrypt:N:r:p:saltHex:hashHex (see `visitlog-generate-secret`).
    ADMIN_PASSWORD_SECRET = os.environ.get("ADMIN_PASSWORD_SECRET")

    SESSION_MINUTES = int(os.environ.get("SESSION_MINUTES", "30"))
    SESSION_REAP_SECONDS = float(os.environ.get("SESSION_REAP_SECONDS", "60"))
    SESSION_REAPER_ENABLED = True

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"timeout": 5}}
    MAX_RECORDS = int(os.environ.get("MAX_RECORDS", "5000"))
    VISITORS_DEFAULT_LIMIT = int(os.environ.get("VISITORS_DEFAULT_LIMIT", "200"))
    VISITORS_MAX_LIMIT = int(os.environ.get("VISITORS_MAX_LIMIT", "1000"))

    # ipapi|off
    GEOLOOKUP = os.environ.get("GEOLOOKUP", "ipapi").lower()
    GEO_TIMEOUT_SECONDS = float(os.environ.get("GEO_TIMEOUT_SECONDS", "3"))
    GEO_BASE_URL = os.environ.get("GEO_BASE_URL", "https://ipapi.co")

    # Only enable behind a proxy that overwrites CF-Connecting-IP, X-Forwarded-For
    # and X-Real-IP; otherwise clients choose their own origin and rate-limit key.
    TRUST_PROXY = _flag("TRUST_PROXY", "true")

    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_LOGIN = os.environ.get("RATELIMIT_LOGIN", "8 per 15 minutes")
    RATELIMIT_TRACK = os.environ.get("RATELIMIT_TRACK", "240 per minute")

    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", "8192"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///instance/test.db")
    SESSION_REAPER_ENABLED = False
    RATELIMIT_ENABLED = False
    GEOLOOKUP = "off"


class ProductionConfig(BaseConfig):
    ENV = "production"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
