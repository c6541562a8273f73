from __future__ import annotations

import pytest
from click.testing import CliRunner

pytestmark = pytest.mark.unit

from visitlog import create_app
from visitlog.core.auth.commands import generate_secret_command
from visitlog.core.auth.credential import Credential, CredentialConfigError, CredentialVerifier
from visitlog.extensions import db


@pytest.fixture()
def build_app():
    """Create apps outside the shared fixture and tear them down afterwards."""
    created = []

    def _build(overrides):
        app = create_app("testing", overrides=overrides)
        created.append(app)
        return app

    yield _build
    for app in created:
        app.extensions["session_registry"].stop()
        with app.app_context():
            db.session.remove()
            db.engine.dispose()


@pytest.mark.parametrize("secret", [None, "", "not-a-secret", "scrypt:1024:8:1:00:00"])
def test_missing_or_malformed_secret_refuses_to_start(app_overrides, secret):
    app_overrides["ADMIN_PASSWORD_SECRET"] = secret
    with pytest.raises(CredentialConfigError):
        create_app("testing", overrides=app_overrides)


def test_config_floors_are_enforced(app_overrides, build_app):
    app_overrides.update({"SESSION_MINUTES": 1, "MAX_RECORDS": 10})
    app = build_app(app_overrides)
    assert app.config["SESSION_MINUTES"] == 5
    assert app.config["MAX_RECORDS"] == 100
    assert app.extensions["session_registry"].ttl_seconds == 5 * 60
    assert app.extensions["visit_store"].max_records == 100


def test_components_are_wired(app):
    for name in ("credential_verifier", "session_registry", "visit_store", "geolocator", "visit_ingestor"):
        assert name in app.extensions
    assert app.extensions["visit_ingestor"].store is app.extensions["visit_store"]
    assert not app.extensions["session_registry"].running


def test_reaper_starts_when_enabled(app_overrides, build_app):
    app_overrides["SESSION_REAPER_ENABLED"] = True
    app = build_app(app_overrides)
    assert app.extensions["session_registry"].running


def test_database_file_is_created(app, app_overrides):
    path = app_overrides["SQLALCHEMY_DATABASE_URI"].replace("sqlite:///", "", 1)
    with open(path, "rb") as fh:
        assert fh.read(16) == b"SQLite format 3\x00"


def test_generate_secret_with_passphrase():
    result = CliRunner().invoke(generate_secret_command, ["a long enough passphrase", "--n", "1024"])
    assert result.exit_code == 0, result.output
    secret = result.output.strip().splitlines()[-1]
    assert secret.startswith("scrypt:1024:8:1:")
    assert CredentialVerifier(Credential.parse(secret)).verify("a long enough passphrase")


def test_generate_secret_random_passphrase():
    result = CliRunner().invoke(generate_secret_command, ["--n", "1024"])
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    passphrase = lines[lines.index("Passphrase:") + 1]
    assert len(passphrase) >= 64
    assert CredentialVerifier(Credential.parse(lines[-1])).verify(passphrase)


def test_generate_secret_rejects_short_passphrase():
    result = CliRunner().invoke(generate_secret_command, ["short"])
    assert result.exit_code != 0
    assert "at least 12 characters" in result.output
