import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from visitlog import create_app
from visitlog.core.auth.credential import derive_secret
from visitlog.extensions import db

OPERATOR_PASSPHRASE = "correct-horse-battery-staple!!"
# Cheap scrypt cost keeps the suite fast; production uses N=16384.
TEST_SCRYPT_N = 1024


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")


@pytest.fixture(scope="session")
def admin_secret() -> str:
    return derive_secret(OPERATOR_PASSPHRASE, n=TEST_SCRYPT_N)


@pytest.fixture()
def app_overrides(tmp_path, admin_secret) -> dict:
    """Per-test config; tests may mutate this before requesting ``app``."""
    return {
        "ADMIN_PASSWORD_SECRET": admin_secret,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'visitors.db'}",
    }


@pytest.fixture()
def app(app_overrides):
    """Create a per-test app backed by its own sqlite file."""
    app = create_app("testing", overrides=app_overrides)
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        app.extensions["session_registry"].stop()
        db.session.remove()
        db.engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def auth_headers(client):
    """Bearer headers for a freshly logged-in operator."""
    resp = client.post("/api/login", json={"password": OPERATOR_PASSPHRASE})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture()
def operator_passphrase() -> str:
    return OPERATOR_PASSPHRASE
