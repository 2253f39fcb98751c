"""
Pytest configuration and fixtures for protoplan tests.

The database, storage directory and log directory are pointed at a temporary
location through environment variables before anything from ``protoplan`` is
imported, since settings and the engine are built at import time.
"""

import io
import os
import sys
import tempfile
from pathlib import Path

import pytest

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="protoplan-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'test.db'}"
os.environ["STORAGE_DIR"] = str(_TEST_ROOT / "storage")
os.environ["LOG_DIR"] = str(_TEST_ROOT / "logs")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["PLAN_GENERATION_DELAY_SECONDS"] = "0"
os.environ["SECRET_KEY"] = "test-secret"

backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))


@pytest.fixture(scope="session")
def backend_root():
    """Return the backend root directory."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def storage_dir():
    """Return the temporary storage root used by the whole test session."""
    from protoplan.core.config import settings
    return Path(settings.STORAGE_DIR)


@pytest.fixture
def clean_db():
    """Recreate all tables so each test starts from an empty database."""
    from protoplan.core.db import Base, engine, init_db

    init_db()
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield
    engine.dispose()


@pytest.fixture
def db_session(clean_db):
    from protoplan.core.db import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(clean_db):
    from fastapi.testclient import TestClient
    from protoplan.main import app

    return TestClient(app)


@pytest.fixture
def register_user(client):
    """
    Factory registering a user and returning bearer auth headers.

    Usage:
        def test_something(register_user):
            headers = register_user("alice")
    """
    def _register(username: str = "alice", password: str = "correct-horse") -> dict:
        resp = client.post(
            "/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": password},
        )
        assert resp.status_code == 201, resp.text
        resp = client.post("/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _register


@pytest.fixture
def auth_headers(register_user):
    return register_user("alice")


@pytest.fixture
def project(client, auth_headers):
    """A project owned by the ``auth_headers`` user."""
    resp = client.post("/projects/", json={"name": "Checkout Flow", "description": "Cart and payment"}, headers=auth_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def png_bytes():
    """
    Factory returning encoded PNG bytes.

    Usage:
        data = png_bytes(size=(64, 40), mode="RGBA")
    """
    from PIL import Image

    def _make(size=(64, 40), mode="RGB", color=None) -> bytes:
        color = color if color is not None else ((30, 120, 200, 128) if mode == "RGBA" else (30, 120, 200))
        buf = io.BytesIO()
        Image.new(mode, size, color).save(buf, format="PNG")
        return buf.getvalue()

    return _make


# Pytest hooks
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )


def pytest_collection_modifyitems(config, items):
    """Mark tests by directory: tests/unit -> unit, tests/integration -> integration."""
    for item in items:
        if "unit/" in item.nodeid:
            item.add_marker(pytest.mark.unit)
        elif "integration/" in item.nodeid:
            item.add_marker(pytest.mark.integration)
