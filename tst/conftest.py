"""
tst/conftest.py

The database URL and secrets are read when ``journal`` modules are imported,
so the environment is prepared before anything from the app is loaded.
"""

import os
import tempfile
from typing import Dict, Generator

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="journal-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.sqlite3')}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "correct-horse-battery"
for _name in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET", "OPENAI_API_KEY"):
    os.environ.pop(_name, None)

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from journal.app import app  # noqa: E402
from journal.shared.database import Base, SessionLocal, engine, init_db  # noqa: E402
from journal.shared.rate_limit import reset_action_limiters  # noqa: E402
from journal.auth.routes import ensure_admin  # noqa: E402
from journal.contact.routes import contact_rate_limiter  # noqa: E402
from journal.ai.client import get_openai_client  # noqa: E402

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> None:
    """Create every table once for the whole session."""
    init_db()


@pytest.fixture(autouse=True)
def _clean_state() -> Generator[None, None, None]:
    """Each test starts with empty tables and fresh rate limit windows."""
    contact_rate_limiter.reset()
    reset_action_limiters()
    get_openai_client.cache_clear()
    yield
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client() -> TestClient:
    """Client without the startup hook; tests insert the rows they need."""
    return TestClient(app)


@pytest.fixture
def admin_headers(client: TestClient, db: Session) -> Dict[str, str]:
    """Bearer header for the seeded admin account."""
    ensure_admin(db)
    response = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
