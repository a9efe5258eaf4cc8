import os

# settings are read at import time; point them at an in-memory database first
os.environ["DB_URL"] = "sqlite://"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["ENFORCE_DATE_NAMES"] = "true"
os.environ["MIN_PLAYERS_TO_START"] = "2"
os.environ["DEFAULT_BUY_IN"] = "50"
os.environ["DEFAULT_REBUY"] = "50"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from pokerclub.core.db import SessionLocal, engine  # noqa: E402
from pokerclub.core.security import create_access_token  # noqa: E402
from pokerclub.main import app  # noqa: E402
from pokerclub.models.db import Base  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {create_access_token('admin-1', 'admin', name='Admin')}"}


@pytest.fixture
def create_players(client, admin_headers):
    """Register players through the API and return their ids in order."""

    def _create(*names: str) -> list[str]:
        ids = []
        for name in names:
            response = client.post("/api/players", json={"name": name}, headers=admin_headers)
            assert response.status_code == 200, response.text
            ids.append(response.json()["id"])
        return ids

    return _create
