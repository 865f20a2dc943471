import os
import tempfile
from pathlib import Path

_tmpdir = Path(tempfile.mkdtemp(prefix="spotbnb_test_"))
_db_path = _tmpdir / "test.db"

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_db_path.as_posix()}")
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", str(_tmpdir / "logs"))
os.environ.setdefault("MAX_REVIEW_IMAGES", "2")

import pytest
from fastapi.testclient import TestClient

from spotbnb.db.base import Base
from spotbnb.db.session import engine, SessionLocal
from spotbnb.main import create_app


@pytest.fixture()
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(clean_db):
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(clean_db):
    app = create_app()
    with TestClient(app) as c:
        yield c


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register(client):
    """Register a user and return ``(user_id, headers)``."""

    def _register(username: str, first_name: str = "Test", last_name: str = "User") -> tuple[int, dict[str, str]]:
        r = client.post(
            "/auth/register",
            json={
                "email": f"{username.lower()}@example.com",
                "username": username,
                "firstName": first_name,
                "lastName": last_name,
                "password": "password123",
            },
        )
        assert r.status_code == 201, r.text
        headers = auth_header(r.json()["access_token"])
        me = client.get("/me", headers=headers)
        assert me.status_code == 200, me.text
        return me.json()["id"], headers

    return _register


SPOT_PAYLOAD = {
    "address": "123 Disney Lane",
    "city": "San Francisco",
    "state": "California",
    "country": "United States of America",
    "lat": 37.7645358,
    "lng": -122.4730327,
    "name": "App Academy",
    "description": "Place where web developers are created",
    "price": 123,
}


@pytest.fixture()
def spot_payload() -> dict:
    return dict(SPOT_PAYLOAD)


@pytest.fixture()
def create_spot(client, spot_payload):
    def _create(headers: dict[str, str], **overrides) -> dict:
        r = client.post("/spots", json={**spot_payload, **overrides}, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
