from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from fieldservice.core.security import create_access_token
from fieldservice.db.session import get_db, init_db
from fieldservice.main import app
from fieldservice.services.labels import LabelCache

OWNER_A = "owner-a"
OWNER_B = "owner-b"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def label_cache() -> LabelCache:
    return LabelCache()


@pytest.fixture
def api(engine, label_cache: LabelCache) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        with Session(engine) as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    previous_cache = app.state.label_cache
    app.state.label_cache = label_cache
    yield TestClient(app)
    app.state.label_cache = previous_cache
    app.dependency_overrides.clear()


def _auth(owner_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}


@pytest.fixture
def owner_headers() -> dict[str, str]:
    return _auth(OWNER_A)


@pytest.fixture
def other_headers() -> dict[str, str]:
    return _auth(OWNER_B)


@pytest.fixture
def client_id(api: TestClient, owner_headers: dict[str, str]) -> str:
    response = api.post(
        "/api/v1/clients",
        json={"client_type": "private", "contact_name": "Dana Levi", "phone": "050-1234567", "city": "Haifa"},
        headers=owner_headers,
    )
    assert response.status_code == 200, response.text
    return response.json()["id"]
