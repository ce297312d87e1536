from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from fieldservice.db.session import init_db

CLIENTS = "/api/v1/clients"


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def engine():
    # the production stores enforce foreign keys, SQLite only does when asked
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    init_db(bind=engine)
    yield engine
    engine.dispose()


def test_company_client_display_name(api: TestClient, owner_headers: dict[str, str]) -> None:
    response = api.post(
        CLIENTS,
        json={
            "client_type": "company",
            "contact_name": "Moshe",
            "company_name": "Acme Hotels",
            "phone": "04-8123456",
            "email": "",
        },
        headers=owner_headers,
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["display_name"] == "Acme Hotels"
    assert body["email"] is None
    assert body["status"] == "active"


def test_private_client_display_name(api: TestClient, owner_headers: dict[str, str], client_id: str) -> None:
    body = api.get(f"{CLIENTS}/{client_id}", headers=owner_headers).json()

    assert body["display_name"] == "Dana Levi"
    assert body["jobs"] == []


def test_company_client_requires_company_name(api: TestClient, owner_headers: dict[str, str]) -> None:
    response = api.post(
        CLIENTS,
        json={"client_type": "company", "contact_name": "Moshe", "phone": "04-8123456"},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Company name is required for company clients"


def test_blank_contact_name_is_rejected(api: TestClient, owner_headers: dict[str, str]) -> None:
    response = api.post(CLIENTS, json={"contact_name": "  ", "phone": "050"}, headers=owner_headers)

    assert response.status_code == 400


def test_quick_create_drops_company_name_for_private(api: TestClient, owner_headers: dict[str, str]) -> None:
    response = api.post(
        f"{CLIENTS}/quick",
        json={"client_type": "private", "contact_name": "Rina", "phone": "054-1111111", "company_name": "Ignored"},
        headers=owner_headers,
    )

    assert response.status_code == 200
    assert response.json()["company_name"] == ""
    assert response.json()["display_name"] == "Rina"


def test_search_and_filters(api: TestClient, owner_headers: dict[str, str], client_id: str) -> None:
    api.post(
        CLIENTS,
        json={"client_type": "company", "contact_name": "Moshe", "company_name": "Acme Hotels", "phone": "04-8123456",
              "city": "Eilat", "status": "inactive"},
        headers=owner_headers,
    )

    assert [c["id"] for c in api.get(CLIENTS, params={"q": "haifa"}, headers=owner_headers).json()] == [client_id]
    assert len(api.get(CLIENTS, params={"q": "acme"}, headers=owner_headers).json()) == 1
    assert len(api.get(CLIENTS, params={"q": "050-123"}, headers=owner_headers).json()) == 1
    assert len(api.get(CLIENTS, params={"client_type": "company"}, headers=owner_headers).json()) == 1
    assert len(api.get(CLIENTS, params={"status": "active"}, headers=owner_headers).json()) == 1
    assert len(api.get(CLIENTS, headers=owner_headers).json()) == 2


def test_update_and_delete_client(api: TestClient, owner_headers: dict[str, str], client_id: str) -> None:
    updated = api.patch(f"{CLIENTS}/{client_id}", json={"city": "Akko", "tags": ["vip"]}, headers=owner_headers)
    assert updated.status_code == 200
    assert updated.json()["city"] == "Akko"
    assert updated.json()["tags"] == ["vip"]

    invalid = api.patch(f"{CLIENTS}/{client_id}", json={"client_type": "company"}, headers=owner_headers)
    assert invalid.status_code == 400
    assert api.get(f"{CLIENTS}/{client_id}", headers=owner_headers).json()["client_type"] == "private"

    assert api.delete(f"{CLIENTS}/{client_id}", headers=owner_headers).status_code == 200
    assert api.get(f"{CLIENTS}/{client_id}", headers=owner_headers).status_code == 404


def test_client_with_jobs_and_quotes_can_be_deleted(
    api: TestClient, owner_headers: dict[str, str], client_id: str
) -> None:
    job = api.post(
        "/api/v1/jobs", json={"title": "Bathtub coating", "client_id": client_id}, headers=owner_headers
    ).json()
    quote = api.post(
        "/api/v1/quotes",
        json={"client_id": client_id, "line_items": [{"description": "Sealant", "quantity": 1, "unit_price": 50}]},
        headers=owner_headers,
    ).json()

    assert api.delete(f"{CLIENTS}/{client_id}", headers=owner_headers).status_code == 200

    kept_job = api.get(f"/api/v1/jobs/{job['id']}", headers=owner_headers).json()
    kept_quote = api.get(f"/api/v1/quotes/{quote['id']}", headers=owner_headers).json()
    assert kept_job["client_id"] == client_id
    assert kept_job["client_name"] == "Dana Levi"
    assert kept_quote["client_id"] == client_id
    assert kept_quote["client_name"] == "Dana Levi"
