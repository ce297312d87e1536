from __future__ import annotations

from fastapi.testclient import TestClient
from sqlmodel import Session

from fieldservice.models.app_config import AppConfig
from fieldservice.services.labels import FALLBACK_COLOR, LabelCache, configs_from_rows, resolve_label
from fieldservice.services.status_flow import EntityKind, get_next_allowed


def test_defaults_apply_without_overrides() -> None:
    assert resolve_label("job_statuses", "done") == {"value": "done", "label": "Done", "color": "#10b981"}


def test_unknown_value_falls_back_to_raw_value() -> None:
    assert resolve_label("job_priorities", "whenever") == {
        "value": "whenever",
        "label": "whenever",
        "color": FALLBACK_COLOR,
    }


def test_overrides_replace_label_and_color() -> None:
    configs = configs_from_rows([
        AppConfig(
            owner_id="owner-a",
            config_type="job_statuses",
            config_data={"statuses": [{"value": "done", "label": "Finished", "color": "#000000"}]},
        )
    ])

    assert resolve_label("job_statuses", "done", configs)["label"] == "Finished"
    assert resolve_label("job_statuses", "quote", configs)["label"] == "Quote"
    # labels never change what is legal
    assert get_next_allowed(EntityKind.JOB, "done") == frozenset()


def test_client_status_categories_merge_for_lookup() -> None:
    configs = configs_from_rows([
        AppConfig(
            owner_id="owner-a",
            config_type="client_statuses_company",
            config_data={"statuses": [{"value": "vip", "label": "VIP", "color": "#f59e0b"}]},
        )
    ])

    assert resolve_label("client_statuses", "vip", configs)["label"] == "VIP"
    assert resolve_label("client_statuses", "active", configs)["label"] == "Active"


def test_cache_memoizes_per_owner_until_invalidated(session: Session) -> None:
    loads: list[str] = []

    def loader(db: Session, owner_id: str) -> dict:
        loads.append(owner_id)
        return {}

    cache = LabelCache(loader)
    cache.get(session, "owner-a")
    cache.get(session, "owner-a")
    cache.get(session, "owner-b")
    assert loads == ["owner-a", "owner-b"]
    assert "owner-a" in cache

    cache.invalidate("owner-a")
    assert "owner-a" not in cache
    cache.get(session, "owner-a")
    assert loads == ["owner-a", "owner-b", "owner-a"]

    cache.clear()
    assert "owner-b" not in cache


def test_separate_caches_are_isolated(session: Session) -> None:
    first, second = LabelCache(), LabelCache()
    first.get(session, "owner-a")

    assert "owner-a" in first
    assert "owner-a" not in second


def test_saving_config_invalidates_owner_labels(
    api: TestClient, owner_headers: dict[str, str], label_cache: LabelCache
) -> None:
    before = api.get("/api/v1/labels/job_statuses", headers=owner_headers).json()
    assert {"value": "done", "label": "Done", "color": "#10b981"} in before
    assert "owner-a" in label_cache

    saved = api.put(
        "/api/v1/configs/job_statuses",
        json={"statuses": [{"value": "done", "label": "Finished", "color": "#111111"}]},
        headers=owner_headers,
    )
    assert saved.status_code == 200
    assert "owner-a" not in label_cache

    after = api.get("/api/v1/labels/job_statuses", headers=owner_headers).json()
    assert {"value": "done", "label": "Finished", "color": "#111111"} in after
    assert len(api.get("/api/v1/configs", headers=owner_headers).json()) == 1

    reset = api.delete("/api/v1/configs/job_statuses", headers=owner_headers)
    assert reset.status_code == 200
    restored = api.get("/api/v1/labels/job_statuses", headers=owner_headers).json()
    assert {"value": "done", "label": "Done", "color": "#10b981"} in restored


def test_overrides_are_per_owner(
    api: TestClient, owner_headers: dict[str, str], other_headers: dict[str, str]
) -> None:
    api.put(
        "/api/v1/configs/job_priorities",
        json={"statuses": [{"value": "urgent", "label": "ASAP", "color": "#ff0000"}]},
        headers=owner_headers,
    )

    other = api.get("/api/v1/labels/job_priorities", headers=other_headers).json()
    assert {"value": "urgent", "label": "Urgent", "color": "#ef4444"} in other


def test_unknown_category_and_config_type(api: TestClient, owner_headers: dict[str, str]) -> None:
    assert api.get("/api/v1/labels/colors", headers=owner_headers).status_code == 404
    assert api.put(
        "/api/v1/configs/colors", json={"statuses": []}, headers=owner_headers
    ).status_code == 422
    assert api.delete("/api/v1/configs/job_statuses", headers=owner_headers).status_code == 404
