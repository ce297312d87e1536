from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi.testclient import TestClient
from sqlmodel import Session

from fieldservice.models.client import Client
from fieldservice.models.job import Job
from fieldservice.services import dashboard

OWNER = "owner-a"
TODAY = date(2025, 3, 10)


def _seed(session: Session) -> dict[str, Job]:
    busy = Client(owner_id=OWNER, contact_name="Dana", phone="050")
    idle = Client(owner_id=OWNER, contact_name="Rina", phone="054")
    session.add(busy)
    session.add(idle)
    session.commit()

    jobs = {
        "today": Job(owner_id=OWNER, client_id=busy.id, title="Coating", status="waiting_execution",
                     scheduled_date="2025-03-10", scheduled_time="14:00", scheduled_at="2025-03-10T14:00:00"),
        "later": Job(owner_id=OWNER, client_id=busy.id, title="Sink", status="waiting_execution",
                     scheduled_date="2025-03-12", scheduled_time="09:00", scheduled_at="2025-03-12T09:00:00"),
        "open": Job(owner_id=OWNER, client_id=busy.id, title="Tiles", status="waiting_schedule"),
        "done": Job(owner_id=OWNER, client_id=busy.id, title="Grout", status="done",
                    completed_at=datetime(2025, 3, 10, 11, 0, tzinfo=timezone.utc).isoformat()),
        "foreign": Job(owner_id="owner-b", title="Other", status="waiting_schedule"),
    }
    for job in jobs.values():
        session.add(job)
    session.commit()
    return jobs


def test_summary_counts_and_lists(session: Session) -> None:
    jobs = _seed(session)

    summary = dashboard.summarize(session, OWNER, today=TODAY)

    assert summary["total_clients"] == 2
    assert summary["total_jobs"] == 4
    assert summary["jobs_by_status"] == {"quote": 0, "waiting_schedule": 1, "waiting_execution": 2, "done": 1}
    assert [j.id for j in summary["today_jobs"]] == [jobs["today"].id]
    assert [j.id for j in summary["completed_today"]] == [jobs["done"].id]
    assert [j.id for j in summary["unscheduled_jobs"]] == [jobs["open"].id]
    assert [c.contact_name for c in summary["idle_clients"]] == ["Rina"]


def test_calendar_range_is_inclusive(session: Session) -> None:
    jobs = _seed(session)

    in_range = dashboard.jobs_between(session, OWNER, date(2025, 3, 10), date(2025, 3, 12))
    first_day = dashboard.jobs_between(session, OWNER, TODAY, TODAY)

    assert [j.id for j in in_range] == [jobs["today"].id, jobs["later"].id]
    assert [j.id for j in first_day] == [jobs["today"].id]


def test_dashboard_endpoints(api: TestClient, owner_headers: dict[str, str], client_id: str) -> None:
    api.post(
        "/api/v1/jobs",
        json={"title": "Coating", "client_id": client_id, "scheduled_date": "2025-03-10", "scheduled_time": "14:00"},
        headers=owner_headers,
    )

    overview = api.get("/api/v1/dashboard", headers=owner_headers)
    assert overview.status_code == 200
    assert overview.json()["total_jobs"] == 1
    assert overview.json()["jobs_by_status"]["waiting_execution"] == 1

    calendar = api.get(
        "/api/v1/dashboard/calendar", params={"start": "2025-03-09", "end": "2025-03-15"}, headers=owner_headers
    )
    assert calendar.status_code == 200
    assert [j["scheduled_at"] for j in calendar.json()] == ["2025-03-10T14:00:00"]

    backwards = api.get(
        "/api/v1/dashboard/calendar", params={"start": "2025-03-15", "end": "2025-03-09"}, headers=owner_headers
    )
    assert backwards.status_code == 400
