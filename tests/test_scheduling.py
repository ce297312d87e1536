from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from fieldservice.core.exceptions import IllegalTransition, ValidationFailed
from fieldservice.models.job import Job
from fieldservice.services import scheduling

NOW = datetime(2025, 3, 12, 9, 30, tzinfo=timezone.utc)


def _job(**kwargs) -> Job:
    kwargs.setdefault("owner_id", "owner-a")
    kwargs.setdefault("title", "Bathtub coating")
    return Job(**kwargs)


def test_scheduling_quote_job_advances_to_waiting_execution() -> None:
    job = _job(status="quote")

    scheduling.apply_schedule(job, "2025-03-10", "14:00", now=NOW)

    assert job.status == "waiting_execution"
    assert job.scheduled_date == "2025-03-10"
    assert job.scheduled_time == "14:00"
    assert job.scheduled_at == "2025-03-10T14:00:00"
    assert job.completed_at is None


def test_scheduling_accepts_date_and_time_objects() -> None:
    job = _job(status="waiting_schedule")

    scheduling.apply_schedule(job, date(2025, 3, 10), time(8, 5), now=NOW)

    assert job.scheduled_at == "2025-03-10T08:05:00"
    assert job.status == "waiting_execution"


def test_partial_schedule_is_stored_without_scheduled_at() -> None:
    job = _job(status="quote")

    scheduling.apply_schedule(job, "2025-03-10", None, now=NOW)

    assert job.scheduled_date == "2025-03-10"
    assert job.scheduled_time is None
    assert job.scheduled_at is None
    assert job.status == "quote"


def test_clearing_time_clears_scheduled_at_but_keeps_status() -> None:
    job = _job(status="quote")
    scheduling.apply_schedule(job, "2025-03-10", "14:00", now=NOW)

    scheduling.apply_schedule(job, "2025-03-10", "", now=NOW)

    assert job.scheduled_at is None
    assert job.status == "waiting_execution"


def test_scheduling_never_regresses_done_job() -> None:
    job = _job(status="done", completed_at="2025-03-01T10:00:00+00:00")

    scheduling.apply_schedule(job, "2025-03-20", "09:00", now=NOW)

    assert job.status == "done"
    assert job.completed_at == "2025-03-01T10:00:00+00:00"
    assert job.scheduled_at == "2025-03-20T09:00:00"


def test_marking_done_stamps_completed_at() -> None:
    job = _job(status="waiting_execution")

    scheduling.apply_status_change(job, "done", now=NOW)

    assert job.status == "done"
    assert job.completed_at == NOW.isoformat()

    with pytest.raises(IllegalTransition):
        scheduling.apply_status_change(job, "waiting_execution", now=NOW)
    assert job.status == "done"


def test_illegal_status_change_leaves_job_untouched() -> None:
    job = _job(status="quote")

    with pytest.raises(IllegalTransition):
        scheduling.apply_status_change(job, "done", now=NOW)

    assert job.status == "quote"
    assert job.completed_at is None


def test_unknown_status_is_a_validation_error() -> None:
    job = _job(status="quote")

    with pytest.raises(ValidationFailed):
        scheduling.apply_status_change(job, "cancelled", now=NOW)


def test_resolve_completed_at() -> None:
    assert scheduling.resolve_completed_at("done", None, NOW) == NOW.isoformat()
    assert scheduling.resolve_completed_at("done", "earlier", NOW) == "earlier"
    assert scheduling.resolve_completed_at("waiting_execution", "earlier", NOW) is None


def test_normalize_time_keeps_seconds_only_when_given() -> None:
    assert scheduling.normalize_time("14:00") == "14:00"
    assert scheduling.normalize_time("14:00:30") == "14:00:30"
    assert scheduling.normalize_time("  ") is None

    with pytest.raises(ValidationFailed):
        scheduling.normalize_time("2pm")
    with pytest.raises(ValidationFailed):
        scheduling.normalize_date("10/03/2025")


def test_job_form_applies_transition_then_schedule_side_effect() -> None:
    job = _job(status="quote")

    scheduling.apply_job_form(
        job,
        {"status": "waiting_schedule", "scheduled_date": "2025-03-10", "scheduled_time": "14:00"},
        now=NOW,
    )

    assert job.status == "waiting_execution"
    assert job.scheduled_at == "2025-03-10T14:00:00"


def test_job_form_rejects_illegal_status_before_writing() -> None:
    job = _job(status="quote", title="Sink repair")

    with pytest.raises(IllegalTransition):
        scheduling.apply_job_form(job, {"status": "done", "title": "Renamed"}, now=NOW)

    assert job.title == "Sink repair"
    assert job.status == "quote"


def test_job_form_rejects_short_title() -> None:
    job = _job(status="quote")

    with pytest.raises(ValidationFailed):
        scheduling.apply_job_form(job, {"title": " ab "}, now=NOW)


def test_append_note_builds_timestamped_log() -> None:
    first = scheduling.append_note(None, "Client asked for morning", now=datetime(2025, 3, 10, 8, 5))
    both = scheduling.append_note(first, "Materials ordered", now=datetime(2025, 3, 11, 17, 45))

    assert first == "[10/03/2025 08:05]\nClient asked for morning"
    assert both == "[10/03/2025 08:05]\nClient asked for morning\n\n[11/03/2025 17:45]\nMaterials ordered"

    with pytest.raises(ValidationFailed):
        scheduling.append_note(both, "   ")
