"""
Job Scheduling Module

Keeps a job's status, scheduling fields and completion timestamp consistent:

- ``scheduled_at`` is the local ISO combination of ``scheduled_date`` and
  ``scheduled_time`` when both are present, null otherwise. Partial data is
  stored as entered.
- Attaching both a date and a time to a job in ``quote`` or
  ``waiting_schedule`` advances it to ``waiting_execution``. Later statuses
  are never regressed, ``done`` stays ``done``.
- ``completed_at`` is set iff the status is ``done`` and is preserved while
  the job stays done.
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional, Union

from fieldservice.core.exceptions import ValidationFailed
from fieldservice.models.job import Job, JobStatus
from fieldservice.services.status_flow import EntityKind, ensure_transition

logger = logging.getLogger(__name__)

MIN_TITLE_LENGTH = 3

# NOT NULL columns the job form may send but never clear
_REQUIRED_FORM_FIELDS = ("priority", "warranty")

_AUTO_ADVANCE_FROM = {JobStatus.QUOTE.value, JobStatus.WAITING_SCHEDULE.value}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_date(value: Union[date, str, None]) -> Optional[str]:
    """Return ``YYYY-MM-DD`` or None for blank input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    value = value.strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise ValidationFailed(f"Invalid scheduled_date: {value!r}")


def normalize_time(value: Union[time, str, None]) -> Optional[str]:
    """Return ``HH:MM`` (or ``HH:MM:SS`` when seconds are given) or None for blank input."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = time.fromisoformat(value)
        except ValueError:
            raise ValidationFailed(f"Invalid scheduled_time: {value!r}")
    if value.second or value.microsecond:
        return value.replace(microsecond=0).strftime("%H:%M:%S")
    return value.strftime("%H:%M")


def combine_schedule(scheduled_date: Optional[str], scheduled_time: Optional[str]) -> Optional[str]:
    if not scheduled_date or not scheduled_time:
        return None
    combined = datetime.combine(date.fromisoformat(scheduled_date), time.fromisoformat(scheduled_time))
    return combined.isoformat()


def derive_status_on_schedule(status: str, scheduled_date: Optional[str], scheduled_time: Optional[str]) -> str:
    if scheduled_date and scheduled_time and status in _AUTO_ADVANCE_FROM:
        return JobStatus.WAITING_EXECUTION.value
    return status


def resolve_completed_at(status: str, previous: Optional[str], now: Optional[datetime] = None) -> Optional[str]:
    if status != JobStatus.DONE.value:
        return None
    if previous:
        return previous
    return (now or _utcnow()).isoformat()


def _job_status(value) -> str:
    try:
        return JobStatus(value).value
    except ValueError:
        raise ValidationFailed(f"Unknown job status: {value!r}")


def validate_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise ValidationFailed(f"Title must contain at least {MIN_TITLE_LENGTH} characters")
    return title


def sync_derived_fields(job: Job, now: Optional[datetime] = None) -> Job:
    """Recompute status, scheduled_at and completed_at from the job's current fields."""
    previous_status = job.status
    job.scheduled_at = combine_schedule(job.scheduled_date, job.scheduled_time)
    job.status = derive_status_on_schedule(job.status, job.scheduled_date, job.scheduled_time)
    job.completed_at = resolve_completed_at(job.status, job.completed_at, now)

    if job.status != previous_status:
        logger.info("Job %s advanced on scheduling: %s -> %s", job.id, previous_status, job.status)
    return job


def apply_schedule(job: Job, scheduled_date, scheduled_time, now: Optional[datetime] = None) -> Job:
    """Attach (or clear) a schedule on a job and apply its side effects."""
    job.scheduled_date = normalize_date(scheduled_date)
    job.scheduled_time = normalize_time(scheduled_time)
    sync_derived_fields(job, now)
    job.updated_at = (now or _utcnow()).isoformat()
    logger.info("Job %s scheduled_at=%s status=%s", job.id, job.scheduled_at, job.status)
    return job


def apply_status_change(job: Job, proposed: str, now: Optional[datetime] = None) -> Job:
    """Move a job to ``proposed`` if the transition table allows it."""
    proposed = _job_status(proposed)
    ensure_transition(EntityKind.JOB, job.status, proposed)

    previous_status = job.status
    job.status = proposed
    job.completed_at = resolve_completed_at(job.status, job.completed_at, now)
    job.updated_at = (now or _utcnow()).isoformat()
    logger.info("Job %s status changed: %s -> %s", job.id, previous_status, proposed)
    return job


def apply_job_form(job: Job, changes: Dict[str, Any], now: Optional[datetime] = None) -> Job:
    """
    Apply a full-form save to an existing job.

    A changed status must be a legal transition; the scheduling side effect
    and derived timestamps are then recomputed from the saved values.
    """
    changes = dict(changes)

    for field in _REQUIRED_FORM_FIELDS:
        if field in changes and changes[field] is None:
            raise ValidationFailed(f"{field.capitalize()} cannot be empty")

    if "status" in changes and changes["status"] is not None:
        proposed = _job_status(changes.pop("status"))
        if proposed != job.status:
            ensure_transition(EntityKind.JOB, job.status, proposed)
            logger.info("Job %s status changed: %s -> %s", job.id, job.status, proposed)
            job.status = proposed
    changes.pop("status", None)

    if "title" in changes:
        changes["title"] = validate_title(changes["title"])
    if "scheduled_date" in changes:
        changes["scheduled_date"] = normalize_date(changes["scheduled_date"])
    if "scheduled_time" in changes:
        changes["scheduled_time"] = normalize_time(changes["scheduled_time"])

    for key, value in changes.items():
        setattr(job, key, value)

    sync_derived_fields(job, now)
    job.updated_at = (now or _utcnow()).isoformat()
    return job


def append_note(existing: Optional[str], text: str, now: Optional[datetime] = None) -> str:
    """Append a ``[dd/MM/yyyy HH:mm]`` stamped entry to a job's notes log."""
    text = (text or "").strip()
    if not text:
        raise ValidationFailed("Note text is required")
    stamp = (now or datetime.now()).strftime("%d/%m/%Y %H:%M")
    entry = f"[{stamp}]\n{text}"
    if existing:
        return f"{existing}\n\n{entry}"
    return entry
