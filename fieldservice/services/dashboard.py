import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from fieldservice.db.scoping import owned
from fieldservice.models.client import Client
from fieldservice.models.job import Job, JobStatus

logger = logging.getLogger(__name__)

IDLE_CLIENTS_LIMIT = 5


def _date_part(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def _scheduled_day(job: Job) -> Optional[date]:
    if job.scheduled_date:
        return date.fromisoformat(job.scheduled_date)
    return _date_part(job.scheduled_at)


def summarize(db: Session, owner_id: str, today: Optional[date] = None) -> Dict[str, Any]:
    """Counts and short lists shown on the owner's overview page."""
    today = today or date.today()
    clients = db.exec(owned(Client, owner_id)).all()
    jobs = db.exec(owned(Job, owner_id).order_by(Job.created_at.desc())).all()

    by_status = {status.value: 0 for status in JobStatus}
    for job in jobs:
        by_status[job.status] = by_status.get(job.status, 0) + 1

    clients_with_jobs = {job.client_id for job in jobs if job.client_id}

    return {
        "total_clients": len(clients),
        "total_jobs": len(jobs),
        "jobs_by_status": by_status,
        "today_jobs": [job for job in jobs if _scheduled_day(job) == today],
        "completed_today": [
            job for job in jobs
            if job.status == JobStatus.DONE.value and _date_part(job.completed_at) == today
        ],
        "unscheduled_jobs": [
            job for job in jobs
            if _scheduled_day(job) is None and job.status != JobStatus.DONE.value
        ],
        "idle_clients": [c for c in clients if c.id not in clients_with_jobs][:IDLE_CLIENTS_LIMIT],
    }


def jobs_between(db: Session, owner_id: str, start: date, end: date) -> List[Job]:
    """Jobs whose ``scheduled_at`` falls on any day from ``start`` to ``end`` inclusive."""
    statement = (
        owned(Job, owner_id)
        .where(Job.scheduled_at.is_not(None))
        .where(Job.scheduled_at >= start.isoformat())
        .where(Job.scheduled_at < (end + timedelta(days=1)).isoformat())
        .order_by(Job.scheduled_at)
    )
    return db.exec(statement).all()
