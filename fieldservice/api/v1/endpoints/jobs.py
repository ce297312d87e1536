"""
Job Endpoints Module

This module provides the job endpoints: listing and search, creation from the
job form, full-form saves, and the dedicated status, schedule and notes actions.

Every write goes through ``services.scheduling`` so that status, scheduled_at
and completed_at stay consistent, and status changes are checked against the
transition table before anything is written.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlmodel import Session

from fieldservice.api import deps
from fieldservice.core.exceptions import ValidationFailed
from fieldservice.db.scoping import get_owned, owned
from fieldservice.db.session import commit, get_db
from fieldservice.models.job import Job, JobStatus
from fieldservice.schemas.job import (
    JobCreate,
    JobNoteCreate,
    JobRead,
    JobSchedule,
    JobStatusChange,
    JobUpdate,
)
from fieldservice.services import scheduling
from fieldservice.services.clients import create_contact_client, resolve_client, resolve_employee
from fieldservice.services.display import client_display_name
from fieldservice.services.status_flow import EntityKind, get_next_allowed

logger = logging.getLogger(__name__)

router = APIRouter()


def _snapshot_client(db: Session, job: Job, client_id: str, owner_id: str) -> None:
    client = resolve_client(db, client_id, owner_id)
    job.client_id = client.id
    job.client_name = client_display_name(client)
    job.client_phone = client.phone


def _snapshot_employee(db: Session, job: Job, employee_id: Optional[str], owner_id: str) -> None:
    if not employee_id:
        job.assigned_to = None
        job.assigned_to_name = None
        return
    employee = resolve_employee(db, employee_id, owner_id)
    job.assigned_to = employee.id
    job.assigned_to_name = employee.name


@router.get("", response_model=List[JobRead])
def list_jobs(
    q: Optional[str] = None,
    status: Optional[List[JobStatus]] = Query(None),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    List the owner's jobs, newest first.

    Args:
        q: Case-insensitive search over title, client name, address and city
        status: Only jobs in one of these statuses (repeatable)
    """
    statement = owned(Job, owner_id)
    if q:
        pattern = f"%{q.lower()}%"
        statement = statement.where(or_(
            func.lower(Job.title).like(pattern),
            func.lower(Job.client_name).like(pattern),
            func.lower(Job.address).like(pattern),
            func.lower(Job.city).like(pattern),
        ))
    if status:
        statement = statement.where(Job.status.in_([s.value for s in status]))

    statement = statement.order_by(Job.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.post("", response_model=JobRead)
def create_job(
    job_in: JobCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Create a job from the job form.

    A job either references an existing client of the owner or names an
    ad-hoc contact, in which case a private client tagged ``contact`` is
    registered for it. Attaching both a date and a time advances a
    ``quote`` or ``waiting_schedule`` job to ``waiting_execution``.

    Raises:
        ValidationFailed: Short title, unknown client or employee, no client and no contact name
    """
    data = job_in.model_dump(exclude={"client_id", "assigned_to", "scheduled_date", "scheduled_time"})
    data["status"] = job_in.status.value
    data["title"] = scheduling.validate_title(job_in.title)

    job = Job(owner_id=owner_id, **data)

    if job_in.client_id:
        _snapshot_client(db, job, job_in.client_id, owner_id)
    elif job_in.contact_name and job_in.contact_name.strip():
        client = create_contact_client(db, owner_id, job_in.contact_name, job_in.contact_phone)
        job.client_id = client.id
        job.client_name = client.contact_name
        job.client_phone = client.phone
    else:
        raise ValidationFailed("Either a client or a contact name is required")

    _snapshot_employee(db, job, job_in.assigned_to, owner_id)

    job.scheduled_date = scheduling.normalize_date(job_in.scheduled_date)
    job.scheduled_time = scheduling.normalize_time(job_in.scheduled_time)
    scheduling.sync_derived_fields(job)

    db.add(job)
    commit(db)
    db.refresh(job)
    logger.info("Job %s created for owner %s with status %s", job.id, owner_id, job.status)
    return job


@router.get("/{job_id}", response_model=JobRead)
def read_job(
    job_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    return get_owned(db, Job, job_id, owner_id)


@router.patch("/{job_id}", response_model=JobRead)
def update_job(
    job_id: str,
    job_update: JobUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Save the job form.

    Only the fields sent are applied. A changed status must be a legal
    transition; the scheduling side effect and the derived timestamps are
    then recomputed from the saved values.

    Raises:
        IllegalTransition: The status change is not in the transition table
        ValidationFailed: Short title, unknown client or employee
    """
    job = get_owned(db, Job, job_id, owner_id)
    changes = job_update.model_dump(exclude_unset=True)

    if changes.get("client_id"):
        _snapshot_client(db, job, changes.pop("client_id"), owner_id)
    changes.pop("client_id", None)
    if "assigned_to" in changes:
        _snapshot_employee(db, job, changes.pop("assigned_to"), owner_id)
    if changes.get("status") is not None:
        changes["status"] = changes["status"].value

    scheduling.apply_job_form(job, changes)

    db.add(job)
    commit(db)
    db.refresh(job)
    return job


@router.post("/{job_id}/status", response_model=JobRead)
def change_job_status(
    job_id: str,
    status_in: JobStatusChange,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Move a job one step along its workflow.

    Raises:
        IllegalTransition: ``current -> proposed`` is not in the job transition table
    """
    job = get_owned(db, Job, job_id, owner_id)
    scheduling.apply_status_change(job, status_in.status.value)
    db.add(job)
    commit(db)
    db.refresh(job)
    return job


@router.post("/{job_id}/schedule", response_model=JobRead)
def schedule_job(
    job_id: str,
    schedule_in: JobSchedule,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Attach, change or clear the date and time of a job.

    Partial data (a date without a time) is stored as given and leaves
    ``scheduled_at`` empty.
    """
    job = get_owned(db, Job, job_id, owner_id)
    scheduling.apply_schedule(job, schedule_in.scheduled_date, schedule_in.scheduled_time)
    db.add(job)
    commit(db)
    db.refresh(job)
    return job


@router.post("/{job_id}/notes", response_model=JobRead)
def add_job_note(
    job_id: str,
    note_in: JobNoteCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """Append a timestamped entry to the job's notes log."""
    job = get_owned(db, Job, job_id, owner_id)
    job.notes = scheduling.append_note(job.notes, note_in.text)
    db.add(job)
    commit(db)
    db.refresh(job)
    return job


@router.get("/{job_id}/next-statuses", response_model=List[str])
def job_next_statuses(
    job_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """Statuses offered as actions for this job; empty for a done job."""
    job = get_owned(db, Job, job_id, owner_id)
    return sorted(get_next_allowed(EntityKind.JOB, job.status))


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    job = get_owned(db, Job, job_id, owner_id)
    db.delete(job)
    commit(db)
    logger.info("Job %s deleted by owner %s", job_id, owner_id)
    return {"status": "success", "detail": "Job deleted"}
