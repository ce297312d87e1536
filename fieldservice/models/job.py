"""
Job Model Module

This module defines the Job model, the unit of work scheduled and executed for a client.
"""
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from datetime import datetime, timezone


class JobStatus(str, Enum):
    """
    Canonical job workflow: quote -> waiting_schedule -> waiting_execution -> done.

    ``done`` is terminal. Display labels and colors for these values may be
    overridden per account but the values themselves are fixed.
    """
    QUOTE = "quote"
    WAITING_SCHEDULE = "waiting_schedule"
    WAITING_EXECUTION = "waiting_execution"
    DONE = "done"


class Job(SQLModel, table=True):
    """
    Job model representing a piece of field work.

    Scheduling is stored three ways and kept in sync: the raw ``scheduled_date``
    and ``scheduled_time`` as entered, and ``scheduled_at`` which is their
    local-time ISO combination when both are present and null otherwise.

    Attributes:
        id: Unique identifier (UUID)
        owner_id: Owning account
        client_id: Client this job was created for; not a foreign key, the client may be deleted later
        client_name: Snapshot of the client's display name
        client_phone: Snapshot of the client's phone
        contact_name: Ad-hoc or additional contact name
        contact_phone: Ad-hoc or additional contact phone
        title: Job title, at least 3 characters
        description: Work description
        service_type: Kind of work (bathtub, sink, ceramic, other)
        address: Street address of the work site
        city: City of the work site
        scheduled_date: Local date as YYYY-MM-DD
        scheduled_time: Local wall-clock time as HH:MM
        scheduled_at: Combined local ISO timestamp, or null when date or time is missing
        status: One of the JobStatus values
        priority: Open vocabulary, "normal" or "urgent" unless configured otherwise
        assigned_to: Employee id the job is assigned to
        assigned_to_name: Snapshot of the employee's name
        warranty: Whether the work is under warranty
        warranty_note: Warranty remarks
        completed_at: Set iff status is "done"
        quote_id: Quote this job was converted from
        agreed_amount: Agreed price, VAT exclusive
        notes: Append-only log of timestamped entries
        internal_notes: Notes not shown to the client
    """
    __tablename__ = "jobs"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    owner_id: str = Field(index=True, nullable=False)

    # Client reference and contact snapshot
    client_id: Optional[str] = Field(default=None, index=True)
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None

    # Work description
    title: str = Field(nullable=False)
    description: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None

    # Scheduling - kept consistent by services.scheduling
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    scheduled_at: Optional[str] = Field(default=None, index=True)

    # Workflow
    status: str = Field(default=JobStatus.QUOTE.value)
    priority: str = Field(default="normal")
    completed_at: Optional[str] = None

    # Assignment
    assigned_to: Optional[str] = Field(default=None, foreign_key="employees.id")
    assigned_to_name: Optional[str] = None

    warranty: bool = True
    warranty_note: Optional[str] = None

    # Quote conversion
    quote_id: Optional[str] = Field(default=None, index=True)
    agreed_amount: Optional[float] = None

    notes: Optional[str] = None
    internal_notes: Optional[str] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
