from datetime import date, time
from pydantic import BaseModel, Field, computed_field, field_validator
from typing import List, Optional

from fieldservice.models.job import JobStatus
from fieldservice.services.display import with_vat
from fieldservice.services.status_flow import EntityKind, get_next_allowed


class ScheduleFields(BaseModel):
    """Date and time as entered; blank form values count as absent."""
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None

    @field_validator("scheduled_date", "scheduled_time", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class JobCreate(ScheduleFields):
    # Either an existing client or an ad-hoc contact name is required
    client_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None

    title: str
    description: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None

    status: JobStatus = JobStatus.QUOTE
    priority: str = "normal"

    assigned_to: Optional[str] = None
    warranty: bool = True
    warranty_note: Optional[str] = None
    agreed_amount: Optional[float] = Field(default=None, ge=0)

    notes: Optional[str] = None
    internal_notes: Optional[str] = None


class JobUpdate(ScheduleFields):
    """Full-form save; only the fields sent are applied."""
    client_id: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    status: Optional[JobStatus] = None
    priority: Optional[str] = None
    assigned_to: Optional[str] = None
    warranty: Optional[bool] = None
    warranty_note: Optional[str] = None
    agreed_amount: Optional[float] = Field(default=None, ge=0)
    internal_notes: Optional[str] = None


class JobSchedule(ScheduleFields):
    pass


class JobStatusChange(BaseModel):
    status: JobStatus


class JobNoteCreate(BaseModel):
    text: str


class JobRead(BaseModel):
    id: str
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    title: str
    description: Optional[str] = None
    service_type: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    scheduled_at: Optional[str] = None
    status: str
    priority: str
    completed_at: Optional[str] = None
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    warranty: bool = True
    warranty_note: Optional[str] = None
    quote_id: Optional[str] = None
    agreed_amount: Optional[float] = None
    notes: Optional[str] = None
    internal_notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def agreed_amount_with_vat(self) -> Optional[float]:
        return with_vat(self.agreed_amount)

    @computed_field
    @property
    def allowed_next_statuses(self) -> List[str]:
        return sorted(get_next_allowed(EntityKind.JOB, self.status))
