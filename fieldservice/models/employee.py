from typing import Optional
from sqlmodel import SQLModel, Field
import uuid

from datetime import datetime, timezone


class Employee(SQLModel, table=True):
    """Employee of the owning account; only referenced as a job assignee."""
    __tablename__ = "employees"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    owner_id: str = Field(index=True, nullable=False)

    name: str = Field(nullable=False)
    phone: Optional[str] = None
    is_active: bool = True

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
