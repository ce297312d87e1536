"""
App Config Model Module

Per-account overrides of the display vocabularies (labels and colors of job
statuses, priorities, invoice statuses and client statuses).
"""
from enum import Enum
from typing import Any, Dict, Optional
from sqlmodel import SQLModel, Field, JSON, Column, UniqueConstraint
import uuid

from datetime import datetime, timezone


class ConfigType(str, Enum):
    JOB_STATUSES = "job_statuses"
    JOB_PRIORITIES = "job_priorities"
    INVOICE_STATUSES = "invoice_statuses"
    CLIENT_STATUSES_PRIVATE = "client_statuses_private"
    CLIENT_STATUSES_COMPANY = "client_statuses_company"
    CLIENT_STATUSES_CUSTOMER_SERVICE = "client_statuses_customer_service"


class AppConfig(SQLModel, table=True):
    """
    One row per (owner_id, config_type).

    ``config_data`` holds ``{"statuses": [{"value", "label", "color"}, ...]}``
    in display order. A missing row means the built-in defaults apply.
    """
    __tablename__ = "app_configs"
    __table_args__ = (UniqueConstraint("owner_id", "config_type"),)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    owner_id: str = Field(index=True, nullable=False)
    config_type: str = Field(nullable=False)
    config_data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
