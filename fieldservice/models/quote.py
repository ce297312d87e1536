"""
Quote Model Module

This module defines the Quote model: a priced list of line items offered to a client,
which can be converted into a job once approved.
"""
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import SQLModel, Field, JSON, Column
import uuid

from datetime import datetime, timezone


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"


class Quote(SQLModel, table=True):
    """
    Quote model.

    ``line_items`` is stored as a JSON array of
    ``{id, description, quantity, unit_price, line_total}`` objects and
    ``total`` is the VAT-exclusive sum of their line totals.
    ``converted_job_id`` is written once, when the quote becomes a job.
    ``client_id`` is a plain reference so that clients stay deletable.
    """
    __tablename__ = "quotes"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    owner_id: str = Field(index=True, nullable=False)

    client_id: str = Field(index=True)
    client_name: Optional[str] = None
    client_phone: Optional[str] = None

    notes: Optional[str] = None
    line_items: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    total: float = 0.0

    status: str = Field(default=QuoteStatus.DRAFT.value)
    converted_job_id: Optional[str] = None

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    updated_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
