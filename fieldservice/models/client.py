"""
Client Model Module

This module defines the Client model representing the customers of the business.
Every client belongs to exactly one owning account.
"""
from enum import Enum
from typing import List, Optional
from sqlmodel import SQLModel, Field, JSON, Column
import uuid

from datetime import datetime, timezone


class ClientType(str, Enum):
    PRIVATE = "private"
    COMPANY = "company"
    CUSTOMER_SERVICE = "customer_service"


class Client(SQLModel, table=True):
    """
    Client model representing a private customer, a company or a customer-service account.

    The display name of a client depends on its type: company and customer-service
    clients are shown by company name, private clients by contact name.

    Attributes:
        id: Unique identifier (UUID) automatically generated for each client
        owner_id: Owning account; every query filters on it
        client_type: One of "private", "company", "customer_service"
        contact_name: Name of the contact person (required)
        company_name: Company name, required for company clients
        phone: Contact phone (required)
        email: Contact email
        address: Street address
        city: City
        notes: Free-text notes
        tags: JSON array of string tags (e.g. ["contact"] for ad-hoc job contacts)
        status: Open vocabulary, defaults come from app_configs or {active, inactive}
        created_at: ISO timestamp of when the client record was created
    """
    __tablename__ = "clients"

    # Primary key - auto-generated UUID for global uniqueness
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    owner_id: str = Field(index=True, nullable=False)

    client_type: str = Field(default=ClientType.PRIVATE.value)

    # Contact details
    contact_name: str = Field(nullable=False)
    company_name: Optional[str] = None
    phone: str = Field(nullable=False)
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None

    notes: Optional[str] = None
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    status: str = Field(default="active")

    created_at: Optional[str] = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
