from pydantic import BaseModel, EmailStr, computed_field, field_validator
from typing import List, Optional

from fieldservice.models.client import ClientType
from fieldservice.services.display import client_display_name


# Shared properties
class ClientBase(BaseModel):
    client_type: ClientType = ClientType.PRIVATE
    contact_name: str
    phone: str
    company_name: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    city: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


# Full client form
class ClientCreate(ClientBase):
    notes: Optional[str] = None
    tags: List[str] = []
    status: str = "active"


# Inline "new client" dialog used while filling a job or quote form
class ClientQuickCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    client_type: Optional[ClientType] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    status: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ClientRead(BaseModel):
    id: str
    client_type: str
    contact_name: str
    company_name: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    notes: Optional[str] = None
    tags: List[str] = []
    status: str
    created_at: Optional[str] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def display_name(self) -> Optional[str]:
        return client_display_name(self)
