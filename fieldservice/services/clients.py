import logging
from typing import Optional

from sqlmodel import Session

from fieldservice.core.exceptions import ValidationFailed
from fieldservice.db.scoping import find_owned
from fieldservice.models.client import Client, ClientType
from fieldservice.models.employee import Employee

logger = logging.getLogger(__name__)

CONTACT_TAG = "contact"


def validate_client(client: Client) -> Client:
    """Required fields: contact name and phone always, company name for company clients."""
    try:
        client.client_type = ClientType(client.client_type).value
    except ValueError:
        raise ValidationFailed(f"Unknown client type: {client.client_type!r}")

    client.contact_name = (client.contact_name or "").strip()
    client.phone = (client.phone or "").strip()
    if not client.contact_name:
        raise ValidationFailed("Contact name is required")
    if not client.phone:
        raise ValidationFailed("Phone is required")
    if client.client_type == ClientType.COMPANY.value and not (client.company_name or "").strip():
        raise ValidationFailed("Company name is required for company clients")
    if client.client_type == ClientType.PRIVATE.value:
        client.company_name = client.company_name or ""
    return client


def resolve_client(db: Session, client_id: str, owner_id: str) -> Client:
    """A referenced client must exist within the same owner's records."""
    client = find_owned(db, Client, client_id, owner_id)
    if client is None:
        raise ValidationFailed("Client not found or not yours")
    return client


def resolve_employee(db: Session, employee_id: str, owner_id: str) -> Employee:
    employee = find_owned(db, Employee, employee_id, owner_id)
    if employee is None:
        raise ValidationFailed("Employee not found or not yours")
    return employee


def create_contact_client(db: Session, owner_id: str, name: str, phone: Optional[str]) -> Client:
    """Register an ad-hoc job contact as a private client tagged ``contact``."""
    client = Client(
        owner_id=owner_id,
        contact_name=name.strip(),
        phone=(phone or "").strip(),
        client_type=ClientType.PRIVATE.value,
        tags=[CONTACT_TAG],
        status="active",
    )
    db.add(client)
    db.flush()
    logger.info("Created contact client %s for owner %s", client.id, owner_id)
    return client
