"""
Client Endpoints Module

This module provides CRUD endpoints for the owner's clients, including the
quick-create used by the job and quote forms.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlmodel import Session

from fieldservice.api import deps
from fieldservice.db.scoping import get_owned, owned
from fieldservice.db.session import commit, get_db
from fieldservice.models.client import Client, ClientType
from fieldservice.models.job import Job
from fieldservice.schemas.client import ClientCreate, ClientQuickCreate, ClientRead, ClientUpdate
from fieldservice.schemas.job import JobRead
from fieldservice.services.clients import validate_client

logger = logging.getLogger(__name__)

router = APIRouter()


class ClientDetail(ClientRead):
    jobs: List[JobRead] = []


@router.get("", response_model=List[ClientRead])
def list_clients(
    q: Optional[str] = None,
    client_type: Optional[ClientType] = None,
    status: Optional[List[str]] = Query(None),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    List the owner's clients, newest first.

    Args:
        q: Case-insensitive search over contact name, company name, phone and city
        client_type: Only clients of this type
        status: Only clients in one of these statuses (repeatable)
    """
    statement = owned(Client, owner_id)
    if q:
        pattern = f"%{q.lower()}%"
        statement = statement.where(or_(
            func.lower(Client.contact_name).like(pattern),
            func.lower(Client.company_name).like(pattern),
            Client.phone.like(f"%{q}%"),
            func.lower(Client.city).like(pattern),
        ))
    if client_type:
        statement = statement.where(Client.client_type == client_type.value)
    if status:
        statement = statement.where(Client.status.in_(status))

    statement = statement.order_by(Client.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.post("", response_model=ClientRead)
def create_client(
    client_in: ClientCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    client = validate_client(Client(owner_id=owner_id, **client_in.model_dump()))
    db.add(client)
    commit(db)
    db.refresh(client)
    logger.info("Client %s created for owner %s", client.id, owner_id)
    return client


@router.post("/quick", response_model=ClientRead)
def quick_create_client(
    client_in: ClientQuickCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Create a client from the inline dialog of the job and quote forms.

    Only company clients keep a company name; the new client starts as active.
    """
    data = client_in.model_dump()
    if data["client_type"] != ClientType.COMPANY:
        data["company_name"] = ""
    client = validate_client(Client(owner_id=owner_id, status="active", **data))
    db.add(client)
    commit(db)
    db.refresh(client)
    return client


@router.get("/{client_id}", response_model=ClientDetail)
def read_client(
    client_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """Get a client together with its jobs, newest first."""
    client = get_owned(db, Client, client_id, owner_id)
    jobs = db.exec(
        owned(Job, owner_id).where(Job.client_id == client.id).order_by(Job.created_at.desc())
    ).all()
    return ClientDetail(
        **ClientRead.model_validate(client).model_dump(exclude={"display_name"}),
        jobs=[JobRead.model_validate(job) for job in jobs],
    )


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: str,
    client_update: ClientUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    client = get_owned(db, Client, client_id, owner_id)

    for key, value in client_update.model_dump(exclude_unset=True).items():
        setattr(client, key, value)
    validate_client(client)

    db.add(client)
    commit(db)
    db.refresh(client)
    return client


@router.delete("/{client_id}")
def delete_client(
    client_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Delete a client.

    Jobs and quotes referencing the client are left untouched.
    """
    client = get_owned(db, Client, client_id, owner_id)
    db.delete(client)
    commit(db)
    logger.info("Client %s deleted by owner %s", client_id, owner_id)
    return {"status": "success", "detail": "Client deleted"}
