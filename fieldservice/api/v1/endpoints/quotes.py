"""
Quote Endpoints Module

This module provides the quote endpoints: drafting and editing line items,
moving a quote through draft -> sent -> approved/rejected, and converting an
approved quote into a job.

Line items can only change while the quote is a draft that was never
converted. Conversion happens at most once per quote.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlmodel import Session

from fieldservice.api import deps
from fieldservice.db.scoping import get_owned, owned
from fieldservice.db.session import commit, get_db
from fieldservice.models.quote import Quote, QuoteStatus
from fieldservice.schemas.job import JobRead
from fieldservice.schemas.quote import (
    LineItemIn,
    LineItemRead,
    LineItemUpdate,
    QuoteCreate,
    QuoteRead,
    QuoteStatusChange,
    QuoteUpdate,
)
from fieldservice.services import quotes as quote_service
from fieldservice.services.clients import resolve_client
from fieldservice.services.display import client_display_name
from fieldservice.services.status_flow import EntityKind, get_next_allowed

logger = logging.getLogger(__name__)

router = APIRouter()


def _snapshot_client(db: Session, quote: Quote, client_id: str, owner_id: str) -> None:
    client = resolve_client(db, client_id, owner_id)
    quote.client_id = client.id
    quote.client_name = client_display_name(client)
    quote.client_phone = client.phone


@router.get("", response_model=List[QuoteRead])
def list_quotes(
    q: Optional[str] = None,
    status: Optional[List[QuoteStatus]] = Query(None),
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    List the owner's quotes, newest first.

    Args:
        q: Case-insensitive search over the client name
        status: Only quotes in one of these statuses (repeatable)
    """
    statement = owned(Quote, owner_id)
    if q:
        statement = statement.where(func.lower(Quote.client_name).like(f"%{q.lower()}%"))
    if status:
        statement = statement.where(Quote.status.in_([s.value for s in status]))

    statement = statement.order_by(Quote.created_at.desc()).offset(skip).limit(limit)
    return db.exec(statement).all()


@router.post("", response_model=QuoteRead)
def create_quote(
    quote_in: QuoteCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Create a draft quote.

    Raises:
        ValidationFailed: Unknown client, no line items, blank description,
            quantity not above zero or negative unit price
    """
    quote = Quote(owner_id=owner_id, notes=quote_in.notes, status=QuoteStatus.DRAFT.value)
    _snapshot_client(db, quote, quote_in.client_id, owner_id)
    quote_service.set_line_items(quote, [item.model_dump() for item in quote_in.line_items])

    db.add(quote)
    commit(db)
    db.refresh(quote)
    logger.info("Quote %s created for owner %s (total=%s)", quote.id, owner_id, quote.total)
    return quote


@router.post("/reconcile")
def reconcile_quotes(
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Repair conversions that created a job but never stamped the quote.

    Returns:
        dict: ``repaired`` list of ``{quote_id, job_id}`` pairs
    """
    repaired = quote_service.reconcile_conversions(db, owner_id)
    return {"repaired": [{"quote_id": quote_id, "job_id": job_id} for quote_id, job_id in repaired]}


@router.get("/{quote_id}", response_model=QuoteRead)
def read_quote(
    quote_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    return get_owned(db, Quote, quote_id, owner_id)


@router.put("/{quote_id}", response_model=QuoteRead)
def update_quote(
    quote_id: str,
    quote_update: QuoteUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Save the quote form of a draft quote.

    Raises:
        QuoteLocked: The quote is not a draft or was converted
    """
    quote = get_owned(db, Quote, quote_id, owner_id)
    quote_service.ensure_editable(quote)

    changes = quote_update.model_dump(exclude_unset=True)
    if changes.get("client_id"):
        _snapshot_client(db, quote, changes["client_id"], owner_id)
    if "notes" in changes:
        quote.notes = changes["notes"]
    if changes.get("line_items") is not None:
        quote_service.set_line_items(quote, changes["line_items"])

    db.add(quote)
    commit(db)
    db.refresh(quote)
    return quote


@router.post("/{quote_id}/line-items", response_model=LineItemRead)
def add_line_item(
    quote_id: str,
    item_in: LineItemIn,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    quote = get_owned(db, Quote, quote_id, owner_id)
    item = quote_service.add_line_item(quote, item_in.description, item_in.quantity, item_in.unit_price)
    db.add(quote)
    commit(db)
    return item


@router.patch("/{quote_id}/line-items/{item_id}", response_model=LineItemRead)
def update_line_item(
    quote_id: str,
    item_id: str,
    item_update: LineItemUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    quote = get_owned(db, Quote, quote_id, owner_id)
    item = quote_service.update_line_item(quote, item_id, item_update.model_dump(exclude_unset=True))
    db.add(quote)
    commit(db)
    return item


@router.delete("/{quote_id}/line-items/{item_id}", response_model=QuoteRead)
def remove_line_item(
    quote_id: str,
    item_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """Remove a line item; the last remaining item cannot be removed."""
    quote = get_owned(db, Quote, quote_id, owner_id)
    quote_service.remove_line_item(quote, item_id)
    db.add(quote)
    commit(db)
    db.refresh(quote)
    return quote


@router.post("/{quote_id}/status", response_model=QuoteRead)
def change_quote_status(
    quote_id: str,
    status_in: QuoteStatusChange,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Move a quote along draft -> sent -> approved/rejected, or reopen a rejected quote.

    Raises:
        IllegalTransition: ``current -> proposed`` is not in the quote transition table
    """
    quote = get_owned(db, Quote, quote_id, owner_id)
    quote_service.change_quote_status(quote, status_in.status.value)
    db.add(quote)
    commit(db)
    db.refresh(quote)
    return quote


@router.get("/{quote_id}/next-statuses", response_model=List[str])
def quote_next_statuses(
    quote_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    quote = get_owned(db, Quote, quote_id, owner_id)
    return sorted(get_next_allowed(EntityKind.QUOTE, quote.status))


@router.post("/{quote_id}/convert", response_model=JobRead)
def convert_quote(
    quote_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Convert an approved quote into a job waiting for scheduling.

    The new job carries the quote's client, its notes as description and
    its VAT-exclusive total as agreed amount.

    Raises:
        ConversionRejected: The quote is not approved or was already converted
        StoreError: The job insert or the quote stamp failed; neither was kept
    """
    quote = get_owned(db, Quote, quote_id, owner_id)
    return quote_service.convert_quote_to_job(db, quote)


@router.delete("/{quote_id}")
def delete_quote(
    quote_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    quote = get_owned(db, Quote, quote_id, owner_id)
    db.delete(quote)
    commit(db)
    logger.info("Quote %s deleted by owner %s", quote_id, owner_id)
    return {"status": "success", "detail": "Quote deleted"}
