"""
Quote Lifecycle Module

Line-item pricing, the draft-only edit rule, quote status changes and the
one-time conversion of an approved quote into a job.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from fieldservice.core.exceptions import (
    ConversionRejected,
    QuoteLocked,
    RecordNotFound,
    StoreError,
    ValidationFailed,
)
from fieldservice.db.scoping import find_owned, owned
from fieldservice.models.job import Job, JobStatus
from fieldservice.models.quote import Quote, QuoteStatus
from fieldservice.services.status_flow import EntityKind, ensure_transition

logger = logging.getLogger(__name__)

CONVERTED_JOB_TITLE = "Bathtub coating"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def line_total(quantity: float, unit_price: float) -> float:
    return float(quantity) * float(unit_price)


def quote_total(line_items: Iterable[Dict[str, Any]]) -> float:
    """VAT-exclusive sum of ``quantity * unit_price`` over all line items."""
    return sum(line_total(item["quantity"], item["unit_price"]) for item in line_items)


def build_line_item(description: str, quantity: float, unit_price: float, item_id: Optional[str] = None) -> Dict[str, Any]:
    description = (description or "").strip()
    if not description:
        raise ValidationFailed("Line item description is required")
    if quantity is None or float(quantity) <= 0:
        raise ValidationFailed("Line item quantity must be greater than 0")
    if unit_price is None or float(unit_price) < 0:
        raise ValidationFailed("Line item unit price cannot be negative")

    return {
        "id": item_id or str(uuid.uuid4()),
        "description": description,
        "quantity": float(quantity),
        "unit_price": float(unit_price),
        "line_total": line_total(quantity, unit_price),
    }


def is_editable(quote: Quote) -> bool:
    return quote.status == QuoteStatus.DRAFT.value and not quote.converted_job_id


def ensure_editable(quote: Quote) -> None:
    if quote.converted_job_id:
        raise QuoteLocked("A quote that was converted to a job cannot be edited")
    if quote.status != QuoteStatus.DRAFT.value:
        raise QuoteLocked("Only draft quotes can be edited")


def _store_line_items(quote: Quote, items: List[Dict[str, Any]]) -> Quote:
    if not items:
        raise ValidationFailed("A quote needs at least one line item")
    # assign a new list so the JSON column is flagged dirty
    quote.line_items = list(items)
    quote.total = quote_total(items)
    quote.updated_at = _now_iso()
    return quote


def set_line_items(quote: Quote, items: List[Dict[str, Any]]) -> Quote:
    """Replace all line items of a new or draft quote."""
    built = [
        build_line_item(item.get("description"), item.get("quantity"), item.get("unit_price"), item.get("id"))
        for item in items
    ]
    return _store_line_items(quote, built)


def add_line_item(quote: Quote, description: str, quantity: float, unit_price: float) -> Dict[str, Any]:
    ensure_editable(quote)
    item = build_line_item(description, quantity, unit_price)
    _store_line_items(quote, [*quote.line_items, item])
    return item


def update_line_item(quote: Quote, item_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    ensure_editable(quote)
    items = []
    updated = None
    for item in quote.line_items:
        if item["id"] == item_id:
            merged = {**item, **{k: v for k, v in changes.items() if v is not None}}
            updated = build_line_item(merged["description"], merged["quantity"], merged["unit_price"], item_id)
            items.append(updated)
        else:
            items.append(item)
    if updated is None:
        raise RecordNotFound("Line item")
    _store_line_items(quote, items)
    return updated


def remove_line_item(quote: Quote, item_id: str) -> Quote:
    ensure_editable(quote)
    items = [item for item in quote.line_items if item["id"] != item_id]
    if len(items) == len(quote.line_items):
        raise RecordNotFound("Line item")
    return _store_line_items(quote, items)


def change_quote_status(quote: Quote, proposed: str) -> Quote:
    try:
        proposed = QuoteStatus(proposed).value
    except ValueError:
        raise ValidationFailed(f"Unknown quote status: {proposed!r}")

    ensure_transition(EntityKind.QUOTE, quote.status, proposed)
    logger.info("Quote %s status changed: %s -> %s", quote.id, quote.status, proposed)
    quote.status = proposed
    quote.updated_at = _now_iso()
    return quote


def build_job_from_quote(quote: Quote) -> Job:
    return Job(
        owner_id=quote.owner_id,
        client_id=quote.client_id,
        client_name=quote.client_name,
        client_phone=quote.client_phone,
        title=CONVERTED_JOB_TITLE,
        description=quote.notes or "",
        status=JobStatus.WAITING_SCHEDULE.value,
        priority="normal",
        warranty=True,
        warranty_note="",
        quote_id=quote.id,
        agreed_amount=float(quote.total or 0),
    )


def convert_quote_to_job(db: Session, quote: Quote) -> Job:
    """
    Turn an approved, unconverted quote into a new job.

    The job insert and the ``converted_job_id`` stamp are written in one
    transaction: either both land or neither does. The stamp only applies
    while the stored quote is still unconverted, so of two concurrent
    conversions exactly one keeps its job.
    """
    if quote.status != QuoteStatus.APPROVED.value:
        raise ConversionRejected("Only approved quotes can be converted to a job")
    if quote.converted_job_id:
        raise ConversionRejected("This quote was already converted to a job")

    job = build_job_from_quote(quote)
    try:
        db.add(job)
        db.flush()
        stamp = (
            update(Quote)
            .where(
                Quote.id == quote.id,
                Quote.owner_id == quote.owner_id,
                Quote.converted_job_id.is_(None),
            )
            .values(converted_job_id=job.id, updated_at=_now_iso())
        )
        if db.connection().execute(stamp).rowcount != 1:
            db.rollback()
            logger.warning("Quote %s was converted by another request, job discarded", quote.id)
            raise ConversionRejected("This quote was already converted to a job")
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Converting quote %s failed, nothing was written", quote.id)
        raise StoreError("Converting the quote failed, please try again") from exc

    db.refresh(job)
    db.refresh(quote)
    logger.info("Quote %s converted to job %s (agreed_amount=%s)", quote.id, job.id, job.agreed_amount)
    return job


def reconcile_conversions(db: Session, owner_id: str) -> List[Tuple[str, str]]:
    """
    Repair conversions left half-done by a non-transactional writer.

    A job that points at a quote whose ``converted_job_id`` is still empty
    means the stamp was lost. The quote is stamped with the earliest such
    job. Returns the repaired ``(quote_id, job_id)`` pairs.
    """
    statement = owned(Job, owner_id).where(Job.quote_id.is_not(None)).order_by(Job.created_at)
    repaired = []
    for job in db.exec(statement).all():
        quote = find_owned(db, Quote, job.quote_id, owner_id)
        if quote is None or quote.converted_job_id:
            continue
        quote.converted_job_id = job.id
        quote.updated_at = _now_iso()
        db.add(quote)
        repaired.append((quote.id, job.id))
        logger.info("Reconciled quote %s with orphaned job %s", quote.id, job.id)

    if repaired:
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Reconciling conversions for owner %s failed", owner_id)
            raise StoreError("Reconciliation failed, please try again") from exc
    return repaired
