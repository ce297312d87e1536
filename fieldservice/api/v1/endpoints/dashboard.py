"""
Dashboard Endpoints Module

Overview numbers for the owner's home page and the jobs of a calendar range.
"""
from datetime import date
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from fieldservice.api import deps
from fieldservice.core.exceptions import ValidationFailed
from fieldservice.db.session import get_db
from fieldservice.schemas.dashboard import DashboardRead
from fieldservice.schemas.job import JobRead
from fieldservice.services import dashboard as dashboard_service

router = APIRouter()


@router.get("", response_model=DashboardRead)
def read_dashboard(
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    return dashboard_service.summarize(db, owner_id)


@router.get("/calendar", response_model=List[JobRead])
def read_calendar(
    start: date,
    end: date,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """
    Jobs scheduled between ``start`` and ``end`` (both days included), in time order.

    Raises:
        ValidationFailed: ``end`` is before ``start``
    """
    if end < start:
        raise ValidationFailed("end must not be before start")
    return dashboard_service.jobs_between(db, owner_id, start, end)
