"""
Owner Scoping Module

Every table carries an ``owner_id``. Reads go through these helpers so the
owner filter is part of the SQL statement itself: a record that belongs to
another account is indistinguishable from one that does not exist.
"""
from typing import Optional, Type, TypeVar

from sqlmodel import Session, SQLModel, select

from fieldservice.core.exceptions import RecordNotFound

ModelT = TypeVar("ModelT", bound=SQLModel)


def owned(model: Type[ModelT], owner_id: str):
    """Start a SELECT over ``model`` restricted to one owning account."""
    return select(model).where(model.owner_id == owner_id)


def find_owned(db: Session, model: Type[ModelT], record_id: str, owner_id: str) -> Optional[ModelT]:
    statement = owned(model, owner_id).where(model.id == record_id)
    return db.exec(statement).first()


def get_owned(db: Session, model: Type[ModelT], record_id: str, owner_id: str) -> ModelT:
    record = find_owned(db, model, record_id, owner_id)
    if record is None:
        raise RecordNotFound(model.__name__)
    return record
