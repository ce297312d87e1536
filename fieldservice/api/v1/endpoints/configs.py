"""
Config Endpoints Module

This module lets an account override the labels and colors of its status and
priority vocabularies, and exposes the resolved labels for display.

Overrides are cosmetic: the values accepted by the job and quote workflows
never depend on them.
"""
import logging
from datetime import datetime, timezone
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel import Session

from fieldservice.api import deps
from fieldservice.core.exceptions import RecordNotFound
from fieldservice.db.scoping import owned
from fieldservice.db.session import commit, get_db
from fieldservice.models.app_config import AppConfig, ConfigType
from fieldservice.schemas.config import AppConfigRead, ConfigUpdate, LabelRead
from fieldservice.services.labels import LABEL_CATEGORIES, LabelCache, category_labels, resolve_label

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_config(db: Session, owner_id: str, config_type: ConfigType):
    statement = owned(AppConfig, owner_id).where(AppConfig.config_type == config_type.value)
    return db.exec(statement).first()


@router.get("/configs", response_model=List[AppConfigRead])
def list_configs(
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
):
    """The owner's stored overrides; vocabularies without a row use the defaults."""
    return db.exec(owned(AppConfig, owner_id).order_by(AppConfig.config_type)).all()


@router.put("/configs/{config_type}", response_model=AppConfigRead)
def save_config(
    config_type: ConfigType,
    config_in: ConfigUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
    label_cache: LabelCache = Depends(deps.get_label_cache),
):
    """
    Create or replace the owner's override of one vocabulary.

    The owner's cached labels are dropped so the next lookup sees the change.
    """
    config = _find_config(db, owner_id, config_type)
    if config is None:
        config = AppConfig(owner_id=owner_id, config_type=config_type.value)

    config.config_data = {"statuses": [entry.model_dump() for entry in config_in.statuses]}
    config.updated_at = datetime.now(timezone.utc).isoformat()

    db.add(config)
    commit(db)
    db.refresh(config)
    label_cache.invalidate(owner_id)
    logger.info("Owner %s saved %s (%d entries)", owner_id, config_type.value, len(config_in.statuses))
    return config


@router.delete("/configs/{config_type}")
def reset_config(
    config_type: ConfigType,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
    label_cache: LabelCache = Depends(deps.get_label_cache),
):
    """Drop the owner's override so the built-in labels apply again."""
    config = _find_config(db, owner_id, config_type)
    if config is None:
        raise RecordNotFound("Config")
    db.delete(config)
    commit(db)
    label_cache.invalidate(owner_id)
    return {"status": "success", "detail": "Config reset to defaults"}


@router.get("/labels/{category}", response_model=List[LabelRead])
def read_labels(
    category: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(deps.get_current_owner),
    label_cache: LabelCache = Depends(deps.get_label_cache),
):
    """
    Resolved labels and colors of one vocabulary for the current owner.

    Args:
        category: A config type, or ``client_statuses`` (all client types merged)
            or ``quote_statuses``
    """
    if category not in LABEL_CATEGORIES:
        raise RecordNotFound("Label category")
    configs = label_cache.get(db, owner_id)
    return [resolve_label(category, value, configs) for value in category_labels(category, configs)]
