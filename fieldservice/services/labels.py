"""
Labels Module

Display labels and colors for status and priority values. Built-in defaults
are overlaid with the owner's ``app_configs`` rows. These lookups are
cosmetic only; legality of status changes lives in ``status_flow``.
"""
import logging
import threading
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from fieldservice.db.scoping import owned
from fieldservice.models.app_config import AppConfig, ConfigType

logger = logging.getLogger(__name__)

FALLBACK_COLOR = "#64748b"

DEFAULT_LABELS: Dict[str, Dict[str, Dict[str, str]]] = {
    ConfigType.JOB_STATUSES.value: {
        "quote": {"label": "Quote", "color": "#6366f1"},
        "waiting_schedule": {"label": "Waiting for scheduling", "color": "#f59e0b"},
        "waiting_execution": {"label": "Waiting for execution", "color": "#3b82f6"},
        "done": {"label": "Done", "color": "#10b981"},
    },
    ConfigType.JOB_PRIORITIES.value: {
        "normal": {"label": "Not urgent", "color": "#64748b"},
        "not_urgent": {"label": "Not urgent", "color": "#64748b"},
        "low": {"label": "Low", "color": "#64748b"},
        "medium": {"label": "Medium", "color": "#3b82f6"},
        "high": {"label": "High", "color": "#f97316"},
        "urgent": {"label": "Urgent", "color": "#ef4444"},
    },
    ConfigType.INVOICE_STATUSES.value: {
        "not_created": {"label": "Not created", "color": "#64748b"},
        "created": {"label": "Created", "color": "#3b82f6"},
        "sent": {"label": "Sent", "color": "#8b5cf6"},
        "paid": {"label": "Paid", "color": "#10b981"},
    },
}

DEFAULT_CLIENT_STATUSES = {
    "active": {"label": "Active", "color": "#10b981"},
    "inactive": {"label": "Inactive", "color": "#64748b"},
}

QUOTE_STATUS_LABELS = {
    "draft": {"label": "Draft", "color": "#64748b"},
    "sent": {"label": "Sent", "color": "#8b5cf6"},
    "approved": {"label": "Approved", "color": "#10b981"},
    "rejected": {"label": "Rejected", "color": "#ef4444"},
}

CLIENT_STATUS_TYPES = (
    ConfigType.CLIENT_STATUSES_PRIVATE.value,
    ConfigType.CLIENT_STATUSES_COMPANY.value,
    ConfigType.CLIENT_STATUSES_CUSTOMER_SERVICE.value,
)

# Pseudo-category merging the three client-type status configs
CLIENT_STATUSES = "client_statuses"
QUOTE_STATUSES = "quote_statuses"

LABEL_CATEGORIES = (
    ConfigType.JOB_STATUSES.value,
    ConfigType.JOB_PRIORITIES.value,
    ConfigType.INVOICE_STATUSES.value,
    CLIENT_STATUSES,
    QUOTE_STATUSES,
    *CLIENT_STATUS_TYPES,
)

OwnerConfigs = Dict[str, Dict[str, Dict[str, str]]]


def configs_from_rows(rows: List[AppConfig]) -> OwnerConfigs:
    """Turn app_configs rows into ``{config_type: {value: {label, color}}}``."""
    config_map: OwnerConfigs = {}
    for row in rows:
        statuses = (row.config_data or {}).get("statuses")
        if not statuses:
            continue
        config_map[row.config_type] = {
            entry["value"]: {"label": entry.get("label"), "color": entry.get("color")}
            for entry in statuses
        }
    return config_map


def load_owner_configs(db: Session, owner_id: str) -> OwnerConfigs:
    return configs_from_rows(db.exec(owned(AppConfig, owner_id)).all())


class LabelCache:
    """
    Memoized per-owner label configuration.

    One instance is created by the application and shared by every request;
    tests build their own. ``invalidate`` must be called after an owner's
    app_configs change.
    """

    def __init__(self, loader=load_owner_configs):
        self._loader = loader
        self._entries: Dict[str, OwnerConfigs] = {}
        self._lock = threading.Lock()

    def get(self, db: Session, owner_id: str) -> OwnerConfigs:
        with self._lock:
            cached = self._entries.get(owner_id)
        if cached is not None:
            return cached

        configs = self._loader(db, owner_id)
        with self._lock:
            self._entries[owner_id] = configs
        logger.debug("Loaded label configs for owner %s: %s", owner_id, sorted(configs))
        return configs

    def invalidate(self, owner_id: str) -> None:
        with self._lock:
            self._entries.pop(owner_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, owner_id: str) -> bool:
        return owner_id in self._entries


def category_labels(category: str, configs: OwnerConfigs) -> Dict[str, Dict[str, str]]:
    """Defaults for ``category`` overlaid with the owner's configured entries."""
    if category == QUOTE_STATUSES:
        return dict(QUOTE_STATUS_LABELS)
    if category == CLIENT_STATUSES:
        merged = dict(DEFAULT_CLIENT_STATUSES)
        for config_type in CLIENT_STATUS_TYPES:
            merged.update(configs.get(config_type, {}))
        return merged
    if category in CLIENT_STATUS_TYPES:
        return {**DEFAULT_CLIENT_STATUSES, **configs.get(category, {})}
    return {**DEFAULT_LABELS.get(category, {}), **configs.get(category, {})}


def resolve_label(category: str, value: Optional[str], configs: Optional[OwnerConfigs] = None) -> Dict[str, Any]:
    entry = category_labels(category, configs or {}).get(value) or {}
    return {
        "value": value,
        "label": entry.get("label") or value,
        "color": entry.get("color") or FALLBACK_COLOR,
    }
