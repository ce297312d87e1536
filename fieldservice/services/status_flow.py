"""
Status Flow Module

Fixed transition tables for jobs and quotes. A status absent from a table,
or mapped to an empty set, has no legal outgoing transitions.

The tables only know the closed JobStatus/QuoteStatus vocabularies;
per-account label configuration never changes what is legal here.
"""
import logging
from enum import Enum
from typing import Dict, FrozenSet, Union

from fieldservice.core.config import settings
from fieldservice.core.exceptions import IllegalTransition
from fieldservice.models.job import JobStatus
from fieldservice.models.quote import QuoteStatus

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    JOB = "job"
    QUOTE = "quote"


JOB_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    JobStatus.QUOTE.value: frozenset({JobStatus.WAITING_SCHEDULE.value}),
    JobStatus.WAITING_SCHEDULE.value: frozenset({JobStatus.WAITING_EXECUTION.value}),
    JobStatus.WAITING_EXECUTION.value: frozenset({JobStatus.DONE.value}),
    JobStatus.DONE.value: frozenset(),
}

QUOTE_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    QuoteStatus.DRAFT.value: frozenset({QuoteStatus.SENT.value}),
    QuoteStatus.SENT.value: frozenset({QuoteStatus.APPROVED.value, QuoteStatus.REJECTED.value}),
    QuoteStatus.APPROVED.value: frozenset(),
    # the only backward edge: reopen a rejected quote for revision
    QuoteStatus.REJECTED.value: frozenset({QuoteStatus.DRAFT.value}),
}

_TABLES = {
    EntityKind.JOB: JOB_TRANSITIONS,
    EntityKind.QUOTE: QUOTE_TRANSITIONS,
}


def _value(status: Union[str, Enum, None]) -> str:
    if isinstance(status, Enum):
        return status.value
    return status


def get_next_allowed(kind: EntityKind, current: Union[str, Enum, None]) -> FrozenSet[str]:
    """Statuses reachable from ``current`` in one step (never includes ``current``)."""
    return _TABLES[EntityKind(kind)].get(_value(current), frozenset())


def can_transition(kind: EntityKind, current: Union[str, Enum, None], proposed: Union[str, Enum, None]) -> bool:
    return _value(proposed) in get_next_allowed(kind, current)


def ensure_transition(kind: EntityKind, current: Union[str, Enum, None], proposed: Union[str, Enum, None]) -> None:
    """
    Raise ``IllegalTransition`` unless ``current -> proposed`` is in the table.

    Called before any write is issued. In development the rejection is
    logged with a traceback so a caller offering illegal actions is noticed.
    """
    kind = EntityKind(kind)
    if can_transition(kind, current, proposed):
        return

    error = IllegalTransition(kind.value, _value(current), _value(proposed))
    if settings.is_production:
        logger.warning("%s", error.message)
    else:
        logger.warning("%s", error.message, stack_info=True)
    raise error
