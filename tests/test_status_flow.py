from __future__ import annotations

import pytest

from fieldservice.core.exceptions import IllegalTransition, ValidationFailed
from fieldservice.models.job import JobStatus
from fieldservice.models.quote import QuoteStatus
from fieldservice.services.status_flow import (
    JOB_TRANSITIONS,
    QUOTE_TRANSITIONS,
    EntityKind,
    can_transition,
    ensure_transition,
    get_next_allowed,
)


def test_job_workflow_moves_forward_one_step_at_a_time() -> None:
    assert get_next_allowed(EntityKind.JOB, "quote") == {"waiting_schedule"}
    assert get_next_allowed(EntityKind.JOB, "waiting_schedule") == {"waiting_execution"}
    assert get_next_allowed(EntityKind.JOB, "waiting_execution") == {"done"}
    assert not can_transition(EntityKind.JOB, "quote", "done")
    assert not can_transition(EntityKind.JOB, "waiting_execution", "quote")


def test_done_job_is_terminal() -> None:
    assert get_next_allowed(EntityKind.JOB, JobStatus.DONE) == frozenset()
    for status in JobStatus:
        with pytest.raises(IllegalTransition):
            ensure_transition(EntityKind.JOB, "done", status.value)


def test_quote_workflow_has_single_backward_edge() -> None:
    assert get_next_allowed(EntityKind.QUOTE, "draft") == {"sent"}
    assert get_next_allowed(EntityKind.QUOTE, "sent") == {"approved", "rejected"}
    assert get_next_allowed(EntityKind.QUOTE, "approved") == frozenset()
    assert can_transition(EntityKind.QUOTE, "rejected", "draft")
    assert not can_transition(EntityKind.QUOTE, "approved", "draft")
    assert not can_transition(EntityKind.QUOTE, "sent", "draft")


@pytest.mark.parametrize(
    ("kind", "table"),
    [(EntityKind.JOB, JOB_TRANSITIONS), (EntityKind.QUOTE, QUOTE_TRANSITIONS)],
)
def test_next_allowed_never_contains_current_status(kind: EntityKind, table: dict) -> None:
    for status in table:
        assert status not in get_next_allowed(kind, status)
        with pytest.raises(IllegalTransition):
            ensure_transition(kind, status, status)


def test_unknown_status_has_no_transitions() -> None:
    assert get_next_allowed(EntityKind.JOB, "in_progress") == frozenset()
    assert get_next_allowed(EntityKind.QUOTE, None) == frozenset()
    assert not can_transition(EntityKind.JOB, "cancelled", "done")


def test_enum_members_and_strings_are_interchangeable() -> None:
    assert can_transition(EntityKind.QUOTE, QuoteStatus.SENT, QuoteStatus.APPROVED)
    assert can_transition("job", JobStatus.WAITING_EXECUTION, "done")


def test_illegal_transition_message_names_both_statuses() -> None:
    with pytest.raises(IllegalTransition) as exc_info:
        ensure_transition(EntityKind.QUOTE, "approved", "draft")

    error = exc_info.value
    assert isinstance(error, ValidationFailed)
    assert error.status_code == 409
    assert error.message == "Illegal quote status transition: approved -> draft"
