"""Status state machine for onboarding applications."""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet

from .errors import InvalidStateTransition


class ApplicationState(str, Enum):
    """Lifecycle states, including the implicit state before a first submit."""

    NEVER_SUBMITTED = "never_submitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Transition(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"


ALLOWED_SOURCES: Dict[Transition, FrozenSet[ApplicationState]] = {
    Transition.SUBMIT: frozenset(
        {
            ApplicationState.NEVER_SUBMITTED,
            ApplicationState.PENDING,
            ApplicationState.REJECTED,
        }
    ),
    Transition.APPROVE: frozenset({ApplicationState.PENDING}),
    Transition.REJECT: frozenset({ApplicationState.PENDING}),
}

TARGETS: Dict[Transition, ApplicationState] = {
    Transition.SUBMIT: ApplicationState.PENDING,
    Transition.APPROVE: ApplicationState.APPROVED,
    Transition.REJECT: ApplicationState.REJECTED,
}


def state_of(status: ApplicationState | str | None) -> ApplicationState:
    """Map a stored status (or ``None`` for no record) to a lifecycle state."""

    if not status:
        return ApplicationState.NEVER_SUBMITTED
    if isinstance(status, Enum):
        return ApplicationState(status.value)
    return ApplicationState(status)


def can_transition(current: ApplicationState | str | None, transition: Transition | str) -> bool:
    return state_of(current) in ALLOWED_SOURCES[Transition(transition)]


def next_state(current: ApplicationState | str | None, transition: Transition | str) -> ApplicationState:
    """Return the state reached by ``transition`` or raise ``InvalidStateTransition``.

    Submitting always lands in ``pending``, whatever the prior state was, so a
    rejection never survives a resubmission as the effective status.
    """

    state = state_of(current)
    transition = Transition(transition)
    if state not in ALLOWED_SOURCES[transition]:
        raise InvalidStateTransition(state.value, transition.value)
    return TARGETS[transition]


def is_terminal(current: ApplicationState | str | None) -> bool:
    state = state_of(current)
    return not any(state in sources for sources in ALLOWED_SOURCES.values())
