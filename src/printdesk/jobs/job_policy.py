"""Status transition table and role/ownership checks for print jobs.

Everything here is pure: no storage access, so the rules can be checked
directly against :class:`~printdesk.auth.auth_models.Actor` and
:class:`~printdesk.jobs.jobs_models.PrintJob` values.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Mapping

from ..auth.auth_models import SUBMITTER_ROLES, Actor
from .jobs_errors import InvalidTransition
from .jobs_models import JobStatus, PrintJob


class Operation(StrEnum):
    SUBMIT = "submit"
    VIEW = "view"
    MARK_READY = "mark_ready"
    MARK_COLLECTED = "mark_collected"
    DELETE = "delete"
    LIST_QUEUE = "list_queue"
    LIST_OWN = "list_own"
    SWEEP = "sweep"
    VIEW_SLOTS = "view_slots"


class Authorization(StrEnum):
    """Who may perform an operation."""

    AUTHENTICATED = "authenticated"
    SUBMITTER_ROLE = "submitter_role"
    STAFF = "staff"
    STAFF_OR_OWNER = "staff_or_owner"


TRANSITIONS: Mapping[tuple[JobStatus, JobStatus], Authorization] = MappingProxyType(
    {
        (JobStatus.IN_PROGRESS, JobStatus.READY): Authorization.STAFF,
        (JobStatus.READY, JobStatus.COLLECTED): Authorization.STAFF_OR_OWNER,
    }
)

TRANSITION_OPERATIONS: Mapping[JobStatus, Operation] = MappingProxyType(
    {
        JobStatus.READY: Operation.MARK_READY,
        JobStatus.COLLECTED: Operation.MARK_COLLECTED,
    }
)

OPERATION_AUTHORIZATION: Mapping[Operation, Authorization] = MappingProxyType(
    {
        Operation.SUBMIT: Authorization.SUBMITTER_ROLE,
        Operation.VIEW: Authorization.STAFF_OR_OWNER,
        Operation.MARK_READY: TRANSITIONS[(JobStatus.IN_PROGRESS, JobStatus.READY)],
        Operation.MARK_COLLECTED: TRANSITIONS[(JobStatus.READY, JobStatus.COLLECTED)],
        Operation.DELETE: Authorization.STAFF,
        Operation.LIST_QUEUE: Authorization.STAFF,
        Operation.LIST_OWN: Authorization.AUTHENTICATED,
        Operation.SWEEP: Authorization.STAFF,
        Operation.VIEW_SLOTS: Authorization.STAFF,
    }
)


def transition_for(current: JobStatus, target: JobStatus) -> Operation:
    """Return the operation moving a job from ``current`` to ``target``.

    Raises :class:`InvalidTransition` for any pair missing from ``TRANSITIONS``.
    """
    if (current, target) not in TRANSITIONS:
        raise InvalidTransition(f"cannot move job from {current} to {target}")
    return TRANSITION_OPERATIONS[target]


def is_authorized(actor: Actor, authorization: Authorization, job: PrintJob | None = None) -> bool:
    if authorization is Authorization.AUTHENTICATED:
        return True
    if authorization is Authorization.SUBMITTER_ROLE:
        return actor.role in SUBMITTER_ROLES
    if authorization is Authorization.STAFF:
        return actor.is_staff
    if authorization is Authorization.STAFF_OR_OWNER:
        return actor.is_staff or (job is not None and job.submitter.id == actor.id)
    return False


def can_perform(actor: Actor, operation: Operation, job: PrintJob | None = None) -> bool:
    """Return whether ``actor`` may run ``operation`` (on ``job`` when given)."""
    return is_authorized(actor, OPERATION_AUTHORIZATION[operation], job)


__all__ = [
    "Authorization",
    "OPERATION_AUTHORIZATION",
    "Operation",
    "TRANSITIONS",
    "can_perform",
    "is_authorized",
    "transition_for",
]
