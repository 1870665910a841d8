"""
Approval workflow for academic planning entries.

The lifecycle DRAFT -> PENDING_APPROVAL -> APPROVED / REJECTED is driven by a
transition table keyed by (current status, action, actor class). Role and
department checks decide the actor class before the table is consulted, so
every allowed move is one row of the table.
"""

import enum
from typing import Dict, Optional, Tuple

from app.core.exceptions import AuthorizationError, InvalidTransitionError
from app.models.academic_entry import EntryStatus
from app.models.user import UserRole


class WorkflowAction(enum.Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    EDIT = "edit"


class ActorClass(enum.Enum):
    OWNER = "owner"          # the entry's teacher, without review rights
    REVIEWER = "reviewer"    # holds a reviewing role


REVIEWER_ROLES = frozenset({UserRole.ADMIN, UserRole.VICE_PRINCIPAL, UserRole.LEAD_TEACHER})

# Reviewers that may only act on entries of teachers in their own department
DEPARTMENT_SCOPED_ROLES = frozenset({UserRole.LEAD_TEACHER})

ADMIN_ROLES = frozenset({UserRole.ADMIN})

# Roles that may see and mark attendance of any support session
ATTENDANCE_ROLES = frozenset({
    UserRole.ADMIN, UserRole.PRINCIPAL, UserRole.VICE_PRINCIPAL, UserRole.LEAD_TEACHER
})

_DRAFT = EntryStatus.DRAFT
_PENDING = EntryStatus.PENDING_APPROVAL
_APPROVED = EntryStatus.APPROVED
_REJECTED = EntryStatus.REJECTED

TRANSITIONS: Dict[Tuple[EntryStatus, WorkflowAction, ActorClass], EntryStatus] = {
    # Submitting confirms the teacher's own booking
    (_DRAFT, WorkflowAction.SUBMIT, ActorClass.OWNER): _APPROVED,
    (_DRAFT, WorkflowAction.SUBMIT, ActorClass.REVIEWER): _APPROVED,

    (_DRAFT, WorkflowAction.APPROVE, ActorClass.REVIEWER): _APPROVED,
    (_PENDING, WorkflowAction.APPROVE, ActorClass.REVIEWER): _APPROVED,

    (_DRAFT, WorkflowAction.REJECT, ActorClass.REVIEWER): _REJECTED,
    (_PENDING, WorkflowAction.REJECT, ActorClass.REVIEWER): _REJECTED,
    # Rejecting an approved entry withdraws its linked booking
    (_APPROVED, WorkflowAction.REJECT, ActorClass.REVIEWER): _REJECTED,
    (_REJECTED, WorkflowAction.REJECT, ActorClass.REVIEWER): _REJECTED,

    # Owner edits of reviewed entries go back into the review queue
    (_DRAFT, WorkflowAction.EDIT, ActorClass.OWNER): _DRAFT,
    (_PENDING, WorkflowAction.EDIT, ActorClass.OWNER): _PENDING,
    (_APPROVED, WorkflowAction.EDIT, ActorClass.OWNER): _PENDING,
    (_REJECTED, WorkflowAction.EDIT, ActorClass.OWNER): _PENDING,

    (_DRAFT, WorkflowAction.EDIT, ActorClass.REVIEWER): _DRAFT,
    (_PENDING, WorkflowAction.EDIT, ActorClass.REVIEWER): _PENDING,
    (_APPROVED, WorkflowAction.EDIT, ActorClass.REVIEWER): _APPROVED,
    (_REJECTED, WorkflowAction.EDIT, ActorClass.REVIEWER): _REJECTED,
}


def is_reviewer(user) -> bool:
    return user.role in REVIEWER_ROLES


def get_actor_class(user, entry) -> Optional[ActorClass]:
    """Reviewer rights win over ownership; anyone else has no part in the workflow."""
    if is_reviewer(user):
        return ActorClass.REVIEWER
    if user.id == entry.teacher_id:
        return ActorClass.OWNER
    return None


def check_review_scope(reviewer, owner) -> None:
    """
    Enforce the department restriction of lead teachers.

    A missing department on either side denies the request.

    Raises:
        AuthorizationError: If the reviewer may not act on this owner's entries
    """
    if reviewer.role not in DEPARTMENT_SCOPED_ROLES:
        return
    if (
        owner is None
        or not reviewer.department
        or not owner.department
        or reviewer.department != owner.department
    ):
        raise AuthorizationError("Lead Teachers can only review entries from their own department")


class ApprovalStateMachine:
    """Resolves workflow actions to the next entry status."""

    def __init__(self, self_approve_on_submit: bool = True):
        self.self_approve_on_submit = self_approve_on_submit

    def next_status(
        self,
        entry,
        action: WorkflowAction,
        user,
        owner=None
    ) -> EntryStatus:
        """
        Work out the status an entry moves to.

        Args:
            entry: The entry being acted on (needs status and teacher_id)
            action: Workflow action
            user: Acting user (needs id, role, department)
            owner: The entry's teacher, required for approve/reject by lead teachers

        Returns:
            The next status

        Raises:
            AuthorizationError: If the user may not perform the action
            InvalidTransitionError: If the action is not allowed from the current status
        """
        actor = get_actor_class(user, entry)

        if action in (WorkflowAction.APPROVE, WorkflowAction.REJECT):
            if actor != ActorClass.REVIEWER:
                raise AuthorizationError(
                    f"Only Admin, Vice Principal, or Lead Teacher can {action.value}"
                )
            check_review_scope(user, owner)
        elif actor is None:
            raise AuthorizationError("You can only change your own entries")

        next_status = TRANSITIONS.get((entry.status, action, actor))
        if next_status is None:
            raise InvalidTransitionError(
                f"Cannot {action.value} an entry that is {entry.status.value}",
                reason="INVALID_TRANSITION"
            )

        if action == WorkflowAction.SUBMIT and not self.self_approve_on_submit:
            return _PENDING
        return next_status


def can_delete(user, entry) -> bool:
    return user.id == entry.teacher_id or user.role in ADMIN_ROLES


def can_modify_booking(user, booking) -> bool:
    """Only the creator or an admin may change a booking."""
    return user.id == booking.created_by_id or user.role in ADMIN_ROLES


def can_manage_attendance(user, support_entry) -> bool:
    return user.id == support_entry.teacher_id or user.role in ATTENDANCE_ROLES
