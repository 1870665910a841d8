"""
Academic entry service.

One service drives both learning summaries and learning support entries:
- create / update run the entry conflict rules for the entry's term week
- submit / approve / reject move the entry through the approval workflow
- approval materializes the linked booking and notifies the teacher; both are
  best-effort and run after the decision is committed
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.academic_entry import (
    AcademicTerm, EntryStatus, LearningSummary, LearningSupport
)
from app.models.user import User
from app.services.academic_calendar_service import AcademicCalendarService, calendar_service
from app.services.approval_workflow import ApprovalStateMachine, WorkflowAction, can_delete
from app.services.conflict_rules import EntryCandidate, validate_entry
from app.services.linked_event_service import LinkedEventService
from app.services.notification_service import NotificationService, build_booking_notification
from app.services.side_effects import SideEffectOutcome

logger = logging.getLogger(__name__)


class EntryKind(enum.Enum):
    SUMMARY = "learning_summary"
    SUPPORT = "learning_support"


ENTRY_MODELS = {
    EntryKind.SUMMARY: LearningSummary,
    EntryKind.SUPPORT: LearningSupport,
}

EVENT_LABELS = {
    EntryKind.SUMMARY: "quiz",
    EntryKind.SUPPORT: "support session",
}

# Columns a caller may set directly; week dates and ownership are derived
SUBTYPE_FIELDS = {
    EntryKind.SUMMARY: ("upcoming_topics",),
    EntryKind.SUPPORT: ("session_type", "teams_link", "location"),
}
COMMON_FIELDS = ("grade", "class_id", "subject_id", "scheduled_day", "scheduled_date", "scheduled_slot")

# Columns mirrored by the linked booking
LINKED_FIELDS = ("class_id", "subject_id", "scheduled_date", "scheduled_slot")


@dataclass
class WorkflowResult:
    """An entry after a workflow action, plus the outcome of its side effects."""
    entry: object
    side_effects: List[SideEffectOutcome] = field(default_factory=list)


class AcademicEntryService:
    """Service for learning summaries and learning support entries."""

    def __init__(
        self,
        db: AsyncSession,
        kind: EntryKind,
        state_machine: Optional[ApprovalStateMachine] = None,
        notifier: Optional[NotificationService] = None,
        linked_events: Optional[LinkedEventService] = None,
        calendar: Optional[AcademicCalendarService] = None
    ):
        self.db = db
        self.kind = kind
        self.model = ENTRY_MODELS[kind]
        self.event_label = EVENT_LABELS[kind]
        self.state_machine = state_machine or ApprovalStateMachine(settings.SELF_APPROVE_ON_SUBMIT)
        self.notifier = notifier or NotificationService()
        self.linked_events = linked_events or LinkedEventService(db)
        self.calendar = calendar or calendar_service

    # ========== Data access ==========

    async def _get_entry(self, entry_id: UUID):
        result = await self.db.execute(
            select(self.model)
            .options(
                selectinload(self.model.teacher),
                selectinload(self.model.class_info),
                selectinload(self.model.subject)
            )
            .where(self.model.id == entry_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _entries_in_week(self, term: AcademicTerm, week_number: int) -> list:
        result = await self.db.execute(
            select(self.model).where(
                and_(
                    self.model.term == term,
                    self.model.week_number == week_number
                )
            )
        )
        return list(result.scalars().all())

    async def _require_entry(self, entry_id: UUID):
        entry = await self._get_entry(entry_id)
        if not entry:
            raise NotFoundError("Entry not found")
        return entry

    def _editable_fields(self):
        return COMMON_FIELDS + SUBTYPE_FIELDS[self.kind]

    async def _check_conflicts(self, candidate: EntryCandidate, term: AcademicTerm, week_number: int) -> None:
        existing = await self._entries_in_week(term, week_number)
        try:
            validate_entry(candidate, existing, week_number=week_number, event_label=self.event_label)
        except ValidationError as e:
            logger.info(f"{self.kind.value} rejected for class {candidate.class_id} week {week_number}: {e.reason}")
            raise

    # ========== CRUD ==========

    async def create_entry(self, data, user: User):
        """
        Create a DRAFT entry owned by the requesting user.

        Raises:
            ValidationError: If the week is out of range
            EntryConflictError: If an entry rule rejects it
        """
        try:
            week_start, week_end = self.calendar.get_week_date_range(data.term, data.week_number)
        except ValueError as e:
            raise ValidationError(str(e))

        candidate = EntryCandidate(
            class_id=data.class_id,
            subject_id=data.subject_id,
            teacher_id=user.id,
            scheduled_date=data.scheduled_date,
            scheduled_slot=data.scheduled_slot
        )
        await self._check_conflicts(candidate, data.term, data.week_number)

        values = data.model_dump(include=set(self._editable_fields()))
        entry = self.model(
            term=data.term,
            week_number=data.week_number,
            week_start_date=week_start,
            week_end_date=week_end,
            teacher_id=user.id,
            status=EntryStatus.DRAFT,
            **values
        )
        self.db.add(entry)
        await self.db.commit()

        logger.info(f"{self.kind.value} created: {entry.id} by {user.id}")
        return await self._get_entry(entry.id)

    async def update_entry(self, entry_id: UUID, data, user: User):
        """
        Apply a partial update.

        Conflicts are checked against the entry's term week with the owner's
        teacher id, excluding the entry itself. An owner edit of a reviewed
        entry sends it back for approval. A reviewer moving an approved entry
        to another day, slot, class or subject gets a fresh linked booking.
        """
        entry = await self._require_entry(entry_id)
        next_status = self.state_machine.next_status(entry, WorkflowAction.EDIT, user)

        update_data = data.model_dump(exclude_unset=True, include=set(self._editable_fields()))

        candidate = EntryCandidate(
            class_id=update_data.get("class_id", entry.class_id),
            subject_id=update_data.get("subject_id", entry.subject_id),
            teacher_id=entry.teacher_id,
            scheduled_date=update_data.get("scheduled_date", entry.scheduled_date),
            scheduled_slot=update_data.get("scheduled_slot", entry.scheduled_slot),
            id=entry.id
        )
        await self._check_conflicts(candidate, entry.term, entry.week_number)

        # A reviewer edit keeps the entry approved; its booking is rebuilt to match
        relink = (
            next_status == EntryStatus.APPROVED
            and entry.linked_booking_id is not None
            and any(key in update_data and update_data[key] != getattr(entry, key) for key in LINKED_FIELDS)
        )

        for key, value in update_data.items():
            setattr(entry, key, value)

        if next_status != entry.status:
            logger.info(f"{self.kind.value} {entry.id} moved from {entry.status.value} to {next_status.value} after edit")
            if entry.status == EntryStatus.APPROVED and entry.linked_booking_id is not None:
                await self.linked_events.release(entry)
            entry.status = next_status
        elif relink:
            logger.info(f"{self.kind.value} {entry.id} moved while approved; replacing linked booking")
            await self.linked_events.release(entry)

        await self.db.commit()

        if relink:
            await self.linked_events.materialize(await self._get_entry(entry_id))
        return await self._get_entry(entry_id)

    async def delete_entry(self, entry_id: UUID, user: User) -> None:
        entry = await self._require_entry(entry_id)
        if not can_delete(user, entry):
            raise AuthorizationError("You can only delete your own entries")

        if entry.linked_booking_id is not None:
            await self.linked_events.release(entry)

        await self.db.delete(entry)
        await self.db.commit()
        logger.info(f"{self.kind.value} deleted: {entry_id} by {user.id}")

    async def get_entry(self, entry_id: UUID):
        return await self._require_entry(entry_id)

    async def list_entries(
        self,
        term: Optional[AcademicTerm] = None,
        week_number: Optional[int] = None,
        class_id: Optional[UUID] = None,
        teacher_id: Optional[UUID] = None,
        status: Optional[EntryStatus] = None
    ) -> list:
        conditions = []
        if term:
            conditions.append(self.model.term == term)
        if week_number:
            conditions.append(self.model.week_number == week_number)
        if class_id:
            conditions.append(self.model.class_id == class_id)
        if teacher_id:
            conditions.append(self.model.teacher_id == teacher_id)
        if status:
            conditions.append(self.model.status == status)

        query = select(self.model).options(
            selectinload(self.model.class_info),
            selectinload(self.model.subject)
        )
        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(self.model.week_start_date, self.model.created_at)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ========== Workflow ==========

    async def submit(self, entry_id: UUID, user: User) -> WorkflowResult:
        entry = await self._require_entry(entry_id)
        next_status = self.state_machine.next_status(entry, WorkflowAction.SUBMIT, user)

        entry.status = next_status
        if next_status == EntryStatus.APPROVED:
            entry.approved_by_id = user.id

        await self.db.commit()
        logger.info(f"{self.kind.value} {entry.id} submitted by {user.id}: {next_status.value}")

        if next_status != EntryStatus.APPROVED:
            return WorkflowResult(entry=entry)
        return await self._after_approval(entry)

    async def approve(self, entry_id: UUID, user: User, comments: Optional[str] = None) -> WorkflowResult:
        entry = await self._require_entry(entry_id)
        next_status = self.state_machine.next_status(entry, WorkflowAction.APPROVE, user, owner=entry.teacher)

        entry.status = next_status
        entry.approved_by_id = user.id
        entry.approval_comments = comments

        await self.db.commit()
        logger.info(f"{self.kind.value} {entry.id} approved by {user.id}")

        return await self._after_approval(entry)

    async def reject(self, entry_id: UUID, user: User, comments: Optional[str] = None) -> WorkflowResult:
        entry = await self._require_entry(entry_id)
        next_status = self.state_machine.next_status(entry, WorkflowAction.REJECT, user, owner=entry.teacher)

        entry.status = next_status
        entry.approved_by_id = user.id
        entry.approval_comments = comments

        await self.db.commit()
        logger.info(f"{self.kind.value} {entry.id} rejected by {user.id}")

        side_effects = []
        outcome = await self.linked_events.cancel(entry)
        if outcome is not None:
            side_effects.append(outcome)

        return WorkflowResult(entry=await self._get_entry(entry_id), side_effects=side_effects)

    async def _after_approval(self, entry) -> WorkflowResult:
        """Linked booking then notification; neither can undo the approval."""
        entry_id = entry.id
        side_effects = []

        outcome = await self.linked_events.materialize(entry)
        if outcome is not None:
            side_effects.append(outcome)

        # A failed materialization rolls the session back, so reload before use
        entry = await self._get_entry(entry_id)

        try:
            payload = build_booking_notification(entry, self.kind.value)
        except Exception as e:
            logger.error(f"Could not build notification for {self.kind.value} {entry_id}: {str(e)}")
            side_effects.append(SideEffectOutcome(name="notification", ok=False, error=str(e)))
        else:
            side_effects.append(await self.notifier.dispatch(payload))

        return WorkflowResult(entry=entry, side_effects=side_effects)
