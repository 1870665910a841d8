"""
Notification sink for confirmed academic entries.

Delivery is best-effort: a failure is logged and reported back as an outcome,
it never undoes the approval that triggered it.
"""
import logging
from typing import Optional

from app.core.config import settings
from app.schemas.notification import BookingNotification
from app.services.email_service import EmailService, email_service
from app.services.side_effects import SideEffectOutcome

logger = logging.getLogger(__name__)

NOTIFICATION_EFFECT = "notification"


def build_booking_notification(entry, entry_type: str) -> BookingNotification:
    """
    Build the confirmation payload from an entry with its teacher, class and
    subject loaded.
    """
    teacher = entry.teacher
    return BookingNotification(
        teacher_name=teacher.full_name or teacher.username,
        teacher_email=teacher.email,
        entry_type=entry_type,
        class_name=entry.class_info.name,
        subject_name=entry.subject.name,
        grade=entry.grade,
        term=entry.term.value,
        week_number=entry.week_number,
        topics=getattr(entry, "upcoming_topics", None),
        scheduled_day=entry.scheduled_day,
        scheduled_date=entry.scheduled_date.isoformat() if entry.scheduled_date else None,
        scheduled_slot=entry.scheduled_slot,
        session_type=getattr(entry, "session_type", None),
        teams_link=getattr(entry, "teams_link", None),
    )


class NotificationService:
    """Delivers booking confirmations through the email service."""

    def __init__(self, sender: Optional[EmailService] = None, enabled: Optional[bool] = None):
        self.sender = sender or email_service
        self.enabled = settings.NOTIFICATIONS_ENABLED if enabled is None else enabled

    async def dispatch(self, payload: BookingNotification) -> SideEffectOutcome:
        if not self.enabled:
            logger.info(f"Notifications disabled, skipping confirmation for {payload.teacher_email}")
            return SideEffectOutcome(name=NOTIFICATION_EFFECT, ok=True)

        try:
            self.sender.send_booking_confirmation(payload)
        except Exception as e:
            logger.error(f"Failed to send booking confirmation to {payload.teacher_email}: {str(e)}")
            return SideEffectOutcome(name=NOTIFICATION_EFFECT, ok=False, error=str(e))

        return SideEffectOutcome(name=NOTIFICATION_EFFECT, ok=True)
