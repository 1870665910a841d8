import logging
from typing import Dict
import resend
from pathlib import Path

from app.core.config import settings
from app.schemas.notification import BookingNotification


logger = logging.getLogger(__name__)

_ENTRY_LABELS = {
    "learning_summary": ("Learning summary", "Quiz"),
    "learning_support": ("Learning support session", "Session"),
}


class EmailService:
    def __init__(self):
        resend.api_key = settings.RESEND_API_KEY
        self.from_email = settings.FROM_EMAIL
        self.frontend_url = settings.FRONTEND_URL
        self.templates_dir = Path(__file__).parent.parent / "emails" / "templates"

    def _load_template(self, template_name: str) -> str:
        """Load email template from file."""
        template_path = self.templates_dir / template_name
        try:
            with open(template_path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            logger.error(f"Template {template_name} not found")
            raise ValueError(f"Email template {template_name} not found")

    def _render_template(self, template_content: str, variables: Dict[str, str]) -> str:
        """Replace template variables with actual values."""
        content = template_content
        for key, value in variables.items():
            placeholder = f"{{{{{key}}}}}"
            content = content.replace(placeholder, str(value))
        return content

    def _booking_variables(self, notification: BookingNotification) -> Dict[str, str]:
        entry_label, event_label = _ENTRY_LABELS.get(
            notification.entry_type, ("Entry", "Scheduled")
        )

        when_parts = [
            part for part in (
                notification.scheduled_day,
                notification.scheduled_date,
                notification.scheduled_slot,
            ) if part
        ]

        if notification.entry_type == "learning_support":
            details = notification.session_type or "-"
            if notification.teams_link:
                details = f"{details} ({notification.teams_link})"
        else:
            details = notification.topics or "-"

        return {
            "entry_label": entry_label,
            "entry_label_lower": entry_label.lower(),
            "teacher_name": notification.teacher_name or "Teacher",
            "class_name": notification.class_name,
            "subject_name": notification.subject_name,
            "grade": notification.grade,
            "week_label": f"{notification.term.replace('TERM_', 'Term ')} Week {notification.week_number}",
            "event_label": event_label,
            "event_when": ", ".join(when_parts) if when_parts else "Not scheduled",
            "details": details,
            "frontend_url": self.frontend_url,
        }

    def send_booking_confirmation(self, notification: BookingNotification) -> None:
        """
        Send the booking confirmation email.

        Raises on any failure so the caller can record the outcome.
        """
        if not settings.RESEND_API_KEY:
            raise RuntimeError("RESEND_API_KEY is not configured")

        template = self._load_template("booking_confirmation.html")
        variables = self._booking_variables(notification)
        html_content = self._render_template(template, variables)

        email_data = {
            "from": self.from_email,
            "to": [notification.teacher_email],
            "subject": f"{variables['entry_label']} confirmed - {notification.class_name} {notification.subject_name}",
            "html": html_content
        }

        # resend has no async client; the call is synchronous
        response = resend.Emails.send(email_data)
        logger.info(f"Booking confirmation sent to {notification.teacher_email}: {response}")


# Create singleton instance
email_service = EmailService()
