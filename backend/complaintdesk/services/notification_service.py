"""
Complaint lifecycle notifications.

Handlers depend on the ``NotificationSender`` port only; the email adapter
is the default implementation. Delivery is best-effort: every recipient is
attempted independently and no failure ever reaches the caller.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from html import escape
from typing import Optional

from complaintdesk.core.config import settings
from complaintdesk.core.logging_config import logger
from complaintdesk.schemas.complaint import ComplaintResponse
from complaintdesk.services.email_service import EmailService, get_email_service


class NotificationSender(ABC):
    """Port for complaint lifecycle side effects"""

    @abstractmethod
    async def complaint_created(self, complaint: ComplaintResponse) -> None:
        ...

    @abstractmethod
    async def complaint_status_updated(self, complaint: ComplaintResponse) -> None:
        ...


def _timestamp() -> str:
    return datetime.utcnow().strftime("%Y-%m-%d %H:%M UTC")


class EmailNotificationSender(NotificationSender):
    """Sends complaint notifications to the admin mailbox and complaint owners"""

    def __init__(self, email_service: EmailService, admin_email: str):
        self.email_service = email_service
        self.admin_email = admin_email

    async def complaint_created(self, complaint: ComplaintResponse) -> None:
        title = escape(complaint.title)
        html = f"""
        <h2>New Complaint Submitted</h2>
        <p><strong>Title:</strong> {title}</p>
        <p><strong>Category:</strong> {complaint.category.value}</p>
        <p><strong>Priority:</strong> {complaint.priority.value}</p>
        <p><strong>Submitted by:</strong> {escape(complaint.user_name)} ({escape(complaint.user_email)})</p>
        <p><strong>Description:</strong></p>
        <p>{escape(complaint.description)}</p>
        <p><strong>Date Submitted:</strong> {complaint.date_submitted.strftime("%Y-%m-%d %H:%M UTC")}</p>
        """
        text = (
            f"New complaint submitted: {complaint.title}\n"
            f"Category: {complaint.category.value}\n"
            f"Priority: {complaint.priority.value}\n"
            f"Submitted by: {complaint.user_name} ({complaint.user_email})\n\n"
            f"{complaint.description}\n"
        )
        await self._deliver(
            self.admin_email,
            f"New Complaint Submitted: {complaint.title}",
            html,
            text,
        )

    async def complaint_status_updated(self, complaint: ComplaintResponse) -> None:
        title = escape(complaint.title)
        status = complaint.status.value
        updated = _timestamp()

        admin_html = f"""
        <h2>Complaint Status Updated</h2>
        <p><strong>Title:</strong> {title}</p>
        <p><strong>New Status:</strong> {status}</p>
        <p><strong>Category:</strong> {complaint.category.value}</p>
        <p><strong>Priority:</strong> {complaint.priority.value}</p>
        <p><strong>Submitted by:</strong> {escape(complaint.user_name)} ({escape(complaint.user_email)})</p>
        <p><strong>Date Updated:</strong> {updated}</p>
        """
        owner_html = f"""
        <h2>Your Complaint Status Has Been Updated</h2>
        <p>Dear {escape(complaint.user_name)},</p>
        <p>Your complaint has been updated with a new status.</p>
        <p><strong>Title:</strong> {title}</p>
        <p><strong>New Status:</strong> {status}</p>
        <p><strong>Date Updated:</strong> {updated}</p>
        <p>Thank you for your patience.</p>
        """

        # Independent sends: the owner is notified even if the admin copy fails
        await self._deliver(
            self.admin_email,
            f"Complaint Status Updated: {complaint.title}",
            admin_html,
            f"Complaint '{complaint.title}' is now {status}.\n",
        )
        await self._deliver(
            complaint.user_email,
            f"Your Complaint Status Updated: {complaint.title}",
            owner_html,
            f"Dear {complaint.user_name},\n\nYour complaint '{complaint.title}' is now {status}.\n",
        )

    async def _deliver(self, to_email: str, subject: str, html: str, text: str) -> bool:
        try:
            sent = await self.email_service.send_email(to_email, subject, html, text)
        except Exception as e:
            logger.log_error_with_context(e, context="notification", recipient=to_email)
            return False

        if not sent:
            logger.warning(f"[Notify] Delivery to {to_email} failed: {subject}")
        return sent


# Process-wide sender, created on first use
_notifier: Optional[NotificationSender] = None


def get_notifier() -> NotificationSender:
    """FastAPI dependency returning the configured notification sender"""
    global _notifier
    if _notifier is None:
        _notifier = EmailNotificationSender(get_email_service(), settings.ADMIN_EMAIL)
    return _notifier
