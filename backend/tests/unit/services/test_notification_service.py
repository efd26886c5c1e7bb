"""
Unit Tests for complaint notifications
"""
from datetime import datetime
from typing import List, Tuple
from unittest.mock import AsyncMock

from complaintdesk.models.complaint import ComplaintCategory, ComplaintPriority, ComplaintStatus
from complaintdesk.schemas.complaint import ComplaintResponse
from complaintdesk.services.email_service import EmailService
from complaintdesk.services.notification_service import EmailNotificationSender

ADMIN_INBOX = "admin@example.com"


class StubEmailService(EmailService):
    """Records every send; optionally fails for given recipients"""

    def __init__(self, failing: Tuple[str, ...] = (), raising: Tuple[str, ...] = ()):
        super().__init__(smtp_host="smtp.example.com", from_email="noreply@example.com")
        self.failing = failing
        self.raising = raising
        self.sent: List[Tuple[str, str, str]] = []

    async def send_email(self, to_email, subject, html_content, text_content=None) -> bool:
        self.sent.append((to_email, subject, html_content))
        if to_email in self.raising:
            raise RuntimeError("transport exploded")
        return to_email not in self.failing


def snapshot(**overrides) -> ComplaintResponse:
    values = dict(
        id="c-1",
        title="Broken blender",
        description="It stopped working after one day",
        category=ComplaintCategory.PRODUCT,
        priority=ComplaintPriority.HIGH,
        status=ComplaintStatus.PENDING,
        date_submitted=datetime(2024, 5, 1, 12, 0, 0),
        user_id="u-1",
        user_email="ann@example.com",
        user_name="Ann",
    )
    values.update(overrides)
    return ComplaintResponse(**values)


class TestComplaintCreated:

    async def test_admin_notified(self):
        email = StubEmailService()
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_created(snapshot())

        assert len(email.sent) == 1
        to_email, subject, html = email.sent[0]
        assert to_email == ADMIN_INBOX
        assert subject == "New Complaint Submitted: Broken blender"
        assert "Ann" in html
        assert "ann@example.com" in html
        assert "High" in html

    async def test_html_is_escaped(self):
        email = StubEmailService()
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_created(snapshot(title="<script>alert(1)</script>"))

        _, _, html = email.sent[0]
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    async def test_failure_does_not_raise(self):
        email = StubEmailService(raising=(ADMIN_INBOX,))
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_created(snapshot())


class TestComplaintStatusUpdated:

    async def test_admin_and_owner_notified(self):
        email = StubEmailService()
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_status_updated(snapshot(status=ComplaintStatus.IN_PROGRESS))

        recipients = [to for to, _, _ in email.sent]
        assert recipients == [ADMIN_INBOX, "ann@example.com"]
        for _, subject, html in email.sent:
            assert "Broken blender" in subject
            assert "In Progress" in html

    async def test_owner_notified_when_admin_send_fails(self):
        email = StubEmailService(failing=(ADMIN_INBOX,))
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_status_updated(snapshot(status=ComplaintStatus.RESOLVED))

        assert [to for to, _, _ in email.sent] == [ADMIN_INBOX, "ann@example.com"]

    async def test_owner_notified_when_admin_send_raises(self):
        email = StubEmailService(raising=(ADMIN_INBOX,))
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_status_updated(snapshot(status=ComplaintStatus.RESOLVED))

        assert [to for to, _, _ in email.sent] == [ADMIN_INBOX, "ann@example.com"]

    async def test_uses_email_service_interface(self):
        email = EmailService(smtp_host="smtp.example.com", from_email="noreply@example.com")
        email.send_email = AsyncMock(return_value=True)
        sender = EmailNotificationSender(email, ADMIN_INBOX)

        await sender.complaint_status_updated(snapshot())

        assert email.send_email.await_count == 2
