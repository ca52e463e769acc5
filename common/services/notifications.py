"""
Outbound email notifications.

Messages are rendered from in-code templates and handed to Django's mail
backend on a detached worker once the surrounding transaction commits. The
request never waits for SMTP and never sees a delivery failure: every
recipient is attempted in order and failures are only logged.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from django.conf import settings
from django.core.mail import EmailMessage
from django.db import transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationTemplate:
    subject: str
    body: str


TEMPLATES = {
    "enrollment_invite": NotificationTemplate(
        subject="Application Approved - Complete Your Enrollment",
        body=(
            "Dear {full_name},\n\n"
            "Your application has been approved. Please complete your enrollment "
            "by clicking the link below:\n\n"
            "{enrollment_link}\n\n"
            "{nda_note}\n\n"
        ),
    ),
    "onboarding_credentials": NotificationTemplate(
        subject="Internship Approved - Login Credentials",
        body=(
            "Dear {full_name},\n\n"
            "Your internship has been approved!\n\n"
            "Your login credentials:\n"
            "Username: {application_no}\n"
            "Password: {password}\n\n"
            "Please login at: {login_url}\n\n"
            "Application No: {application_no}\n"
            "Date of Joining: {date_of_joining}\n"
            "Date of Leaving: {date_of_leaving}\n\n"
            "Best regards,\nCoE-CS Team"
        ),
    ),
    "onboarding_staff_notice": NotificationTemplate(
        subject="New Intern Onboarded - {full_name}",
        body=(
            "A new intern has been onboarded:\n\n"
            "Name: {full_name}\n"
            "Application No: {application_no}\n"
            "Enrollment No: {enrollment_no}\n"
            "Date of Joining: {date_of_joining}\n"
            "Date of Leaving: {date_of_leaving}\n"
            "Program: {program}\n"
            "Department: {department}\n\n"
            "Best regards,\nIMS System"
        ),
    ),
    "password_reset": NotificationTemplate(
        subject="Password Reset Request",
        body=(
            "Hello,\n\n"
            "A password reset was requested for your account. Use the link below "
            "within {lifetime_minutes} minutes to choose a new password:\n\n"
            "{reset_link}\n\n"
            "If you did not request this, you can ignore this email.\n\n"
            "Best regards,\nCoE-CS Team"
        ),
    ),
}


@dataclass(frozen=True)
class OutgoingEmail:
    template_code: str
    recipient: str
    context: dict = field(default_factory=dict)
    attachments: tuple[str, ...] = ()


class NotificationService:

    @staticmethod
    def render(template_code: str, context: Optional[dict] = None) -> tuple[str, str]:
        template = TEMPLATES[template_code]
        context = context or {}
        return template.subject.format(**context), template.body.format(**context)

    @classmethod
    def send(cls, message: OutgoingEmail) -> None:
        """Synchronous delivery. Raises whatever the mail backend raises."""
        subject, body = cls.render(message.template_code, message.context)
        email = EmailMessage(
            subject=subject,
            body=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[message.recipient],
        )
        for path in message.attachments:
            if Path(path).is_file():
                email.attach_file(path)
        email.send(fail_silently=False)

    @classmethod
    def _deliver_all(cls, messages: list[OutgoingEmail]) -> None:
        for message in messages:
            try:
                cls.send(message)
            except Exception:
                logger.exception(
                    "Failed to send %s email to %s",
                    message.template_code,
                    message.recipient,
                )
                continue
            logger.info("Sent %s email to %s", message.template_code, message.recipient)

    @classmethod
    def dispatch(cls, messages: Iterable[OutgoingEmail]) -> None:
        """
        Fire-and-forget delivery, scheduled after the current transaction
        commits. Messages go out sequentially in the given order.
        """
        batch = list(messages)
        if not batch:
            return

        def _start():
            if getattr(settings, "NOTIFICATIONS_RUN_INLINE", False):
                cls._deliver_all(batch)
                return
            worker = threading.Thread(
                target=cls._deliver_all,
                args=(batch,),
                name="notification-dispatch",
                daemon=True,
            )
            worker.start()

        transaction.on_commit(_start)
