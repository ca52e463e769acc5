"""
Application lifecycle operations.

Views validate input with serializers, then call into this module. Every status
change goes through :class:`interns.lifecycle.Lifecycle`; notifications are
queued to go out once the surrounding transaction commits.
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.passwords import generate_random_password, hash_password
from apps.audit import AuditEvents, log_event
from common.services.notifications import NotificationService, OutgoingEmail

from .files import CheckedUpload, attach_upload, discard_stored
from .lifecycle import InvalidTransition, Lifecycle
from .models import Decision, Intern, InternStatus

logger = logging.getLogger(__name__)

NDA_ATTACHED_NOTE = (
    "Please download and sign the attached NDA document and upload it during enrollment."
)
NDA_PORTAL_NOTE = (
    "Please download the NDA document from the portal and upload it during enrollment."
)

DECISION_TARGETS = {
    Decision.APPROVED: InternStatus.PENDING_ENROLLMENT,
    Decision.REJECTED: InternStatus.REJECTED,
    Decision.SPECIAL_APPROVAL: InternStatus.SPECIAL_APPROVAL_REQUIRED,
}


class ApplicationConflict(Exception):
    """A uniqueness rule would be broken (email, application number)."""


def frontend_url(path: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/{path.lstrip('/')}"


# ---------------- Stage 1: application ----------------
EMAIL_TAKEN = (
    "An application with this email address already exists. "
    "Please use a different email or contact support."
)


def submit_application(data: dict, loi: CheckedUpload) -> Intern:
    """Create a Fresh record from ``ApplicationSubmissionSerializer`` data."""
    if Intern.objects.filter(personal_email=data["email"]).exists():
        raise ApplicationConflict(EMAIL_TAKEN)

    intern = Intern(
        full_name=data["full_name"],
        enrollment_no=data["enrollment_no"],
        personal_email=data["email"],
        mobile_no=data["mobile"],
        status=InternStatus.FRESH,
    )
    try:
        with transaction.atomic():
            attach_upload(intern.loi_file, loi)
            intern.save()
    except IntegrityError as exc:
        discard_stored([intern.loi_file.name])
        raise ApplicationConflict(EMAIL_TAKEN) from exc
    except Exception:
        discard_stored([intern.loi_file.name])
        raise

    logger.info("Application %s submitted", intern.pk)
    return intern


# ---------------- Stage 2: admin decision ----------------
def _enrollment_invite(intern: Intern) -> OutgoingEmail:
    nda_path = settings.NDA_TEMPLATE_PATH
    has_nda = bool(nda_path) and Path(nda_path).is_file()
    return OutgoingEmail(
        template_code="enrollment_invite",
        recipient=intern.personal_email,
        context={
            "full_name": intern.full_name,
            "enrollment_link": frontend_url(f"enroll/{intern.pk}"),
            "nda_note": NDA_ATTACHED_NOTE if has_nda else NDA_PORTAL_NOTE,
        },
        attachments=(str(nda_path),) if has_nda else (),
    )


def decide_on_fresh(
    intern_id: int,
    decision: str,
    rejection_reason: str = "",
    special_approval_notes: str = "",
) -> Intern:
    """
    Apply the admin decision to a Fresh application.

    Raises ``Intern.DoesNotExist`` and ``InvalidTransition``.
    """
    target = DECISION_TARGETS[decision]
    with transaction.atomic():
        intern = Intern.objects.select_for_update().get(pk=intern_id)
        Lifecycle.transition(intern, target)
        update_fields = ["status", "updated_at"]

        if target == InternStatus.REJECTED:
            intern.rejection_reason = rejection_reason or ""
            update_fields.append("rejection_reason")
        elif target == InternStatus.SPECIAL_APPROVAL_REQUIRED:
            intern.special_approval_notes = special_approval_notes or ""
            update_fields.append("special_approval_notes")

        intern.save(update_fields=update_fields)

        if target == InternStatus.PENDING_ENROLLMENT:
            NotificationService.dispatch([_enrollment_invite(intern)])

    logger.info("Application %s moved to %s", intern.pk, intern.status)
    return intern


# ---------------- Stage 3: self-service enrollment ----------------
def submit_enrollment(intern_id: int, data: dict, uploads: dict[str, CheckedUpload]) -> Intern:
    """
    Persist the enrollment form and its three documents, then move the
    record to Pending_Approval. ``uploads`` maps ``photo``/``sign``/``nda``
    to already inspected files.

    A new ``email_address`` replaces the personal email used for every
    later notification. Raises ``Intern.DoesNotExist``, ``InvalidTransition``
    and :class:`ApplicationConflict`.
    """
    stored: list[str] = []
    try:
        with transaction.atomic():
            intern = Intern.objects.select_for_update().get(pk=intern_id)
            Lifecycle.transition(intern, InternStatus.PENDING_APPROVAL)

            email = data["email_address"]
            if email and Intern.objects.filter(personal_email=email).exclude(pk=intern.pk).exists():
                raise ApplicationConflict(EMAIL_TAKEN)

            for field_file, key in (
                (intern.passport_photo, "photo"),
                (intern.e_signature, "sign"),
                (intern.signed_nda, "nda"),
            ):
                stored.append(attach_upload(field_file, uploads[key]))

            intern.full_name = data["full_name"] or intern.full_name
            intern.enrollment_no = data["enrollment_no"] or intern.enrollment_no
            intern.personal_email = email or intern.personal_email
            intern.mobile_no = data["contact_no"] or intern.mobile_no
            intern.semester = data["semester"]
            intern.program = data["program"]
            intern.department = data["department"]
            intern.organization = data["organization"]
            intern.gender = data["gender"]
            intern.blood_group = data["blood_group"]
            intern.present_address = data["present_address"]
            intern.permanent_address = data["permanent_address"]
            intern.save()
    except IntegrityError as exc:
        discard_stored(stored)
        raise ApplicationConflict(EMAIL_TAKEN) from exc
    except Exception:
        discard_stored(stored)
        raise

    logger.info("Enrollment submitted for application %s", intern.pk)
    return intern


# ---------------- Stage 4: onboarding ----------------
def _onboarding_messages(intern: Intern, password: str) -> list[OutgoingEmail]:
    dates = {
        "date_of_joining": intern.date_of_joining.isoformat(),
        "date_of_leaving": intern.date_of_leaving.isoformat(),
    }
    messages = [
        OutgoingEmail(
            template_code="onboarding_credentials",
            recipient=intern.personal_email,
            context={
                "full_name": intern.full_name,
                "application_no": intern.application_no,
                "password": password,
                "login_url": frontend_url("login"),
                **dates,
            },
        )
    ]
    staff_context = {
        "full_name": intern.full_name,
        "application_no": intern.application_no,
        "enrollment_no": intern.enrollment_no,
        "program": intern.program,
        "department": intern.department,
        **dates,
    }
    for recipient in settings.ONBOARDING_NOTIFY_EMAILS:
        messages.append(
            OutgoingEmail(
                template_code="onboarding_staff_notice",
                recipient=recipient,
                context=staff_context,
            )
        )
    return messages


def finalize_onboarding(
    intern_id: int,
    application_no: str,
    date_of_joining: date,
    date_of_leaving: date,
) -> Intern:
    """
    Assign the application number and internship window, issue a password
    and activate the account. Raises ``Intern.DoesNotExist``,
    ``InvalidTransition`` and :class:`ApplicationConflict`.
    """
    try:
        with transaction.atomic():
            intern = Intern.objects.select_for_update().get(pk=intern_id)
            if not Lifecycle.can_transition(intern.status, InternStatus.ACTIVE):
                raise InvalidTransition(intern.status, InternStatus.ACTIVE)

            taken = Intern.objects.filter(application_no=application_no).exclude(pk=intern.pk)
            if taken.exists():
                raise ApplicationConflict("Application number is already assigned")

            password = generate_random_password()
            intern.application_no = application_no
            intern.date_of_joining = date_of_joining
            intern.date_of_leaving = date_of_leaving
            intern.password = hash_password(password)
            Lifecycle.transition(intern, InternStatus.ACTIVE)
            intern.save()

            NotificationService.dispatch(_onboarding_messages(intern, password))
    except IntegrityError as exc:
        raise ApplicationConflict("Application number is already assigned") from exc

    logger.info("Intern %s onboarded as %s", intern.pk, application_no)
    return intern


# ---------------- Stage 5: completion sweep ----------------
def complete_finished_internships(today: Optional[date] = None) -> int:
    """Move every Active intern whose leaving date has passed to Completed."""
    today = today or timezone.localdate()
    finished = Intern.objects.filter(
        status=InternStatus.ACTIVE,
        date_of_leaving__lt=today,
    )
    completed = finished.update(status=InternStatus.COMPLETED, updated_at=timezone.now())
    if completed:
        logger.info("Marked %s internship(s) as completed", completed)
        log_event(
            action=AuditEvents.INTERNSHIPS_COMPLETED,
            object_type="intern",
            category="lifecycle",
            metadata={"count": completed, "as_of": today.isoformat()},
        )
    return completed
