from datetime import date, timedelta

from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from accounts.models import AuditLog, PortalRole
from interns.lifecycle import InvalidTransition, Lifecycle
from interns.models import Intern, InternStatus
from interns.services import complete_finished_internships

from .utils import make_intern


class TransitionTableTests(SimpleTestCase):
    def test_fresh_fans_out_to_three_states(self):
        self.assertEqual(
            Lifecycle.allowed_targets(InternStatus.FRESH),
            {
                InternStatus.PENDING_ENROLLMENT,
                InternStatus.REJECTED,
                InternStatus.SPECIAL_APPROVAL_REQUIRED,
            },
        )

    def test_linear_path_to_completed(self):
        self.assertTrue(Lifecycle.can_transition(InternStatus.PENDING_ENROLLMENT, InternStatus.PENDING_APPROVAL))
        self.assertTrue(Lifecycle.can_transition(InternStatus.PENDING_APPROVAL, InternStatus.ACTIVE))
        self.assertTrue(Lifecycle.can_transition(InternStatus.ACTIVE, InternStatus.COMPLETED))

    def test_terminal_states(self):
        for status in (
            InternStatus.REJECTED,
            InternStatus.COMPLETED,
            InternStatus.SPECIAL_APPROVAL_REQUIRED,
        ):
            self.assertTrue(Lifecycle.is_terminal(status))

    def test_skipping_a_stage_is_refused(self):
        intern = Intern(status=InternStatus.FRESH)
        with self.assertRaises(InvalidTransition):
            Lifecycle.transition(intern, InternStatus.ACTIVE)
        self.assertEqual(intern.status, InternStatus.FRESH)

    def test_transition_updates_status_in_memory(self):
        intern = Intern(status=InternStatus.PENDING_APPROVAL)
        Lifecycle.transition(intern, InternStatus.ACTIVE)
        self.assertEqual(intern.status, InternStatus.ACTIVE)

    def test_role_follows_status(self):
        expected = {
            InternStatus.FRESH: PortalRole.INTERN_APPLIED,
            InternStatus.PENDING_ENROLLMENT: PortalRole.INTERN_APPLIED,
            InternStatus.PENDING_APPROVAL: PortalRole.INTERN_APPLIED,
            InternStatus.SPECIAL_APPROVAL_REQUIRED: PortalRole.INTERN_APPLIED,
            InternStatus.ACTIVE: PortalRole.INTERN_ONGOING,
            InternStatus.REJECTED: PortalRole.INTERN_REJECTED,
            InternStatus.COMPLETED: PortalRole.INTERN_COMPLETED,
        }
        for status, role in expected.items():
            self.assertEqual(Intern(status=status).role, role)

    def test_document_names_skip_empty_slots(self):
        intern = Intern(loi_file="uploads/a.pdf", passport_photo="uploads/b.png", e_signature="", signed_nda="")
        self.assertEqual(intern.document_names(), {"a.pdf", "b.png"})


class InternConstraintTests(TestCase):
    def test_leaving_must_follow_joining(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            make_intern(
                status=InternStatus.ACTIVE,
                date_of_joining=date(2026, 5, 1),
                date_of_leaving=date(2026, 5, 1),
            )

    def test_unknown_status_rejected_by_database(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            make_intern(status="Archived")

    def test_personal_email_unique(self):
        make_intern(personal_email="same@example.com")
        with self.assertRaises(IntegrityError), transaction.atomic():
            make_intern(personal_email="same@example.com")


class CompletionSweepTests(TestCase):
    def setUp(self):
        today = timezone.localdate()
        self.finished = make_intern(
            status=InternStatus.ACTIVE,
            date_of_joining=today - timedelta(days=30),
            date_of_leaving=today - timedelta(days=1),
        )
        self.ends_today = make_intern(
            status=InternStatus.ACTIVE,
            date_of_joining=today - timedelta(days=30),
            date_of_leaving=today,
        )
        self.pending = make_intern(status=InternStatus.PENDING_APPROVAL)

    def test_only_past_leaving_dates_complete(self):
        self.assertEqual(complete_finished_internships(), 1)

        self.finished.refresh_from_db()
        self.ends_today.refresh_from_db()
        self.pending.refresh_from_db()
        self.assertEqual(self.finished.status, InternStatus.COMPLETED)
        self.assertEqual(self.finished.role, PortalRole.INTERN_COMPLETED)
        self.assertEqual(self.ends_today.status, InternStatus.ACTIVE)
        self.assertEqual(self.pending.status, InternStatus.PENDING_APPROVAL)

    def test_sweep_is_idempotent(self):
        complete_finished_internships()
        self.assertEqual(complete_finished_internships(), 0)
        self.assertEqual(AuditLog.objects.filter(action="internships_completed").count(), 1)

    def test_management_command_accepts_reference_date(self):
        call_command("complete_internships", as_of=(timezone.localdate() + timedelta(days=1)).isoformat())
        self.ends_today.refresh_from_db()
        self.assertEqual(self.ends_today.status, InternStatus.COMPLETED)
