import re
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

from django.conf import settings
from django.core import mail
from django.core.files.storage import default_storage
from django.db import IntegrityError
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.permissions import AllowAny
from rest_framework.test import APIClient

from accounts.models import PortalRole, User
from accounts.passwords import verify_password
from accounts.permissions import CapabilityLinkAccess
from interns.files import UPLOAD_SUBDIR
from interns.models import Intern, InternStatus
from interns.views import ApplyView, EnrollmentView
from reports.models import DailyReport

from .utils import PDF_BYTES, clear_uploads, jpeg_upload, make_intern, pdf_upload, png_upload


class ApplyApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.addCleanup(clear_uploads)

    def _payload(self, **overrides):
        payload = {
            "fullName": "Asha Verma",
            "enrollmentNo": "NFSU-2026-001",
            "email": "Asha.Verma@Example.com",
            "mobile": "+91 98765 43210",
            "loi": pdf_upload("letter.pdf"),
        }
        payload.update(overrides)
        return payload

    def test_submit_creates_fresh_application(self):
        response = self.client.post("/api/apply", self._payload(), format="multipart")

        self.assertEqual(response.status_code, 201)
        intern = Intern.objects.get()
        self.assertEqual(intern.status, InternStatus.FRESH)
        self.assertEqual(intern.role, PortalRole.INTERN_APPLIED)
        self.assertEqual(intern.personal_email, "asha.verma@example.com")
        self.assertEqual(intern.mobile_no, "+919876543210")
        self.assertRegex(intern.loi_file.name, rf"^{UPLOAD_SUBDIR}/[0-9a-f]{{32}}\.pdf$")
        self.assertTrue(default_storage.exists(intern.loi_file.name))
        with default_storage.open(intern.loi_file.name, "rb") as stored:
            self.assertEqual(stored.read(), PDF_BYTES)

    def test_markup_is_stripped_from_name(self):
        response = self.client.post(
            "/api/apply",
            self._payload(fullName="<b>Asha</b> Verma<script>x</script>"),
            format="multipart",
        )
        self.assertEqual(response.status_code, 201)
        self.assertNotIn("<", Intern.objects.get().full_name)

    def test_loi_must_really_be_pdf(self):
        fake = pdf_upload("letter.pdf", content=b"MZ\x90\x00 not a pdf")
        response = self.client.post("/api/apply", self._payload(loi=fake), format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Intern.objects.exists())

    def test_missing_loi_is_a_validation_error(self):
        payload = self._payload()
        payload.pop("loi")
        response = self.client.post("/api/apply", payload, format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid input data")
        self.assertIn("LOI file is required", response.data["details"])

    @override_settings(MAX_UPLOAD_SIZE=16)
    def test_oversized_loi_rejected(self):
        big = pdf_upload(content=PDF_BYTES + b"0" * 64)
        response = self.client.post("/api/apply", self._payload(loi=big), format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertIn("File too large", response.data["error"])

    def test_duplicate_email_is_a_conflict(self):
        make_intern(personal_email="asha.verma@example.com")
        response = self.client.post("/api/apply", self._payload(), format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertIn("already exists", response.data["error"])
        self.assertEqual(Intern.objects.count(), 1)

    def test_invalid_fields_reported_together(self):
        response = self.client.post(
            "/api/apply",
            self._payload(fullName="A", email="nope", mobile="123"),
            format="multipart",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(response.data["details"]), 3)

    def test_failed_save_removes_stored_loi(self):
        with patch.object(Intern, "save", side_effect=IntegrityError("duplicate key")):
            response = self.client.post("/api/apply", self._payload(), format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertIn("already exists", response.data["error"])
        self.assertEqual(default_storage.listdir(UPLOAD_SUBDIR)[1], [])

    def test_public_form_is_open_and_enrollment_is_a_capability_link(self):
        self.assertEqual([type(p) for p in ApplyView().get_permissions()], [AllowAny])
        self.assertEqual(
            [type(p) for p in EnrollmentView().get_permissions()],
            [CapabilityLinkAccess],
        )


class AdminDecisionApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        self.client.force_authenticate(user=self.admin)
        self.intern = make_intern()
        self.addCleanup(clear_uploads)

    def _decide(self, decision, **extra):
        payload = {"id": self.intern.id, "decision": decision, **extra}
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post("/api/admin/decision", payload, format="json")

    def test_approve_moves_to_pending_enrollment_and_mails_link(self):
        response = self._decide("Approved")

        self.assertEqual(response.status_code, 200)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.PENDING_ENROLLMENT)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [self.intern.personal_email])
        self.assertIn(f"https://portal.test/enroll/{self.intern.id}", mail.outbox[0].body)
        self.assertEqual(mail.outbox[0].attachments, [])

    def test_approval_attaches_nda_template_when_present(self):
        nda = Path(settings.NDA_TEMPLATE_PATH)
        nda.parent.mkdir(parents=True, exist_ok=True)
        nda.write_bytes(PDF_BYTES)
        self.addCleanup(nda.unlink)

        self._decide("Approved")

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(len(mail.outbox[0].attachments), 1)

    def test_reject_records_reason_and_role(self):
        response = self._decide("Rejected", rejectionReason="Incomplete <i>LOI</i>")

        self.assertEqual(response.status_code, 200)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.REJECTED)
        self.assertEqual(self.intern.role, PortalRole.INTERN_REJECTED)
        self.assertEqual(self.intern.rejection_reason, "Incomplete LOI")
        self.assertEqual(len(mail.outbox), 0)

    def test_reject_without_reason_stores_empty_string(self):
        self._decide("Rejected")
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.rejection_reason, "")

    def test_special_approval_keeps_notes(self):
        self._decide("Special Approval Required", specialApprovalNotes="Needs HOD sign-off")

        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.SPECIAL_APPROVAL_REQUIRED)
        self.assertEqual(self.intern.special_approval_notes, "Needs HOD sign-off")

    def test_decision_only_applies_to_fresh(self):
        self.intern.status = InternStatus.REJECTED
        self.intern.save()

        response = self._decide("Approved")

        self.assertEqual(response.status_code, 400)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.REJECTED)

    def test_unknown_intern_is_404(self):
        response = self.client.post(
            "/api/admin/decision",
            {"id": self.intern.id + 1000, "decision": "Approved"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_unknown_decision_is_invalid(self):
        response = self._decide("Maybe")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid input data")

    def test_intern_cannot_decide(self):
        active = make_intern(status=InternStatus.ACTIVE)
        self.client.force_authenticate(user=active)

        response = self._decide("Approved")

        self.assertEqual(response.status_code, 403)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.FRESH)

    def test_anonymous_gets_401(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(
            "/api/admin/decision",
            {"id": self.intern.id, "decision": "Approved"},
            format="json",
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["error"], "Authorization token missing.")


class EnrollmentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.intern = make_intern(status=InternStatus.PENDING_ENROLLMENT, full_name="Ravi Kumar")
        self.url = f"/api/enroll/{self.intern.id}"
        self.addCleanup(clear_uploads)

    def _form(self, **overrides):
        form = {
            "semester": "6",
            "program": "M.Sc. Cyber Security",
            "department": "SCSDF",
            "organization": "NFSU",
            "gender": "M",
            "bloodGroup": "O+",
            "presentAddress": "Hostel 4, Gandhinagar",
            "permanentAddress": "12 Park Street, Kolkata",
            "contactNo": "9123456789",
            "photo": png_upload(),
            "sign": jpeg_upload(),
            "nda": pdf_upload(),
        }
        form.update(overrides)
        return form

    def test_get_returns_prefill(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.data,
            {
                "id": self.intern.id,
                "fullName": "Ravi Kumar",
                "enrollmentNo": self.intern.enrollment_no,
                "email": self.intern.personal_email,
            },
        )

    def test_get_rejects_malformed_id(self):
        self.assertEqual(self.client.get("/api/enroll/abc").status_code, 400)
        self.assertEqual(self.client.get("/api/enroll/0").status_code, 400)
        self.assertEqual(self.client.get("/api/enroll/-3").status_code, 400)

    def test_get_unknown_id_is_404(self):
        self.assertEqual(self.client.get(f"/api/enroll/{self.intern.id + 99}").status_code, 404)

    def test_get_outside_enrollment_stage_is_400(self):
        self.intern.status = InternStatus.FRESH
        self.intern.save()
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Enrollment is not available for this application")

    def test_submit_moves_to_pending_approval(self):
        response = self.client.post(self.url, self._form(), format="multipart")

        self.assertEqual(response.status_code, 200)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.PENDING_APPROVAL)
        self.assertEqual(self.intern.program, "M.Sc. Cyber Security")
        self.assertEqual(self.intern.blood_group, "O+")
        self.assertEqual(self.intern.mobile_no, "9123456789")
        # Blank identity fields keep the stored values.
        self.assertEqual(self.intern.full_name, "Ravi Kumar")
        self.assertTrue(self.intern.passport_photo.name.endswith(".png"))
        self.assertTrue(self.intern.e_signature.name.endswith(".jpg"))
        self.assertTrue(self.intern.signed_nda.name.endswith(".pdf"))
        for document in (self.intern.passport_photo, self.intern.e_signature, self.intern.signed_nda):
            self.assertTrue(default_storage.exists(document.name))

    def test_disguised_file_rejected_before_any_write(self):
        form = self._form(photo=png_upload(content=PDF_BYTES))

        response = self.client.post(self.url, form, format="multipart")

        self.assertEqual(response.status_code, 400)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.PENDING_ENROLLMENT)
        self.assertFalse(self.intern.passport_photo)
        self.assertFalse(default_storage.exists(UPLOAD_SUBDIR) and default_storage.listdir(UPLOAD_SUBDIR)[1])

    def test_all_three_files_required(self):
        form = self._form()
        form.pop("nda")

        response = self.client.post(self.url, form, format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "All files (photo, signature, NDA) are required")

    def test_form_validation_errors(self):
        response = self.client.post(self.url, self._form(gender="X", program=""), format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertIn("Invalid gender value", response.data["details"])
        self.assertIn("Program is required", response.data["details"])
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.PENDING_ENROLLMENT)

    def test_cannot_enroll_twice(self):
        self.client.post(self.url, self._form(), format="multipart")
        response = self.client.post(self.url, self._form(), format="multipart")
        self.assertEqual(response.status_code, 400)

    def test_new_email_address_replaces_personal_email(self):
        response = self.client.post(
            self.url,
            self._form(emailAddress="New.Address@Example.org"),
            format="multipart",
        )

        self.assertEqual(response.status_code, 200)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.personal_email, "new.address@example.org")

    def test_blank_email_address_keeps_personal_email(self):
        original = self.intern.personal_email

        self.client.post(self.url, self._form(emailAddress=""), format="multipart")

        self.intern.refresh_from_db()
        self.assertEqual(self.intern.personal_email, original)

    def test_email_address_of_another_application_is_a_conflict(self):
        other = make_intern()

        response = self.client.post(
            self.url,
            self._form(emailAddress=other.personal_email),
            format="multipart",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("already exists", response.data["error"])
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.PENDING_ENROLLMENT)
        self.assertFalse(self.intern.passport_photo)
        self.assertFalse(default_storage.exists(UPLOAD_SUBDIR) and default_storage.listdir(UPLOAD_SUBDIR)[1])


class OnboardingApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        self.client.force_authenticate(user=self.admin)
        self.intern = make_intern(
            status=InternStatus.PENDING_APPROVAL,
            program="M.Tech",
            department="SCSDF",
        )

    def _onboard(self, **overrides):
        payload = {
            "id": self.intern.id,
            "applicationNo": "IMS-2026-007",
            "dateOfJoining": "2026-02-01",
            "dateOfLeaving": "2026-07-31",
        }
        payload.update(overrides)
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post("/api/admin/onboard", payload, format="json")

    def test_onboarding_activates_and_mails_credentials(self):
        response = self._onboard()

        self.assertEqual(response.status_code, 200)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.ACTIVE)
        self.assertEqual(self.intern.role, PortalRole.INTERN_ONGOING)
        self.assertEqual(self.intern.application_no, "IMS-2026-007")
        self.assertEqual(self.intern.date_of_joining.isoformat(), "2026-02-01")

        recipients = [message.to[0] for message in mail.outbox]
        self.assertEqual(recipients, [self.intern.personal_email, "head@test.local", "dean@test.local"])

        password = re.search(r"Password: (\S+)", mail.outbox[0].body).group(1)
        self.assertNotEqual(self.intern.password, password)
        self.assertTrue(verify_password(password, self.intern.password))
        self.assertIn("IMS-2026-007", mail.outbox[1].body)

    def test_onboarded_intern_can_log_in_with_mailed_password(self):
        self._onboard()
        password = re.search(r"Password: (\S+)", mail.outbox[0].body).group(1)

        client = APIClient()
        response = client.post(
            "/api/login",
            {"username": "IMS-2026-007", "password": password, "userType": "intern"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["role"], PortalRole.INTERN_ONGOING)

    def test_leaving_must_follow_joining(self):
        response = self._onboard(dateOfLeaving="2026-02-01")

        self.assertEqual(response.status_code, 400)
        self.assertIn("Date of leaving must be after date of joining", response.data["details"])

    def test_impossible_calendar_date(self):
        response = self._onboard(dateOfJoining="2026-02-30")
        self.assertEqual(response.status_code, 400)

    def test_requires_pending_approval(self):
        self.intern.status = InternStatus.PENDING_ENROLLMENT
        self.intern.save()

        response = self._onboard()

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Intern is not in Pending_Approval status")
        self.assertEqual(len(mail.outbox), 0)

    def test_second_onboarding_is_refused(self):
        self.assertEqual(self._onboard().status_code, 200)
        self.intern.refresh_from_db()
        first_hash = self.intern.password
        self.assertEqual(len(mail.outbox), 3)

        response = self._onboard()

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Intern is not in Pending_Approval status")
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.password, first_hash)
        self.assertEqual(self.intern.status, InternStatus.ACTIVE)
        self.assertEqual(len(mail.outbox), 3)

    def test_application_number_must_be_unique(self):
        make_intern(status=InternStatus.ACTIVE, application_no="IMS-2026-007")

        response = self._onboard()

        self.assertEqual(response.status_code, 400)
        self.intern.refresh_from_db()
        self.assertEqual(self.intern.status, InternStatus.PENDING_APPROVAL)
        self.assertEqual(self.intern.password, "")

    def test_unknown_intern_is_404(self):
        response = self._onboard(id=self.intern.id + 50)
        self.assertEqual(response.status_code, 404)


class DashboardApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        self.client.force_authenticate(user=self.admin)
        self.today = timezone.localdate()

    def test_fresh_pending_rejected_lists(self):
        fresh = make_intern()
        pending = make_intern(status=InternStatus.PENDING_APPROVAL)
        rejected = make_intern(status=InternStatus.REJECTED, rejection_reason="Late")

        fresh_rows = self.client.get("/api/admin/dashboard/fresh").data
        pending_rows = self.client.get("/api/admin/dashboard/pending").data
        rejected_rows = self.client.get("/api/admin/dashboard/rejected").data

        self.assertEqual([row["id"] for row in fresh_rows], [fresh.id])
        self.assertEqual([row["id"] for row in pending_rows], [pending.id])
        self.assertEqual(rejected_rows[0]["rejectionReason"], "Late")
        self.assertEqual(rejected_rows[0]["id"], rejected.id)

    def test_document_columns_show_bare_file_names(self):
        make_intern(
            status=InternStatus.PENDING_APPROVAL,
            loi_file=f"{UPLOAD_SUBDIR}/aa11.pdf",
            passport_photo=f"{UPLOAD_SUBDIR}/bb22.png",
        )

        row = self.client.get("/api/admin/dashboard/pending").data[0]

        self.assertEqual(row["passportPhoto"], "bb22.png")
        self.assertEqual(row["eSignature"], "")

    def test_ongoing_rows_carry_attendance(self):
        intern = make_intern(
            status=InternStatus.ACTIVE,
            application_no="IMS-1",
            full_name="Meera Shah",
            date_of_joining=self.today - timedelta(days=10),
            date_of_leaving=self.today + timedelta(days=30),
        )
        for offset in range(5):
            DailyReport.objects.create(
                intern=intern,
                domain="Forensics",
                work_description="Disk imaging",
                report_date=self.today - timedelta(days=offset),
            )

        response = self.client.get("/api/admin/dashboard/ongoing")

        self.assertEqual(response.status_code, 200)
        row = response.data[0]
        self.assertEqual(row["hyperlinkText"], "IMS-1-Meera Shah")
        self.assertEqual(row["daysSinceStart"], 10)
        self.assertEqual(row["daysAttended"], 5)
        self.assertEqual(row["attendancePct"], 50.0)
        self.assertEqual(len(row["reports"]), 5)
        self.assertEqual(row["reports"][0]["reportDate"], self.today.isoformat())

    def test_finished_internships_move_to_completed_on_read(self):
        intern = make_intern(
            status=InternStatus.ACTIVE,
            application_no="IMS-2",
            date_of_joining=self.today - timedelta(days=20),
            date_of_leaving=self.today - timedelta(days=10),
        )
        DailyReport.objects.create(
            intern=intern,
            domain="Malware",
            work_description="Triage",
            report_date=self.today - timedelta(days=15),
        )

        ongoing = self.client.get("/api/admin/dashboard/ongoing").data
        completed = self.client.get("/api/admin/dashboard/completed").data

        self.assertEqual(ongoing, [])
        self.assertEqual(len(completed), 1)
        self.assertEqual(completed[0]["totalDays"], 10)
        self.assertEqual(completed[0]["daysAttended"], 1)
        self.assertEqual(completed[0]["attendancePct"], 10.0)

    def test_intern_detail(self):
        intern = make_intern(
            status=InternStatus.ACTIVE,
            date_of_joining=self.today - timedelta(days=4),
            date_of_leaving=self.today + timedelta(days=4),
            password="Secret123!x",
        )

        response = self.client.get(f"/api/admin/intern/{intern.id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["daysSinceStart"], 4)
        self.assertEqual(response.data["attendancePct"], 0.0)
        self.assertNotIn("password", response.data)

    def test_intern_detail_id_checks(self):
        self.assertEqual(self.client.get("/api/admin/intern/xyz").status_code, 400)
        self.assertEqual(self.client.get("/api/admin/intern/999999").status_code, 404)

    def test_dashboards_are_admin_only(self):
        self.client.force_authenticate(user=make_intern(status=InternStatus.ACTIVE))
        for tab in ("fresh", "pending", "ongoing", "rejected", "completed"):
            self.assertEqual(self.client.get(f"/api/admin/dashboard/{tab}").status_code, 403)


class InternProfileApiTests(TestCase):
    def test_profile_hides_password_hash(self):
        intern = make_intern(status=InternStatus.ACTIVE, password="Secret123!x")
        client = APIClient()
        client.force_authenticate(user=intern)

        response = client.get("/api/intern/profile")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["applicationNo"], intern.application_no)
        self.assertEqual(response.data["role"], PortalRole.INTERN_ONGOING)
        self.assertNotIn("password", response.data)

    def test_admin_is_not_an_intern(self):
        client = APIClient()
        client.force_authenticate(user=User.objects.create_admin("a", "a@example.com", "AdminPass123!"))
        self.assertEqual(client.get("/api/intern/profile").status_code, 403)
