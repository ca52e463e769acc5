from datetime import date
from smtplib import SMTPException
from types import SimpleNamespace
from unittest.mock import patch

from django.core import mail
from django.core.exceptions import ImproperlyConfigured
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import exceptions
from rest_framework.test import APIClient

from accounts.models import User
from accounts.serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    NewPasswordSerializer,
    PasswordResetRequestSerializer,
)
from interns.files import UPLOAD_SUBDIR
from interns.models import InternStatus
from interns.serializers import (
    AdminDecisionSerializer,
    ApplicationSubmissionSerializer,
    EnrollmentSubmissionSerializer,
    FinalizeOnboardingSerializer,
)
from interns.tests.utils import PDF_BYTES, clear_uploads, make_intern
from reports.serializers import DailyReportCreateSerializer

from . import process, sanitizer
from .checks import check_frontend_url
from .exceptions import portal_exception_handler
from .services.notifications import NotificationService, OutgoingEmail


class SanitizerTests(SimpleTestCase):
    def test_strings_lose_markup(self):
        self.assertEqual(sanitizer.sanitize_string("  <script>alert(1)</script>Hi  "), "Hi")
        self.assertEqual(sanitizer.sanitize_string(42), "")
        self.assertEqual(sanitizer.sanitize_text("abcdef", max_length=3), "abc")

    def test_email(self):
        self.assertEqual(sanitizer.sanitize_email(" Someone@Example.COM "), "someone@example.com")
        self.assertIsNone(sanitizer.sanitize_email("not-an-email"))
        self.assertIsNone(sanitizer.sanitize_email(None))

    def test_phone_is_idempotent(self):
        cleaned = sanitizer.sanitize_phone("+91 98-765 43210")
        self.assertEqual(cleaned, "+919876543210")
        self.assertEqual(sanitizer.sanitize_phone(cleaned), cleaned)
        self.assertIsNone(sanitizer.sanitize_phone("12345"))
        self.assertIsNone(sanitizer.sanitize_phone("1" * 16))

    def test_identifier_formats(self):
        self.assertEqual(sanitizer.sanitize_enrollment_no("NFSU/2026_01-x"), "NFSU2026_01-x")
        self.assertEqual(sanitizer.sanitize_application_no("IMS_2026-1"), "IMS2026-1")
        self.assertIsNone(sanitizer.sanitize_application_no("A" * 31))
        self.assertEqual(sanitizer.sanitize_username("admin@corp.in"), "admin@corp.in")

    def test_dates_are_strict(self):
        self.assertEqual(sanitizer.sanitize_date("2024-02-29"), date(2024, 2, 29))
        self.assertIsNone(sanitizer.sanitize_date("2024-02-30"))
        self.assertIsNone(sanitizer.sanitize_date("29/02/2024"))

    def test_ids(self):
        self.assertEqual(sanitizer.sanitize_id("17"), 17)
        self.assertEqual(sanitizer.sanitize_id(3), 3)
        for bad in ("0", "-1", "1.5", "abc", True, None, 0):
            self.assertIsNone(sanitizer.sanitize_id(bad))

    def test_enum_and_url(self):
        self.assertEqual(sanitizer.sanitize_enum(" F ", ("M", "F")), "F")
        self.assertIsNone(sanitizer.sanitize_enum("f", ("M", "F")))
        self.assertEqual(sanitizer.sanitize_url("https://nfsu.ac.in/x"), "https://nfsu.ac.in/x")
        self.assertIsNone(sanitizer.sanitize_url("javascript:alert(1)"))


class InputSerializerTests(SimpleTestCase):
    def test_application_collects_every_error(self):
        serializer = ApplicationSubmissionSerializer(data={})
        self.assertFalse(serializer.is_valid())
        self.assertEqual(len(serializer.errors), 5)
        self.assertEqual(serializer.errors["loi"], ["LOI file is required"])

    def test_enrollment_identity_fields_optional(self):
        serializer = EnrollmentSubmissionSerializer(
            data={
                "semester": "4",
                "program": "B.Tech",
                "department": "CSE",
                "organization": "NFSU",
                "gender": "F",
                "presentAddress": "A",
                "permanentAddress": "B",
            }
        )
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["full_name"], "")
        self.assertIsNone(serializer.validated_data["email_address"])
        self.assertEqual(serializer.validated_data["blood_group"], "")

    def test_text_is_cleaned_and_truncated(self):
        serializer = DailyReportCreateSerializer(
            data={"domain": "<b>Forensics</b>", "workDescription": "x" * 6000}
        )
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["domain"], "Forensics")
        self.assertEqual(len(serializer.validated_data["work_description"]), 5000)
        self.assertEqual(serializer.validated_data["tools_used"], "")

    def test_decision_values(self):
        self.assertTrue(AdminDecisionSerializer(data={"id": "4", "decision": "Rejected"}).is_valid())
        serializer = AdminDecisionSerializer(data={"id": "4", "decision": "rejected"})
        self.assertFalse(serializer.is_valid())
        self.assertEqual(serializer.errors["decision"], ["Invalid decision value"])

    def test_onboarding_dates_ordered(self):
        serializer = FinalizeOnboardingSerializer(
            data={
                "id": 1,
                "applicationNo": "IMS-1",
                "dateOfJoining": "2026-03-01",
                "dateOfLeaving": "2026-02-01",
            }
        )
        self.assertFalse(serializer.is_valid())
        self.assertEqual(
            serializer.errors["non_field_errors"],
            ["Date of leaving must be after date of joining"],
        )

    def test_login_keeps_password_verbatim(self):
        serializer = LoginSerializer(
            data={"username": "admin", "password": "  <b>x</b> ", "userType": "admin"}
        )
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data["password"], "  <b>x</b> ")

    def test_reset_request_needs_identifier(self):
        self.assertFalse(PasswordResetRequestSerializer(data={"userType": "intern"}).is_valid())
        self.assertTrue(
            PasswordResetRequestSerializer(data={"userType": "intern", "applicationNo": "IMS-1"}).is_valid()
        )

    def test_new_password_must_differ(self):
        serializer = ChangePasswordSerializer(
            data={"currentPassword": "Same-Pass-2026", "newPassword": "Same-Pass-2026"}
        )
        self.assertFalse(serializer.is_valid())
        self.assertIn("New password must differ from the current password", serializer.errors["non_field_errors"])

    def test_new_password_length_bounds(self):
        short = NewPasswordSerializer(data={"password": "Ab1!"})
        self.assertFalse(short.is_valid())
        self.assertEqual(short.errors["password"], ["Password must be at least 8 characters long"])

        common = NewPasswordSerializer(data={"password": "12345678"})
        self.assertFalse(common.is_valid())
        self.assertIn("This password is too common.", common.errors["password"])


class FrontendUrlCheckTests(SimpleTestCase):
    def test_test_settings_pass(self):
        self.assertEqual(check_frontend_url(None), [])

    @override_settings(FRONTEND_URL="javascript:alert(1)")
    def test_non_http_url_is_an_error(self):
        self.assertEqual([error.id for error in check_frontend_url(None)], ["common.E001"])

    @override_settings(FRONTEND_URL="portal.example.org")
    def test_relative_url_is_an_error(self):
        self.assertEqual([error.id for error in check_frontend_url(None)], ["common.E001"])


class ExceptionHandlerTests(SimpleTestCase):
    context = {"view": None}

    def test_validation_errors_are_flattened(self):
        exc = exceptions.ValidationError(
            {"email": ["Invalid email address"], "non_field_errors": ["Application number or email is required"]}
        )
        response = portal_exception_handler(exc, self.context)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data,
            {
                "error": "Invalid input data",
                "details": ["Invalid email address", "Application number or email is required"],
            },
        )

    def test_configuration_error(self):
        response = portal_exception_handler(ImproperlyConfigured("no key"), self.context)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Server configuration error. Contact administrator.")

    def test_unexpected_error_hides_details(self):
        with self.assertLogs("common.exceptions", "ERROR"):
            response = portal_exception_handler(RuntimeError("db password is hunter2"), self.context)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data, {"error": "Internal server error"})

    def test_permission_denied(self):
        response = portal_exception_handler(exceptions.PermissionDenied("Insufficient privileges."), self.context)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data, {"error": "Insufficient privileges."})


class FileDownloadTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.addCleanup(clear_uploads)
        owned = default_storage.save(f"{UPLOAD_SUBDIR}/owned.pdf", ContentFile(PDF_BYTES))
        other = default_storage.save(f"{UPLOAD_SUBDIR}/other.pdf", ContentFile(PDF_BYTES))
        self.intern = make_intern(status=InternStatus.ACTIVE, loi_file=owned)
        make_intern(loi_file=other)

    def test_intern_downloads_own_file(self):
        self.client.force_authenticate(user=self.intern)

        response = self.client.get("/api/files/owned.pdf")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(b"".join(response.streaming_content), PDF_BYTES)
        self.assertIn("attachment", response["Content-Disposition"])

    def test_intern_cannot_read_someone_elses_file(self):
        self.client.force_authenticate(user=self.intern)

        response = self.client.get("/api/files/other.pdf")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"], "You do not have permission to access this file")

    def test_admin_reads_any_file(self):
        self.client.force_authenticate(
            user=User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        )
        response = self.client.get("/api/files/other.pdf")
        self.assertEqual(response.status_code, 200)
        response.close()

    @patch("common.views.CommonAuditService.log_file_access_denied")
    def test_path_components_refused(self, log_file_access_denied):
        self.client.force_authenticate(
            user=User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        )

        for name in ("nested/owned.pdf", "..owned.pdf", "..%2Fsettings.py"):
            response = self.client.get(f"/api/files/{name}")
            self.assertEqual(response.status_code, 403)
            self.assertEqual(response.data["error"], "Access denied")
        self.assertEqual(log_file_access_denied.call_count, 3)

    def test_missing_file_is_404(self):
        self.client.force_authenticate(
            user=User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        )
        response = self.client.get("/api/files/gone.pdf")
        self.assertEqual(response.status_code, 404)

    def test_requires_authentication(self):
        self.assertEqual(self.client.get("/api/files/owned.pdf").status_code, 401)


class NotificationServiceTests(TestCase):
    def _messages(self):
        return [
            OutgoingEmail(
                template_code="onboarding_staff_notice",
                recipient=recipient,
                context={
                    "full_name": "A",
                    "application_no": "IMS-1",
                    "enrollment_no": "E1",
                    "program": "P",
                    "department": "D",
                    "date_of_joining": "2026-01-01",
                    "date_of_leaving": "2026-02-01",
                },
            )
            for recipient in ("one@test.local", "two@test.local")
        ]

    def test_sent_only_after_commit(self):
        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            NotificationService.dispatch(self._messages())
        self.assertEqual(len(mail.outbox), 0)

        for callback in callbacks:
            callback()
        self.assertEqual([m.to for m in mail.outbox], [["one@test.local"], ["two@test.local"]])

    def test_one_failed_recipient_does_not_stop_the_rest(self):
        with patch.object(
            NotificationService,
            "send",
            side_effect=[SMTPException("down"), None],
        ) as send:
            with self.assertLogs("common.services.notifications", "ERROR"):
                with self.captureOnCommitCallbacks(execute=True):
                    NotificationService.dispatch(self._messages())

        self.assertEqual(send.call_count, 2)
        self.assertEqual(send.call_args.args[0].recipient, "two@test.local")

    def test_empty_batch_schedules_nothing(self):
        with self.captureOnCommitCallbacks() as callbacks:
            NotificationService.dispatch([])
        self.assertEqual(callbacks, [])


class CrashHandlerTests(SimpleTestCase):
    def test_uncaught_exception_is_logged_as_critical(self):
        with patch("common.process.logging.shutdown") as shutdown:
            with self.assertLogs("common.process", "CRITICAL"):
                process._log_and_exit(ValueError, ValueError("boom"), None)
        shutdown.assert_called_once()

    def test_thread_failures_are_logged(self):
        args = SimpleNamespace(
            exc_type=RuntimeError,
            exc_value=RuntimeError("worker"),
            exc_traceback=None,
            thread=SimpleNamespace(name="notification-dispatch"),
        )
        with self.assertLogs("common.process", "CRITICAL") as logs:
            process._thread_hook(args)
        self.assertIn("notification-dispatch", logs.output[0])


class HealthCheckTests(TestCase):
    def test_reports_database_status(self):
        response = self.client.get("/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "ok")
