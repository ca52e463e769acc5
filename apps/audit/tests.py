from unittest.mock import patch

from django.test import RequestFactory, TestCase, override_settings

from accounts.models import AuditLog, User

from . import AuditEvents, client_ip, log_event


class AuditServiceTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")

    def test_primary_only_writes_table(self):
        log_event(action=AuditEvents.LOGIN_SUCCESS, actor=self.admin, category="auth")

        entry = AuditLog.objects.get()
        self.assertEqual(entry.actor_type, "admin")
        self.assertEqual(entry.actor_id, str(self.admin.pk))
        self.assertEqual(entry.category, "auth")

    @override_settings(AUDIT_WRITE_MODE="dual_write")
    def test_dual_write_mirrors_to_log(self):
        with self.assertLogs("apps.audit.events", "WARNING") as logs:
            log_event(action=AuditEvents.FILE_ACCESS_DENIED, actor=self.admin, level="warning")

        self.assertEqual(AuditLog.objects.count(), 1)
        self.assertIn("file_access_denied", logs.output[0])
        self.assertIn(f"admin:{self.admin.pk}", logs.output[0])

    @override_settings(AUDIT_WRITE_MODE="log_only")
    def test_log_only_skips_table(self):
        with self.assertLogs("apps.audit.events", "INFO"):
            log_event(action=AuditEvents.APPLICATION_SUBMITTED)
        self.assertFalse(AuditLog.objects.exists())

    def test_backend_failure_does_not_propagate(self):
        with patch("accounts.models.AuditLog.log", side_effect=RuntimeError("disk full")):
            with self.assertLogs("apps.audit.services", "ERROR"):
                log_event(action=AuditEvents.INTERN_ONBOARDED)

    def test_client_ip_prefers_forwarded_header(self):
        factory = RequestFactory()
        request = factory.get("/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1")
        self.assertEqual(client_ip(request), "203.0.113.7")
        self.assertEqual(client_ip(factory.get("/")), "127.0.0.1")
