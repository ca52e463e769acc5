from datetime import timedelta
from unittest.mock import patch

from django.conf import settings
from django.core import mail
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from interns.models import InternStatus
from interns.tests.utils import make_intern

from .access_policy import AccessPolicy
from .checks import check_jwt_signing_secret
from .models import AuditLog, LoginHistory, PasswordResetToken, PortalRole, User
from .passwords import CredentialServiceTimeout, verify_password
from .throttles import LoginRateThrottle, WindowRateThrottle
from .tokens import issue_token, signing_secret_problem


def _weak_key_settings(key):
    return override_settings(SIMPLE_JWT={**settings.SIMPLE_JWT, "SIGNING_KEY": key})


class LoginApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_admin(
            "admin", "admin@example.com", "AdminPass123!", full_name="Portal Admin"
        )
        self.intern = make_intern(status=InternStatus.ACTIVE, password="InternPass123!")

    def _login(self, username, password, user_type):
        return self.client.post(
            "/api/login",
            {"username": username, "password": password, "userType": user_type},
            format="json",
        )

    def test_admin_login_returns_token_and_session(self):
        response = self._login("admin", "AdminPass123!", "admin")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Login successful")
        self.assertEqual(response.data["user"]["role"], PortalRole.ADMIN)
        self.assertEqual(response.data["user"]["fullName"], "Portal Admin")

        token = AccessToken(response.data["token"])
        self.assertEqual(token["user_id"], self.admin.pk)
        self.assertEqual(token["username"], "admin")
        self.assertEqual(token["user_type"], "admin")
        self.assertTrue(LoginHistory.objects.filter(success=True, identifier="admin").exists())

    def test_intern_login_uses_application_number(self):
        response = self._login(self.intern.application_no, "InternPass123!", "intern")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["user"]["applicationNo"], self.intern.application_no)
        self.assertEqual(response.data["user"]["role"], PortalRole.INTERN_ONGOING)
        self.assertNotIn("password", response.data["user"])

    def test_wrong_password_is_401_and_recorded(self):
        response = self._login("admin", "nope-nope", "admin")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {"error": "Invalid credentials"})
        self.assertTrue(LoginHistory.objects.filter(success=False, identifier="admin").exists())
        self.assertTrue(AuditLog.objects.filter(action="login_failed").exists())

    def test_unknown_user_and_bad_payload_look_the_same(self):
        unknown = self._login("ghost", "whatever1", "admin")
        malformed = self._login("admin", "AdminPass123!", "superuser")

        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(malformed.status_code, 401)
        self.assertEqual(unknown.data, malformed.data)

    def test_intern_account_must_be_ongoing(self):
        completed = make_intern(status=InternStatus.COMPLETED, password="InternPass123!")

        response = self._login(completed.application_no, "InternPass123!", "intern")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.data["error"],
            "Your account is not active. Please contact administrator.",
        )
        self.assertTrue(AuditLog.objects.filter(action="login_blocked_inactive").exists())

    def test_credential_service_timeout_is_500(self):
        with patch("accounts.views.verify_password", side_effect=CredentialServiceTimeout()):
            response = self._login("admin", "AdminPass123!", "admin")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Authentication service temporarily unavailable")

    def test_weak_signing_key_is_a_configuration_error(self):
        with _weak_key_settings("short"):
            response = self._login("admin", "AdminPass123!", "admin")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["error"], "Server configuration error. Contact administrator.")

    def test_login_attempts_are_throttled(self):
        with patch.object(LoginRateThrottle, "get_rate", return_value="2/15m"):
            self._login("admin", "bad-pass-1", "admin")
            self._login("admin", "bad-pass-2", "admin")
            response = self._login("admin", "AdminPass123!", "admin")

        self.assertEqual(response.status_code, 429)
        self.assertEqual(response.data["error"], "Too many requests, please try again later.")

    def test_logout_acknowledges(self):
        response = self.client.post("/api/logout")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Logged out successfully")


class TokenAuthenticationTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")

    def test_bearer_token_reaches_admin_endpoints(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(self.admin)}")
        response = self.client.get("/api/admin/dashboard/fresh")
        self.assertEqual(response.status_code, 200)

    def test_intern_token_resolves_to_intern(self):
        intern = make_intern(status=InternStatus.ACTIVE)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(intern)}")

        response = self.client.get("/api/intern/profile")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], intern.pk)

    def test_missing_token(self):
        response = self.client.get("/api/admin/dashboard/fresh")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data, {"error": "Authorization token missing."})

    def test_expired_token(self):
        token = AccessToken()
        token["user_id"] = self.admin.pk
        token["user_type"] = "admin"
        token.set_exp(from_time=timezone.now() - timedelta(days=30))
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = self.client.get("/api/admin/dashboard/fresh")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["code"], "TOKEN_EXPIRED")

    def test_garbage_token(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not.a.token")

        response = self.client.get("/api/admin/dashboard/fresh")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.data["code"], "INVALID_TOKEN")

    def test_token_for_deleted_account(self):
        token = issue_token(self.admin)
        self.admin.delete()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = self.client.get("/api/admin/dashboard/fresh")

        self.assertEqual(response.data["code"], "INVALID_TOKEN")

    def test_configuration_error_on_authenticated_request(self):
        token = issue_token(self.admin)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        with _weak_key_settings(""):
            response = self.client.get("/api/admin/dashboard/fresh")

        self.assertEqual(response.status_code, 500)


class SigningSecretTests(SimpleTestCase):
    def test_problems(self):
        self.assertIsNotNone(signing_secret_problem(""))
        self.assertIsNotNone(signing_secret_problem("change-me"))
        self.assertIsNotNone(signing_secret_problem("x" * 31))
        self.assertIsNone(signing_secret_problem("x" * 32))

    def test_system_check_reports_weak_secret(self):
        with _weak_key_settings("secret"):
            errors = check_jwt_signing_secret(None)
        self.assertEqual([error.id for error in errors], ["accounts.E001"])

    def test_system_check_passes_with_test_secret(self):
        self.assertEqual(check_jwt_signing_secret(None), [])


class AccessPolicyTests(SimpleTestCase):
    def test_role_matching(self):
        self.assertTrue(AccessPolicy.role_matches(PortalRole.ADMIN, "Admin"))
        self.assertTrue(AccessPolicy.role_matches(PortalRole.INTERN_ONGOING, "Intern"))
        self.assertTrue(AccessPolicy.role_matches(PortalRole.INTERN_REJECTED, ("Admin", "Intern")))
        self.assertTrue(
            AccessPolicy.role_matches(PortalRole.INTERN_ONGOING, PortalRole.INTERN_ONGOING)
        )
        self.assertFalse(AccessPolicy.role_matches(PortalRole.INTERN_APPLIED, "Admin"))
        self.assertFalse(AccessPolicy.role_matches(PortalRole.ADMIN, "Intern"))
        self.assertFalse(AccessPolicy.role_matches("", "Admin"))
        self.assertFalse(AccessPolicy.role_matches("Interns", PortalRole.INTERN_ONGOING))


class ThrottleRateParsingTests(SimpleTestCase):
    def test_multi_unit_windows(self):
        throttle = WindowRateThrottle.__new__(WindowRateThrottle)
        self.assertEqual(throttle.parse_rate("5/15m"), (5, 900))
        self.assertEqual(throttle.parse_rate("100/h"), (100, 3600))
        self.assertEqual(throttle.parse_rate("3/day"), (3, 86400))
        self.assertEqual(throttle.parse_rate(None), (None, None))


class ChangePasswordApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_admin_changes_password(self):
        admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        self.client.force_authenticate(user=admin)

        response = self.client.post(
            "/api/change-password",
            {"currentPassword": "AdminPass123!", "newPassword": "Fresh-Horse-Battery-9"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        admin.refresh_from_db()
        self.assertTrue(admin.check_password("Fresh-Horse-Battery-9"))

    def test_intern_changes_password(self):
        intern = make_intern(status=InternStatus.ACTIVE, password="InternPass123!")
        self.client.force_authenticate(user=intern)

        response = self.client.post(
            "/api/change-password",
            {"currentPassword": "InternPass123!", "newPassword": "Fresh-Horse-Battery-9"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        intern.refresh_from_db()
        self.assertTrue(verify_password("Fresh-Horse-Battery-9", intern.password))

    def test_wrong_current_password(self):
        intern = make_intern(status=InternStatus.ACTIVE, password="InternPass123!")
        self.client.force_authenticate(user=intern)

        response = self.client.post(
            "/api/change-password",
            {"currentPassword": "not-it-at-all", "newPassword": "Fresh-Horse-Battery-9"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Current password is incorrect")

    def test_short_new_password(self):
        intern = make_intern(status=InternStatus.ACTIVE, password="InternPass123!")
        self.client.force_authenticate(user=intern)

        response = self.client.post(
            "/api/change-password",
            {"currentPassword": "InternPass123!", "newPassword": "short"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Invalid input data")
        self.assertEqual(response.data["details"], ["Password must be at least 8 characters long"])


class PasswordResetApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        self.intern = make_intern(status=InternStatus.ACTIVE, password="InternPass123!")

    def _request(self, **payload):
        with self.captureOnCommitCallbacks(execute=True):
            return self.client.post("/api/request-password-reset", payload, format="json")

    def test_admin_request_mails_reset_link(self):
        response = self._request(userType="admin", email="ADMIN@example.com")

        self.assertEqual(response.status_code, 200)
        token = PasswordResetToken.objects.get()
        self.assertEqual(token.email, "admin@example.com")
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(f"https://portal.test/reset-password/{token.token}", mail.outbox[0].body)

    def test_intern_request_by_application_number(self):
        self._request(userType="intern", applicationNo=self.intern.application_no)

        token = PasswordResetToken.objects.get()
        self.assertEqual(token.email, self.intern.personal_email)
        self.assertEqual(token.user_type, "intern")

    def test_unknown_account_gets_same_answer(self):
        known = self._request(userType="admin", email="admin@example.com")
        unknown = self._request(userType="admin", email="nobody@example.com")

        self.assertEqual(known.data, unknown.data)
        self.assertEqual(PasswordResetToken.objects.count(), 1)

    def test_inactive_intern_gets_no_token(self):
        rejected = make_intern(status=InternStatus.REJECTED)
        self._request(userType="intern", email=rejected.personal_email)
        self.assertFalse(PasswordResetToken.objects.exists())

    def test_request_needs_user_type(self):
        response = self._request(email="admin@example.com")
        self.assertEqual(response.status_code, 400)

    def test_verify_and_confirm(self):
        token = PasswordResetToken.objects.create(email=self.intern.personal_email, user_type="intern")

        verify = self.client.get(f"/api/verify-reset-token/{token.token}")
        self.assertEqual(verify.data, {"valid": True, "email": self.intern.personal_email})

        confirm = self.client.post(
            f"/api/reset-password/{token.token}",
            {"password": "Fresh-Horse-Battery-9"},
            format="json",
        )
        self.assertEqual(confirm.status_code, 200)
        self.intern.refresh_from_db()
        self.assertTrue(verify_password("Fresh-Horse-Battery-9", self.intern.password))

        reuse = self.client.post(
            f"/api/reset-password/{token.token}",
            {"password": "Another-Horse-Battery-9"},
            format="json",
        )
        self.assertEqual(reuse.status_code, 400)
        self.assertEqual(reuse.data["error"], "Invalid or expired reset token")

    def test_expired_token_rejected(self):
        token = PasswordResetToken.objects.create(
            email="admin@example.com",
            user_type="admin",
            expires_at=timezone.now() - timedelta(minutes=1),
        )

        self.assertEqual(self.client.get(f"/api/verify-reset-token/{token.token}").status_code, 400)
        response = self.client.post(
            f"/api/reset-password/{token.token}",
            {"password": "Fresh-Horse-Battery-9"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.check_password("AdminPass123!"))

    def test_weak_new_password_keeps_token_usable(self):
        token = PasswordResetToken.objects.create(email="admin@example.com", user_type="admin")

        response = self.client.post(
            f"/api/reset-password/{token.token}",
            {"password": "abc"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        token.refresh_from_db()
        self.assertFalse(token.is_used)
