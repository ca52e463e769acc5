import logging

from django.db import transaction
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit import AuditEvents, client_ip, log_event
from common.exceptions import error_body
from common.services.notifications import NotificationService, OutgoingEmail
from interns.models import Intern, InternStatus
from interns.services import frontend_url

from .access_policy import AccessPolicy
from .models import LoginHistory, PasswordResetToken, PortalRole, User, UserType
from .passwords import CredentialServiceTimeout, hash_password, verify_password
from .permissions import HasPortalRole
from .serializers import (
    ChangePasswordSerializer,
    LoginSerializer,
    NewPasswordSerializer,
    PasswordResetRequestSerializer,
    session_payload,
)
from .throttles import (
    LoginRateThrottle,
    PasswordResetConfirmThrottle,
    PasswordResetRequestThrottle,
)
from .tokens import issue_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_NOT_ACTIVE = "Your account is not active. Please contact administrator."
CREDENTIAL_SERVICE_DOWN = "Authentication service temporarily unavailable"
RESET_REQUEST_ACK = "If an account exists, a password reset link has been sent."
INVALID_RESET_TOKEN = "Invalid or expired reset token"


def _store_password(principal, raw_password: str) -> None:
    if principal.user_type == UserType.ADMIN:
        principal.set_password(raw_password)
    else:
        principal.password = hash_password(raw_password)
    principal.save(update_fields=["password"])


def _find_reset_account(user_type: str, email: str = None, application_no: str = None):
    if user_type == UserType.ADMIN:
        if not email:
            return None
        return User.objects.filter(email__iexact=email, is_active=True).first()

    if application_no:
        intern = Intern.objects.filter(application_no=application_no).first()
    elif email:
        intern = Intern.objects.filter(personal_email__iexact=email).first()
    else:
        intern = None
    if intern is None or intern.status != InternStatus.ACTIVE:
        return None
    return intern


def _account_email(account) -> str:
    return account.email if account.user_type == UserType.ADMIN else account.personal_email


# ================= LOGIN =================

class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]

    @staticmethod
    def _record(request, user_type, identifier, success, action, actor=None, level="info"):
        LoginHistory.objects.create(
            user_type=user_type or "",
            identifier=identifier or "",
            ip_address=client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", ""),
            success=success,
        )
        log_event(
            action=action,
            actor=actor,
            object_type=user_type or "",
            object_id=str(actor.pk) if actor is not None else "",
            level=level,
            category="auth",
            ip_address=client_ip(request),
            metadata={"identifier": identifier or ""},
        )

    def _deny(self, request, user_type, identifier, actor=None):
        self._record(
            request, user_type, identifier, False,
            AuditEvents.LOGIN_FAILED, actor=actor, level="warning",
        )
        return Response(error_body(INVALID_CREDENTIALS), status=status.HTTP_401_UNAUTHORIZED)

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            # Same answer as a wrong password so usernames cannot be enumerated.
            logger.warning("Login validation failed from %s: %s", client_ip(request), serializer.errors)
            return Response(error_body(INVALID_CREDENTIALS), status=status.HTTP_401_UNAUTHORIZED)

        data = serializer.validated_data
        username = data["username"]
        user_type = data["user_type"]

        if user_type == UserType.ADMIN:
            principal = User.objects.filter(username=username, is_active=True).first()
        else:
            principal = Intern.objects.filter(application_no=username).first()
            if principal is not None and not (
                principal.status == InternStatus.ACTIVE
                and principal.role == PortalRole.INTERN_ONGOING
            ):
                logger.info("Inactive intern login attempt for %s (status %s)", username, principal.status)
                self._record(
                    request, user_type, username, False,
                    AuditEvents.LOGIN_BLOCKED_INACTIVE, actor=principal, level="warning",
                )
                return Response(error_body(ACCOUNT_NOT_ACTIVE), status=status.HTTP_403_FORBIDDEN)

        if principal is None:
            logger.info("Login attempt for unknown %s %s", user_type, username)
            return self._deny(request, user_type, username)

        try:
            password_ok = verify_password(data["password"], principal.password)
        except CredentialServiceTimeout:
            return Response(
                error_body(CREDENTIAL_SERVICE_DOWN),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if not password_ok:
            logger.info("Invalid password for %s %s", user_type, username)
            return self._deny(request, user_type, username, actor=principal)

        token = issue_token(principal)
        self._record(request, user_type, username, True, AuditEvents.LOGIN_SUCCESS, actor=principal)
        logger.info("Successful login for %s %s", user_type, principal.pk)

        return Response(
            {
                "message": "Login successful",
                "token": token,
                "user": session_payload(principal),
            }
        )


class LogoutView(APIView):
    """Tokens are stateless; the client drops its copy."""

    permission_classes = [AllowAny]

    def post(self, request):
        return Response({"message": "Logged out successfully"})


# ================= PASSWORD =================

class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated, HasPortalRole]
    required_role = (AccessPolicy.ADMIN, AccessPolicy.INTERN)

    def post(self, request):
        principal = request.user
        serializer = ChangePasswordSerializer(
            data=request.data,
            context={"user": principal if principal.user_type == UserType.ADMIN else None},
        )
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            current_ok = verify_password(data["current_password"], principal.password)
        except CredentialServiceTimeout:
            return Response(
                error_body(CREDENTIAL_SERVICE_DOWN),
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        if not current_ok:
            return Response(
                error_body("Current password is incorrect"),
                status=status.HTTP_400_BAD_REQUEST,
            )

        _store_password(principal, data["new_password"])
        log_event(
            action=AuditEvents.PASSWORD_CHANGED,
            actor=principal,
            object_type=principal.user_type,
            object_id=str(principal.pk),
            category="auth",
            ip_address=client_ip(request),
        )
        return Response({"message": "Password changed successfully"})


class PasswordResetRequestView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [PasswordResetRequestThrottle]

    def post(self, request):
        serializer = PasswordResetRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        account = _find_reset_account(data["user_type"], data["email"], data["application_no"])
        if account is not None:
            with transaction.atomic():
                token = PasswordResetToken.objects.create(
                    email=_account_email(account),
                    user_type=account.user_type,
                )
                NotificationService.dispatch(
                    [
                        OutgoingEmail(
                            template_code="password_reset",
                            recipient=token.email,
                            context={
                                "lifetime_minutes": int(PasswordResetToken.LIFETIME.total_seconds() // 60),
                                "reset_link": frontend_url(f"reset-password/{token.token}"),
                            },
                        )
                    ]
                )
            log_event(
                action=AuditEvents.PASSWORD_RESET_REQUESTED,
                actor=account,
                object_type="password_reset",
                object_id=str(token.pk),
                category="auth",
                ip_address=client_ip(request),
            )
        else:
            logger.info("Password reset requested for unknown %s account", data["user_type"])

        return Response({"message": RESET_REQUEST_ACK})


class PasswordResetVerifyView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [PasswordResetConfirmThrottle]

    def get(self, request, token):
        token_obj = PasswordResetToken.objects.filter(token=token).first()
        if token_obj is None or not token_obj.is_valid():
            return Response(error_body(INVALID_RESET_TOKEN), status=status.HTTP_400_BAD_REQUEST)
        return Response({"valid": True, "email": token_obj.email})


class PasswordResetConfirmView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [PasswordResetConfirmThrottle]

    def post(self, request, token):
        with transaction.atomic():
            token_obj = PasswordResetToken.objects.select_for_update().filter(token=token).first()
            if token_obj is None or not token_obj.is_valid():
                return Response(error_body(INVALID_RESET_TOKEN), status=status.HTTP_400_BAD_REQUEST)

            if token_obj.user_type == UserType.ADMIN:
                account = User.objects.filter(email__iexact=token_obj.email, is_active=True).first()
            else:
                account = Intern.objects.filter(personal_email__iexact=token_obj.email).first()
            if account is None:
                return Response(error_body(INVALID_RESET_TOKEN), status=status.HTTP_400_BAD_REQUEST)

            serializer = NewPasswordSerializer(
                data=request.data,
                context={"user": account if token_obj.user_type == UserType.ADMIN else None},
            )
            serializer.is_valid(raise_exception=True)

            _store_password(account, serializer.validated_data["password"])
            token_obj.is_used = True
            token_obj.save(update_fields=["is_used"])

        log_event(
            action=AuditEvents.PASSWORD_RESET_CONFIRMED,
            actor=account,
            object_type="password_reset",
            object_id=str(token_obj.pk),
            category="auth",
            ip_address=client_ip(request),
        )
        return Response({"message": "Password has been reset successfully"})
