from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from common.fields import ApplicationNoField, ChoiceValueField, EmailAddressField, UsernameField

from .models import User, UserType

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128


def _one_message(message):
    return {key: message for key in ("required", "null", "blank", "invalid")}


def _check_password_rules(password, user=None):
    try:
        password_validation.validate_password(password, user)
    except DjangoValidationError as exc:
        raise serializers.ValidationError(list(exc.messages))
    return password


class NewPasswordField(serializers.CharField):
    """Kept verbatim; length bounds are checked before Django's password validators."""

    def __init__(self, **kwargs):
        kwargs.update(
            trim_whitespace=False,
            min_length=PASSWORD_MIN_LENGTH,
            max_length=PASSWORD_MAX_LENGTH,
            error_messages={
                **_one_message("Password is required"),
                "min_length": "Password must be at least {min_length} characters long",
                "max_length": "Password must be at most {max_length} characters long",
            },
        )
        super().__init__(**kwargs)


# =========================
# LOGIN PAYLOADS (READ)
# =========================

class AdminSessionSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="display_name", read_only=True)
    role = serializers.CharField(read_only=True)
    userType = serializers.CharField(source="user_type", read_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "fullName", "role", "userType")


class InternSessionSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    applicationNo = serializers.CharField(source="application_no", read_only=True)
    fullName = serializers.CharField(source="full_name", read_only=True)
    email = serializers.EmailField(source="personal_email", read_only=True)
    role = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    userType = serializers.CharField(source="user_type", read_only=True)


def session_payload(principal) -> dict:
    if principal.user_type == "admin":
        return AdminSessionSerializer(principal).data
    return InternSessionSerializer(principal).data


# =========================
# INPUT PAYLOADS
# =========================

class LoginSerializer(serializers.Serializer):
    username = UsernameField(message="Invalid username format")
    # Kept verbatim for hash comparison.
    password = serializers.CharField(trim_whitespace=False, error_messages=_one_message("Password is required"))
    userType = ChoiceValueField(UserType.values, source="user_type", message="Invalid user type")


class ChangePasswordSerializer(serializers.Serializer):
    """``context["user"]`` feeds the similarity check of the password validators."""

    currentPassword = serializers.CharField(
        source="current_password",
        trim_whitespace=False,
        error_messages=_one_message("Current password is required"),
    )
    newPassword = NewPasswordField(source="new_password")

    def validate_newPassword(self, value):
        return _check_password_rules(value, self.context.get("user"))

    def validate(self, attrs):
        if attrs["new_password"] == attrs["current_password"]:
            raise serializers.ValidationError("New password must differ from the current password")
        return attrs


class PasswordResetRequestSerializer(serializers.Serializer):
    userType = ChoiceValueField(UserType.values, source="user_type", message="Invalid user type")
    email = EmailAddressField(required=False)
    applicationNo = ApplicationNoField(source="application_no", required=False)

    def validate(self, attrs):
        if attrs["user_type"] == UserType.ADMIN and not attrs["email"]:
            raise serializers.ValidationError("A valid email address is required")
        if attrs["user_type"] == UserType.INTERN and not (attrs["application_no"] or attrs["email"]):
            raise serializers.ValidationError("Application number or email is required")
        return attrs


class NewPasswordSerializer(serializers.Serializer):
    """Reset confirmation and ``create_admin``; ``context["user"]`` as above."""

    password = NewPasswordField()

    def validate_password(self, value):
        return _check_password_rules(value, self.context.get("user"))
