"""
Serializer fields backed by the ``common.sanitizer`` helpers.

Each field carries a single message for every way its input can fail
(missing, null, unusable), so rejected payloads read as plain sentences.
"""
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers
from rest_framework.fields import empty

from . import sanitizer


@extend_schema_field(OpenApiTypes.STR)
class SanitizedField(serializers.Field):
    """
    Run ``sanitize`` over the raw value.

    A ``None`` or ``""`` result is an error when the field is required and
    ``empty_value`` otherwise.
    """

    default_error_messages = {"invalid": "Invalid value"}

    def __init__(self, message=None, empty_value=None, **kwargs):
        self.empty_value = empty_value
        super().__init__(**kwargs)
        if message:
            self.error_messages.update(required=message, null=message, invalid=message)

    def sanitize(self, value):
        raise NotImplementedError

    def validate_empty_values(self, data):
        if self.read_only:
            return (True, self.get_default())
        if data is empty or data is None:
            if self.required:
                self.fail("required")
            return (True, self.empty_value)
        return (False, data)

    def to_internal_value(self, data):
        value = self.sanitize(data)
        if value is None or value == "":
            if self.required:
                self.fail("invalid")
            return self.empty_value
        return value

    def to_representation(self, value):
        return value


class CleanTextField(SanitizedField):
    """Markup-free text, truncated to ``max_length``."""

    def __init__(self, max_length=sanitizer.DEFAULT_TEXT_LIMIT, **kwargs):
        self.max_length = max_length
        kwargs.setdefault("empty_value", "")
        super().__init__(**kwargs)

    def sanitize(self, value):
        return sanitizer.sanitize_text(value, self.max_length)


class PersonNameField(SanitizedField):
    default_error_messages = {"length": "Full name must be between {min_length} and {max_length} characters"}

    def __init__(self, min_length=2, max_length=100, **kwargs):
        self.min_length = min_length
        self.max_length = max_length
        kwargs.setdefault("empty_value", "")
        super().__init__(**kwargs)
        message = self.error_messages["length"].format(min_length=min_length, max_length=max_length)
        self.error_messages.update(required=message, null=message, invalid=message, length=message)

    def sanitize(self, value):
        return sanitizer.sanitize_string(value)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value and not (self.min_length <= len(value) <= self.max_length):
            self.fail("length")
        return value


@extend_schema_field(OpenApiTypes.EMAIL)
class EmailAddressField(SanitizedField):
    def sanitize(self, value):
        return sanitizer.sanitize_email(value)


class PhoneNumberField(SanitizedField):
    def sanitize(self, value):
        return sanitizer.sanitize_phone(value)


class EnrollmentNoField(SanitizedField):
    def sanitize(self, value):
        return sanitizer.sanitize_enrollment_no(value)


class ApplicationNoField(SanitizedField):
    def sanitize(self, value):
        return sanitizer.sanitize_application_no(value)


class UsernameField(SanitizedField):
    def sanitize(self, value):
        return sanitizer.sanitize_username(value)


@extend_schema_field(OpenApiTypes.DATE)
class StrictDateField(SanitizedField):
    """``YYYY-MM-DD`` only; returns a ``date``."""

    def sanitize(self, value):
        return sanitizer.sanitize_date(value)

    def to_representation(self, value):
        return value.isoformat() if value else None


@extend_schema_field(OpenApiTypes.INT)
class PositiveIdField(SanitizedField):
    def sanitize(self, value):
        return sanitizer.sanitize_id(value)


class ChoiceValueField(SanitizedField):
    """Exact, case-sensitive match against ``choices``."""

    def __init__(self, choices, **kwargs):
        self.choices = tuple(choices)
        super().__init__(**kwargs)

    def sanitize(self, value):
        return sanitizer.sanitize_enum(value, self.choices)
