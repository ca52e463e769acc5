from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from common.fields import (
    ApplicationNoField,
    ChoiceValueField,
    CleanTextField,
    EmailAddressField,
    EnrollmentNoField,
    PersonNameField,
    PhoneNumberField,
    PositiveIdField,
    StrictDateField,
)
from reports.serializers import DailyReportSerializer

from .files import public_name
from .models import BLOOD_GROUPS, Decision, Intern


@extend_schema_field(OpenApiTypes.STR)
class StoredFileNameField(serializers.Field):
    """Bare name of a stored document, the form used in download URLs."""

    def __init__(self, **kwargs):
        kwargs["read_only"] = True
        super().__init__(**kwargs)

    def to_representation(self, value):
        return public_name(value.name) if value else ""


class EnrollmentFormSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", read_only=True)
    enrollmentNo = serializers.CharField(source="enrollment_no", read_only=True)
    email = serializers.EmailField(source="personal_email", read_only=True)

    class Meta:
        model = Intern
        fields = ("id", "fullName", "enrollmentNo", "email")


class FreshApplicationSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", read_only=True)
    enrollmentNo = serializers.CharField(source="enrollment_no", read_only=True)
    personalEmail = serializers.EmailField(source="personal_email", read_only=True)
    mobileNo = serializers.CharField(source="mobile_no", read_only=True)
    loiFile = StoredFileNameField(source="loi_file")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Intern
        fields = (
            "id",
            "fullName",
            "enrollmentNo",
            "personalEmail",
            "mobileNo",
            "loiFile",
            "createdAt",
        )


class PendingApplicationSerializer(FreshApplicationSerializer):
    passportPhoto = StoredFileNameField(source="passport_photo")
    bloodGroup = serializers.CharField(source="blood_group", read_only=True)
    presentAddress = serializers.CharField(source="present_address", read_only=True)
    permanentAddress = serializers.CharField(source="permanent_address", read_only=True)
    eSignature = StoredFileNameField(source="e_signature")
    signedNDA = StoredFileNameField(source="signed_nda")
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta(FreshApplicationSerializer.Meta):
        fields = (
            "id",
            "fullName",
            "enrollmentNo",
            "personalEmail",
            "mobileNo",
            "passportPhoto",
            "semester",
            "program",
            "department",
            "organization",
            "gender",
            "bloodGroup",
            "presentAddress",
            "permanentAddress",
            "eSignature",
            "signedNDA",
            "createdAt",
            "updatedAt",
        )


class RejectedApplicationSerializer(FreshApplicationSerializer):
    rejectionReason = serializers.CharField(source="rejection_reason", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta(FreshApplicationSerializer.Meta):
        fields = (
            "id",
            "fullName",
            "enrollmentNo",
            "personalEmail",
            "mobileNo",
            "rejectionReason",
            "createdAt",
            "updatedAt",
        )


class InternProfileSerializer(PendingApplicationSerializer):
    """The intern's own record. The credential hash is never serialized."""

    applicationNo = serializers.CharField(source="application_no", read_only=True)
    dateOfJoining = serializers.DateField(source="date_of_joining", read_only=True)
    dateOfLeaving = serializers.DateField(source="date_of_leaving", read_only=True)
    role = serializers.CharField(read_only=True)

    class Meta(PendingApplicationSerializer.Meta):
        fields = (
            "id",
            "fullName",
            "enrollmentNo",
            "personalEmail",
            "mobileNo",
            "applicationNo",
            "semester",
            "program",
            "department",
            "organization",
            "gender",
            "bloodGroup",
            "presentAddress",
            "permanentAddress",
            "dateOfJoining",
            "dateOfLeaving",
            "status",
            "role",
        )


class InternDetailSerializer(InternProfileSerializer):
    loiFile = StoredFileNameField(source="loi_file")
    rejectionReason = serializers.CharField(source="rejection_reason", read_only=True)
    specialApprovalNotes = serializers.CharField(source="special_approval_notes", read_only=True)
    reports = DailyReportSerializer(many=True, read_only=True)

    class Meta(InternProfileSerializer.Meta):
        fields = InternProfileSerializer.Meta.fields + (
            "loiFile",
            "passportPhoto",
            "eSignature",
            "signedNDA",
            "rejectionReason",
            "specialApprovalNotes",
            "reports",
            "createdAt",
            "updatedAt",
        )


class InternAttendanceRowSerializer(serializers.ModelSerializer):
    """Ongoing / completed dashboard row. Attendance numbers are added by the view."""

    hyperlinkText = serializers.CharField(source="hyperlink_text", read_only=True)
    applicationNo = serializers.CharField(source="application_no", read_only=True)
    name = serializers.CharField(source="full_name", read_only=True)
    startDate = serializers.DateField(source="date_of_joining", read_only=True)
    endDate = serializers.DateField(source="date_of_leaving", read_only=True)
    reports = DailyReportSerializer(many=True, read_only=True)

    class Meta:
        model = Intern
        fields = (
            "id",
            "hyperlinkText",
            "applicationNo",
            "name",
            "startDate",
            "endDate",
            "reports",
        )


# ---------------- Input ----------------
LOI_REQUIRED = "LOI file is required"


class ApplicationSubmissionSerializer(serializers.Serializer):
    fullName = PersonNameField(source="full_name")
    enrollmentNo = EnrollmentNoField(source="enrollment_no", message="Invalid enrollment number format")
    email = EmailAddressField(message="Invalid email address")
    mobile = PhoneNumberField(message="Invalid mobile number (must be 10-15 digits)")
    loi = serializers.FileField(
        error_messages={
            key: LOI_REQUIRED for key in ("required", "null", "invalid", "no_name", "empty")
        },
    )


class EnrollmentSubmissionSerializer(serializers.Serializer):
    """Identity fields are optional here: blanks keep the stored values."""

    fullName = PersonNameField(source="full_name", required=False)
    enrollmentNo = EnrollmentNoField(source="enrollment_no", required=False)
    semester = CleanTextField(max_length=50, message="Semester is required")
    program = CleanTextField(max_length=200, message="Program is required")
    department = CleanTextField(max_length=200, message="Department is required")
    organization = CleanTextField(max_length=200, message="Organization is required")
    contactNo = PhoneNumberField(source="contact_no", required=False)
    emailAddress = EmailAddressField(source="email_address", required=False)
    gender = ChoiceValueField(Intern.Gender.values, message="Invalid gender value")
    bloodGroup = ChoiceValueField(BLOOD_GROUPS, source="blood_group", required=False, empty_value="")
    presentAddress = CleanTextField(
        source="present_address", max_length=500, message="Present address is required"
    )
    permanentAddress = CleanTextField(
        source="permanent_address", max_length=500, message="Permanent address is required"
    )


class AdminDecisionSerializer(serializers.Serializer):
    id = PositiveIdField(message="Invalid intern ID")
    decision = ChoiceValueField(Decision.values, message="Invalid decision value")
    rejectionReason = CleanTextField(source="rejection_reason", max_length=1000, required=False)
    specialApprovalNotes = CleanTextField(
        source="special_approval_notes", max_length=1000, required=False
    )


class FinalizeOnboardingSerializer(serializers.Serializer):
    id = PositiveIdField(message="Invalid intern ID")
    applicationNo = ApplicationNoField(
        source="application_no", message="Invalid application number format"
    )
    dateOfJoining = StrictDateField(
        source="date_of_joining", message="Invalid date of joining (use YYYY-MM-DD format)"
    )
    dateOfLeaving = StrictDateField(
        source="date_of_leaving", message="Invalid date of leaving (use YYYY-MM-DD format)"
    )

    def validate(self, attrs):
        if attrs["date_of_leaving"] <= attrs["date_of_joining"]:
            raise serializers.ValidationError("Date of leaving must be after date of joining")
        return attrs
