from django.db import models
from django.db.models import F, Q

from accounts.models import PortalRole, UserType

from .files import public_name, upload_path


class InternStatus(models.TextChoices):
    FRESH = "Fresh", "Fresh"
    PENDING_ENROLLMENT = "Pending_Enrollment", "Pending enrollment"
    PENDING_APPROVAL = "Pending_Approval", "Pending approval"
    ACTIVE = "Active", "Active"
    SPECIAL_APPROVAL_REQUIRED = "Special_Approval_Required", "Special approval required"
    REJECTED = "Rejected", "Rejected"
    COMPLETED = "Completed", "Completed"


class Decision(models.TextChoices):
    """Admin decision on a Fresh application."""

    APPROVED = "Approved", "Approved"
    REJECTED = "Rejected", "Rejected"
    SPECIAL_APPROVAL = "Special Approval Required", "Special approval required"


BLOOD_GROUPS = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")


ROLE_BY_STATUS = {
    InternStatus.FRESH: PortalRole.INTERN_APPLIED,
    InternStatus.PENDING_ENROLLMENT: PortalRole.INTERN_APPLIED,
    InternStatus.PENDING_APPROVAL: PortalRole.INTERN_APPLIED,
    InternStatus.SPECIAL_APPROVAL_REQUIRED: PortalRole.INTERN_APPLIED,
    InternStatus.ACTIVE: PortalRole.INTERN_ONGOING,
    InternStatus.REJECTED: PortalRole.INTERN_REJECTED,
    InternStatus.COMPLETED: PortalRole.INTERN_COMPLETED,
}


class Intern(models.Model):
    """
    Applicant record that becomes the intern account once onboarded.

    The row doubles as the authenticated principal for intern tokens, so it
    carries the small part of the user interface DRF and the role gate read.
    """

    class Gender(models.TextChoices):
        MALE = "M", "Male"
        FEMALE = "F", "Female"
        OTHER = "O", "Other"

    Status = InternStatus

    # ---------------- Identity ----------------
    full_name = models.CharField("Full name", max_length=100)
    enrollment_no = models.CharField("Enrollment no.", max_length=50)
    personal_email = models.EmailField("Personal email", unique=True)
    mobile_no = models.CharField("Mobile no.", max_length=16)

    # ---------------- Documents ----------------
    loi_file = models.FileField("Letter of intent", upload_to=upload_path, max_length=255, blank=True)
    passport_photo = models.FileField("Passport photo", upload_to=upload_path, max_length=255, blank=True)
    e_signature = models.FileField("E-signature", upload_to=upload_path, max_length=255, blank=True)
    signed_nda = models.FileField("Signed NDA", upload_to=upload_path, max_length=255, blank=True)

    # ---------------- Enrollment ----------------
    application_no = models.CharField(
        "Application no.",
        max_length=30,
        unique=True,
        null=True,
        blank=True,
    )
    semester = models.CharField("Semester", max_length=50, blank=True)
    program = models.CharField("Program", max_length=200, blank=True)
    department = models.CharField("Department", max_length=200, blank=True)
    organization = models.CharField("Organization", max_length=200, blank=True)
    gender = models.CharField("Gender", max_length=1, choices=Gender.choices, blank=True)
    blood_group = models.CharField("Blood group", max_length=3, blank=True)
    present_address = models.TextField("Present address", blank=True)
    permanent_address = models.TextField("Permanent address", blank=True)

    # ---------------- Lifecycle ----------------
    status = models.CharField(
        "Status",
        max_length=32,
        choices=InternStatus.choices,
        default=InternStatus.FRESH,
        db_index=True,
    )
    date_of_joining = models.DateField("Date of joining", null=True, blank=True)
    date_of_leaving = models.DateField("Date of leaving", null=True, blank=True)
    password = models.CharField("Password hash", max_length=128, blank=True)

    rejection_reason = models.TextField("Rejection reason", blank=True)
    special_approval_notes = models.TextField("Special approval notes", blank=True)

    created_at = models.DateTimeField("Created", auto_now_add=True)
    updated_at = models.DateTimeField("Updated", auto_now=True)

    # Principal interface for DRF / AccessPolicy.
    user_type = UserType.INTERN
    is_authenticated = True
    is_anonymous = False
    is_active = True

    class Meta:
        verbose_name = "Intern"
        verbose_name_plural = "Interns"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(status__in=InternStatus.values),
                name="intern_status_valid",
            ),
            models.CheckConstraint(
                condition=(
                    Q(date_of_joining__isnull=True)
                    | Q(date_of_leaving__isnull=True)
                    | Q(date_of_leaving__gt=F("date_of_joining"))
                ),
                name="intern_leaving_after_joining",
            ),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.status})"

    @property
    def role(self) -> str:
        return ROLE_BY_STATUS[self.status]

    @property
    def login_name(self) -> str:
        return self.application_no or ""

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def hyperlink_text(self) -> str:
        return f"{self.application_no}-{self.full_name}"

    def document_names(self) -> set[str]:
        return {
            public_name(document.name)
            for document in (self.loi_file, self.passport_photo, self.e_signature, self.signed_nda)
            if document
        }
