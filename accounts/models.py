import secrets
from datetime import timedelta

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

from .managers import UserManager


class PortalRole(models.TextChoices):
    ADMIN = "Admin", "Admin"
    INTERN_APPLIED = "Intern_applied", "Intern (applied)"
    INTERN_ONGOING = "Intern_approved&ongoing", "Intern (approved & ongoing)"
    INTERN_REJECTED = "Intern_rejected", "Intern (rejected)"
    INTERN_COMPLETED = "Intern_completed", "Intern (completed)"


INTERN_ROLE_PREFIX = "Intern_"


class UserType(models.TextChoices):
    ADMIN = "admin", "Admin"
    INTERN = "intern", "Intern"


# ================= Admin =================
class User(AbstractUser):
    """Portal administrator. Interns live in ``interns.Intern``."""

    full_name = models.CharField("Full name", max_length=150, blank=True)

    objects = UserManager()

    user_type = UserType.ADMIN

    class Meta:
        verbose_name = "Administrator"
        verbose_name_plural = "Administrators"

    @property
    def role(self) -> str:
        return PortalRole.ADMIN

    @property
    def login_name(self) -> str:
        return self.username

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username


# ================= Security =================
class AuditLog(models.Model):
    """
    Primary audit storage backend.
    Use apps.audit.log_event as unified entrypoint for new writes.
    """

    class Level(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        CRITICAL = "critical", "Critical"

    class Category(models.TextChoices):
        AUTH = "auth", "Authentication"
        LIFECYCLE = "lifecycle", "Application lifecycle"
        REPORTS = "reports", "Daily reports"
        FILES = "files", "Files"
        SYSTEM = "system", "System"

    actor_type = models.CharField("Actor type", max_length=20, blank=True)
    actor_id = models.CharField("Actor ID", max_length=50, blank=True)

    action = models.CharField("Action", max_length=255)
    object_type = models.CharField("Object type", max_length=100, blank=True)
    object_id = models.CharField("Object ID", max_length=100, blank=True)

    level = models.CharField(
        "Level",
        max_length=20,
        choices=Level.choices,
        default=Level.INFO,
    )

    category = models.CharField(
        "Category",
        max_length=50,
        choices=Category.choices,
        default=Category.SYSTEM,
    )

    ip_address = models.GenericIPAddressField("IP address", null=True, blank=True)
    metadata = models.JSONField("Metadata", default=dict, blank=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Audit log entry"
        verbose_name_plural = "Audit log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["level"], name="accounts_au_level_6b1a0e_idx"),
            models.Index(fields=["category"], name="accounts_au_categor_3f0d2c_idx"),
            models.Index(fields=["created_at"], name="accounts_au_created_9a4e71_idx"),
            models.Index(fields=["actor_type", "actor_id"], name="accounts_au_actor_t_52c8b4_idx"),
        ]

    @classmethod
    def log(
        cls,
        action,
        actor=None,
        object_type="",
        object_id="",
        level=Level.INFO,
        category=Category.SYSTEM,
        ip_address=None,
        metadata=None,
    ):
        return cls.objects.create(
            actor_type=getattr(actor, "user_type", "") if actor is not None else "",
            actor_id=str(actor.pk) if getattr(actor, "pk", None) else "",
            action=action,
            object_type=object_type,
            object_id=object_id,
            level=level,
            category=category,
            ip_address=ip_address,
            metadata=metadata or {},
        )

    def __str__(self):
        return f"[{self.level.upper()}] {self.action}"


class LoginHistory(models.Model):
    user_type = models.CharField("User type", max_length=20, choices=UserType.choices)
    identifier = models.CharField("Username / application no.", max_length=150, blank=True)
    ip_address = models.GenericIPAddressField("IP address", null=True, blank=True)
    user_agent = models.TextField("User agent", blank=True)
    success = models.BooleanField("Successful", default=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Login attempt"
        verbose_name_plural = "Login history"
        ordering = ["-created_at"]


def _new_reset_token() -> str:
    return secrets.token_urlsafe(32)


class PasswordResetToken(models.Model):
    """
    Single-use reset token. Not linked to the account by foreign key:
    the account is resolved by ``email`` + ``user_type`` when consumed.
    """

    LIFETIME = timedelta(minutes=30)

    token = models.CharField("Token", max_length=128, unique=True, default=_new_reset_token)
    email = models.EmailField("Email")
    user_type = models.CharField("User type", max_length=20, choices=UserType.choices)
    expires_at = models.DateTimeField("Expires at")
    is_used = models.BooleanField("Used", default=False)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Password reset token"
        verbose_name_plural = "Password reset tokens"
        indexes = [
            models.Index(fields=["email", "user_type"], name="accounts_pa_email_1c7d3e_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.expires_at is None:
            self.expires_at = timezone.now() + self.LIFETIME
        super().save(*args, **kwargs)

    def is_expired(self) -> bool:
        return timezone.now() > self.expires_at

    def is_valid(self) -> bool:
        return not self.is_used and not self.is_expired()

    def __str__(self):
        return f"{self.user_type}:{self.email}"
