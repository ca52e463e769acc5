from __future__ import annotations

from typing import Iterable, Union

from .models import INTERN_ROLE_PREFIX, PortalRole, UserType

RequiredRole = Union[str, Iterable[str]]


class AccessPolicy:
    """Centralized access checks for role/ownership rules."""

    ADMIN = "Admin"
    INTERN = "Intern"

    @staticmethod
    def _is_authenticated(user) -> bool:
        return bool(user and getattr(user, "is_authenticated", False))

    @classmethod
    def role_of(cls, user) -> str:
        if not cls._is_authenticated(user):
            return ""
        return getattr(user, "role", "") or ""

    @classmethod
    def role_matches(cls, role: str, required: RequiredRole) -> bool:
        """
        ``required`` is a single role or a collection of roles.

        "Admin" matches only the admin role, "Intern" matches every
        ``Intern_*`` sub-role, anything else must match exactly.
        """
        if not role:
            return False
        allowed = [required] if isinstance(required, str) else list(required)
        for wanted in allowed:
            if wanted == cls.ADMIN and role == PortalRole.ADMIN:
                return True
            if wanted == cls.INTERN and role.startswith(INTERN_ROLE_PREFIX):
                return True
            if wanted == role:
                return True
        return False

    @classmethod
    def has_role(cls, user, required: RequiredRole) -> bool:
        return cls.role_matches(cls.role_of(user), required)

    @classmethod
    def is_admin(cls, user) -> bool:
        return cls._is_authenticated(user) and getattr(user, "user_type", None) == UserType.ADMIN

    @classmethod
    def is_intern(cls, user) -> bool:
        return cls._is_authenticated(user) and getattr(user, "user_type", None) == UserType.INTERN

    @classmethod
    def is_ongoing_intern(cls, user) -> bool:
        return cls.is_intern(user) and user.role == PortalRole.INTERN_ONGOING

    @classmethod
    def can_download_file(cls, user, relative_name: str) -> bool:
        """Admins read every upload; interns only files recorded on their own row."""
        if cls.is_admin(user):
            return True
        if not cls.is_intern(user):
            return False
        return relative_name in user.document_names()
