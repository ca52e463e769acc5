from rest_framework.permissions import AllowAny, BasePermission

from .access_policy import AccessPolicy


class HasPortalRole(BasePermission):
    """
    Role gate driven by the view.
    Usage:
      permission_classes = [IsAuthenticated, HasPortalRole]
      required_role = "Admin"            # or ("Admin", "Intern")
    """
    message = "Insufficient privileges."
    required_role = None

    def has_permission(self, request, view):
        required = getattr(view, "required_role", None) or self.required_role
        if not required:
            return False
        return AccessPolicy.has_role(request.user, required)


class IsPortalAdmin(HasPortalRole):
    required_role = AccessPolicy.ADMIN

    def has_permission(self, request, view):
        return AccessPolicy.has_role(request.user, self.required_role)


class IsPortalIntern(HasPortalRole):
    required_role = AccessPolicy.INTERN

    def has_permission(self, request, view):
        return AccessPolicy.has_role(request.user, self.required_role)


class CapabilityLinkAccess(AllowAny):
    """
    Access tier for links whose only secret is the record ID they carry
    (the enrollment form). No credentials are read; the view resolves the
    ID and checks the record state itself.
    """
