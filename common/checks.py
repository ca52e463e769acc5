from django.conf import settings
from django.core.checks import Error, register

from .sanitizer import sanitize_url


@register()
def check_frontend_url(app_configs, **kwargs):
    """Links mailed to applicants are built from FRONTEND_URL."""
    if sanitize_url(settings.FRONTEND_URL) is not None:
        return []
    return [
        Error(
            "FRONTEND_URL must be an absolute http(s) URL.",
            hint="Set FRONTEND_URL to the portal address, e.g. https://portal.example.org.",
            id="common.E001",
        )
    ]
