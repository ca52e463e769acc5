from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from rest_framework_simplejwt.tokens import AccessToken

MIN_SECRET_LENGTH = 32

KNOWN_PLACEHOLDER_SECRETS = frozenset(
    {
        "sample-key-test-purposes",
        "dev-secret-key-change-me",
        "change-me",
        "changeme",
        "secret",
        "your-secret-key",
        "your_jwt_secret",
    }
)


def signing_secret_problem(secret) -> Optional[str]:
    """Return why ``secret`` must not sign tokens, or ``None`` when it is fine."""
    if not secret:
        return "JWT_SECRET is not set."
    if secret in KNOWN_PLACEHOLDER_SECRETS:
        return "JWT_SECRET uses a known placeholder value."
    if len(secret) < MIN_SECRET_LENGTH:
        return f"JWT_SECRET must be at least {MIN_SECRET_LENGTH} characters long."
    return None


def get_signing_secret() -> str:
    secret = settings.SIMPLE_JWT.get("SIGNING_KEY")
    problem = signing_secret_problem(secret)
    if problem:
        raise ImproperlyConfigured(problem)
    return secret


def issue_token(principal) -> str:
    """
    Access token for an admin ``User`` or an ``Intern``.

    Claims: ``user_id``, ``username`` (admin username or intern application
    number), ``role`` and ``user_type``.
    """
    get_signing_secret()
    token = AccessToken()
    token["user_id"] = principal.pk
    token["username"] = principal.login_name
    token["role"] = principal.role
    token["user_type"] = principal.user_type
    return str(token)
