import tempfile
from pathlib import Path

from .settings import *  # noqa: F401,F403
from .settings import REST_FRAMEWORK, SIMPLE_JWT

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

JWT_SECRET = "test-signing-secret-0123456789-abcdefghijklmnop"
SIMPLE_JWT = {**SIMPLE_JWT, "SIGNING_KEY": JWT_SECRET}

EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
DEFAULT_FROM_EMAIL = "noreply@test.local"
NOTIFICATIONS_RUN_INLINE = True

FRONTEND_URL = "https://portal.test"
ONBOARDING_NOTIFY_EMAILS = ["head@test.local", "dean@test.local"]

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix="ims-test-media-"))
NDA_TEMPLATE_PATH = str(MEDIA_ROOT / "nda" / "nda.pdf")

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_RATES": {
        **REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"],
        "api": "10000/m",
        "login": "1000/m",
        "password_reset_request": "1000/m",
        "password_reset_confirm": "1000/m",
    },
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

AUDIT_WRITE_MODE = "primary_only"
