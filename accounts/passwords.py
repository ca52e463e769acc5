"""Credential service: hashing, bounded verification, random passwords."""
from __future__ import annotations

import logging
import secrets
import string
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Optional

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password

logger = logging.getLogger(__name__)

GENERATED_PASSWORD_LENGTH = 12
_SYMBOLS = "!@#$%&*?"
_CHAR_GROUPS = (
    string.ascii_lowercase,
    string.ascii_uppercase,
    string.digits,
    _SYMBOLS,
)

_verify_pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="credential-verify")


class CredentialServiceTimeout(Exception):
    """Password verification did not finish in time."""


def generate_random_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """At least one character from every group, the rest from all of them."""
    if length < len(_CHAR_GROUPS):
        raise ValueError("Password length too short")
    alphabet = "".join(_CHAR_GROUPS)
    chars = [secrets.choice(group) for group in _CHAR_GROUPS]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def hash_password(raw_password: str) -> str:
    return make_password(raw_password)


def verify_password(raw_password: str, encoded: str, timeout: Optional[float] = None) -> bool:
    if not encoded or not raw_password:
        return False
    if timeout is None:
        timeout = settings.PASSWORD_VERIFY_TIMEOUT
    future = _verify_pool.submit(check_password, raw_password, encoded)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as exc:
        logger.error("Password verification exceeded %ss", timeout)
        raise CredentialServiceTimeout("Password verification timeout") from exc
