"""
Upload inspection and storage.

Uploaded documents are identified by their leading bytes, never by the
client-supplied name or content type, and are stored through the default
file storage, flat under ``uploads/`` with random names.
"""
from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from typing import Iterable, Optional

from django.conf import settings
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

UPLOAD_SUBDIR = "uploads"

PDF = "pdf"
PNG = "png"
JPEG = "jpg"

_SIGNATURES = (
    (PDF, b"%PDF"),
    (PNG, b"\x89PNG\r\n\x1a\n"),
    (JPEG, b"\xff\xd8\xff"),
)
_HEADER_LENGTH = max(len(magic) for _, magic in _SIGNATURES)

IMAGE_KINDS = frozenset({PNG, JPEG})
DOCUMENT_KINDS = frozenset({PDF})


class UploadRejected(Exception):
    """The upload failed the size or content check."""


@dataclass(frozen=True)
class CheckedUpload:
    upload: object
    kind: str


def detect_kind(header: bytes) -> Optional[str]:
    for kind, magic in _SIGNATURES:
        if header.startswith(magic):
            return kind
    return None


def _read_header(upload) -> bytes:
    upload.seek(0)
    header = upload.read(_HEADER_LENGTH)
    upload.seek(0)
    return header


def inspect_upload(upload, allowed_kinds: Iterable[str], label: str) -> CheckedUpload:
    """Raise :class:`UploadRejected` unless ``upload`` is small enough and of an allowed kind."""
    if upload is None:
        raise UploadRejected(f"{label} is required")
    if upload.size > settings.MAX_UPLOAD_SIZE:
        raise UploadRejected(f"File too large: {label}")
    kind = detect_kind(_read_header(upload))
    if kind not in set(allowed_kinds):
        logger.warning("Rejected %s upload: content does not match an allowed type", label)
        raise UploadRejected(f"Invalid file type for {label}")
    return CheckedUpload(upload=upload, kind=kind)


def upload_path(instance, filename: str) -> str:
    """``upload_to`` for intern documents: a random name keeping the detected extension."""
    kind = os.path.splitext(filename)[1].lstrip(".").lower()
    return f"{UPLOAD_SUBDIR}/{secrets.token_hex(16)}.{kind}"


def attach_upload(field_file, checked: CheckedUpload) -> str:
    """Write ``checked`` through the field's storage and return the stored name.

    The model row is not saved; callers save it in their own transaction.
    """
    field_file.save(f"upload.{checked.kind}", checked.upload, save=False)
    return field_file.name


def discard_stored(names: Iterable[str]) -> None:
    for name in names:
        if name:
            default_storage.delete(name)


def public_name(name: str) -> str:
    """The bare file name exposed in API payloads and download URLs."""
    return os.path.basename(name) if name else ""


def is_safe_name(name: str) -> bool:
    """A public name is a bare file name: no directories, no parent refs, no NUL."""
    if not name or "\x00" in name or ".." in name:
        return False
    if os.path.isabs(name) or name.startswith(("/", "\\")):
        return False
    return os.path.basename(name) == name and "\\" not in name


def resolve_stored(name: str) -> Optional[str]:
    """Storage name for a public file name, or ``None`` when the name is unsafe."""
    if not is_safe_name(name):
        return None
    return f"{UPLOAD_SUBDIR}/{name}"
