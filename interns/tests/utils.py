import shutil
from datetime import date
from pathlib import Path

from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile

from accounts.passwords import hash_password
from interns.files import UPLOAD_SUBDIR
from interns.models import Intern, InternStatus

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n%%EOF\n"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


def pdf_upload(name="document.pdf", content=PDF_BYTES):
    return SimpleUploadedFile(name, content, content_type="application/pdf")


def png_upload(name="image.png", content=PNG_BYTES):
    return SimpleUploadedFile(name, content, content_type="image/png")


def jpeg_upload(name="image.jpg", content=JPEG_BYTES):
    return SimpleUploadedFile(name, content, content_type="image/jpeg")


def clear_uploads():
    shutil.rmtree(Path(settings.MEDIA_ROOT) / UPLOAD_SUBDIR, ignore_errors=True)


_counter = {"value": 0}


def make_intern(status=InternStatus.FRESH, password=None, **fields):
    _counter["value"] += 1
    n = _counter["value"]
    defaults = {
        "full_name": f"Test Intern {n}",
        "enrollment_no": f"ENR-{n:04d}",
        "personal_email": f"intern{n}@example.com",
        "mobile_no": "9876543210",
        "loi_file": f"{UPLOAD_SUBDIR}/loi{n}.pdf",
        "status": status,
    }
    if status in (InternStatus.ACTIVE, InternStatus.COMPLETED):
        defaults.update(
            application_no=f"APP-{n:04d}",
            date_of_joining=date(2026, 1, 1),
            date_of_leaving=date(2026, 6, 30),
        )
    defaults.update(fields)
    if password is not None:
        defaults["password"] = hash_password(password)
    return Intern.objects.create(**defaults)
