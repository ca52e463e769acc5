from django.core.files.storage import default_storage
from django.test import SimpleTestCase

from interns.files import (
    UPLOAD_SUBDIR,
    UploadRejected,
    attach_upload,
    discard_stored,
    inspect_upload,
    resolve_stored,
    upload_path,
)
from interns.models import Intern

from .utils import PDF_BYTES, clear_uploads, pdf_upload, png_upload


class UploadPathTests(SimpleTestCase):
    def test_random_name_keeps_detected_extension(self):
        first = upload_path(None, "upload.png")
        second = upload_path(None, "upload.png")

        self.assertRegex(first, rf"^{UPLOAD_SUBDIR}/[0-9a-f]{{32}}\.png$")
        self.assertNotEqual(first, second)

    def test_resolve_stored_refuses_path_components(self):
        self.assertEqual(resolve_stored("abc.pdf"), f"{UPLOAD_SUBDIR}/abc.pdf")
        for name in ("", "a/b.pdf", "..", "..\\x", "/etc/passwd", "a\x00.pdf"):
            self.assertIsNone(resolve_stored(name))


class StoredUploadTests(SimpleTestCase):
    def setUp(self):
        self.addCleanup(clear_uploads)

    def test_attach_writes_through_storage_without_saving_row(self):
        intern = Intern(full_name="Asha")
        checked = inspect_upload(pdf_upload("letter.exe"), {"pdf"}, "LOI")

        name = attach_upload(intern.loi_file, checked)

        self.assertIsNone(intern.pk)
        self.assertTrue(name.startswith(f"{UPLOAD_SUBDIR}/"))
        self.assertTrue(name.endswith(".pdf"))
        with default_storage.open(name, "rb") as stored:
            self.assertEqual(stored.read(), PDF_BYTES)

        discard_stored([name, ""])
        self.assertFalse(default_storage.exists(name))

    def test_content_decides_the_kind(self):
        with self.assertRaisesMessage(UploadRejected, "Invalid file type for LOI"):
            inspect_upload(png_upload("letter.pdf"), {"pdf"}, "LOI")
