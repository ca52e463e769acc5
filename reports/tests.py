from datetime import timedelta
from unittest.mock import patch

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from interns.models import InternStatus
from interns.tests.utils import make_intern

from .models import DailyReport


class SubmitDailyReportTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.intern = make_intern(status=InternStatus.ACTIVE, full_name="Nisha Rao")
        self.client.force_authenticate(user=self.intern)
        self.payload = {
            "domain": "Network Security",
            "workDescription": "Configured <b>Suricata</b> rules",
            "toolsUsed": "Suricata, Wireshark",
            "issuesFaced": "",
        }

    @patch("reports.views.ReportsAuditService.log_report_submitted")
    def test_submit_report_for_today(self, log_report_submitted):
        response = self.client.post("/api/intern/report", self.payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["message"], "Daily report submitted successfully")
        report = DailyReport.objects.get()
        self.assertEqual(report.intern, self.intern)
        self.assertEqual(report.report_date, timezone.localdate())
        self.assertEqual(report.work_description, "Configured Suricata rules")
        log_report_submitted.assert_called_once()

    @patch("reports.views.ReportsAuditService.log_duplicate_report")
    def test_second_report_same_day_rejected(self, log_duplicate_report):
        self.client.post("/api/intern/report", self.payload, format="json")
        response = self.client.post("/api/intern/report", self.payload, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Daily report already submitted for today")
        self.assertEqual(DailyReport.objects.count(), 1)
        log_duplicate_report.assert_called_once()

    def test_concurrent_duplicate_maps_to_400(self):
        with patch("reports.views.DailyReport.objects.create", side_effect=IntegrityError):
            response = self.client.post("/api/intern/report", self.payload, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"], "Daily report already submitted for today")

    def test_required_fields(self):
        response = self.client.post("/api/intern/report", {"domain": "  "}, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.data["details"],
            ["Domain is required", "Work description is required"],
        )

    def test_only_ongoing_interns_may_submit(self):
        completed = make_intern(status=InternStatus.COMPLETED)
        self.client.force_authenticate(user=completed)

        response = self.client.post("/api/intern/report", self.payload, format="json")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data["error"], "You are not authorized to submit reports")
        self.assertFalse(DailyReport.objects.exists())

    def test_admin_cannot_submit(self):
        admin = User.objects.create_admin("admin", "admin@example.com", "AdminPass123!")
        self.client.force_authenticate(user=admin)

        response = self.client.post("/api/intern/report", self.payload, format="json")

        self.assertEqual(response.status_code, 403)


class MyReportListTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.intern = make_intern(status=InternStatus.ACTIVE, full_name="Nisha Rao")
        self.other = make_intern(status=InternStatus.ACTIVE)
        self.client.force_authenticate(user=self.intern)
        today = timezone.localdate()
        for offset in (2, 0, 1):
            DailyReport.objects.create(
                intern=self.intern,
                domain="Forensics",
                work_description=f"Day -{offset}",
                report_date=today - timedelta(days=offset),
            )
        DailyReport.objects.create(
            intern=self.other,
            domain="Forensics",
            work_description="Someone else",
            report_date=today,
        )

    def test_lists_own_reports_newest_first(self):
        response = self.client.get("/api/intern/reports")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [row["workDescription"] for row in response.data],
            ["Day -0", "Day -1", "Day -2"],
        )
        self.assertEqual(response.data[0]["applicationNo"], self.intern.application_no)
        self.assertEqual(response.data[0]["name"], "Nisha Rao")

    def test_past_interns_can_still_read_their_reports(self):
        self.intern.status = InternStatus.COMPLETED
        self.intern.save()

        response = self.client.get("/api/intern/reports")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 3)


class DailyReportConstraintTests(TestCase):
    def test_one_report_per_intern_per_day(self):
        intern = make_intern(status=InternStatus.ACTIVE)
        today = timezone.localdate()
        DailyReport.objects.create(intern=intern, domain="a", work_description="b", report_date=today)

        with self.assertRaises(IntegrityError), transaction.atomic():
            DailyReport.objects.create(intern=intern, domain="c", work_description="d", report_date=today)
