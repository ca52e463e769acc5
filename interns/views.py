import logging

from django.db.models import Prefetch
from django.utils import timezone
from rest_framework import status as drf_status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import CapabilityLinkAccess, IsPortalAdmin, IsPortalIntern
from apps.attendance.services import completed_attendance, ongoing_attendance
from common.exceptions import error_body
from common.sanitizer import sanitize_id
from reports.models import DailyReport

from . import services
from .audit import InternsAuditService
from .files import DOCUMENT_KINDS, IMAGE_KINDS, UploadRejected, inspect_upload
from .lifecycle import InvalidTransition
from .models import Intern, InternStatus
from .serializers import (
    AdminDecisionSerializer,
    ApplicationSubmissionSerializer,
    EnrollmentFormSerializer,
    EnrollmentSubmissionSerializer,
    FinalizeOnboardingSerializer,
    FreshApplicationSerializer,
    InternAttendanceRowSerializer,
    InternDetailSerializer,
    InternProfileSerializer,
    PendingApplicationSerializer,
    RejectedApplicationSerializer,
)

logger = logging.getLogger(__name__)

ENROLLMENT_UNAVAILABLE = "Enrollment is not available for this application"


def _bad_request(message):
    return Response(error_body(message), status=drf_status.HTTP_400_BAD_REQUEST)


def _not_found(message="Intern not found"):
    return Response(error_body(message), status=drf_status.HTTP_404_NOT_FOUND)


def _with_reports(queryset):
    return queryset.prefetch_related(
        Prefetch("reports", queryset=DailyReport.objects.order_by("-report_date", "-created_at"))
    )


def _report_dates(intern):
    return [report.report_date for report in intern.reports.all()]


# =====================================================
# PUBLIC: application
# =====================================================
class ApplyView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = ApplicationSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            checked = inspect_upload(data["loi"], DOCUMENT_KINDS, "LOI")
        except UploadRejected as exc:
            return _bad_request(str(exc))

        try:
            intern = services.submit_application(data, checked)
        except services.ApplicationConflict as exc:
            return _bad_request(str(exc))

        InternsAuditService.log_application_submitted(request, intern)
        return Response(
            {"message": "Application submitted successfully."},
            status=drf_status.HTTP_201_CREATED,
        )


# =====================================================
# CAPABILITY LINK: enrollment
# =====================================================
class EnrollmentView(APIView):
    """
    ``/enroll/<id>`` is mailed to the applicant on approval. Knowing the ID
    is the only credential, so every request re-checks the record state.
    """

    authentication_classes = []
    permission_classes = [CapabilityLinkAccess]

    def _load(self, raw_id):
        pk = sanitize_id(raw_id)
        if pk is None:
            return None, _bad_request("Invalid ID parameter")
        intern = Intern.objects.filter(pk=pk).first()
        if intern is None:
            return None, _not_found("Application not found")
        if intern.status != InternStatus.PENDING_ENROLLMENT:
            return None, _bad_request(ENROLLMENT_UNAVAILABLE)
        return intern, None

    def get(self, request, intern_id):
        intern, error = self._load(intern_id)
        if error is not None:
            return error
        return Response(EnrollmentFormSerializer(intern).data)

    def post(self, request, intern_id):
        if sanitize_id(intern_id) is None:
            return _bad_request("Invalid ID parameter")

        files = {key: request.FILES.get(key) for key in ("photo", "sign", "nda")}
        if not all(files.values()):
            return _bad_request("All files (photo, signature, NDA) are required")

        intern, error = self._load(intern_id)
        if error is not None:
            return error

        try:
            uploads = {
                "photo": inspect_upload(files["photo"], IMAGE_KINDS, "passport photo"),
                "sign": inspect_upload(files["sign"], IMAGE_KINDS, "signature"),
                "nda": inspect_upload(files["nda"], DOCUMENT_KINDS, "NDA"),
            }
        except UploadRejected as exc:
            InternsAuditService.log_enrollment_files_rejected(request, intern.pk, str(exc))
            return _bad_request(str(exc))

        serializer = EnrollmentSubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            intern = services.submit_enrollment(intern.pk, serializer.validated_data, uploads)
        except InvalidTransition:
            return _bad_request(ENROLLMENT_UNAVAILABLE)
        except services.ApplicationConflict as exc:
            return _bad_request(str(exc))

        InternsAuditService.log_enrollment_submitted(request, intern)
        return Response({"message": "Enrollment submitted successfully"})


# =====================================================
# ADMIN: decisions
# =====================================================
class AdminDecisionView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def post(self, request):
        serializer = AdminDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            intern = services.decide_on_fresh(
                data["id"],
                data["decision"],
                rejection_reason=data["rejection_reason"],
                special_approval_notes=data["special_approval_notes"],
            )
        except Intern.DoesNotExist:
            return _not_found()
        except InvalidTransition:
            return _bad_request("Intern is not in Fresh status")

        InternsAuditService.log_decision(request, intern, data["decision"])
        return Response({"message": "Status updated successfully"})


class AdminOnboardView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def post(self, request):
        serializer = FinalizeOnboardingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            intern = services.finalize_onboarding(
                data["id"],
                data["application_no"],
                data["date_of_joining"],
                data["date_of_leaving"],
            )
        except Intern.DoesNotExist:
            return _not_found()
        except InvalidTransition:
            return _bad_request("Intern is not in Pending_Approval status")
        except services.ApplicationConflict as exc:
            return _bad_request(str(exc))

        InternsAuditService.log_onboarded(request, intern)
        return Response({"message": "Intern onboarded successfully"})


# =====================================================
# ADMIN: dashboards
# =====================================================
class FreshDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def get(self, request):
        qs = Intern.objects.filter(status=InternStatus.FRESH).order_by("-created_at")
        return Response(FreshApplicationSerializer(qs, many=True).data)


class PendingDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def get(self, request):
        qs = Intern.objects.filter(status=InternStatus.PENDING_APPROVAL).order_by("-updated_at")
        return Response(PendingApplicationSerializer(qs, many=True).data)


class RejectedDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def get(self, request):
        qs = Intern.objects.filter(status=InternStatus.REJECTED).order_by("-updated_at")
        return Response(RejectedApplicationSerializer(qs, many=True).data)


class OngoingDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def get(self, request):
        services.complete_finished_internships()
        today = timezone.localdate()
        qs = _with_reports(Intern.objects.filter(status=InternStatus.ACTIVE).order_by("application_no"))

        rows = []
        for intern in qs:
            summary = ongoing_attendance(intern.date_of_joining, _report_dates(intern), today)
            row = InternAttendanceRowSerializer(intern).data
            row.update(
                daysSinceStart=summary.days_elapsed,
                daysAttended=summary.days_attended,
                attendancePct=summary.attendance_pct,
            )
            rows.append(row)
        return Response(rows)


class CompletedDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def get(self, request):
        services.complete_finished_internships()
        qs = _with_reports(
            Intern.objects.filter(status=InternStatus.COMPLETED).order_by("-date_of_leaving")
        )

        rows = []
        for intern in qs:
            summary = completed_attendance(
                intern.date_of_joining,
                intern.date_of_leaving,
                _report_dates(intern),
            )
            row = InternAttendanceRowSerializer(intern).data
            row.update(
                totalDays=summary.days_elapsed,
                daysAttended=summary.days_attended,
                attendancePct=summary.attendance_pct,
            )
            rows.append(row)
        return Response(rows)


class InternDetailView(APIView):
    permission_classes = [IsAuthenticated, IsPortalAdmin]

    def get(self, request, intern_id):
        pk = sanitize_id(intern_id)
        if pk is None:
            return _bad_request("Invalid ID parameter")

        services.complete_finished_internships()
        intern = _with_reports(Intern.objects.filter(pk=pk)).first()
        if intern is None:
            return _not_found()

        dates = _report_dates(intern)
        data = InternDetailSerializer(intern).data
        if intern.status == InternStatus.COMPLETED:
            summary = completed_attendance(intern.date_of_joining, intern.date_of_leaving, dates)
            data["totalDays"] = summary.days_elapsed
        else:
            summary = ongoing_attendance(intern.date_of_joining, dates, timezone.localdate())
            data["daysSinceStart"] = summary.days_elapsed
        data["daysAttended"] = summary.days_attended
        data["attendancePct"] = summary.attendance_pct
        return Response(data)


# =====================================================
# INTERN: self-service
# =====================================================
class InternProfileView(APIView):
    permission_classes = [IsAuthenticated, IsPortalIntern]

    def get(self, request):
        return Response(InternProfileSerializer(request.user).data)
