import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework import status as drf_status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.access_policy import AccessPolicy
from accounts.permissions import IsPortalIntern
from common.exceptions import error_body

from .audit import ReportsAuditService
from .models import DailyReport
from .serializers import DailyReportCreateSerializer, MyDailyReportSerializer

logger = logging.getLogger(__name__)

DUPLICATE_REPORT_MESSAGE = "Daily report already submitted for today"


class MyReportListView(APIView):
    permission_classes = [IsAuthenticated, IsPortalIntern]

    def get(self, request):
        reports = (
            DailyReport.objects.filter(intern=request.user)
            .select_related("intern")
            .order_by("-report_date", "-created_at")
        )
        return Response(MyDailyReportSerializer(reports, many=True).data)


class SubmitDailyReportView(APIView):
    permission_classes = [IsAuthenticated, IsPortalIntern]

    def post(self, request):
        serializer = DailyReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        intern = request.user
        if not AccessPolicy.is_ongoing_intern(intern):
            return Response(
                error_body("You are not authorized to submit reports"),
                status=drf_status.HTTP_403_FORBIDDEN,
            )

        today = timezone.localdate()
        if DailyReport.objects.filter(intern=intern, report_date=today).exists():
            ReportsAuditService.log_duplicate_report(request, today)
            return Response(
                error_body(DUPLICATE_REPORT_MESSAGE),
                status=drf_status.HTTP_400_BAD_REQUEST,
            )

        try:
            with transaction.atomic():
                report = DailyReport.objects.create(
                    intern=intern,
                    report_date=today,
                    **serializer.validated_data,
                )
        except IntegrityError:
            # Lost the race against a concurrent submission for the same day.
            ReportsAuditService.log_duplicate_report(request, today)
            return Response(
                error_body(DUPLICATE_REPORT_MESSAGE),
                status=drf_status.HTTP_400_BAD_REQUEST,
            )

        logger.info("Daily report %s filed by intern %s", report.pk, intern.pk)
        ReportsAuditService.log_report_submitted(request, report)
        return Response(
            {"message": "Daily report submitted successfully"},
            status=drf_status.HTTP_201_CREATED,
        )
