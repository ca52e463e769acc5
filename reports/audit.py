from __future__ import annotations

from apps.audit import AuditEvents, client_ip, log_event


class ReportsAuditService:

    @classmethod
    def log_report_submitted(cls, request, report) -> None:
        log_event(
            action=AuditEvents.DAILY_REPORT_SUBMITTED,
            actor=request.user,
            object_type="daily_report",
            object_id=str(report.id),
            category="reports",
            ip_address=client_ip(request),
            metadata={"report_date": report.report_date.isoformat()},
        )

    @classmethod
    def log_duplicate_report(cls, request, report_date) -> None:
        log_event(
            action=AuditEvents.DAILY_REPORT_DUPLICATE,
            actor=request.user,
            object_type="daily_report",
            level="warning",
            category="reports",
            ip_address=client_ip(request),
            metadata={"report_date": report_date.isoformat()},
        )
