from __future__ import annotations

from apps.audit import AuditEvents, client_ip, log_event


class InternsAuditService:

    @classmethod
    def log_application_submitted(cls, request, intern) -> None:
        log_event(
            action=AuditEvents.APPLICATION_SUBMITTED,
            actor=None,
            object_type="intern",
            object_id=str(intern.id),
            category="lifecycle",
            ip_address=client_ip(request),
            metadata={"enrollment_no": intern.enrollment_no},
        )

    @classmethod
    def log_decision(cls, request, intern, decision: str) -> None:
        actions = {
            "Approved": AuditEvents.APPLICATION_APPROVED,
            "Rejected": AuditEvents.APPLICATION_REJECTED,
            "Special Approval Required": AuditEvents.APPLICATION_SPECIAL_APPROVAL,
        }
        log_event(
            action=actions[decision],
            actor=request.user,
            object_type="intern",
            object_id=str(intern.id),
            category="lifecycle",
            ip_address=client_ip(request),
            metadata={"decision": decision, "status": intern.status},
        )

    @classmethod
    def log_enrollment_submitted(cls, request, intern) -> None:
        log_event(
            action=AuditEvents.ENROLLMENT_SUBMITTED,
            actor=None,
            object_type="intern",
            object_id=str(intern.id),
            category="lifecycle",
            ip_address=client_ip(request),
        )

    @classmethod
    def log_enrollment_files_rejected(cls, request, intern_id: int, reason: str) -> None:
        log_event(
            action=AuditEvents.ENROLLMENT_FILES_REJECTED,
            actor=None,
            object_type="intern",
            object_id=str(intern_id),
            level="warning",
            category="files",
            ip_address=client_ip(request),
            metadata={"reason": reason},
        )

    @classmethod
    def log_onboarded(cls, request, intern) -> None:
        log_event(
            action=AuditEvents.INTERN_ONBOARDED,
            actor=request.user,
            object_type="intern",
            object_id=str(intern.id),
            category="lifecycle",
            ip_address=client_ip(request),
            metadata={
                "application_no": intern.application_no,
                "date_of_joining": intern.date_of_joining.isoformat(),
                "date_of_leaving": intern.date_of_leaving.isoformat(),
            },
        )
