from __future__ import annotations

from apps.audit import AuditEvents, client_ip, log_event


class CommonAuditService:

    @classmethod
    def log_file_downloaded(cls, request, name: str) -> None:
        log_event(
            action=AuditEvents.FILE_DOWNLOADED,
            actor=request.user,
            object_type="upload",
            object_id=name,
            category="files",
            ip_address=client_ip(request),
        )

    @classmethod
    def log_file_access_denied(cls, request, name: str, reason: str) -> None:
        log_event(
            action=AuditEvents.FILE_ACCESS_DENIED,
            actor=request.user,
            object_type="upload",
            object_id=name[:100],
            level="warning",
            category="files",
            ip_address=client_ip(request),
            metadata={"reason": reason},
        )
