from __future__ import annotations

import logging
from typing import Protocol

from .contracts import AuditEvent

audit_logger = logging.getLogger("apps.audit.events")


class AuditBackend(Protocol):
    def write(self, event: AuditEvent) -> None:
        ...


class AccountsAuditBackend:
    """
    Primary backend.
    Writes to the accounts.AuditLog table.
    """

    def write(self, event: AuditEvent) -> None:
        from accounts.models import AuditLog

        AuditLog.log(
            action=event.action,
            actor=event.actor,
            object_type=event.object_type,
            object_id=event.object_id,
            level=event.level,
            category=event.category,
            ip_address=event.ip_address,
            metadata=event.metadata,
        )


class LoggingAuditBackend:
    """Mirrors events into the application log stream."""

    _LEVELS = {
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
        "critical": logging.CRITICAL,
    }

    def write(self, event: AuditEvent) -> None:
        audit_logger.log(
            self._LEVELS.get(event.level, logging.INFO),
            "%s %s:%s actor=%s ip=%s",
            event.action,
            event.object_type,
            event.object_id,
            event.actor_label,
            event.ip_address or "-",
        )


class NoopAuditBackend:
    def write(self, event: AuditEvent) -> None:  # pragma: no cover
        return None
