from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class AuditEvent:
    """One auditable action. ``actor`` is an admin ``User``, an ``Intern`` or None."""

    action: str
    actor: Any = None
    object_type: str = ""
    object_id: str = ""
    level: str = "info"
    category: str = "system"
    ip_address: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @property
    def actor_label(self) -> str:
        if self.actor is None:
            return "anonymous"
        return f"{getattr(self.actor, 'user_type', 'unknown')}:{getattr(self.actor, 'pk', '-')}"
