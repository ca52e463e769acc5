"""Application lifecycle state machine."""
from .models import Intern, InternStatus

TRANSITIONS = {
    InternStatus.FRESH: frozenset(
        {
            InternStatus.PENDING_ENROLLMENT,
            InternStatus.REJECTED,
            InternStatus.SPECIAL_APPROVAL_REQUIRED,
        }
    ),
    InternStatus.PENDING_ENROLLMENT: frozenset({InternStatus.PENDING_APPROVAL}),
    InternStatus.PENDING_APPROVAL: frozenset({InternStatus.ACTIVE}),
    InternStatus.ACTIVE: frozenset({InternStatus.COMPLETED}),
    InternStatus.SPECIAL_APPROVAL_REQUIRED: frozenset(),
    InternStatus.REJECTED: frozenset(),
    InternStatus.COMPLETED: frozenset(),
}


class InvalidTransition(ValueError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move application from {current} to {target}")


class Lifecycle:

    @staticmethod
    def allowed_targets(status: str) -> frozenset:
        return TRANSITIONS.get(status, frozenset())

    @classmethod
    def can_transition(cls, status: str, target: str) -> bool:
        return target in cls.allowed_targets(status)

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.allowed_targets(status)

    @classmethod
    def transition(cls, intern: Intern, target: str) -> Intern:
        """Set ``intern.status`` in memory; the caller saves inside its own transaction."""
        if not cls.can_transition(intern.status, target):
            raise InvalidTransition(intern.status, target)
        intern.status = target
        return intern
