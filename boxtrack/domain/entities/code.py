"""
Code lifecycle.

    generated --bind--> assigned
    generated --mark_printed--> printed
    printed   --bind--> assigned
    assigned  --release--> generated

There is no terminal state; codes are reusable indefinitely.
"""

from boxtrack.domain.enums import CodeStatus
from boxtrack.domain.exceptions import InvalidTransitionException

ALLOWED_TRANSITIONS: dict[CodeStatus, frozenset[CodeStatus]] = {
    CodeStatus.GENERATED: frozenset({CodeStatus.PRINTED, CodeStatus.ASSIGNED}),
    CodeStatus.PRINTED: frozenset({CodeStatus.ASSIGNED}),
    CodeStatus.ASSIGNED: frozenset({CodeStatus.GENERATED}),
}


def can_transition(current: CodeStatus, target: CodeStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(code_id: str, current: CodeStatus | str, target: CodeStatus) -> CodeStatus:
    """Validate a transition and return the target status"""
    current = CodeStatus(current)
    if not can_transition(current, target):
        raise InvalidTransitionException(code_id, current.value, target.value)
    return target
