"""Domain entities."""

from boxtrack.domain.entities.code import (ALLOWED_TRANSITIONS, can_transition,
                                           ensure_transition)
from boxtrack.domain.entities.location import BreadcrumbItem

__all__ = [
    "ALLOWED_TRANSITIONS",
    "BreadcrumbItem",
    "can_transition",
    "ensure_transition",
]
