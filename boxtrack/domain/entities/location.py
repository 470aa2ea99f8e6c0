"""Location domain entities."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BreadcrumbItem:
    """One step of a location's ancestry, used for display only"""

    id: str
    name: str
