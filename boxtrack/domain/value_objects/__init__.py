"""Domain value objects."""

from boxtrack.domain.value_objects.identifiers import (IdentifierProfile,
                                                       code_profile,
                                                       container_profile)
from boxtrack.domain.value_objects.path import MaterializedPath

__all__ = [
    "MaterializedPath",
    "IdentifierProfile",
    "code_profile",
    "container_profile",
]
