""" Repository module for the persistence layer. """

from boxtrack.infrastructure.persistence.repositories.base import BaseRepository
from boxtrack.infrastructure.persistence.repositories.code_repo import CodeRepository
from boxtrack.infrastructure.persistence.repositories.container_repo import ContainerRepository
from boxtrack.infrastructure.persistence.repositories.location_repo import LocationRepository
from boxtrack.infrastructure.persistence.repositories.tenant_repo import TenantRepository

__all__ = [
    "BaseRepository",
    "CodeRepository",
    "ContainerRepository",
    "LocationRepository",
    "TenantRepository",
]
