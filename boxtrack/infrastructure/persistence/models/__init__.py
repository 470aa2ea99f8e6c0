from boxtrack.infrastructure.persistence.models.code import Code
from boxtrack.infrastructure.persistence.models.container import Container
from boxtrack.infrastructure.persistence.models.location import Location
# Mixins for model composition
from boxtrack.infrastructure.persistence.models.mixins import (
    CuidMixin, MultiTenantModel, SoftDeleteMixin, TenantMixin, TimestampMixin)
from boxtrack.infrastructure.persistence.models.tenant import Tenant

__all__ = [
    # Models
    "Tenant",
    "Location",
    "Container",
    "Code",
    # Mixins
    "CuidMixin",
    "TenantMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    "MultiTenantModel",
]
