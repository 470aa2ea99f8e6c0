from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from boxtrack.domain.enums import TenantStatus
from boxtrack.infrastructure.persistence.database import Base
from boxtrack.infrastructure.persistence.models.mixins import (CuidMixin,
                                                               TimestampMixin)


class Tenant(CuidMixin, TimestampMixin, Base):
    """
    Workspace: the isolation boundary every other entity belongs to.

    Membership and identity are managed outside this service; the row only
    anchors the tenant_id foreign keys.
    """

    __tablename__ = "tenant"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=TenantStatus.ACTIVE.value, index=True
    )

    __table_args__ = (
        CheckConstraint(f"status IN {tuple(TenantStatus.values())}", name="tenant_status_check"),
    )
