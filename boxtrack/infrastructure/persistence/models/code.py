from sqlalchemy import CheckConstraint, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from boxtrack.domain.enums import CodeStatus
from boxtrack.infrastructure.persistence.database import Base
from boxtrack.infrastructure.persistence.models.mixins import MultiTenantModel


class Code(MultiTenantModel, Base):
    """
    Pre-generated scannable code (printed as a QR label).

    container_id is set exactly when status is 'assigned'; the unique
    constraint guarantees a container is bound to at most one code.
    """

    __tablename__ = "code"

    short_identifier: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=CodeStatus.GENERATED.value, index=True
    )
    container_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("container.id", ondelete="SET NULL"),
        unique=True,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint(f"status IN {tuple(CodeStatus.values())}", name="code_status_check"),
        CheckConstraint(
            "(status = 'assigned') = (container_id IS NOT NULL)",
            name="code_assignment_check",
        ),
        Index("ix_code_tenant_status", "tenant_id", "status"),
    )
