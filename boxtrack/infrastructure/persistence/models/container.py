from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from boxtrack.infrastructure.persistence.database import Base
from boxtrack.infrastructure.persistence.models.mixins import MultiTenantModel


class Container(MultiTenantModel, Base):
    """
    A tracked physical box.

    location_id = NULL means the box sits in the unassigned pool.
    bound_code_id mirrors Code.container_id; both sides are written together.
    search_document is recomputed from name, description and tags on every write.
    """

    __tablename__ = "container"

    short_identifier: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    location_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("location.id", ondelete="SET NULL"), nullable=True, index=True
    )
    # Container <-> code references form a cycle; this side is added after both tables exist
    bound_code_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("code.id", ondelete="SET NULL", use_alter=True, name="fk_container_bound_code"),
        unique=True,
        nullable=True,
    )
    search_document: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (Index("ix_container_tenant_location", "tenant_id", "location_id"),)
