from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from boxtrack.domain.value_objects.path import MaterializedPath
from boxtrack.infrastructure.persistence.database import Base
from boxtrack.infrastructure.persistence.models.mixins import (
    MultiTenantModel, SoftDeleteMixin)


class Location(MultiTenantModel, SoftDeleteMixin, Base):
    """
    Node of a tenant's storage hierarchy (room, shelf, drawer...).

    Inherits from MultiTenantModel:
        - id: CUID primary key
        - tenant_id: Foreign key to tenant
        - created_at / updated_at

    `path` is the materialized path: ids from the root down to this row,
    dot-separated. It is rewritten for the whole subtree on every move.
    """

    __tablename__ = "location"

    parent_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("location.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    name_key: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    path: Mapped[str] = mapped_column(String, nullable=False, index=True)

    __table_args__ = (
        Index("ix_location_tenant_parent", "tenant_id", "parent_id"),
        Index("ix_location_tenant_path", "tenant_id", "path"),
    )

    @property
    def materialized_path(self) -> MaterializedPath:
        return MaterializedPath.parse(self.path)

    @property
    def depth(self) -> int:
        return self.materialized_path.depth
