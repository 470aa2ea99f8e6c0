"""
SQLAlchemy mixins for common model patterns.

These mixins provide reusable column definitions to follow DRY principles
and ensure consistency across all models.

    - CuidMixin: CUID primary key
    - TenantMixin: tenant_id foreign key (every row belongs to one workspace)
    - TimestampMixin: created_at, updated_at
    - SoftDeleteMixin: is_deleted flag + deleted_at
"""
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, false
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from boxtrack.shared.utils.generators import generate_cuid


def utc_now() -> datetime:
    return datetime.now(UTC)


class CuidMixin:
    """
    Mixin for models using CUID as primary key.

    Provides:
        - id: String primary key with automatic CUID generation
    """

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TenantMixin:
    """
    Mixin for multi-tenant models.

    Provides:
        - tenant_id: Foreign key to tenant table with cascade delete
    """

    @declared_attr
    def tenant_id(cls) -> Mapped[str]:
        return mapped_column(
            String,
            ForeignKey("tenant.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


class TimestampMixin:
    """
    Mixin for timestamp tracking.

    Provides:
        - created_at: Timestamp set on creation
        - updated_at: Timestamp refreshed on every update

    Note: Values are computed in Python so they are populated on the instance
          right after flush, without an extra round-trip.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            onupdate=utc_now,
            server_default=func.now(),
            nullable=False,
        )


class SoftDeleteMixin:
    """
    Soft delete support (tombstone pattern).

    Provides:
        - is_deleted: True once the row is soft deleted
        - deleted_at: Timestamp set on soft delete (null = not deleted)

    Usage:
        # Soft delete: instance.is_deleted = True; instance.deleted_at = utc_now()
        # Query active only: .where(Model.is_deleted.is_(False))
    """

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(
            Boolean, default=False, server_default=false(), nullable=False, index=True
        )

    @declared_attr
    def deleted_at(cls) -> Mapped[datetime | None]:
        return mapped_column(DateTime(timezone=True), nullable=True)


class MultiTenantModel(CuidMixin, TenantMixin, TimestampMixin):
    """
    Complete mixin for standard multi-tenant models.

    Combines:
        - CuidMixin: CUID primary key
        - TenantMixin: Tenant foreign key
        - TimestampMixin: Created/updated timestamps
    """

    __abstract__ = True
