from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.domain.enums import TenantStatus
from boxtrack.infrastructure.persistence.models.tenant import Tenant
from boxtrack.infrastructure.persistence.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Tenant)

    async def get_by_code(self, code: str) -> Tenant | None:
        result = await self.db.execute(select(Tenant).where(Tenant.code == code))
        return result.scalar_one_or_none()

    async def get_active(self, tenant_id: str) -> Tenant | None:
        """Get tenant by ID only when its status is active"""
        result = await self.db.execute(
            select(Tenant).where(
                Tenant.id == tenant_id, Tenant.status == TenantStatus.ACTIVE.value
            )
        )
        return result.scalar_one_or_none()
