from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.domain.enums import CodeStatus
from boxtrack.infrastructure.persistence.models.code import Code
from boxtrack.infrastructure.persistence.repositories.base import BaseRepository


class CodeRepository(BaseRepository[Code]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Code)

    async def short_identifier_exists(self, short_identifier: str) -> bool:
        """Global check: identifiers are unique across tenants"""
        result = await self.db.execute(
            select(Code.id).where(Code.short_identifier == short_identifier)
        )
        return result.first() is not None

    async def get_for_update(self, code_id: str) -> Code | None:
        """Lock a code row regardless of tenant; callers compare tenant_id themselves"""
        result = await self.db.execute(select(Code).where(Code.id == code_id).with_for_update())
        return result.scalar_one_or_none()

    async def get_by_short_identifier(self, tenant_id: str, short_identifier: str) -> Code | None:
        result = await self.db.execute(
            select(Code).where(
                Code.tenant_id == tenant_id, Code.short_identifier == short_identifier
            )
        )
        return result.scalar_one_or_none()

    async def get_by_container(self, container_id: str, *, for_update: bool = False) -> Code | None:
        query = select(Code).where(Code.container_id == container_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_tenant(
        self,
        tenant_id: str,
        status: CodeStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Code]:
        """Codes of a tenant, newest first, optionally filtered by status"""
        query = select(Code).where(Code.tenant_id == tenant_id)
        if status is not None:
            query = query.where(Code.status == status.value)

        result = await self.db.execute(
            query.order_by(Code.created_at.desc(), Code.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
