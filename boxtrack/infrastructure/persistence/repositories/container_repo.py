from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.infrastructure.persistence.models.container import Container
from boxtrack.infrastructure.persistence.repositories.base import BaseRepository


class ContainerRepository(BaseRepository[Container]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Container)

    async def short_identifier_exists(self, short_identifier: str) -> bool:
        """Global check: identifiers are unique across tenants"""
        result = await self.db.execute(
            select(Container.id).where(Container.short_identifier == short_identifier)
        )
        return result.first() is not None

    async def get_for_update(self, container_id: str, tenant_id: str) -> Container | None:
        result = await self.db.execute(
            select(Container)
            .where(Container.id == container_id, Container.tenant_id == tenant_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def unassign_location(self, location_id: str, tenant_id: str) -> int:
        """Move every container directly at the location to the unassigned pool"""
        result = await self.db.execute(
            update(Container)
            .where(Container.tenant_id == tenant_id, Container.location_id == location_id)
            .values(location_id=None, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def search(
        self,
        tenant_id: str,
        *,
        terms: list[str] | None = None,
        location_id: str | None = None,
        is_assigned: bool | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Container]:
        """
        Filtered, paginated container listing, newest first.

        Every search term must appear in the search document.
        """
        query = select(Container).where(Container.tenant_id == tenant_id)

        for term in terms or []:
            query = query.where(Container.search_document.contains(term, autoescape=True))
        if location_id is not None:
            query = query.where(Container.location_id == location_id)
        if is_assigned is True:
            query = query.where(Container.location_id.is_not(None))
        elif is_assigned is False:
            query = query.where(Container.location_id.is_(None))

        result = await self.db.execute(
            query.order_by(Container.created_at.desc(), Container.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_name(
        self, tenant_id: str, name: str, exclude_id: str | None = None
    ) -> int:
        """Case-insensitive count of containers sharing a name"""
        query = select(func.count(Container.id)).where(
            Container.tenant_id == tenant_id,
            func.lower(Container.name) == name.strip().lower(),
        )
        if exclude_id is not None:
            query = query.where(Container.id != exclude_id)

        result = await self.db.execute(query)
        return int(result.scalar_one())
