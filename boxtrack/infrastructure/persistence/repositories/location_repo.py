from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.infrastructure.persistence.models.location import Location
from boxtrack.infrastructure.persistence.repositories.base import BaseRepository


class LocationRepository(BaseRepository[Location]):
    """Tenant-scoped access to the location tree"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Location)

    async def get_active(self, location_id: str, tenant_id: str) -> Location | None:
        """Get a non-deleted location belonging to the tenant"""
        result = await self.db.execute(
            select(Location).where(
                Location.id == location_id,
                Location.tenant_id == tenant_id,
                Location.is_deleted.is_(False),
            )
        )
        return result.scalar_one_or_none()

    async def get_active_for_update(self, location_id: str, tenant_id: str) -> Location | None:
        """Same as get_active, holding a row lock until the transaction ends"""
        result = await self.db.execute(
            select(Location)
            .where(
                Location.id == location_id,
                Location.tenant_id == tenant_id,
                Location.is_deleted.is_(False),
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_descendants(self, location: Location, *, for_update: bool = False) -> list[Location]:
        """All rows strictly below the location, deleted ones included"""
        query = select(Location).where(
            Location.tenant_id == location.tenant_id,
            Location.path.like(location.materialized_path.subtree_like_pattern()),
        )
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_for_share(self, location_id: str) -> Location | None:
        """
        Load a row by id (any tenant) under a shared lock, freshly read.

        Writers that move or delete the row take FOR UPDATE on it, so holders
        of this lock and those writers serialize.
        """
        result = await self.db.execute(
            select(Location)
            .where(Location.id == location_id)
            .with_for_update(read=True)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_many(self, location_ids: list[str], tenant_id: str) -> list[Location]:
        if not location_ids:
            return []
        result = await self.db.execute(
            select(Location).where(Location.id.in_(location_ids), Location.tenant_id == tenant_id)
        )
        return list(result.scalars().all())

    async def find_active_sibling(
        self,
        tenant_id: str,
        parent_id: str | None,
        name_key: str,
        exclude_id: str | None = None,
    ) -> Location | None:
        """Find an active location at the same level whose normalized name matches"""
        query = select(Location).where(
            Location.tenant_id == tenant_id,
            Location.name_key == name_key,
            Location.is_deleted.is_(False),
        )
        if parent_id is None:
            query = query.where(Location.parent_id.is_(None))
        else:
            query = query.where(Location.parent_id == parent_id)
        if exclude_id is not None:
            query = query.where(Location.id != exclude_id)

        result = await self.db.execute(query.limit(1))
        return result.scalars().first()

    async def list_children(self, tenant_id: str, parent_id: str | None) -> list[Location]:
        """Active direct children of a location, or active roots when parent_id is None"""
        query = select(Location).where(
            Location.tenant_id == tenant_id, Location.is_deleted.is_(False)
        )
        if parent_id is None:
            query = query.where(Location.parent_id.is_(None))
        else:
            query = query.where(Location.parent_id == parent_id)

        result = await self.db.execute(query.order_by(Location.name, Location.id))
        return list(result.scalars().all())

    async def list_active(self, tenant_id: str) -> list[Location]:
        """Every active location of the tenant, ordered by path"""
        result = await self.db.execute(
            select(Location)
            .where(Location.tenant_id == tenant_id, Location.is_deleted.is_(False))
            .order_by(Location.path)
        )
        return list(result.scalars().all())
