"""
Location hierarchy use cases.

Locations form a per-tenant tree bounded in depth. Each row stores its
materialized path (ids root first, ending with itself), which drives depth
checks, cycle detection, subtree queries and breadcrumbs.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.domain.entities.location import BreadcrumbItem
from boxtrack.domain.exceptions import (CycleDetectedException,
                                        DepthExceededException,
                                        LocationNameConflictException,
                                        LocationNotFoundException,
                                        ValidationException,
                                        WorkspaceMismatchException)
from boxtrack.domain.value_objects.path import MaterializedPath
from boxtrack.infrastructure.persistence.database import unit_of_work
from boxtrack.infrastructure.persistence.models.location import Location
from boxtrack.infrastructure.persistence.models.mixins import utc_now
from boxtrack.infrastructure.persistence.repositories import (
    ContainerRepository, LocationRepository)
from boxtrack.shared.logging import get_logger
from boxtrack.shared.utils import generate_cuid, slugify

logger = get_logger(__name__)

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 500
UPDATABLE_FIELDS = frozenset({"name", "description"})


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned or len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationException(
            f"Location name must be between 1 and {NAME_MAX_LENGTH} characters", "name"
        )
    return cleaned


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    cleaned = description.strip()
    if len(cleaned) > DESCRIPTION_MAX_LENGTH:
        raise ValidationException(
            f"Location description must be at most {DESCRIPTION_MAX_LENGTH} characters",
            "description",
        )
    return cleaned or None


class LocationTree:
    """Owns the location hierarchy of every tenant"""

    def __init__(
        self,
        db: AsyncSession,
        location_repo: LocationRepository,
        container_repo: ContainerRepository,
        max_depth: int = 5,
    ) -> None:
        self.db = db
        self.location_repo = location_repo
        self.container_repo = container_repo
        self.max_depth = max_depth

    async def create(
        self,
        tenant_id: str,
        parent_id: str | None,
        name: str,
        description: str | None = None,
    ) -> Location:
        """
        Create a location under `parent_id`, or a root when it is None.

        Raises:
            LocationNotFoundException: parent missing or soft-deleted
            WorkspaceMismatchException: parent belongs to another tenant
            DepthExceededException: the new location would sit below max_depth
            LocationNameConflictException: an active sibling has the same name
        """
        name = _clean_name(name)
        description = _clean_description(description)

        async with unit_of_work(self.db):
            parent = (
                await self.resolve_reference(tenant_id, parent_id) if parent_id is not None else None
            )

            depth = parent.depth + 1 if parent else 1
            if depth > self.max_depth:
                raise DepthExceededException(None, depth, self.max_depth)

            await self._ensure_unique_name(tenant_id, parent_id, name)

            location_id = generate_cuid()
            path = (
                parent.materialized_path.child(location_id)
                if parent
                else MaterializedPath.root(location_id)
            )
            location = await self.location_repo.create(
                Location(
                    id=location_id,
                    tenant_id=tenant_id,
                    parent_id=parent_id,
                    name=name,
                    name_key=slugify(name),
                    description=description,
                    path=str(path),
                )
            )

        logger.info(
            "Created location %s (tenant=%s, parent=%s, depth=%d)",
            location.id,
            tenant_id,
            parent_id,
            depth,
        )
        return location

    async def update(self, tenant_id: str, location_id: str, patch: Mapping[str, Any]) -> Location:
        """
        Apply a partial update of name and/or description.

        Never touches the hierarchy; paths are left as they are.
        """
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown location fields: {', '.join(sorted(unknown))}")

        name = _clean_name(patch["name"]) if "name" in patch else None
        description = _clean_description(patch["description"]) if "description" in patch else None

        async with unit_of_work(self.db):
            location = await self.location_repo.get_active_for_update(location_id, tenant_id)
            if not location:
                raise LocationNotFoundException(location_id, tenant_id)

            if name is not None and name != location.name:
                await self._ensure_unique_name(
                    tenant_id, location.parent_id, name, exclude_id=location.id
                )
                location.name = name
                location.name_key = slugify(name)
            if "description" in patch:
                location.description = description

            location = await self.location_repo.update(location)

        logger.info("Updated location %s (tenant=%s)", location_id, tenant_id)
        return location

    async def rename(self, tenant_id: str, location_id: str, new_name: str) -> Location:
        return await self.update(tenant_id, location_id, {"name": new_name})

    async def move(self, tenant_id: str, location_id: str, new_parent_id: str | None) -> Location:
        """
        Re-parent a location and rewrite the paths of its whole subtree.

        Every check runs before the first write, and the rewrite happens in a
        single unit of work, so a rejected or failed move changes nothing.

        The moved subtree is locked FOR UPDATE and the new parent is read
        under a shared lock, so the cycle and depth checks see committed
        state. Two crossing moves (A under B, B under A) therefore block each
        other; the database aborts one of them with a deadlock error, which
        surfaces as a storage failure and leaves the tree untouched.

        Raises:
            LocationNotFoundException: location or new parent missing
            WorkspaceMismatchException: new parent belongs to another tenant
            CycleDetectedException: new parent is the location or one of its descendants
            DepthExceededException: the deepest node of the moved subtree would exceed max_depth
            LocationNameConflictException: an active sibling at the target has the same name
        """
        async with unit_of_work(self.db):
            location = await self.location_repo.get_active_for_update(location_id, tenant_id)
            if not location:
                raise LocationNotFoundException(location_id, tenant_id)

            if new_parent_id == location.parent_id:
                return location
            if new_parent_id == location_id:
                raise CycleDetectedException(location_id, new_parent_id)

            new_parent = (
                await self.resolve_reference(tenant_id, new_parent_id)
                if new_parent_id is not None
                else None
            )
            if new_parent and new_parent.materialized_path.contains(location_id):
                raise CycleDetectedException(location_id, new_parent.id)

            old_path = location.materialized_path
            await self.location_repo.get_descendants(location, for_update=True)
            # Children committed while we waited for the subtree locks only show up in a fresh read
            descendants = await self.location_repo.get_descendants(location, for_update=True)
            subtree_height = max((d.depth for d in descendants), default=old_path.depth) - old_path.depth

            new_path = (
                new_parent.materialized_path.child(location_id)
                if new_parent
                else MaterializedPath.root(location_id)
            )
            deepest = new_path.depth + subtree_height
            if deepest > self.max_depth:
                raise DepthExceededException(location_id, deepest, self.max_depth)

            await self._ensure_unique_name(
                tenant_id, new_parent_id, location.name, exclude_id=location.id
            )

            location.parent_id = new_parent_id
            location.path = str(new_path)
            for descendant in descendants:
                descendant.path = str(descendant.materialized_path.rebase(old_path, new_path))

            location = await self.location_repo.update(location)

        logger.info(
            "Moved location %s under %s (tenant=%s, %d descendants rewritten)",
            location_id,
            new_parent_id,
            tenant_id,
            len(descendants),
        )
        return location

    async def soft_delete(self, tenant_id: str, location_id: str) -> int:
        """
        Mark a location deleted and send its containers to the unassigned pool.

        Only containers placed directly at this location are unassigned; child
        locations and their containers are left untouched.

        Returns:
            Number of containers unassigned
        """
        async with unit_of_work(self.db):
            location = await self.location_repo.get_active_for_update(location_id, tenant_id)
            if not location:
                raise LocationNotFoundException(location_id, tenant_id)

            location.is_deleted = True
            location.deleted_at = utc_now()
            await self.location_repo.update(location)
            unassigned = await self.container_repo.unassign_location(location_id, tenant_id)

        logger.info(
            "Soft deleted location %s (tenant=%s, %d containers unassigned)",
            location_id,
            tenant_id,
            unassigned,
        )
        return unassigned

    async def get(self, tenant_id: str, location_id: str) -> Location:
        """Fetch a location of the tenant, soft-deleted ones included"""
        location = await self.location_repo.get_by_id_and_tenant(location_id, tenant_id)
        if not location:
            raise LocationNotFoundException(location_id, tenant_id)
        return location

    async def breadcrumb(self, tenant_id: str, location_id: str) -> list[BreadcrumbItem]:
        """Ancestry of an active location as (id, name) pairs, root first"""
        location = await self.location_repo.get_active(location_id, tenant_id)
        if not location:
            raise LocationNotFoundException(location_id, tenant_id)
        return await self.breadcrumb_for(location)

    async def breadcrumb_for(self, location: Location) -> list[BreadcrumbItem]:
        ancestor_ids = list(location.materialized_path.ancestor_ids)
        ancestors = {
            a.id: a for a in await self.location_repo.get_many(ancestor_ids, location.tenant_id)
        }
        items = [BreadcrumbItem(a_id, ancestors[a_id].name) for a_id in ancestor_ids if a_id in ancestors]
        items.append(BreadcrumbItem(location.id, location.name))
        return items

    async def list_children(self, tenant_id: str, parent_id: str | None = None) -> list[Location]:
        if parent_id is not None:
            parent = await self.location_repo.get_active(parent_id, tenant_id)
            if not parent:
                raise LocationNotFoundException(parent_id, tenant_id)
        return await self.location_repo.list_children(tenant_id, parent_id)

    async def list_active(self, tenant_id: str) -> list[Location]:
        return await self.location_repo.list_active(tenant_id)

    async def resolve_reference(self, tenant_id: str, location_id: str) -> Location:
        """
        Load a location another entity wants to point at.

        The row is read fresh under a shared lock held until the unit of work
        ends, so a concurrent move or soft delete of it waits for the caller
        (or the caller waits for it and sees its result).

        Raises:
            LocationNotFoundException: missing or soft-deleted
            WorkspaceMismatchException: it belongs to another tenant
        """
        location = await self.location_repo.get_for_share(location_id)
        if not location:
            raise LocationNotFoundException(location_id, tenant_id)
        if location.tenant_id != tenant_id:
            raise WorkspaceMismatchException("location", location_id, tenant_id)
        if location.is_deleted:
            raise LocationNotFoundException(location_id, tenant_id)
        return location

    async def _ensure_unique_name(
        self,
        tenant_id: str,
        parent_id: str | None,
        name: str,
        exclude_id: str | None = None,
    ) -> None:
        clash = await self.location_repo.find_active_sibling(
            tenant_id, parent_id, slugify(name), exclude_id
        )
        if clash:
            raise LocationNameConflictException(name, parent_id, tenant_id)
