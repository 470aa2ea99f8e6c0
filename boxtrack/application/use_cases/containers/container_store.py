"""
Container (box) use cases.

A container may sit at a location and may carry one code. Creating,
updating and deleting a container keeps the code binding consistent by
going through CodeRegistry inside the same unit of work, and recomputes the
search document on every write.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.application.services.identifier_minter import IdentifierMinter
from boxtrack.application.use_cases.codes.code_registry import CodeRegistry
from boxtrack.application.use_cases.locations.location_tree import LocationTree
from boxtrack.domain.entities.location import BreadcrumbItem
from boxtrack.domain.enums import IdentifierKind
from boxtrack.domain.exceptions import (ContainerNotFoundException,
                                        ValidationException)
from boxtrack.infrastructure.persistence.database import unit_of_work
from boxtrack.infrastructure.persistence.models.container import Container
from boxtrack.infrastructure.persistence.repositories import \
    ContainerRepository
from boxtrack.shared.logging import get_logger
from boxtrack.shared.utils import (build_search_document, normalize_tags,
                                   normalize_text)

logger = get_logger(__name__)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 10000
UPDATABLE_FIELDS = frozenset({"name", "description", "tags", "location_id", "code_id"})


@dataclass
class ContainerDetail:
    """A container together with what a detail view shows about it"""

    container: Container
    breadcrumb: list[BreadcrumbItem]
    code_short_identifier: str | None


@dataclass
class DuplicateNameResult:
    is_duplicate: bool
    count: int


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned or len(cleaned) > NAME_MAX_LENGTH:
        raise ValidationException(
            f"Container name must be between 1 and {NAME_MAX_LENGTH} characters", "name"
        )
    return cleaned


def _clean_description(description: str | None) -> str | None:
    if description is None:
        return None
    cleaned = description.strip()
    if len(cleaned) > DESCRIPTION_MAX_LENGTH:
        raise ValidationException(
            f"Container description must be at most {DESCRIPTION_MAX_LENGTH} characters",
            "description",
        )
    return cleaned or None


class ContainerStore:
    """Owns container records"""

    def __init__(
        self,
        db: AsyncSession,
        container_repo: ContainerRepository,
        location_tree: LocationTree,
        code_registry: CodeRegistry,
        minter: IdentifierMinter,
        page_size_max: int = 100,
    ) -> None:
        self.db = db
        self.container_repo = container_repo
        self.location_tree = location_tree
        self.code_registry = code_registry
        self.minter = minter
        self.page_size_max = page_size_max

    async def create(
        self,
        tenant_id: str,
        name: str,
        description: str | None = None,
        tags: Iterable[str] | None = None,
        location_id: str | None = None,
        code_id: str | None = None,
    ) -> Container:
        """
        Create a container, optionally placed at a location and bound to a code.

        If binding the code fails the container insert is rolled back too.

        Raises:
            LocationNotFoundException / CodeNotFoundException: missing references
            WorkspaceMismatchException: a reference belongs to another tenant
            CodeAlreadyAssignedException: the code is bound elsewhere
            MintExhaustedException: identifier retries exhausted
        """
        name = _clean_name(name)
        description = _clean_description(description)
        tag_list = normalize_tags(tags)

        async with unit_of_work(self.db):
            if location_id is not None:
                await self.location_tree.resolve_reference(tenant_id, location_id)
            if code_id is not None:
                await self.code_registry.ensure_bindable(tenant_id, code_id)

            async def insert(short_identifier: str) -> Container:
                return await self.container_repo.create(
                    Container(
                        tenant_id=tenant_id,
                        short_identifier=short_identifier,
                        name=name,
                        description=description,
                        tags=tag_list,
                        location_id=location_id,
                        search_document=build_search_document(name, description, tag_list),
                    )
                )

            container = await self.minter.mint_and_insert(IdentifierKind.CONTAINER, tenant_id, insert)
            if code_id is not None:
                await self.code_registry.bind(tenant_id, code_id, container.id)

        logger.info(
            "Created container %s (tenant=%s, location=%s, code=%s)",
            container.id,
            tenant_id,
            location_id,
            code_id,
        )
        return container

    async def update(self, tenant_id: str, container_id: str, patch: Mapping[str, Any]) -> Container:
        """
        Apply a partial update.

        Keys absent from `patch` are left alone. `location_id: None` moves the
        container to the unassigned pool; `code_id: None` releases its code.
        A new code_id releases the previously bound code before binding.
        """
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown container fields: {', '.join(sorted(unknown))}")

        changes: dict[str, Any] = {}
        if "name" in patch:
            changes["name"] = _clean_name(patch["name"])
        if "description" in patch:
            changes["description"] = _clean_description(patch["description"])
        if "tags" in patch:
            changes["tags"] = normalize_tags(patch["tags"])

        async with unit_of_work(self.db):
            container = await self.container_repo.get_for_update(container_id, tenant_id)
            if not container:
                raise ContainerNotFoundException(container_id, tenant_id)

            if "location_id" in patch:
                if patch["location_id"] is not None:
                    await self.location_tree.resolve_reference(tenant_id, patch["location_id"])
                changes["location_id"] = patch["location_id"]

            new_code_id = patch.get("code_id")
            rebind = "code_id" in patch and new_code_id != container.bound_code_id
            if rebind and new_code_id is not None:
                await self.code_registry.ensure_bindable(tenant_id, new_code_id, container.id)

            if rebind:
                if container.bound_code_id:
                    await self.code_registry.release(tenant_id, container.id)
                if new_code_id is not None:
                    await self.code_registry.bind(tenant_id, new_code_id, container.id)

            for field, value in changes.items():
                setattr(container, field, value)
            container.search_document = build_search_document(
                container.name, container.description, container.tags
            )
            container = await self.container_repo.update(container)

        logger.info(
            "Updated container %s (tenant=%s, fields=%s)",
            container_id,
            tenant_id,
            ",".join(sorted(patch)),
        )
        return container

    async def delete(self, tenant_id: str, container_id: str) -> None:
        """Release the bound code, then delete the container, atomically"""
        async with unit_of_work(self.db):
            container = await self.container_repo.get_for_update(container_id, tenant_id)
            if not container:
                raise ContainerNotFoundException(container_id, tenant_id)

            await self.code_registry.release(tenant_id, container_id)
            await self.container_repo.delete(container)

        logger.info("Deleted container %s (tenant=%s)", container_id, tenant_id)

    async def get(self, tenant_id: str, container_id: str) -> Container:
        container = await self.container_repo.get_by_id_and_tenant(container_id, tenant_id)
        if not container:
            raise ContainerNotFoundException(container_id, tenant_id)
        return container

    async def get_detail(self, tenant_id: str, container_id: str) -> ContainerDetail:
        """Container with its location breadcrumb and bound code identifier"""
        container = await self.get(tenant_id, container_id)

        breadcrumb: list[BreadcrumbItem] = []
        if container.location_id:
            location = await self.location_tree.get(tenant_id, container.location_id)
            breadcrumb = await self.location_tree.breadcrumb_for(location)

        code_short_identifier = None
        if container.bound_code_id:
            code = await self.code_registry.get(tenant_id, container.bound_code_id)
            code_short_identifier = code.short_identifier

        return ContainerDetail(container, breadcrumb, code_short_identifier)

    async def list_containers(
        self,
        tenant_id: str,
        q: str | None = None,
        location_id: str | None = None,
        is_assigned: bool | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Container]:
        """
        Filtered listing, newest first.

        `q` is normalized like the search document and every resulting token
        has to match.
        """
        if not 1 <= limit <= self.page_size_max:
            raise ValidationException(f"limit must be between 1 and {self.page_size_max}", "limit")
        if offset < 0:
            raise ValidationException("offset must not be negative", "offset")

        return await self.container_repo.search(
            tenant_id,
            terms=normalize_text(q).split(),
            location_id=location_id,
            is_assigned=is_assigned,
            skip=offset,
            limit=limit,
        )

    async def check_duplicate_name(
        self, tenant_id: str, name: str, exclude_container_id: str | None = None
    ) -> DuplicateNameResult:
        """Non-blocking hint: how many other containers already use this name"""
        if not name or not name.strip():
            return DuplicateNameResult(is_duplicate=False, count=0)

        count = await self.container_repo.count_by_name(tenant_id, name, exclude_container_id)
        return DuplicateNameResult(is_duplicate=count > 0, count=count)
