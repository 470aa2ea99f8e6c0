"""
Code lifecycle use cases.

Codes are minted in batches, optionally marked printed once their labels are
rendered, bound one-to-one to a container and released back to `generated`
when that container goes away. Both sides of a binding (code.container_id and
container.bound_code_id) are always written in the same unit of work.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.application.services.identifier_minter import IdentifierMinter
from boxtrack.domain.entities.code import ensure_transition
from boxtrack.domain.enums import CodeStatus, IdentifierKind
from boxtrack.domain.exceptions import (CodeAlreadyAssignedException,
                                        CodeNotFoundException,
                                        ConflictException,
                                        ContainerNotFoundException,
                                        InvalidBatchSizeException,
                                        ValidationException,
                                        WorkspaceMismatchException)
from boxtrack.infrastructure.persistence.database import unit_of_work
from boxtrack.infrastructure.persistence.models.code import Code
from boxtrack.infrastructure.persistence.models.container import Container
from boxtrack.infrastructure.persistence.repositories import (
    CodeRepository, ContainerRepository)
from boxtrack.shared.logging import get_logger

logger = get_logger(__name__)


class CodeRegistry:
    """Owns pre-generated scannable codes and their binding to containers"""

    def __init__(
        self,
        db: AsyncSession,
        code_repo: CodeRepository,
        container_repo: ContainerRepository,
        minter: IdentifierMinter,
        batch_min: int = 1,
        batch_max: int = 100,
    ) -> None:
        self.db = db
        self.code_repo = code_repo
        self.container_repo = container_repo
        self.minter = minter
        self.batch_min = batch_min
        self.batch_max = batch_max

    async def generate_batch(self, tenant_id: str, count: int) -> list[Code]:
        """
        Mint `count` new codes in status `generated`.

        Each code is minted and inserted in its own unit of work. When the
        session has no open transaction every code commits on its own, so a
        failure partway keeps the codes already created.

        Raises:
            InvalidBatchSizeException: count outside [batch_min, batch_max]
            MintExhaustedException: identifier retries exhausted
        """
        if isinstance(count, bool) or not isinstance(count, int) or not (
            self.batch_min <= count <= self.batch_max
        ):
            raise InvalidBatchSizeException(count, self.batch_min, self.batch_max)

        async def insert(short_identifier: str) -> Code:
            return await self.code_repo.create(
                Code(
                    tenant_id=tenant_id,
                    short_identifier=short_identifier,
                    status=CodeStatus.GENERATED.value,
                )
            )

        codes: list[Code] = []
        for _ in range(count):
            async with unit_of_work(self.db):
                codes.append(
                    await self.minter.mint_and_insert(IdentifierKind.CODE, tenant_id, insert)
                )

        logger.info("Generated %d codes (tenant=%s)", len(codes), tenant_id)
        return codes

    async def mark_printed(self, tenant_id: str, code_id: str) -> Code:
        """
        Record that the label of a code was rendered.

        Idempotent: a code that is already printed or assigned is returned unchanged.
        """
        async with unit_of_work(self.db):
            code = await self._get_owned_for_update(tenant_id, code_id)
            if code.status in (CodeStatus.PRINTED.value, CodeStatus.ASSIGNED.value):
                return code

            code.status = ensure_transition(code.id, code.status, CodeStatus.PRINTED).value
            code = await self.code_repo.update(code)

        logger.info("Marked code %s printed (tenant=%s)", code_id, tenant_id)
        return code

    async def ensure_bindable(
        self, tenant_id: str, code_id: str, container_id: str | None = None
    ) -> Code:
        """
        Check that a code may be bound to `container_id` without writing anything.

        Raises:
            CodeNotFoundException: code missing
            WorkspaceMismatchException: code belongs to another tenant
            CodeAlreadyAssignedException: code bound to a different container
        """
        code = await self.code_repo.get_by_id(code_id)
        if not code:
            raise CodeNotFoundException(code_id, tenant_id)
        if code.tenant_id != tenant_id:
            raise WorkspaceMismatchException("code", code_id, tenant_id)
        if code.status == CodeStatus.ASSIGNED.value and code.container_id != container_id:
            raise CodeAlreadyAssignedException(code.id, code.container_id, container_id)
        return code

    async def bind(self, tenant_id: str, code_id: str, container_id: str) -> Code:
        """
        Bind a code to a container, writing both sides of the relation.

        Binding a code to the container it is already bound to is a no-op.

        Raises:
            CodeNotFoundException / ContainerNotFoundException: missing rows
            WorkspaceMismatchException: code or container in another tenant
            CodeAlreadyAssignedException: code bound to a different container
            ConflictException: container already carries another code
        """
        async with unit_of_work(self.db):
            code = await self.code_repo.get_for_update(code_id)
            if not code:
                raise CodeNotFoundException(code_id, tenant_id)
            if code.tenant_id != tenant_id:
                raise WorkspaceMismatchException("code", code_id, tenant_id)

            container = await self._get_container(tenant_id, container_id)

            if code.status == CodeStatus.ASSIGNED.value:
                if code.container_id == container_id:
                    return code
                raise CodeAlreadyAssignedException(code.id, code.container_id, container_id)
            if container.bound_code_id and container.bound_code_id != code.id:
                raise ConflictException(
                    f"Container {container_id} already has a bound code",
                    "CONTAINER_ALREADY_BOUND",
                    {"container_id": container_id, "code_id": container.bound_code_id},
                )

            code.status = ensure_transition(code.id, code.status, CodeStatus.ASSIGNED).value
            code.container_id = container.id
            container.bound_code_id = code.id
            code = await self.code_repo.update(code)

        logger.info("Bound code %s to container %s (tenant=%s)", code_id, container_id, tenant_id)
        return code

    async def release(self, tenant_id: str, container_id: str) -> Code | None:
        """
        Return the code bound to a container to `generated`.

        A container without a bound code is a no-op.
        """
        async with unit_of_work(self.db):
            code = await self.code_repo.get_by_container(container_id, for_update=True)
            if not code:
                return None
            if code.tenant_id != tenant_id:
                raise WorkspaceMismatchException("code", code.id, tenant_id)

            code.status = ensure_transition(code.id, code.status, CodeStatus.GENERATED).value
            code.container_id = None

            container = await self.container_repo.get_by_id(container_id)
            if container and container.bound_code_id == code.id:
                container.bound_code_id = None
            code = await self.code_repo.update(code)

        logger.info("Released code %s from container %s (tenant=%s)", code.id, container_id, tenant_id)
        return code

    async def resolve(self, tenant_id: str, short_identifier: str) -> Code:
        """
        Look up a scanned code.

        The caller branches on the result: an assigned code leads to its
        container, any other status to onboarding a new container.
        """
        value = (short_identifier or "").strip()
        if not self.minter.profile(IdentifierKind.CODE).matches(value):
            raise ValidationException(
                f"Invalid code format: {short_identifier!r}", "short_identifier", "INVALID_CODE_FORMAT"
            )

        code = await self.code_repo.get_by_short_identifier(tenant_id, value)
        if not code:
            raise CodeNotFoundException(value, tenant_id)
        return code

    async def get(self, tenant_id: str, code_id: str) -> Code:
        code = await self.code_repo.get_by_id_and_tenant(code_id, tenant_id)
        if not code:
            raise CodeNotFoundException(code_id, tenant_id)
        return code

    async def list_codes(
        self,
        tenant_id: str,
        status: CodeStatus | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Code]:
        return await self.code_repo.get_by_tenant(tenant_id, status, skip, limit)

    async def _get_owned_for_update(self, tenant_id: str, code_id: str) -> Code:
        code = await self.code_repo.get_for_update(code_id)
        if not code or code.tenant_id != tenant_id:
            raise CodeNotFoundException(code_id, tenant_id)
        return code

    async def _get_container(self, tenant_id: str, container_id: str) -> Container:
        container = await self.container_repo.get_by_id(container_id)
        if not container:
            raise ContainerNotFoundException(container_id, tenant_id)
        if container.tenant_id != tenant_id:
            raise WorkspaceMismatchException("container", container_id, tenant_id)
        return container
