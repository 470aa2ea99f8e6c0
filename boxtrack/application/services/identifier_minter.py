"""
Short identifier minting.

Candidates are drawn from `secrets` and checked against the global keyspace
of their kind. The check is only an optimization: the unique constraint on
the insert is the final arbiter, and an insert rejected as a duplicate is
treated as one more collision.
"""

from collections.abc import Awaitable, Callable, Mapping
from typing import TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.domain.enums import IdentifierKind
from boxtrack.domain.exceptions import MintExhaustedException
from boxtrack.domain.value_objects.identifiers import (IdentifierProfile,
                                                       code_profile,
                                                       container_profile)
from boxtrack.infrastructure.config.settings import Settings, get_settings
from boxtrack.infrastructure.persistence.database import unit_of_work
from boxtrack.infrastructure.persistence.repositories import (
    CodeRepository, ContainerRepository)
from boxtrack.shared.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
ExistsCheck = Callable[[str], Awaitable[bool]]


class IdentifierMinter:
    """Collision-checked generator shared by container and code creation"""

    def __init__(
        self,
        db: AsyncSession,
        profiles: Mapping[IdentifierKind, IdentifierProfile],
        exists_checks: Mapping[IdentifierKind, ExistsCheck],
        max_attempts: int = 5,
    ) -> None:
        self.db = db
        self.profiles = dict(profiles)
        self.exists_checks = dict(exists_checks)
        self.max_attempts = max_attempts

    def profile(self, kind: IdentifierKind) -> IdentifierProfile:
        return self.profiles[kind]

    async def mint(self, kind: IdentifierKind, tenant_id: str) -> str:
        """
        Draw candidates until one is free.

        Raises:
            MintExhaustedException: every attempt collided
        """
        profile = self.profiles[kind]
        exists = self.exists_checks[kind]

        for attempt in range(1, self.max_attempts + 1):
            candidate = profile.draw()
            if not await exists(candidate):
                return candidate
            logger.warning(
                "Identifier collision (kind=%s, tenant=%s, attempt=%d)",
                kind.value,
                tenant_id,
                attempt,
            )

        raise self._exhausted(kind, tenant_id)

    async def mint_and_insert(
        self,
        kind: IdentifierKind,
        tenant_id: str,
        insert: Callable[[str], Awaitable[T]],
    ) -> T:
        """
        Mint an identifier and run `insert` with it inside one unit of work.

        Each attempt runs in its own SAVEPOINT (or transaction), so a duplicate
        rejected by the database rolls back only that attempt. An IntegrityError
        that is not caused by the candidate identifier is re-raised untouched.

        Raises:
            MintExhaustedException: every attempt collided
        """
        profile = self.profiles[kind]
        exists = self.exists_checks[kind]

        for attempt in range(1, self.max_attempts + 1):
            candidate = profile.draw()
            if await exists(candidate):
                logger.warning(
                    "Identifier collision (kind=%s, tenant=%s, attempt=%d)",
                    kind.value,
                    tenant_id,
                    attempt,
                )
                continue

            try:
                async with unit_of_work(self.db):
                    return await insert(candidate)
            except IntegrityError:
                if not await exists(candidate):
                    raise
                logger.warning(
                    "Identifier taken by a concurrent writer (kind=%s, tenant=%s, attempt=%d)",
                    kind.value,
                    tenant_id,
                    attempt,
                )

        raise self._exhausted(kind, tenant_id)

    def _exhausted(self, kind: IdentifierKind, tenant_id: str) -> MintExhaustedException:
        logger.error(
            "Identifier keyspace exhausted: kind=%s tenant=%s attempts=%d",
            kind.value,
            tenant_id,
            self.max_attempts,
        )
        return MintExhaustedException(kind.value, self.max_attempts)


def build_identifier_minter(db: AsyncSession, settings: Settings | None = None) -> IdentifierMinter:
    """Wire a minter to the container and code tables of a session"""
    settings = settings or get_settings()
    return IdentifierMinter(
        db,
        profiles={
            IdentifierKind.CONTAINER: container_profile(settings.container_identifier_length),
            IdentifierKind.CODE: code_profile(
                settings.code_identifier_prefix, settings.code_identifier_length
            ),
        },
        exists_checks={
            IdentifierKind.CONTAINER: ContainerRepository(db).short_identifier_exists,
            IdentifierKind.CODE: CodeRepository(db).short_identifier_exists,
        },
        max_attempts=settings.mint_max_attempts,
    )
