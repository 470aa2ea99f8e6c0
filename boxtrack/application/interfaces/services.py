"""
Service interfaces (ports) for the application layer.

These protocols define the contracts the use cases and the API layer rely on.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar

from boxtrack.domain.enums import IdentifierKind
from boxtrack.shared.enums import Operation

T = TypeVar("T")


class IAuthorizationGate(Protocol):
    """Decides whether a subject may run an operation inside a tenant"""

    async def check(self, tenant_id: str, subject: str, operation: Operation) -> bool:
        ...


class IIdentifierMinter(Protocol):
    """Produces globally unique short identifiers"""

    async def mint(self, kind: IdentifierKind, tenant_id: str) -> str:
        """Return a candidate that is not taken at the time of the check"""
        ...

    async def mint_and_insert(
        self,
        kind: IdentifierKind,
        tenant_id: str,
        insert: Callable[[str], Awaitable[T]],
    ) -> T:
        """Mint and insert atomically, retrying when the insert hits a duplicate"""
        ...
