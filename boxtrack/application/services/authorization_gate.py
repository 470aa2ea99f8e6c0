"""
Role based authorization gate.

The API layer asks the gate before invoking any core operation. Tenant
scoping itself is carried by the tenant_id every core query filters on.
"""

from collections.abc import Mapping

from boxtrack.domain.enums import WorkspaceRole
from boxtrack.shared.enums import Operation
from boxtrack.shared.logging import get_logger

logger = get_logger(__name__)

WRITER_ROLES = frozenset({WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER})


class RoleAuthorizationGate:
    """
    Allows reads to every workspace member and writes to owner, admin and member.

    Roles are looked up per (tenant_id, subject). Unknown subjects are denied.
    """

    def __init__(self, memberships: Mapping[tuple[str, str], WorkspaceRole | str]) -> None:
        self.memberships = {key: WorkspaceRole(role) for key, role in memberships.items()}

    @classmethod
    def for_subject(cls, tenant_id: str, subject: str, role: WorkspaceRole | str) -> "RoleAuthorizationGate":
        """Gate that knows a single membership, typically taken from a token"""
        return cls({(tenant_id, subject): role})

    async def check(self, tenant_id: str, subject: str, operation: Operation) -> bool:
        role = self.memberships.get((tenant_id, subject))
        if role is None:
            logger.warning("Denied %s: %s is not a member of tenant %s", operation.value, subject, tenant_id)
            return False

        if operation.is_read or role in WRITER_ROLES:
            return True

        logger.warning(
            "Denied %s for %s in tenant %s (role=%s)",
            operation.value,
            subject,
            tenant_id,
            role.value,
        )
        return False
