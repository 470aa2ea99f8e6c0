"""Domain enumerations for BoxTrack."""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant (workspace) status enumeration"""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class WorkspaceRole(str, Enum):
    """Role of a subject inside a workspace"""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"
    READ_ONLY = "read_only"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [role.value for role in cls]


class CodeStatus(str, Enum):
    """Lifecycle status of a scannable code"""

    GENERATED = "generated"
    PRINTED = "printed"
    ASSIGNED = "assigned"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class IdentifierKind(str, Enum):
    """Kinds of short human-readable identifiers; uniqueness is global per kind"""

    CONTAINER = "container"
    CODE = "code"
