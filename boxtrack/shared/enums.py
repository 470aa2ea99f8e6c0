"""
Shared enumerations for BoxTrack.

Note: CodeStatus, WorkspaceRole and friends live in boxtrack/domain/enums.py
as they are domain concepts.
"""

from enum import Enum


class Operation(str, Enum):
    """Operations the API layer asks the authorization gate about"""

    LOCATION_READ = "location:read"
    LOCATION_CREATE = "location:create"
    LOCATION_UPDATE = "location:update"
    LOCATION_DELETE = "location:delete"
    CONTAINER_READ = "container:read"
    CONTAINER_CREATE = "container:create"
    CONTAINER_UPDATE = "container:update"
    CONTAINER_DELETE = "container:delete"
    CODE_READ = "code:read"
    CODE_CREATE = "code:create"
    CODE_UPDATE = "code:update"

    @property
    def is_read(self) -> bool:
        return self.value.endswith(":read")

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [operation.value for operation in cls]
