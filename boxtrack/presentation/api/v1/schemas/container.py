from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from boxtrack.presentation.api.v1.schemas.location import \
    BreadcrumbItemResponse


class ContainerCreate(BaseModel):
    """Schema for creating a container"""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=10000)
    tags: list[str] = Field(default_factory=list)
    location_id: str | None = None
    code_id: str | None = Field(None, description="Code to bind on creation")


class ContainerUpdate(BaseModel):
    """
    Schema for a partial container update.

    Only fields present in the request body are applied; an explicit null
    location_id unassigns the container and an explicit null code_id
    releases its code.
    """

    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=10000)
    tags: list[str] | None = None
    location_id: str | None = None
    code_id: str | None = None


class ContainerResponse(BaseModel):
    """Schema for container response"""

    id: str
    tenant_id: str
    short_identifier: str
    name: str
    description: str | None
    tags: list[str]
    location_id: str | None
    bound_code_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ContainerDetailResponse(ContainerResponse):
    """Container with location breadcrumb and bound code identifier"""

    breadcrumb: list[BreadcrumbItemResponse] = []
    code_short_identifier: str | None = None


class DuplicateNameCheck(BaseModel):
    name: str = Field(..., max_length=100)
    exclude_container_id: str | None = None


class DuplicateNameResponse(BaseModel):
    is_duplicate: bool
    count: int
