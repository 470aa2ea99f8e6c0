from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LocationCreate(BaseModel):
    """Schema for creating a location"""

    name: str = Field(..., min_length=1, max_length=64, description="Display name")
    parent_id: str | None = Field(None, description="Parent location; omit for a root")
    description: str | None = Field(None, max_length=500)


class LocationUpdate(BaseModel):
    """Schema for renaming a location or changing its description"""

    name: str | None = Field(None, min_length=1, max_length=64)
    description: str | None = Field(None, max_length=500)


class LocationMove(BaseModel):
    """Schema for re-parenting a location"""

    new_parent_id: str | None = Field(None, description="Target parent; null moves to root")


class LocationResponse(BaseModel):
    """Schema for location response"""

    id: str
    tenant_id: str
    parent_id: str | None
    name: str
    description: str | None
    path: str
    depth: int
    is_deleted: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BreadcrumbItemResponse(BaseModel):
    id: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class LocationDeleteResponse(BaseModel):
    id: str
    unassigned_containers: int
