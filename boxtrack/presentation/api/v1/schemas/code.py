from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from boxtrack.domain.enums import CodeStatus


class CodeBatchCreate(BaseModel):
    """Schema for generating a batch of codes"""

    count: int = Field(..., description="Number of codes to generate (1-100)")


class CodeResponse(BaseModel):
    """Schema for code response"""

    id: str
    tenant_id: str
    short_identifier: str
    status: CodeStatus
    container_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
