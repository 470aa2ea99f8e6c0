from pydantic import BaseModel, ConfigDict, Field

from boxtrack.domain.enums import WorkspaceRole


class TokenPayload(BaseModel):
    """JWT token payload schema with tenant, subject and workspace role"""

    sub: str = Field(..., description="User ID (subject)")
    tenant_id: str = Field(..., description="Tenant ID the user belongs to")
    role: WorkspaceRole = Field(WorkspaceRole.READ_ONLY, description="Role inside the workspace")
    exp: int = Field(..., description="Token expiration timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "sub": "user_123",
                "tenant_id": "tenant_abc",
                "role": "member",
                "exp": 1234567890,
            }
        }
    )
