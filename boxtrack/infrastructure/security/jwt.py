"""
Workspace access tokens.

BoxTrack does not manage users. The identity provider issues a bearer
token naming the subject, the workspace (tenant) it acts in and its role
there; this module signs and checks such tokens.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from boxtrack.domain.enums import WorkspaceRole
from boxtrack.infrastructure.config.settings import get_settings

REQUIRED_CLAIMS = ("sub", "tenant_id")


def create_access_token(
    subject: str,
    tenant_id: str,
    role: WorkspaceRole = WorkspaceRole.READ_ONLY,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token for `subject` acting in `tenant_id` with `role`"""
    settings = get_settings()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {"sub": subject, "tenant_id": tenant_id, "role": WorkspaceRole(role).value, "exp": expire}

    encoded_jwt = jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)
    assert isinstance(encoded_jwt, str)
    return encoded_jwt


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify signature and expiry, and return the claims.

    Raises:
        ValueError: bad signature, expired, or a required claim is missing
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}") from e

    missing = [claim for claim in REQUIRED_CLAIMS if not payload.get(claim)]
    if missing:
        raise ValueError(f"Token is missing claims: {', '.join(missing)}")
    return payload
