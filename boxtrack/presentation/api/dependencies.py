from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.application.interfaces.services import IAuthorizationGate
from boxtrack.application.services.authorization_gate import \
    RoleAuthorizationGate
from boxtrack.application.services.identifier_minter import \
    build_identifier_minter
from boxtrack.application.use_cases.codes.code_registry import CodeRegistry
from boxtrack.application.use_cases.containers.container_store import \
    ContainerStore
from boxtrack.application.use_cases.locations.location_tree import LocationTree
from boxtrack.domain.exceptions import AuthorizationException
from boxtrack.infrastructure.config.settings import get_settings
from boxtrack.infrastructure.persistence.database import (
    get_db, get_db_autocommit, get_db_transactional)
from boxtrack.infrastructure.persistence.models.tenant import Tenant
from boxtrack.infrastructure.persistence.repositories import (
    CodeRepository, ContainerRepository, LocationRepository, TenantRepository)
from boxtrack.infrastructure.security.jwt import verify_token
from boxtrack.presentation.api.v1.schemas.token import TokenPayload
from boxtrack.shared.enums import Operation

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> TokenPayload:
    """
    Validate JWT token and return authenticated user payload.
    Token must contain 'sub' (user_id) and 'tenant_id' claims.
    """
    try:
        payload = verify_token(credentials.credentials)
        return TokenPayload(**payload)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_tenant(
    user: TokenPayload = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Tenant:
    """
    Get current tenant from authenticated user's token claims.
    Tenant ID is derived from JWT token, preventing header spoofing attacks.
    """
    tenant = await TenantRepository(db).get_active(user.tenant_id)
    if not tenant:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tenant not found or access denied",
        )
    return tenant


async def get_authorization_gate(
    user: TokenPayload = Depends(get_current_user),
) -> IAuthorizationGate:
    """Gate built from the membership carried by the token"""
    return RoleAuthorizationGate.for_subject(user.tenant_id, user.sub, user.role)


def require_operation(operation: Operation):
    """
    Dependency factory for route-level authorization.

    Usage:
        @router.post("/", dependencies=[Depends(require_operation(Operation.LOCATION_CREATE))])
        async def create_location(...):
            ...
    """

    async def operation_checker(
        user: TokenPayload = Depends(get_current_user),
        tenant: Tenant = Depends(get_current_tenant),
        gate: IAuthorizationGate = Depends(get_authorization_gate),
    ) -> TokenPayload:
        if not await gate.check(tenant.id, user.sub, operation):
            raise AuthorizationException(operation.value, tenant.id)
        return user

    return operation_checker


def build_location_tree(db: AsyncSession) -> LocationTree:
    settings = get_settings()
    return LocationTree(
        db,
        location_repo=LocationRepository(db),
        container_repo=ContainerRepository(db),
        max_depth=settings.location_max_depth,
    )


def build_code_registry(db: AsyncSession) -> CodeRegistry:
    settings = get_settings()
    return CodeRegistry(
        db,
        code_repo=CodeRepository(db),
        container_repo=ContainerRepository(db),
        minter=build_identifier_minter(db, settings),
        batch_min=settings.code_batch_min,
        batch_max=settings.code_batch_max,
    )


def build_container_store(db: AsyncSession) -> ContainerStore:
    settings = get_settings()
    return ContainerStore(
        db,
        container_repo=ContainerRepository(db),
        location_tree=build_location_tree(db),
        code_registry=build_code_registry(db),
        minter=build_identifier_minter(db, settings),
        page_size_max=settings.container_page_size_max,
    )


async def get_location_tree(db: AsyncSession = Depends(get_db)) -> LocationTree:
    """Location tree dependency for reads"""
    return build_location_tree(db)


async def get_location_tree_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> LocationTree:
    """Location tree dependency with transaction management"""
    return build_location_tree(db)


async def get_code_registry(db: AsyncSession = Depends(get_db)) -> CodeRegistry:
    """Code registry dependency for reads"""
    return build_code_registry(db)


async def get_code_registry_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> CodeRegistry:
    """Code registry dependency with transaction management"""
    return build_code_registry(db)


async def get_code_registry_autocommit(
    db: AsyncSession = Depends(get_db_autocommit),
) -> CodeRegistry:
    """Code registry whose units of work commit one by one (batch generation)"""
    return build_code_registry(db)


async def get_container_store(db: AsyncSession = Depends(get_db)) -> ContainerStore:
    """Container store dependency for reads"""
    return build_container_store(db)


async def get_container_store_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> ContainerStore:
    """Container store dependency with transaction management"""
    return build_container_store(db)
