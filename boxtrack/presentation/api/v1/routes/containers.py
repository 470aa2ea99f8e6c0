from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from boxtrack.application.use_cases.containers.container_store import \
    ContainerStore
from boxtrack.presentation.api.dependencies import (
    get_container_store, get_container_store_transactional, require_operation)
from boxtrack.presentation.api.v1.schemas.container import (
    ContainerCreate, ContainerDetailResponse, ContainerResponse,
    ContainerUpdate, DuplicateNameCheck, DuplicateNameResponse)
from boxtrack.presentation.api.v1.schemas.location import \
    BreadcrumbItemResponse
from boxtrack.presentation.api.v1.schemas.token import TokenPayload
from boxtrack.shared.enums import Operation

router = APIRouter()


@router.post("/", response_model=ContainerResponse, status_code=status.HTTP_201_CREATED)
async def create_container(
    data: ContainerCreate,
    store: Annotated[ContainerStore, Depends(get_container_store_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CONTAINER_CREATE))],
):
    """Create a container, optionally at a location and bound to a code"""
    return await store.create(
        user.tenant_id,
        name=data.name,
        description=data.description,
        tags=data.tags,
        location_id=data.location_id,
        code_id=data.code_id,
    )


@router.get("/", response_model=list[ContainerResponse])
async def list_containers(
    store: Annotated[ContainerStore, Depends(get_container_store)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CONTAINER_READ))],
    q: str | None = Query(None, description="Search in name, description and tags"),
    location_id: str | None = None,
    is_assigned: bool | None = Query(None, description="Filter on having a location"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    return await store.list_containers(
        user.tenant_id,
        q=q,
        location_id=location_id,
        is_assigned=is_assigned,
        limit=limit,
        offset=offset,
    )


@router.post("/check-duplicate", response_model=DuplicateNameResponse)
async def check_duplicate_name(
    data: DuplicateNameCheck,
    store: Annotated[ContainerStore, Depends(get_container_store)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CONTAINER_READ))],
):
    """Tell whether other containers already use a name (advisory only)"""
    result = await store.check_duplicate_name(user.tenant_id, data.name, data.exclude_container_id)
    return DuplicateNameResponse(is_duplicate=result.is_duplicate, count=result.count)


@router.get("/{container_id}", response_model=ContainerDetailResponse)
async def get_container(
    container_id: str,
    store: Annotated[ContainerStore, Depends(get_container_store)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CONTAINER_READ))],
):
    """Get a container with its location breadcrumb and bound code identifier"""
    detail = await store.get_detail(user.tenant_id, container_id)
    return ContainerDetailResponse(
        **ContainerResponse.model_validate(detail.container).model_dump(),
        breadcrumb=[BreadcrumbItemResponse.model_validate(item) for item in detail.breadcrumb],
        code_short_identifier=detail.code_short_identifier,
    )


@router.patch("/{container_id}", response_model=ContainerResponse)
async def update_container(
    container_id: str,
    data: ContainerUpdate,
    store: Annotated[ContainerStore, Depends(get_container_store_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CONTAINER_UPDATE))],
):
    """Partially update a container; only fields sent in the body are changed"""
    return await store.update(user.tenant_id, container_id, data.model_dump(exclude_unset=True))


@router.delete("/{container_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_container(
    container_id: str,
    store: Annotated[ContainerStore, Depends(get_container_store_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CONTAINER_DELETE))],
):
    """Delete a container, releasing its code back to the pool"""
    await store.delete(user.tenant_id, container_id)
