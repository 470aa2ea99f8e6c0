from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from boxtrack.application.use_cases.locations.location_tree import LocationTree
from boxtrack.presentation.api.dependencies import (
    get_location_tree, get_location_tree_transactional, require_operation)
from boxtrack.presentation.api.v1.schemas.location import (
    BreadcrumbItemResponse, LocationCreate, LocationDeleteResponse,
    LocationMove, LocationResponse, LocationUpdate)
from boxtrack.presentation.api.v1.schemas.token import TokenPayload
from boxtrack.shared.enums import Operation

router = APIRouter()


@router.post("/", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    data: LocationCreate,
    tree: Annotated[LocationTree, Depends(get_location_tree_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_CREATE))],
):
    """Create a root location, or a child when parent_id is given"""
    return await tree.create(user.tenant_id, data.parent_id, data.name, data.description)


@router.get("/", response_model=list[LocationResponse])
async def list_locations(
    tree: Annotated[LocationTree, Depends(get_location_tree)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_READ))],
    parent_id: str | None = None,
    roots_only: bool = Query(False, description="Only return root locations"),
):
    """
    List active locations.

    With parent_id: its direct children. With roots_only: the roots.
    Otherwise the whole active tree ordered by path.
    """
    if parent_id or roots_only:
        return await tree.list_children(user.tenant_id, parent_id)
    return await tree.list_active(user.tenant_id)


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: str,
    tree: Annotated[LocationTree, Depends(get_location_tree)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_READ))],
):
    """Get a location by ID; soft-deleted locations are returned with is_deleted=true"""
    return await tree.get(user.tenant_id, location_id)


@router.get("/{location_id}/breadcrumb", response_model=list[BreadcrumbItemResponse])
async def get_breadcrumb(
    location_id: str,
    tree: Annotated[LocationTree, Depends(get_location_tree)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_READ))],
):
    return await tree.breadcrumb(user.tenant_id, location_id)


@router.patch("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: str,
    data: LocationUpdate,
    tree: Annotated[LocationTree, Depends(get_location_tree_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_UPDATE))],
):
    """Rename a location or change its description"""
    return await tree.update(user.tenant_id, location_id, data.model_dump(exclude_unset=True))


@router.post("/{location_id}/move", response_model=LocationResponse)
async def move_location(
    location_id: str,
    data: LocationMove,
    tree: Annotated[LocationTree, Depends(get_location_tree_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_UPDATE))],
):
    """Move a location (and its subtree) under a new parent, or to the root"""
    return await tree.move(user.tenant_id, location_id, data.new_parent_id)


@router.delete("/{location_id}", response_model=LocationDeleteResponse)
async def delete_location(
    location_id: str,
    tree: Annotated[LocationTree, Depends(get_location_tree_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.LOCATION_DELETE))],
):
    """
    Soft delete a location.

    Containers placed directly at it move to the unassigned pool; child
    locations are not touched.
    """
    unassigned = await tree.soft_delete(user.tenant_id, location_id)
    return LocationDeleteResponse(id=location_id, unassigned_containers=unassigned)
