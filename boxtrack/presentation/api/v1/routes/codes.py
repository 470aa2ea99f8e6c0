from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from boxtrack.application.use_cases.codes.code_registry import CodeRegistry
from boxtrack.domain.enums import CodeStatus
from boxtrack.presentation.api.dependencies import (
    get_code_registry, get_code_registry_autocommit,
    get_code_registry_transactional, require_operation)
from boxtrack.presentation.api.v1.schemas.code import (CodeBatchCreate,
                                                       CodeResponse)
from boxtrack.presentation.api.v1.schemas.token import TokenPayload
from boxtrack.shared.enums import Operation

router = APIRouter()


@router.post("/batch", response_model=list[CodeResponse], status_code=status.HTTP_201_CREATED)
async def generate_codes(
    data: CodeBatchCreate,
    registry: Annotated[CodeRegistry, Depends(get_code_registry_autocommit)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CODE_CREATE))],
):
    """
    Generate a batch of codes ready for label printing.

    Every code is committed on its own; if generation fails partway the
    codes created so far are kept.
    """
    return await registry.generate_batch(user.tenant_id, data.count)


@router.get("/", response_model=list[CodeResponse])
async def list_codes(
    registry: Annotated[CodeRegistry, Depends(get_code_registry)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CODE_READ))],
    status_filter: CodeStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """List codes, newest first"""
    return await registry.list_codes(user.tenant_id, status_filter, skip, limit)


@router.get("/{short_identifier}", response_model=CodeResponse)
async def resolve_code(
    short_identifier: str,
    registry: Annotated[CodeRegistry, Depends(get_code_registry)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CODE_READ))],
):
    """
    Resolve a scanned code.

    An assigned code carries the container_id to open; any other status
    means the scan should start onboarding a new container.
    """
    return await registry.resolve(user.tenant_id, short_identifier)


@router.post("/{code_id}/printed", response_model=CodeResponse)
async def mark_code_printed(
    code_id: str,
    registry: Annotated[CodeRegistry, Depends(get_code_registry_transactional)],
    user: Annotated[TokenPayload, Depends(require_operation(Operation.CODE_UPDATE))],
):
    """Mark a code as printed; already printed or assigned codes are unchanged"""
    return await registry.mark_printed(user.tenant_id, code_id)
