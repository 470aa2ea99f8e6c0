"""
Mapping of domain exceptions to HTTP responses.

Every BoxTrackException renders as {"error", "message", "details"} with the
status of its kind. Storage failures are logged with the correlation ID and
answered with a generic body.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from boxtrack.domain.exceptions import (AuthorizationException,
                                        BoxTrackException, ConflictException,
                                        CycleDetectedException,
                                        DepthExceededException,
                                        MintExhaustedException,
                                        NotFoundException, ValidationException,
                                        WorkspaceMismatchException)
from boxtrack.shared.context import get_correlation_id
from boxtrack.shared.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_EXCEPTION: list[tuple[type[BoxTrackException], int]] = [
    (NotFoundException, status.HTTP_404_NOT_FOUND),
    (DepthExceededException, status.HTTP_400_BAD_REQUEST),
    (CycleDetectedException, status.HTTP_400_BAD_REQUEST),
    (WorkspaceMismatchException, status.HTTP_403_FORBIDDEN),
    (ConflictException, status.HTTP_409_CONFLICT),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (MintExhaustedException, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (AuthorizationException, status.HTTP_403_FORBIDDEN),
]


def status_for(exc: BoxTrackException) -> int:
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def boxtrack_exception_handler(request: Request, exc: BoxTrackException) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "%s %s failed: %s %s",
            request.method,
            request.url.path,
            exc.error_code,
            exc.details,
        )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def storage_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    correlation_id = get_correlation_id()
    logger.error(
        "Storage failure on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "STORAGE_ERROR",
            "message": "An internal error occurred",
            "details": {"correlation_id": correlation_id},
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BoxTrackException, boxtrack_exception_handler)
    app.add_exception_handler(SQLAlchemyError, storage_exception_handler)
