"""Correlation ID middleware for request tracing"""
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from boxtrack.shared.context import (reset_correlation_id,
                                     set_correlation_id)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Attach a correlation ID to every request and response.

    A client supplied X-Correlation-ID is reused, otherwise a UUID4 is
    generated. Every log line written while serving the request carries it.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
