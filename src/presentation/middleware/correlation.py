"""Correlation ID middleware for request tracing"""
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

CORRELATION_HEADER = "X-Correlation-ID"

# Correlation ID of the request being served (empty outside a request)
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with a correlation ID.

    A client-supplied X-Correlation-ID is reused, otherwise one is
    generated. The ID is echoed in the response and stamped on every log
    record emitted while the request is served (see CorrelationIdFilter),
    so a cascade's step logs can be tied back to the request.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


def get_correlation_id() -> str:
    return correlation_id_var.get()
