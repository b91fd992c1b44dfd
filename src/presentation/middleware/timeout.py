"""Request timeout middleware."""

import asyncio
import time
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """
    Abort requests running longer than REQUEST_TIMEOUT_SECONDS.

    A cancelled request's transaction is rolled back with its session, so
    a cascade cut short leaves no partial mutation behind.
    """

    def __init__(self, app, timeout: float = 30.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except asyncio.TimeoutError:
            elapsed = time.perf_counter() - started
            logger.warning("%s %s timed out after %.2fs", request.method, request.url.path, elapsed)
            return JSONResponse(
                status_code=504,
                content={
                    "error": "REQUEST_TIMEOUT",
                    "message": f"Request timeout after {elapsed:.2f} seconds",
                    "details": {},
                },
            )
        response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.4f}"
        return response
