"""Request correlation and access logging middleware."""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import structlog

from .observability import get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with a correlation ID.

    An incoming X-Request-ID is reused, otherwise one is generated. The ID is
    bound into the structlog context for the duration of the request, so the
    reconciliation log lines of one booking share it, and echoed back on the
    response.
    """

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)

        response.headers[self.header_name] = request_id
        return response


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per RPC call with its outcome and latency."""

    def __init__(self, app: ASGIApp, skip_paths: Optional[frozenset[str]] = None):
        super().__init__(app)
        self.skip_paths = skip_paths or frozenset({"/health", "/ready", "/metrics"})

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.skip_paths:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        fields = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
        if response.status_code >= 500:
            logger.error("RPC call failed", **fields)
        elif response.status_code >= 400:
            logger.warning("RPC call rejected", **fields)
        else:
            logger.info("RPC call completed", **fields)

        return response


def setup_middleware(app, enable_logging: bool = True) -> None:
    """Install correlation and access-log middleware on ``app``."""
    # Last added runs first, so the request ID is bound before access logging
    if enable_logging:
        app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
