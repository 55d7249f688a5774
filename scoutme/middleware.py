"""
Production Middleware
=====================

Request logging and request timeouts.

Usage:
    from scoutme.middleware import setup_middleware
    setup_middleware(app, settings)
"""

import asyncio
import logging
import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from scoutme.config import Settings

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST LOGGING
# =============================================================================

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One access line per API call, tagged with the calling user.

    Log format:
    {method} {path} -> {status} in {duration}ms rid={request_id} uid={uid} ip={client_ip}

    ``uid`` is the Firebase uid set on ``request.state`` by the auth dependency;
    it is "-" for anonymous calls and for requests rejected before auth ran.
    """

    # Load balancer health checks would drown the access log
    EXCLUDE_PATHS = {"/health", "/ready", "/live", "/favicon.ico"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.EXCLUDE_PATHS:
            return await call_next(request)

        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            status_code = response.status_code if response else 500
            line = (
                f"{request.method} {request.url.path} -> {status_code} "
                f"in {(time.perf_counter() - started) * 1000:.1f}ms "
                f"rid={request_id} uid={getattr(request.state, 'uid', None) or '-'} "
                f"ip={self._get_client_ip(request)}"
            )
            level = logging.ERROR if status_code >= 500 else logging.WARNING if status_code >= 400 else logging.INFO
            logger.log(level, line)

            if response:
                response.headers["X-Request-ID"] = request_id

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP, handling proxies."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


# =============================================================================
# REQUEST TIMEOUT
# =============================================================================

class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Abort requests that run longer than ``timeout_seconds`` with a 504."""

    def __init__(self, app: FastAPI, timeout_seconds: float = 30.0):
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await asyncio.wait_for(call_next(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Request timed out after {self.timeout_seconds}s: {request.method} {request.url.path}")
            return ORJSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={"detail": "Request timed out"},
            )


# =============================================================================
# SETUP FUNCTION
# =============================================================================

def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure all middleware. The last one added runs outermost."""
    cors_origins = settings.cors_origins_list

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )

    app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    # Outermost - logs everything, including timeouts
    app.add_middleware(RequestLoggingMiddleware)

    logger.info(
        f"Middleware configured: "
        f"timeout={settings.request_timeout_seconds}s, "
        f"cors_origins={len(cors_origins)} origins"
    )
