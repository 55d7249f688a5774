"""
ScoutMe API
===========
Match analysis requests for football clubs and scouts.

Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from scoutme.auth import FirebaseTokenVerifier
from scoutme.config import Settings, configure_logging, get_settings
from scoutme.database import Database
from scoutme.exceptions import ScoutMeError
from scoutme.middleware import setup_middleware
from scoutme.routers import (
    health_router,
    users_router,
    matches_router,
    clubs_router,
    player_profiles_router,
)

logger = logging.getLogger("scoutme")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("ScoutMe API starting up...")
    await app.state.database.check_connection()
    logger.info("Database connection verified")
    yield
    logger.info("ScoutMe API shutting down...")
    await app.state.database.dispose()


# OpenAPI tags metadata for better documentation
tags_metadata = [
    {
        "name": "Health",
        "description": "Health check and status endpoints",
    },
    {
        "name": "Users",
        "description": "Account registration",
    },
    {
        "name": "Matches",
        "description": "Match analysis requests, rosters and status",
    },
    {
        "name": "Clubs",
        "description": "Canonical clubs shared across matches",
    },
    {
        "name": "Player Profiles",
        "description": "Canonical player profiles shared across matches",
    },
]


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        errors.append({"path": ".".join(loc) or "body", "message": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ScoutMeError)
    async def domain_error_handler(request: Request, exc: ScoutMeError) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": _validation_errors(exc)},
        )

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    @app.exception_handler(PoolTimeoutError)
    @app.exception_handler(ConnectionError)
    async def store_unavailable_handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.error(f"Database unavailable on {request.method} {request.url.path}: {exc}")
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Database unavailable", "code": "upstream_unavailable"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Something went wrong", "code": "internal_error"},
        )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    token_verifier: Optional[Any] = None,
) -> FastAPI:
    """
    Build the application.

    The database and token verifier are created here, once per process, and
    kept on ``app.state``; tests pass their own.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="ScoutMe API",
        description="""
## Match analysis requests

Submit a match video together with both clubs and their rosters, then poll
the match for its status and analysis result.

- Clubs and player profiles are shared across matches and created on first use
- Opponent players are only linked to a profile when fully identified
- Status moves through `PENDING`, `PROCESSING`, `COMPLETED` or `FAILED`

### Authentication

Every endpoint except the health checks requires a Firebase ID token:
`Authorization: Bearer <token>`. Register once with `POST /user/register`.
""",
        version=settings.api_version,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        openapi_tags=tags_metadata,
    )

    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)
    app.state.token_verifier = token_verifier or FirebaseTokenVerifier(settings.firebase_project_id)

    setup_middleware(app, settings)
    register_exception_handlers(app)

    @app.middleware("http")
    async def add_timing_header(request: Request, call_next):
        """Add X-Response-Time header to all responses."""
        start_time = datetime.now(timezone.utc)
        response = await call_next(request)
        process_time = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
        response.headers["X-Response-Time"] = f"{process_time:.2f}ms"
        return response

    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(matches_router)
    app.include_router(clubs_router)
    app.include_router(player_profiles_router)

    @app.get("/", response_class=ORJSONResponse)
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "ScoutMe API",
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
            "api": {
                "register": "/user/register",
                "matches": "/match",
                "all_matches": "/match/all-match?page=1&limit=20",
                "clubs": "/clubs",
                "player_profiles": "/player-profiles",
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
