"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from acquisitions.core.config import Settings, get_settings
from acquisitions.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from acquisitions.domain.services import StoreFailure
from acquisitions.infrastructure.api.middleware import SecurityHeadersMiddleware
from acquisitions.infrastructure.api.schemas import HealthResponse
from acquisitions.infrastructure.auth import (
    ComparisonFailure,
    HashingFailure,
    InvalidTokenError,
    JWTService,
    SessionCookieManager,
)
from acquisitions.infrastructure.persistence.database import (
    DatabaseManager,
    close_database,
    init_database,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events for the application.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control is yielded to the application during its lifetime.
    """
    settings: Settings = app.state.settings

    configure_logging(settings)

    logger.info(
        "Starting Acquisitions API",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    if settings.uses_default_secret:
        logger.warning("JWT_SECRET is not set; using the development placeholder")

    try:
        await init_database(app.state.db_manager)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down Acquisitions API")
    await close_database(app.state.db_manager)
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    docs_enabled = settings.is_development or settings.debug

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Authentication service for the Acquisitions platform",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.jwt_service = JWTService.from_settings(settings)
    app.state.cookie_manager = SessionCookieManager(settings)
    app.state.db_manager = DatabaseManager(settings)
    app.state.started_at = time.monotonic()

    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register liveness and readiness endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Liveness check. Does not touch the database."""
        return HealthResponse(
            status="OK",
            timestamp=datetime.now(timezone.utc).isoformat(),
            uptime_seconds=time.monotonic() - request.app.state.started_at,
        )

    @app.get("/ready", tags=["health"])
    async def readiness_check(request: Request):
        """Readiness check, including database connectivity."""
        if await request.app.state.db_manager.check_connection():
            return {"status": "ready", "database": "connected"}

        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "disconnected"},
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from acquisitions.infrastructure.api.routes import auth_router

    settings: Settings = app.state.settings

    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])

    @app.get("/", tags=["root"], response_class=PlainTextResponse)
    async def root():
        logger.info("Hello from Acquisitions!")
        return "The Acquisitions API is working!"

    @app.get("/api", tags=["root"])
    async def api_root():
        return {"message": "Acquisitions API is running!"}


def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception",
        path=str(request.url.path),
        method=request.method,
        error=str(exc),
        exc_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if request.app.state.settings.debug else "Something went wrong",
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(InvalidTokenError)
    async def invalid_token_handler(request: Request, exc: InvalidTokenError):
        return JSONResponse(status_code=401, content={"error": "Invalid token"})

    @app.exception_handler(StoreFailure)
    async def store_failure_handler(request: Request, exc: StoreFailure):
        return _internal_error(request, exc)

    @app.exception_handler(HashingFailure)
    async def hashing_failure_handler(request: Request, exc: HashingFailure):
        return _internal_error(request, exc)

    @app.exception_handler(ComparisonFailure)
    async def comparison_failure_handler(request: Request, exc: ComparisonFailure):
        return _internal_error(request, exc)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        return _internal_error(request, exc)


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log each request and attach a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info("Request started", method=request.method, path=str(request.url.path))

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
