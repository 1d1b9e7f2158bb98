"""FastAPI application entry point with global error handling."""
from __future__ import annotations

import os
import sys

# Add src/ to Python path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import get_settings
from core.exceptions import BetterSideError
from core.logging_config import get_context_logger, get_logger, setup_logging
from api.routes import (
    admin,
    ads,
    auth,
    cp_panel,
    cp_projects,
    developer_panel,
    health,
    leads,
    projects,
    users,
)

LOGGER = get_logger(__name__)
SETTINGS = get_settings()

_HTTP_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Sets up logging and makes sure the schema exists. The app still starts
    when the database is unreachable so health checks can report it.
    """
    json_logging = SETTINGS.log_format == "json"
    setup_logging(level=SETTINGS.log_level, json_format=json_logging)

    LOGGER.info(
        "API application starting",
        extra={"extra_data": {
            "environment": SETTINGS.environment,
            "admin_enabled": SETTINGS.is_admin_enabled(),
            "allowed_origins": SETTINGS.get_allowed_origins(),
        }}
    )

    try:
        from core.db import init_db, validate_database
        db_status = validate_database()

        if db_status["status"] == "error":
            LOGGER.error(
                "Database validation failed - app will start without database",
                extra={"extra_data": {"errors": db_status["errors"]}}
            )
        elif db_status["status"] == "missing_tables":
            LOGGER.warning(
                "Missing database tables detected - creating",
                extra={"extra_data": {"missing": db_status["tables_missing"]}}
            )
            init_db()
        else:
            LOGGER.info("Database validation passed")
    except Exception as e:
        LOGGER.error(f"Database validation error during startup: {e} - app will start anyway")

    yield
    LOGGER.info("API application shutting down")


def _field_errors(exc: RequestValidationError) -> Dict[str, str]:
    """Map pydantic error locations to the offending (camelCase) field name."""
    fields: Dict[str, str] = {}
    for error in exc.errors():
        loc: List[Any] = [part for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        name = ".".join(str(part) for part in loc) or "body"
        fields.setdefault(name, error.get("msg", "Invalid value"))
    return fields


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance with:
        - CORS middleware (credentialed, explicit origins)
        - Global exception handlers
        - All API routes
    """
    application = FastAPI(
        title="BetterSide Platform API",
        description="Channel partner and developer panels for real-estate marketing",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    application.add_middleware(
        CORSMiddleware,
        allow_origins=SETTINGS.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Global Exception Handlers
    # -------------------------------------------------------------------------

    @application.exception_handler(BetterSideError)
    async def app_error_handler(request: Request, exc: BetterSideError) -> JSONResponse:
        """Render application errors as ``{error, code}``."""
        user_id = getattr(request.state, "user_id", None)
        logger = get_context_logger(__name__, path=request.url.path, user_id=user_id)
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error", "code": "SERVER_ERROR"},
            )
        logger.info(f"{exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @application.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = _field_errors(exc)
        summary = "; ".join(f"{name}: {msg}" for name, msg in fields.items())
        LOGGER.warning(f"Validation error: {summary}", extra={"extra_data": {"path": request.url.path}})
        return JSONResponse(
            status_code=400,
            content={
                "error": f"Validation failed: {summary}",
                "code": "VALIDATION_ERROR",
                "fields": fields,
            },
        )

    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        code = _HTTP_CODES.get(exc.status_code, "SERVER_ERROR" if exc.status_code >= 500 else "ERROR")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "code": code},
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception) -> JSONResponse:
        """Last resort: log the traceback, never echo internals."""
        LOGGER.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": "SERVER_ERROR"},
        )

    # -------------------------------------------------------------------------
    # Include Routers
    # -------------------------------------------------------------------------

    @application.get("/health")
    async def root_health_check() -> Dict[str, str]:
        """Lightweight health check - no dependencies."""
        return {"status": "ok", "service": "betterside"}

    application.include_router(health.router, prefix="/api/health", tags=["Health"])
    application.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    application.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
    application.include_router(leads.router, prefix="/api/leads", tags=["Leads"])
    application.include_router(ads.router, prefix="/api/ads", tags=["Ads"])
    application.include_router(cp_projects.router, prefix="/api/cp-projects", tags=["CP Projects"])
    application.include_router(users.router, prefix="/api/users", tags=["Users"])

    # Role panels
    application.include_router(cp_panel.router, prefix="/api/cp", tags=["CP Panel"])
    application.include_router(developer_panel.router, prefix="/api/developer", tags=["Developer Panel"])

    # Operator feed (bearer token)
    application.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

    return application


# Create the application instance
app = create_app()

LOGGER.info("API application initialized")
