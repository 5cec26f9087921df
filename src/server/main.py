"""FastAPI application entry point.

This module initializes the FastAPI application with middleware,
routers, exception handlers and core endpoints.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.server.api.v1.router import router as v1_router
from src.server.config import settings
from src.server.database.session import check_database_connection, create_tables
from src.server.models.common import HealthResponse
from src.wheel.exceptions import (
    ConflictError,
    ExternalUnavailableError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailed,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Backend API for tracking wheel strategy option trades, positions and cash flows",
    version=settings.version,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Configure CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(v1_router)


def error_response(
    status_code: int,
    message: str,
    details: Optional[Any] = None,
    counts: Optional[dict[str, int]] = None,
) -> JSONResponse:
    """Build the failure envelope."""
    error: dict[str, Any] = {"message": message}
    if details is not None:
        error["details"] = details
    if counts is not None:
        error["counts"] = counts
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "meta": {"timestamp": datetime.utcnow().isoformat()},
        },
    )


@app.on_event("startup")
async def startup_event():
    """Application startup event handler.

    Creates any missing tables and seeds default settings.
    """
    logger.info(f"Starting {settings.app_name} v{settings.version}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Database path: {settings.database_path}")
    create_tables()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.app_name}")


@app.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    tags=["health"],
    summary="Health check endpoint",
    description="Returns service health status including database connectivity",
)
async def health_check() -> HealthResponse:
    """Health check endpoint.

    Example:
        >>> GET /health
        >>> {
        >>>     "status": "healthy",
        >>>     "timestamp": "2026-02-01T10:00:00",
        >>>     "database_connected": true
        >>> }
    """
    connected = check_database_connection()
    return HealthResponse(
        status="healthy" if connected else "degraded",
        timestamp=datetime.utcnow(),
        database_connected=connected,
    )


@app.get(
    "/",
    status_code=status.HTTP_200_OK,
    tags=["root"],
    summary="Root endpoint",
    description="Returns welcome message with API information",
)
async def root():
    """Root endpoint.

    Provides basic API information and links to documentation.
    """
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.version,
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1/info",
    }


# Error handlers
@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message, details=exc.errors)


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_409_CONFLICT, str(exc), counts=exc.counts)


@app.exception_handler(ExternalUnavailableError)
async def external_unavailable_handler(request: Request, exc: ExternalUnavailableError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, "Malformed request", details=details
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors.

    Args:
        request: The request that caused the error
        exc: The exception that was raised

    Returns:
        JSON error response
    """
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        details=str(exc) if settings.debug else None,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
