"""Main entry point for the Warble application."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from warble.api.v1 import posts_router, users_router
from warble.core.exceptions import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    WarbleError,
)
from warble.core.logging_config import configure_logging
from warble.core.settings import settings
from warble.db.session import create_tables
from warble.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Social network backend: users, posts, follows and timelines",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(users_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")


def error_response(
    request: Request,
    status_code: int,
    message: str,
    details: list[str] | None = None,
) -> JSONResponse:
    """Build the JSON body shared by every error the API returns."""
    body = ErrorResponse(
        timestamp=datetime.now(UTC),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        path=request.url.path,
        details=details or [],
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


_DOMAIN_STATUS: dict[type[WarbleError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidRequestError: status.HTTP_400_BAD_REQUEST,
}


@app.exception_handler(WarbleError)
async def handle_domain_error(request: Request, exc: WarbleError) -> JSONResponse:
    status_code = next(
        (code for kind, code in _DOMAIN_STATUS.items() if isinstance(exc, kind)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc.message)
    return error_response(request, status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    ]
    logger.warning("%s %s -> 400: %s", request.method, request.url.path, "; ".join(details))
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Validation failed", details)


@app.exception_handler(OperationalError)
async def handle_storage_error(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error("Storage unavailable on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Storage is temporarily unavailable",
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": f"{settings.app_name} API",
        "version": settings.app_version,
        "description": "Social network backend: users, posts, follows and timelines",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("warble.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
