"""
Main FastAPI application entry point.

This module creates the FastAPI application instance and configures
all routes, middleware, error handlers and application lifecycle events.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lfg.api.routes import auth, groups
from lfg.config.settings import settings
from lfg.core.database import create_tables
from lfg.core.observability import setup_logging
from lfg.services.base import INTERNAL_ERROR_MESSAGE, ServiceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Configures logging and makes sure the database tables exist before
    the first request is served.
    """
    setup_logging(settings.log_level, settings.log_format)
    create_tables()
    logger.info(f"{settings.project_name} API ready")

    yield

    logger.info(f"{settings.project_name} API shutting down")


# Create FastAPI application instance
app = FastAPI(
    title=settings.project_name,
    description="""
    ## LFG Backend

    Users sign up, sign in, create groups and join, leave or kick members.

    - Groups are **open** until their owner closes them; closing is permanent
    - A group with a password is **private** and needs it to be joined
    - `max_size` counts the owner, so a group holds at most `max_size - 1` members

    Every `/groups` endpoint requires `Authorization: Bearer <token>`.
    """,
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map service layer errors to their HTTP status and error body."""
    if exc.status_code >= 500:
        logger.error(f"Request failed: {exc.message}", extra={"path": request.url.path})
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def _field_name(loc) -> str:
    """Name the offending field; JSON decode errors carry a character offset instead."""
    if loc and isinstance(loc[-1], str) and loc[-1] != "body":
        return loc[-1]
    return "body"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and parameters as field errors."""
    logger.warning(
        "Failed to bind request",
        extra={"path": request.url.path, "error": str(exc.errors())},
    )
    field_errors = [{"name": _field_name(e["loc"]), "error": e["msg"]} for e in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "The request body contains errors", "field_errors": field_errors},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled errors. Details are only exposed in debug mode."""
    logger.exception(f"Unhandled exception: {exc}", extra={"path": request.url.path})
    content = {"message": INTERNAL_ERROR_MESSAGE}
    if settings.debug:
        content["detail"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API information."""
    return {
        "message": f"Welcome to {settings.project_name}",
        "version": "1.0.0",
        "documentation": "/docs",
    }


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    """Liveness check."""
    return {"status": "healthy"}


# Include API routers
app.include_router(auth.router, prefix=settings.api_prefix, tags=["Authentication"])
app.include_router(groups.router, prefix=f"{settings.api_prefix}/groups", tags=["Groups"])


# Development server entry point
if __name__ == "__main__":
    uvicorn.run(
        "lfg.main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
