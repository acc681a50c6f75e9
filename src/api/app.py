"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handlers, and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.attachments import router as attachments_router
from src.api.downloads import CORS_HEADERS
from src.api.downloads import router as downloads_router
from src.api.profile import router as profile_router
from src.storage.errors import StorageConfigurationError, StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Cited Chat API...")
    yield
    # Shutdown
    logger.info("Shutting down Cited Chat API...")


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Convert blob store failures into JSON error bodies."""
    if isinstance(exc, StorageConfigurationError):
        logger.error(f"{request.url.path}: {exc}")
    else:
        logger.warning(f"{request.url.path}: {exc}")
    return JSONResponse(
        {"error": str(exc)},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 with a single error message."""
    errors = exc.errors()
    fields = [".".join(str(part) for part in err.get("loc", ())[1:]) for err in errors]
    if "filename" in fields:
        message = "Filename is required"
    else:
        message = "Invalid request body"
    logger.warning(f"{request.url.path}: {message} ({len(errors)} validation errors)")
    return JSONResponse(
        {"error": message},
        status_code=status.HTTP_400_BAD_REQUEST,
        headers=CORS_HEADERS,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Cited Chat API",
        description=(
            "Backend for a streaming chat front-end. Retrieves PDF documents "
            "cited by the chat assistant from S3, either inline as base64 data "
            "URLs or as short-lived presigned download links."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(StorageError, storage_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)

    application.include_router(downloads_router)
    application.include_router(attachments_router)
    application.include_router(profile_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "cited-chat"}

    return application


app = create_app()
