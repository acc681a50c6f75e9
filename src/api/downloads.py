"""Document download endpoints.

Resolves a citation name to an object in the S3 bucket and returns it
either inline as a base64 data URL or as a short-lived presigned URL.
Storage errors propagate to the handlers registered in ``src.api.app``.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from src.models.schemas import (
    DownloadRedirectResponse,
    DownloadRequest,
    DownloadResponse,
    ErrorResponse,
)
from src.parsing.data_url import encode_data_url
from src.storage.blob_store import BlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["download"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid filename"},
    500: {"model": ErrorResponse, "description": "Storage misconfigured or object unavailable"},
}


def _preflight() -> JSONResponse:
    return JSONResponse({}, headers=CORS_HEADERS)


@router.options("/download", include_in_schema=False)
async def download_options() -> JSONResponse:
    """Answer pre-flight requests for the download endpoint."""
    return _preflight()


@router.post("/download", response_model=DownloadResponse, responses=_ERROR_RESPONSES)
async def download(
    request: DownloadRequest,
    store: BlobStore = Depends(get_blob_store),
) -> DownloadResponse:
    """Return a stored document as a base64 data URL.

    Args:
        request: Body with the citation filename.
        store: Blob store dependency.

    Returns:
        DownloadResponse with data URL, size, and content type.

    Raises:
        400: Missing filename.
        500: Storage misconfigured, object missing or empty.
    """
    logger.info(f"Download requested: {request.filename}")

    stored = await run_in_threadpool(store.read_object, request.filename)
    data_url = encode_data_url(stored.content, stored.content_type)

    logger.info(
        f"Serving {stored.filename} ({stored.size} bytes, {stored.content_type})"
    )

    return DownloadResponse(
        data=data_url,
        size=stored.size,
        content_type=stored.content_type,
        filename=request.filename,
    )


@router.options("/download-redirect", include_in_schema=False)
async def download_redirect_options() -> JSONResponse:
    """Answer pre-flight requests for the redirect endpoint."""
    return _preflight()


@router.post(
    "/download-redirect",
    response_model=DownloadRedirectResponse,
    responses=_ERROR_RESPONSES,
)
async def download_redirect(
    request: DownloadRequest,
    store: BlobStore = Depends(get_blob_store),
) -> DownloadRedirectResponse:
    """Return a presigned URL for a stored document without reading it.

    Args:
        request: Body with the citation filename.
        store: Blob store dependency.

    Returns:
        DownloadRedirectResponse with a freshly signed URL.

    Raises:
        400: Missing filename.
        500: Storage misconfigured or signing failed.
    """
    logger.info(f"Direct download URL requested: {request.filename}")

    url = await run_in_threadpool(store.presigned_url, request.filename)
    return DownloadRedirectResponse(url=url)
