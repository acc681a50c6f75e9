"""Serves decoded attachments from the local resource store."""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from src.storage.local_resources import (
    ATTACHMENT_URL_PREFIX,
    LocalResourceStore,
    get_resource_store,
)

router = APIRouter(prefix=ATTACHMENT_URL_PREFIX, tags=["attachments"])


@router.get("/{token}", response_model=None)
async def get_attachment(
    token: str,
    resources: LocalResourceStore = Depends(get_resource_store),
) -> Response:
    """Return attachment bytes for inline display, 404 once revoked."""
    resource = resources.get(token)
    if resource is None:
        return JSONResponse(
            {"error": "Attachment not found or already released"},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return Response(
        content=resource.content,
        media_type=resource.content_type,
        headers={"Content-Disposition": "inline", "Cache-Control": "no-store"},
    )
