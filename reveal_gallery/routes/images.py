"""
Image routes.
Serves image files by name and reports every request as an access event.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, PlainTextResponse
import logging

from reveal_gallery.services.image_gateway import ImageAccessGateway

logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()

NOT_FOUND_MESSAGE = "Image not found."


def get_gateway(request: Request) -> ImageAccessGateway:
    return request.app.state.gateway


@router.get("/view-image/{filename:path}")
async def view_image(
    filename: str,
    request: Request,
    gateway: ImageAccessGateway = Depends(get_gateway),
):
    """
    Serve an image from the image directory.

    The access event is submitted before the lookup so that missing and rejected
    files are reported too; the response never waits for the webhook.
    The filesystem lookup runs in the threadpool.

    Args:
        filename: Requested file name (taken verbatim from the path)

    Returns:
        FileResponse with the image bytes, or 404 plain text
    """
    gateway.record_access(request, filename)

    path = await run_in_threadpool(gateway.resolve, filename)
    if path is None:
        logger.info(f"Image not found: {filename}")
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)

    return FileResponse(path)
