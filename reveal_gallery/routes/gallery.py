"""
Gallery routes for catalog retrieval.
Provides endpoints the gallery page uses to load images in batches.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import Optional, Sequence
import logging

from reveal_gallery.catalog import next_batch
from reveal_gallery.config import Settings
from reveal_gallery.schemas import (
    GalleryConfigResponse,
    GalleryImagesPageResponse,
    ImageRecord,
    PaginationMetadata,
)
from reveal_gallery.services.gallery_controller import SENTINEL_ROOT_MARGIN
from reveal_gallery.utils.placeholder import placeholder_data_uri

logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


def get_catalog(request: Request) -> Sequence[ImageRecord]:
    return request.app.state.catalog


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/gallery-images", response_model=GalleryImagesPageResponse)
async def get_gallery_images(
    limit: int = 6,
    cursor: Optional[int] = None,
    catalog: Sequence[ImageRecord] = Depends(get_catalog),
):
    """
    Get a batch of catalog images.

    Implements cursor-based pagination over the ordered catalog; the cursor is the
    number of records already delivered.

    Args:
        limit: Number of images to return (default: 6, max: 100)
        cursor: Offset returned as next_cursor by the previous page

    Returns:
        GalleryImagesPageResponse: Batch of images with pagination metadata

    Raises:
        HTTPException: 400 if invalid parameters
    """
    # Validate limit
    if limit < 1 or limit > 100:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Limit must be between 1 and 100"
        )
    if cursor is not None and cursor < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cursor must not be negative"
        )

    start = cursor or 0
    images = list(next_batch(catalog, start, limit))
    delivered = start + len(images)
    has_more = delivered < len(catalog)
    next_cursor = delivered if has_more else None

    logger.info(
        f"Retrieved {len(images)} gallery images "
        f"(cursor: {cursor}, next: {next_cursor}, has_more: {has_more})"
    )

    return GalleryImagesPageResponse(
        images=images,
        pagination=PaginationMetadata(
            next_cursor=next_cursor,
            has_more=has_more,
            total_count=len(catalog)
        )
    )


@router.get("/config", response_model=GalleryConfigResponse)
async def get_gallery_config(settings: Settings = Depends(get_app_settings)):
    """Client-side settings for the gallery page."""
    return GalleryConfigResponse(
        api_base_url=settings.API_BASE_URL,
        batch_size=settings.BATCH_SIZE,
        root_margin=SENTINEL_ROOT_MARGIN,
        load_latency_ms=int(settings.LOAD_LATENCY_SECONDS * 1000),
        placeholder_src=placeholder_data_uri(),
    )
