"""
Pydantic schemas for catalog records, access events and API responses.
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, timezone
from typing import Optional, List, Literal


class ImageRecord(BaseModel):
    """
    A single catalog entry.

    `src` is either an absolute URL or a gateway-relative path such as
    `/view-image/dolphin.png`.
    """
    id: int
    src: str
    alt: str = ""
    title: str = ""
    description: str = ""

    model_config = ConfigDict(frozen=True)


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class AccessEvent(BaseModel):
    """
    Access record sent to the webhook for every image request.
    Serialized with `userAgent` as the key (use `model_dump(by_alias=True)`).
    """
    type: Literal["Image Access"] = "Image Access"
    filename: str
    ip: str
    user_agent: str = Field(default="", alias="userAgent")
    timestamp: str = Field(default_factory=_utc_timestamp)

    model_config = ConfigDict(populate_by_name=True)


class PaginationMetadata(BaseModel):
    """
    Pagination metadata for cursor-based pagination.
    """
    next_cursor: Optional[int] = None
    has_more: bool
    total_count: int


class GalleryImagesPageResponse(BaseModel):
    """
    Paginated response for catalog images.
    """
    images: List[ImageRecord]
    pagination: PaginationMetadata


class GalleryConfigResponse(BaseModel):
    """Settings the gallery page needs at startup."""
    api_base_url: str
    batch_size: int
    root_margin: str
    load_latency_ms: int
    placeholder_src: str
