"""
Gallery controller: incremental loading of the catalog and the per-image reveal gate.

The browser page mirrors this state machine over /api/gallery-images; this module is
the reference implementation of its rules and is what the tests exercise.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Sequence

from pydantic import BaseModel, Field

from reveal_gallery.catalog import next_batch, resolve_src
from reveal_gallery.config import Settings
from reveal_gallery.schemas import ImageRecord

logger = logging.getLogger(__name__)

BATCH_SIZE = 6
LOAD_LATENCY_SECONDS = 1.5
SKELETON_CARDS = 3
SENTINEL_ROOT_MARGIN = "200px"


class GalleryPage(BaseModel):
    """Displayed images plus loading flags. Reset on page reload."""
    displayed_images: List[ImageRecord] = Field(default_factory=list)
    is_loading: bool = False
    has_more: bool = True


class ImageView(BaseModel):
    """Per-image view state."""
    src: str
    blurred: bool = True
    loaded: bool = False
    failed: bool = False


class GalleryController:
    """
    Drives the gallery for one viewer session.

    Args:
        catalog: Ordered catalog records
        batch_size: Records appended per load
        latency: Simulated fetch delay in seconds
        api_base_url: Prefix for gateway-relative image paths
        placeholder_src: Image source substituted when an image fails to load
        sleep: Awaitable delay function (injected by tests)
    """

    def __init__(
        self,
        catalog: Sequence[ImageRecord],
        batch_size: int = BATCH_SIZE,
        latency: float = LOAD_LATENCY_SECONDS,
        api_base_url: str = "",
        placeholder_src: str = "",
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self._catalog = tuple(catalog)
        self.batch_size = batch_size
        self.latency = latency
        self.api_base_url = api_base_url
        self.placeholder_src = placeholder_src
        self._sleep = sleep
        self._mounted = False
        self._views: Dict[int, ImageView] = {}
        self.page = GalleryPage(has_more=len(self._catalog) > 0)

    @classmethod
    def from_settings(
        cls,
        catalog: Sequence[ImageRecord],
        settings: Settings,
        placeholder_src: str = "",
        **kwargs,
    ) -> "GalleryController":
        """Controller configured the same way as the gallery page (see /api/config)."""
        return cls(
            catalog,
            batch_size=settings.BATCH_SIZE,
            latency=settings.LOAD_LATENCY_SECONDS,
            api_base_url=settings.API_BASE_URL,
            placeholder_src=placeholder_src,
            **kwargs,
        )

    @property
    def catalog_size(self) -> int:
        return len(self._catalog)

    @property
    def pending_batches(self) -> int:
        return 1 if self.page.is_loading else 0

    @property
    def placeholder_count(self) -> int:
        """Skeleton cards shown while a batch is in flight."""
        return SKELETON_CARDS if self.page.is_loading else 0

    @property
    def end_reached(self) -> bool:
        return not self.page.is_loading and not self.page.has_more

    async def load_more(self) -> bool:
        """
        Append the next batch after the simulated latency.

        No-op while a load is in flight or once the catalog is exhausted.

        Returns:
            bool: True if this call performed a load
        """
        page = self.page
        if page.is_loading or not page.has_more:
            return False

        page.is_loading = True
        try:
            await self._sleep(self.latency)

            start = len(page.displayed_images)
            batch = next_batch(self._catalog, start, self.batch_size)
            if batch:
                page.displayed_images.extend(batch)
                for record in batch:
                    self._views[record.id] = ImageView(src=resolve_src(record, self.api_base_url))

            if len(page.displayed_images) >= len(self._catalog):
                page.has_more = False

            logger.debug(
                f"Loaded {len(batch)} images "
                f"(displayed: {len(page.displayed_images)}/{len(self._catalog)}, has_more: {page.has_more})"
            )
        finally:
            page.is_loading = False

        return True

    async def mount(self) -> bool:
        """Initial load on first mount, without waiting for the sentinel."""
        if self._mounted:
            return False
        self._mounted = True
        if self.page.displayed_images:
            return False
        return await self.load_more()

    async def on_sentinel_visible(self) -> bool:
        """Visibility trigger from the sentinel below the last card."""
        if self.page.is_loading:
            return False
        return await self.load_more()

    def _view(self, image_id: int) -> ImageView:
        try:
            return self._views[image_id]
        except KeyError:
            raise KeyError(f"Image {image_id} is not displayed") from None

    def reveal(self, image_id: int) -> bool:
        """
        Unblur one image. Idempotent; there is no re-blur.

        Returns:
            bool: True if the image was blurred before this call

        Raises:
            KeyError: If the image is not displayed
        """
        view = self._view(image_id)
        if not view.blurred:
            return False
        view.blurred = False
        return True

    def is_blurred(self, image_id: int) -> bool:
        return self._view(image_id).blurred

    def mark_loaded(self, image_id: int) -> None:
        self._view(image_id).loaded = True

    def mark_failed(self, image_id: int) -> None:
        """Swap in the placeholder; it still counts as loaded and stays revealable."""
        view = self._view(image_id)
        logger.info(f"Image {image_id} failed to load from {view.src}, using placeholder")
        view.src = self.placeholder_src
        view.failed = True
        view.loaded = True

    def view(self, image_id: int) -> ImageView:
        return self._view(image_id).model_copy()

    def overlay_visible(self, image_id: int) -> bool:
        """The reveal overlay is shown once the image has loaded and until it is revealed."""
        view = self._view(image_id)
        return view.blurred and view.loaded
