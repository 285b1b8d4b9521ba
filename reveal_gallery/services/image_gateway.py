"""
Image access gateway.
Resolves requested filenames to files in the image directory and reports each access
to the webhook notifier.
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import Request

from reveal_gallery.config import Settings
from reveal_gallery.schemas import AccessEvent
from reveal_gallery.services.access_notifier import AccessEventNotifier
from reveal_gallery.utils.paths import safe_join
from reveal_gallery.utils.request_info import get_client_ip, get_user_agent

logger = logging.getLogger(__name__)


class ImageAccessGateway:
    """
    Args:
        settings: Application settings (IMAGE_DIR, TRUST_PROXY are read here)
        notifier: Destination for access events
    """

    def __init__(self, settings: Settings, notifier: AccessEventNotifier):
        self.image_dir = Path(settings.IMAGE_DIR)
        self.trust_proxy = settings.TRUST_PROXY
        self.notifier = notifier

    def build_event(self, request: Request, filename: str) -> AccessEvent:
        return AccessEvent(
            filename=filename,
            ip=get_client_ip(request, trust_proxy=self.trust_proxy),
            user_agent=get_user_agent(request),
        )

    def record_access(self, request: Request, filename: str) -> AccessEvent:
        """Build the access event and hand it to the notifier without waiting."""
        event = self.build_event(request, filename)
        logger.info(f"Image requested: {filename} from IP: {event.ip}")
        self.notifier.submit(event)
        return event

    def resolve(self, filename: str) -> Optional[Path]:
        """
        Find the file for `filename`.

        Returns:
            Path: Existing regular file inside the image directory, or None
        """
        path = safe_join(self.image_dir, filename)
        if path is None or not path.is_file():
            return None
        return path
