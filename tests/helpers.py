import io
import json

import httpx
from PIL import Image

from reveal_gallery.schemas import ImageRecord

WEBHOOK_URL = "https://hooks.example.test/access"


def make_png(color=(0, 128, 255), size=(8, 8)) -> bytes:
    """Small solid PNG for serving tests."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_records(count):
    return [
        ImageRecord(
            id=i,
            src=f"/view-image/image-{i}.png",
            alt=f"Image {i}",
            title=f"Title {i}",
            description=f"Description {i}",
        )
        for i in range(1, count + 1)
    ]


class RecordingWebhook:
    """httpx transport handler that records every webhook request."""

    def __init__(self, status_code=200):
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code)

    @property
    def payloads(self):
        return [json.loads(r.content) for r in self.requests]
