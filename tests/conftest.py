import json

import httpx
import pytest

from reveal_gallery.config import Settings
from reveal_gallery.services.access_notifier import AccessEventNotifier
from helpers import WEBHOOK_URL, RecordingWebhook, make_png, make_records


@pytest.fixture
def image_dir(tmp_path):
    directory = tmp_path / "images"
    directory.mkdir()
    (directory / "existing.png").write_bytes(make_png())
    return directory


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([r.model_dump() for r in make_records(8)]))
    return path


@pytest.fixture
def settings(image_dir, catalog_file):
    return Settings(
        IMAGE_DIR=str(image_dir),
        CATALOG_PATH=str(catalog_file),
        WEBHOOK_URL=WEBHOOK_URL,
        API_BASE_URL="http://gallery.test",
        LOAD_LATENCY_SECONDS=0,
    )


@pytest.fixture
def webhook():
    return RecordingWebhook()


@pytest.fixture
def notifier(webhook):
    client = httpx.AsyncClient(transport=httpx.MockTransport(webhook))
    return AccessEventNotifier(WEBHOOK_URL, client=client, shutdown_grace=0.5)
