import base64
import io

from fastapi.testclient import TestClient
from PIL import Image

from reveal_gallery.main import create_app


def test_first_page(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        response = client.get("/api/gallery-images", params={"limit": 6})

    assert response.status_code == 200
    data = response.json()
    assert [image["id"] for image in data["images"]] == [1, 2, 3, 4, 5, 6]
    assert data["pagination"] == {"next_cursor": 6, "has_more": True, "total_count": 8}
    assert data["images"][0]["src"] == "/view-image/image-1.png"


def test_paging_until_exhausted(settings, notifier):
    ids = []
    requests = 0
    cursor = None
    with TestClient(create_app(settings, notifier)) as client:
        while True:
            params = {"limit": 6}
            if cursor is not None:
                params["cursor"] = cursor
            data = client.get("/api/gallery-images", params=params).json()
            requests += 1
            ids.extend(image["id"] for image in data["images"])
            if not data["pagination"]["has_more"]:
                break
            cursor = data["pagination"]["next_cursor"]

    assert requests == 2
    assert ids == list(range(1, 9))
    assert data["pagination"]["next_cursor"] is None


def test_cursor_past_end_returns_empty_page(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        data = client.get("/api/gallery-images", params={"cursor": 50}).json()

    assert data["images"] == []
    assert data["pagination"]["has_more"] is False


def test_invalid_limit_rejected(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        too_small = client.get("/api/gallery-images", params={"limit": 0})
        too_large = client.get("/api/gallery-images", params={"limit": 101})
        not_a_number = client.get("/api/gallery-images", params={"limit": "many"})

    assert too_small.status_code == 400
    assert too_small.json()["error"] == "Limit must be between 1 and 100"
    assert too_large.status_code == 400
    assert not_a_number.status_code == 400
    assert not_a_number.json()["error"] == "Validation error"


def test_negative_cursor_rejected(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        response = client.get("/api/gallery-images", params={"cursor": -1})

    assert response.status_code == 400


def test_gallery_config(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        data = client.get("/api/config").json()

    assert data["api_base_url"] == "http://gallery.test"
    assert data["batch_size"] == 6
    assert data["root_margin"] == "200px"
    assert data["load_latency_ms"] == 0

    prefix = "data:image/png;base64,"
    assert data["placeholder_src"].startswith(prefix)
    image = Image.open(io.BytesIO(base64.b64decode(data["placeholder_src"][len(prefix):])))
    assert image.format == "PNG"
    assert image.size == (600, 400)


def test_index_page_served(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        page = client.get("/")
        stylesheet = client.get("/static/gallery.css")

    assert page.status_code == 200
    assert "text/html" in page.headers["content-type"]
    assert "IntersectionObserver" in page.text
    assert stylesheet.status_code == 200


def test_health(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        data = client.get("/health").json()

    assert data["status"] == "healthy"
    assert data["catalog_size"] == 8
    assert data["webhook"] == "configured"


def test_page_rechecks_sentinel_after_each_batch(settings, notifier):
    with TestClient(create_app(settings, notifier)) as client:
        page = client.get("/").text

    load_more = page[page.index("async function loadMore()"):page.index("const observer")]
    finally_block = load_more[load_more.index("finally"):]
    assert "observer.unobserve(sentinel)" in finally_block
    assert "observer.observe(sentinel)" in finally_block
    assert "onerror" not in page
