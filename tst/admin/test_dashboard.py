import io
from datetime import datetime, timedelta

from PIL import Image

from journal.articles.database import Article
from journal.images import cloudinary_client
from journal.subscribers.database import Subscriber

DURABLE_URL = "https://res.cloudinary.com/demo/image/upload/uxdesignjournal/uxdj/upload.jpg"


def png_bytes(size=(2000, 1200), mode="RGBA") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, (10, 20, 30, 128) if mode == "RGBA" else (10, 20, 30)).save(buffer, "PNG")
    return buffer.getvalue()


def test_stats(client, db, admin_headers):
    now = datetime.utcnow()
    db.add_all([
        Article(slug="fresh", title="Fresh", created_at=now - timedelta(days=1)),
        Article(slug="older", title="Older", created_at=now - timedelta(days=10)),
        Subscriber(email="a@example.com", source="form", status="active", created_at=now - timedelta(days=2)),
        Subscriber(email="b@example.com", source="form", status="unsubscribed", created_at=now - timedelta(days=3)),
    ])
    db.commit()

    body = client.get("/api/admin/stats", headers=admin_headers).json()

    assert body["subscribers"] == 1
    assert body["articles"] == 2
    assert body["categories"] == 5
    assert body["admins"] == 1
    assert body["trends"]["articles"] == {"current": 1, "previous": 1}
    assert body["trends"]["subscribers"] == {"current": 2, "previous": 0}

    events = body["recentEvents"]
    assert [e["type"] for e in events] == ["article", "subscriber", "subscriber", "article"]
    assert events[0]["slug"] == "fresh"
    assert "email" not in events[0]


def test_upload_normalises_image_and_returns_url(client, admin_headers, monkeypatch):
    uploads = []

    def fake_upload(source, public_id):
        uploads.append((source.read(), public_id))
        return DURABLE_URL

    monkeypatch.setattr(cloudinary_client, "upload_image", fake_upload)

    response = client.post(
        "/api/admin/uploads",
        files={"file": ("../../Hero Shot.png", png_bytes(), "image/png")},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"url": DURABLE_URL}
    data, public_id = uploads[0]
    assert public_id.startswith("uxdj/Hero_Shot-")
    image = Image.open(io.BytesIO(data))
    assert image.format == "JPEG"
    assert image.size == (1024, 614)


def test_upload_rejects_non_images(client, admin_headers):
    response = client.post(
        "/api/admin/uploads",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_upload_rejects_corrupt_image(client, admin_headers):
    response = client.post(
        "/api/admin/uploads",
        files={"file": ("broken.png", b"not really a png", "image/png")},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("Invalid image file")


def test_upload_failure_is_upstream_error(client, admin_headers):
    # Cloudinary credentials are absent in tests, so the upload itself fails
    response = client.post(
        "/api/admin/uploads",
        files={"file": ("ok.png", png_bytes((10, 10), "RGB"), "image/png")},
        headers=admin_headers,
    )
    assert response.status_code == 502
    assert response.json()["error"] == "upstream_failure"
