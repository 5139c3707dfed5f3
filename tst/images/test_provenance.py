import pytest

from journal.images import cloudinary_client
from journal.images.provenance import (
    ensure_durable,
    fallback_image,
    safe_image_url,
    is_transient_image_url,
    assert_durable,
    TransientImageUrlError,
)

DALLE_URL = "https://oaidalleapiprodscus.blob.core.windows.net/private/img-abc.png?sig=xyz"
DURABLE_URL = "https://res.cloudinary.com/demo/image/upload/uxdesignjournal/uxdj/my-article.jpg"


def test_transient_patterns():
    assert is_transient_image_url(DALLE_URL)
    assert is_transient_image_url("https://account.blob.core.windows.net/x.png")
    assert not is_transient_image_url(DURABLE_URL)
    assert not is_transient_image_url("")
    assert not is_transient_image_url(None)


def test_fallback_is_seeded_by_identifier():
    assert fallback_image("my-article") == "https://picsum.photos/seed/my-article/1024/1024"
    assert fallback_image("a b/c") == "https://picsum.photos/seed/a%20b%2Fc/1024/1024"


def test_failed_upload_of_transient_url_falls_back(monkeypatch):
    monkeypatch.setattr(cloudinary_client, "upload_image", lambda source, public_id: None)

    result = ensure_durable(DALLE_URL, "my-article")

    assert result == fallback_image("my-article")
    assert "my-article" in result
    assert not is_transient_image_url(result)


def test_unconfigured_cloudinary_falls_back():
    # Credentials are removed from the environment for the test session
    assert not cloudinary_client.is_configured()
    assert ensure_durable(DALLE_URL, "slug-x") == fallback_image("slug-x")


def test_successful_upload_returns_durable_url(monkeypatch):
    uploads = []

    def fake_upload(source, public_id):
        uploads.append((source, public_id))
        return DURABLE_URL

    monkeypatch.setattr(cloudinary_client, "upload_image", fake_upload)

    assert ensure_durable(DALLE_URL, "my-article") == DURABLE_URL
    source, public_id = uploads[0]
    assert source == DALLE_URL
    assert public_id.startswith("uxdj/my-article-")


def test_upload_returning_transient_url_falls_back(monkeypatch):
    monkeypatch.setattr(cloudinary_client, "upload_image", lambda source, public_id: DALLE_URL)
    assert ensure_durable(DALLE_URL, "my-article") == fallback_image("my-article")


def test_empty_candidate_falls_back():
    assert ensure_durable("", "empty") == fallback_image("empty")


def test_safe_image_url_revalidates_on_read():
    assert safe_image_url(DALLE_URL, "legacy") == fallback_image("legacy")
    assert safe_image_url("", "legacy") == fallback_image("legacy")
    assert safe_image_url(DURABLE_URL, "legacy") == DURABLE_URL


def test_assert_durable_rejects_transient():
    assert_durable(DURABLE_URL)
    assert_durable("")
    with pytest.raises(TransientImageUrlError):
        assert_durable(DALLE_URL)
