"""
Image provenance: keep expiring upstream image URLs out of the database.

Image generation returns URLs on short-lived blob storage that expire within
hours. Before an image URL is written to an article it has to be re-hosted on
Cloudinary; when that fails the article gets a deterministic placeholder
seeded by its slug instead. Reads re-validate the stored value the same way, so
rows written before this guard existed still render.
"""

import logging
import time
from urllib.parse import quote

from journal.images import cloudinary_client

TRANSIENT_HOST_PATTERNS = (
    "blob.core.windows.net",
    "oaidalleapiprodscus",
)

FALLBACK_IMAGE_TEMPLATE = "https://picsum.photos/seed/{seed}/1024/1024"


class TransientImageUrlError(ValueError):
    """Raised when a transient upstream URL is about to be persisted."""


def is_transient_image_url(url) -> bool:
    if not url:
        return False
    return any(pattern in url for pattern in TRANSIENT_HOST_PATTERNS)


def fallback_image(identifier: str = "placeholder") -> str:
    """Placeholder image seeded by ``identifier``; same identifier, same image."""
    return FALLBACK_IMAGE_TEMPLATE.format(seed=quote(identifier or "placeholder", safe=""))


def safe_image_url(url, identifier: str) -> str:
    """Read-time check: empty or transient URLs are replaced by the fallback."""
    if not url or is_transient_image_url(url):
        return fallback_image(identifier or "placeholder")
    return url


def ensure_durable(candidate_url, identifier: str) -> str:
    """
    Re-host ``candidate_url`` on Cloudinary and return the durable URL.

    Args:
        candidate_url: URL returned by the image generation API
        identifier: Article slug; seeds the fallback and prefixes the public id

    Returns:
        The Cloudinary URL, or fallback_image(identifier) if the upload failed
        or produced a transient URL. Never returns ``candidate_url`` unchanged
        when it is transient.
    """
    if not candidate_url:
        logging.error("Cannot upload image: no URL provided")
        return fallback_image(identifier)

    public_id = f"uxdj/{identifier}-{int(time.time() * 1000)}"
    durable_url = cloudinary_client.upload_image(candidate_url, public_id)

    if not durable_url:
        logging.warning(f"Durable upload failed for {identifier}, using fallback image")
        return fallback_image(identifier)

    if is_transient_image_url(durable_url):
        logging.error(f"Durable upload returned a transient URL for {identifier}: {durable_url}")
        return fallback_image(identifier)

    logging.info(f"Image permanently stored for {identifier}: {durable_url}")
    return durable_url


def assert_durable(url) -> None:
    """Final check run right before an image URL is written to the database."""
    if is_transient_image_url(url):
        logging.error(f"Refusing to store temporary image URL: {url}")
        raise TransientImageUrlError("Cannot store temporary image URLs")
