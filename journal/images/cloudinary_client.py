"""Cloudinary uploads for article and admin images."""

import os
import logging
from typing import Optional

import cloudinary
import cloudinary.uploader

CLOUDINARY_FOLDER = os.environ.get("CLOUDINARY_FOLDER", "uxdesignjournal")
MAX_IMAGE_DIMENSION = 1024

_configured = False


def is_configured() -> bool:
    return bool(
        os.environ.get("CLOUDINARY_CLOUD_NAME")
        and os.environ.get("CLOUDINARY_API_KEY")
        and os.environ.get("CLOUDINARY_API_SECRET")
    )


def _configure() -> None:
    global _configured
    if _configured:
        return
    cloudinary.config(
        cloud_name=os.environ.get("CLOUDINARY_CLOUD_NAME"),
        api_key=os.environ.get("CLOUDINARY_API_KEY"),
        api_secret=os.environ.get("CLOUDINARY_API_SECRET"),
        secure=True,
    )
    _configured = True


def upload_image(source, public_id: str) -> Optional[str]:
    """
    Upload an image to Cloudinary.

    Args:
        source: Remote URL, file path, or file-like object with image bytes
        public_id: Cloudinary public id

    Returns:
        The secure URL, or None if Cloudinary is not configured or the upload failed
    """
    if not is_configured():
        logging.error("CRITICAL: Cloudinary not configured. Cannot save images permanently.")
        return None

    _configure()
    try:
        result = cloudinary.uploader.upload(
            source,
            public_id=public_id,
            folder=CLOUDINARY_FOLDER,
            transformation=[{"width": MAX_IMAGE_DIMENSION, "height": MAX_IMAGE_DIMENSION, "crop": "limit"}],
        )
    except Exception as e:
        logging.error(f"Cloudinary upload failed: {str(e)}", exc_info=True)
        return None

    return result.get("secure_url") or None
