"""Validation and normalisation of images uploaded from the admin console."""

import io
import os
import re
import uuid

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from journal.shared.errors import validation_error

# Allowed image MIME types
ALLOWED_IMAGE_TYPES = {
    'image/jpeg': '.jpg',
    'image/jpg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp',
    'image/gif': '.gif'
}

# Max file size: 10MB per image
MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024

# Same bound Cloudinary applies to generated images
MAX_DIMENSIONS = (1024, 1024)


def sanitize_filename(filename: str) -> str:
    """Reduce an uploaded filename to a safe stem usable in a public id."""
    if not filename:
        return str(uuid.uuid4())[:8]

    # Remove path components
    filename = os.path.basename(filename.replace('\\', '/'))
    name, _ = os.path.splitext(filename)

    # Only alphanumeric, dots, hyphens, underscores
    name = re.sub(r'[^a-zA-Z0-9._-]', '_', name)[:100]

    if not name or set(name) <= {'_', '.'}:
        name = str(uuid.uuid4())[:8]
    return name


def validate_image_file(file: UploadFile) -> None:
    """Validate image file type and size."""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise validation_error(f"Invalid file type. Allowed types: {', '.join(ALLOWED_IMAGE_TYPES.keys())}")

    file.file.seek(0, os.SEEK_END)
    file_size = file.file.tell()
    file.file.seek(0)

    if file_size > MAX_IMAGE_SIZE_BYTES:
        size_mb = file_size / (1024 * 1024)
        max_mb = MAX_IMAGE_SIZE_BYTES / (1024 * 1024)
        raise validation_error(f"Image too large ({size_mb:.1f}MB). Maximum size: {max_mb}MB")

    if file_size == 0:
        raise validation_error("Image file is empty")


def process_image(file: UploadFile) -> bytes:
    """
    Validate an uploaded image and re-encode it as an RGB JPEG no larger than MAX_DIMENSIONS.

    Returns:
        JPEG bytes ready for upload
    """
    validate_image_file(file)

    file.file.seek(0)
    image_data = file.file.read()

    try:
        image = Image.open(io.BytesIO(image_data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise validation_error(f"Invalid image file: {str(e)}")

    if image.mode in ('RGBA', 'LA', 'P'):
        # White background for transparency
        if image.mode == 'P':
            image = image.convert('RGBA')
        rgb_image = Image.new('RGB', image.size, (255, 255, 255))
        rgb_image.paste(image, mask=image.split()[-1])
        image = rgb_image
    elif image.mode != 'RGB':
        image = image.convert('RGB')

    if image.width > MAX_DIMENSIONS[0] or image.height > MAX_DIMENSIONS[1]:
        image.thumbnail(MAX_DIMENSIONS, Image.Resampling.LANCZOS)

    output = io.BytesIO()
    image.save(output, 'JPEG', quality=85, optimize=True)
    return output.getvalue()
