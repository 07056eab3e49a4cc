"""
Recipe image validation.

Recipe images are stored inline as data URLs (``data:image/png;base64,...``)
on the recipe row. Before saving, the payload is decoded and opened with
Pillow so that only real images in an allowed format are accepted.
"""

import base64
import binascii
import logging
import re
from io import BytesIO

from PIL import Image

from app.config import get_settings
from app.services.errors import InvalidInputError

logger = logging.getLogger(__name__)

# Allowed image formats (PIL format names)
ALLOWED_FORMATS = {"JPEG", "PNG", "GIF", "WEBP"}

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)


class ImageValidationError(InvalidInputError):
    """Raised when a recipe image fails validation."""


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into its MIME type and raw bytes."""
    match = DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        raise ImageValidationError("Image must be a base64 data URL")

    try:
        raw = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise ImageValidationError("Image data is not valid base64")

    return match.group("mime"), raw


def validate_image_data_url(data_url: str) -> str:
    """Validate an inline recipe image and return it unchanged.

    Raises:
        ImageValidationError: If the MIME type, size or content is not acceptable
    """
    mime, raw = decode_data_url(data_url)

    if not mime.startswith("image/"):
        raise ImageValidationError("Please select an image file")

    max_bytes = get_settings().max_image_bytes
    if len(raw) > max_bytes:
        raise ImageValidationError(
            f"Image must be smaller than {max_bytes // (1024 * 1024)}MB"
        )

    try:
        img = Image.open(BytesIO(raw))
        # Detects truncated or fake files
        img.verify()
    except Image.DecompressionBombError:
        raise ImageValidationError("Image is too large when decoded")
    except Exception as e:
        raise ImageValidationError(f"Invalid or corrupted image: {e}")

    if img.format not in ALLOWED_FORMATS:
        raise ImageValidationError(
            f"Invalid image format: {img.format}. "
            f"Allowed formats: {', '.join(sorted(ALLOWED_FORMATS))}"
        )

    logger.debug(f"Accepted {img.format} recipe image ({len(raw)} bytes)")
    return data_url
