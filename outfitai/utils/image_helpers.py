"""Image processing utilities for the OutfitAI application.

This module provides the low-level image handling used by the HTTP layer and
the AI service. It handles:
- Parsing ``data:<mime>;base64,<payload>`` URIs
- Validation that a payload is an allowed, decodable raster image
- Building ``ImagePayload`` objects from data URIs or raw uploads

Note: nothing here is stored; payloads live for the duration of one request.
"""

from typing import List, Optional, Tuple
from PIL import Image, UnidentifiedImageError
import base64
import binascii
import io
import re

from outfitai.core.config import get_settings
from outfitai.core.exceptions import InvalidImageError
from outfitai.core.logging import get_logger
from outfitai.models.domain.image import ImagePayload
from outfitai.utils.validators import validate_image_format, validate_image_size

logger = get_logger(__name__)

MIME_TYPES = {
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/webp': '.webp'
}

DATA_URI_PATTERN = re.compile(
    r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)'  # mime type
    r'(?:;[\w-]+=[\w.-]+)*'               # optional parameters
    r';base64,(?P<payload>.*)$',
    re.DOTALL
)


def parse_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """Split a base64 data URI into its MIME type and decoded bytes.

    Raises:
        InvalidImageError: If the URI is malformed or the payload is not base64
    """
    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise InvalidImageError(
            "Image must be a data URI of the form 'data:<mimetype>;base64,<encoded_data>'"
        )

    try:
        payload = re.sub(r'\s+', '', match.group('payload'))
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError("Image payload is not valid base64")

    return match.group('mime').lower(), data


def validate_image(
    image_data: bytes,
    max_size: Optional[int] = None,
    allowed_types: Optional[List[str]] = None
) -> str:
    """Validate that ``image_data`` is an allowed raster image.

    The MIME type is taken from the decoded image itself rather than from the
    caller's declaration.

    Returns:
        str: MIME type detected by Pillow

    Raises:
        InvalidImageError: If validation fails
    """
    settings = get_settings()
    max_size = max_size or settings.MAX_UPLOAD_BYTES
    allowed_types = allowed_types or settings.ALLOWED_IMAGE_TYPES

    is_valid, error = validate_image_size(len(image_data), max_size)
    if not is_valid:
        raise InvalidImageError(error)

    try:
        with Image.open(io.BytesIO(image_data)) as img:
            img_format = img.format
            img.verify()
    except Image.DecompressionBombError as e:
        logger.warning("Image rejected as decompression bomb", reason=str(e))
        raise InvalidImageError("Image dimensions are too large")
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning("Image decode failed", reason=str(e))
        raise InvalidImageError("Image could not be decoded")

    mime_type = Image.MIME.get(img_format or '', '')
    is_valid, error = validate_image_format(mime_type, allowed_types)
    if not is_valid:
        raise InvalidImageError(error)

    return mime_type


def load_image_payload(data_uri: str) -> ImagePayload:
    """Parse and validate a data URI into an ``ImagePayload``."""
    declared_mime, data = parse_data_uri(data_uri)
    if not declared_mime.startswith('image/'):
        raise InvalidImageError(f"Not an image MIME type: {declared_mime}")

    mime_type = validate_image(data)
    return ImagePayload(mime_type=mime_type, data=data)


def image_payload_from_bytes(
    data: bytes,
    content_type: Optional[str] = None
) -> ImagePayload:
    """Validate a raw upload into an ``ImagePayload``."""
    if content_type and not content_type.lower().startswith('image/'):
        raise InvalidImageError(f"Not an image MIME type: {content_type}")

    mime_type = validate_image(data)
    return ImagePayload(mime_type=mime_type, data=data)


def extension_for(mime_type: str) -> str:
    """File extension for a MIME type, used when naming multipart uploads."""
    return MIME_TYPES.get(mime_type, '.png')
